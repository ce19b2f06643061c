from __future__ import annotations

import sys
from pathlib import Path

# Allow running as a script without requiring `PYTHONPATH=.`.
REPO_ROOT = Path(__file__).resolve().parents[2]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

import argparse

import uvicorn

from partyintel.config import load_service_env


def main() -> None:
    parser = argparse.ArgumentParser(description="Serve the Canton Party Intelligence API.")
    parser.add_argument("--host", type=str, default="127.0.0.1", help="Interface to bind.")
    parser.add_argument("--port", type=int, default=8000, help="Port to bind.")
    parser.add_argument("--reload", action="store_true", help="Reload on source changes (dev only).")
    args = parser.parse_args()

    cfg = load_service_env()
    uvicorn.run(
        "partyintel.api.app:app",
        host=args.host,
        port=args.port,
        reload=args.reload,
        log_level=cfg.log_level.lower(),
    )


if __name__ == "__main__":
    main()
