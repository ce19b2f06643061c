from __future__ import annotations

import os
from typing import List

from dotenv import load_dotenv

# Load .env once on import so local runs pick up PARTYINTEL_* overrides.
load_dotenv()


def _env_str(name: str, default: str = "") -> str:
    """Read a string env var, stripping whitespace."""
    return (os.getenv(name, default) or "").strip()


def _env_bool(name: str, default: bool = False) -> bool:
    """Read a boolean env var with common truthy values."""
    raw = _env_str(name, str(default)).lower()
    return raw in {"y", "yes", "t", "true", "on", "1"}


def _numeric_raw(name: str, default: object) -> str:
    # Under TESTING=true a non-empty TEST_<NAME> shadows <NAME>.
    if _env_bool("TESTING", False):
        override = _env_str(f"TEST_{name}")
        if override:
            return override
    return _env_str(name, str(default))


def _env_int(name: str, default: int = 0) -> int:
    """Read an int env var; raises ValueError on junk."""
    return int(_numeric_raw(name, default))


def _env_float(name: str, default: float = 0.0) -> float:
    """Read a float env var; raises ValueError on junk."""
    return float(_numeric_raw(name, default))


def _env_list(name: str, default: str = "") -> List[str]:
    """Read a comma-separated env var; `*` is kept as a single wildcard entry."""
    raw = _env_str(name, default)
    if raw == "*":
        return ["*"]
    return [x.strip() for x in raw.split(",") if x.strip()]
