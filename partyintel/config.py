from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional

from partyintel.utils.env import _env_bool, _env_float, _env_int, _env_list, _env_str


DEFAULT_API_URL = "https://api.cantonnodes.com"
# Global synchronizer of Canton MainNet.
DEFAULT_DOMAIN_ID = "global-domain::1220b1431ef217342db44d516bb9befde802be7d8899637d290895fa58880f19accc"
LOG_LEVELS = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG")


@dataclass(frozen=True)
class ServiceConfig:
    api_url: str
    domain_id: str
    cache_ttl_s: int
    upstream_timeout_s: float
    validator_limit: Optional[int]
    serve_stale_on_error: bool
    cors_origins: List[str]
    log_level: str


def _die(msg: str) -> None:
    raise SystemExit(f"[partyintel] {msg}")


def load_service_env() -> ServiceConfig:
    """
    Load service configuration from env/.env with strict validation.

    All PARTYINTEL_* parsing lives here; the rest of the code receives a
    ServiceConfig.
    """
    api_url = (_env_str("PARTYINTEL_API_URL", DEFAULT_API_URL) or DEFAULT_API_URL).rstrip("/")
    if not api_url.startswith("http"):
        _die(f"PARTYINTEL_API_URL must be http(s). Got: {api_url!r}")

    domain_id = _env_str("PARTYINTEL_DOMAIN_ID", DEFAULT_DOMAIN_ID) or DEFAULT_DOMAIN_ID
    if "::" not in domain_id:
        _die(f"PARTYINTEL_DOMAIN_ID must look like '<name>::<fingerprint>'. Got: {domain_id!r}")

    try:
        cache_ttl_s = _env_int("PARTYINTEL_CACHE_TTL_S", 300)
        timeout_s = _env_float("PARTYINTEL_UPSTREAM_TIMEOUT_S", 10.0)
        limit = _env_int("PARTYINTEL_VALIDATOR_LIMIT", 0)
    except ValueError as exc:
        _die(f"Invalid numeric setting: {exc}")

    cache_ttl_s = max(1, cache_ttl_s)
    timeout_s = max(0.5, min(60.0, timeout_s))
    if limit < 0:
        _die(f"PARTYINTEL_VALIDATOR_LIMIT must be >= 0. Got: {limit}")

    cors_origins = _env_list("PARTYINTEL_CORS_ORIGINS", "*") or ["*"]
    log_level = (_env_str("PARTYINTEL_LOG_LEVEL", "INFO") or "INFO").upper()
    if log_level not in LOG_LEVELS:
        _die(f"Invalid PARTYINTEL_LOG_LEVEL={log_level!r} (expected one of {', '.join(LOG_LEVELS)}).")

    return ServiceConfig(
        api_url=api_url,
        domain_id=domain_id,
        cache_ttl_s=int(cache_ttl_s),
        upstream_timeout_s=float(timeout_s),
        validator_limit=int(limit) or None,
        serve_stale_on_error=_env_bool("PARTYINTEL_SERVE_STALE", False),
        cors_origins=cors_origins,
        log_level=log_level,
    )
