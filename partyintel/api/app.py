from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, FastAPI, Query, Request
from fastapi.middleware.cors import CORSMiddleware

from partyintel import __version__
from partyintel.api.errors import register_error_handlers
from partyintel.config import ServiceConfig, load_service_env
from partyintel.errors import MissingQuery
from partyintel.lookup.resolver import ResolutionEngine
from partyintel.lookup.schemas import LookupResult
from partyintel.registry.cache import ValidatorCache
from partyintel.stats.aggregator import StatsService
from partyintel.stats.schemas import NetworkStats
from partyintel.upstream.client import CantonNodesClient
from partyintel.utils.logging_config import setup_logging
from partyintel.utils.timestamps import to_iso_utc

router = APIRouter()


@router.get("/healthz")
def healthz(request: Request):
    cache: ValidatorCache = request.app.state.cache
    snap = cache.snapshot
    return {
        "ok": True,
        "ttl_seconds": cache.ttl_seconds,
        "validators_cached": len(snap.records) if snap else 0,
        "snapshot_fetched_at": to_iso_utc(snap.fetched_at) if snap else None,
    }


@router.get("/lookup", response_model=LookupResult, response_model_exclude_none=True)
def lookup(
    request: Request,
    q: Optional[str] = None,
    party_id: Optional[str] = Query(default=None, alias="partyId"),
):
    # `partyId` is the legacy parameter name; `q` wins when both are given.
    query = (q or "").strip() or (party_id or "").strip()
    if not query:
        raise MissingQuery("Party ID or search query is required")
    resolver: ResolutionEngine = request.app.state.resolver
    return resolver.resolve(query)


@router.get("/stats", response_model=NetworkStats, response_model_exclude_none=True)
def stats(request: Request):
    service: StatsService = request.app.state.stats
    return service.compute()


def create_app(
    config: Optional[ServiceConfig] = None,
    *,
    client: Optional[CantonNodesClient] = None,
) -> FastAPI:
    """Build the API with its own client, cache, resolver and stats service."""
    cfg = config or load_service_env()
    setup_logging(cfg.log_level)

    if client is None:
        client = CantonNodesClient(
            cfg.api_url,
            cfg.domain_id,
            timeout_s=cfg.upstream_timeout_s,
            validator_limit=cfg.validator_limit,
        )
    cache = ValidatorCache(
        client.fetch_validator_licenses,
        ttl_seconds=cfg.cache_ttl_s,
        serve_stale_on_error=cfg.serve_stale_on_error,
    )

    app = FastAPI(title="Canton Party Intelligence", version=__version__)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=cfg.cors_origins,
        allow_credentials=False,
        allow_methods=["GET"],
        allow_headers=["*"],
    )
    register_error_handlers(app)
    app.include_router(router)

    app.state.config = cfg
    app.state.client = client
    app.state.cache = cache
    app.state.resolver = ResolutionEngine(cache, client)
    app.state.stats = StatsService(cache)
    return app


app = create_app()
