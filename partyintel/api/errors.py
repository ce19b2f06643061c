"""Exception handlers: every failure leaves the API as a flat `{"error": ...}` body."""

import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from partyintel.errors import MissingQuery, UpstreamUnavailable

logger = logging.getLogger(__name__)

# Client-facing messages per endpoint; upstream detail only goes to the log.
UPSTREAM_MESSAGES = {
    "/stats": "Failed to fetch network stats",
}
DEFAULT_UPSTREAM_MESSAGE = "Failed to lookup party information"


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


async def missing_query_handler(request: Request, exc: MissingQuery) -> JSONResponse:
    return _error(status.HTTP_400_BAD_REQUEST, str(exc) or "Party ID or search query is required")


async def upstream_unavailable_handler(request: Request, exc: UpstreamUnavailable) -> JSONResponse:
    logger.error(f"Upstream unavailable on {request.method} {request.url.path}: {exc}")
    message = UPSTREAM_MESSAGES.get(request.url.path, DEFAULT_UPSTREAM_MESSAGE)
    return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, message)


async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error(f"Unhandled exception on {request.method} {request.url.path}", exc_info=exc)
    return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error")


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(MissingQuery, missing_query_handler)
    app.add_exception_handler(UpstreamUnavailable, upstream_unavailable_handler)
    app.add_exception_handler(Exception, general_exception_handler)
