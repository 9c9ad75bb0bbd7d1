# src/ventboard/main.py
"""Main entry point for the ventboard application."""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse

from ventboard import __version__
from ventboard.api.v1 import (
    comments_router,
    feed_router,
    identity_router,
    posts_router,
    users_router,
    votes_router,
)
from ventboard.core.errors import (
    InvariantViolationError,
    RateLimitedError,
    VentboardError,
)
from ventboard.core.settings import settings

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(
    title="Ventboard API",
    description="Votes, karma and ranked feeds for a frustration-sharing forum",
    version=__version__,
)

# Browser clients call the API cross-origin.
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=settings.cors_allow_credentials,
    allow_methods=settings.cors_allow_methods,
    allow_headers=settings.cors_allow_headers,
)

app.add_middleware(GZipMiddleware)

API_PREFIX = "/api/v1"

for router in (
    votes_router,
    posts_router,
    comments_router,
    feed_router,
    users_router,
    identity_router,
):
    app.include_router(router, prefix=API_PREFIX)


@app.exception_handler(VentboardError)
async def handle_domain_error(request: Request, exc: VentboardError) -> JSONResponse:
    """Render domain errors as ``{"detail", "code"}`` with their HTTP status."""
    if isinstance(exc, InvariantViolationError):
        logger.error("Invariant violation on %s %s: %s", request.method, request.url.path, exc.detail)
        return JSONResponse(
            status_code=exc.status_code,
            content={"detail": "Internal server error", "code": exc.code},
        )

    headers = None
    if isinstance(exc, RateLimitedError):
        headers = {"Retry-After": str(exc.retry_after)}
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.detail, "code": exc.code},
        headers=headers,
    )


@app.get("/health")
async def health_check() -> dict[str, str]:
    """Liveness probe."""
    return {"status": "ok"}


@app.get("/")
async def root() -> dict[str, str]:
    """Describe the service and where its docs live."""
    return {
        "name": settings.app_name,
        "version": __version__,
        "docs": "/docs",
        "redoc": "/redoc",
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("ventboard.main:app", host="0.0.0.0", port=8000, reload=settings.debug)
