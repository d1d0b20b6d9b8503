"""FastAPI application factory (create_app)."""

from __future__ import annotations

import time
from collections.abc import Awaitable, Callable

import structlog
from fastapi import FastAPI, Request
from starlette.responses import Response

from discussio.infrastructure.config import AppConfig
from discussio.interfaces.app_state import AppState
from discussio.interfaces.composition import lifespan

log = structlog.get_logger(__name__)


def create_app(config: AppConfig) -> FastAPI:
    """Create FastAPI app: configuration ONLY, NO resource initialization.

    Resources (HTTP client, title cache, resolver) are created in lifespan().
    """
    app = FastAPI(
        title="Discussio",
        description="Stremio addon linking episodes and movies to discussion searches",
        version="1.0.0",
        lifespan=lifespan,
    )

    app.state = AppState()
    app.state.config = config

    from discussio.interfaces.api.stremio import router as stremio_router

    # Stremio resolves resources relative to the manifest URL, so the
    # addon routes live at the root.
    app.include_router(stremio_router)

    @app.get("/healthz")
    async def healthz() -> dict[str, str | int]:
        """Liveness probe, returns 200 as long as the process is running."""
        cache = getattr(app.state, "title_cache", None)
        return {
            "status": "ok",
            "cached_titles": len(cache) if cache is not None else 0,
        }

    @app.middleware("http")
    async def log_requests(
        request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ):
        start = time.perf_counter()
        try:
            response = await call_next(request)
            return response
        finally:
            duration_ms = (time.perf_counter() - start) * 1000.0
            status_code = getattr(locals().get("response", None), "status_code", 500)

            log.info(
                "http_request",
                method=request.method,
                path=request.url.path,
                status_code=status_code,
                duration_ms=round(duration_ms, 2),
                client_host=(request.client.host if request.client else None),
            )

    return app
