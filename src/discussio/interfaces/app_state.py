"""Application state container for FastAPI dependency injection."""

from __future__ import annotations

from typing import TYPE_CHECKING

import httpx
from starlette.datastructures import State

from discussio.infrastructure.config import AppConfig

if TYPE_CHECKING:
    import asyncio

    from discussio.application.use_cases.stremio_stream import (
        DiscussionStreamUseCase,
    )
    from discussio.domain.ports import TitleCachePort, TitleResolverPort


class AppState(State):
    """FastAPI application state with all DI resources.

    Lifecycle managed by composition.py::lifespan().
    """

    # Configuration
    config: AppConfig

    # Infrastructure
    http_client: httpx.AsyncClient
    title_cache: TitleCachePort

    # Domain Ports
    title_resolver: TitleResolverPort

    # Application Services
    stremio_stream_uc: DiscussionStreamUseCase

    # One-shot registry publish (only when publish.enabled)
    _publish_task: asyncio.Task | None
