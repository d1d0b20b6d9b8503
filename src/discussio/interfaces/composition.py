"""Composition root: dependency injection via FastAPI lifespan."""

from __future__ import annotations

import asyncio
from contextlib import asynccontextmanager, suppress
from typing import AsyncIterator, cast

import httpx
import structlog
from fastapi import FastAPI

from discussio.application.use_cases.stremio_stream import DiscussionStreamUseCase
from discussio.infrastructure.cache import InMemoryTitleCache
from discussio.infrastructure.config.schema import AppConfig, PublishConfig
from discussio.infrastructure.imdb import ImdbTitleResolver
from discussio.infrastructure.stremio.publisher import (
    CentralPublishError,
    publish_to_central,
)
from discussio.infrastructure.stremio.query_builder import (
    build_search_query,
    build_search_url,
)
from discussio.interfaces.app_state import AppState

log = structlog.get_logger(__name__)


async def _publish_manifest(
    http_client: httpx.AsyncClient, publish: PublishConfig
) -> None:
    """Register the manifest with the central registry; never raises."""
    try:
        await publish_to_central(
            http_client,
            publish.manifest_url,
            central_url=publish.central_url,
        )
    except CentralPublishError:
        log.error(
            "central_publish_failed",
            manifest_url=publish.manifest_url,
            exc_info=True,
        )
    except Exception:
        log.error(
            "central_publish_unexpected_error",
            manifest_url=publish.manifest_url,
            exc_info=True,
        )


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Lifespan Hook: Initialize and cleanup all resources (DI Composition Root).

    Order matters:
        1. Title cache (required by the resolver)
        2. HTTP Client (required by resolver and publisher)
        3. Title resolver
        4. Stream use case
        5. Registry publish (optional, background)
    """
    state = cast(AppState, app.state)
    config: AppConfig = state.config

    # 1) Title cache (process lifetime, never cleared)
    state.title_cache = InMemoryTitleCache(max_entries=config.cache.max_entries)
    log.info("title_cache_initialized", max_entries=config.cache.max_entries)

    # 2) HTTP client (no retries: a failed lookup falls back to the IMDb ID)
    state.http_client = httpx.AsyncClient(
        timeout=httpx.Timeout(config.http_timeout_seconds),
        headers={"User-Agent": config.http_user_agent},
        follow_redirects=True,
    )
    log.info("http_client_initialized", timeout=config.http_timeout_seconds)

    # 3) Title resolver
    state.title_resolver = ImdbTitleResolver(
        http_client=state.http_client,
        cache=state.title_cache,
        base_url=config.imdb.base_url,
        user_agent=config.http_user_agent,
        timeout_seconds=config.imdb.fetch_timeout_seconds,
    )
    log.info(
        "title_resolver_initialized",
        base_url=config.imdb.base_url,
        fetch_timeout_seconds=config.imdb.fetch_timeout_seconds,
    )

    # 4) Stremio stream use case
    state.stremio_stream_uc = DiscussionStreamUseCase(
        resolver=state.title_resolver,
        config=config.stremio,
        query_fn=build_search_query,
        url_fn=build_search_url,
    )

    # 5) Central registry publish (after startup, failures are non-fatal)
    state._publish_task = None
    if config.publish.enabled:
        state._publish_task = asyncio.create_task(
            _publish_manifest(state.http_client, config.publish)
        )
        log.info("central_publish_scheduled", manifest_url=config.publish.manifest_url)

    log.info("app_startup_complete")

    try:
        yield
    finally:
        if state._publish_task is not None and not state._publish_task.done():
            state._publish_task.cancel()
            with suppress(asyncio.CancelledError):
                await state._publish_task
            log.info("central_publish_cancelled")

        await state.title_resolver.aclose()

        await state.http_client.aclose()
        log.info("http_client_closed")

        log.info("app_shutdown_complete", cached_titles=len(state.title_cache))
