"""IMDb title page resolver: async httpx implementation with caching."""

from __future__ import annotations

import asyncio

import httpx
import structlog

from discussio.domain.entities.stremio import ResolvedTitle
from discussio.domain.ports.title_cache import TitleCachePort
from discussio.infrastructure.imdb.constants import (
    DEFAULT_FETCH_TIMEOUT,
    DEFAULT_TITLE_BASE_URL,
    DEFAULT_USER_AGENT,
)
from discussio.infrastructure.imdb.title_page import parse_title_page

log = structlog.get_logger(__name__)


class ImdbTitleResolver:
    """Resolve IMDb IDs to titles by scraping the public title page.

    Implements ``TitleResolverPort`` from domain.ports.title_resolver.

    - Cache hits short-circuit the fetch (title only, year unknown).
    - Each fetch runs under a hard deadline; the request is cancelled
      when it expires.
    - Any failure falls back to the IMDb ID as title. Nothing is raised.
    - Concurrent lookups of the same uncached ID share one fetch.
    """

    def __init__(
        self,
        *,
        http_client: httpx.AsyncClient,
        cache: TitleCachePort,
        base_url: str = DEFAULT_TITLE_BASE_URL,
        user_agent: str = DEFAULT_USER_AGENT,
        timeout_seconds: float = DEFAULT_FETCH_TIMEOUT,
    ) -> None:
        self._http = http_client
        self._cache = cache
        self._base_url = base_url.rstrip("/")
        self._user_agent = user_agent
        self._timeout = timeout_seconds
        self._inflight: dict[str, asyncio.Task[ResolvedTitle]] = {}

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    async def _fetch_page(self, imdb_id: str) -> str:
        url = f"{self._base_url}/{imdb_id}/"
        resp = await self._http.get(url, headers={"User-Agent": self._user_agent})
        resp.raise_for_status()
        return resp.text

    async def _fetch_and_cache(self, imdb_id: str) -> ResolvedTitle:
        try:
            page = await asyncio.wait_for(
                self._fetch_page(imdb_id), timeout=self._timeout
            )
            resolved = parse_title_page(page, fallback=imdb_id)
        except (asyncio.TimeoutError, httpx.TimeoutException):
            log.warning(
                "imdb_fetch_timeout",
                imdb_id=imdb_id,
                timeout_seconds=self._timeout,
            )
            return ResolvedTitle(title=imdb_id)
        except httpx.HTTPStatusError as exc:
            log.error(
                "imdb_fetch_http_error",
                imdb_id=imdb_id,
                status_code=exc.response.status_code,
                exc_info=True,
            )
            return ResolvedTitle(title=imdb_id)
        except Exception:
            log.error("imdb_fetch_failed", imdb_id=imdb_id, exc_info=True)
            return ResolvedTitle(title=imdb_id)

        self._cache.put(imdb_id, resolved.title)
        log.info(
            "imdb_title_resolved",
            imdb_id=imdb_id,
            title=resolved.title,
            year=resolved.year,
        )
        return resolved

    def _forget(self, imdb_id: str, task: asyncio.Task[ResolvedTitle]) -> None:
        if self._inflight.get(imdb_id) is task:
            del self._inflight[imdb_id]

    # ------------------------------------------------------------------
    # Public API (TitleResolverPort)
    # ------------------------------------------------------------------

    async def resolve(self, imdb_id: str) -> ResolvedTitle:
        """Resolve *imdb_id* to a title, never raising on lookup failure."""
        cached = self._cache.get(imdb_id)
        if cached is not None:
            return ResolvedTitle(title=cached)

        task = self._inflight.get(imdb_id)
        if task is None:
            task = asyncio.create_task(self._fetch_and_cache(imdb_id))
            self._inflight[imdb_id] = task
            task.add_done_callback(lambda t: self._forget(imdb_id, t))
        else:
            log.debug("imdb_fetch_joined", imdb_id=imdb_id)

        # A cancelled caller must not cancel the fetch other callers wait on.
        return await asyncio.shield(task)

    async def aclose(self) -> None:
        """Cancel in-flight fetches; call before closing the HTTP client."""
        tasks = [t for t in self._inflight.values() if not t.done()]
        for task in tasks:
            task.cancel()
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)
            log.info("imdb_inflight_cancelled", count=len(tasks))
        self._inflight.clear()
