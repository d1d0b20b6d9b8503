"""Stremio stream use case: IMDb ID -> title -> discussion search link.

Received -> Validating -> Resolving -> Building -> Responding.
Timeouts and unexpected errors both end in an empty stream list.
"""

from __future__ import annotations

import asyncio
import json
import re
import time
from collections.abc import Callable
from dataclasses import asdict
from typing import Protocol, cast

import structlog

from discussio.domain.entities.stremio import (
    SUPPORTED_CONTENT_TYPES,
    DiscussionStream,
    StremioContentType,
    StremioStreamRequest,
)
from discussio.domain.ports.title_resolver import TitleResolverPort

# ---------------------------------------------------------------------------
# Protocols: define what this use case needs from its dependencies.
# Infrastructure components satisfy these via structural subtyping.
# ---------------------------------------------------------------------------


class _StremioConfig(Protocol):
    """Configuration values consumed by DiscussionStreamUseCase."""

    handler_timeout_seconds: float
    search_url: str


# Type aliases for injected pure functions.
_QueryFn = Callable[..., str]
_UrlFn = Callable[..., str]

log = structlog.get_logger(__name__)

# Series: "tt0944947:1:1"; movies: "tt0111161" (anything after the digits
# is ignored).
_SERIES_ID_RE = re.compile(r"tt(\d+):(\d+):(\d+)")
_MOVIE_ID_RE = re.compile(r"tt(\d+)")

_STREAM_LABELS: dict[str, str] = {
    "series": "Search Episode Discussions",
    "movie": "Search Movie Discussions",
}


def parse_stream_id(content_type: str, raw_id: str) -> StremioStreamRequest | None:
    """Parse a Stremio stream ID for *content_type*.

    Returns None (and logs why) for unsupported content types and for IDs
    that do not have the shape expected for the content type.
    """
    if content_type not in SUPPORTED_CONTENT_TYPES:
        log.debug("stremio_unsupported_type", content_type=content_type)
        return None

    ct = cast(StremioContentType, content_type)

    if ct == "series":
        m = _SERIES_ID_RE.match(raw_id)
        if m:
            return StremioStreamRequest(
                imdb_id=f"tt{m.group(1)}",
                content_type=ct,
                season=m.group(2),
                episode=m.group(3),
            )
    else:
        m = _MOVIE_ID_RE.match(raw_id)
        if m:
            return StremioStreamRequest(imdb_id=f"tt{m.group(1)}", content_type=ct)

    log.warning("stremio_invalid_id", content_type=content_type, id=raw_id)
    return None


class DiscussionStreamUseCase:
    """Build the single "search discussions" stream for a movie or episode.

    The whole pipeline runs under ``handler_timeout_seconds``. The use case
    never raises: every failure is logged and mapped to ``[]``.
    """

    def __init__(
        self,
        *,
        resolver: TitleResolverPort,
        config: _StremioConfig,
        query_fn: _QueryFn,
        url_fn: _UrlFn,
    ) -> None:
        self._resolver = resolver
        self._config = config
        self._query_fn = query_fn
        self._url_fn = url_fn

    async def execute(self, content_type: str, raw_id: str) -> list[DiscussionStream]:
        """Return zero or one discussion stream for the requested item."""
        start = time.perf_counter()
        try:
            request = parse_stream_id(content_type, raw_id)
            if request is None:
                return []

            streams = await asyncio.wait_for(
                self._build_streams(request),
                timeout=self._config.handler_timeout_seconds,
            )
        except asyncio.TimeoutError:
            log.warning(
                "stremio_handler_timeout",
                content_type=content_type,
                id=raw_id,
                timeout_seconds=self._config.handler_timeout_seconds,
            )
            return []
        except Exception:
            log.error(
                "stremio_handler_failed",
                request=json.dumps({"type": content_type, "id": raw_id}),
                exc_info=True,
            )
            return []

        log.info(
            "stremio_stream_response",
            **asdict(request),
            streams_returned=len(streams),
            duration_ms=round((time.perf_counter() - start) * 1000.0, 2),
        )
        return streams

    async def _build_streams(
        self, request: StremioStreamRequest
    ) -> list[DiscussionStream]:
        resolved = await self._resolver.resolve(request.imdb_id)

        query = self._query_fn(
            request.content_type,
            resolved.title,
            year=resolved.year,
            season=request.season,
            episode=request.episode,
        )
        url = self._url_fn(query, search_url=self._config.search_url)

        return [
            DiscussionStream(
                title=_STREAM_LABELS[request.content_type],
                external_url=url,
            )
        ]
