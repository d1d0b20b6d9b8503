"""Tests for ImdbTitleResolver (IMDb title page scraping + cache)."""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable

import httpx
import pytest
from structlog.testing import capture_logs

from discussio.domain.entities.stremio import ResolvedTitle
from discussio.domain.ports.title_resolver import TitleResolverPort
from discussio.infrastructure.cache import InMemoryTitleCache
from discussio.infrastructure.imdb import ImdbTitleResolver
from discussio.infrastructure.imdb.constants import DEFAULT_USER_AGENT

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

_Handler = Callable[[httpx.Request], "httpx.Response | Awaitable[httpx.Response]"]


class _CountingHandler:
    """Transport handler that records every request it serves."""

    def __init__(self, handler: _Handler) -> None:
        self._handler = handler
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request):
        self.requests.append(request)
        return self._handler(request)

    @property
    def calls(self) -> int:
        return len(self.requests)


def _make_resolver(
    handler: _Handler,
    *,
    timeout_seconds: float = 5.0,
) -> tuple[ImdbTitleResolver, InMemoryTitleCache, _CountingHandler]:
    counting = _CountingHandler(handler)
    http = httpx.AsyncClient(transport=httpx.MockTransport(counting))
    cache = InMemoryTitleCache()
    resolver = ImdbTitleResolver(
        http_client=http,
        cache=cache,
        timeout_seconds=timeout_seconds,
    )
    return resolver, cache, counting


def _page(text: str, status_code: int = 200) -> _Handler:
    return lambda request: httpx.Response(status_code, text=text)


def _hang(seconds: float = 10.0) -> _Handler:
    async def _handler(request: httpx.Request) -> httpx.Response:
        await asyncio.sleep(seconds)
        return httpx.Response(200, text="<title>Too Late - IMDb</title>")

    return _handler


# ---------------------------------------------------------------------------
# Tests
# ---------------------------------------------------------------------------


def test_satisfies_port() -> None:
    resolver, _, _ = _make_resolver(_page(""))
    assert isinstance(resolver, TitleResolverPort)


class TestSuccessfulFetch:
    @pytest.mark.asyncio
    async def test_series_title(self, got_page: str) -> None:
        resolver, _, _ = _make_resolver(_page(got_page))
        resolved = await resolver.resolve("tt0944947")
        assert resolved == ResolvedTitle(title="Game of Thrones", year=None)

    @pytest.mark.asyncio
    async def test_movie_title_and_year(self, shawshank_page: str) -> None:
        resolver, _, _ = _make_resolver(_page(shawshank_page))
        resolved = await resolver.resolve("tt0111161")
        assert resolved.title == "The Shawshank Redemption"
        assert resolved.year == "1994"

    @pytest.mark.asyncio
    async def test_requests_title_page_with_user_agent(self, got_page: str) -> None:
        resolver, _, handler = _make_resolver(_page(got_page))
        await resolver.resolve("tt0944947")

        request = handler.requests[0]
        assert str(request.url) == "https://www.imdb.com/title/tt0944947/"
        assert request.headers["User-Agent"] == DEFAULT_USER_AGENT

    @pytest.mark.asyncio
    async def test_caches_title_not_year(self, shawshank_page: str) -> None:
        resolver, cache, _ = _make_resolver(_page(shawshank_page))
        await resolver.resolve("tt0111161")
        assert cache.get("tt0111161") == "The Shawshank Redemption"

    @pytest.mark.asyncio
    async def test_no_title_match_falls_back_and_caches(
        self, untitled_page: str
    ) -> None:
        resolver, cache, _ = _make_resolver(_page(untitled_page))
        resolved = await resolver.resolve("tt0111161")
        assert resolved == ResolvedTitle(title="tt0111161")
        assert cache.get("tt0111161") == "tt0111161"


class TestCacheHit:
    @pytest.mark.asyncio
    async def test_second_call_skips_fetch(self, shawshank_page: str) -> None:
        resolver, _, handler = _make_resolver(_page(shawshank_page))

        first = await resolver.resolve("tt0111161")
        second = await resolver.resolve("tt0111161")

        assert handler.calls == 1
        assert first.title == second.title == "The Shawshank Redemption"
        # Year is not cached
        assert second.year is None

    @pytest.mark.asyncio
    async def test_prefilled_cache_never_fetches(self) -> None:
        resolver, cache, handler = _make_resolver(_page("", status_code=500))
        cache.put("tt0944947", "Game of Thrones")

        resolved = await resolver.resolve("tt0944947")

        assert resolved.title == "Game of Thrones"
        assert handler.calls == 0


class TestFailureFallback:
    @pytest.mark.asyncio
    async def test_http_error_status(self) -> None:
        resolver, cache, _ = _make_resolver(_page("nope", status_code=503))
        with capture_logs() as logs:
            resolved = await resolver.resolve("tt0944947")

        assert resolved == ResolvedTitle(title="tt0944947")
        assert "tt0944947" not in cache
        assert any(
            e["event"] == "imdb_fetch_http_error" and e["log_level"] == "error"
            for e in logs
        )

    @pytest.mark.asyncio
    async def test_not_found_status(self) -> None:
        resolver, _, _ = _make_resolver(_page("", status_code=404))
        assert (await resolver.resolve("tt9999999")).title == "tt9999999"

    @pytest.mark.asyncio
    async def test_network_error(self) -> None:
        def _handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        resolver, cache, _ = _make_resolver(_handler)
        with capture_logs() as logs:
            resolved = await resolver.resolve("tt0944947")

        assert resolved.title == "tt0944947"
        assert "tt0944947" not in cache
        assert any(
            e["event"] == "imdb_fetch_failed" and e["log_level"] == "error"
            for e in logs
        )

    @pytest.mark.asyncio
    async def test_deadline_expires(self) -> None:
        resolver, cache, _ = _make_resolver(_hang(), timeout_seconds=0.05)
        with capture_logs() as logs:
            resolved = await resolver.resolve("tt0944947")

        assert resolved == ResolvedTitle(title="tt0944947")
        assert "tt0944947" not in cache
        assert any(
            e["event"] == "imdb_fetch_timeout" and e["log_level"] == "warning"
            for e in logs
        )

    @pytest.mark.asyncio
    async def test_transport_timeout_logged_as_timeout(self) -> None:
        def _handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ReadTimeout("slow", request=request)

        resolver, _, _ = _make_resolver(_handler)
        with capture_logs() as logs:
            resolved = await resolver.resolve("tt0944947")

        assert resolved.title == "tt0944947"
        assert [e["event"] for e in logs if e["log_level"] == "warning"] == [
            "imdb_fetch_timeout"
        ]

    @pytest.mark.asyncio
    async def test_failure_is_retried_on_next_call(self, got_page: str) -> None:
        responses = iter(
            [httpx.Response(500, text=""), httpx.Response(200, text=got_page)]
        )
        resolver, _, handler = _make_resolver(lambda request: next(responses))

        assert (await resolver.resolve("tt0944947")).title == "tt0944947"
        assert (await resolver.resolve("tt0944947")).title == "Game of Thrones"
        assert handler.calls == 2


class TestSingleFlight:
    @pytest.mark.asyncio
    async def test_concurrent_lookups_share_one_fetch(self, got_page: str) -> None:
        async def _slow(request: httpx.Request) -> httpx.Response:
            await asyncio.sleep(0.02)
            return httpx.Response(200, text=got_page)

        resolver, _, handler = _make_resolver(_slow)

        results = await asyncio.gather(
            *(resolver.resolve("tt0944947") for _ in range(5))
        )

        assert handler.calls == 1
        assert {r.title for r in results} == {"Game of Thrones"}

    @pytest.mark.asyncio
    async def test_cancelled_waiter_does_not_cancel_shared_fetch(
        self, got_page: str
    ) -> None:
        async def _slow(request: httpx.Request) -> httpx.Response:
            await asyncio.sleep(0.05)
            return httpx.Response(200, text=got_page)

        resolver, cache, handler = _make_resolver(_slow)

        first = asyncio.create_task(resolver.resolve("tt0944947"))
        second = asyncio.create_task(resolver.resolve("tt0944947"))
        await asyncio.sleep(0.01)
        first.cancel()

        resolved = await second

        assert first.cancelled()
        assert resolved.title == "Game of Thrones"
        assert cache.get("tt0944947") == "Game of Thrones"
        assert handler.calls == 1

    @pytest.mark.asyncio
    async def test_different_ids_fetch_independently(self, got_page: str) -> None:
        resolver, _, handler = _make_resolver(_page(got_page))
        await asyncio.gather(resolver.resolve("tt1"), resolver.resolve("tt2"))
        assert handler.calls == 2


class TestAclose:
    @pytest.mark.asyncio
    async def test_cancels_inflight_fetch_without_error_logs(self) -> None:
        resolver, cache, handler = _make_resolver(_hang())

        waiter = asyncio.create_task(resolver.resolve("tt0944947"))
        await asyncio.sleep(0.01)
        assert handler.calls == 1

        with capture_logs() as logs:
            await resolver.aclose()
            await asyncio.gather(waiter, return_exceptions=True)

        assert waiter.cancelled()
        assert "tt0944947" not in cache
        assert not [e for e in logs if e["log_level"] == "error"]
        assert any(e["event"] == "imdb_inflight_cancelled" for e in logs)

    @pytest.mark.asyncio
    async def test_idle_resolver_closes_quietly(self) -> None:
        resolver, _, _ = _make_resolver(_page(""))
        with capture_logs() as logs:
            await resolver.aclose()
        assert logs == []
