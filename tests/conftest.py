"""Shared test fixtures for Discussio test suite."""

from __future__ import annotations

from unittest.mock import AsyncMock

import pytest

from discussio.domain.entities.stremio import ResolvedTitle, StremioStreamRequest
from discussio.infrastructure.cache import InMemoryTitleCache
from discussio.infrastructure.config.schema import StremioConfig

# ---------------------------------------------------------------------------
# Sample IMDb pages
# ---------------------------------------------------------------------------

GOT_PAGE = """<!DOCTYPE html>
<html><head><meta charset="utf-8">
<title>Game of Thrones - IMDb</title>
</head><body><h1>Game of Thrones</h1></body></html>
"""

SHAWSHANK_PAGE = """<!DOCTYPE html>
<html><head>
<title>The Shawshank Redemption (1994) - IMDb</title>
</head><body><span>(1994)</span></body></html>
"""

UNTITLED_PAGE = "<html><head><title>IMDb</title></head><body></body></html>"


_CONFIG_ENV_VARS = (
    "LOG_LEVEL",
    "PUBLISH_TO_CENTRAL",
    "DISCUSSIO_ENVIRONMENT",
    "DISCUSSIO_LOG_LEVEL",
    "DISCUSSIO_LOG_FORMAT",
    "DISCUSSIO_PUBLISH_TO_CENTRAL",
    "DISCUSSIO_SEARCH_URL",
)


@pytest.fixture(autouse=True)
def _clean_config_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep the developer's shell environment out of config assertions."""
    for name in _CONFIG_ENV_VARS:
        monkeypatch.delenv(name, raising=False)


# ---------------------------------------------------------------------------
# Domain entity fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def series_request() -> StremioStreamRequest:
    """Game of Thrones S01E01."""
    return StremioStreamRequest(
        imdb_id="tt0944947",
        content_type="series",
        season="1",
        episode="1",
    )


@pytest.fixture()
def movie_request() -> StremioStreamRequest:
    return StremioStreamRequest(imdb_id="tt0111161", content_type="movie")


# ---------------------------------------------------------------------------
# Infrastructure fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def title_cache() -> InMemoryTitleCache:
    """Unbounded in-memory title cache."""
    return InMemoryTitleCache()


@pytest.fixture()
def stremio_config() -> StremioConfig:
    return StremioConfig()


# ---------------------------------------------------------------------------
# Mock port fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def mock_resolver() -> AsyncMock:
    """Mock TitleResolverPort returning a fixed title."""
    resolver = AsyncMock()
    resolver.resolve = AsyncMock(return_value=ResolvedTitle(title="Game of Thrones"))
    return resolver


@pytest.fixture()
def got_page() -> str:
    return GOT_PAGE


@pytest.fixture()
def shawshank_page() -> str:
    return SHAWSHANK_PAGE


@pytest.fixture()
def untitled_page() -> str:
    return UNTITLED_PAGE
