"""Search-engine query construction for discussion links."""

from __future__ import annotations

from urllib.parse import quote

from discussio.domain.entities.stremio import StremioContentType

DEFAULT_SEARCH_URL = "https://www.google.com/search"

# Characters left unescaped by JavaScript's encodeURIComponent.
_URI_COMPONENT_SAFE = "-_.!~*'()"

_MOVIE_SUFFIX = (
    'movie discussion reddit OR letterboxd OR "movie discussion" '
    'OR "film discussion"'
)


def build_search_phrase(
    content_type: StremioContentType,
    title: str,
    *,
    year: str | None = None,
    season: int | str | None = None,
    episode: int | str | None = None,
) -> str:
    """Build the human-readable search phrase.

    Series: ``"{title} Season {season} Episode {episode} discussion"``.
    Movies: ``"{title} ({year}) movie discussion reddit OR ..."``, the year
    part only when known.
    """
    if content_type == "series":
        return f"{title} Season {season} Episode {episode} discussion"
    year_suffix = f" ({year})" if year else ""
    return f"{title}{year_suffix} {_MOVIE_SUFFIX}"


def build_search_query(
    content_type: StremioContentType,
    title: str,
    *,
    year: str | None = None,
    season: int | str | None = None,
    episode: int | str | None = None,
) -> str:
    """Build the percent-encoded search query for a URL query parameter."""
    phrase = build_search_phrase(
        content_type, title, year=year, season=season, episode=episode
    )
    return quote(phrase, safe=_URI_COMPONENT_SAFE)


def build_search_url(query: str, *, search_url: str = DEFAULT_SEARCH_URL) -> str:
    """Attach an already encoded *query* to the search endpoint."""
    return f"{search_url}?q={query}"
