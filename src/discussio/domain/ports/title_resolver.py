"""Port for IMDb ID -> human-readable title resolution."""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from discussio.domain.entities.stremio import ResolvedTitle


@runtime_checkable
class TitleResolverPort(Protocol):
    """Async interface for best-effort title lookups.

    Implementations never raise: on any failure they return the IMDb ID
    itself as the title.
    """

    async def resolve(self, imdb_id: str) -> ResolvedTitle:
        """Resolve *imdb_id* to a title (and release year, when known)."""
        ...

    async def aclose(self) -> None:
        """Stop outstanding lookups (before the HTTP client is closed)."""
        ...
