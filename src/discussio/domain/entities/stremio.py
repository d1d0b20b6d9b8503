"""Domain entities for the Stremio discussion addon.

Pure value objects, no framework dependencies, no I/O.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

StremioContentType = Literal["movie", "series"]

SUPPORTED_CONTENT_TYPES: frozenset[str] = frozenset({"movie", "series"})

# Stremio opens streams with this behavior as a navigable link,
# not as playable media.
EXTERNAL_OPEN_BEHAVIOR = "Open"


@dataclass(frozen=True)
class StremioStreamRequest:
    """Parsed Stremio stream request.

    Created from URL path: ``tt1234567`` (movie) or
    ``tt1234567:1:5`` (series, season 1, episode 5). Season and episode
    keep the digits exactly as requested, leading zeros included.
    """

    imdb_id: str
    content_type: StremioContentType
    season: str | None = None
    episode: str | None = None


@dataclass(frozen=True)
class ResolvedTitle:
    """Human-readable title for an IMDb ID.

    ``year`` is only known when the title came from a fresh page fetch;
    cached resolutions carry the title alone.
    """

    title: str
    year: str | None = None


@dataclass(frozen=True)
class DiscussionStream:
    """Stremio protocol Stream object pointing at an external search page."""

    title: str  # Label in the Stremio UI, e.g. "Search Episode Discussions"
    external_url: str  # Search-engine URL opened in the browser
    behavior: str = EXTERNAL_OPEN_BEHAVIOR

    def to_stremio(self) -> dict[str, str]:
        """Serialize to the Stremio JSON shape."""
        return {
            "title": self.title,
            "externalUrl": self.external_url,
            "behavior": self.behavior,
        }
