"""Shared constants for IMDb page lookups."""

from __future__ import annotations

# Browser-like client identification; IMDb blocks obvious bot agents.
DEFAULT_USER_AGENT = "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36"

DEFAULT_TITLE_BASE_URL = "https://www.imdb.com/title"
DEFAULT_FETCH_TIMEOUT = 5.0
