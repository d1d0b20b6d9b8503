"""Hardcoded default configuration values."""

from __future__ import annotations

from typing import Any

DEFAULT_CONFIG: dict[str, Any] = {
    "app_name": "discussio",
    "environment": "dev",
    "http": {
        "timeout_seconds": 10.0,
        "user_agent": "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36",
    },
    "logging": {
        "level": "INFO",
        "format": None,  # Derived from environment in schema.py
    },
    "imdb": {
        "base_url": "https://www.imdb.com/title",
        "fetch_timeout_seconds": 5.0,
    },
    "stremio": {
        "handler_timeout_seconds": 8.0,
        "search_url": "https://www.google.com/search",
    },
    "cache": {
        "max_entries": 0,
    },
    "publish": {
        "enabled": False,
        "manifest_url": "https://discussio.deno.dev/manifest.json",
        "central_url": "https://api.strem.io/api/addonPublish",
    },
}
