"""Title Cache Port - process-lifetime mapping from IMDb ID to title."""

from __future__ import annotations

from typing import Protocol


class TitleCachePort(Protocol):
    """Port for the in-process title cache.

    Implementations:
      - InMemoryTitleCache (dict, optional LRU bound)

    Entries are monotonic: once a key holds a title, ``put`` never
    replaces it and nothing clears it for the lifetime of the process.
    """

    def get(self, key: str) -> str | None:
        """Return the cached title. None = not cached."""
        ...

    def put(self, key: str, title: str) -> None:
        """Store *title* under *key* unless the key is already populated."""
        ...
