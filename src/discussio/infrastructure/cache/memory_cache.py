"""In-memory title cache - lives for the lifetime of the process."""

from __future__ import annotations

from collections import OrderedDict

import structlog

log = structlog.get_logger(__name__)


class InMemoryTitleCache:
    """Dict-backed implementation of ``TitleCachePort``.

    - No TTL: titles do not change often enough to be worth refetching.
    - ``put`` is monotonic: a populated key keeps its first title.
    - ``max_entries=0`` (default) means unbounded. A positive bound turns
      the cache into an LRU that evicts the least recently read key.

    Only touched from the event loop thread, so no locking.

    Args:
        max_entries: Upper bound on cached titles. 0 = unlimited.
    """

    def __init__(self, max_entries: int = 0) -> None:
        if max_entries < 0:
            raise ValueError("max_entries must be >= 0")
        self._max_entries = max_entries
        self._data: OrderedDict[str, str] = OrderedDict()

    @property
    def max_entries(self) -> int:
        return self._max_entries

    def __len__(self) -> int:
        return len(self._data)

    def __contains__(self, key: object) -> bool:
        return key in self._data

    def get(self, key: str) -> str | None:
        title = self._data.get(key)
        if title is not None and self._max_entries:
            self._data.move_to_end(key)
        log.debug("title_cache_get", key=key, hit=title is not None)
        return title

    def put(self, key: str, title: str) -> None:
        if key in self._data:
            return

        self._data[key] = title
        if self._max_entries and len(self._data) > self._max_entries:
            evicted, _ = self._data.popitem(last=False)
            log.debug("title_cache_evicted", key=evicted, size=len(self._data))
