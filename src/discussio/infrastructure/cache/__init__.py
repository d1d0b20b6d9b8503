"""Cache Infrastructure - Backend-Implementations."""

from .memory_cache import InMemoryTitleCache

__all__ = ["InMemoryTitleCache"]
