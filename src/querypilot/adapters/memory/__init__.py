"""In-memory adapters for tests and local use."""

from __future__ import annotations

from .cache import CacheEntry, InMemoryCacheStore
from .executor import InMemoryExecutor, evaluate, resolve_path, sort_rows

__all__ = [
    "CacheEntry",
    "InMemoryCacheStore",
    "InMemoryExecutor",
    "evaluate",
    "resolve_path",
    "sort_rows",
]
