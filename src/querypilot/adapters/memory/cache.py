"""InMemoryCacheStore — process-local cache with lazy expiry."""

from __future__ import annotations

import logging
import time
from collections.abc import Mapping
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from ...ports.cache import ICacheStore

if TYPE_CHECKING:
    from collections.abc import Callable

logger = logging.getLogger("querypilot.caching")

DEFAULT_TTL = 300


@dataclass
class CacheEntry:
    value: Any
    expiry: float


class InMemoryCacheStore(ICacheStore):
    """
    Dict-backed :class:`ICacheStore`.

    Expired entries are dropped when they are read, not by a sweeper.
    ``clock`` returns seconds and is injectable for tests.  With
    ``max_entries`` set, writing a new key into a full store evicts the
    oldest entry first.
    """

    def __init__(
        self,
        clock: Callable[[], float] = time.monotonic,
        max_entries: int | None = None,
        default_ttl: int = DEFAULT_TTL,
    ) -> None:
        self._clock = clock
        self._max_entries = max_entries
        self._default_ttl = default_ttl
        self._entries: dict[str, CacheEntry] = {}

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    async def get(self, key: str, cls: type[Any] | None = None) -> Any | None:
        entry = self._entries.get(key)
        if entry is None:
            return None
        if self._clock() > entry.expiry:
            del self._entries[key]
            return None
        value = entry.value
        if cls is not None and isinstance(value, Mapping) and hasattr(
            cls, "model_validate"
        ):
            return cls.model_validate(value)
        return value

    async def set(self, key: str, value: Any, ttl: int | None = None) -> None:
        seconds = ttl if ttl is not None else self._default_ttl
        if (
            self._max_entries is not None
            and key not in self._entries
            and len(self._entries) >= self._max_entries
        ):
            oldest = next(iter(self._entries))
            del self._entries[oldest]
            logger.debug("Evicted cache entry %s", oldest)
        # Re-insert so insertion order tracks write age.
        self._entries.pop(key, None)
        self._entries[key] = CacheEntry(value=value, expiry=self._clock() + seconds)

    async def delete(self, key: str) -> None:
        self._entries.pop(key, None)

    async def clear(self) -> None:
        self._entries.clear()
