"""CachingQueryBuilder - read-through response caching."""

from __future__ import annotations

import json
import logging
from typing import TYPE_CHECKING, Any

from ..config import QueryPilotConfig
from ..response import PagedResponse
from .base import QueryBuilderDecorator

if TYPE_CHECKING:
    from collections.abc import Callable

    from ..ports.builder import IQueryBuilder
    from ..ports.cache import ICacheStore
    from ..request import QueryRequest

logger = logging.getLogger("querypilot.caching")


def _dump(value: Any) -> str:
    return json.dumps(value, sort_keys=True, separators=(",", ":"), default=str)


def generate_cache_key(
    request: QueryRequest, config: QueryPilotConfig | None = None
) -> str:
    """
    Derive a deterministic key from the request.

    Format: ``model:page:N:limit:N[:search:S][:fields:F,G][:mode:M][:filters:JSON]
    [:projection:JSON][:cursor:C][:cursor_field:F]:sort:FIELD:ORDER``.
    Optional parts appear only when they differ from the defaults.
    Filter JSON is written with sorted keys, so two requests differing only
    in filter order share a key.
    """
    config = config or QueryPilotConfig()
    raw = request.to_dict()
    filters = {
        name: raw[name]
        for name in ("filters", "relation_filters", "or_filters", "not_filters")
        if name in raw
    }
    if list(filters) == ["filters"]:
        filters = filters["filters"]
    parts = [
        request.model or "unknown",
        f"page:{request.page or config.default_page}",
        f"limit:{request.limit or config.default_limit}",
        f"search:{request.search}" if request.search else None,
        f"fields:{','.join(request.search_fields)}" if request.search_fields else None,
        f"mode:{request.search_mode}" if request.search_mode != "contains" else None,
        f"filters:{_dump(filters)}" if filters else None,
        (
            f"projection:{_dump(request.projection)}"
            if request.projection is not None
            else None
        ),
        f"cursor:{_dump(request.cursor)}" if request.cursor is not None else None,
        f"cursor_field:{request.cursor_field}" if request.cursor_field else None,
        f"sort:{request.sort_by or config.default_sort_field}"
        f":{request.sort_order or config.default_sort_order}",
    ]
    return ":".join(part for part in parts if part)


class CachingQueryBuilder(QueryBuilderDecorator):
    """
    Read-through cache in front of an :class:`IQueryBuilder`.

    Pattern:
    - cached_query(request, key): check store -> delegate on miss -> store result
    - query(request): cached only when a ``key_builder`` is configured

    Store failures are logged and treated as misses; the inner builder's
    errors propagate and nothing is stored for them.
    """

    def __init__(
        self,
        inner: IQueryBuilder,
        store: ICacheStore,
        *,
        ttl: int = 300,
        key_builder: Callable[[QueryRequest], str] | None = None,
    ) -> None:
        super().__init__(inner)
        self._store = store
        self._ttl = ttl
        self._key_builder = key_builder

    @property
    def store(self) -> ICacheStore:
        return self._store

    async def query(
        self, request: QueryRequest, *, max_limit: int | None = None
    ) -> PagedResponse:
        if self._key_builder is None:
            return await self._inner.query(request, max_limit=max_limit)
        return await self.cached_query(
            request, key=self._key_builder(request), max_limit=max_limit
        )

    async def cached_query(
        self,
        request: QueryRequest,
        key: str | None = None,
        ttl: int | None = None,
        enabled: bool = True,
        *,
        max_limit: int | None = None,
    ) -> PagedResponse:
        """Serve from the store when a live entry exists, else execute and store."""
        if not enabled or not key:
            return await self._inner.query(request, max_limit=max_limit)

        try:
            cached = await self._store.get(key, cls=PagedResponse)
            if cached is not None:
                logger.debug("Cache hit for key %s", key)
                return cached  # type: ignore[no-any-return]
        except Exception as e:  # noqa: BLE001
            logger.warning("Cache get failed for key %s: %s", key, e)

        logger.debug("Cache miss for key %s", key)
        result = await self._inner.query(request, max_limit=max_limit)

        try:
            ttl = ttl if ttl is not None else self._ttl
            await self._store.set(key, result, ttl=ttl)
        except Exception as e:  # noqa: BLE001
            logger.warning("Cache set failed for key %s: %s", key, e)

        return result

    async def invalidate(self, key: str) -> None:
        try:
            await self._store.delete(key)
        except Exception as e:  # noqa: BLE001
            logger.warning("Cache invalidate failed for key %s: %s", key, e)
