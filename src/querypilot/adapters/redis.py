"""Redis implementation of the response cache store."""

from __future__ import annotations

import json
import logging
from typing import TYPE_CHECKING, Any

from ..ports.cache import ICacheStore

if TYPE_CHECKING:
    from redis.asyncio import Redis

logger = logging.getLogger("querypilot.caching")


def _encode(value: Any) -> str:
    dump = getattr(value, "model_dump_json", None)
    return dump() if dump is not None else json.dumps(value, default=str)


def _decode(raw: bytes | str, cls: type[Any] | None) -> Any:
    if cls is not None and hasattr(cls, "model_validate_json"):
        return cls.model_validate_json(raw)
    return json.loads(raw)


class RedisCacheStore(ICacheStore):
    """
    Redis implementation of ICacheStore.

    Values are stored as JSON; Pydantic models use ``model_dump_json`` and
    are rebuilt with ``model_validate_json`` when ``cls`` is given.  Every
    key is written under ``prefix`` so ``clear()`` only touches this store.
    Redis failures are logged and reported as misses.
    """

    def __init__(self, redis_client: Redis[bytes], prefix: str = "querypilot:") -> None:
        self._redis = redis_client
        self._prefix = prefix

    def _key(self, key: str) -> str:
        return f"{self._prefix}{key}"

    async def get(self, key: str, cls: type[Any] | None = None) -> Any | None:
        try:
            raw = await self._redis.get(self._key(key))
            return _decode(raw, cls) if raw else None
        except Exception as e:  # noqa: BLE001
            logger.warning("Redis get failed for key %s: %s", key, e)
            return None

    async def set(self, key: str, value: Any, ttl: int | None = None) -> None:
        name = self._key(key)
        try:
            payload = _encode(value)
            if ttl:
                await self._redis.setex(name, ttl, payload)
            else:
                await self._redis.set(name, payload)
        except Exception as e:  # noqa: BLE001
            logger.warning("Redis set failed for key %s: %s", key, e)

    async def delete(self, key: str) -> None:
        try:
            await self._redis.delete(self._key(key))
        except Exception as e:  # noqa: BLE001
            logger.warning("Redis delete failed for key %s: %s", key, e)

    async def clear(self) -> None:
        """Delete every key under the prefix (uses SCAN)."""
        try:
            cursor: int = 0
            while True:
                cursor, keys = await self._redis.scan(cursor, match=f"{self._prefix}*")
                if keys:
                    await self._redis.delete(*keys)
                if cursor == 0:
                    break
        except Exception as e:  # noqa: BLE001
            logger.warning("Redis clear failed for prefix %s: %s", self._prefix, e)
