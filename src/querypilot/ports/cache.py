"""ICacheStore - Protocol for response caches."""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class ICacheStore(Protocol):
    """
    Abstract interface for the store behind the caching decorator.
    Entries expire ``ttl`` seconds after they are written.
    """

    async def get(self, key: str, cls: type[Any] | None = None) -> Any | None:
        """
        Retrieve a value by key. Returns None if missing or expired.
        If cls is provided and is a Pydantic model, validation is performed.
        """
        ...

    async def set(self, key: str, value: Any, ttl: int | None = None) -> None:
        """Store a value with optional TTL (in seconds)."""
        ...

    async def delete(self, key: str) -> None:
        """Delete a value by key."""
        ...

    async def clear(self) -> None:
        """Drop every entry."""
        ...
