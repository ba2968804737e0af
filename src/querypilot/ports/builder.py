"""IQueryBuilder - the call surface shared by the builder and its decorators."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Mapping

    from ..request import QueryRequest
    from ..response import CursorResponse, PagedResponse


@runtime_checkable
class IQueryBuilder(Protocol):
    """Execute one compiled request and shape the result."""

    async def query(
        self, request: QueryRequest, *, max_limit: int | None = None
    ) -> PagedResponse:
        """Offset-paged list query."""
        ...

    async def cursor_query(self, request: QueryRequest) -> CursorResponse:
        """Cursor-paged list query."""
        ...

    async def count(self, request: QueryRequest) -> int:
        """Count matching rows; pagination and ordering are ignored."""
        ...

    async def aggregate(
        self, request: QueryRequest, aggregations: Mapping[str, Any]
    ) -> dict[str, Any]:
        """Aggregate matching rows; the executor's structure is returned as-is."""
        ...
