"""QueryBuilderDecorator - delegate every call to an inner builder."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import Mapping

    from ..ports.builder import IQueryBuilder
    from ..request import QueryRequest
    from ..response import CursorResponse, PagedResponse


class QueryBuilderDecorator:
    """
    Base for builders that wrap another :class:`IQueryBuilder`.

    Subclasses override the calls they change; everything else is passed
    through to ``inner``, so decorators stack in any order.
    """

    def __init__(self, inner: IQueryBuilder) -> None:
        self._inner = inner

    @property
    def inner(self) -> IQueryBuilder:
        return self._inner

    async def query(
        self, request: QueryRequest, *, max_limit: int | None = None
    ) -> PagedResponse:
        return await self._inner.query(request, max_limit=max_limit)

    async def cursor_query(self, request: QueryRequest) -> CursorResponse:
        return await self._inner.cursor_query(request)

    async def count(self, request: QueryRequest) -> int:
        return await self._inner.count(request)

    async def aggregate(
        self, request: QueryRequest, aggregations: Mapping[str, Any]
    ) -> dict[str, Any]:
        return await self._inner.aggregate(request, aggregations)
