"""Soft-delete filtering on top of any query builder."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from .base import QueryBuilderDecorator

if TYPE_CHECKING:
    from collections.abc import Mapping

    from ..ports.builder import IQueryBuilder
    from ..request import QueryRequest
    from ..response import CursorResponse, PagedResponse


def build_soft_delete_filter(
    include_trashed: bool = False,
    trashed_only: bool = False,
    deleted_at_field: str = "deletedAt",
) -> dict[str, Any]:
    """
    Filter selecting live rows, trashed rows or both.

    ``include_trashed`` wins over ``trashed_only``.
    """
    if include_trashed:
        return {}
    if trashed_only:
        return {deleted_at_field: {"not": None}}
    return {deleted_at_field: None}


class SoftDeleteQueryBuilder(QueryBuilderDecorator):
    """Merges the soft-delete filter into every request (the filter wins)."""

    def __init__(
        self,
        inner: IQueryBuilder,
        *,
        include_trashed: bool = False,
        trashed_only: bool = False,
        deleted_at_field: str = "deletedAt",
    ) -> None:
        super().__init__(inner)
        self._filter = build_soft_delete_filter(
            include_trashed, trashed_only, deleted_at_field
        )

    def scoped(self, request: QueryRequest) -> QueryRequest:
        if not self._filter:
            return request
        return request.with_filters(self._filter)

    async def query(
        self, request: QueryRequest, *, max_limit: int | None = None
    ) -> PagedResponse:
        return await self._inner.query(self.scoped(request), max_limit=max_limit)

    async def cursor_query(self, request: QueryRequest) -> CursorResponse:
        return await self._inner.cursor_query(self.scoped(request))

    async def count(self, request: QueryRequest) -> int:
        return await self._inner.count(self.scoped(request))

    async def aggregate(
        self, request: QueryRequest, aggregations: Mapping[str, Any]
    ) -> dict[str, Any]:
        return await self._inner.aggregate(self.scoped(request), aggregations)
