"""Tenant isolation on top of any query builder."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from ..exceptions import InvalidArgumentError
from .base import QueryBuilderDecorator

if TYPE_CHECKING:
    from collections.abc import Mapping

    from ..ports.builder import IQueryBuilder
    from ..request import QueryRequest
    from ..response import CursorResponse, PagedResponse


def build_tenant_filter(
    tenant_id: str, tenant_field: str = "tenantId"
) -> dict[str, Any]:
    return {tenant_field: tenant_id}


class TenantQueryBuilder(QueryBuilderDecorator):
    """
    Restricts every request to one tenant.

    The tenant equality filter is merged last, so a caller-supplied filter on
    the tenant field can never widen the scope.
    """

    def __init__(
        self,
        inner: IQueryBuilder,
        tenant_id: str | None,
        tenant_field: str = "tenantId",
    ) -> None:
        if not tenant_id:
            raise InvalidArgumentError("tenant_id")
        super().__init__(inner)
        self._filter = build_tenant_filter(tenant_id, tenant_field)

    def scoped(self, request: QueryRequest) -> QueryRequest:
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
