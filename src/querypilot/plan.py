"""
Query plan assembly.

The assembler turns a :class:`QueryRequest` into the :class:`QueryPlan`
handed to an executor: the compiled ``where`` tree, the ordering, the
pagination window and the opaque projection.  Offset and cursor plans share
the predicate and sort compilation and differ only in the window.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any

from .compiler import (
    SEARCH_MODES,
    combine_and,
    combine_or,
    compile_filters,
    compile_not_filters,
    compile_relation_filters,
)
from .config import QueryPilotConfig
from .pagination import compute_cursor_window, compute_offset, normalize_limit

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence

    from .predicates import PredicateNode
    from .request import QueryRequest

logger = logging.getLogger("querypilot.plan")


class PaginationMode(str, Enum):
    OFFSET = "offset"
    CURSOR = "cursor"


@dataclass(frozen=True)
class QueryPlan:
    """
    Backend-agnostic plan consumed by :class:`~querypilot.ports.IQueryExecutor`.

    Attributes:
        model: Opaque collection/table name.
        where: Compiled predicate tree, ``None`` for "no constraint".
        order_by: ``(field, direction)`` pairs, most significant first.
        take: Maximum rows to return (``None`` = unbounded).
        skip: Rows to skip after the cursor anchor (or from the start).
        cursor: Single-field anchor ``{field: value}`` for cursor windows.
        projection: Include/select descriptor, passed through untouched.
        aggregations: Aggregation kinds → fields, for aggregate plans.
    """

    model: str | None = None
    where: PredicateNode | None = None
    order_by: tuple[tuple[str, str], ...] = ()
    take: int | None = None
    skip: int | None = None
    cursor: dict[str, Any] | None = None
    projection: Any | None = None
    aggregations: dict[str, Any] | None = None

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {"model": self.model}
        if self.where is not None:
            result["where"] = self.where.to_dict()
        if self.order_by:
            result["order_by"] = [list(pair) for pair in self.order_by]
        if self.take is not None:
            result["take"] = self.take
        if self.skip is not None:
            result["skip"] = self.skip
        if self.cursor is not None:
            result["cursor"] = self.cursor
        if self.projection is not None:
            result["projection"] = self.projection
        if self.aggregations is not None:
            result["aggregations"] = self.aggregations
        return result


@dataclass(frozen=True)
class GroupBySpec:
    """Group-by request forwarded to the executor as-is."""

    model: str | None
    by: tuple[str, ...]
    aggregations: dict[str, Any] = field(default_factory=dict)
    where: PredicateNode | None = None
    having: Any | None = None


class QueryPlanAssembler:
    """Builds :class:`QueryPlan` objects from requests."""

    def __init__(self, config: QueryPilotConfig | None = None) -> None:
        self._config = config or QueryPilotConfig()

    @property
    def config(self) -> QueryPilotConfig:
        return self._config

    # -- where ---------------------------------------------------------------

    def build_where(self, request: QueryRequest) -> PredicateNode | None:
        """AND of filters, relation filters, search, OR groups and exclusions."""
        search = SEARCH_MODES[request.search_mode](
            request.search, request.search_fields
        )
        return combine_and(
            compile_filters(request.filters),
            compile_relation_filters(request.relation_filters),
            search,
            combine_or(*(compile_filters(group) for group in request.or_filters)),
            compile_not_filters(request.not_filters),
        )

    # -- order ---------------------------------------------------------------

    def cursor_field(self, request: QueryRequest) -> str:
        return request.cursor_field or self._config.default_cursor_field

    def build_order_by(
        self, request: QueryRequest, mode: PaginationMode
    ) -> tuple[tuple[str, str], ...]:
        sort_field = request.sort_by or self._config.default_sort_field
        direction = request.sort_order or self._config.default_sort_order
        order: list[tuple[str, str]] = [(sort_field, direction)]
        cursor_field = self.cursor_field(request)
        if mode is PaginationMode.CURSOR and cursor_field != sort_field:
            # Tie-breaker: cursor windows need a unique total order.
            order.append((cursor_field, direction))
        return tuple(order)

    # -- plans ---------------------------------------------------------------

    def assemble(
        self,
        request: QueryRequest,
        mode: PaginationMode = PaginationMode.OFFSET,
        *,
        max_limit: int | None = None,
    ) -> QueryPlan:
        """Compile a full list-query plan for ``mode``."""
        limit_cap = max_limit if max_limit is not None else self._config.max_limit
        where = self.build_where(request)
        order_by = self.build_order_by(request, mode)
        if mode is PaginationMode.CURSOR:
            limit = normalize_limit(
                request.limit,
                default=self._config.default_limit,
                max_limit=limit_cap,
            )
            window = compute_cursor_window(
                request.cursor, limit, self.cursor_field(request)
            )
            plan = QueryPlan(
                model=request.model,
                where=where,
                order_by=order_by,
                take=window.take,
                skip=window.skip,
                cursor=window.cursor,
                projection=request.projection,
            )
        else:
            offset = compute_offset(
                request.page if request.page is not None else self._config.default_page,
                request.limit,
                default_limit=self._config.default_limit,
                max_limit=limit_cap,
            )
            plan = QueryPlan(
                model=request.model,
                where=where,
                order_by=order_by,
                take=offset.take,
                skip=offset.skip,
                projection=request.projection,
            )
        if logger.isEnabledFor(logging.DEBUG):
            logger.debug("Assembled %s plan: %s", mode.value, plan.to_dict())
        return plan

    def assemble_count(self, request: QueryRequest) -> QueryPlan:
        """Where-only plan: no ordering, no window, no projection."""
        return QueryPlan(model=request.model, where=self.build_where(request))

    def assemble_aggregate(
        self, request: QueryRequest, aggregations: Mapping[str, Any]
    ) -> QueryPlan:
        return QueryPlan(
            model=request.model,
            where=self.build_where(request),
            aggregations=dict(aggregations),
        )

    def assemble_group_by(
        self,
        model: str | None,
        by: Sequence[str],
        *,
        aggregations: Mapping[str, Any] | None = None,
        filters: Mapping[str, Any] | None = None,
        having: Any | None = None,
    ) -> GroupBySpec:
        return GroupBySpec(
            model=model,
            by=tuple(by),
            aggregations=dict(aggregations or {}),
            where=compile_filters(filters),
            having=having,
        )
