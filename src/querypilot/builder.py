"""QueryBuilder — assemble a plan, run it on the executor, shape the result."""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING, Any

from .config import QueryPilotConfig
from .pagination import normalize_page
from .plan import PaginationMode, QueryPlanAssembler
from .response import shape_cursor, shape_offset

if TYPE_CHECKING:
    from collections.abc import Mapping

    from .ports.executor import IQueryExecutor
    from .request import QueryRequest
    from .response import CursorResponse, PagedResponse

logger = logging.getLogger("querypilot.builder")


class QueryBuilder:
    """
    Base implementation of :class:`~querypilot.ports.IQueryBuilder`.

    Usage::

        builder = QueryBuilder(executor)
        page = await builder.query(QueryRequest(model="user", page=1, limit=20))
        window = await builder.cursor_query(QueryRequest(model="user", limit=20))

    Executor errors propagate unchanged; nothing is retried.
    """

    def __init__(
        self,
        executor: IQueryExecutor,
        config: QueryPilotConfig | None = None,
    ) -> None:
        self._executor = executor
        self._config = config or QueryPilotConfig()
        self._assembler = QueryPlanAssembler(self._config)

    @property
    def executor(self) -> IQueryExecutor:
        return self._executor

    @property
    def config(self) -> QueryPilotConfig:
        return self._config

    @property
    def assembler(self) -> QueryPlanAssembler:
        return self._assembler

    async def query(
        self, request: QueryRequest, *, max_limit: int | None = None
    ) -> PagedResponse:
        """
        Offset-paged query.  The page fetch and the count run concurrently;
        they are not guaranteed to observe the same snapshot.
        """
        plan = self._assembler.assemble(
            request, PaginationMode.OFFSET, max_limit=max_limit
        )
        count_plan = self._assembler.assemble_count(request)
        rows, total = await asyncio.gather(
            self._executor.find(plan),
            self._executor.count(count_plan),
        )
        page = normalize_page(
            request.page if request.page is not None else self._config.default_page
        )
        limit = plan.take if plan.take is not None else self._config.default_limit
        return shape_offset(rows, total, page, limit)

    async def cursor_query(self, request: QueryRequest) -> CursorResponse:
        """Cursor-paged query; one lookahead row decides ``has_more``."""
        plan = self._assembler.assemble(request, PaginationMode.CURSOR)
        rows = await self._executor.find(plan)
        limit = (plan.take or 1) - 1
        return shape_cursor(rows, limit, self._assembler.cursor_field(request))

    async def count(self, request: QueryRequest) -> int:
        return await self._executor.count(self._assembler.assemble_count(request))

    async def aggregate(
        self, request: QueryRequest, aggregations: Mapping[str, Any]
    ) -> dict[str, Any]:
        plan = self._assembler.assemble_aggregate(request, aggregations)
        return await self._executor.aggregate(plan)
