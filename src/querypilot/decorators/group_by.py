"""Grouped aggregation passthrough."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from ..plan import QueryPlanAssembler

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence

    from ..ports.executor import IQueryExecutor


async def group_by_query(
    executor: IQueryExecutor,
    model: str | None,
    by: Sequence[str],
    aggregations: Mapping[str, Any] | None = None,
    filters: Mapping[str, Any] | None = None,
    having: Any | None = None,
) -> list[dict[str, Any]]:
    """
    Group rows by ``by`` and aggregate each group.

    ``filters`` use the same condition shapes as :class:`QueryRequest`;
    ``having`` is handed to the executor untouched.  The executor's rows are
    returned unshaped.
    """
    spec = QueryPlanAssembler().assemble_group_by(
        model, by, aggregations=aggregations, filters=filters, having=having
    )
    return await executor.group_by(spec)
