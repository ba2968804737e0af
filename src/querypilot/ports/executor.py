"""IQueryExecutor — protocol for the data-store adapter that runs plans."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

if TYPE_CHECKING:
    from ..plan import GroupBySpec, QueryPlan


@runtime_checkable
class IQueryExecutor(Protocol):
    """
    Executes compiled plans against a backing store.

    Implementations must understand equality, range and membership
    predicates combined with AND/OR/NOT, relation quantifiers
    (``some``/``none``/``every``), case-insensitive substring matching,
    multi-field ordering and ``take``/``skip``/single-field ``cursor``
    windows.  Errors raised here reach the caller unchanged.
    """

    async def find(self, plan: QueryPlan) -> list[Any]:
        """Return the rows selected by ``plan`` (window and ordering applied)."""
        ...

    async def count(self, plan: QueryPlan) -> int:
        """Return the number of rows matching ``plan.where``."""
        ...

    async def aggregate(self, plan: QueryPlan) -> dict[str, Any]:
        """
        Aggregate rows matching ``plan.where``.

        ``plan.aggregations`` maps kinds (``count``, ``sum``, ``avg``,
        ``min``, ``max``) to fields; the result is keyed the same way.
        """
        ...

    async def group_by(self, spec: GroupBySpec) -> list[dict[str, Any]]:
        """Return one aggregate row per group."""
        ...
