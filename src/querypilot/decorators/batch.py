"""Run several named queries concurrently."""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING, NamedTuple

if TYPE_CHECKING:
    from collections.abc import Iterable

    from ..ports.builder import IQueryBuilder
    from ..request import QueryRequest
    from ..response import PagedResponse


class NamedQuery(NamedTuple):
    name: str
    request: QueryRequest


async def batch_query(
    builder: IQueryBuilder, queries: Iterable[NamedQuery | tuple[str, QueryRequest]]
) -> dict[str, PagedResponse]:
    """
    Execute every query concurrently and map each name to its result.

    The first failure propagates; no partial result is returned.  With
    duplicate names the later entry wins.
    """
    pending = [NamedQuery(*query) for query in queries]
    results = await asyncio.gather(*(builder.query(q.request) for q in pending))
    return {query.name: result for query, result in zip(pending, results, strict=True)}
