"""Tests for concurrent batch queries."""

from __future__ import annotations

import asyncio
from unittest.mock import AsyncMock

import pytest

from querypilot import QueryRequest
from querypilot.decorators import NamedQuery, batch_query
from querypilot.ports import IQueryBuilder


@pytest.mark.asyncio
async def test_results_are_keyed_by_name(builder):
    results = await batch_query(
        builder,
        [
            NamedQuery(
                "active", QueryRequest(model="user", filters={"status": "ACTIVE"})
            ),
            ("paid", QueryRequest(model="order", filters={"status": "PAID"})),
        ],
    )

    assert set(results) == {"active", "paid"}
    assert results["active"].meta.total == 3
    assert results["paid"].meta.total == 4


@pytest.mark.asyncio
async def test_queries_run_concurrently():
    started = asyncio.Event()
    release = asyncio.Event()
    calls = 0

    async def query(request, *, max_limit=None):
        nonlocal calls
        calls += 1
        if calls == 2:
            started.set()
        await release.wait()
        return request.model

    inner = AsyncMock(spec=IQueryBuilder)
    inner.query.side_effect = query

    task = asyncio.create_task(
        batch_query(
            inner,
            [("a", QueryRequest(model="a")), ("b", QueryRequest(model="b"))],
        )
    )
    await asyncio.wait_for(started.wait(), timeout=1)
    release.set()

    assert await task == {"a": "a", "b": "b"}


@pytest.mark.asyncio
async def test_any_failure_fails_the_batch(builder):
    with pytest.raises(LookupError):
        await batch_query(
            builder,
            [
                ("users", QueryRequest(model="user")),
                ("broken", QueryRequest(model="missing")),
            ],
        )


@pytest.mark.asyncio
async def test_empty_batch(builder):
    assert await batch_query(builder, []) == {}
