"""Shared fixtures: a seeded in-memory executor and a builder over it."""

from __future__ import annotations

from typing import Any

import pytest

from querypilot import QueryBuilder
from querypilot.adapters.memory import InMemoryExecutor


def _users() -> list[dict[str, Any]]:
    return [
        {
            "id": 1,
            "name": "Alice Smith",
            "email": "alice@example.com",
            "status": "ACTIVE",
            "role": "ADMIN",
            "age": 34,
            "verified": True,
            "tenantId": "t1",
            "createdAt": "2024-01-05T00:00:00",
            "deletedAt": None,
            "posts": [
                {"title": "Hello", "status": "PUBLISHED"},
                {"title": "Draft", "status": "DRAFT"},
            ],
            "organization": {"name": "Acme", "isActive": True},
        },
        {
            "id": 2,
            "name": "Bob Jones",
            "email": "bob@example.com",
            "status": "INVITED",
            "role": "MEMBER",
            "age": 27,
            "verified": False,
            "tenantId": "t1",
            "createdAt": "2024-01-04T00:00:00",
            "deletedAt": None,
            "posts": [{"title": "Ideas", "status": "DRAFT"}],
            "organization": {"name": "Acme", "isActive": True},
        },
        {
            "id": 3,
            "name": "Carol White",
            "email": "carol@sample.org",
            "status": "ACTIVE",
            "role": "MEMBER",
            "age": 45,
            "verified": True,
            "tenantId": "t2",
            "createdAt": "2024-01-03T00:00:00",
            "deletedAt": "2024-02-01T00:00:00",
            "posts": [],
            "organization": {"name": "Globex", "isActive": False},
        },
        {
            "id": 4,
            "name": "Dan Brown",
            "email": "dan@example.com",
            "status": "SUSPENDED",
            "role": "MEMBER",
            "age": None,
            "verified": False,
            "tenantId": "t2",
            "createdAt": "2024-01-02T00:00:00",
            "deletedAt": None,
            "posts": [{"title": "News", "status": "PUBLISHED"}],
            "organization": None,
        },
        {
            "id": 5,
            "name": "Eve Adams",
            "email": "eve@sample.org",
            "status": "ACTIVE",
            "role": "OWNER",
            "age": 29,
            "verified": True,
            "tenantId": "t1",
            "createdAt": "2024-01-01T00:00:00",
            "deletedAt": None,
            "posts": [
                {"title": "Launch", "status": "PUBLISHED"},
                {"title": "Recap", "status": "PUBLISHED"},
            ],
            "organization": {"name": "Acme", "isActive": True},
        },
    ]


def _orders() -> list[dict[str, Any]]:
    return [
        {"id": "o1", "customer": "alice", "status": "PAID", "amount": 100},
        {"id": "o2", "customer": "alice", "status": "PAID", "amount": 50},
        {"id": "o3", "customer": "bob", "status": "PENDING", "amount": 20},
        {"id": "o4", "customer": "bob", "status": "PAID", "amount": 30},
        {"id": "o5", "customer": "carol", "status": "PAID", "amount": 200},
    ]


@pytest.fixture
def executor() -> InMemoryExecutor:
    return InMemoryExecutor({"user": _users(), "order": _orders()})


@pytest.fixture
def builder(executor: InMemoryExecutor) -> QueryBuilder:
    return QueryBuilder(executor)
