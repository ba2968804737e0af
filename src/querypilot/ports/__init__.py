"""Ports — protocols implemented by executors, caches and query builders."""

from __future__ import annotations

from .builder import IQueryBuilder
from .cache import ICacheStore
from .executor import IQueryExecutor

__all__ = [
    "ICacheStore",
    "IQueryBuilder",
    "IQueryExecutor",
]
