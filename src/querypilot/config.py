"""Configuration shared by the query builder and its decorators."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

from .pagination import DEFAULT_LIMIT, DEFAULT_PAGE, MAX_LIMIT


@dataclass(frozen=True)
class QueryPilotConfig:
    """
    Defaults applied when a request leaves a setting unspecified.

    Attributes:
        default_page: Page used when the request carries none.
        default_limit: Page size used when the request carries none.
        max_limit: Upper bound for the page size of regular queries.
        default_sort_field: Primary sort key when ``sort_by`` is unset.
        default_sort_order: Direction when ``sort_order`` is unset.
        default_cursor_field: Cursor field used when the request leaves it unset.
        slow_query_threshold_ms: Queries slower than this are flagged slow.
        cache_ttl: Default cache lifetime in seconds.
        export_max_rows: Default row cap for export queries.
    """

    default_page: int = DEFAULT_PAGE
    default_limit: int = DEFAULT_LIMIT
    max_limit: int = MAX_LIMIT
    default_sort_field: str = "createdAt"
    default_sort_order: Literal["asc", "desc"] = "desc"
    default_cursor_field: str = "id"
    slow_query_threshold_ms: float = 1000.0
    cache_ttl: int = 300
    export_max_rows: int = 10_000
