"""Pagination engine — offset windows, cursor windows and cursor post-processing."""

from __future__ import annotations

import math
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any, NamedTuple

if TYPE_CHECKING:
    from collections.abc import Sequence

DEFAULT_PAGE = 1
DEFAULT_LIMIT = 10
MAX_LIMIT = 100


class OffsetWindow(NamedTuple):
    take: int
    skip: int


class CursorWindow(NamedTuple):
    take: int
    skip: int
    cursor: dict[str, Any] | None


class CursorPage(NamedTuple):
    data: list[Any]
    has_more: bool
    next_cursor: Any | None


def normalize_page(page: Any, default: int = DEFAULT_PAGE) -> int:
    try:
        value = int(page) if page is not None else default
    except (TypeError, ValueError):
        value = default
    return max(1, value)


def normalize_limit(
    limit: Any,
    *,
    default: int = DEFAULT_LIMIT,
    max_limit: int = MAX_LIMIT,
) -> int:
    try:
        value = int(limit) if limit is not None else default
    except (TypeError, ValueError):
        value = default
    return min(max_limit, max(1, value))


def compute_offset(
    page: Any = None,
    limit: Any = None,
    *,
    default_limit: int = DEFAULT_LIMIT,
    max_limit: int = MAX_LIMIT,
) -> OffsetWindow:
    """``skip = (page - 1) * limit``, ``take = limit``; never negative."""
    page_value = normalize_page(page)
    limit_value = normalize_limit(limit, default=default_limit, max_limit=max_limit)
    return OffsetWindow(take=limit_value, skip=(page_value - 1) * limit_value)


def calculate_total_pages(total: int, limit: int) -> int:
    if total <= 0:
        return 0
    return math.ceil(total / limit)


def compute_cursor_window(
    cursor: Any | None, limit: int, cursor_field: str = "id"
) -> CursorWindow:
    """
    Fetch one row past the limit to detect whether more rows exist.

    With a cursor, the anchor row itself is skipped.
    """
    if cursor is None or cursor == "":
        return CursorWindow(take=limit + 1, skip=0, cursor=None)
    return CursorWindow(take=limit + 1, skip=1, cursor={cursor_field: cursor})


def get_field(row: Any, name: str) -> Any:
    """Read ``name`` from a mapping row or an attribute object."""
    if isinstance(row, Mapping):
        return row.get(name)
    return getattr(row, name, None)


def process_cursor_results(
    rows: Sequence[Any], limit: int, cursor_field: str = "id"
) -> CursorPage:
    """Drop the lookahead row and derive ``has_more`` / ``next_cursor``."""
    if len(rows) > limit:
        data = list(rows[:limit])
        return CursorPage(
            data=data,
            has_more=True,
            next_cursor=get_field(data[-1], cursor_field),
        )
    data = list(rows)
    return CursorPage(
        data=data,
        has_more=False,
        next_cursor=get_field(data[-1], cursor_field) if data else None,
    )
