"""Response envelopes and the result shaper."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from pydantic import BaseModel, ConfigDict

from .pagination import calculate_total_pages, process_cursor_results

if TYPE_CHECKING:
    from collections.abc import Sequence


class PageMeta(BaseModel):
    total: int
    page: int
    limit: int
    total_pages: int


class CursorMeta(BaseModel):
    next_cursor: Any | None = None
    has_more: bool
    limit: int


class PagedResponse(BaseModel):
    """Offset-paged envelope: ``{data, meta: {total, page, limit, total_pages}}``."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    data: list[Any]
    meta: PageMeta


class CursorResponse(BaseModel):
    """Cursor-paged envelope: ``{data, meta: {next_cursor, has_more, limit}}``."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    data: list[Any]
    meta: CursorMeta


def shape_offset(
    rows: Sequence[Any], total: int, page: int, limit: int
) -> PagedResponse:
    return PagedResponse(
        data=list(rows),
        meta=PageMeta(
            total=total,
            page=page,
            limit=limit,
            total_pages=calculate_total_pages(total, limit),
        ),
    )


def shape_cursor(
    rows: Sequence[Any], limit: int, cursor_field: str = "id"
) -> CursorResponse:
    page = process_cursor_results(rows, limit, cursor_field)
    return CursorResponse(
        data=page.data,
        meta=CursorMeta(
            next_cursor=page.next_cursor,
            has_more=page.has_more,
            limit=limit,
        ),
    )
