"""CSV and JSON export of query results."""

from __future__ import annotations

import json
from collections.abc import Mapping
from datetime import date
from typing import TYPE_CHECKING, Any

from ..pagination import get_field

if TYPE_CHECKING:
    from collections.abc import Sequence

    from ..ports.builder import IQueryBuilder
    from ..request import QueryRequest

EXPORT_MAX_ROWS = 10_000

_NEEDS_QUOTES = (",", '"', "\n", "\r")


def _json_default(value: Any) -> Any:
    if isinstance(value, date):
        return value.isoformat()
    if hasattr(value, "model_dump"):
        return value.model_dump(mode="json")
    return str(value)


def _normalize(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, int | float):
        return str(value)
    if isinstance(value, date):
        return value.isoformat()
    return json.dumps(value, default=_json_default)


def _escape(raw: str) -> str:
    escaped = raw.replace('"', '""')
    if any(char in raw for char in _NEEDS_QUOTES):
        return f'"{escaped}"'
    return escaped


def _columns(row: Any) -> list[str]:
    if isinstance(row, Mapping):
        return list(row)
    if hasattr(row, "model_dump"):
        return list(row.model_dump())
    return list(vars(row))


def to_csv(rows: Sequence[Any]) -> str:
    """
    Render rows as CSV, header taken from the first row's keys.

    Lines are joined with ``\\n`` and there is no trailing newline.  Fields
    containing a comma, quote, CR or LF are quoted with quotes doubled.
    Nested values are JSON-encoded; ``None`` becomes an empty field.
    """
    if not rows:
        return ""
    headers = _columns(rows[0])
    lines = [",".join(_escape(header) for header in headers)]
    lines.extend(
        ",".join(_escape(_normalize(get_field(row, header))) for header in headers)
        for row in rows
    )
    return "\n".join(lines)


def to_json(rows: Sequence[Any], pretty: bool = True) -> str:
    if pretty:
        return json.dumps(list(rows), indent=2, default=_json_default)
    return json.dumps(list(rows), separators=(",", ":"), default=_json_default)


async def _export_rows(
    builder: IQueryBuilder, request: QueryRequest, max_rows: int
) -> list[Any]:
    # The row cap replaces both the page size and the regular max limit.
    capped = request.merged({"limit": max_rows})
    result = await builder.query(capped, max_limit=max_rows)
    return result.data


async def query_and_export_csv(
    builder: IQueryBuilder, request: QueryRequest, max_rows: int = EXPORT_MAX_ROWS
) -> str:
    return to_csv(await _export_rows(builder, request, max_rows))


async def query_and_export_json(
    builder: IQueryBuilder,
    request: QueryRequest,
    max_rows: int = EXPORT_MAX_ROWS,
    pretty: bool = True,
) -> str:
    return to_json(await _export_rows(builder, request, max_rows), pretty)
