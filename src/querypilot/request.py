"""QueryRequest — immutable description of one list query."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .conditions import resolve_filters, resolve_relation

SortOrder = Literal["asc", "desc"]
SearchMode = Literal["contains", "exact", "prefix"]


class QueryRequest(BaseModel):
    """
    Declarative list query: pagination, search, filters, sort and projection.

    Filter values are resolved into explicit condition variants on
    construction (see :mod:`querypilot.conditions`), so a request always
    carries the discriminated form regardless of how it was written::

        QueryRequest(
            model="user",
            page=2,
            limit=20,
            search="john",
            search_fields=["email", "name"],
            filters={"status": ["ACTIVE", "INVITED"], "createdAt": {"from": start}},
            relation_filters={"posts": {"some": {"status": "PUBLISHED"}}},
            sort_by="createdAt",
            sort_order="desc",
        )

    ``page`` drives offset queries, ``cursor`` drives cursor queries.
    ``projection`` is handed to the executor untouched.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    model: str | None = None
    page: int | None = None
    cursor: Any | None = None
    limit: int | None = None
    search: str | None = None
    search_fields: tuple[str, ...] = ()
    search_mode: SearchMode = "contains"
    filters: dict[str, Any] = Field(default_factory=dict)
    relation_filters: dict[str, Any] = Field(default_factory=dict)
    or_filters: tuple[dict[str, Any], ...] = ()
    not_filters: dict[str, Any] = Field(default_factory=dict)
    sort_by: str | None = None
    sort_order: SortOrder | None = None
    projection: Any | None = None
    cursor_field: str | None = None

    @field_validator("filters", "not_filters", mode="before")
    @classmethod
    def _resolve_filters(cls, value: Any) -> dict[str, Any]:
        return resolve_filters(value)

    @field_validator("relation_filters", mode="before")
    @classmethod
    def _resolve_relations(cls, value: Any) -> dict[str, Any]:
        if not value:
            return {}
        resolved = {name: resolve_relation(raw) for name, raw in value.items()}
        return {name: conds for name, conds in resolved.items() if conds}

    @field_validator("or_filters", mode="before")
    @classmethod
    def _resolve_or_filters(cls, value: Any) -> tuple[dict[str, Any], ...]:
        if not value:
            return ()
        if isinstance(value, Mapping):
            value = [value]
        return tuple(resolve_filters(group) for group in value)

    def merged(self, overrides: Mapping[str, Any] | None = None) -> QueryRequest:
        """Return a copy with top-level keys replaced by ``overrides``."""
        values = {name: getattr(self, name) for name in type(self).model_fields}
        values.update(overrides or {})
        return type(self)(**values)

    def with_filters(self, extra: Mapping[str, Any]) -> QueryRequest:
        """Return a copy whose filters also include ``extra`` (``extra`` wins)."""
        return self.merged({"filters": {**self.filters, **extra}})

    def to_dict(self) -> dict[str, Any]:
        """JSON-friendly form; conditions are rendered back to their raw shape."""
        relation_filters: dict[str, Any] = {}
        for name, conditions in self.relation_filters.items():
            raw: dict[str, Any] = {}
            for condition in conditions:
                raw.update(condition.to_raw())
            relation_filters[name] = raw
        result: dict[str, Any] = {
            "model": self.model,
            "page": self.page,
            "cursor": self.cursor,
            "limit": self.limit,
            "search": self.search,
            "search_fields": list(self.search_fields),
            "search_mode": self.search_mode,
            "filters": _raw_filters(self.filters),
            "relation_filters": relation_filters,
            "or_filters": [_raw_filters(group) for group in self.or_filters],
            "not_filters": _raw_filters(self.not_filters),
            "sort_by": self.sort_by,
            "sort_order": self.sort_order,
            "projection": self.projection,
            "cursor_field": self.cursor_field,
        }
        return {
            key: value for key, value in result.items() if value not in (None, {}, [])
        }


def _raw_filters(filters: Mapping[str, Any]) -> dict[str, Any]:
    return {name: condition.to_raw() for name, condition in filters.items()}
