"""
Filter conditions — the explicit, discriminated form of a filter value.

Raw filter values arrive loosely typed (``"ACTIVE"``, ``[1, 2]``,
``{"from": a, "to": b}``, ``{"some": {...}}``).  They are resolved into one
of the condition variants below exactly once, when a request is built, so
the compiler never has to sniff shapes again::

    resolve_condition("ACTIVE")                  # Exact("ACTIVE")
    resolve_condition(["A", "B"])                # ArrayIn(("A", "B"))
    resolve_condition({"from": 1, "to": 9})      # Range(1, 9)
    resolve_condition({"not": None})             # NotEqual(None)
    resolve_condition({"some": {"status": "X"}}) # RelationExistence("some", ...)

Anything that matches no known shape is forwarded as ``Exact(raw)``;
validating it is the executor's business.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Literal, Union

RelationKind = Literal["some", "none", "every"]

RELATION_KINDS: tuple[RelationKind, ...] = ("some", "none", "every")
_RANGE_KEYS = frozenset({"from", "to"})


class _Unset:
    """Marker for a filter value that was never supplied."""

    _instance: _Unset | None = None

    def __new__(cls) -> _Unset:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "UNSET"

    def __bool__(self) -> bool:
        return False


UNSET: Any = _Unset()


@dataclass(frozen=True)
class Exact:
    """Field equals value. ``Exact(None)`` means the field is null."""

    value: Any

    def to_raw(self) -> Any:
        return self.value


@dataclass(frozen=True)
class ArrayIn:
    """Field is one of ``values``."""

    values: tuple[Any, ...]

    def to_raw(self) -> list[Any]:
        return list(self.values)


@dataclass(frozen=True)
class Range:
    """Inclusive range. Either bound may be omitted; both omitted is a no-op."""

    from_: Any = None
    to: Any = None

    @property
    def is_empty(self) -> bool:
        return self.from_ is None and self.to is None

    def to_raw(self) -> dict[str, Any]:
        return {"from": self.from_, "to": self.to}


@dataclass(frozen=True)
class Boolean:
    """Boolean flag match."""

    value: bool

    def to_raw(self) -> bool:
        return self.value


@dataclass(frozen=True)
class NotEqual:
    """Field differs from value. ``NotEqual(None)`` means the field is set."""

    value: Any

    def to_raw(self) -> dict[str, Any]:
        return {"not": self.value}


@dataclass(frozen=True)
class RelationExistence:
    """
    Quantified match over related records.

    ``where`` holds the already-resolved nested conditions; an empty
    mapping only asserts that related records exist (``some``), do not
    exist (``none``) or trivially all match (``every``).
    """

    kind: RelationKind
    where: Mapping[str, Condition] = field(default_factory=dict)

    def to_raw(self) -> dict[str, Any]:
        return {self.kind: {name: cond.to_raw() for name, cond in self.where.items()}}


Condition = Union[Exact, ArrayIn, Range, Boolean, NotEqual, RelationExistence]
CONDITION_TYPES: tuple[type, ...] = (
    Exact,
    ArrayIn,
    Range,
    Boolean,
    NotEqual,
    RelationExistence,
)


def is_condition(value: Any) -> bool:
    return isinstance(value, CONDITION_TYPES)


def resolve_condition(value: Any) -> Condition:
    """Resolve a raw filter value into its condition variant."""
    if is_condition(value):
        return value
    if isinstance(value, bool):
        return Boolean(value)
    if isinstance(value, list | tuple | set | frozenset):
        return ArrayIn(tuple(value))
    if isinstance(value, Mapping) and value:
        keys = set(value.keys())
        if keys <= _RANGE_KEYS:
            return Range(value.get("from"), value.get("to"))
        if keys == {"not"}:
            return NotEqual(value["not"])
        if len(keys) == 1 and keys <= set(RELATION_KINDS):
            (kind,) = keys
            return RelationExistence(kind, resolve_nested(value[kind]))
    return Exact(value)


def resolve_filters(filters: Mapping[str, Any] | None) -> dict[str, Condition]:
    """Resolve every value of a filter mapping, dropping unset entries."""
    if not filters:
        return {}
    return {
        name: resolve_condition(raw)
        for name, raw in filters.items()
        if raw is not UNSET
    }


def resolve_nested(value: Any) -> dict[str, Condition]:
    """Nested relation conditions; non-mapping payloads mean "no nested match"."""
    if isinstance(value, Mapping):
        return resolve_filters(value)
    return {}


def resolve_relation(value: Any) -> tuple[RelationExistence, ...]:
    """
    Resolve a relation-filter value.

    A mapping keyed by ``some``/``none``/``every`` yields one existence
    condition per discriminator.  A bare mapping is an implicit ``some``
    over its nested equalities.  Non-mapping values resolve to nothing.
    """
    if isinstance(value, RelationExistence):
        return (value,)
    if isinstance(value, tuple) and all(
        isinstance(item, RelationExistence) for item in value
    ):
        return value
    if not isinstance(value, Mapping):
        return ()
    kinds = [k for k in RELATION_KINDS if k in value]
    if kinds and len(kinds) == len(value):
        return tuple(RelationExistence(k, resolve_nested(value[k])) for k in kinds)
    return (RelationExistence("some", resolve_filters(value)),)
