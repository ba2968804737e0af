"""
Predicate compiler — filters, relation filters and search terms into a
``PredicateNode`` tree.

``None`` is the compiled form of "no constraint" throughout: empty filter
sets, empty searches and bound-less ranges all compile to ``None`` and are
dropped by the combinators, so they never show up in the final tree.

Example::

    where = combine_and(
        compile_filters({"status": "ACTIVE", "role": ["ADMIN", "OWNER"]}),
        compile_search("john", ["email", "name"]),
    )
    # AND(AND(status = ACTIVE, role in (...)), OR(email icontains john, ...))
"""

from __future__ import annotations

from datetime import date, datetime
from typing import TYPE_CHECKING, Any

from .conditions import (
    UNSET,
    ArrayIn,
    Boolean,
    Exact,
    NotEqual,
    Range,
    RelationExistence,
    resolve_condition,
    resolve_relation,
)
from .operators import ConditionOperator
from .predicates import (
    AndNode,
    FieldPredicate,
    NotNode,
    OrNode,
    PredicateNode,
    RelationPredicate,
)

if TYPE_CHECKING:
    from collections.abc import Callable, Mapping, Sequence

    from .conditions import Condition

_RELATION_OPERATORS: dict[str, ConditionOperator] = {
    "some": ConditionOperator.SOME,
    "none": ConditionOperator.NONE,
    "every": ConditionOperator.EVERY,
}


# -- combinators -------------------------------------------------------------


def combine_and(*nodes: PredicateNode | None) -> PredicateNode | None:
    """AND the non-empty inputs; zero → ``None``, one → itself."""
    present = tuple(node for node in nodes if node is not None)
    if not present:
        return None
    if len(present) == 1:
        return present[0]
    return AndNode(present)


def combine_or(*nodes: PredicateNode | None) -> PredicateNode | None:
    """OR the non-empty inputs; zero → ``None``, one → itself."""
    present = tuple(node for node in nodes if node is not None)
    if not present:
        return None
    if len(present) == 1:
        return present[0]
    return OrNode(present)


def negate(*nodes: PredicateNode | None) -> PredicateNode | None:
    """``NOT(AND(nodes))``, or ``None`` when nothing is supplied."""
    combined = combine_and(*nodes)
    if combined is None:
        return None
    return NotNode(combined)


# -- conditions --------------------------------------------------------------


def compile_condition(field: str, condition: Condition) -> PredicateNode | None:
    """Compile one resolved condition for ``field``."""
    if isinstance(condition, Boolean):
        return FieldPredicate(field, ConditionOperator.EQ, condition.value)
    if isinstance(condition, ArrayIn):
        return FieldPredicate(field, ConditionOperator.IN, condition.values)
    if isinstance(condition, Range):
        return _compile_range(field, condition)
    if isinstance(condition, NotEqual):
        if condition.value is None:
            return FieldPredicate(field, ConditionOperator.IS_NOT_NULL)
        return FieldPredicate(field, ConditionOperator.NE, condition.value)
    if isinstance(condition, RelationExistence):
        return compile_relation(field, condition)
    if isinstance(condition, Exact) and condition.value is None:
        return FieldPredicate(field, ConditionOperator.IS_NULL)
    return FieldPredicate(field, ConditionOperator.EQ, condition.value)


def _compile_range(field: str, condition: Range) -> PredicateNode | None:
    if condition.is_empty:
        return None
    lower = (
        FieldPredicate(field, ConditionOperator.GE, condition.from_)
        if condition.from_ is not None
        else None
    )
    upper = (
        FieldPredicate(field, ConditionOperator.LE, condition.to)
        if condition.to is not None
        else None
    )
    return combine_and(lower, upper)


def compile_relation(relation: str, condition: RelationExistence) -> PredicateNode:
    return RelationPredicate(
        relation,
        _RELATION_OPERATORS[condition.kind],
        compile_filters(condition.where),
    )


def compile_filters(filters: Mapping[str, Any] | None) -> PredicateNode | None:
    """
    Compile a field → value mapping into an AND of per-field subtrees.

    Values may be raw (shape-sniffed here) or already-resolved conditions.
    Unset values are dropped.
    """
    if not filters:
        return None
    nodes = [
        compile_condition(field, resolve_condition(raw))
        for field, raw in filters.items()
        if raw is not UNSET
    ]
    return combine_and(*nodes)


def compile_relation_filters(
    relation_filters: Mapping[str, Any] | None,
) -> PredicateNode | None:
    """
    Compile relation → nested-condition filters.

    ``{"posts": {"some": {...}, "none": {...}}}`` yields one quantifier per
    discriminator; ``{"organization": {"isActive": True}}`` is an implicit
    ``some``.  Non-mapping values are ignored.
    """
    if not relation_filters:
        return None
    nodes: list[PredicateNode | None] = []
    for relation, raw in relation_filters.items():
        for condition in resolve_relation(raw):
            nodes.append(compile_relation(relation, condition))
    return combine_and(*nodes)


def compile_not_filters(filters: Mapping[str, Any] | None) -> PredicateNode | None:
    """Exclude records matching every filter in ``filters``."""
    return negate(compile_filters(filters))


# -- search ------------------------------------------------------------------


def _compile_term(
    term: str | None,
    fields: Sequence[str] | None,
    op: ConditionOperator,
) -> PredicateNode | None:
    if not term or not fields:
        return None
    return combine_or(*(FieldPredicate(field, op, term) for field in fields))


def compile_search(
    term: str | None, fields: Sequence[str] | None
) -> PredicateNode | None:
    """Case-insensitive substring match of ``term`` on any of ``fields``."""
    return _compile_term(term, fields, ConditionOperator.ICONTAINS)


def compile_exact_search(
    term: str | None, fields: Sequence[str] | None
) -> PredicateNode | None:
    """Case-insensitive whole-value match of ``term`` on any of ``fields``."""
    return _compile_term(term, fields, ConditionOperator.IEQ)


def compile_prefix_search(
    term: str | None, fields: Sequence[str] | None
) -> PredicateNode | None:
    """Case-insensitive prefix match of ``term`` on any of ``fields``."""
    return _compile_term(term, fields, ConditionOperator.ISTARTSWITH)


# -- range helpers -----------------------------------------------------------


def _parse_datetime(value: str | date | None) -> date | None:
    if value is None or isinstance(value, date):
        return value
    text = value.strip()
    if not text:
        return None
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    return datetime.fromisoformat(text)


def date_range(
    from_: str | date | None = None, to: str | date | None = None
) -> Range:
    """Range over dates; ISO-8601 strings are parsed to ``datetime``."""
    return Range(_parse_datetime(from_), _parse_datetime(to))


def number_range(min_: float | None = None, max_: float | None = None) -> Range:
    """Inclusive numeric range."""
    return Range(min_, max_)


SEARCH_MODES: dict[str, Callable[..., PredicateNode | None]] = {
    "contains": compile_search,
    "exact": compile_exact_search,
    "prefix": compile_prefix_search,
}
