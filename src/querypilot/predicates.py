"""
Predicate tree produced by the compiler and consumed by executors.

Composite nodes (``AndNode``, ``OrNode``, ``NotNode``) combine leaves
(``FieldPredicate``) and relation quantifiers (``RelationPredicate``).
Nodes are immutable, compare by value and support ``&``, ``|`` and ``~``.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from .operators import ConditionOperator

if TYPE_CHECKING:
    from collections.abc import Iterator


class PredicateNode:
    """Base class for predicate tree nodes with logic operator support."""

    def __and__(self, other: PredicateNode) -> AndNode:
        return AndNode((self, other))

    def __or__(self, other: PredicateNode) -> OrNode:
        return OrNode((self, other))

    def __invert__(self) -> NotNode:
        return NotNode(self)

    def to_dict(self) -> dict[str, Any]:
        raise NotImplementedError

    def leaves(self) -> Iterator[FieldPredicate | RelationPredicate]:
        """Yield every leaf and relation node, depth first."""
        raise NotImplementedError


@dataclass(frozen=True)
class AndNode(PredicateNode):
    """Logical AND composite."""

    children: tuple[PredicateNode, ...]

    def to_dict(self) -> dict[str, Any]:
        return {
            "op": ConditionOperator.AND.value,
            "conditions": [child.to_dict() for child in self.children],
        }

    def leaves(self) -> Iterator[FieldPredicate | RelationPredicate]:
        for child in self.children:
            yield from child.leaves()


@dataclass(frozen=True)
class OrNode(PredicateNode):
    """Logical OR composite."""

    children: tuple[PredicateNode, ...]

    def to_dict(self) -> dict[str, Any]:
        return {
            "op": ConditionOperator.OR.value,
            "conditions": [child.to_dict() for child in self.children],
        }

    def leaves(self) -> Iterator[FieldPredicate | RelationPredicate]:
        for child in self.children:
            yield from child.leaves()


@dataclass(frozen=True)
class NotNode(PredicateNode):
    """Logical NOT composite."""

    child: PredicateNode

    def to_dict(self) -> dict[str, Any]:
        return {
            "op": ConditionOperator.NOT.value,
            "conditions": [self.child.to_dict()],
        }

    def leaves(self) -> Iterator[FieldPredicate | RelationPredicate]:
        yield from self.child.leaves()


@dataclass(frozen=True)
class FieldPredicate(PredicateNode):
    """Single attribute check: ``attr <op> value``. ``attr`` may be dotted."""

    attr: str
    op: ConditionOperator
    value: Any = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "op": self.op.value,
            "attr": self.attr,
            "val": self.value,
        }

    def leaves(self) -> Iterator[FieldPredicate | RelationPredicate]:
        yield self


@dataclass(frozen=True)
class RelationPredicate(PredicateNode):
    """
    Quantified check over a relation: ``some`` / ``none`` / ``every``
    related record satisfies ``where``.  ``where=None`` means "any record".
    """

    relation: str
    kind: ConditionOperator
    where: PredicateNode | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "op": self.kind.value,
            "attr": self.relation,
            "condition": self.where.to_dict() if self.where is not None else None,
        }

    def leaves(self) -> Iterator[FieldPredicate | RelationPredicate]:
        yield self
