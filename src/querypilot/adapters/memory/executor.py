"""InMemoryExecutor — list-of-mappings fake executor for tests and examples."""

from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from ...operators import ConditionOperator
from ...pagination import get_field
from ...predicates import (
    AndNode,
    FieldPredicate,
    NotNode,
    OrNode,
    PredicateNode,
    RelationPredicate,
)
from ...ports.executor import IQueryExecutor

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable, Sequence

    from ...plan import GroupBySpec, QueryPlan


def _lower(value: Any) -> str:
    return str(value).lower()


def _compare(check: Callable[[Any, Any], bool]) -> Callable[[Any, Any], bool]:
    def guarded(field_value: Any, condition_value: Any) -> bool:
        if field_value is None or condition_value is None:
            return False
        return check(field_value, condition_value)

    return guarded


_OPERATORS: dict[ConditionOperator, Callable[[Any, Any], bool]] = {
    ConditionOperator.EQ: lambda a, b: a == b,
    ConditionOperator.NE: lambda a, b: a != b,
    ConditionOperator.GT: _compare(lambda a, b: a > b),
    ConditionOperator.LT: _compare(lambda a, b: a < b),
    ConditionOperator.GE: _compare(lambda a, b: a >= b),
    ConditionOperator.LE: _compare(lambda a, b: a <= b),
    ConditionOperator.IN: lambda a, b: a in b,
    ConditionOperator.IEQ: _compare(lambda a, b: _lower(a) == _lower(b)),
    ConditionOperator.ICONTAINS: _compare(lambda a, b: _lower(b) in _lower(a)),
    ConditionOperator.ISTARTSWITH: _compare(
        lambda a, b: _lower(a).startswith(_lower(b))
    ),
    ConditionOperator.IS_NULL: lambda a, _: a is None,
    ConditionOperator.IS_NOT_NULL: lambda a, _: a is not None,
}

_NULL_CHECKS = frozenset({ConditionOperator.IS_NULL, ConditionOperator.IS_NOT_NULL})


def resolve_path(obj: Any, path: str) -> Any:
    """
    Resolve a dot-separated path on *obj*.

    Lists met along the way are traversed implicitly: ``posts.title``
    on a record with a ``posts`` list yields the list of titles.
    """
    for part in path.split("."):
        if obj is None:
            return None
        if isinstance(obj, list | tuple):
            return [resolve_path(item, part) for item in obj]
        obj = get_field(obj, part)
    return obj


def evaluate(node: PredicateNode | None, record: Any) -> bool:
    """Evaluate a predicate tree against one record."""
    if node is None:
        return True
    if isinstance(node, AndNode):
        return all(evaluate(child, record) for child in node.children)
    if isinstance(node, OrNode):
        return any(evaluate(child, record) for child in node.children)
    if isinstance(node, NotNode):
        return not evaluate(node.child, record)
    if isinstance(node, RelationPredicate):
        return _evaluate_relation(node, record)
    if isinstance(node, FieldPredicate):
        return _evaluate_field(node, resolve_path(record, node.attr))
    raise TypeError(f"Unsupported predicate node: {type(node).__name__}")


def _evaluate_field(node: FieldPredicate, actual: Any) -> bool:
    check = _OPERATORS.get(node.op)
    if check is None:
        raise ValueError(f"Unsupported operator for in-memory evaluation: {node.op}")
    if isinstance(actual, list) and node.op not in _NULL_CHECKS:
        return any(check(item, node.value) for item in actual)
    return check(actual, node.value)


def _evaluate_relation(node: RelationPredicate, record: Any) -> bool:
    related = resolve_path(record, node.relation)
    if related is None:
        items: list[Any] = []
    elif isinstance(related, Mapping):
        items = [related]
    else:
        items = list(related)
    matches = (evaluate(node.where, item) for item in items)
    if node.kind is ConditionOperator.SOME:
        return any(matches)
    if node.kind is ConditionOperator.NONE:
        return not any(matches)
    if node.kind is ConditionOperator.EVERY:
        return all(matches)
    raise ValueError(f"Unsupported relation quantifier: {node.kind}")


def _sort_key(field: str) -> Callable[[Any], tuple[bool, Any]]:
    def key(row: Any) -> tuple[bool, Any]:
        value = resolve_path(row, field)
        return (value is None, value)

    return key


def sort_rows(rows: Iterable[Any], order_by: Sequence[tuple[str, str]]) -> list[Any]:
    ordered = list(rows)
    # Stable sorts applied least-significant key first.
    for field, direction in reversed(order_by):
        ordered.sort(key=_sort_key(field), reverse=direction == "desc")
    return ordered


def _project(row: Any, projection: Any) -> Any:
    if not isinstance(projection, Mapping) or "select" not in projection:
        return dict(row) if isinstance(row, Mapping) else row
    select = projection["select"]
    if isinstance(select, Mapping):
        fields = [name for name, wanted in select.items() if wanted]
    else:
        fields = list(select)
    return {name: get_field(row, name) for name in fields}


def _fields(spec: Any) -> list[str]:
    if isinstance(spec, Mapping):
        return [name for name, wanted in spec.items() if wanted]
    if isinstance(spec, str):
        return [spec]
    return list(spec)


def _aggregate(rows: Sequence[Any], aggregations: Mapping[str, Any]) -> dict[str, Any]:
    result: dict[str, Any] = {}
    for key, spec in aggregations.items():
        kind = key.lstrip("_")
        if kind == "count":
            if spec is True:
                result[key] = len(rows)
            else:
                result[key] = {
                    name: sum(1 for row in rows if resolve_path(row, name) is not None)
                    for name in _fields(spec)
                }
            continue
        values_by_field = {
            name: [v for row in rows if (v := resolve_path(row, name)) is not None]
            for name in _fields(spec)
        }
        if kind == "sum":
            result[key] = {n: sum(v) if v else None for n, v in values_by_field.items()}
        elif kind == "avg":
            result[key] = {
                n: sum(v) / len(v) if v else None for n, v in values_by_field.items()
            }
        elif kind == "min":
            result[key] = {n: min(v) if v else None for n, v in values_by_field.items()}
        elif kind == "max":
            result[key] = {n: max(v) if v else None for n, v in values_by_field.items()}
        else:
            raise ValueError(f"Unsupported aggregation: {key}")
    return result


class InMemoryExecutor(IQueryExecutor):
    """In-memory implementation of ``IQueryExecutor``.

    Stores rows in plain lists keyed by collection name and evaluates plans
    with Python semantics.  Cursor windows follow the usual ORM behaviour:
    the window starts *at* the anchor row, then ``skip``/``take`` apply.
    """

    def __init__(self, collections: Mapping[str, Iterable[Any]] | None = None) -> None:
        self._collections: dict[str, list[Any]] = {
            name: list(rows) for name, rows in (collections or {}).items()
        }

    def add(self, model: str, *rows: Any) -> None:
        self._collections.setdefault(model, []).extend(rows)

    def _rows(self, model: str | None) -> list[Any]:
        if model not in self._collections:
            raise LookupError(f"Unknown collection: {model!r}")
        return self._collections[model]

    def _matching(self, model: str | None, where: PredicateNode | None) -> list[Any]:
        return [row for row in self._rows(model) if evaluate(where, row)]

    async def find(self, plan: QueryPlan) -> list[Any]:
        rows = sort_rows(self._matching(plan.model, plan.where), plan.order_by)
        if plan.cursor:
            ((field, value),) = plan.cursor.items()
            anchor = next(
                (i for i, row in enumerate(rows) if get_field(row, field) == value),
                None,
            )
            if anchor is None:
                return []
            rows = rows[anchor:]
        if plan.skip:
            rows = rows[plan.skip :]
        if plan.take is not None:
            rows = rows[: plan.take]
        return [_project(row, plan.projection) for row in rows]

    async def count(self, plan: QueryPlan) -> int:
        return len(self._matching(plan.model, plan.where))

    async def aggregate(self, plan: QueryPlan) -> dict[str, Any]:
        rows = self._matching(plan.model, plan.where)
        return _aggregate(rows, plan.aggregations or {})

    async def group_by(self, spec: GroupBySpec) -> list[dict[str, Any]]:
        groups: dict[tuple[Any, ...], list[Any]] = {}
        for row in self._matching(spec.model, spec.where):
            key = tuple(resolve_path(row, name) for name in spec.by)
            groups.setdefault(key, []).append(row)
        result: list[dict[str, Any]] = []
        for key, rows in groups.items():
            group_row = dict(zip(spec.by, key, strict=True))
            group_row.update(_aggregate(rows, spec.aggregations))
            if isinstance(spec.having, PredicateNode) and not evaluate(
                spec.having, group_row
            ):
                continue
            result.append(group_row)
        return result
