"""querypilot - declarative list queries compiled into backend-agnostic plans."""

from __future__ import annotations

from .builder import QueryBuilder
from .compiler import (
    combine_and,
    combine_or,
    compile_exact_search,
    compile_filters,
    compile_not_filters,
    compile_prefix_search,
    compile_relation_filters,
    compile_search,
    date_range,
    negate,
    number_range,
)
from .conditions import (
    UNSET,
    ArrayIn,
    Boolean,
    Condition,
    Exact,
    NotEqual,
    Range,
    RelationExistence,
    resolve_condition,
    resolve_filters,
)
from .config import QueryPilotConfig
from .exceptions import (
    InvalidArgumentError,
    NotFoundError,
    PresetNotFoundError,
    QueryPilotError,
    WebhookDeliveryError,
)
from .operators import ConditionOperator
from .pagination import (
    calculate_total_pages,
    compute_cursor_window,
    compute_offset,
    process_cursor_results,
)
from .plan import GroupBySpec, PaginationMode, QueryPlan, QueryPlanAssembler
from .predicates import (
    AndNode,
    FieldPredicate,
    NotNode,
    OrNode,
    PredicateNode,
    RelationPredicate,
)
from .request import QueryRequest
from .response import CursorMeta, CursorResponse, PageMeta, PagedResponse

__all__ = [
    "UNSET",
    "AndNode",
    "ArrayIn",
    "Boolean",
    "Condition",
    "ConditionOperator",
    "CursorMeta",
    "CursorResponse",
    "Exact",
    "FieldPredicate",
    "GroupBySpec",
    "InvalidArgumentError",
    "NotEqual",
    "NotFoundError",
    "NotNode",
    "OrNode",
    "PageMeta",
    "PagedResponse",
    "PaginationMode",
    "PredicateNode",
    "PresetNotFoundError",
    "QueryBuilder",
    "QueryPilotConfig",
    "QueryPilotError",
    "QueryPlan",
    "QueryPlanAssembler",
    "QueryRequest",
    "Range",
    "RelationExistence",
    "RelationPredicate",
    "WebhookDeliveryError",
    "calculate_total_pages",
    "combine_and",
    "combine_or",
    "compile_exact_search",
    "compile_filters",
    "compile_not_filters",
    "compile_prefix_search",
    "compile_relation_filters",
    "compile_search",
    "compute_cursor_window",
    "compute_offset",
    "date_range",
    "negate",
    "number_range",
    "process_cursor_results",
    "resolve_condition",
    "resolve_filters",
]
