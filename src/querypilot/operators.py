from enum import Enum


class ConditionOperator(str, Enum):
    """Operators that can appear in a compiled predicate tree."""

    # Standard comparison
    EQ = "="
    NE = "!="
    GT = ">"
    LT = "<"
    GE = ">="
    LE = "<="
    IN = "in"

    # String operations
    IEQ = "iexact"
    ICONTAINS = "icontains"
    ISTARTSWITH = "istartswith"

    # Null checks
    IS_NULL = "is_null"
    IS_NOT_NULL = "is_not_null"

    # Relation existence
    SOME = "some"
    NONE = "none"
    EVERY = "every"

    # Logical operators
    AND = "and"
    OR = "or"
    NOT = "not"


RELATION_OPERATORS: frozenset[ConditionOperator] = frozenset(
    {ConditionOperator.SOME, ConditionOperator.NONE, ConditionOperator.EVERY}
)
