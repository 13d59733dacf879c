from __future__ import annotations
"""Condition completeness checks shared by the compiler and the preview.

A condition that fails these checks is skipped rather than raised, so that
half-filled form rows never break rendering or compilation.
"""

from typing import Any, Optional

from filter_composer.contracts.filters import FilterCondition, Operator
from filter_composer.contracts.outcome import Notice, warn


# ============================================================================
# Operator value requirements
# ============================================================================

# What each operator needs besides a field.
#   "value"  - a non-empty `value`
#   "bound"  - at least one of `min_value` / `max_value`
#   None     - nothing
OPERATOR_REQUIREMENTS: dict[Operator, Optional[str]] = {
    Operator.is_: "value",
    Operator.is_not: "value",
    Operator.is_one_of: "value",
    Operator.is_not_one_of: "value",
    Operator.exists: None,
    Operator.does_not_exist: None,
    Operator.range: "bound",
    Operator.prefix: "value",
    Operator.wildcard: "value",
    Operator.query_string: "value",
}


def is_blank(value: Any) -> bool:
    """True for None, empty/whitespace strings and empty collections."""
    if value is None:
        return True
    if isinstance(value, str):
        return value.strip() == ""
    if isinstance(value, (list, tuple, set)):
        return all(is_blank(v) for v in value)
    return False


def check_condition(condition: FilterCondition) -> Optional[Notice]:
    """Return a notice describing why the condition cannot become a clause."""
    if not condition.field:
        return warn("missing_field", "Filter condition has no field", node_id=condition.id)
    if condition.operator is None:
        return warn(
            "missing_operator",
            f"Filter condition on '{condition.field}' has no recognised operator",
            node_id=condition.id,
            field=condition.field,
        )

    requirement = OPERATOR_REQUIREMENTS[condition.operator]
    if requirement == "value" and is_blank(condition.value):
        return warn(
            "missing_value",
            f"Operator '{condition.operator.value}' requires a value",
            node_id=condition.id,
            field=condition.field,
        )
    if requirement == "bound" and is_blank(condition.min_value) and is_blank(condition.max_value):
        return warn(
            "missing_range_bound",
            "Range filter requires at least one bound",
            node_id=condition.id,
            field=condition.field,
        )
    return None


def is_usable(condition: FilterCondition) -> bool:
    return check_condition(condition) is None
