"""Operator-to-clause table.

One table serves both the tree and the flat-list front ends. Each builder
receives a condition that already passed `check_condition` and returns a
single query clause.
"""

from __future__ import annotations

from typing import Any, Callable, Optional

from filter_composer.contracts.filters import FilterCondition, Operator
from filter_composer.contracts.outcome import Notice
from filter_composer.contracts.validate import check_condition, is_blank
from filter_composer.engine.coercion import (
    as_list,
    coerce_value,
    is_date_field,
    is_exact_field,
    is_numeric,
)
from filter_composer.util.logging import get_logger

logger = get_logger("engine.clauses")

Clause = dict[str, Any]

# Notices for rows that are simply not filled in yet; these are skipped quietly.
_SILENT_CODES = {"missing_field", "missing_operator"}


def must_not(clause: Clause) -> Clause:
    return {"bool": {"must_not": [clause]}}


def _term_like(field: str, value: Any) -> bool:
    return is_exact_field(field) or is_date_field(field) or is_numeric(value)


def _equality(c: FilterCondition) -> Clause:
    if _term_like(c.field, c.value):
        return {"term": {c.field: coerce_value(c.field, c.value)}}
    return {"match": {c.field: c.value}}


def _is(c: FilterCondition) -> Clause:
    return _equality(c)


def _is_not(c: FilterCondition) -> Clause:
    return must_not(_equality(c))


def _terms(c: FilterCondition) -> Clause:
    return {"terms": {c.field: [coerce_value(c.field, v) for v in as_list(c.value)]}}


def _is_one_of(c: FilterCondition) -> Clause:
    return _terms(c)


def _is_not_one_of(c: FilterCondition) -> Clause:
    return must_not(_terms(c))


def _exists(c: FilterCondition) -> Clause:
    return {"exists": {"field": c.field}}


def _does_not_exist(c: FilterCondition) -> Clause:
    return must_not(_exists(c))


def _range(c: FilterCondition) -> Clause:
    bounds: dict[str, Any] = {}
    if not is_blank(c.min_value):
        bounds[c.min_operator] = coerce_value(c.field, c.min_value)
    if not is_blank(c.max_value):
        bounds[c.max_operator] = coerce_value(c.field, c.max_value)
    return {"range": {c.field: bounds}}


def _prefix(c: FilterCondition) -> Clause:
    if is_exact_field(c.field):
        return {"prefix": {c.field: c.value}}
    return {"wildcard": {c.field: {"value": f"{c.value}*", "case_insensitive": True}}}


def _wildcard(c: FilterCondition) -> Clause:
    return {"wildcard": {c.field: {"value": c.value, "case_insensitive": True}}}


def _query_string(c: FilterCondition) -> Clause:
    return {"query_string": {"default_field": c.field, "query": c.value}}


CLAUSE_BUILDERS: dict[Operator, Callable[[FilterCondition], Clause]] = {
    Operator.is_: _is,
    Operator.is_not: _is_not,
    Operator.is_one_of: _is_one_of,
    Operator.is_not_one_of: _is_not_one_of,
    Operator.exists: _exists,
    Operator.does_not_exist: _does_not_exist,
    Operator.range: _range,
    Operator.prefix: _prefix,
    Operator.wildcard: _wildcard,
    Operator.query_string: _query_string,
}


def build_clause(
    condition: FilterCondition,
    notices: Optional[list[Notice]] = None,
) -> Optional[Clause]:
    """Build the clause for one condition, or None when it cannot be built."""
    problem = check_condition(condition)
    if problem is not None:
        if problem.code not in _SILENT_CODES:
            logger.warning("Dropping filter condition: %s", problem.message)
            if notices is not None:
                notices.append(problem)
        return None
    assert condition.operator is not None
    return CLAUSE_BUILDERS[condition.operator](condition)
