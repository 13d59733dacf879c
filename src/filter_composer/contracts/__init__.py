"""Contracts package - Pydantic models for filter composition."""

from filter_composer.contracts.filters import (
    BooleanGroup,
    FilterCondition,
    FilterNode,
    FilterTree,
    FlatCondition,
    Operator,
    Relation,
    dump_node,
    parse_flat,
    parse_node,
    resolve_operator,
)
from filter_composer.contracts.outcome import Notice, Outcome, err, warn
from filter_composer.contracts.specs import FilterGroup, match_all
from filter_composer.contracts.validate import check_condition, is_usable

__all__ = [
    # Filters
    "BooleanGroup",
    "FilterCondition",
    "FilterNode",
    "FilterTree",
    "FlatCondition",
    "Operator",
    "Relation",
    "dump_node",
    "parse_flat",
    "parse_node",
    "resolve_operator",
    # Outcome
    "Notice",
    "Outcome",
    "err",
    "warn",
    # Specs
    "FilterGroup",
    "match_all",
    # Validation
    "check_condition",
    "is_usable",
]
