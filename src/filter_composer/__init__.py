"""Compose nested AND/OR filters and compile them to search-engine query documents."""

from filter_composer.contracts import (
    BooleanGroup,
    FilterCondition,
    FilterGroup,
    FilterTree,
    FlatCondition,
    Operator,
    Relation,
)
from filter_composer.engine.compiler import compile_flat, compile_node, compile_tree
from filter_composer.engine.preview import preview, preview_flat, preview_flat_html, preview_html
from filter_composer.orchestrator.session import FilterSession

__version__ = "0.1.0"

__all__ = [
    "BooleanGroup",
    "FilterCondition",
    "FilterGroup",
    "FilterTree",
    "FlatCondition",
    "Operator",
    "Relation",
    "compile_flat",
    "compile_node",
    "compile_tree",
    "preview",
    "preview_flat",
    "preview_flat_html",
    "preview_html",
    "FilterSession",
]
