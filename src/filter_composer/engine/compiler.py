"""Lower filter trees and flat row lists into boolean query documents.

Tree lowering follows the tree's explicit groups. A child group with the
same relation as its parent is spliced into the parent's clause list, so a
nested `bool` appears exactly where the relation changes; the preview puts
its parentheses at the same places.

Flat lowering groups rows right-associatively (see `engine.grouping`):
``A OR B AND C`` becomes ``should[A, must[B, C]]``.
"""

from __future__ import annotations

from typing import Any, Iterable, NamedTuple, Optional, Sequence, Union

from filter_composer.contracts.filters import (
    BooleanGroup,
    FilterCondition,
    FilterNode,
    FilterTree,
    FlatCondition,
    Relation,
)
from filter_composer.contracts.outcome import Notice, Outcome
from filter_composer.contracts.specs import match_all
from filter_composer.engine.clauses import Clause, build_clause
from filter_composer.engine.grouping import as_rows, fold_right, row_relations, uniform_relation

QueryDocument = dict[str, Any]


def _bool_key(relation: Relation) -> str:
    return "should" if relation is Relation.OR else "must"


def bool_clause(relation: Relation, clauses: Sequence[Clause]) -> Clause:
    if relation is Relation.OR:
        return {"bool": {"should": list(clauses), "minimum_should_match": 1}}
    return {"bool": {"must": list(clauses)}}


def as_document(clause: Optional[Clause]) -> QueryDocument:
    if clause is None:
        return match_all()
    return {"query": clause}


# ============================================================================
# Tree lowering
# ============================================================================


class _Lowered(NamedTuple):
    clause: Clause
    # Set when `clause` is a bool built from a group of this relation.
    relation: Optional[Relation]


def _lower(node: FilterNode, notices: list[Notice]) -> Optional[_Lowered]:
    if isinstance(node, FilterCondition):
        clause = build_clause(node, notices)
        return None if clause is None else _Lowered(clause, None)

    lowered = [l for l in (_lower(child, notices) for child in node.children) if l is not None]
    if not lowered:
        return None
    if len(lowered) == 1:
        return lowered[0]

    key = _bool_key(node.relation)
    clauses: list[Clause] = []
    for child in lowered:
        if child.relation is node.relation:
            clauses.extend(child.clause["bool"][key])
        else:
            clauses.append(child.clause)
    return _Lowered(bool_clause(node.relation, clauses), node.relation)


def compile_node(node: Optional[FilterNode], notices: Optional[list[Notice]] = None) -> Optional[Clause]:
    """The clause for a node, or None when nothing in it can be compiled."""
    if node is None:
        return None
    lowered = _lower(node, notices if notices is not None else [])
    return None if lowered is None else lowered.clause


def _root_of(source: Union[FilterTree, FilterNode, None]) -> Optional[FilterNode]:
    if isinstance(source, FilterTree):
        return source.root
    return source


def compile_tree_report(source: Union[FilterTree, FilterNode, None]) -> Outcome[QueryDocument]:
    notices: list[Notice] = []
    doc = as_document(compile_node(_root_of(source), notices))
    return Outcome.success(data=doc, warnings=notices)


def compile_tree(source: Union[FilterTree, FilterNode, None]) -> QueryDocument:
    """`{"query": ...}` for a tree; `match_all` when it is empty."""
    return as_document(compile_node(_root_of(source)))


# ============================================================================
# Flat lowering
# ============================================================================


def _combine(clause: Clause, acc: Clause, relation: Relation, nested: bool) -> Clause:
    key = _bool_key(relation)
    existing = acc.get("bool", {}).get(key)
    if not nested and existing is not None:
        return {"bool": {**acc["bool"], key: [clause, *existing]}}
    return bool_clause(relation, [clause, acc])


def compile_flat_clause(rows: Iterable[Any], notices: Optional[list[Notice]] = None) -> Optional[Clause]:
    sink = notices if notices is not None else []
    kept: list[FlatCondition] = []
    clauses: list[Clause] = []
    for row in as_rows(rows):
        clause = build_clause(row, sink)
        if clause is not None:
            kept.append(row)
            clauses.append(clause)

    if not clauses:
        return None
    if len(clauses) == 1:
        return clauses[0]

    relations = row_relations(kept)
    uniform = uniform_relation(relations)
    if uniform is not None:
        return bool_clause(uniform, clauses)
    return fold_right(clauses, relations, _combine)


def compile_flat_report(rows: Iterable[Any]) -> Outcome[QueryDocument]:
    notices: list[Notice] = []
    doc = as_document(compile_flat_clause(rows, notices))
    return Outcome.success(data=doc, warnings=notices)


def compile_flat(rows: Iterable[Any]) -> QueryDocument:
    """`{"query": ...}` for relation-tagged rows; `match_all` when none are usable."""
    return as_document(compile_flat_clause(rows))
