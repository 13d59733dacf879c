"""Right-associative grouping of flat, relation-tagged rows.

Both the compiler and the preview fold rows through `fold_right`, so a
nested group in the query document and a pair of parentheses in the
preview are always produced by the same decision.
"""

from __future__ import annotations

from typing import Any, Callable, Iterable, Optional, Sequence, TypeVar

from filter_composer.config import settings
from filter_composer.contracts.filters import FilterCondition, FlatCondition, Relation, parse_flat
from filter_composer.contracts.validate import is_usable

T = TypeVar("T")


def usable_rows(rows: Sequence[FlatCondition]) -> list[FlatCondition]:
    return [r for r in rows if is_usable(r)]


def row_relations(rows: Sequence[FlatCondition]) -> list[Optional[Relation]]:
    """Connective before each row; the first slot is always None."""
    default = Relation(settings.DEFAULT_RELATION)
    return [None] + [r.relation or default for r in rows[1:]]


def uniform_relation(relations: Sequence[Optional[Relation]]) -> Optional[Relation]:
    """The single relation used throughout, or None when relations are mixed."""
    tail = set(relations[1:])
    if len(tail) == 1:
        return tail.pop()
    return None


def nests_at(relations: Sequence[Optional[Relation]], i: int) -> bool:
    """Whether combining row `i` with the folded tail needs an explicit group.

    The tail was produced by `relations[i + 2]`; a group boundary is needed
    only when that differs from the relation applied now, `relations[i + 1]`.
    """
    if i + 2 >= len(relations):
        return False
    return relations[i + 2] != relations[i + 1]


def fold_right(
    items: Sequence[T],
    relations: Sequence[Optional[Relation]],
    combine: Callable[[T, T, Relation, bool], T],
) -> T:
    """Fold `items` from the right: combine(item, acc, relation, nested)."""
    acc = items[-1]
    for i in range(len(items) - 2, -1, -1):
        relation = relations[i + 1]
        assert relation is not None
        acc = combine(items[i], acc, relation, nests_at(relations, i))
    return acc


def as_rows(rows: Iterable[Any]) -> list[FlatCondition]:
    """Accept FlatCondition rows, plain conditions or raw dicts."""
    rows = list(rows)
    if all(isinstance(r, FlatCondition) for r in rows):
        return rows
    return parse_flat([r.model_dump() if isinstance(r, FilterCondition) else r for r in rows])
