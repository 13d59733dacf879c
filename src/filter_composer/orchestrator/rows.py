"""Edits over the flat, form-row representation.

Each row states its connective to the row before it; the first row never
carries one. Functions return new lists.
"""

from __future__ import annotations

from typing import Any, Mapping, Optional, Sequence, Union

from filter_composer.config import settings
from filter_composer.contracts.filters import FlatCondition, Relation, field_updates, resolve_relation
from filter_composer.contracts.validate import is_usable

RowInput = Union[FlatCondition, Mapping[str, Any], None]


def _new_row(row: RowInput, relation: Optional[Relation]) -> FlatCondition:
    if row is None:
        return FlatCondition(relation=relation)
    if isinstance(row, FlatCondition):
        return row.model_copy(update={"relation": relation})
    return FlatCondition.model_validate({**dict(row), "relation": relation})


def add_row(
    rows: Sequence[FlatCondition],
    relation: Union[Relation, str, None] = None,
    row: RowInput = None,
) -> list[FlatCondition]:
    """Append a row; the first row is the base and gets no relation."""
    rel = None if not rows else resolve_relation(relation) or Relation(settings.DEFAULT_RELATION)
    return [*rows, _new_row(row, rel)]


def insert_row_after(
    rows: Sequence[FlatCondition],
    index: int,
    relation: Union[Relation, str],
    row: RowInput = None,
) -> list[FlatCondition]:
    """Insert a row directly below `index`, joined to it by `relation`."""
    if not 0 <= index < len(rows):
        return list(rows)
    rel = resolve_relation(relation) or Relation(settings.DEFAULT_RELATION)
    return [*rows[: index + 1], _new_row(row, rel), *rows[index + 1 :]]


def remove_row(rows: Sequence[FlatCondition], index: int) -> list[FlatCondition]:
    if not 0 <= index < len(rows):
        return list(rows)
    remaining = [*rows[:index], *rows[index + 1 :]]
    if remaining and index == 0:
        remaining[0] = remaining[0].model_copy(update={"relation": None})
    return remaining


def update_row(rows: Sequence[FlatCondition], index: int, updates: Mapping[str, Any]) -> list[FlatCondition]:
    if not 0 <= index < len(rows):
        return list(rows)
    current = rows[index]
    merged = {**current.model_dump(), **field_updates(FlatCondition, updates)}
    out = list(rows)
    out[index] = FlatCondition.model_validate(merged)
    return out


def is_row_valid(row: FlatCondition) -> bool:
    return is_usable(row)


def can_add_row(rows: Sequence[FlatCondition]) -> bool:
    """More rows may be added once every existing row is complete."""
    return bool(rows) and all(is_row_valid(r) for r in rows)
