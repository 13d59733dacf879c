from __future__ import annotations

from composer_validation.stubs import relations_of, row
from filter_composer.contracts.filters import Operator, Relation
from filter_composer.orchestrator.rows import (
    add_row,
    can_add_row,
    insert_row_after,
    is_row_valid,
    remove_row,
    update_row,
)


def test_first_row_never_carries_relation() -> None:
    rows = add_row([], "OR", {"field": "host.keyword", "operator": "is", "value": "web01"})
    assert relations_of(rows) == [None]


def test_add_row_defaults_to_and(mixed_rows) -> None:
    out = add_row(mixed_rows)
    assert relations_of(out)[-1] is Relation.AND
    assert len(mixed_rows) == 3


def test_insert_row_after(mixed_rows) -> None:
    out = insert_row_after(mixed_rows, 0, "OR", row("agent", "exists"))
    assert [r.field for r in out] == ["host.keyword", "agent", "status", "verb.keyword"]
    assert out[1].relation is Relation.OR


def test_insert_row_out_of_range_is_noop(mixed_rows) -> None:
    assert insert_row_after(mixed_rows, 5, "OR") == mixed_rows


def test_removing_first_row_clears_new_first_relation(mixed_rows) -> None:
    out = remove_row(mixed_rows, 0)
    assert [r.field for r in out] == ["status", "verb.keyword"]
    assert relations_of(out) == [None, Relation.OR]


def test_remove_middle_row_keeps_relations(mixed_rows) -> None:
    out = remove_row(mixed_rows, 1)
    assert relations_of(out) == [None, Relation.OR]
    assert remove_row(mixed_rows, -1) == mixed_rows


def test_update_row_accepts_camel_case(mixed_rows) -> None:
    out = update_row(mixed_rows, 1, {"operator": "range", "minValue": "400", "logic": "OR"})
    assert out[1].operator is Operator.range
    assert out[1].min_value == "400"
    assert out[1].relation is Relation.OR
    assert mixed_rows[1].operator is Operator.is_not


def test_row_validity() -> None:
    assert is_row_valid(row("agent", "exists"))
    assert not is_row_valid(row("status", "is", ""))
    assert not is_row_valid(row("", "is", "x"))
    assert not is_row_valid(row("bytes", "range"))
    assert is_row_valid(row("bytes", "range", maxValue="10"))


def test_can_add_row(mixed_rows) -> None:
    assert can_add_row(mixed_rows)
    assert not can_add_row([])
    assert not can_add_row(add_row(mixed_rows))
