from __future__ import annotations

from typing import Any, Optional

from filter_composer.contracts.filters import (
    BooleanGroup,
    FilterCondition,
    FilterTree,
    FlatCondition,
    Relation,
)


def cond(field: str, operator: Optional[str], value: Any = "", node_id: Optional[str] = None, **extra: Any) -> FilterCondition:
    data: dict[str, Any] = {"field": field, "operator": operator, "value": value, **extra}
    if node_id is not None:
        data["id"] = node_id
    return FilterCondition.model_validate(data)


def row(field: str, operator: Optional[str], value: Any = "", relation: Optional[str] = None, **extra: Any) -> FlatCondition:
    return FlatCondition.model_validate(
        {"field": field, "operator": operator, "value": value, "relation": relation, **extra}
    )


def group(relation: str, *children: Any, node_id: Optional[str] = None) -> BooleanGroup:
    data: dict[str, Any] = {"relation": relation, "children": list(children)}
    if node_id is not None:
        data["id"] = node_id
    return BooleanGroup.model_validate(data)


def tree(root: Any = None) -> FilterTree:
    return FilterTree(id="tree_test", root=root)


def build_mixed_tree() -> FilterTree:
    """(a AND b) OR c, with a nested AND group g_and under the OR root."""
    a = cond("host.keyword", "is", "web01", node_id="a")
    b = cond("status", "is_not", "500", node_id="b")
    c = cond("verb.keyword", "is_one_of", "GET,POST", node_id="c")
    return tree(group("OR", group("AND", a, b, node_id="g_and"), c, node_id="g_or"))


def relations_of(rows: list[FlatCondition]) -> list[Optional[Relation]]:
    return [r.relation for r in rows]
