"""Copy-on-write structural edits over a FilterTree.

Every function returns a new tree value and leaves its input untouched.
Unknown ids are not errors: the input tree is returned unchanged.
"""

from __future__ import annotations

from typing import Any, Iterator, Mapping, Optional, Union

from filter_composer.contracts.filters import (
    BooleanGroup,
    FilterCondition,
    FilterNode,
    FilterTree,
    Relation,
    field_updates,
    new_id,
    resolve_relation,
)
from filter_composer.contracts.validate import is_usable
from filter_composer.util.logging import get_logger

logger = get_logger("orchestrator.tree_ops")

ConditionInput = Union[FilterCondition, Mapping[str, Any]]


# ============================================================================
# Lookup
# ============================================================================


def iter_nodes(node: Optional[FilterNode]) -> Iterator[FilterNode]:
    """Depth-first, pre-order walk."""
    if node is None:
        return
    yield node
    if isinstance(node, BooleanGroup):
        for child in node.children:
            yield from iter_nodes(child)


def collect_ids(tree: FilterTree) -> set[str]:
    return {n.id for n in iter_nodes(tree.root)}


def find_node_by_id(tree: FilterTree, node_id: str) -> Optional[FilterNode]:
    for node in iter_nodes(tree.root):
        if node.id == node_id:
            return node
    return None


def _path_to(node: FilterNode, node_id: str) -> Optional[list[str]]:
    if node.id == node_id:
        return [node.id]
    if isinstance(node, BooleanGroup):
        for child in node.children:
            tail = _path_to(child, node_id)
            if tail is not None:
                return [node.id, *tail]
    return None


def get_node_path(tree: FilterTree, node_id: str) -> list[str]:
    """Ancestor ids from the root down to the node, inclusive; [] if absent."""
    if tree.root is None:
        return []
    return _path_to(tree.root, node_id) or []


def flatten_conditions(node: Optional[FilterNode]) -> list[FilterCondition]:
    return [n for n in iter_nodes(node) if isinstance(n, FilterCondition)]


# ============================================================================
# Normalization
# ============================================================================


def normalize(node: Optional[FilterNode]) -> Optional[FilterNode]:
    """Drop empty groups and hoist the sole child of one-child groups, bottom-up."""
    if node is None or isinstance(node, FilterCondition):
        return node

    children = [c for c in (normalize(child) for child in node.children) if c is not None]
    if not children:
        return None
    if len(children) == 1:
        return children[0]
    if children == node.children:
        return node
    return node.model_copy(update={"children": children})


def normalize_tree(tree: FilterTree) -> FilterTree:
    root = normalize(tree.root)
    if root is tree.root:
        return tree
    return tree.model_copy(update={"root": root})


def prune(node: Optional[FilterNode]) -> Optional[FilterNode]:
    """Remove conditions that cannot produce a clause, then normalize."""
    if node is None:
        return None
    if isinstance(node, FilterCondition):
        return node if is_usable(node) else None
    children = [c for c in (prune(child) for child in node.children) if c is not None]
    return normalize(node.model_copy(update={"children": children}))


# ============================================================================
# Edits
# ============================================================================


def _as_condition(condition: ConditionInput) -> FilterCondition:
    if isinstance(condition, Mapping):
        return FilterCondition.model_validate(dict(condition))
    if type(condition) is not FilterCondition:
        # Flat rows carry a relation that has no meaning inside a tree.
        return FilterCondition.model_validate(
            condition.model_dump(include=set(FilterCondition.model_fields))
        )
    return condition


def _attach(
    node: FilterNode, parent_id: str, relation: Relation, new_node: FilterNode
) -> FilterNode:
    if node.id == parent_id:
        if isinstance(node, BooleanGroup) and node.relation == relation:
            return node.model_copy(update={"children": [*node.children, new_node]})
        # A leaf, or a group of the other relation: the existing subtree
        # becomes the first child of a new group.
        return BooleanGroup(relation=relation, children=[node, new_node])

    if isinstance(node, BooleanGroup):
        return node.model_copy(
            update={"children": [_attach(c, parent_id, relation, new_node) for c in node.children]}
        )
    return node


def initialize_with_filter(condition: ConditionInput) -> FilterTree:
    return FilterTree(root=_as_condition(condition))


def add_filter(
    tree: FilterTree,
    parent_id: Optional[str],
    relation: Union[Relation, str],
    condition: ConditionInput,
) -> FilterTree:
    """Combine `condition` with the node `parent_id` under `relation`."""
    new_condition = _as_condition(condition)
    if tree.root is None:
        return tree.model_copy(update={"root": new_condition})

    if parent_id is None or find_node_by_id(tree, parent_id) is None:
        logger.debug("add_filter: unknown parent id %r", parent_id)
        return tree

    if new_condition.id in collect_ids(tree):
        new_condition = new_condition.model_copy(update={"id": new_id()})

    rel = resolve_relation(relation) or Relation.AND
    root = _attach(tree.root, parent_id, rel, new_condition)
    logger.debug("add_filter: %s %s under %s", new_condition.id, rel.value, parent_id)
    return tree.model_copy(update={"root": root})


def _modify(
    node: FilterNode,
    node_id: str,
    relation: Optional[Relation],
    updates: Mapping[str, Any],
) -> FilterNode:
    if node.id == node_id:
        if isinstance(node, FilterCondition):
            merged = {**node.model_dump(), **field_updates(type(node), updates)}
            return type(node).model_validate(merged)
        if relation is not None:
            return node.model_copy(update={"relation": relation})
        return node

    if isinstance(node, BooleanGroup):
        return node.model_copy(
            update={"children": [_modify(c, node_id, relation, updates) for c in node.children]}
        )
    return node


def modify_filter(
    tree: FilterTree,
    node_id: str,
    relation: Optional[Union[Relation, str]] = None,
    updates: Optional[Mapping[str, Any]] = None,
) -> FilterTree:
    """Merge `updates` into a condition, or set a group's relation."""
    if tree.root is None or find_node_by_id(tree, node_id) is None:
        return tree
    root = _modify(tree.root, node_id, resolve_relation(relation), updates or {})
    return tree.model_copy(update={"root": root})


def _remove(node: FilterNode, node_id: str) -> Optional[FilterNode]:
    if node.id == node_id:
        return None
    if isinstance(node, BooleanGroup):
        children = [c for c in (_remove(child, node_id) for child in node.children) if c is not None]
        return node.model_copy(update={"children": children})
    return node


def remove_filter(tree: FilterTree, node_id: str) -> FilterTree:
    """Delete a node and re-normalize so every group keeps at least two children."""
    if tree.root is None or find_node_by_id(tree, node_id) is None:
        return tree
    root = normalize(_remove(tree.root, node_id))
    logger.debug("remove_filter: %s", node_id)
    return tree.model_copy(update={"root": root})


def _toggle(node: FilterNode, node_id: str) -> FilterNode:
    if not isinstance(node, BooleanGroup):
        return node
    if node.id == node_id:
        return node.model_copy(update={"relation": node.relation.flipped()})
    return node.model_copy(update={"children": [_toggle(c, node_id) for c in node.children]})


def toggle_operator(tree: FilterTree, node_id: str) -> FilterTree:
    """Flip a group's relation AND <-> OR; leaves are left alone."""
    target = find_node_by_id(tree, node_id)
    if tree.root is None or not isinstance(target, BooleanGroup):
        return tree
    return tree.model_copy(update={"root": _toggle(tree.root, node_id)})


def move_filter(
    tree: FilterTree,
    node_id: str,
    target_id: str,
    relation: Union[Relation, str],
) -> FilterTree:
    """Detach a node and combine it with `target_id` under `relation`."""
    moving = find_node_by_id(tree, node_id)
    if moving is None or node_id == target_id or find_node_by_id(tree, target_id) is None:
        return tree
    if any(n.id == target_id for n in iter_nodes(moving)):
        return tree

    detached = remove_filter(tree, node_id)
    if detached.root is None or find_node_by_id(detached, target_id) is None:
        # The target collapsed away when the node was detached.
        return tree

    rel = resolve_relation(relation) or Relation.AND
    root = _attach(detached.root, target_id, rel, moving)
    return detached.model_copy(update={"root": root})


def reset(tree: Optional[FilterTree] = None) -> FilterTree:
    return FilterTree()
