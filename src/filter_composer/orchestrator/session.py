"""Editing session holding the current filter tree."""

from __future__ import annotations

from typing import Any, Callable, Mapping, Optional, Union

from filter_composer.contracts.filters import FilterNode, FilterTree, Relation
from filter_composer.contracts.outcome import Outcome
from filter_composer.contracts.specs import FilterGroup
from filter_composer.engine.compiler import QueryDocument, compile_tree, compile_tree_report
from filter_composer.engine.preview import preview, preview_html
from filter_composer.orchestrator import tree_ops
from filter_composer.orchestrator.submission import build_filter_group
from filter_composer.util.logging import get_logger

logger = get_logger("orchestrator.session")

Listener = Callable[[FilterTree], None]


class FilterSession:
    """Owns exactly one current tree and publishes every replacement.

    Edits never touch the current value; each produces a new tree that
    replaces it. Listeners are called only when the value actually changes.
    """

    def __init__(self, tree: Optional[FilterTree] = None) -> None:
        self._tree = tree or FilterTree()
        self._listeners: list[Listener] = []

    @property
    def tree(self) -> FilterTree:
        return self._tree

    def subscribe(self, listener: Listener, *, replay: bool = True) -> Callable[[], None]:
        """Register a listener; returns a callable that unsubscribes it."""
        self._listeners.append(listener)
        if replay:
            listener(self._tree)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def set_tree(self, tree: FilterTree) -> FilterTree:
        if tree is self._tree:
            return tree
        self._tree = tree
        for listener in list(self._listeners):
            listener(tree)
        return tree

    # Edits

    def initialize_with_filter(self, condition: Any) -> FilterTree:
        return self.set_tree(tree_ops.initialize_with_filter(condition))

    def add_filter(
        self,
        parent_id: Optional[str],
        relation: Union[Relation, str],
        condition: Any,
    ) -> FilterTree:
        return self.set_tree(tree_ops.add_filter(self._tree, parent_id, relation, condition))

    def modify_filter(
        self,
        node_id: str,
        relation: Optional[Union[Relation, str]] = None,
        updates: Optional[Mapping[str, Any]] = None,
    ) -> FilterTree:
        return self.set_tree(tree_ops.modify_filter(self._tree, node_id, relation, updates))

    def remove_filter(self, node_id: str) -> FilterTree:
        return self.set_tree(tree_ops.remove_filter(self._tree, node_id))

    def toggle_operator(self, node_id: str) -> FilterTree:
        return self.set_tree(tree_ops.toggle_operator(self._tree, node_id))

    def move_filter(self, node_id: str, target_id: str, relation: Union[Relation, str]) -> FilterTree:
        return self.set_tree(tree_ops.move_filter(self._tree, node_id, target_id, relation))

    def reset(self) -> FilterTree:
        logger.debug("session reset")
        return self.set_tree(tree_ops.reset(self._tree))

    # Lookups

    def find_node_by_id(self, node_id: str) -> Optional[FilterNode]:
        return tree_ops.find_node_by_id(self._tree, node_id)

    def get_node_path(self, node_id: str) -> list[str]:
        return tree_ops.get_node_path(self._tree, node_id)

    # Derived views

    def preview(self) -> str:
        return preview(self._tree)

    def preview_html(self) -> str:
        return preview_html(self._tree)

    def query_dsl(self) -> QueryDocument:
        return compile_tree(self._tree)

    def query_dsl_report(self) -> Outcome[QueryDocument]:
        return compile_tree_report(self._tree)

    def submit(self, custom_label: Optional[str] = None) -> Optional[FilterGroup]:
        return build_filter_group(self._tree, custom_label)
