"""Build the FilterGroup handed back to the UI once a filter is confirmed."""

from __future__ import annotations

from typing import Any, Iterable, Optional, Union

from filter_composer.contracts.filters import BooleanGroup, FilterCondition, FilterNode, FilterTree
from filter_composer.contracts.specs import FilterGroup
from filter_composer.engine.compiler import compile_flat, compile_tree
from filter_composer.engine.grouping import as_rows, usable_rows
from filter_composer.orchestrator.tree_ops import prune
from filter_composer.util.logging import get_logger

logger = get_logger("orchestrator.submission")


def build_filter_group(
    filters: Union[FilterTree, FilterNode, Iterable[Any], None],
    custom_label: Optional[str] = None,
) -> Optional[FilterGroup]:
    """Keep only usable filters and attach their compiled document.

    Returns None when nothing usable remains.
    """
    label = custom_label or None

    if isinstance(filters, FilterTree):
        filters = filters.root
    if filters is None:
        return None

    if isinstance(filters, (FilterCondition, BooleanGroup)):
        root = prune(filters)
        if root is None:
            return None
        return FilterGroup(filters=root, custom_label=label, query_dsl=compile_tree(root))

    usable = usable_rows(as_rows(filters))
    if not usable:
        logger.debug("build_filter_group: no usable rows")
        return None
    usable[0] = usable[0].model_copy(update={"relation": None})
    return FilterGroup(filters=usable, custom_label=label, query_dsl=compile_flat(usable))
