"""Human-readable previews of filter trees and flat row lists.

Parenthesization mirrors the compiler: a group is wrapped exactly where the
compiled document opens a nested `bool`. Two styles are produced from the
same walk, plain text and HTML markup.
"""

from __future__ import annotations

import html
from typing import Iterable, NamedTuple, Optional, Union

from filter_composer.contracts.filters import (
    BooleanGroup,
    FilterCondition,
    FilterNode,
    FilterTree,
    Operator,
    Relation,
)
from filter_composer.contracts.validate import is_blank, is_usable
from filter_composer.engine.coercion import display_value
from filter_composer.engine.grouping import (
    as_rows,
    fold_right,
    row_relations,
    uniform_relation,
    usable_rows,
)

RANGE_OPERATOR_LABELS = {
    "gt": "Greater Than",
    "gte": "Greater Than/Equal To",
    "lt": "Less Than",
    "lte": "Less Than/Equal To",
}

_QUOTED_OPERATORS = (Operator.prefix, Operator.wildcard, Operator.query_string)


def condition_label(c: FilterCondition) -> str:
    """`field: value` text for a condition, without the NOT prefix."""
    op = c.operator
    if op in (Operator.exists, Operator.does_not_exist):
        return f"{c.field}: exists"
    if op is Operator.range:
        parts = []
        if not is_blank(c.min_value):
            parts.append(f"{RANGE_OPERATOR_LABELS[c.min_operator]} {c.min_value}")
        if not is_blank(c.max_value):
            parts.append(f"{RANGE_OPERATOR_LABELS[c.max_operator]} {c.max_value}")
        return f"{c.field}: {' and '.join(parts) or '-'}"
    if op in _QUOTED_OPERATORS:
        return f'{c.field}: {op.value} "{display_value(c.value)}"'
    return f"{c.field}: {display_value(c.value)}"


class TextStyle:
    def condition(self, c: FilterCondition) -> str:
        label = condition_label(c)
        return f"NOT {label}" if c.operator is not None and c.operator.negated else label

    def joiner(self, relation: Relation) -> str:
        return f" {relation.value} "

    def group(self, inner: str) -> str:
        return f"({inner})"


class HtmlStyle(TextStyle):
    def condition(self, c: FilterCondition) -> str:
        field = f'<span class="preview-field">{html.escape(condition_label(c))}</span>'
        if c.operator is not None and c.operator.negated:
            return f'<span class="preview-not">NOT</span> {field}'
        return field

    def joiner(self, relation: Relation) -> str:
        return f' <span class="preview-operator">{relation.value}</span> '

    def group(self, inner: str) -> str:
        return f'<span class="preview-group">({inner})</span>'


TEXT = TextStyle()
HTML = HtmlStyle()


# ============================================================================
# Tree variant
# ============================================================================


class _Rendered(NamedTuple):
    text: str
    # Set when `text` joins two or more parts under this relation.
    relation: Optional[Relation]


def _render(node: FilterNode, style: TextStyle) -> Optional[_Rendered]:
    if isinstance(node, FilterCondition):
        return _Rendered(style.condition(node), None) if is_usable(node) else None

    rendered = [r for r in (_render(child, style) for child in node.children) if r is not None]
    if not rendered:
        return None
    if len(rendered) == 1:
        return rendered[0]

    parts = []
    for child in rendered:
        if child.relation is not None and child.relation is not node.relation:
            parts.append(style.group(child.text))
        else:
            parts.append(child.text)
    return _Rendered(style.joiner(node.relation).join(parts), node.relation)


def preview(
    node: Union[FilterTree, FilterNode, None],
    ambient: Optional[Relation] = None,
    style: TextStyle = TEXT,
) -> str:
    """Preview a node; wrapped when `ambient` is given and differs from its relation."""
    if isinstance(node, FilterTree):
        node = node.root
    if node is None:
        return ""
    rendered = _render(node, style)
    if rendered is None:
        return ""
    if ambient is not None and rendered.relation is not None and rendered.relation is not ambient:
        return style.group(rendered.text)
    return rendered.text


def preview_html(node: Union[FilterTree, FilterNode, None], ambient: Optional[Relation] = None) -> str:
    return preview(node, ambient, style=HTML)


# ============================================================================
# Flat variant
# ============================================================================


def preview_flat(rows: Iterable[object], style: TextStyle = TEXT) -> str:
    kept = usable_rows(as_rows(rows))
    if not kept:
        return ""

    texts = [style.condition(r) for r in kept]
    if len(texts) == 1:
        return texts[0]

    relations = row_relations(kept)
    uniform = uniform_relation(relations)
    if uniform is not None:
        return style.joiner(uniform).join(texts)

    def combine(text: str, acc: str, relation: Relation, nested: bool) -> str:
        return f"{text}{style.joiner(relation)}{style.group(acc) if nested else acc}"

    return fold_right(texts, relations, combine)


def preview_flat_html(rows: Iterable[object]) -> str:
    return preview_flat(rows, style=HTML)
