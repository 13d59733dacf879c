"""Boundary parsing of externally supplied filter payloads.

Nothing here raises on bad input: unparseable context is treated as "no
additional context" and unusable payloads compile to `match_all`.
"""

from __future__ import annotations

import json
from typing import Any, Optional

from pydantic import ValidationError

from filter_composer.contracts.filters import FilterTree, parse_node
from filter_composer.contracts.specs import match_all
from filter_composer.engine.compiler import QueryDocument, compile_flat, compile_tree
from filter_composer.util.logging import get_logger

logger = get_logger("tools.intake")


def _load(raw: Any) -> Any:
    if isinstance(raw, (bytes, bytearray)):
        raw = raw.decode("utf-8")
    if isinstance(raw, str):
        return json.loads(raw)
    return raw


def parse_context_filter(raw: Any) -> Optional[QueryDocument]:
    """A `{query: ...}` document from a caller, or None if it cannot be used."""
    if raw is None or raw == "":
        return None
    try:
        data = _load(raw)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        logger.warning("Ignoring unparseable context filter: %s", e)
        return None
    if isinstance(data, dict) and isinstance(data.get("query"), dict):
        return data
    logger.warning("Ignoring context filter without a query clause")
    return None


def query_from_payload(raw: Any) -> QueryDocument:
    """Compile whatever filter payload a request carried.

    - a `{query: ...}` document is passed through
    - a list is treated as relation-tagged flat rows
    - an object with `root` (or a bare node) is treated as a tree
    """
    if raw is None or raw == "":
        return match_all()
    try:
        data = _load(raw)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        logger.warning("Error parsing filters payload: %s", e)
        return match_all()

    try:
        if isinstance(data, dict) and "query" in data:
            return data
        if isinstance(data, list):
            return compile_flat(data)
        if isinstance(data, dict) and "root" in data:
            return compile_tree(FilterTree.model_validate(data))
        if isinstance(data, dict):
            return compile_tree(parse_node(data))
    except ValidationError as e:
        logger.warning("Filters payload does not describe filters: %s", e.errors()[:1])
    return match_all()


def to_search_body(doc: Optional[QueryDocument]) -> QueryDocument:
    """Search request body for a compiled document."""
    if not doc or not doc.get("query"):
        return match_all()
    return {"query": doc["query"]}
