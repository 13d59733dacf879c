"""Field catalog and field-value suggestion boundary.

The lookups themselves live with the search client; this module defines the
contract, the aggregation request that implements it, and a pandas-backed
source for local data.
"""

from __future__ import annotations

from typing import Any, Iterable, Optional, Protocol

import pandas as pd

from filter_composer.config import settings
from filter_composer.contracts.filters import Operator
from filter_composer.contracts.outcome import Outcome, err, warn
from filter_composer.engine.coercion import KEYWORD_SUFFIX, is_exact_field
from filter_composer.tools.intake import parse_context_filter
from filter_composer.util.logging import get_logger

logger = get_logger("tools.suggestions")

_VALUELESS = {Operator.exists, Operator.does_not_exist}


class FieldCatalog(Protocol):
    def list_fields(self) -> list[str]: ...


class FieldValueLookup(Protocol):
    def lookup(
        self,
        field: str,
        search_term: Optional[str],
        size: int,
        context: Optional[dict[str, Any]],
    ) -> Iterable[Any]: ...


def clamp_size(size: Optional[int]) -> int:
    low, high = settings.suggest_bounds
    if size is None:
        size = settings.SUGGEST_DEFAULT_SIZE
    return max(low, min(int(size), high))


def dedupe_values(values: Iterable[Any]) -> list[str]:
    """Stringify, drop nulls and repeats, keep first-seen order."""
    seen: set[str] = set()
    out: list[str] = []
    for v in values:
        if v is None or (isinstance(v, float) and pd.isna(v)):
            continue
        s = str(v)
        if s not in seen:
            seen.add(s)
            out.append(s)
    return out


def build_field_values_query(
    field: str,
    search_term: Optional[str] = None,
    size: Optional[int] = None,
    context: Optional[dict[str, Any]] = None,
) -> dict[str, Any]:
    """Aggregation request returning the distinct values of `field`."""
    must: list[dict[str, Any]] = [{"exists": {"field": field}}]
    if context and context.get("query"):
        must.append(context["query"])

    term = (search_term or "").strip()
    if term:
        if is_exact_field(field):
            must.append({"wildcard": {field: {"value": f"*{term}*", "case_insensitive": True}}})
        else:
            must.append({"match": {field: {"query": term, "operator": "and", "fuzziness": "AUTO"}}})

    return {
        "size": 0,
        "query": {"bool": {"must": must}},
        "aggs": {
            "field_values": {
                "terms": {"field": field, "size": clamp_size(size), "order": {"_key": "asc"}}
            }
        },
    }


def extract_bucket_values(response: dict[str, Any]) -> list[str]:
    buckets = (response.get("aggregations") or {}).get("field_values", {}).get("buckets") or []
    return dedupe_values(
        b["key_as_string"] if "key_as_string" in b else b.get("key") for b in buckets
    )


class FieldSuggestionAdapter:
    """Calls the value lookup on behalf of the value-entry dropdowns.

    Only exact fields are looked up, and only for operators that take a
    value. Lookup failures come back as a failed Outcome for the caller to
    retry; they never propagate.
    """

    def __init__(self, lookup: FieldValueLookup) -> None:
        self.lookup = lookup

    def wants_values(self, field: str, operator: Optional[Operator] = None) -> bool:
        return bool(field) and is_exact_field(field) and operator not in _VALUELESS

    def suggest(
        self,
        field: str,
        operator: Optional[Operator] = None,
        search_term: Optional[str] = None,
        size: Optional[int] = None,
        context: Any = None,
    ) -> Outcome[list[str]]:
        if not self.wants_values(field, operator):
            return Outcome.success(data=[])

        warnings = []
        parsed_context = parse_context_filter(context)
        if context not in (None, "") and parsed_context is None:
            warnings.append(warn("context_ignored", "Context filter could not be parsed", field=field))

        try:
            raw = self.lookup.lookup(field, search_term, clamp_size(size), parsed_context)
        except Exception as e:
            logger.warning("Field value lookup failed for %r: %s", field, e)
            return Outcome.failure(
                errors=[err("lookup_failed", f"Could not load values for {field}", field=field)],
                warnings=warnings,
            )
        return Outcome.success(data=dedupe_values(raw), warnings=warnings)


# ============================================================================
# pandas-backed sources
# ============================================================================


def _base_column(field: str) -> str:
    return field[: -len(KEYWORD_SUFFIX)] if field.endswith(KEYWORD_SUFFIX) else field


class DataFrameFieldCatalog:
    """Columns of a frame, plus a `.keyword` variant for text columns."""

    def __init__(self, df: pd.DataFrame) -> None:
        self.df = df

    def list_fields(self) -> list[str]:
        fields: list[str] = []
        for col in self.df.columns:
            name = str(col)
            fields.append(name)
            if pd.api.types.is_object_dtype(self.df[col]) or pd.api.types.is_string_dtype(self.df[col]):
                fields.append(f"{name}{KEYWORD_SUFFIX}")
        return fields


class DataFrameFieldValues:
    """Distinct column values, sorted ascending like a key-ordered aggregation.

    The context query is not evaluated against the frame.
    """

    def __init__(self, df: pd.DataFrame) -> None:
        self.df = df

    def lookup(
        self,
        field: str,
        search_term: Optional[str],
        size: int,
        context: Optional[dict[str, Any]],
    ) -> list[Any]:
        column = _base_column(field)
        if column not in self.df.columns:
            raise KeyError(f"Field '{field}' does not exist")

        values = self.df[column].dropna().astype(str)
        term = (search_term or "").strip()
        if term:
            values = values[values.str.contains(term, case=False, regex=False)]
        return sorted(values.unique().tolist())[:size]
