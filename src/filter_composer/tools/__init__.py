"""Adapters at the boundary with external collaborators."""

from filter_composer.tools.intake import parse_context_filter, query_from_payload, to_search_body
from filter_composer.tools.suggestions import (
    DataFrameFieldCatalog,
    DataFrameFieldValues,
    FieldCatalog,
    FieldSuggestionAdapter,
    FieldValueLookup,
    build_field_values_query,
    extract_bucket_values,
)

__all__ = [
    "parse_context_filter",
    "query_from_payload",
    "to_search_body",
    "DataFrameFieldCatalog",
    "DataFrameFieldValues",
    "FieldCatalog",
    "FieldSuggestionAdapter",
    "FieldValueLookup",
    "build_field_values_query",
    "extract_bucket_values",
]
