"""Field-kind detection and value coercion."""

from __future__ import annotations

import re
from typing import Any

KEYWORD_SUFFIX = ".keyword"

_NUMERIC_RE = re.compile(r"^-?\d+(\.\d+)?$")
_DATE_MARKERS = ("date", "time")


def is_exact_field(field: str) -> bool:
    return field.endswith(KEYWORD_SUFFIX)


def is_date_field(field: str) -> bool:
    lowered = field.lower()
    return field == "@timestamp" or any(m in lowered for m in _DATE_MARKERS)


def is_numeric(value: Any) -> bool:
    if isinstance(value, bool) or value is None:
        return False
    if isinstance(value, (int, float)):
        return True
    if isinstance(value, str):
        return bool(_NUMERIC_RE.match(value.strip()))
    return False


def to_number(value: str) -> int | float:
    text = value.strip()
    return float(text) if "." in text else int(text)


def coerce_value(field: str, value: Any) -> Any:
    """Numeric-looking strings become numbers, except on exact fields."""
    if is_exact_field(field):
        return value
    if isinstance(value, str) and is_numeric(value):
        return to_number(value)
    return value


def as_list(value: Any) -> list[Any]:
    """Multi-value input: lists pass through, strings split on commas."""
    if isinstance(value, (list, tuple)):
        return [v for v in value if v is not None and v != ""]
    if isinstance(value, str):
        return [part.strip() for part in value.split(",") if part.strip()]
    if value is None:
        return []
    return [value]


def display_value(value: Any) -> str:
    if isinstance(value, (list, tuple)):
        return ",".join(str(v) for v in value)
    if value is None or value == "":
        return "-"
    return str(value)
