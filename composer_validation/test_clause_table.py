from __future__ import annotations

from typing import Any

import pytest

from composer_validation.stubs import cond, tree
from filter_composer.engine.clauses import build_clause
from filter_composer.engine.coercion import as_list, coerce_value, is_date_field, is_numeric
from filter_composer.engine.compiler import compile_tree


@pytest.mark.parametrize(
    ("condition", "expected"),
    [
        (cond("host.keyword", "is", "web01"), {"term": {"host.keyword": "web01"}}),
        (cond("message", "is", "timeout"), {"match": {"message": "timeout"}}),
        (cond("status", "is", "500"), {"term": {"status": 500}}),
        (cond("@timestamp", "is", "2024-05-01"), {"term": {"@timestamp": "2024-05-01"}}),
        (cond("host.keyword", "is_not", "web01"), {"bool": {"must_not": [{"term": {"host.keyword": "web01"}}]}}),
        (cond("message", "is_not", "ok"), {"bool": {"must_not": [{"match": {"message": "ok"}}]}}),
        (cond("verb.keyword", "is_one_of", "GET, POST"), {"terms": {"verb.keyword": ["GET", "POST"]}}),
        (cond("verb.keyword", "is_one_of", ["GET"]), {"terms": {"verb.keyword": ["GET"]}}),
        (cond("verb.keyword", "is_not_one_of", "GET"), {"bool": {"must_not": [{"terms": {"verb.keyword": ["GET"]}}]}}),
        (cond("agent", "exists"), {"exists": {"field": "agent"}}),
        (cond("agent", "does_not_exist"), {"bool": {"must_not": [{"exists": {"field": "agent"}}]}}),
        (cond("bytes", "range", minValue="10", maxValue="20.5"), {"range": {"bytes": {"gt": 10, "lt": 20.5}}}),
        (cond("bytes", "range", minOperator="gte", minValue="10"), {"range": {"bytes": {"gte": 10}}}),
        (cond("bytes.keyword", "range", maxOperator="lte", maxValue="9"), {"range": {"bytes.keyword": {"lte": "9"}}}),
        (cond("request.keyword", "prefix", "/api"), {"prefix": {"request.keyword": "/api"}}),
        (cond("request", "prefix", "/api"), {"wildcard": {"request": {"value": "/api*", "case_insensitive": True}}}),
        (cond("request", "wildcard", "/a?i/*"), {"wildcard": {"request": {"value": "/a?i/*", "case_insensitive": True}}}),
        (
            cond("message", "query_string", "error AND NOT debug"),
            {"query_string": {"default_field": "message", "query": "error AND NOT debug"}},
        ),
    ],
)
def test_clause_table(condition, expected: dict[str, Any]) -> None:
    assert build_clause(condition) == expected


@pytest.mark.parametrize(
    "condition",
    [
        cond("bytes", "range"),
        cond("request", "prefix", ""),
        cond("request", "wildcard", "  "),
        cond("message", "query_string", None),
        cond("host.keyword", "is", ""),
        cond("verb.keyword", "is_one_of", []),
    ],
)
def test_unsatisfiable_conditions_are_dropped_with_warning(condition, caplog: pytest.LogCaptureFixture) -> None:
    notices: list = []
    assert build_clause(condition, notices) is None
    assert len(notices) == 1
    assert "Dropping filter condition" in caplog.text


@pytest.mark.parametrize("condition", [cond("", "is", "x"), cond("host", None, "x"), cond("host", "bogus", "x")])
def test_incomplete_rows_are_skipped_quietly(condition) -> None:
    notices: list = []
    assert build_clause(condition, notices) is None
    assert notices == []


def test_single_condition_tree_compiles_to_its_clause() -> None:
    c = cond("verb.keyword", "is_one_of", "GET,POST")
    assert compile_tree(tree(c)) == {"query": {"terms": {"verb.keyword": ["GET", "POST"]}}}


def test_exact_fields_are_never_coerced() -> None:
    assert coerce_value("status.keyword", "500") == "500"
    assert coerce_value("status", "500") == 500
    assert coerce_value("status", "-1.25") == -1.25
    assert coerce_value("status", "5e3") == "5e3"


def test_numeric_detection() -> None:
    assert is_numeric(3) and is_numeric("42") and is_numeric(" -7.5 ")
    assert not is_numeric(True)
    assert not is_numeric("4.")
    assert not is_numeric("")


def test_date_field_detection() -> None:
    assert is_date_field("@timestamp")
    assert is_date_field("event.created_date")
    assert is_date_field("responseTime")
    assert not is_date_field("host")


def test_as_list() -> None:
    assert as_list("a, b,,c") == ["a", "b", "c"]
    assert as_list(("a", None, "")) == ["a"]
    assert as_list(5) == [5]
    assert as_list(None) == []
