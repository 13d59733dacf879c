from __future__ import annotations

import json

import pytest

from filter_composer.tools.intake import parse_context_filter, query_from_payload, to_search_body

MATCH_ALL = {"query": {"match_all": {}}}


@pytest.mark.parametrize("raw", [None, "", "{not json", b"\xff\xfe", "[1, 2]", '{"size": 0}', {"query": "text"}])
def test_unusable_context_is_ignored(raw) -> None:
    assert parse_context_filter(raw) is None


def test_context_accepts_text_bytes_and_dicts() -> None:
    doc = {"query": {"term": {"host.keyword": "web01"}}}
    assert parse_context_filter(json.dumps(doc)) == doc
    assert parse_context_filter(json.dumps(doc).encode()) == doc
    assert parse_context_filter(doc) == doc


def test_payload_query_document_passes_through() -> None:
    doc = {"query": {"exists": {"field": "agent"}}}
    assert query_from_payload(json.dumps(doc)) == doc


def test_payload_flat_rows() -> None:
    rows = [
        {"field": "agent", "operator": "exists"},
        {"field": "host.keyword", "operator": "is", "value": "web01", "logic": "OR"},
    ]
    assert query_from_payload(rows) == {
        "query": {
            "bool": {
                "should": [{"exists": {"field": "agent"}}, {"term": {"host.keyword": "web01"}}],
                "minimum_should_match": 1,
            }
        }
    }


def test_payload_tree_and_bare_node() -> None:
    node = {"operator": "AND", "children": [{"field": "agent", "operator": "exists"}, {"field": "a", "operator": "exists"}]}
    expected = {"query": {"bool": {"must": [{"exists": {"field": "agent"}}, {"exists": {"field": "a"}}]}}}
    assert query_from_payload({"id": "t", "root": node}) == expected
    assert query_from_payload(node) == expected


@pytest.mark.parametrize("raw", [None, "", "nope", "42", {"root": {"children": "x"}}])
def test_bad_payloads_fall_back_to_match_all(raw) -> None:
    assert query_from_payload(raw) == MATCH_ALL


def test_to_search_body() -> None:
    assert to_search_body(None) == MATCH_ALL
    assert to_search_body({"query": {}}) == MATCH_ALL
    assert to_search_body({"query": {"exists": {"field": "a"}}, "size": 5}) == {"query": {"exists": {"field": "a"}}}
