from __future__ import annotations

from composer_validation.stubs import cond, group, tree
from filter_composer.contracts.filters import FilterTree
from filter_composer.engine.compiler import compile_node, compile_tree, compile_tree_report

A = {"term": {"host.keyword": "web01"}}
B = {"bool": {"must_not": [{"term": {"status": 500}}]}}
C = {"terms": {"verb.keyword": ["GET", "POST"]}}


def test_empty_tree_compiles_to_match_all() -> None:
    assert compile_tree(FilterTree()) == {"query": {"match_all": {}}}
    assert compile_tree(None) == {"query": {"match_all": {}}}


def test_and_group(host_is, status_is_not) -> None:
    doc = compile_tree(tree(group("AND", host_is, status_is_not)))
    assert doc == {"query": {"bool": {"must": [A, B]}}}


def test_or_group_sets_minimum_should_match(host_is, verb_one_of) -> None:
    doc = compile_tree(tree(group("OR", host_is, verb_one_of)))
    assert doc == {"query": {"bool": {"should": [A, C], "minimum_should_match": 1}}}


def test_nested_mixed_relations(mixed_tree) -> None:
    assert compile_tree(mixed_tree) == {
        "query": {
            "bool": {
                "should": [{"bool": {"must": [A, B]}}, C],
                "minimum_should_match": 1,
            }
        }
    }


def test_group_with_one_survivor_is_unwrapped(host_is) -> None:
    node = group("OR", host_is, cond("request", "prefix", ""))
    assert compile_node(node) == A


def test_group_with_no_survivors_is_dropped_by_parent(host_is, verb_one_of) -> None:
    node = group("AND", host_is, group("OR", cond("bytes", "range"), cond("", "is", "")), verb_one_of)
    assert compile_node(node) == {"bool": {"must": [A, C]}}


def test_group_with_no_survivors_at_root_is_match_all() -> None:
    doc = compile_tree(tree(group("AND", cond("bytes", "range"), cond("x", "bogus", "1"))))
    assert doc == {"query": {"match_all": {}}}


def test_same_relation_child_group_is_spliced(host_is, status_is_not, verb_one_of) -> None:
    node = group("AND", host_is, group("AND", status_is_not, verb_one_of))
    assert compile_node(node) == {"bool": {"must": [A, B, C]}}


def test_unwrapped_child_keeps_its_grouping(host_is, status_is_not, verb_one_of) -> None:
    # the inner OR collapses to an AND bool that the outer AND can splice
    inner = group("OR", group("AND", status_is_not, verb_one_of), cond("bytes", "range"))
    node = group("AND", host_is, inner)
    assert compile_node(node) == {"bool": {"must": [A, B, C]}}


def test_report_collects_dropped_conditions(host_is) -> None:
    out = compile_tree_report(tree(group("AND", host_is, cond("bytes", "range", node_id="r"))))
    assert out.ok is True
    assert out.data == {"query": A}
    assert [w.code for w in out.warnings] == ["missing_range_bound"]
    assert out.warnings[0].context["node_id"] == "r"
