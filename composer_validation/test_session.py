from __future__ import annotations

from composer_validation.stubs import cond
from filter_composer.contracts.filters import BooleanGroup, FilterTree, Relation
from filter_composer.orchestrator.session import FilterSession


def test_subscribe_replays_current_tree() -> None:
    session = FilterSession()
    seen: list[FilterTree] = []
    session.subscribe(seen.append)
    assert seen == [session.tree]
    assert seen[0].is_empty


def test_subscribe_without_replay() -> None:
    session = FilterSession()
    seen: list[FilterTree] = []
    session.subscribe(seen.append, replay=False)
    assert seen == []


def test_edits_publish_new_trees(host_is, status_is_not) -> None:
    session = FilterSession()
    seen: list[FilterTree] = []
    session.subscribe(seen.append, replay=False)

    first = session.initialize_with_filter(host_is)
    second = session.add_filter("a", "OR", status_is_not)

    assert seen == [first, second]
    assert first.root == host_is
    assert isinstance(second.root, BooleanGroup)
    assert session.tree is second


def test_noop_edits_do_not_notify(host_is) -> None:
    session = FilterSession()
    session.initialize_with_filter(host_is)
    seen: list[FilterTree] = []
    session.subscribe(seen.append, replay=False)

    session.remove_filter("missing")
    session.toggle_operator("a")
    session.modify_filter("missing", updates={"value": "x"})
    session.add_filter("missing", "AND", cond("agent", "exists"))

    assert seen == []


def test_unsubscribe_stops_notifications(host_is) -> None:
    session = FilterSession()
    seen: list[FilterTree] = []
    unsubscribe = session.subscribe(seen.append, replay=False)
    unsubscribe()
    unsubscribe()
    session.initialize_with_filter(host_is)
    assert seen == []


def test_lookups_and_derived_views(mixed_tree) -> None:
    session = FilterSession(mixed_tree)

    assert session.find_node_by_id("b").field == "status"
    assert session.get_node_path("b") == ["g_or", "g_and", "b"]
    assert session.preview() == "(host.keyword: web01 AND NOT status: 500) OR verb.keyword: GET,POST"
    assert "preview-group" in session.preview_html()
    assert "should" in session.query_dsl()["query"]["bool"]
    assert session.query_dsl_report().ok


def test_toggle_and_move_through_session(mixed_tree) -> None:
    session = FilterSession(mixed_tree)
    toggled = session.toggle_operator("g_or")
    assert toggled.root.relation is Relation.AND

    moved = session.move_filter("c", "a", "OR")
    assert session.tree is moved
    assert session.get_node_path("c")[-2] != "g_or"


def test_reset_and_submit(mixed_tree) -> None:
    session = FilterSession(mixed_tree)
    group = session.submit("web traffic")
    assert group is not None
    assert group.custom_label == "web traffic"
    assert group.query_dsl == session.query_dsl()

    session.reset()
    assert session.tree.is_empty
    assert session.submit() is None
    assert session.query_dsl() == {"query": {"match_all": {}}}
