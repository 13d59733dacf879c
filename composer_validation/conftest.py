from __future__ import annotations

import pandas as pd
import pytest

from composer_validation.stubs import build_mixed_tree, cond, row
from filter_composer.contracts.filters import FilterCondition, FilterTree, FlatCondition


@pytest.fixture()
def host_is() -> FilterCondition:
    return cond("host.keyword", "is", "web01", node_id="a")


@pytest.fixture()
def status_is_not() -> FilterCondition:
    return cond("status", "is_not", "500", node_id="b")


@pytest.fixture()
def verb_one_of() -> FilterCondition:
    return cond("verb.keyword", "is_one_of", "GET,POST", node_id="c")


@pytest.fixture()
def mixed_rows() -> list[FlatCondition]:
    """host AND status OR verb, as form rows."""
    return [
        row("host.keyword", "is", "web01", relation=""),
        row("status", "is_not", "500", relation="AND"),
        row("verb.keyword", "is_one_of", "GET,POST", relation="OR"),
    ]


@pytest.fixture()
def mixed_tree() -> FilterTree:
    return build_mixed_tree()


@pytest.fixture()
def access_log_df() -> pd.DataFrame:
    return pd.DataFrame(
        {
            "host": ["web01", "web02", "web01", None, "db01"],
            "verb": ["GET", "POST", "GET", "DELETE", "get"],
            "bytes": [120, 3400, 87, 0, 15],
        }
    )
