"""Submission contracts exchanged with the UI layer."""

from typing import Any, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from filter_composer.contracts.filters import FilterNode, FlatCondition


def match_all() -> dict[str, Any]:
    return {"query": {"match_all": {}}}


class FilterGroup(BaseModel):
    """Emitted once the user confirms an edited filter."""

    model_config = ConfigDict(populate_by_name=True)

    filters: Union[list[FlatCondition], FilterNode]
    custom_label: Optional[str] = Field(default=None, alias="customLabel")
    query_dsl: dict[str, Any] = Field(default_factory=match_all, alias="queryDSL")

    def to_payload(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)
