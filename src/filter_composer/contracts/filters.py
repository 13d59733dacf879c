"""Boolean filter expression model: conditions, groups, trees and flat rows."""
from __future__ import annotations

import uuid
from enum import Enum
from typing import Annotated, Any, Literal, Optional, Union

from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Discriminator,
    Field,
    Tag,
    TypeAdapter,
    ValidationInfo,
    field_validator,
)
from pydantic.alias_generators import to_camel

from filter_composer.config import settings
from filter_composer.util.logging import get_logger

logger = get_logger("contracts.filters")


class Operator(str, Enum):
    is_ = "is"
    is_not = "is_not"
    is_one_of = "is_one_of"
    is_not_one_of = "is_not_one_of"
    exists = "exists"
    does_not_exist = "does_not_exist"
    range = "range"
    prefix = "prefix"
    wildcard = "wildcard"
    query_string = "query_string"

    @property
    def negated(self) -> bool:
        return self in NEGATED_OPERATORS


NEGATED_OPERATORS = frozenset(
    {Operator.is_not, Operator.does_not_exist, Operator.is_not_one_of}
)

# Surface spellings accepted from forms, saved filters and request payloads.
OPERATOR_ALIASES: dict[str, Operator] = {
    "is": Operator.is_,
    "IS": Operator.is_,
    "is_not": Operator.is_not,
    "isNot": Operator.is_not,
    "IS_NOT": Operator.is_not,
    "is not": Operator.is_not,
    "is_one_of": Operator.is_one_of,
    "terms": Operator.is_one_of,
    "TERMS": Operator.is_one_of,
    "is one of": Operator.is_one_of,
    "is_not_one_of": Operator.is_not_one_of,
    "notTerms": Operator.is_not_one_of,
    "NOT_TERMS": Operator.is_not_one_of,
    "is not one of": Operator.is_not_one_of,
    "exists": Operator.exists,
    "EXISTS": Operator.exists,
    "does_not_exist": Operator.does_not_exist,
    "notExists": Operator.does_not_exist,
    "NOT_EXISTS": Operator.does_not_exist,
    "does not exist": Operator.does_not_exist,
    "range": Operator.range,
    "RANGE": Operator.range,
    "prefix": Operator.prefix,
    "PREFIX": Operator.prefix,
    "wildcard": Operator.wildcard,
    "WILDCARD": Operator.wildcard,
    "query_string": Operator.query_string,
    "queryString": Operator.query_string,
    "QUERY_STRING": Operator.query_string,
}


def resolve_operator(raw: Any) -> Optional[Operator]:
    """Map any accepted spelling to an Operator; unknown spellings become None."""
    if raw is None or raw == "":
        return None
    if isinstance(raw, Operator):
        return raw
    op = OPERATOR_ALIASES.get(str(raw).strip())
    if op is None:
        logger.warning("Unknown filter operator %r; treating condition as incomplete", raw)
    return op


class Relation(str, Enum):
    AND = "AND"
    OR = "OR"

    def flipped(self) -> "Relation":
        return Relation.OR if self is Relation.AND else Relation.AND


def resolve_relation(raw: Any) -> Optional[Relation]:
    if raw is None or raw == "":
        return None
    if isinstance(raw, Relation):
        return raw
    return Relation(str(raw).strip().upper())


def new_id() -> str:
    return f"{settings.ID_PREFIX}_{uuid.uuid4().hex[:12]}"


_MODEL_CONFIG = ConfigDict(
    frozen=True,
    populate_by_name=True,
    alias_generator=to_camel,
)


# Leaf node


class FilterCondition(BaseModel):
    model_config = _MODEL_CONFIG

    kind: Literal["condition"] = "condition"
    id: str = Field(default_factory=new_id)
    field: str = ""
    operator: Optional[Operator] = None
    value: Any = ""
    min_operator: Literal["gt", "gte"] = "gt"
    min_value: Any = ""
    max_operator: Literal["lt", "lte"] = "lt"
    max_value: Any = ""

    @field_validator("operator", mode="before")
    @classmethod
    def _resolve_operator(cls, v: Any) -> Optional[Operator]:
        return resolve_operator(v)

    @field_validator("min_operator", "max_operator", mode="before")
    @classmethod
    def _bound_ops(cls, v: Any, info: ValidationInfo) -> Any:
        if v is None or v == "":
            return "gt" if info.field_name == "min_operator" else "lt"
        return v.lower() if isinstance(v, str) else v

    @property
    def is_complete(self) -> bool:
        """Both a field and a recognised operator are set."""
        return bool(self.field) and self.operator is not None


# Composite node


class BooleanGroup(BaseModel):
    model_config = _MODEL_CONFIG

    kind: Literal["group"] = "group"
    id: str = Field(default_factory=new_id)
    relation: Relation = Field(
        default=Relation.AND,
        validation_alias=AliasChoices("relation", "operator"),
    )
    children: list[FilterNode] = Field(default_factory=list)

    @field_validator("relation", mode="before")
    @classmethod
    def _resolve_relation(cls, v: Any) -> Relation:
        return resolve_relation(v) or Relation(settings.DEFAULT_RELATION)


def _node_kind(v: Any) -> str:
    if isinstance(v, dict):
        kind = v.get("kind")
        if kind:
            return kind
        return "group" if "children" in v else "condition"
    return getattr(v, "kind", "condition")


FilterNode = Annotated[
    Union[
        Annotated[FilterCondition, Tag("condition")],
        Annotated[BooleanGroup, Tag("group")],
    ],
    Discriminator(_node_kind),
]


BooleanGroup.model_rebuild()


class FilterTree(BaseModel):
    model_config = _MODEL_CONFIG

    id: str = Field(default_factory=new_id)
    root: Optional[FilterNode] = None

    @property
    def is_empty(self) -> bool:
        return self.root is None


# Flat, form-row representation


class FlatCondition(FilterCondition):
    """A condition tagged with its connective to the preceding row."""

    relation: Optional[Relation] = Field(
        default=None,
        validation_alias=AliasChoices("relation", "logic"),
    )

    @field_validator("relation", mode="before")
    @classmethod
    def _resolve_relation(cls, v: Any) -> Optional[Relation]:
        return resolve_relation(v)


_node_adapter: TypeAdapter[FilterNode] = TypeAdapter(FilterNode)
_flat_adapter: TypeAdapter[list[FlatCondition]] = TypeAdapter(list[FlatCondition])


def parse_node(data: Any) -> FilterNode:
    """Validate a dict (with or without `kind`) into a FilterNode."""
    return _node_adapter.validate_python(data)


def parse_flat(rows: Any) -> list[FlatCondition]:
    return _flat_adapter.validate_python(rows)


def dump_node(node: FilterNode) -> dict[str, Any]:
    return _node_adapter.dump_python(node, mode="json", by_alias=True)


def field_updates(model: type[BaseModel], updates: Any) -> dict[str, Any]:
    """Translate alias keys (minValue, logic, ...) to field names; drop id/kind."""
    names: dict[str, str] = {}
    for name, info in model.model_fields.items():
        names[name] = name
        if info.alias:
            names[info.alias] = name
        if isinstance(info.validation_alias, AliasChoices):
            for choice in info.validation_alias.choices:
                if isinstance(choice, str):
                    names[choice] = name
    out: dict[str, Any] = {}
    for key, value in dict(updates).items():
        name = names.get(key)
        if name is None or name in ("id", "kind"):
            continue
        out[name] = value
    return out
