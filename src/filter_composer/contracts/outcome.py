from __future__ import annotations
"""Outcome envelope and notice types for compilation and boundary calls."""

from typing import Any, Generic, Optional, TypeVar

from pydantic import BaseModel, Field

T = TypeVar("T")


class Notice(BaseModel):
    """An error or warning raised while compiling or calling a collaborator."""

    code: str = Field(..., description="Machine-readable error/warning code")
    message: str = Field(..., description="Human-readable message")
    context: dict[str, Any] = Field(
        default_factory=dict, description="Additional context for debugging"
    )


class Outcome(BaseModel, Generic[T]):
    """Standard result envelope: data plus the notices collected on the way."""

    ok: bool = Field(..., description="Whether the call produced usable data")
    data: Optional[T] = Field(default=None, description="The result data (if ok)")
    errors: list[Notice] = Field(default_factory=list)
    warnings: list[Notice] = Field(default_factory=list)

    @classmethod
    def success(
        cls,
        data: T,
        warnings: Optional[list[Notice]] = None,
    ) -> "Outcome[T]":
        return cls(ok=True, data=data, warnings=warnings or [])

    @classmethod
    def failure(
        cls,
        errors: list[Notice],
        warnings: Optional[list[Notice]] = None,
    ) -> "Outcome[T]":
        return cls(ok=False, data=None, errors=errors, warnings=warnings or [])


def err(code: str, message: str, **context: Any) -> Notice:
    """Helper to create an error notice."""
    return Notice(code=code, message=message, context=context)


def warn(code: str, message: str, **context: Any) -> Notice:
    """Helper to create a warning notice."""
    return Notice(code=code, message=message, context=context)
