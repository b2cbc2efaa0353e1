"""
Shared schema plumbing.

Payloads arrive with camelCase keys from the dashboard (driverId,
tripDate, ...); snake_case names are accepted too.
"""

from typing import Any, Generic, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

T = TypeVar("T")

HHMM_PATTERN = r"^([01]\d|2[0-3]):[0-5]\d$"


class CamelModel(BaseModel):
    """Base for every request and response schema."""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
        str_strip_whitespace=True,
    )


class NamedRef(CamelModel):
    """id + name summary used for related rows."""
    id: int
    name: str


class ActionResult(BaseModel, Generic[T]):
    """
    Uniform envelope returned by every action.

    Exactly one of data / error is meaningful: success=True carries data,
    success=False carries a human-readable error.
    """
    success: bool
    data: Optional[T] = None
    error: Optional[str] = Field(default=None, description="Human-readable failure message")

    @classmethod
    def ok(cls, data: Any = None) -> "ActionResult":
        return cls(success=True, data=data)

    @classmethod
    def fail(cls, error: str) -> "ActionResult":
        return cls(success=False, error=error)
