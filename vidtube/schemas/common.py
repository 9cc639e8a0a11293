"""Shared Schemas — camelCase base model, response envelope, pagination.

Invariants:
    - Every response is {success, message, data?, errors?}
    - CamelModel accepts snake_case names and ORM attributes on input,
      emits camelCase on output
"""

from typing import Generic, TypeVar

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

T = TypeVar("T")


class CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, from_attributes=True,
    )


class ApiResponse(BaseModel, Generic[T]):
    """Success envelope. Errors use the same keys via VidTubeError.to_response()."""
    success: bool = True
    message: str
    data: T | None = None


class PageInfo(CamelModel):
    page: int
    limit: int
    total: int


class Page(CamelModel, Generic[T]):
    items: list[T]
    pagination: PageInfo
