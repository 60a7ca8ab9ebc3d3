"""Shared response shapes: pagination envelope and simple acknowledgements."""

from typing import Generic, TypeVar

from pydantic import BaseModel, Field

T = TypeVar("T")


class Pagination(BaseModel):
    """Page metadata returned by every list endpoint."""

    total: int = Field(..., ge=0, description="Rows matching the filters.")
    page: int = Field(..., ge=1, description="1-indexed page number.")
    per_page: int = Field(..., ge=1, le=100, description="Page size.")
    total_pages: int = Field(..., ge=0, description="ceil(total / per_page).")


class Page(BaseModel, Generic[T]):
    """A page of rows plus pagination metadata."""

    data: list[T]
    pagination: Pagination


class SuccessResponse(BaseModel):
    success: bool = True
