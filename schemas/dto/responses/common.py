"""
Common response DTOs shared across multiple endpoints.

ErrorResponse  — standard error shape from AppError.to_dict()
HealthResponse — GET /health
PageResponse   — generic paginated list wrapper
"""

from __future__ import annotations

from typing import Any, Generic, Optional, TypeVar

from pydantic import BaseModel, ConfigDict

T = TypeVar("T")


class ErrorResponse(BaseModel):
    """Standard error JSON body produced by the AppError exception handler."""

    model_config = ConfigDict(populate_by_name=True)

    error: str
    code: str
    field: Optional[str] = None
    details: Optional[Any] = None


class HealthResponse(BaseModel):
    """Response body for GET /health."""

    model_config = ConfigDict(populate_by_name=True)

    status: str
    checks: dict[str, str]


class PageResponse(BaseModel, Generic[T]):
    """One page of results plus 1-based pagination metadata."""

    model_config = ConfigDict(populate_by_name=True)

    items: list[T]
    page: int
    page_size: int
    total: int
    has_next: bool

    @classmethod
    def build(
        cls, items: list[T], page: int, page_size: int, total: int
    ) -> "PageResponse[T]":
        return cls(
            items=items,
            page=page,
            page_size=page_size,
            total=total,
            has_next=page * page_size < total,
        )
