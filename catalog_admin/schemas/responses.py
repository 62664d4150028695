"""Shared error envelope and pagination schemas."""

from typing import Any

from pydantic import BaseModel, Field


class ErrorDetail(BaseModel):
    """A single field-level or contextual error detail.

    Value validation failures also carry the violated ``rule`` and its ``limit``.
    """

    field: str | None = None
    message: str
    rule: str | None = None
    limit: Any = None


class ErrorBody(BaseModel):
    """Structured error body returned inside every error response."""

    code: str
    message: str
    details: list[ErrorDetail] = []
    request_id: str = Field(alias="requestId")

    model_config = {"populate_by_name": True}


class ErrorResponse(BaseModel):
    """Top-level error envelope."""

    error: ErrorBody


class PaginationMeta(BaseModel):
    """Pagination counters."""

    page: int
    limit: int
    total_items: int = Field(alias="totalItems")
    total_pages: int = Field(alias="totalPages")

    model_config = {"populate_by_name": True}


# Error statuses every v1 route can answer with, documented in OpenAPI
ERROR_RESPONSES: dict[int | str, dict[str, Any]] = {
    status: {"model": ErrorResponse}
    for status in (400, 404, 409, 422, 429, 500)
}
