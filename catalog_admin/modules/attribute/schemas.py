"""Pydantic request/response schemas for the attribute module."""

from __future__ import annotations

import uuid
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from catalog_admin.models.enums import AttributeDataType


# ---------------------------------------------------------------------------
# Attribute definitions
# ---------------------------------------------------------------------------

class AttributeCreate(BaseModel):
    category_id: uuid.UUID
    name: str = Field(..., min_length=1, max_length=255)
    slug: str = Field(..., min_length=1, max_length=255)
    data_type: AttributeDataType
    is_required: bool = False
    display_order: int = 0
    hint: str | None = None
    max_length: int | None = Field(None, ge=0)
    regex: str | None = Field(None, max_length=500)
    min_number: float | None = None
    max_number: float | None = None


class OptionCreate(BaseModel):
    attribute_id: uuid.UUID
    value: str = Field(..., min_length=1, max_length=255)
    code: str | None = Field(None, max_length=50)
    sort_order: int = 0
    is_default: bool = False


class OptionResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    attribute_id: uuid.UUID
    value: str
    code: str | None
    sort_order: int
    is_default: bool


class AttributeSummary(BaseModel):
    """Attribute definition without its options or usage."""

    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    category_id: uuid.UUID
    name: str
    slug: str
    data_type: AttributeDataType
    is_required: bool
    display_order: int
    hint: str | None
    max_length: int | None
    regex: str | None
    min_number: float | None
    max_number: float | None


class AttributeResponse(AttributeSummary):
    options: list[OptionResponse] = []
    usage_count: int = 0
    created_at: datetime
    updated_at: datetime
