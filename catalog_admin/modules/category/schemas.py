"""Pydantic request/response schemas for the category module."""

from __future__ import annotations

import uuid
from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field, field_validator

from catalog_admin.models.enums import ProductStatus
from catalog_admin.modules.attribute.schemas import AttributeResponse


class CategoryCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    slug: str = Field(..., min_length=1, max_length=255)
    description: str | None = Field(None, max_length=5000)
    parent_id: uuid.UUID | None = None
    is_active: bool = True


class CategoryUpdate(BaseModel):
    name: str | None = Field(None, min_length=1, max_length=255)
    slug: str | None = Field(None, min_length=1, max_length=255)
    description: str | None = Field(None, max_length=5000)
    parent_id: uuid.UUID | None = None
    is_active: bool | None = None

    @field_validator("name", "slug", "is_active")
    @classmethod
    def reject_explicit_null(cls, v):
        # Omit the field to leave it unchanged; only description and parent_id can be cleared
        if v is None:
            raise ValueError("Field cannot be null")
        return v


class CategoryRef(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    name: str
    slug: str


class CategoryResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    name: str
    slug: str
    description: str | None
    parent_id: uuid.UUID | None
    is_active: bool
    parent: CategoryRef | None = None
    children: list[CategoryRef] = []
    children_count: int = 0
    attributes_count: int = 0
    products_count: int = 0
    created_at: datetime
    updated_at: datetime


class RecentProduct(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    name: str
    sku: str
    price: Decimal
    status: ProductStatus
    created_at: datetime


class CategoryDetailResponse(CategoryResponse):
    attributes: list[AttributeResponse] = []
    recent_products: list[RecentProduct] = []
