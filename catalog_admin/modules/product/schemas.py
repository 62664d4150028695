"""Pydantic request/response schemas for the product module."""

from __future__ import annotations

import uuid
from datetime import datetime
from decimal import Decimal
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, computed_field, field_validator

from catalog_admin.models.enums import ProductStatus
from catalog_admin.modules.attribute.schemas import AttributeResponse, AttributeSummary, OptionResponse
from catalog_admin.modules.attribute.values import decode_columns
from catalog_admin.modules.category.schemas import CategoryRef
from catalog_admin.schemas.responses import PaginationMeta


# ---------------------------------------------------------------------------
# Product
# ---------------------------------------------------------------------------

class ProductCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=500)
    sku: str = Field(..., min_length=1, max_length=100)
    description: str | None = Field(None, max_length=5000)
    price: Decimal = Field(..., ge=0, max_digits=12, decimal_places=2)
    stock_quantity: int = Field(0, ge=0)
    status: ProductStatus = ProductStatus.DRAFT
    category_id: uuid.UUID
    is_active: bool = True


class ProductUpdate(BaseModel):
    name: str | None = Field(None, min_length=1, max_length=500)
    sku: str | None = Field(None, min_length=1, max_length=100)
    description: str | None = Field(None, max_length=5000)
    price: Decimal | None = Field(None, ge=0, max_digits=12, decimal_places=2)
    stock_quantity: int | None = Field(None, ge=0)
    status: ProductStatus | None = None
    category_id: uuid.UUID | None = None
    is_active: bool | None = None

    @field_validator("name", "sku", "price", "stock_quantity", "status", "category_id", "is_active")
    @classmethod
    def reject_explicit_null(cls, v):
        # Omit the field to leave it unchanged; only description can be cleared
        if v is None:
            raise ValueError("Field cannot be null")
        return v


class ProductResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    name: str
    sku: str
    description: str | None
    price: Decimal
    stock_quantity: int
    status: ProductStatus
    category_id: uuid.UUID
    is_active: bool
    category_name: str | None = None
    values_count: int = 0
    created_at: datetime
    updated_at: datetime


class ProductListResponse(BaseModel):
    items: list[ProductResponse]
    meta: PaginationMeta


# ---------------------------------------------------------------------------
# Attribute values
# ---------------------------------------------------------------------------

class SetAttributeValueRequest(BaseModel):
    """Raw candidate for one attribute of one product.

    ``value`` is kept exactly as sent (string, number, boolean or ISO date
    string) so type rules are applied by the attribute validator, not by
    request parsing. ENUM attributes take ``option_id`` instead.
    """

    product_id: uuid.UUID
    attribute_id: uuid.UUID
    value: Any = None
    option_id: uuid.UUID | None = None


class AttributeValueResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    product_id: uuid.UUID
    attribute_id: uuid.UUID
    value_text: str | None
    value_number: float | None
    value_bool: bool | None
    value_date: datetime | None
    option_id: uuid.UUID | None
    attribute: AttributeSummary
    option: OptionResponse | None = None
    created_at: datetime
    updated_at: datetime

    @computed_field
    @property
    def value(self) -> str | float | bool | datetime | uuid.UUID | None:
        decoded = decode_columns(
            self.attribute.data_type,
            {
                "value_text": self.value_text,
                "value_number": self.value_number,
                "value_bool": self.value_bool,
                "value_date": self.value_date,
                "option_id": self.option_id,
            },
        )
        return decoded.payload if decoded is not None else None


class ProductDetailResponse(ProductResponse):
    category: CategoryRef
    values: list[AttributeValueResponse] = []
    attributes: list[AttributeResponse] = []
