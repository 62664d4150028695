"""ProductAttributeValue — one stored value per (product, attribute) pair."""

from __future__ import annotations

import uuid
from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import Boolean, DateTime, Float, ForeignKey, Index, String, UniqueConstraint, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from catalog_admin.database.base import Base, TimestampMixin, UUIDPrimaryKeyMixin

if TYPE_CHECKING:
    from catalog_admin.models.attribute import AttributeOption, CategoryAttribute
    from catalog_admin.models.product import Product


class ProductAttributeValue(UUIDPrimaryKeyMixin, TimestampMixin, Base):
    __tablename__ = "product_attribute_values"

    product_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("products.id", ondelete="CASCADE"), nullable=False
    )
    attribute_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("category_attributes.id", ondelete="RESTRICT"), nullable=False
    )

    # Exactly one slot is populated, matching the attribute's data type
    value_text: Mapped[str | None] = mapped_column(String)
    value_number: Mapped[float | None] = mapped_column(Float)
    value_bool: Mapped[bool | None] = mapped_column(Boolean)
    value_date: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))
    option_id: Mapped[uuid.UUID | None] = mapped_column(
        Uuid, ForeignKey("attribute_options.id", ondelete="RESTRICT"), nullable=True
    )

    # Relationships
    product: Mapped[Product] = relationship("Product", back_populates="values")
    attribute: Mapped[CategoryAttribute] = relationship("CategoryAttribute", back_populates="values")
    option: Mapped[AttributeOption | None] = relationship("AttributeOption")

    __table_args__ = (
        UniqueConstraint("product_id", "attribute_id", name="uq_product_attribute_values_product_attribute"),
        Index("ix_product_attribute_values_attribute_id", "attribute_id"),
    )
