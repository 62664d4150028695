"""Attribute definitions and ENUM options — the per-category product schema."""

from __future__ import annotations

import uuid
from typing import TYPE_CHECKING

from sqlalchemy import Boolean, Enum, Float, ForeignKey, Index, Integer, String, UniqueConstraint, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from catalog_admin.database.base import Base, TimestampMixin, UUIDPrimaryKeyMixin
from catalog_admin.models.enums import AttributeDataType

if TYPE_CHECKING:
    from catalog_admin.models.attribute_value import ProductAttributeValue
    from catalog_admin.models.category import Category


class CategoryAttribute(UUIDPrimaryKeyMixin, TimestampMixin, Base):
    __tablename__ = "category_attributes"

    category_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("categories.id", ondelete="RESTRICT"), nullable=False
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    slug: Mapped[str] = mapped_column(String(255), nullable=False)
    data_type: Mapped[AttributeDataType] = mapped_column(
        Enum(AttributeDataType, native_enum=False, length=20), nullable=False
    )
    is_required: Mapped[bool] = mapped_column(Boolean, default=False, server_default="false", nullable=False)
    display_order: Mapped[int] = mapped_column(Integer, default=0, server_default="0", nullable=False)
    hint: Mapped[str | None] = mapped_column(String)

    # TEXT constraints
    max_length: Mapped[int | None] = mapped_column(Integer)
    regex: Mapped[str | None] = mapped_column(String(500))

    # NUMBER constraints
    min_number: Mapped[float | None] = mapped_column(Float)
    max_number: Mapped[float | None] = mapped_column(Float)

    # Relationships
    category: Mapped[Category] = relationship("Category", back_populates="attributes")
    options: Mapped[list[AttributeOption]] = relationship(
        "AttributeOption",
        back_populates="attribute",
        cascade="all, delete-orphan",
        order_by="AttributeOption.sort_order",
    )
    values: Mapped[list[ProductAttributeValue]] = relationship(
        "ProductAttributeValue", back_populates="attribute", passive_deletes=True
    )

    __table_args__ = (
        UniqueConstraint("category_id", "slug", name="uq_category_attributes_category_slug"),
        Index("ix_category_attributes_category_id", "category_id"),
    )


class AttributeOption(UUIDPrimaryKeyMixin, TimestampMixin, Base):
    __tablename__ = "attribute_options"

    attribute_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("category_attributes.id", ondelete="CASCADE"), nullable=False
    )
    value: Mapped[str] = mapped_column(String(255), nullable=False)
    code: Mapped[str | None] = mapped_column(String(50))
    sort_order: Mapped[int] = mapped_column(Integer, default=0, server_default="0", nullable=False)
    is_default: Mapped[bool] = mapped_column(Boolean, default=False, server_default="false", nullable=False)

    # Relationships
    attribute: Mapped[CategoryAttribute] = relationship("CategoryAttribute", back_populates="options")

    __table_args__ = (
        Index("ix_attribute_options_attribute_id", "attribute_id"),
    )
