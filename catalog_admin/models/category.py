from __future__ import annotations

import uuid
from typing import TYPE_CHECKING

from sqlalchemy import Boolean, ForeignKey, Index, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from catalog_admin.database.base import Base, TimestampMixin, UUIDPrimaryKeyMixin

if TYPE_CHECKING:
    from catalog_admin.models.attribute import CategoryAttribute
    from catalog_admin.models.product import Product


class Category(UUIDPrimaryKeyMixin, TimestampMixin, Base):
    __tablename__ = "categories"

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    slug: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    description: Mapped[str | None] = mapped_column(String)
    parent_id: Mapped[uuid.UUID | None] = mapped_column(
        Uuid, ForeignKey("categories.id", ondelete="RESTRICT"), nullable=True
    )
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, server_default="true", nullable=False)

    # Relationships
    parent: Mapped[Category | None] = relationship(
        "Category", remote_side="Category.id", back_populates="children"
    )
    children: Mapped[list[Category]] = relationship(
        "Category", back_populates="parent", passive_deletes=True
    )
    attributes: Mapped[list[CategoryAttribute]] = relationship(
        "CategoryAttribute",
        back_populates="category",
        cascade="all, delete-orphan",
        order_by="CategoryAttribute.display_order",
    )
    products: Mapped[list[Product]] = relationship(
        "Product", back_populates="category", passive_deletes=True
    )

    __table_args__ = (
        Index("ix_categories_parent_id", "parent_id"),
    )
