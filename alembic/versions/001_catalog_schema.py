"""Create catalog schema - categories, attribute definitions, options, products, values

Revision ID: 001
Revises:
Create Date: 2026-10-18

"""
from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

# Enums are stored as VARCHAR with a CHECK constraint so the same schema runs on SQLite
attribute_data_type_enum = sa.Enum(
    "TEXT", "NUMBER", "BOOLEAN", "DATE", "ENUM",
    name="attributedatatype", native_enum=False, length=20,
)
product_status_enum = sa.Enum(
    "DRAFT", "ACTIVE", "INACTIVE",
    name="productstatus", native_enum=False, length=20,
)


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
    ]


def upgrade() -> None:
    # 1. categories
    op.create_table(
        "categories",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("slug", sa.String(255), nullable=False, unique=True),
        sa.Column("description", sa.String, nullable=True),
        sa.Column("parent_id", sa.Uuid(), sa.ForeignKey("categories.id", ondelete="RESTRICT"), nullable=True),
        sa.Column("is_active", sa.Boolean, server_default="true", nullable=False),
        *_timestamps(),
    )
    op.create_index("ix_categories_parent_id", "categories", ["parent_id"])

    # 2. category_attributes
    op.create_table(
        "category_attributes",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("category_id", sa.Uuid(), sa.ForeignKey("categories.id", ondelete="RESTRICT"), nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("slug", sa.String(255), nullable=False),
        sa.Column("data_type", attribute_data_type_enum, nullable=False),
        sa.Column("is_required", sa.Boolean, server_default="false", nullable=False),
        sa.Column("display_order", sa.Integer, server_default="0", nullable=False),
        sa.Column("hint", sa.String, nullable=True),
        sa.Column("max_length", sa.Integer, nullable=True),
        sa.Column("regex", sa.String(500), nullable=True),
        sa.Column("min_number", sa.Float, nullable=True),
        sa.Column("max_number", sa.Float, nullable=True),
        *_timestamps(),
        sa.UniqueConstraint("category_id", "slug", name="uq_category_attributes_category_slug"),
    )
    op.create_index("ix_category_attributes_category_id", "category_attributes", ["category_id"])

    # 3. attribute_options
    op.create_table(
        "attribute_options",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column(
            "attribute_id", sa.Uuid(),
            sa.ForeignKey("category_attributes.id", ondelete="CASCADE"), nullable=False,
        ),
        sa.Column("value", sa.String(255), nullable=False),
        sa.Column("code", sa.String(50), nullable=True),
        sa.Column("sort_order", sa.Integer, server_default="0", nullable=False),
        sa.Column("is_default", sa.Boolean, server_default="false", nullable=False),
        *_timestamps(),
    )
    op.create_index("ix_attribute_options_attribute_id", "attribute_options", ["attribute_id"])

    # 4. products
    op.create_table(
        "products",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("name", sa.String(500), nullable=False),
        sa.Column("sku", sa.String(100), nullable=False, unique=True),
        sa.Column("description", sa.String, nullable=True),
        sa.Column("price", sa.Numeric(12, 2), nullable=False),
        sa.Column("stock_quantity", sa.Integer, server_default="0", nullable=False),
        sa.Column("status", product_status_enum, server_default="DRAFT", nullable=False),
        sa.Column("category_id", sa.Uuid(), sa.ForeignKey("categories.id", ondelete="RESTRICT"), nullable=False),
        sa.Column("is_active", sa.Boolean, server_default="true", nullable=False),
        *_timestamps(),
    )
    op.create_index("ix_products_category_id", "products", ["category_id"])
    op.create_index("ix_products_status", "products", ["status"])

    # 5. product_attribute_values
    op.create_table(
        "product_attribute_values",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("product_id", sa.Uuid(), sa.ForeignKey("products.id", ondelete="CASCADE"), nullable=False),
        sa.Column(
            "attribute_id", sa.Uuid(),
            sa.ForeignKey("category_attributes.id", ondelete="RESTRICT"), nullable=False,
        ),
        sa.Column("value_text", sa.String, nullable=True),
        sa.Column("value_number", sa.Float, nullable=True),
        sa.Column("value_bool", sa.Boolean, nullable=True),
        sa.Column("value_date", sa.DateTime(timezone=True), nullable=True),
        sa.Column(
            "option_id", sa.Uuid(),
            sa.ForeignKey("attribute_options.id", ondelete="RESTRICT"), nullable=True,
        ),
        *_timestamps(),
        sa.UniqueConstraint(
            "product_id", "attribute_id", name="uq_product_attribute_values_product_attribute"
        ),
    )
    op.create_index(
        "ix_product_attribute_values_attribute_id", "product_attribute_values", ["attribute_id"]
    )


def downgrade() -> None:
    op.drop_index("ix_product_attribute_values_attribute_id", table_name="product_attribute_values")
    op.drop_table("product_attribute_values")
    op.drop_index("ix_products_status", table_name="products")
    op.drop_index("ix_products_category_id", table_name="products")
    op.drop_table("products")
    op.drop_index("ix_attribute_options_attribute_id", table_name="attribute_options")
    op.drop_table("attribute_options")
    op.drop_index("ix_category_attributes_category_id", table_name="category_attributes")
    op.drop_table("category_attributes")
    op.drop_index("ix_categories_parent_id", table_name="categories")
    op.drop_table("categories")
