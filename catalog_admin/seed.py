"""Database seeder for the catalog — demo categories, attribute schemas and draft products.

Run via: python -m catalog_admin.seed

Re-running is safe: rows are looked up by their natural keys (category
slug, attribute slug within its category, option value, product SKU) and
only created when missing. Stored values are upserted.
"""

import uuid
from datetime import UTC, datetime
from decimal import Decimal

from sqlalchemy import select
from sqlalchemy.orm import Session

from catalog_admin.database.engine import sync_engine
from catalog_admin.database.upsert import upsert_statement
from catalog_admin.models import (
    AttributeDataType,
    AttributeOption,
    Category,
    CategoryAttribute,
    Product,
    ProductAttributeValue,
    ProductStatus,
)
from catalog_admin.modules.attribute.validators import validate_attribute_value
from catalog_admin.modules.attribute.values import VALUE_COLUMNS

# ---------------------------------------------------------------------------
# Seed data (kept inline as it's small)
# ---------------------------------------------------------------------------

CATEGORIES: list[dict] = [
    {
        "name": "Dresses",
        "slug": "dresses",
        "description": "Women's dresses and formal wear",
        "attributes": [
            {
                "name": "Size", "slug": "size", "data_type": AttributeDataType.ENUM,
                "is_required": True, "display_order": 1,
                "options": [
                    {"value": "XS", "code": "xs", "sort_order": 1},
                    {"value": "S", "code": "s", "sort_order": 2},
                    {"value": "M", "code": "m", "sort_order": 3, "is_default": True},
                    {"value": "L", "code": "l", "sort_order": 4},
                    {"value": "XL", "code": "xl", "sort_order": 5},
                ],
            },
            {
                "name": "Color", "slug": "color", "data_type": AttributeDataType.TEXT,
                "is_required": True, "display_order": 2, "max_length": 50,
            },
            {
                "name": "Length (inches)", "slug": "length", "data_type": AttributeDataType.NUMBER,
                "is_required": False, "display_order": 3, "min_number": 20, "max_number": 60,
            },
        ],
    },
    {
        "name": "Shoes",
        "slug": "shoes",
        "description": "Footwear for all occasions",
        "attributes": [
            {
                "name": "Size", "slug": "size", "data_type": AttributeDataType.ENUM,
                "is_required": True, "display_order": 1,
                "options": [
                    {"value": "6", "code": "6", "sort_order": 1},
                    {"value": "7", "code": "7", "sort_order": 2},
                    {"value": "8", "code": "8", "sort_order": 3},
                    {"value": "9", "code": "9", "sort_order": 4, "is_default": True},
                    {"value": "10", "code": "10", "sort_order": 5},
                    {"value": "11", "code": "11", "sort_order": 6},
                ],
            },
            {
                "name": "Brand", "slug": "brand", "data_type": AttributeDataType.TEXT,
                "is_required": True, "display_order": 2, "max_length": 100,
            },
            {
                "name": "Waterproof", "slug": "waterproof", "data_type": AttributeDataType.BOOLEAN,
                "is_required": False, "display_order": 3,
            },
        ],
    },
]

# ENUM values name the option by its display value
PRODUCTS: list[dict] = [
    {
        "name": "Elegant Black Dress",
        "sku": "DRESS-BLK-001",
        "description": "Classic black cocktail dress perfect for evening events",
        "price": Decimal("129.99"),
        "stock_quantity": 15,
        "category": "dresses",
        "values": {"size": "M", "color": "Black", "length": 42},
    },
    {
        "name": "Athletic Running Shoes",
        "sku": "SHOE-RUN-001",
        "description": "Comfortable running shoes with excellent support",
        "price": Decimal("89.99"),
        "stock_quantity": 25,
        "category": "shoes",
        "values": {"size": "9", "brand": "Nike", "waterproof": False},
    },
]


# ---------------------------------------------------------------------------
# Seed functions
# ---------------------------------------------------------------------------


def seed_categories(session: Session) -> dict[str, Category]:
    """Create the demo categories with their attribute definitions and ENUM options."""
    categories: dict[str, Category] = {}
    for entry in CATEGORIES:
        category = session.execute(
            select(Category).where(Category.slug == entry["slug"])
        ).scalar_one_or_none()
        if category is None:
            category = Category(
                name=entry["name"], slug=entry["slug"], description=entry["description"], is_active=True,
            )
            session.add(category)
            session.flush()

        for attr in entry["attributes"]:
            seed_attribute(session, category, attr)
        categories[category.slug] = category

    print(f"  Seeded {len(categories)} categories.")
    return categories


def seed_attribute(session: Session, category: Category, attr: dict) -> CategoryAttribute:
    attribute = session.execute(
        select(CategoryAttribute).where(
            CategoryAttribute.category_id == category.id,
            CategoryAttribute.slug == attr["slug"],
        )
    ).scalar_one_or_none()
    if attribute is None:
        fields = {k: v for k, v in attr.items() if k != "options"}
        attribute = CategoryAttribute(category_id=category.id, **fields)
        session.add(attribute)
        session.flush()

    for opt in attr.get("options", []):
        existing = session.execute(
            select(AttributeOption.id).where(
                AttributeOption.attribute_id == attribute.id,
                AttributeOption.value == opt["value"],
            )
        ).scalar_one_or_none()
        if existing is None:
            session.add(AttributeOption(attribute_id=attribute.id, **opt))
    session.flush()
    return attribute


def seed_products(session: Session, categories: dict[str, Category]) -> None:
    """Create draft products and store their attribute values through the value validator."""
    for entry in PRODUCTS:
        category = categories[entry["category"]]
        product = session.execute(
            select(Product).where(Product.sku == entry["sku"])
        ).scalar_one_or_none()
        if product is None:
            product = Product(
                name=entry["name"],
                sku=entry["sku"],
                description=entry["description"],
                price=entry["price"],
                stock_quantity=entry["stock_quantity"],
                status=ProductStatus.DRAFT,
                category_id=category.id,
            )
            session.add(product)
            session.flush()

        for slug, raw in entry["values"].items():
            seed_value(session, product, category, slug, raw)

    print(f"  Seeded {len(PRODUCTS)} products.")


def seed_value(session: Session, product: Product, category: Category, slug: str, raw: object) -> None:
    attribute = session.execute(
        select(CategoryAttribute).where(
            CategoryAttribute.category_id == category.id,
            CategoryAttribute.slug == slug,
        )
    ).scalar_one()

    option = None
    if attribute.data_type == AttributeDataType.ENUM:
        option = session.execute(
            select(AttributeOption).where(
                AttributeOption.attribute_id == attribute.id,
                AttributeOption.value == raw,
            )
        ).scalar_one()
    typed_value = validate_attribute_value(
        attribute, raw, option_id=option.id if option else None, option=option,
    )

    now = datetime.now(UTC)
    session.execute(
        upsert_statement(
            session,
            ProductAttributeValue.__table__,
            values={
                "id": uuid.uuid4(),
                "product_id": product.id,
                "attribute_id": attribute.id,
                **typed_value.columns(),
                "created_at": now,
                "updated_at": now,
            },
            conflict_columns=["product_id", "attribute_id"],
            update_columns=[*VALUE_COLUMNS, "updated_at"],
        )
    )


def main() -> None:
    """Run all seed functions inside a single transaction."""
    print("Seeding catalog database...")

    with Session(sync_engine) as session:
        with session.begin():
            # 1. Categories, attribute definitions and options
            categories = seed_categories(session)

            # 2. Products and their values (FK → categories, attributes, options)
            seed_products(session, categories)

    print("Seeding complete.")


if __name__ == "__main__":
    main()
