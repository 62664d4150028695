# Import all models so SQLAlchemy metadata is populated for Alembic autogenerate
from catalog_admin.models.attribute import AttributeOption, CategoryAttribute
from catalog_admin.models.attribute_value import ProductAttributeValue
from catalog_admin.models.category import Category
from catalog_admin.models.enums import AttributeDataType, ProductStatus
from catalog_admin.models.product import Product

__all__ = [
    "AttributeDataType",
    "AttributeOption",
    "Category",
    "CategoryAttribute",
    "Product",
    "ProductAttributeValue",
    "ProductStatus",
]
