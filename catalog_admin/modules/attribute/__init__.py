"""Attribute module — per-category attribute definitions, ENUM options and value validation."""

from catalog_admin.modules.attribute.schema_registry import AttributeSchemaRegistry
from catalog_admin.modules.attribute.validators import validate_attribute_value

__all__ = [
    "AttributeSchemaRegistry",
    "validate_attribute_value",
]
