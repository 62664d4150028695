"""Attribute module constants — constraint fields per data type and rule names."""

from catalog_admin.models.enums import AttributeDataType

# Constraint columns that carry meaning for each data type; all others are dropped
CONSTRAINT_FIELDS_BY_TYPE: dict[AttributeDataType, frozenset[str]] = {
    AttributeDataType.TEXT: frozenset({"max_length", "regex"}),
    AttributeDataType.NUMBER: frozenset({"min_number", "max_number"}),
    AttributeDataType.BOOLEAN: frozenset(),
    AttributeDataType.DATE: frozenset(),
    AttributeDataType.ENUM: frozenset(),
}

ALL_CONSTRAINT_FIELDS = frozenset({"max_length", "regex", "min_number", "max_number"})

# JSON Schema keyword -> attribute constraint column
SCHEMA_KEYWORD_TO_RULE = {
    "type": "type",
    "maxLength": "max_length",
    "pattern": "regex",
    "minimum": "min_number",
    "maximum": "max_number",
    "enum": "option_id",
}

JSON_SCHEMA_DRAFT = "http://json-schema.org/draft-07/schema#"
