"""Attribute value validation — decides whether a raw value is legal for a definition.

Everything here is pure: callers resolve the ENUM option (if any) before
calling :func:`validate_attribute_value`, so the rules can be exercised
without a database.
"""

from __future__ import annotations

import math
import re
import uuid
from datetime import date, datetime, time, timezone
from decimal import Decimal

from jsonschema import Draft7Validator

from catalog_admin.exceptions import AttributeValueException, InvalidConstraintException
from catalog_admin.models.attribute import AttributeOption, CategoryAttribute
from catalog_admin.models.enums import AttributeDataType
from catalog_admin.modules.attribute.constants import SCHEMA_KEYWORD_TO_RULE
from catalog_admin.modules.attribute.values import (
    AttributeValueData,
    BooleanValue,
    DateValue,
    EnumValue,
    NumberValue,
    TextValue,
)


def compile_pattern(regex: str) -> re.Pattern:
    """Compile a TEXT attribute's pattern in the anchored form values are checked with.

    Raises InvalidConstraintException if that form is not a valid regex, which
    includes inline global flags such as ``(?i)`` that are only legal at the
    very start of an expression.
    """
    try:
        return re.compile(anchored_pattern(regex))
    except re.error as exc:
        raise InvalidConstraintException(
            f"Invalid regex pattern: {exc}",
            details=[{"field": "regex", "message": str(exc)}],
        ) from exc


def anchored_pattern(regex: str) -> str:
    """Wrap *regex* so a search behaves like a full match."""
    return rf"\A(?:{regex})\Z"


def attribute_json_schema(attribute: CategoryAttribute, options: list[AttributeOption] | None = None) -> dict:
    """JSON Schema fragment describing the values *attribute* accepts.

    ENUM fragments list the ids of *options* when given. DATE values are
    ISO-8601 date-time strings.
    """
    fragment: dict = {"title": attribute.name}
    if attribute.hint:
        fragment["description"] = attribute.hint

    data_type = attribute.data_type
    if data_type == AttributeDataType.TEXT:
        fragment["type"] = "string"
        if attribute.max_length is not None:
            fragment["maxLength"] = attribute.max_length
        if attribute.regex:
            fragment["pattern"] = anchored_pattern(attribute.regex)
    elif data_type == AttributeDataType.NUMBER:
        fragment["type"] = "number"
        if attribute.min_number is not None:
            fragment["minimum"] = attribute.min_number
        if attribute.max_number is not None:
            fragment["maximum"] = attribute.max_number
    elif data_type == AttributeDataType.BOOLEAN:
        fragment["type"] = "boolean"
    elif data_type == AttributeDataType.DATE:
        fragment["type"] = "string"
        fragment["format"] = "date-time"
    elif data_type == AttributeDataType.ENUM:
        fragment["type"] = "string"
        if options is not None:
            fragment["enum"] = [str(option.id) for option in options]
    return fragment


def validate_attribute_value(
    attribute: CategoryAttribute,
    raw_value: object = None,
    *,
    option_id: uuid.UUID | None = None,
    option: AttributeOption | None = None,
) -> AttributeValueData:
    """Validate a candidate value against *attribute* and return it as a typed value.

    For ENUM attributes *raw_value* is ignored: *option_id* must be given and
    *option* must be the stored option with that id (``None`` if no such
    option exists). Raises :class:`AttributeValueException` naming the rule
    and limit that was violated.
    """
    data_type = AttributeDataType(attribute.data_type)

    if data_type == AttributeDataType.ENUM:
        return _validate_enum(attribute, option_id, option)

    if data_type == AttributeDataType.TEXT:
        value = _coerce_text(attribute, raw_value)
        _check_constraints(attribute, value.text)
    elif data_type == AttributeDataType.NUMBER:
        value = _coerce_number(attribute, raw_value)
        _check_constraints(attribute, value.number)
    elif data_type == AttributeDataType.BOOLEAN:
        value = _coerce_boolean(attribute, raw_value)
    else:
        value = _coerce_date(attribute, raw_value)
    return value


# ---------------------------------------------------------------------------
# Per-type coercion
# ---------------------------------------------------------------------------


def _coerce_text(attribute: CategoryAttribute, raw_value: object) -> TextValue:
    if not isinstance(raw_value, str):
        raise _rejected(attribute, "type", "string", "Value must be a string for TEXT attribute")
    return TextValue(raw_value)


def _coerce_number(attribute: CategoryAttribute, raw_value: object) -> NumberValue:
    # bool is an int subclass; it is never a number here
    if isinstance(raw_value, bool) or raw_value is None:
        raise _rejected(attribute, "type", "number", "Value must be a number for NUMBER attribute")

    if isinstance(raw_value, (int, float, Decimal)):
        try:
            number = float(raw_value)
        except OverflowError:
            raise _rejected(
                attribute, "type", "number", "Value is too large for NUMBER attribute"
            ) from None
    elif isinstance(raw_value, str):
        try:
            number = float(raw_value.strip())
        except ValueError:
            raise _rejected(
                attribute, "type", "number", "Value must be a number for NUMBER attribute"
            ) from None
    else:
        raise _rejected(attribute, "type", "number", "Value must be a number for NUMBER attribute")

    if not math.isfinite(number):
        raise _rejected(attribute, "type", "number", "Value must be a finite number")
    return NumberValue(number)


def _coerce_boolean(attribute: CategoryAttribute, raw_value: object) -> BooleanValue:
    if not isinstance(raw_value, bool):
        raise _rejected(attribute, "type", "boolean", "Value must be a boolean for BOOLEAN attribute")
    return BooleanValue(raw_value)


def _coerce_date(attribute: CategoryAttribute, raw_value: object) -> DateValue:
    message = "Value must be a valid date for DATE attribute"
    if isinstance(raw_value, datetime):
        moment = raw_value
    elif isinstance(raw_value, date):
        moment = datetime.combine(raw_value, time.min)
    elif isinstance(raw_value, str):
        try:
            moment = datetime.fromisoformat(raw_value.strip())
        except ValueError:
            raise _rejected(attribute, "type", "date-time", message) from None
    else:
        raise _rejected(attribute, "type", "date-time", message)

    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return DateValue(moment)


def _validate_enum(
    attribute: CategoryAttribute,
    option_id: uuid.UUID | None,
    option: AttributeOption | None,
) -> EnumValue:
    if option_id is None:
        raise _rejected(attribute, "option_id", None, "option_id is required for ENUM attribute")
    if option is None or option.id != option_id or option.attribute_id != attribute.id:
        raise _rejected(attribute, "option_id", str(option_id), "Invalid option for this attribute")
    return EnumValue(option.id)


# ---------------------------------------------------------------------------
# Constraint checks
# ---------------------------------------------------------------------------


def _check_constraints(attribute: CategoryAttribute, instance: str | float) -> None:
    """Run the attribute's JSON Schema fragment over an already-coerced value."""
    validator = Draft7Validator(attribute_json_schema(attribute))
    error = next(iter(sorted(validator.iter_errors(instance), key=lambda e: e.validator)), None)
    if error is None:
        return

    rule = SCHEMA_KEYWORD_TO_RULE.get(error.validator, error.validator)
    if rule == "max_length":
        raise _rejected(
            attribute, rule, attribute.max_length,
            f"Value exceeds maximum length of {attribute.max_length}",
        )
    if rule == "regex":
        raise _rejected(
            attribute, rule, attribute.regex,
            f"Value does not match required pattern {attribute.regex}",
        )
    if rule == "min_number":
        raise _rejected(
            attribute, rule, attribute.min_number,
            f"Value must be at least {_format_number(attribute.min_number)}",
        )
    if rule == "max_number":
        raise _rejected(
            attribute, rule, attribute.max_number,
            f"Value must be at most {_format_number(attribute.max_number)}",
        )
    raise _rejected(attribute, rule, error.validator_value, error.message)


def _format_number(number: float) -> str:
    return f"{number:g}"


def _rejected(
    attribute: CategoryAttribute,
    rule: str,
    limit: object,
    message: str,
) -> AttributeValueException:
    return AttributeValueException(
        message=f"{attribute.name}: {message}",
        details=[{
            "field": attribute.slug,
            "rule": rule,
            "limit": limit,
            "message": message,
        }],
    )
