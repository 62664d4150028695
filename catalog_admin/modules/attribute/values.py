"""Typed attribute values.

A stored value row has five nullable slots, one per data type. In code a
value is always one of the variants below; ``columns()`` flattens a variant
into the slot layout (the matching slot set, every other slot ``None``) and
``decode_columns`` reads a row back into its variant.
"""

from __future__ import annotations

import uuid
from collections.abc import Mapping
from dataclasses import dataclass, fields
from datetime import datetime
from typing import ClassVar

from catalog_admin.models.enums import AttributeDataType

VALUE_COLUMNS = ("value_text", "value_number", "value_bool", "value_date", "option_id")


class _SlotValue:
    data_type: ClassVar[AttributeDataType]
    slot: ClassVar[str]

    @property
    def payload(self):
        return getattr(self, fields(self)[0].name)

    def columns(self) -> dict:
        columns = dict.fromkeys(VALUE_COLUMNS)
        columns[self.slot] = self.payload
        return columns


@dataclass(frozen=True)
class TextValue(_SlotValue):
    text: str

    data_type: ClassVar[AttributeDataType] = AttributeDataType.TEXT
    slot: ClassVar[str] = "value_text"


@dataclass(frozen=True)
class NumberValue(_SlotValue):
    number: float

    data_type: ClassVar[AttributeDataType] = AttributeDataType.NUMBER
    slot: ClassVar[str] = "value_number"


@dataclass(frozen=True)
class BooleanValue(_SlotValue):
    flag: bool

    data_type: ClassVar[AttributeDataType] = AttributeDataType.BOOLEAN
    slot: ClassVar[str] = "value_bool"


@dataclass(frozen=True)
class DateValue(_SlotValue):
    moment: datetime

    data_type: ClassVar[AttributeDataType] = AttributeDataType.DATE
    slot: ClassVar[str] = "value_date"


@dataclass(frozen=True)
class EnumValue(_SlotValue):
    option_id: uuid.UUID

    data_type: ClassVar[AttributeDataType] = AttributeDataType.ENUM
    slot: ClassVar[str] = "option_id"


AttributeValueData = TextValue | NumberValue | BooleanValue | DateValue | EnumValue

VARIANT_BY_TYPE: dict[AttributeDataType, type[_SlotValue]] = {
    variant.data_type: variant
    for variant in (TextValue, NumberValue, BooleanValue, DateValue, EnumValue)
}


def decode_columns(data_type: AttributeDataType, columns: Mapping) -> AttributeValueData | None:
    """Rebuild the variant for *data_type* from a row's slot columns.

    Returns ``None`` when the slot belonging to *data_type* is empty.
    """
    variant = VARIANT_BY_TYPE[AttributeDataType(data_type)]
    payload = columns.get(variant.slot)
    if payload is None:
        return None
    return variant(payload)
