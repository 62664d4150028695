"""Attribute schema registry — per-category attribute definitions and ENUM options."""

from __future__ import annotations

import logging
import uuid

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from catalog_admin.exceptions import (
    ConflictException,
    InvalidConstraintException,
    InvalidOperationException,
    NotFoundException,
    ReferenceNotFoundException,
)
from catalog_admin.models.attribute import AttributeOption, CategoryAttribute
from catalog_admin.models.attribute_value import ProductAttributeValue
from catalog_admin.models.category import Category
from catalog_admin.models.enums import AttributeDataType
from catalog_admin.modules.attribute.constants import (
    ALL_CONSTRAINT_FIELDS,
    CONSTRAINT_FIELDS_BY_TYPE,
    JSON_SCHEMA_DRAFT,
)
from catalog_admin.modules.attribute.schemas import AttributeCreate, AttributeResponse, OptionCreate
from catalog_admin.modules.attribute.validators import (
    attribute_json_schema,
    compile_pattern,
    validate_attribute_value,
)
from catalog_admin.modules.attribute.values import AttributeValueData

logger = logging.getLogger(__name__)


class AttributeSchemaRegistry:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    # ------------------------------------------------------------------
    # Definitions
    # ------------------------------------------------------------------

    async def define_attribute(self, data: AttributeCreate) -> AttributeResponse:
        """Attach a typed attribute definition to an existing category.

        Constraint fields that do not belong to ``data.data_type`` are
        dropped. NUMBER bounds must be ordered and TEXT patterns must compile.
        """
        category = await self._session.get(Category, data.category_id)
        if category is None:
            raise ReferenceNotFoundException(
                f"Category {data.category_id} not found",
                details=[{"field": "category_id", "message": "Category not found"}],
            )

        existing = await self._session.execute(
            select(CategoryAttribute.id).where(
                CategoryAttribute.category_id == data.category_id,
                CategoryAttribute.slug == data.slug,
            )
        )
        if existing.scalar_one_or_none() is not None:
            raise ConflictException(
                f"Attribute slug '{data.slug}' already exists in category {data.category_id}"
            )

        fields = data.model_dump()
        for name in ALL_CONSTRAINT_FIELDS - CONSTRAINT_FIELDS_BY_TYPE[data.data_type]:
            fields[name] = None

        if data.data_type == AttributeDataType.NUMBER:
            min_number, max_number = fields["min_number"], fields["max_number"]
            if min_number is not None and max_number is not None and min_number > max_number:
                raise InvalidConstraintException(
                    "minNumber cannot be greater than maxNumber",
                    details=[
                        {"field": "min_number", "message": f"{min_number} > max_number {max_number}"},
                    ],
                )
        if fields["regex"]:
            compile_pattern(fields["regex"])

        attribute = CategoryAttribute(**fields, options=[])
        self._session.add(attribute)
        await self._session.flush()

        logger.info(
            "Defined %s attribute %s (%s) on category %s",
            attribute.data_type.value, attribute.id, attribute.slug, attribute.category_id,
        )
        return AttributeResponse.model_validate(attribute)

    async def define_option(self, data: OptionCreate) -> AttributeOption:
        attribute = await self._session.get(CategoryAttribute, data.attribute_id)
        if attribute is None:
            raise ReferenceNotFoundException(
                f"Attribute {data.attribute_id} not found",
                details=[{"field": "attribute_id", "message": "Attribute not found"}],
            )
        if attribute.data_type != AttributeDataType.ENUM:
            raise InvalidOperationException(
                "Options can only be added to ENUM attributes",
                details=[{
                    "field": "attribute_id",
                    "message": f"Attribute '{attribute.slug}' is {attribute.data_type.value}",
                }],
            )

        option = AttributeOption(**data.model_dump())
        self._session.add(option)
        await self._session.flush()

        logger.info("Added option %s (%s) to attribute %s", option.id, option.value, attribute.id)
        return option

    async def list_by_category(self, category_id: uuid.UUID) -> list[AttributeResponse]:
        """Definitions of a category by display order, options by sort order, with usage counts."""
        attributes = await self._list_definitions(category_id)
        usage = await self._usage_counts([a.id for a in attributes])

        items = []
        for attribute in attributes:
            resp = AttributeResponse.model_validate(attribute)
            resp.usage_count = usage.get(attribute.id, 0)
            items.append(resp)
        return items

    async def get_attribute(self, attribute_id: uuid.UUID) -> AttributeResponse:
        attribute = await self._get_attribute_or_404(attribute_id)
        resp = AttributeResponse.model_validate(attribute)
        resp.usage_count = await self.usage_count(attribute_id)
        return resp

    async def delete_attribute(self, attribute_id: uuid.UUID) -> None:
        """Delete a definition and its options. Refused while any product holds a value for it."""
        attribute = await self._get_attribute_or_404(attribute_id)

        usage = await self.usage_count(attribute_id)
        if usage > 0:
            raise InvalidOperationException(
                "Cannot delete attribute that has product values",
                details=[{"field": "attribute_id", "message": f"{usage} product value(s) reference it"}],
            )

        await self._session.delete(attribute)
        await self._session.flush()
        logger.info("Deleted attribute %s (%s)", attribute_id, attribute.slug)

    # ------------------------------------------------------------------
    # Lookups used by the product lifecycle
    # ------------------------------------------------------------------

    async def find_definition(self, attribute_id: uuid.UUID) -> CategoryAttribute | None:
        return await self._session.get(CategoryAttribute, attribute_id)

    async def list_required(self, category_id: uuid.UUID) -> list[CategoryAttribute]:
        stmt = (
            select(CategoryAttribute)
            .where(
                CategoryAttribute.category_id == category_id,
                CategoryAttribute.is_required.is_(True),
            )
            .order_by(CategoryAttribute.display_order, CategoryAttribute.name)
        )
        result = await self._session.execute(stmt)
        return list(result.scalars().all())

    async def usage_count(self, attribute_id: uuid.UUID) -> int:
        stmt = select(func.count()).select_from(ProductAttributeValue).where(
            ProductAttributeValue.attribute_id == attribute_id
        )
        result = await self._session.execute(stmt)
        return result.scalar() or 0

    async def validate_value(
        self,
        attribute: CategoryAttribute,
        raw_value: object = None,
        option_id: uuid.UUID | None = None,
    ) -> AttributeValueData:
        """Validate a candidate value for *attribute*, resolving the ENUM option first."""
        option = None
        if attribute.data_type == AttributeDataType.ENUM and option_id is not None:
            option = await self._session.get(AttributeOption, option_id)
        return validate_attribute_value(attribute, raw_value, option_id=option_id, option=option)

    # ------------------------------------------------------------------
    # JSON Schema export
    # ------------------------------------------------------------------

    async def build_json_schema(self, category_id: uuid.UUID) -> dict:
        """Render a category's attribute definitions as a JSON Schema document keyed by slug."""
        category = await self._session.get(Category, category_id)
        if category is None:
            raise NotFoundException(f"Category {category_id} not found")

        attributes = await self._list_definitions(category_id)
        return {
            "$schema": JSON_SCHEMA_DRAFT,
            "title": category.name,
            "type": "object",
            "properties": {
                a.slug: attribute_json_schema(a, a.options) for a in attributes
            },
            "required": [a.slug for a in attributes if a.is_required],
            "additionalProperties": False,
        }

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    async def _list_definitions(self, category_id: uuid.UUID) -> list[CategoryAttribute]:
        stmt = (
            select(CategoryAttribute)
            .options(selectinload(CategoryAttribute.options))
            .where(CategoryAttribute.category_id == category_id)
            .execution_options(populate_existing=True)
            .order_by(CategoryAttribute.display_order, CategoryAttribute.name)
        )
        result = await self._session.execute(stmt)
        return list(result.scalars().all())

    async def _usage_counts(self, attribute_ids: list[uuid.UUID]) -> dict[uuid.UUID, int]:
        if not attribute_ids:
            return {}
        stmt = (
            select(ProductAttributeValue.attribute_id, func.count())
            .where(ProductAttributeValue.attribute_id.in_(attribute_ids))
            .group_by(ProductAttributeValue.attribute_id)
        )
        result = await self._session.execute(stmt)
        return {attribute_id: count for attribute_id, count in result.all()}

    async def _get_attribute_or_404(self, attribute_id: uuid.UUID) -> CategoryAttribute:
        stmt = (
            select(CategoryAttribute)
            .options(selectinload(CategoryAttribute.options))
            .where(CategoryAttribute.id == attribute_id)
            .execution_options(populate_existing=True)
        )
        result = await self._session.execute(stmt)
        attribute = result.scalar_one_or_none()
        if attribute is None:
            raise NotFoundException(f"Attribute {attribute_id} not found")
        return attribute
