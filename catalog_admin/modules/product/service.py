"""Product service — CRUD, attribute-value upsert, and the draft-to-active activation gate."""

from __future__ import annotations

import logging
import math
import uuid
from datetime import datetime, timezone

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from catalog_admin.database.upsert import upsert_statement
from catalog_admin.exceptions import (
    ConflictException,
    IncompleteAttributesException,
    NotFoundException,
    ReferenceNotFoundException,
)
from catalog_admin.models.attribute_value import ProductAttributeValue
from catalog_admin.models.category import Category
from catalog_admin.models.enums import ProductStatus
from catalog_admin.models.product import Product
from catalog_admin.modules.attribute.schema_registry import AttributeSchemaRegistry
from catalog_admin.modules.attribute.values import VALUE_COLUMNS
from catalog_admin.modules.product.schemas import (
    ProductCreate,
    ProductDetailResponse,
    ProductListResponse,
    ProductResponse,
    ProductUpdate,
    SetAttributeValueRequest,
)
from catalog_admin.schemas.responses import PaginationMeta

logger = logging.getLogger(__name__)


class ProductService:
    def __init__(self, session: AsyncSession, registry: AttributeSchemaRegistry | None = None) -> None:
        self._session = session
        self._registry = registry or AttributeSchemaRegistry(session)

    # ------------------------------------------------------------------
    # CRUD
    # ------------------------------------------------------------------

    async def create_product(self, data: ProductCreate) -> Product:
        await self._get_category_or_reference_error(data.category_id)
        await self._ensure_sku_available(data.sku)

        product = Product(**data.model_dump(), values=[])
        self._session.add(product)
        await self._session.flush()

        logger.info(
            "Created product %s (%s) in category %s with status %s",
            product.id, product.sku, product.category_id, product.status.value,
        )
        return await self._get_detail_or_404(product.id)

    async def get_product(self, product_id: uuid.UUID) -> Product:
        return await self._get_detail_or_404(product_id)

    async def list_products(
        self,
        page: int = 1,
        limit: int = 20,
        category_id: uuid.UUID | None = None,
        status: ProductStatus | None = None,
    ) -> ProductListResponse:
        """Newest-first page of products with total and page counts."""
        filters = []
        if category_id is not None:
            filters.append(Product.category_id == category_id)
        if status is not None:
            filters.append(Product.status == status)

        count_stmt = select(func.count()).select_from(Product)
        for condition in filters:
            count_stmt = count_stmt.where(condition)
        total_result = await self._session.execute(count_stmt)
        total = total_result.scalar() or 0

        values_sub = (
            select(ProductAttributeValue.product_id.label("product_id"), func.count().label("values_count"))
            .group_by(ProductAttributeValue.product_id)
            .subquery()
        )
        stmt = (
            select(Product, func.coalesce(values_sub.c.values_count, 0))
            .outerjoin(values_sub, values_sub.c.product_id == Product.id)
            .options(selectinload(Product.category))
            .order_by(Product.created_at.desc(), Product.name)
            .limit(limit)
            .offset((page - 1) * limit)
        )
        for condition in filters:
            stmt = stmt.where(condition)
        result = await self._session.execute(stmt)

        items = []
        for product, values_count in result.all():
            resp = ProductResponse.model_validate(product)
            resp.category_name = product.category.name
            resp.values_count = values_count
            items.append(resp)

        return ProductListResponse(
            items=items,
            meta=PaginationMeta(
                page=page,
                limit=limit,
                total_items=total,
                total_pages=math.ceil(total / limit) if limit else 0,
            ),
        )

    async def update_product(self, product_id: uuid.UUID, data: ProductUpdate) -> Product:
        """Apply a partial update. A ``status`` given here is written as-is, without the activation gate."""
        product = await self._get_product_or_404(product_id)
        update_data = data.model_dump(exclude_unset=True)

        if update_data.get("category_id") is not None and update_data["category_id"] != product.category_id:
            await self._get_category_or_reference_error(update_data["category_id"])
        if update_data.get("sku") is not None and update_data["sku"] != product.sku:
            await self._ensure_sku_available(update_data["sku"])

        for field, value in update_data.items():
            setattr(product, field, value)
        await self._session.flush()

        logger.info("Updated product %s fields=%s", product_id, sorted(update_data))
        return await self._get_detail_or_404(product_id)

    async def delete_product(self, product_id: uuid.UUID) -> None:
        """Delete a product together with its stored attribute values."""
        stmt = (
            select(Product)
            .options(selectinload(Product.values))
            .where(Product.id == product_id)
            .execution_options(populate_existing=True)
        )
        result = await self._session.execute(stmt)
        product = result.scalar_one_or_none()
        if product is None:
            raise NotFoundException(f"Product {product_id} not found")

        await self._session.delete(product)
        await self._session.flush()
        logger.info("Deleted product %s (%s)", product_id, product.sku)

    # ------------------------------------------------------------------
    # Attribute values
    # ------------------------------------------------------------------

    async def set_attribute_value(self, data: SetAttributeValueRequest) -> ProductAttributeValue:
        """Validate a raw value for one of the product's category attributes and store it.

        The stored row is keyed by (product, attribute): a second call for the
        same pair overwrites the first, and only the slot matching the
        attribute's data type is left populated.
        """
        product = await self._session.get(Product, data.product_id)
        if product is None:
            raise ReferenceNotFoundException(
                f"Product {data.product_id} not found",
                details=[{"field": "product_id", "message": "Product not found"}],
            )

        attribute = await self._registry.find_definition(data.attribute_id)
        if attribute is None or attribute.category_id != product.category_id:
            raise ReferenceNotFoundException(
                "Attribute not found or does not belong to product category",
                details=[{"field": "attribute_id", "message": "Attribute not found in the product's category"}],
            )

        typed_value = await self._registry.validate_value(attribute, data.value, data.option_id)

        now = datetime.now(timezone.utc)
        stmt = upsert_statement(
            self._session,
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
        await self._session.execute(stmt)

        logger.info(
            "Set %s value of attribute %s on product %s",
            attribute.data_type.value, attribute.slug, product.id,
        )
        return await self._get_value(product.id, attribute.id)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def activate_product(self, product_id: uuid.UUID) -> Product:
        """Move a product to ACTIVE once every required attribute of its category has a value."""
        product = await self._get_product_or_404(product_id)

        required = await self._registry.list_required(product.category_id)
        stored_stmt = select(ProductAttributeValue.attribute_id).where(
            ProductAttributeValue.product_id == product_id
        )
        stored_result = await self._session.execute(stored_stmt)
        stored_ids = set(stored_result.scalars().all())

        missing = [attribute for attribute in required if attribute.id not in stored_ids]
        if missing:
            logger.warning(
                "Activation of product %s refused, missing required attributes: %s",
                product_id, [attribute.slug for attribute in missing],
            )
            raise IncompleteAttributesException(
                missing=[attribute.name for attribute in missing],
                details=[
                    {
                        "field": attribute.slug,
                        "attribute_id": str(attribute.id),
                        "message": f"Required attribute '{attribute.name}' has no value",
                    }
                    for attribute in missing
                ],
            )

        product.status = ProductStatus.ACTIVE
        await self._session.flush()

        logger.info("Activated product %s (%s)", product_id, product.sku)
        return await self._get_detail_or_404(product_id)

    async def describe_product(self, product: Product) -> ProductDetailResponse:
        """Detail view: the product, its stored values and its category's attribute definitions."""
        resp = ProductDetailResponse.model_validate(product)
        resp.category_name = product.category.name
        resp.values_count = len(product.values)
        resp.attributes = await self._registry.list_by_category(product.category_id)
        return resp

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    async def _get_value(self, product_id: uuid.UUID, attribute_id: uuid.UUID) -> ProductAttributeValue:
        stmt = (
            select(ProductAttributeValue)
            .options(
                selectinload(ProductAttributeValue.attribute),
                selectinload(ProductAttributeValue.option),
            )
            .where(
                ProductAttributeValue.product_id == product_id,
                ProductAttributeValue.attribute_id == attribute_id,
            )
            .execution_options(populate_existing=True)
        )
        result = await self._session.execute(stmt)
        return result.scalar_one()

    async def _get_detail_or_404(self, product_id: uuid.UUID) -> Product:
        stmt = (
            select(Product)
            .options(
                selectinload(Product.category),
                selectinload(Product.values).selectinload(ProductAttributeValue.attribute),
                selectinload(Product.values).selectinload(ProductAttributeValue.option),
            )
            .where(Product.id == product_id)
            .execution_options(populate_existing=True)
        )
        result = await self._session.execute(stmt)
        product = result.scalar_one_or_none()
        if product is None:
            raise NotFoundException(f"Product {product_id} not found")
        return product

    async def _get_product_or_404(self, product_id: uuid.UUID) -> Product:
        product = await self._session.get(Product, product_id)
        if product is None:
            raise NotFoundException(f"Product {product_id} not found")
        return product

    async def _get_category_or_reference_error(self, category_id: uuid.UUID) -> Category:
        category = await self._session.get(Category, category_id)
        if category is None:
            raise ReferenceNotFoundException(
                f"Category {category_id} not found",
                details=[{"field": "category_id", "message": "Category not found"}],
            )
        return category

    async def _ensure_sku_available(self, sku: str) -> None:
        existing = await self._session.execute(select(Product.id).where(Product.sku == sku))
        if existing.scalar_one_or_none() is not None:
            raise ConflictException(f"Product with SKU '{sku}' already exists")
