"""Category service — tree maintenance with parent/child and dependent-entity invariants."""

from __future__ import annotations

import logging
import uuid

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from catalog_admin.config import settings
from catalog_admin.exceptions import (
    ConflictException,
    InvalidOperationException,
    NotFoundException,
    ReferenceNotFoundException,
)
from catalog_admin.models.attribute import CategoryAttribute
from catalog_admin.models.attribute_value import ProductAttributeValue
from catalog_admin.models.category import Category
from catalog_admin.models.product import Product
from catalog_admin.modules.attribute.schema_registry import AttributeSchemaRegistry
from catalog_admin.modules.category.schemas import (
    CategoryCreate,
    CategoryDetailResponse,
    CategoryResponse,
    CategoryUpdate,
    RecentProduct,
)

logger = logging.getLogger(__name__)


class CategoryService:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session
        self._registry = AttributeSchemaRegistry(session)

    # ------------------------------------------------------------------
    # CRUD
    # ------------------------------------------------------------------

    async def create_category(self, data: CategoryCreate) -> CategoryResponse:
        if data.parent_id is not None:
            await self._get_parent_or_reference_error(data.parent_id)
        await self._ensure_slug_available(data.slug)

        category = Category(**data.model_dump())
        self._session.add(category)
        await self._session.flush()

        logger.info("Created category %s (%s) under parent %s", category.id, category.slug, category.parent_id)
        return await self._summarize(category.id)

    async def list_categories(self) -> list[CategoryResponse]:
        stmt = self._summary_stmt().order_by(Category.name)
        result = await self._session.execute(stmt)
        return [self._to_response(*row) for row in result.all()]

    async def get_category(self, category_id: uuid.UUID) -> CategoryDetailResponse:
        """Category with its tree links, counts, ordered attributes and a recent-products sample."""
        summary = await self._summarize(category_id)
        attributes = await self._registry.list_by_category(category_id)

        recent_stmt = (
            select(Product)
            .where(Product.category_id == category_id)
            .order_by(Product.created_at.desc())
            .limit(settings.recent_products_limit)
        )
        result = await self._session.execute(recent_stmt)
        recent = [RecentProduct.model_validate(p) for p in result.scalars().all()]

        return CategoryDetailResponse(
            **summary.model_dump(),
            attributes=attributes,
            recent_products=recent,
        )

    async def update_category(self, category_id: uuid.UUID, data: CategoryUpdate) -> CategoryResponse:
        category = await self._get_category_or_404(category_id)
        update_data = data.model_dump(exclude_unset=True)

        new_parent_id = update_data.get("parent_id")
        if new_parent_id is not None and new_parent_id != category.parent_id:
            # Only direct self-parenting is rejected; deeper cycles are not traced
            if new_parent_id == category_id:
                raise InvalidOperationException(
                    "Category cannot be its own parent",
                    details=[{"field": "parent_id", "message": "Must differ from the category id"}],
                )
            await self._get_parent_or_reference_error(new_parent_id)

        if "slug" in update_data and update_data["slug"] != category.slug:
            await self._ensure_slug_available(update_data["slug"])

        for field, value in update_data.items():
            setattr(category, field, value)
        await self._session.flush()

        logger.info("Updated category %s fields=%s", category_id, sorted(update_data))
        return await self._summarize(category_id)

    async def delete_category(self, category_id: uuid.UUID) -> None:
        """Delete a leaf category with no products, together with its attribute definitions.

        Values still stored against those definitions by products that have
        since moved to another category are removed as well.
        """
        stmt = (
            select(Category)
            .options(selectinload(Category.attributes).selectinload(CategoryAttribute.options))
            .where(Category.id == category_id)
            .execution_options(populate_existing=True)
        )
        result = await self._session.execute(stmt)
        category = result.scalar_one_or_none()
        if category is None:
            raise NotFoundException(f"Category {category_id} not found")

        children = await self._count(select(func.count()).select_from(Category).where(
            Category.parent_id == category_id
        ))
        if children > 0:
            raise InvalidOperationException(
                "Cannot delete category with child categories",
                details=[{"field": "children", "message": f"{children} child categories"}],
            )

        products = await self._count(select(func.count()).select_from(Product).where(
            Product.category_id == category_id
        ))
        if products > 0:
            raise InvalidOperationException(
                "Cannot delete category with products",
                details=[{"field": "products", "message": f"{products} products"}],
            )

        # Values left behind by products that moved to another category
        attribute_ids = [attribute.id for attribute in category.attributes]
        stale_values = 0
        if attribute_ids:
            result = await self._session.execute(
                delete(ProductAttributeValue).where(ProductAttributeValue.attribute_id.in_(attribute_ids))
            )
            stale_values = result.rowcount

        await self._session.delete(category)
        await self._session.flush()
        logger.info(
            "Deleted category %s (%s) with %d attributes, %d stale values",
            category_id, category.slug, len(attribute_ids), stale_values,
        )

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _summary_stmt(self):
        """Categories with parent/children loaded and child, attribute and product counts."""
        children_sub = (
            select(Category.parent_id.label("cat_id"), func.count().label("children_count"))
            .where(Category.parent_id.is_not(None))
            .group_by(Category.parent_id)
            .subquery()
        )
        attribute_sub = (
            select(CategoryAttribute.category_id.label("cat_id"), func.count().label("attributes_count"))
            .group_by(CategoryAttribute.category_id)
            .subquery()
        )
        product_sub = (
            select(Product.category_id.label("cat_id"), func.count().label("products_count"))
            .group_by(Product.category_id)
            .subquery()
        )

        return (
            select(
                Category,
                func.coalesce(children_sub.c.children_count, 0),
                func.coalesce(attribute_sub.c.attributes_count, 0),
                func.coalesce(product_sub.c.products_count, 0),
            )
            .outerjoin(children_sub, children_sub.c.cat_id == Category.id)
            .outerjoin(attribute_sub, attribute_sub.c.cat_id == Category.id)
            .outerjoin(product_sub, product_sub.c.cat_id == Category.id)
            .options(selectinload(Category.parent), selectinload(Category.children))
            .execution_options(populate_existing=True)
        )

    @staticmethod
    def _to_response(
        category: Category,
        children_count: int,
        attributes_count: int,
        products_count: int,
    ) -> CategoryResponse:
        resp = CategoryResponse.model_validate(category)
        resp.children_count = children_count
        resp.attributes_count = attributes_count
        resp.products_count = products_count
        return resp

    async def _summarize(self, category_id: uuid.UUID) -> CategoryResponse:
        result = await self._session.execute(self._summary_stmt().where(Category.id == category_id))
        row = result.one_or_none()
        if row is None:
            raise NotFoundException(f"Category {category_id} not found")
        return self._to_response(*row)

    async def _count(self, stmt) -> int:
        result = await self._session.execute(stmt)
        return result.scalar() or 0

    async def _ensure_slug_available(self, slug: str) -> None:
        existing = await self._session.execute(select(Category.id).where(Category.slug == slug))
        if existing.scalar_one_or_none() is not None:
            raise ConflictException(f"Category slug '{slug}' already exists")

    async def _get_parent_or_reference_error(self, parent_id: uuid.UUID) -> Category:
        parent = await self._session.get(Category, parent_id)
        if parent is None:
            raise ReferenceNotFoundException(
                f"Parent category {parent_id} not found",
                details=[{"field": "parent_id", "message": "Parent category not found"}],
            )
        return parent

    async def _get_category_or_404(self, category_id: uuid.UUID) -> Category:
        category = await self._session.get(Category, category_id)
        if category is None:
            raise NotFoundException(f"Category {category_id} not found")
        return category
