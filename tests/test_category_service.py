"""Tests for CategoryService — tree links, counts and delete guards."""

import uuid

import pytest

from catalog_admin.exceptions import (
    ConflictException,
    InvalidOperationException,
    NotFoundException,
    ReferenceNotFoundException,
)
from catalog_admin.models.enums import AttributeDataType
from catalog_admin.modules.attribute.schema_registry import AttributeSchemaRegistry
from catalog_admin.modules.attribute.schemas import AttributeCreate, OptionCreate
from catalog_admin.modules.category.schemas import CategoryCreate, CategoryUpdate
from catalog_admin.modules.category.service import CategoryService
from catalog_admin.modules.product.schemas import ProductCreate, ProductUpdate, SetAttributeValueRequest
from catalog_admin.modules.product.service import ProductService


async def _create(service: CategoryService, slug: str, parent_id=None):
    return await service.create_category(
        CategoryCreate(name=slug.replace("-", " ").title(), slug=slug, parent_id=parent_id)
    )


class TestCreateCategory:
    @pytest.mark.asyncio
    async def test_create_root_category(self, async_session):
        service = CategoryService(async_session)

        category = await _create(service, "apparel")

        assert category.id is not None
        assert category.parent_id is None
        assert category.is_active is True
        assert category.children == []
        assert category.children_count == 0

    @pytest.mark.asyncio
    async def test_create_child_links_parent(self, async_session):
        service = CategoryService(async_session)
        parent = await _create(service, "apparel")

        child = await _create(service, "dresses", parent_id=parent.id)

        assert child.parent.id == parent.id
        refreshed = await service.get_category(parent.id)
        assert refreshed.children_count == 1
        assert [c.slug for c in refreshed.children] == ["dresses"]

    @pytest.mark.asyncio
    async def test_unknown_parent_is_a_reference_error(self, async_session):
        with pytest.raises(ReferenceNotFoundException):
            await _create(CategoryService(async_session), "dresses", parent_id=uuid.uuid4())

    @pytest.mark.asyncio
    async def test_duplicate_slug_conflicts(self, async_session):
        service = CategoryService(async_session)
        await _create(service, "dresses")
        with pytest.raises(ConflictException):
            await _create(service, "dresses")


class TestReadCategory:
    @pytest.mark.asyncio
    async def test_list_is_ordered_by_name(self, async_session):
        service = CategoryService(async_session)
        for slug in ("shoes", "accessories", "dresses"):
            await _create(service, slug)

        categories = await service.list_categories()

        assert [c.name for c in categories] == ["Accessories", "Dresses", "Shoes"]

    @pytest.mark.asyncio
    async def test_detail_includes_attributes_and_recent_products(self, async_session):
        service = CategoryService(async_session)
        category = await _create(service, "dresses")
        await AttributeSchemaRegistry(async_session).define_attribute(
            AttributeCreate(category_id=category.id, name="Size", slug="size", data_type=AttributeDataType.ENUM)
        )
        await ProductService(async_session).create_product(
            ProductCreate(name="Black Dress", sku="DRESS-BLK-001", price="129.99", category_id=category.id)
        )

        detail = await service.get_category(category.id)

        assert detail.attributes_count == 1
        assert detail.products_count == 1
        assert [a.slug for a in detail.attributes] == ["size"]
        assert [p.sku for p in detail.recent_products] == ["DRESS-BLK-001"]

    @pytest.mark.asyncio
    async def test_get_unknown_category(self, async_session):
        with pytest.raises(NotFoundException):
            await CategoryService(async_session).get_category(uuid.uuid4())


class TestUpdateCategory:
    @pytest.mark.asyncio
    async def test_rename(self, async_session):
        service = CategoryService(async_session)
        category = await _create(service, "dresses")

        updated = await service.update_category(category.id, CategoryUpdate(name="Gowns", is_active=False))

        assert updated.name == "Gowns"
        assert updated.slug == "dresses"
        assert updated.is_active is False

    @pytest.mark.asyncio
    async def test_category_cannot_be_its_own_parent(self, async_session):
        service = CategoryService(async_session)
        category = await _create(service, "dresses")
        with pytest.raises(InvalidOperationException, match="Category cannot be its own parent"):
            await service.update_category(category.id, CategoryUpdate(parent_id=category.id))

    @pytest.mark.asyncio
    async def test_reparent_to_unknown_category(self, async_session):
        service = CategoryService(async_session)
        category = await _create(service, "dresses")
        with pytest.raises(ReferenceNotFoundException):
            await service.update_category(category.id, CategoryUpdate(parent_id=uuid.uuid4()))

    @pytest.mark.asyncio
    async def test_slug_taken_by_another_category(self, async_session):
        service = CategoryService(async_session)
        await _create(service, "shoes")
        dresses = await _create(service, "dresses")
        with pytest.raises(ConflictException):
            await service.update_category(dresses.id, CategoryUpdate(slug="shoes"))

    @pytest.mark.asyncio
    async def test_update_unknown_category(self, async_session):
        with pytest.raises(NotFoundException):
            await CategoryService(async_session).update_category(uuid.uuid4(), CategoryUpdate(name="X"))


class TestDeleteCategory:
    @pytest.mark.asyncio
    async def test_delete_leaf_removes_attributes_and_options(self, async_session):
        service = CategoryService(async_session)
        registry = AttributeSchemaRegistry(async_session)
        category = await _create(service, "dresses")
        size = await registry.define_attribute(
            AttributeCreate(category_id=category.id, name="Size", slug="size", data_type=AttributeDataType.ENUM)
        )
        await registry.define_option(OptionCreate(attribute_id=size.id, value="M"))

        await service.delete_category(category.id)

        with pytest.raises(NotFoundException):
            await service.get_category(category.id)
        with pytest.raises(NotFoundException):
            await registry.get_attribute(size.id)

    @pytest.mark.asyncio
    async def test_delete_with_children_is_refused(self, async_session):
        service = CategoryService(async_session)
        parent = await _create(service, "apparel")
        await _create(service, "dresses", parent_id=parent.id)

        with pytest.raises(InvalidOperationException, match="child categories"):
            await service.delete_category(parent.id)

    @pytest.mark.asyncio
    async def test_delete_with_products_is_refused(self, async_session):
        service = CategoryService(async_session)
        category = await _create(service, "dresses")
        await ProductService(async_session).create_product(
            ProductCreate(name="Black Dress", sku="DRESS-BLK-001", price="129.99", category_id=category.id)
        )

        with pytest.raises(InvalidOperationException, match="products"):
            await service.delete_category(category.id)

    @pytest.mark.asyncio
    async def test_delete_removes_values_left_by_moved_product(self, async_session):
        service = CategoryService(async_session)
        products = ProductService(async_session)
        dresses = await _create(service, "dresses")
        gowns = await _create(service, "gowns")
        color = await AttributeSchemaRegistry(async_session).define_attribute(
            AttributeCreate(category_id=dresses.id, name="Color", slug="color", data_type=AttributeDataType.TEXT)
        )
        product = await products.create_product(
            ProductCreate(name="Black Dress", sku="DRESS-BLK-001", price="129.99", category_id=dresses.id)
        )
        await products.set_attribute_value(
            SetAttributeValueRequest(product_id=product.id, attribute_id=color.id, value="Black")
        )
        await products.update_product(product.id, ProductUpdate(category_id=gowns.id))

        await service.delete_category(dresses.id)

        moved = await products.get_product(product.id)
        assert moved.category_id == gowns.id
        assert moved.values == []

    @pytest.mark.asyncio
    async def test_delete_unknown_category(self, async_session):
        with pytest.raises(NotFoundException):
            await CategoryService(async_session).delete_category(uuid.uuid4())
