"""Tests for ProductService — CRUD, attribute value upsert and the activation gate."""

import uuid
from datetime import datetime
from decimal import Decimal

import pytest
import pytest_asyncio
from sqlalchemy import func, select

from catalog_admin.exceptions import (
    AttributeValueException,
    ConflictException,
    IncompleteAttributesException,
    NotFoundException,
    ReferenceNotFoundException,
)
from catalog_admin.models.attribute_value import ProductAttributeValue
from catalog_admin.models.enums import AttributeDataType, ProductStatus
from catalog_admin.modules.attribute.schema_registry import AttributeSchemaRegistry
from catalog_admin.modules.attribute.schemas import AttributeCreate, OptionCreate
from catalog_admin.modules.category.schemas import CategoryCreate
from catalog_admin.modules.category.service import CategoryService
from catalog_admin.modules.product.schemas import (
    AttributeValueResponse,
    ProductCreate,
    ProductUpdate,
    SetAttributeValueRequest,
)
from catalog_admin.modules.product.service import ProductService

# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest_asyncio.fixture
async def dresses(async_session) -> dict:
    """Dresses category with a required ENUM Size (S/M/L), a required TEXT Color and an optional NUMBER Length."""
    category = await CategoryService(async_session).create_category(
        CategoryCreate(name="Dresses", slug="dresses")
    )
    registry = AttributeSchemaRegistry(async_session)
    size = await registry.define_attribute(AttributeCreate(
        category_id=category.id, name="Size", slug="size",
        data_type=AttributeDataType.ENUM, is_required=True, display_order=1,
    ))
    options = {}
    for order, value in enumerate(("S", "M", "L"), start=1):
        options[value] = await registry.define_option(
            OptionCreate(attribute_id=size.id, value=value, code=value.lower(), sort_order=order)
        )
    color = await registry.define_attribute(AttributeCreate(
        category_id=category.id, name="Color", slug="color",
        data_type=AttributeDataType.TEXT, is_required=True, display_order=2, max_length=50,
    ))
    length = await registry.define_attribute(AttributeCreate(
        category_id=category.id, name="Length (inches)", slug="length",
        data_type=AttributeDataType.NUMBER, display_order=3, min_number=20, max_number=60,
    ))
    return {"category": category, "size": size, "options": options, "color": color, "length": length}


def _product_data(category_id, sku: str = "DRESS-BLK-001", **kwargs) -> ProductCreate:
    return ProductCreate(
        name=kwargs.pop("name", "Elegant Black Dress"),
        sku=sku,
        price=kwargs.pop("price", "129.99"),
        stock_quantity=kwargs.pop("stock_quantity", 15),
        category_id=category_id,
        **kwargs,
    )


async def _set(service: ProductService, product_id, attribute_id, value=None, option_id=None):
    return await service.set_attribute_value(
        SetAttributeValueRequest(product_id=product_id, attribute_id=attribute_id, value=value, option_id=option_id)
    )


# ---------------------------------------------------------------------------
# CRUD
# ---------------------------------------------------------------------------


class TestProductCrud:
    @pytest.mark.asyncio
    async def test_create_defaults_to_draft(self, async_session, dresses):
        service = ProductService(async_session)

        product = await service.create_product(_product_data(dresses["category"].id))

        assert product.status == ProductStatus.DRAFT
        assert product.is_active is True
        assert product.category.slug == "dresses"
        assert product.values == []

    @pytest.mark.asyncio
    async def test_create_in_unknown_category(self, async_session):
        with pytest.raises(ReferenceNotFoundException):
            await ProductService(async_session).create_product(_product_data(uuid.uuid4()))

    @pytest.mark.asyncio
    async def test_duplicate_sku_conflicts(self, async_session, dresses):
        service = ProductService(async_session)
        await service.create_product(_product_data(dresses["category"].id))
        with pytest.raises(ConflictException):
            await service.create_product(_product_data(dresses["category"].id, name="Another"))

    @pytest.mark.asyncio
    async def test_update_fields(self, async_session, dresses):
        service = ProductService(async_session)
        product = await service.create_product(_product_data(dresses["category"].id))

        updated = await service.update_product(product.id, ProductUpdate(price="99.50", stock_quantity=3))

        assert updated.price == Decimal("99.50")
        assert updated.stock_quantity == 3
        assert updated.name == "Elegant Black Dress"

    @pytest.mark.asyncio
    async def test_update_to_unknown_category(self, async_session, dresses):
        service = ProductService(async_session)
        product = await service.create_product(_product_data(dresses["category"].id))
        with pytest.raises(ReferenceNotFoundException):
            await service.update_product(product.id, ProductUpdate(category_id=uuid.uuid4()))

    @pytest.mark.asyncio
    async def test_delete_removes_values(self, async_session, dresses):
        service = ProductService(async_session)
        product = await service.create_product(_product_data(dresses["category"].id))
        await _set(service, product.id, dresses["color"].id, "Black")

        await service.delete_product(product.id)

        with pytest.raises(NotFoundException):
            await service.get_product(product.id)
        remaining = await async_session.execute(select(func.count()).select_from(ProductAttributeValue))
        assert remaining.scalar() == 0

    @pytest.mark.asyncio
    async def test_delete_unknown_product(self, async_session):
        with pytest.raises(NotFoundException):
            await ProductService(async_session).delete_product(uuid.uuid4())

    @pytest.mark.asyncio
    async def test_detail_lists_category_attributes_in_display_order(self, async_session, dresses):
        service = ProductService(async_session)
        product = await service.create_product(_product_data(dresses["category"].id))
        await _set(service, product.id, dresses["length"].id, value=42)

        detail = await service.describe_product(await service.get_product(product.id))

        assert detail.category_name == "Dresses"
        assert detail.values_count == 1
        assert [a.slug for a in detail.attributes] == ["size", "color", "length"]
        assert [o.value for o in detail.attributes[0].options] == ["S", "M", "L"]
        assert detail.attributes[2].usage_count == 1


class TestListProducts:
    @pytest.mark.asyncio
    async def test_pagination_and_filters(self, async_session, dresses):
        service = ProductService(async_session)
        for i in range(5):
            await service.create_product(_product_data(dresses["category"].id, sku=f"DRESS-{i:03d}"))
        shoes = await CategoryService(async_session).create_category(CategoryCreate(name="Shoes", slug="shoes"))
        await service.create_product(_product_data(shoes.id, sku="SHOE-RUN-001", name="Running Shoes"))

        page = await service.list_products(page=2, limit=2, category_id=dresses["category"].id)

        assert page.meta.total_items == 5
        assert page.meta.total_pages == 3
        assert page.meta.page == 2
        assert len(page.items) == 2
        assert all(item.category_name == "Dresses" for item in page.items)

        assert (await service.list_products(status=ProductStatus.ACTIVE)).meta.total_items == 0
        assert (await service.list_products()).meta.total_items == 6

    @pytest.mark.asyncio
    async def test_values_count(self, async_session, dresses):
        service = ProductService(async_session)
        product = await service.create_product(_product_data(dresses["category"].id))
        await _set(service, product.id, dresses["color"].id, "Black")
        await _set(service, product.id, dresses["length"].id, 42)

        page = await service.list_products()

        assert page.items[0].values_count == 2


# ---------------------------------------------------------------------------
# Attribute values
# ---------------------------------------------------------------------------


class TestSetAttributeValue:
    @pytest.mark.asyncio
    async def test_number_in_range_is_stored_in_number_slot(self, async_session, dresses):
        service = ProductService(async_session)
        product = await service.create_product(_product_data(dresses["category"].id))

        stored = await _set(service, product.id, dresses["length"].id, 42)

        assert stored.value_number == 42.0
        assert stored.value_text is None
        assert stored.value_bool is None
        assert stored.value_date is None
        assert stored.option_id is None
        assert AttributeValueResponse.model_validate(stored).value == 42.0

    @pytest.mark.asyncio
    async def test_number_below_minimum_is_rejected_and_not_stored(self, async_session, dresses):
        service = ProductService(async_session)
        product = await service.create_product(_product_data(dresses["category"].id))

        with pytest.raises(AttributeValueException) as exc_info:
            await _set(service, product.id, dresses["length"].id, 15)

        assert "at least 20" in exc_info.value.message
        assert exc_info.value.details[0]["limit"] == 20
        assert (await service.get_product(product.id)).values == []

    @pytest.mark.asyncio
    async def test_second_write_overwrites_first(self, async_session, dresses):
        service = ProductService(async_session)
        product = await service.create_product(_product_data(dresses["category"].id))

        first = await _set(service, product.id, dresses["color"].id, "Black")
        second = await _set(service, product.id, dresses["color"].id, "Navy")

        assert second.id == first.id
        assert second.value_text == "Navy"
        count = await async_session.execute(
            select(func.count()).select_from(ProductAttributeValue).where(
                ProductAttributeValue.product_id == product.id
            )
        )
        assert count.scalar() == 1

    @pytest.mark.asyncio
    async def test_enum_value_is_stored_as_option(self, async_session, dresses):
        service = ProductService(async_session)
        product = await service.create_product(_product_data(dresses["category"].id))
        medium = dresses["options"]["M"]

        stored = await _set(service, product.id, dresses["size"].id, option_id=medium.id)

        assert stored.option_id == medium.id
        assert stored.option.value == "M"
        assert stored.value_text is None

    @pytest.mark.asyncio
    async def test_enum_option_of_other_attribute_is_rejected(self, async_session, dresses):
        service = ProductService(async_session)
        registry = AttributeSchemaRegistry(async_session)
        product = await service.create_product(_product_data(dresses["category"].id))
        fit = await registry.define_attribute(AttributeCreate(
            category_id=dresses["category"].id, name="Fit", slug="fit", data_type=AttributeDataType.ENUM,
        ))
        slim = await registry.define_option(OptionCreate(attribute_id=fit.id, value="Slim"))

        with pytest.raises(AttributeValueException, match="Invalid option"):
            await _set(service, product.id, dresses["size"].id, option_id=slim.id)

    @pytest.mark.asyncio
    async def test_text_over_max_length_is_rejected(self, async_session, dresses):
        service = ProductService(async_session)
        product = await service.create_product(_product_data(dresses["category"].id))
        with pytest.raises(AttributeValueException, match="maximum length of 50"):
            await _set(service, product.id, dresses["color"].id, "x" * 51)

    @pytest.mark.asyncio
    async def test_date_and_boolean_slots(self, async_session):
        category = await CategoryService(async_session).create_category(CategoryCreate(name="Shoes", slug="shoes"))
        registry = AttributeSchemaRegistry(async_session)
        waterproof = await registry.define_attribute(AttributeCreate(
            category_id=category.id, name="Waterproof", slug="waterproof", data_type=AttributeDataType.BOOLEAN,
        ))
        released = await registry.define_attribute(AttributeCreate(
            category_id=category.id, name="Released", slug="released", data_type=AttributeDataType.DATE,
        ))
        service = ProductService(async_session)
        product = await service.create_product(_product_data(category.id, sku="SHOE-RUN-001"))

        flag = await _set(service, product.id, waterproof.id, False)
        moment = await _set(service, product.id, released.id, "2026-03-01T00:00:00Z")

        assert flag.value_bool is False
        assert AttributeValueResponse.model_validate(flag).value is False
        assert isinstance(moment.value_date, datetime)
        assert moment.value_date.date().isoformat() == "2026-03-01"

    @pytest.mark.asyncio
    async def test_attribute_from_another_category_is_a_reference_error(self, async_session, dresses):
        service = ProductService(async_session)
        shoes = await CategoryService(async_session).create_category(CategoryCreate(name="Shoes", slug="shoes"))
        product = await service.create_product(_product_data(shoes.id, sku="SHOE-RUN-001"))

        with pytest.raises(ReferenceNotFoundException, match="does not belong to product category"):
            await _set(service, product.id, dresses["color"].id, "Black")

    @pytest.mark.asyncio
    async def test_unknown_product_is_a_reference_error(self, async_session, dresses):
        with pytest.raises(ReferenceNotFoundException):
            await _set(ProductService(async_session), uuid.uuid4(), dresses["color"].id, "Black")


# ---------------------------------------------------------------------------
# Activation
# ---------------------------------------------------------------------------


class TestActivateProduct:
    @pytest.mark.asyncio
    async def test_activation_refused_until_required_values_exist(self, async_session, dresses):
        service = ProductService(async_session)
        product = await service.create_product(_product_data(dresses["category"].id))

        with pytest.raises(IncompleteAttributesException) as exc_info:
            await service.activate_product(product.id)
        assert exc_info.value.missing == ["Size", "Color"]
        assert exc_info.value.message == "Missing required attributes: Size, Color"
        assert (await service.get_product(product.id)).status == ProductStatus.DRAFT

        await _set(service, product.id, dresses["size"].id, option_id=dresses["options"]["M"].id)
        with pytest.raises(IncompleteAttributesException) as exc_info:
            await service.activate_product(product.id)
        assert exc_info.value.missing == ["Color"]

        await _set(service, product.id, dresses["color"].id, "Black")
        activated = await service.activate_product(product.id)

        assert activated.status == ProductStatus.ACTIVE
        assert len(activated.values) == 2

    @pytest.mark.asyncio
    async def test_category_without_required_attributes_activates_immediately(self, async_session):
        category = await CategoryService(async_session).create_category(CategoryCreate(name="Gifts", slug="gifts"))
        service = ProductService(async_session)
        product = await service.create_product(_product_data(category.id, sku="GIFT-001"))

        activated = await service.activate_product(product.id)

        assert activated.status == ProductStatus.ACTIVE

    @pytest.mark.asyncio
    async def test_activate_unknown_product(self, async_session):
        with pytest.raises(NotFoundException):
            await ProductService(async_session).activate_product(uuid.uuid4())

    @pytest.mark.asyncio
    async def test_update_can_set_status_directly(self, async_session, dresses):
        service = ProductService(async_session)
        product = await service.create_product(_product_data(dresses["category"].id))

        updated = await service.update_product(product.id, ProductUpdate(status=ProductStatus.ACTIVE))

        assert updated.status == ProductStatus.ACTIVE
