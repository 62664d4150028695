"""Product module API router — products, attribute values and activation."""

import uuid

from fastapi import APIRouter, Depends, Query, Request, Response
from sqlalchemy.ext.asyncio import AsyncSession

from catalog_admin.app import limiter
from catalog_admin.config import settings
from catalog_admin.database.session import get_db
from catalog_admin.models.enums import ProductStatus
from catalog_admin.modules.product.schemas import (
    AttributeValueResponse,
    ProductCreate,
    ProductDetailResponse,
    ProductListResponse,
    ProductUpdate,
    SetAttributeValueRequest,
)
from catalog_admin.modules.product.service import ProductService

router = APIRouter(prefix="/products", tags=["products"])


@router.post("", response_model=ProductDetailResponse, status_code=201)
@limiter.limit("30/minute")
async def create_product(
    request: Request,
    data: ProductCreate,
    db: AsyncSession = Depends(get_db),
) -> ProductDetailResponse:
    service = ProductService(db)
    product = await service.create_product(data)
    return await service.describe_product(product)


@router.get("", response_model=ProductListResponse)
@limiter.limit("60/minute")
async def list_products(
    request: Request,
    page: int = Query(1, ge=1),
    limit: int = Query(settings.default_page_size, ge=1, le=settings.max_page_size),
    category_id: uuid.UUID | None = None,
    status: ProductStatus | None = None,
    db: AsyncSession = Depends(get_db),
) -> ProductListResponse:
    return await ProductService(db).list_products(
        page=page,
        limit=limit,
        category_id=category_id,
        status=status,
    )


# Static product routes BEFORE /{product_id} to avoid shadowing
@router.post("/values", response_model=AttributeValueResponse, status_code=201)
@limiter.limit("120/minute")
async def set_attribute_value(
    request: Request,
    data: SetAttributeValueRequest,
    db: AsyncSession = Depends(get_db),
) -> AttributeValueResponse:
    value = await ProductService(db).set_attribute_value(data)
    return AttributeValueResponse.model_validate(value)


@router.get("/{product_id}", response_model=ProductDetailResponse)
@limiter.limit("120/minute")
async def get_product(
    request: Request,
    product_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
) -> ProductDetailResponse:
    service = ProductService(db)
    product = await service.get_product(product_id)
    return await service.describe_product(product)


@router.patch("/{product_id}", response_model=ProductDetailResponse)
@limiter.limit("30/minute")
async def update_product(
    request: Request,
    product_id: uuid.UUID,
    data: ProductUpdate,
    db: AsyncSession = Depends(get_db),
) -> ProductDetailResponse:
    service = ProductService(db)
    product = await service.update_product(product_id, data)
    return await service.describe_product(product)


@router.delete("/{product_id}", status_code=204)
@limiter.limit("30/minute")
async def delete_product(
    request: Request,
    product_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
) -> Response:
    await ProductService(db).delete_product(product_id)
    return Response(status_code=204)


@router.post("/{product_id}/activate", response_model=ProductDetailResponse)
@limiter.limit("30/minute")
async def activate_product(
    request: Request,
    product_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
) -> ProductDetailResponse:
    service = ProductService(db)
    product = await service.activate_product(product_id)
    return await service.describe_product(product)
