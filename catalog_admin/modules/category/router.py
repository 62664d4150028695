"""Category module API router."""

import uuid

from fastapi import APIRouter, Depends, Request, Response
from sqlalchemy.ext.asyncio import AsyncSession

from catalog_admin.app import limiter
from catalog_admin.database.session import get_db
from catalog_admin.modules.category.schemas import (
    CategoryCreate,
    CategoryDetailResponse,
    CategoryResponse,
    CategoryUpdate,
)
from catalog_admin.modules.category.service import CategoryService

router = APIRouter(prefix="/categories", tags=["categories"])


@router.post("", response_model=CategoryResponse, status_code=201)
@limiter.limit("30/minute")
async def create_category(
    request: Request,
    data: CategoryCreate,
    db: AsyncSession = Depends(get_db),
) -> CategoryResponse:
    return await CategoryService(db).create_category(data)


@router.get("", response_model=list[CategoryResponse])
@limiter.limit("120/minute")
async def list_categories(
    request: Request,
    db: AsyncSession = Depends(get_db),
) -> list[CategoryResponse]:
    return await CategoryService(db).list_categories()


@router.get("/{category_id}", response_model=CategoryDetailResponse)
@limiter.limit("120/minute")
async def get_category(
    request: Request,
    category_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
) -> CategoryDetailResponse:
    return await CategoryService(db).get_category(category_id)


@router.patch("/{category_id}", response_model=CategoryResponse)
@limiter.limit("30/minute")
async def update_category(
    request: Request,
    category_id: uuid.UUID,
    data: CategoryUpdate,
    db: AsyncSession = Depends(get_db),
) -> CategoryResponse:
    return await CategoryService(db).update_category(category_id, data)


@router.delete("/{category_id}", status_code=204)
@limiter.limit("30/minute")
async def delete_category(
    request: Request,
    category_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
) -> Response:
    await CategoryService(db).delete_category(category_id)
    return Response(status_code=204)
