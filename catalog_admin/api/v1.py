"""Centralized v1 API router — all module routers are included here."""

from fastapi import APIRouter

from catalog_admin.modules.attribute.router import router as attribute_router
from catalog_admin.modules.category.router import router as category_router
from catalog_admin.modules.product.router import router as product_router
from catalog_admin.schemas.responses import ERROR_RESPONSES

v1_router = APIRouter(prefix="/api/v1", responses=ERROR_RESPONSES)
v1_router.include_router(category_router)
v1_router.include_router(attribute_router)
v1_router.include_router(product_router)
