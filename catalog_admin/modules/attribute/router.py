"""Attribute module API router — definitions, ENUM options and schema export."""

import uuid

from fastapi import APIRouter, Depends, Request, Response
from sqlalchemy.ext.asyncio import AsyncSession

from catalog_admin.app import limiter
from catalog_admin.database.session import get_db
from catalog_admin.modules.attribute.schema_registry import AttributeSchemaRegistry
from catalog_admin.modules.attribute.schemas import (
    AttributeCreate,
    AttributeResponse,
    OptionCreate,
    OptionResponse,
)

router = APIRouter(prefix="/attributes", tags=["attributes"])


# --- Static attribute routes FIRST (before /{attribute_id}) ---


@router.post("", response_model=AttributeResponse, status_code=201)
@limiter.limit("30/minute")
async def create_attribute(
    request: Request,
    data: AttributeCreate,
    db: AsyncSession = Depends(get_db),
) -> AttributeResponse:
    return await AttributeSchemaRegistry(db).define_attribute(data)


@router.post("/options", response_model=OptionResponse, status_code=201)
@limiter.limit("60/minute")
async def create_option(
    request: Request,
    data: OptionCreate,
    db: AsyncSession = Depends(get_db),
) -> OptionResponse:
    option = await AttributeSchemaRegistry(db).define_option(data)
    return OptionResponse.model_validate(option)


@router.get("/category/{category_id}", response_model=list[AttributeResponse])
@limiter.limit("120/minute")
async def list_category_attributes(
    request: Request,
    category_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
) -> list[AttributeResponse]:
    return await AttributeSchemaRegistry(db).list_by_category(category_id)


@router.get("/category/{category_id}/json-schema")
@limiter.limit("60/minute")
async def get_category_json_schema(
    request: Request,
    category_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
) -> dict:
    return await AttributeSchemaRegistry(db).build_json_schema(category_id)


# --- Parameterized attribute routes ---


@router.get("/{attribute_id}", response_model=AttributeResponse)
@limiter.limit("120/minute")
async def get_attribute(
    request: Request,
    attribute_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
) -> AttributeResponse:
    return await AttributeSchemaRegistry(db).get_attribute(attribute_id)


@router.delete("/{attribute_id}", status_code=204)
@limiter.limit("30/minute")
async def delete_attribute(
    request: Request,
    attribute_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
) -> Response:
    await AttributeSchemaRegistry(db).delete_attribute(attribute_id)
    return Response(status_code=204)
