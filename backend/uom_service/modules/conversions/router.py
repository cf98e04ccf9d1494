"""CRUD API for unit conversions and the quantity conversion endpoint."""

from __future__ import annotations

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status

from uom_service.core.security import verify_token
from uom_service.db.models import UomCategory, UomStatus
from uom_service.db.session import DbSession
from uom_service.modules.conversions.schemas import (
    ConversionCreateRequest,
    ConversionDetailResponse,
    ConversionListResponse,
    ConversionMutationResponse,
    ConversionResponse,
    ConversionUpdateRequest,
    ConvertRequest,
    ConvertResponse,
    ConvertResult,
)
from uom_service.modules.conversions.service import UomConversionService
from uom_service.modules.units.schemas import MessageResponse

router = APIRouter(dependencies=[Depends(verify_token)])
convert_router = APIRouter(dependencies=[Depends(verify_token)])


@router.get("", response_model=ConversionListResponse)
async def list_conversions(
    db: DbSession,
    search: str | None = None,
    conversion_status: Annotated[UomStatus | None, Query(alias="status")] = None,
    category: UomCategory | None = None,
) -> ConversionListResponse:
    service = UomConversionService(db)
    rows = await service.list_conversions(
        search=search,
        status=conversion_status,
        category=category,
    )
    return ConversionListResponse(
        count=len(rows),
        data=[ConversionResponse.from_row(row) for row in rows],
    )


@router.post(
    "",
    response_model=ConversionMutationResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_conversion(
    body: ConversionCreateRequest,
    db: DbSession,
) -> ConversionMutationResponse:
    service = UomConversionService(db)
    row = await service.create_conversion(
        from_uom_id=body.from_uom,
        to_uom_id=body.to_uom,
        conversion_ratio=body.conversion_ratio,
        category=body.category,
        status=body.status,
    )
    await db.commit()
    return ConversionMutationResponse(
        message="UOM Conversion created successfully",
        data=ConversionResponse.from_row(row),
    )


@router.get("/{conversion_id:uuid}", response_model=ConversionDetailResponse)
async def get_conversion(conversion_id: UUID, db: DbSession) -> ConversionDetailResponse:
    row = await UomConversionService(db).get_conversion(conversion_id)
    return ConversionDetailResponse(data=ConversionResponse.from_row(row))


@router.patch("/{conversion_id:uuid}", response_model=ConversionMutationResponse)
async def update_conversion(
    conversion_id: UUID,
    body: ConversionUpdateRequest,
    db: DbSession,
) -> ConversionMutationResponse:
    service = UomConversionService(db)
    row = await service.update_conversion(
        conversion_id,
        from_uom_id=body.from_uom,
        to_uom_id=body.to_uom,
        conversion_ratio=body.conversion_ratio,
        category=body.category,
        status=body.status,
    )
    await db.commit()
    return ConversionMutationResponse(
        message="UOM Conversion updated successfully",
        data=ConversionResponse.from_row(row),
    )


@router.delete("/{conversion_id:uuid}", response_model=MessageResponse)
async def delete_conversion(conversion_id: UUID, db: DbSession) -> MessageResponse:
    await UomConversionService(db).delete_conversion(conversion_id)
    await db.commit()
    return MessageResponse(message="UOM Conversion deleted successfully")


@convert_router.post("", response_model=ConvertResponse)
async def convert_quantity(body: ConvertRequest, db: DbSession) -> ConvertResponse:
    converted = await UomConversionService(db).convert(
        from_uom_id=body.from_uom,
        to_uom_id=body.to_uom,
        quantity=body.quantity,
    )
    return ConvertResponse(
        data=ConvertResult(
            original_quantity=body.quantity,
            converted_quantity=converted,
            from_uom=body.from_uom,
            to_uom=body.to_uom,
        )
    )
