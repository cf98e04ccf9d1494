"""CRUD API for units of measure."""

from __future__ import annotations

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status

from uom_service.core.security import verify_token
from uom_service.db.models import UomCategory, UomStatus, UomType
from uom_service.db.session import DbSession
from uom_service.modules.units.schemas import (
    MessageResponse,
    UomCreateRequest,
    UomDetailResponse,
    UomListResponse,
    UomMutationResponse,
    UomResponse,
    UomUpdateRequest,
)
from uom_service.modules.units.service import UomService

router = APIRouter(dependencies=[Depends(verify_token)])


@router.get("", response_model=UomListResponse)
async def list_uoms(
    db: DbSession,
    search: str | None = None,
    uom_status: Annotated[UomStatus | None, Query(alias="status")] = None,
    uom_type: Annotated[UomType | None, Query(alias="type")] = None,
    category: UomCategory | None = None,
) -> UomListResponse:
    service = UomService(db)
    rows = await service.list_uoms(
        search=search,
        status=uom_status,
        uom_type=uom_type,
        category=category,
    )
    return UomListResponse(count=len(rows), data=[UomResponse.from_row(row) for row in rows])


@router.post("", response_model=UomMutationResponse, status_code=status.HTTP_201_CREATED)
async def create_uom(body: UomCreateRequest, db: DbSession) -> UomMutationResponse:
    service = UomService(db)
    row = await service.create_uom(
        unit_name=body.unit_name,
        short_code=body.short_code,
        uom_type=body.type,
        category=body.category,
        status=body.status,
    )
    await db.commit()
    return UomMutationResponse(message="UOM created successfully", data=UomResponse.from_row(row))


@router.get("/{uom_id:uuid}", response_model=UomDetailResponse)
async def get_uom(uom_id: UUID, db: DbSession) -> UomDetailResponse:
    row = await UomService(db).get_uom(uom_id)
    return UomDetailResponse(data=UomResponse.from_row(row))


@router.patch("/{uom_id:uuid}", response_model=UomMutationResponse)
async def update_uom(uom_id: UUID, body: UomUpdateRequest, db: DbSession) -> UomMutationResponse:
    service = UomService(db)
    row = await service.update_uom(
        uom_id,
        unit_name=body.unit_name,
        short_code=body.short_code,
        uom_type=body.type,
        category=body.category,
        status=body.status,
    )
    await db.commit()
    return UomMutationResponse(message="UOM updated successfully", data=UomResponse.from_row(row))


@router.delete("/{uom_id:uuid}", response_model=MessageResponse)
async def delete_uom(uom_id: UUID, db: DbSession) -> MessageResponse:
    await UomService(db).delete_uom(uom_id)
    await db.commit()
    return MessageResponse(message="UOM deleted successfully")
