"""Request and response schemas for unit of measure endpoints."""

from __future__ import annotations

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from uom_service.db.models import UnitOfMeasure, UomCategory, UomStatus, UomType

UNIT_NAME_PATTERN = r"^[A-Za-z\s]+$"
SHORT_CODE_PATTERN = r"^[A-Za-z0-9]+$"


class UomCreateRequest(BaseModel):
    """Create request for a unit of measure."""

    unit_name: str = Field(
        alias="unitName",
        min_length=2,
        max_length=50,
        pattern=UNIT_NAME_PATTERN,
        description="Letters and spaces only",
    )
    short_code: str = Field(
        alias="shortCode",
        min_length=1,
        max_length=10,
        pattern=SHORT_CODE_PATTERN,
        description="Letters and digits only; stored lower-cased",
    )
    type: UomType = UomType.BASE
    category: UomCategory
    status: UomStatus = UomStatus.ACTIVE

    model_config = ConfigDict(populate_by_name=True, str_strip_whitespace=True)


class UomUpdateRequest(BaseModel):
    """Patch request; omitted fields are left untouched."""

    unit_name: str | None = Field(
        default=None,
        alias="unitName",
        min_length=2,
        max_length=50,
        pattern=UNIT_NAME_PATTERN,
    )
    short_code: str | None = Field(
        default=None,
        alias="shortCode",
        min_length=1,
        max_length=10,
        pattern=SHORT_CODE_PATTERN,
    )
    type: UomType | None = None
    category: UomCategory | None = None
    status: UomStatus | None = None

    model_config = ConfigDict(populate_by_name=True, str_strip_whitespace=True)


class UomResponse(BaseModel):
    """Unit of measure as returned by the API."""

    id: UUID
    unit_name: str = Field(alias="unitName")
    short_code: str = Field(alias="shortCode")
    type: UomType
    category: UomCategory
    status: UomStatus
    created_at: datetime = Field(alias="createdAt")
    updated_at: datetime = Field(alias="updatedAt")

    model_config = ConfigDict(populate_by_name=True)

    @classmethod
    def from_row(cls, row: UnitOfMeasure) -> UomResponse:
        return cls(
            id=row.id,
            unit_name=row.unit_name,
            short_code=row.short_code,
            type=row.type,
            category=row.category,
            status=row.status,
            created_at=row.created_at,
            updated_at=row.updated_at,
        )


class MessageResponse(BaseModel):
    """Success envelope without a payload."""

    success: bool = True
    message: str


class UomDetailResponse(BaseModel):
    success: bool = True
    data: UomResponse


class UomMutationResponse(BaseModel):
    success: bool = True
    message: str
    data: UomResponse


class UomListResponse(BaseModel):
    success: bool = True
    count: int
    data: list[UomResponse]
