"""Request and response schemas for unit conversion endpoints."""

from __future__ import annotations

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from uom_service.db.models import UomCategory, UomConversion, UomStatus
from uom_service.modules.units.schemas import UomResponse

MIN_CONVERSION_RATIO = 0.001


class ConversionCreateRequest(BaseModel):
    """Create request for a directed conversion between two units."""

    from_uom: UUID = Field(alias="fromUOM")
    to_uom: UUID = Field(alias="toUOM")
    conversion_ratio: float = Field(
        alias="conversionRatio",
        ge=MIN_CONVERSION_RATIO,
        allow_inf_nan=False,
        description="quantity in toUOM = quantity in fromUOM * conversionRatio",
    )
    category: UomCategory | None = Field(
        default=None,
        description="Defaults to the category of fromUOM",
    )
    status: UomStatus | None = None

    model_config = ConfigDict(populate_by_name=True)


class ConversionUpdateRequest(BaseModel):
    """Patch request; omitted fields are left untouched."""

    from_uom: UUID | None = Field(default=None, alias="fromUOM")
    to_uom: UUID | None = Field(default=None, alias="toUOM")
    conversion_ratio: float | None = Field(
        default=None,
        alias="conversionRatio",
        ge=MIN_CONVERSION_RATIO,
        allow_inf_nan=False,
    )
    category: UomCategory | None = None
    status: UomStatus | None = None

    model_config = ConfigDict(populate_by_name=True)


class ConversionResponse(BaseModel):
    """Conversion with both unit references expanded."""

    id: UUID
    from_uom: UomResponse = Field(alias="fromUOM")
    to_uom: UomResponse = Field(alias="toUOM")
    conversion_ratio: float = Field(alias="conversionRatio")
    category: UomCategory
    status: UomStatus
    created_at: datetime = Field(alias="createdAt")
    updated_at: datetime = Field(alias="updatedAt")

    model_config = ConfigDict(populate_by_name=True)

    @classmethod
    def from_row(cls, row: UomConversion) -> ConversionResponse:
        return cls(
            id=row.id,
            from_uom=UomResponse.from_row(row.from_uom),
            to_uom=UomResponse.from_row(row.to_uom),
            conversion_ratio=row.conversion_ratio,
            category=row.category,
            status=row.status,
            created_at=row.created_at,
            updated_at=row.updated_at,
        )


class ConversionDetailResponse(BaseModel):
    success: bool = True
    data: ConversionResponse


class ConversionMutationResponse(BaseModel):
    success: bool = True
    message: str
    data: ConversionResponse


class ConversionListResponse(BaseModel):
    success: bool = True
    count: int
    data: list[ConversionResponse]


class ConvertRequest(BaseModel):
    """Quantity to convert along a single direct conversion."""

    from_uom: UUID = Field(alias="fromUOM")
    to_uom: UUID = Field(alias="toUOM")
    quantity: float = Field(allow_inf_nan=False)

    model_config = ConfigDict(populate_by_name=True)


class ConvertResult(BaseModel):
    original_quantity: float = Field(alias="originalQuantity")
    converted_quantity: float = Field(alias="convertedQuantity")
    from_uom: UUID = Field(alias="fromUOM")
    to_uom: UUID = Field(alias="toUOM")

    model_config = ConfigDict(populate_by_name=True)


class ConvertResponse(BaseModel):
    success: bool = True
    data: ConvertResult
