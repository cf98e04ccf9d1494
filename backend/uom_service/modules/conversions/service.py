"""Service layer for unit conversions and quantity conversion."""

from __future__ import annotations

from uuid import UUID

from sqlalchemy import Select, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from uom_service.core.errors import ConflictError, NotFoundError, ValidationError
from uom_service.core.logging import get_logger
from uom_service.db.models import UnitOfMeasure, UomCategory, UomConversion, UomStatus
from uom_service.db.session import flush_or_conflict
from uom_service.modules.conversions.schemas import MIN_CONVERSION_RATIO
from uom_service.modules.units.service import UomService

logger = get_logger(__name__)

SAME_UOM_MESSAGE = "From UOM and To UOM cannot be the same"
DUPLICATE_PAIR_MESSAGE = "Conversion between these UOMs already exists"
CONVERSION_NOT_FOUND_MESSAGE = "UOM Conversion not found"
NO_ACTIVE_CONVERSION_MESSAGE = "No active conversion found between these units"


class UomConversionService:
    """
    CRUD for directed unit conversions, plus quantity conversion.

    Only a direct, active, correctly ordered conversion is honored: there is
    no inverse-ratio fallback and no path-finding through other units.
    """

    def __init__(self, session: AsyncSession) -> None:
        self._session = session
        self._units = UomService(session)

    async def list_conversions(
        self,
        *,
        search: str | None = None,
        status: UomStatus | None = None,
        category: UomCategory | None = None,
    ) -> list[UomConversion]:
        query = self._expanded()
        if status is not None:
            query = query.where(UomConversion.status == status)
        if category is not None:
            query = query.where(UomConversion.category == category)

        result = await self._session.execute(query.order_by(UomConversion.created_at.desc()))
        rows = list(result.scalars().all())

        # Search runs over the resolved unit names, after the join
        term = (search or "").strip().lower()
        if term:
            rows = [row for row in rows if _matches_search(row, term)]
        return rows

    async def get_conversion(self, conversion_id: UUID) -> UomConversion:
        result = await self._session.execute(
            self._expanded().where(UomConversion.id == conversion_id)
        )
        row = result.scalar_one_or_none()
        if row is None:
            raise NotFoundError(CONVERSION_NOT_FOUND_MESSAGE)
        return row

    async def create_conversion(
        self,
        *,
        from_uom_id: UUID,
        to_uom_id: UUID,
        conversion_ratio: float,
        category: UomCategory | None = None,
        status: UomStatus | None = None,
    ) -> UomConversion:
        if from_uom_id == to_uom_id:
            raise ValidationError(SAME_UOM_MESSAGE)
        _check_ratio(conversion_ratio)

        from_uom = await self._require_uom(from_uom_id, "From UOM not found")
        to_uom = await self._require_uom(to_uom_id, "To UOM not found")
        await self._ensure_pair_available(from_uom_id, to_uom_id)

        row = UomConversion(
            from_uom=from_uom,
            to_uom=to_uom,
            conversion_ratio=conversion_ratio,
            category=category or from_uom.category,
            status=status or UomStatus.ACTIVE,
        )
        self._session.add(row)
        await flush_or_conflict(self._session, DUPLICATE_PAIR_MESSAGE)

        logger.info(
            "uom_conversion_created",
            conversion_id=str(row.id),
            from_uom_id=str(from_uom_id),
            to_uom_id=str(to_uom_id),
            conversion_ratio=conversion_ratio,
        )
        return row

    async def update_conversion(
        self,
        conversion_id: UUID,
        *,
        from_uom_id: UUID | None = None,
        to_uom_id: UUID | None = None,
        conversion_ratio: float | None = None,
        category: UomCategory | None = None,
        status: UomStatus | None = None,
    ) -> UomConversion:
        row = await self.get_conversion(conversion_id)

        target_from = from_uom_id or row.from_uom_id
        target_to = to_uom_id or row.to_uom_id
        if target_from == target_to:
            raise ValidationError(SAME_UOM_MESSAGE)
        if conversion_ratio is not None:
            _check_ratio(conversion_ratio)

        if target_from != row.from_uom_id or target_to != row.to_uom_id:
            if target_from != row.from_uom_id:
                row.from_uom = await self._require_uom(target_from, "From UOM not found")
            if target_to != row.to_uom_id:
                row.to_uom = await self._require_uom(target_to, "To UOM not found")
            await self._ensure_pair_available(target_from, target_to, exclude_id=row.id)

        if conversion_ratio is not None:
            row.conversion_ratio = conversion_ratio
        if category is not None:
            row.category = category
        if status is not None:
            row.status = status

        await flush_or_conflict(self._session, DUPLICATE_PAIR_MESSAGE)
        logger.info("uom_conversion_updated", conversion_id=str(row.id))
        return row

    async def delete_conversion(self, conversion_id: UUID) -> None:
        result = await self._session.execute(
            select(UomConversion).where(UomConversion.id == conversion_id)
        )
        row = result.scalar_one_or_none()
        if row is None:
            raise NotFoundError(CONVERSION_NOT_FOUND_MESSAGE)
        await self._session.delete(row)
        await self._session.flush()
        logger.info("uom_conversion_deleted", conversion_id=str(conversion_id))

    async def convert(self, *, from_uom_id: UUID, to_uom_id: UUID, quantity: float) -> float:
        """Convert *quantity* along the active conversion from one unit to another."""
        result = await self._session.execute(
            select(UomConversion.conversion_ratio).where(
                UomConversion.from_uom_id == from_uom_id,
                UomConversion.to_uom_id == to_uom_id,
                UomConversion.status == UomStatus.ACTIVE,
            )
        )
        ratio = result.scalar_one_or_none()
        if ratio is None:
            raise NotFoundError(NO_ACTIVE_CONVERSION_MESSAGE)
        return quantity * ratio

    @staticmethod
    def _expanded() -> Select[tuple[UomConversion]]:
        return select(UomConversion).options(
            selectinload(UomConversion.from_uom),
            selectinload(UomConversion.to_uom),
        )

    async def _require_uom(self, uom_id: UUID, message: str) -> UnitOfMeasure:
        uom = await self._units.find_uom(uom_id)
        if uom is None:
            raise NotFoundError(message)
        return uom

    async def _ensure_pair_available(
        self,
        from_uom_id: UUID,
        to_uom_id: UUID,
        *,
        exclude_id: UUID | None = None,
    ) -> None:
        query = select(UomConversion.id).where(
            UomConversion.from_uom_id == from_uom_id,
            UomConversion.to_uom_id == to_uom_id,
        )
        if exclude_id is not None:
            query = query.where(UomConversion.id != exclude_id)
        result = await self._session.execute(query.limit(1))
        if result.scalar_one_or_none() is not None:
            raise ConflictError(DUPLICATE_PAIR_MESSAGE)


def _check_ratio(conversion_ratio: float) -> None:
    if conversion_ratio < MIN_CONVERSION_RATIO:
        raise ValidationError(
            f"Conversion ratio must be a positive number of at least {MIN_CONVERSION_RATIO}"
        )


def _matches_search(row: UomConversion, term: str) -> bool:
    candidates = (
        row.from_uom.unit_name if row.from_uom is not None else "",
        row.to_uom.unit_name if row.to_uom is not None else "",
        row.category.value,
    )
    return any(term in value.lower() for value in candidates)
