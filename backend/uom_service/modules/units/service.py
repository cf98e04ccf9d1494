"""Service layer for units of measure."""

from __future__ import annotations

from uuid import UUID

from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from uom_service.core.errors import ConflictError, NotFoundError
from uom_service.core.logging import get_logger
from uom_service.db.models import (
    UnitOfMeasure,
    UomCategory,
    UomConversion,
    UomStatus,
    UomType,
)
from uom_service.db.session import flush_or_conflict

logger = get_logger(__name__)

DUPLICATE_UOM_MESSAGE = "UOM with this name or short code already exists"
UOM_IN_USE_MESSAGE = "Cannot delete UOM as it's used in conversions"
UOM_NOT_FOUND_MESSAGE = "UOM not found"


class UomService:
    """CRUD operations for units of measure."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    @staticmethod
    def unit_name_key(unit_name: str) -> str:
        """Normalized form used for case-insensitive name uniqueness."""
        return unit_name.strip().lower()

    @staticmethod
    def normalize_short_code(short_code: str) -> str:
        return short_code.strip().lower()

    async def list_uoms(
        self,
        *,
        search: str | None = None,
        status: UomStatus | None = None,
        uom_type: UomType | None = None,
        category: UomCategory | None = None,
    ) -> list[UnitOfMeasure]:
        query = select(UnitOfMeasure)

        term = (search or "").strip().lower()
        if term:
            clauses = [
                UnitOfMeasure.unit_name_key.contains(term, autoescape=True),
                UnitOfMeasure.short_code.contains(term, autoescape=True),
            ]
            matching_categories = [item for item in UomCategory if term in item.value.lower()]
            if matching_categories:
                clauses.append(UnitOfMeasure.category.in_(matching_categories))
            query = query.where(or_(*clauses))

        if status is not None:
            query = query.where(UnitOfMeasure.status == status)
        if uom_type is not None:
            query = query.where(UnitOfMeasure.type == uom_type)
        if category is not None:
            query = query.where(UnitOfMeasure.category == category)

        result = await self._session.execute(query.order_by(UnitOfMeasure.created_at.desc()))
        return list(result.scalars().all())

    async def find_uom(self, uom_id: UUID) -> UnitOfMeasure | None:
        result = await self._session.execute(
            select(UnitOfMeasure).where(UnitOfMeasure.id == uom_id)
        )
        return result.scalar_one_or_none()

    async def get_uom(self, uom_id: UUID) -> UnitOfMeasure:
        row = await self.find_uom(uom_id)
        if row is None:
            raise NotFoundError(UOM_NOT_FOUND_MESSAGE)
        return row

    async def create_uom(
        self,
        *,
        unit_name: str,
        short_code: str,
        uom_type: UomType = UomType.BASE,
        category: UomCategory,
        status: UomStatus = UomStatus.ACTIVE,
    ) -> UnitOfMeasure:
        name = unit_name.strip()
        name_key = self.unit_name_key(name)
        code = self.normalize_short_code(short_code)
        await self._ensure_unique(name_key=name_key, short_code=code)

        row = UnitOfMeasure(
            unit_name=name,
            unit_name_key=name_key,
            short_code=code,
            type=uom_type,
            category=category,
            status=status,
        )
        self._session.add(row)
        await flush_or_conflict(self._session, DUPLICATE_UOM_MESSAGE)

        logger.info("uom_created", uom_id=str(row.id), short_code=code)
        return row

    async def update_uom(
        self,
        uom_id: UUID,
        *,
        unit_name: str | None = None,
        short_code: str | None = None,
        uom_type: UomType | None = None,
        category: UomCategory | None = None,
        status: UomStatus | None = None,
    ) -> UnitOfMeasure:
        row = await self.get_uom(uom_id)

        name_key = self.unit_name_key(unit_name) if unit_name is not None else None
        code = self.normalize_short_code(short_code) if short_code is not None else None
        await self._ensure_unique(name_key=name_key, short_code=code, exclude_id=row.id)

        if unit_name is not None and name_key is not None:
            row.unit_name = unit_name.strip()
            row.unit_name_key = name_key
        if code is not None:
            row.short_code = code
        if uom_type is not None:
            row.type = uom_type
        if category is not None:
            row.category = category
        if status is not None:
            row.status = status

        await flush_or_conflict(self._session, DUPLICATE_UOM_MESSAGE)
        logger.info("uom_updated", uom_id=str(row.id))
        return row

    async def delete_uom(self, uom_id: UUID) -> None:
        row = await self.get_uom(uom_id)

        if await self.is_referenced(row.id):
            raise ConflictError(UOM_IN_USE_MESSAGE)

        await self._session.delete(row)
        # RESTRICT foreign keys catch a conversion created after the check
        await flush_or_conflict(self._session, UOM_IN_USE_MESSAGE)
        logger.info("uom_deleted", uom_id=str(uom_id))

    async def is_referenced(self, uom_id: UUID) -> bool:
        """True when any conversion uses the unit on either side."""
        result = await self._session.execute(
            select(UomConversion.id)
            .where(or_(UomConversion.from_uom_id == uom_id, UomConversion.to_uom_id == uom_id))
            .limit(1)
        )
        return result.scalar_one_or_none() is not None

    async def _ensure_unique(
        self,
        *,
        name_key: str | None,
        short_code: str | None,
        exclude_id: UUID | None = None,
    ) -> None:
        clauses = []
        if name_key is not None:
            clauses.append(UnitOfMeasure.unit_name_key == name_key)
        if short_code is not None:
            clauses.append(UnitOfMeasure.short_code == short_code)
        if not clauses:
            return

        query = select(UnitOfMeasure.id).where(or_(*clauses))
        if exclude_id is not None:
            query = query.where(UnitOfMeasure.id != exclude_id)
        result = await self._session.execute(query.limit(1))
        if result.scalar_one_or_none() is not None:
            raise ConflictError(DUPLICATE_UOM_MESSAGE)
