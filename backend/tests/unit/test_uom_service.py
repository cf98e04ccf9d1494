"""
Unit tests for the unit and conversion services with a mocked session.
"""

from unittest.mock import AsyncMock, MagicMock
from uuid import uuid4

import pytest
from sqlalchemy.exc import IntegrityError

from uom_service.core.errors import ConflictError, NotFoundError, ValidationError
from uom_service.db.models import UnitOfMeasure, UomCategory, UomType
from uom_service.db.session import flush_or_conflict
from uom_service.modules.conversions.service import UomConversionService
from uom_service.modules.units.service import UomService


def _result(value: object) -> MagicMock:
    result = MagicMock()
    result.scalar_one_or_none.return_value = value
    return result


@pytest.fixture
def session() -> AsyncMock:
    mock = AsyncMock()
    mock.add = MagicMock()
    return mock


def test_unit_name_key_is_case_and_whitespace_insensitive():
    assert UomService.unit_name_key("  Kilo Gram ") == "kilo gram"
    assert UomService.normalize_short_code(" KG ") == "kg"


@pytest.mark.asyncio
async def test_create_uom_stores_normalized_values(session):
    session.execute.return_value = _result(None)

    row = await UomService(session).create_uom(
        unit_name=" Kilogram ",
        short_code="KG",
        uom_type=UomType.BASE,
        category=UomCategory.WEIGHT,
    )

    assert row.unit_name == "Kilogram"
    assert row.unit_name_key == "kilogram"
    assert row.short_code == "kg"
    session.add.assert_called_once_with(row)
    session.flush.assert_awaited_once()


@pytest.mark.asyncio
async def test_create_uom_rejects_duplicate_before_insert(session):
    session.execute.return_value = _result(uuid4())

    with pytest.raises(ConflictError, match="already exists"):
        await UomService(session).create_uom(
            unit_name="Kilogram",
            short_code="kg",
            category=UomCategory.WEIGHT,
        )

    session.add.assert_not_called()


@pytest.mark.asyncio
async def test_get_uom_raises_not_found(session):
    session.execute.return_value = _result(None)

    with pytest.raises(NotFoundError, match="UOM not found"):
        await UomService(session).get_uom(uuid4())


@pytest.mark.asyncio
async def test_delete_referenced_uom_is_blocked(session):
    service = UomService(session)
    row = UnitOfMeasure(id=uuid4(), unit_name="Gram", unit_name_key="gram", short_code="g")
    service.get_uom = AsyncMock(return_value=row)
    service.is_referenced = AsyncMock(return_value=True)

    with pytest.raises(ConflictError, match="used in conversions"):
        await service.delete_uom(row.id)

    session.delete.assert_not_awaited()


@pytest.mark.asyncio
async def test_flush_or_conflict_translates_integrity_error(session):
    session.flush.side_effect = IntegrityError("INSERT", {}, Exception("duplicate key"))

    with pytest.raises(ConflictError, match="Conversion between these UOMs already exists"):
        await flush_or_conflict(session, "Conversion between these UOMs already exists")

    session.rollback.assert_awaited_once()


@pytest.mark.asyncio
async def test_self_conversion_rejected_before_any_query(session):
    uom_id = uuid4()

    with pytest.raises(ValidationError, match="cannot be the same"):
        await UomConversionService(session).create_conversion(
            from_uom_id=uom_id,
            to_uom_id=uom_id,
            conversion_ratio=1,
        )

    session.execute.assert_not_awaited()


@pytest.mark.asyncio
async def test_ratio_below_minimum_rejected_before_any_query(session):
    with pytest.raises(ValidationError, match="at least 0.001"):
        await UomConversionService(session).create_conversion(
            from_uom_id=uuid4(),
            to_uom_id=uuid4(),
            conversion_ratio=0.0005,
        )

    session.execute.assert_not_awaited()


@pytest.mark.asyncio
async def test_missing_from_uom_reported_first(session):
    session.execute.return_value = _result(None)

    with pytest.raises(NotFoundError, match="From UOM not found"):
        await UomConversionService(session).create_conversion(
            from_uom_id=uuid4(),
            to_uom_id=uuid4(),
            conversion_ratio=10,
        )


@pytest.mark.asyncio
async def test_convert_multiplies_by_active_ratio(session):
    session.execute.return_value = _result(1000.0)

    converted = await UomConversionService(session).convert(
        from_uom_id=uuid4(),
        to_uom_id=uuid4(),
        quantity=2.5,
    )

    assert converted == 2500.0


@pytest.mark.asyncio
async def test_convert_without_active_conversion_is_not_found(session):
    session.execute.return_value = _result(None)

    with pytest.raises(NotFoundError, match="No active conversion"):
        await UomConversionService(session).convert(
            from_uom_id=uuid4(),
            to_uom_id=uuid4(),
            quantity=1,
        )
