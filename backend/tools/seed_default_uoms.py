"""Seed a fresh database with common units and conversions (safe to re-run)."""

from __future__ import annotations

import argparse
import asyncio
import json
from typing import Any

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from uom_service.core.config import get_settings
from uom_service.core.logging import configure_logging
from uom_service.db.models import UnitOfMeasure, UomCategory, UomConversion, UomType
from uom_service.db.session import Database
from uom_service.modules.conversions.service import UomConversionService
from uom_service.modules.units.service import UomService

# (unit name, short code, type, category)
DEFAULT_UOMS: list[tuple[str, str, UomType, UomCategory]] = [
    ("Kilogram", "kg", UomType.BASE, UomCategory.WEIGHT),
    ("Gram", "g", UomType.DERIVED, UomCategory.WEIGHT),
    ("Litre", "l", UomType.BASE, UomCategory.VOLUME),
    ("Millilitre", "ml", UomType.DERIVED, UomCategory.VOLUME),
    ("Pieces", "pcs", UomType.BASE, UomCategory.QUANTITY),
    ("Box", "box", UomType.BASE, UomCategory.PACKAGING),
    ("Metre", "m", UomType.BASE, UomCategory.LENGTH),
    ("Centimetre", "cm", UomType.DERIVED, UomCategory.LENGTH),
    ("Square Metre", "m2", UomType.BASE, UomCategory.AREA),
]

# (from short code, to short code, ratio)
DEFAULT_CONVERSIONS: list[tuple[str, str, float]] = [
    ("kg", "g", 1000),
    ("l", "ml", 1000),
    ("m", "cm", 100),
]


def _parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Seed default units of measure.")
    parser.add_argument(
        "--database-url",
        help="Async SQLAlchemy URL. Defaults to DATABASE_URL from settings.",
    )
    parser.add_argument(
        "--skip-conversions",
        action="store_true",
        help="Only seed units, not conversions.",
    )
    return parser.parse_args()


async def seed_defaults(
    session: AsyncSession,
    *,
    include_conversions: bool = True,
) -> dict[str, Any]:
    """Create any missing default units and conversions; existing rows are left as-is."""
    units = UomService(session)
    conversions = UomConversionService(session)
    created_uoms: list[str] = []
    created_conversions: list[str] = []

    result = await session.execute(select(UnitOfMeasure))
    by_code = {row.short_code: row for row in result.scalars().all()}

    for unit_name, short_code, uom_type, category in DEFAULT_UOMS:
        if short_code in by_code:
            continue
        by_code[short_code] = await units.create_uom(
            unit_name=unit_name,
            short_code=short_code,
            uom_type=uom_type,
            category=category,
        )
        created_uoms.append(short_code)

    if include_conversions:
        result = await session.execute(
            select(UomConversion.from_uom_id, UomConversion.to_uom_id)
        )
        existing_pairs = {tuple(pair) for pair in result.all()}

        for from_code, to_code, ratio in DEFAULT_CONVERSIONS:
            from_uom, to_uom = by_code[from_code], by_code[to_code]
            if (from_uom.id, to_uom.id) in existing_pairs:
                continue
            await conversions.create_conversion(
                from_uom_id=from_uom.id,
                to_uom_id=to_uom.id,
                conversion_ratio=ratio,
            )
            created_conversions.append(f"{from_code}->{to_code}")

    return {"created_uoms": created_uoms, "created_conversions": created_conversions}


async def _main() -> int:
    args = _parse_args()
    configure_logging()
    if args.database_url:
        database = Database.from_url(args.database_url)
    else:
        database = Database.from_settings(get_settings())
    try:
        async with database.session() as session:
            summary = await seed_defaults(
                session,
                include_conversions=not args.skip_conversions,
            )
        print(json.dumps(summary, indent=2))
        return 0
    finally:
        await database.dispose()


if __name__ == "__main__":
    raise SystemExit(asyncio.run(_main()))
