"""Database package."""

from uom_service.db.models import (
    Base,
    UnitOfMeasure,
    UomCategory,
    UomConversion,
    UomStatus,
    UomType,
)
from uom_service.db.session import Database, DbSession, get_database, get_db_session

__all__ = [
    "Database",
    "DbSession",
    "get_database",
    "get_db_session",
    "Base",
    "UnitOfMeasure",
    "UomConversion",
    "UomCategory",
    "UomStatus",
    "UomType",
]
