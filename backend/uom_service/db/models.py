"""
SQLAlchemy ORM models for units of measure and their conversions.
Primary keys are UUIDs generated on insert.
"""

from datetime import UTC, datetime
from enum import Enum as PyEnum
from uuid import UUID, uuid4

from sqlalchemy import (
    CheckConstraint,
    DateTime,
    Enum,
    Float,
    ForeignKey,
    Index,
    String,
    UniqueConstraint,
    func,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship


class Base(DeclarativeBase):
    """Base class for all ORM models."""


def _utcnow() -> datetime:
    return datetime.now(UTC)


def _enum_values(enum_cls: type[PyEnum]) -> list[str]:
    return [member.value for member in enum_cls]


# =============================================================================
# Enums
# =============================================================================


class UomType(str, PyEnum):
    """Whether a unit is a base unit or derived from one."""

    BASE = "Base"
    DERIVED = "Derived"


class UomCategory(str, PyEnum):
    """Physical dimension a unit measures."""

    WEIGHT = "Weight"
    VOLUME = "Volume"
    QUANTITY = "Quantity"
    PACKAGING = "Packaging"
    LENGTH = "Length"
    AREA = "Area"


class UomStatus(str, PyEnum):
    """Availability of a unit or conversion."""

    ACTIVE = "Active"
    INACTIVE = "Inactive"


# =============================================================================
# Unit Models
# =============================================================================


class UnitOfMeasure(Base):
    """A named unit such as kilogram or box."""

    __tablename__ = "uoms"

    id: Mapped[UUID] = mapped_column(primary_key=True, default=uuid4)
    unit_name: Mapped[str] = mapped_column(String(50), nullable=False)
    unit_name_key: Mapped[str] = mapped_column(
        String(50),
        nullable=False,
        comment="Lower-cased unit_name used for case-insensitive uniqueness",
    )
    short_code: Mapped[str] = mapped_column(
        String(10),
        nullable=False,
        comment="Stored lower-cased",
    )
    type: Mapped[UomType] = mapped_column(
        Enum(UomType, name="uom_type", values_callable=_enum_values),
        default=UomType.BASE,
        nullable=False,
    )
    category: Mapped[UomCategory] = mapped_column(
        Enum(UomCategory, name="uom_category", values_callable=_enum_values),
        nullable=False,
    )
    status: Mapped[UomStatus] = mapped_column(
        Enum(UomStatus, name="uom_status", values_callable=_enum_values),
        default=UomStatus.ACTIVE,
        nullable=False,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=_utcnow,
        server_default=func.now(),
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=_utcnow,
        server_default=func.now(),
        onupdate=_utcnow,
    )

    __table_args__ = (
        UniqueConstraint("unit_name_key", name="uq_uoms_unit_name_key"),
        UniqueConstraint("short_code", name="uq_uoms_short_code"),
        Index("ix_uoms_status", "status"),
        Index("ix_uoms_category", "category"),
        Index("ix_uoms_created_at", "created_at"),
    )


class UomConversion(Base):
    """Directed conversion ratio from one unit to another."""

    __tablename__ = "uom_conversions"

    id: Mapped[UUID] = mapped_column(primary_key=True, default=uuid4)
    from_uom_id: Mapped[UUID] = mapped_column(
        ForeignKey("uoms.id", ondelete="RESTRICT"),
        nullable=False,
    )
    to_uom_id: Mapped[UUID] = mapped_column(
        ForeignKey("uoms.id", ondelete="RESTRICT"),
        nullable=False,
    )
    conversion_ratio: Mapped[float] = mapped_column(
        Float,
        nullable=False,
        comment="quantity_in_to = quantity_in_from * conversion_ratio",
    )
    category: Mapped[UomCategory] = mapped_column(
        Enum(UomCategory, name="uom_category", values_callable=_enum_values),
        nullable=False,
    )
    status: Mapped[UomStatus] = mapped_column(
        Enum(UomStatus, name="uom_status", values_callable=_enum_values),
        default=UomStatus.ACTIVE,
        nullable=False,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=_utcnow,
        server_default=func.now(),
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=_utcnow,
        server_default=func.now(),
        onupdate=_utcnow,
    )

    from_uom: Mapped[UnitOfMeasure] = relationship(foreign_keys=[from_uom_id])
    to_uom: Mapped[UnitOfMeasure] = relationship(foreign_keys=[to_uom_id])

    __table_args__ = (
        UniqueConstraint("from_uom_id", "to_uom_id", name="uq_uom_conversions_pair"),
        CheckConstraint("from_uom_id <> to_uom_id", name="ck_uom_conversions_distinct"),
        CheckConstraint("conversion_ratio >= 0.001", name="ck_uom_conversions_ratio_min"),
        Index("ix_uom_conversions_to_uom_id", "to_uom_id"),
        Index("ix_uom_conversions_status", "status"),
    )
