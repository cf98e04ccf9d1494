"""Units of measure and conversions

Revision ID: 0001_uom_tables
Revises:
Create Date: 2026-10-18
"""

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision = "0001_uom_tables"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    uom_type_enum = postgresql.ENUM("Base", "Derived", name="uom_type", create_type=False)
    uom_category_enum = postgresql.ENUM(
        "Weight",
        "Volume",
        "Quantity",
        "Packaging",
        "Length",
        "Area",
        name="uom_category",
        create_type=False,
    )
    uom_status_enum = postgresql.ENUM("Active", "Inactive", name="uom_status", create_type=False)

    bind = op.get_bind()
    uom_type_enum.create(bind, checkfirst=True)
    uom_category_enum.create(bind, checkfirst=True)
    uom_status_enum.create(bind, checkfirst=True)

    op.create_table(
        "uoms",
        sa.Column("id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("unit_name", sa.String(length=50), nullable=False),
        sa.Column(
            "unit_name_key",
            sa.String(length=50),
            nullable=False,
            comment="Lower-cased unit_name used for case-insensitive uniqueness",
        ),
        sa.Column("short_code", sa.String(length=10), nullable=False, comment="Stored lower-cased"),
        sa.Column("type", uom_type_enum, nullable=False),
        sa.Column("category", uom_category_enum, nullable=False),
        sa.Column("status", uom_status_enum, nullable=False),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("unit_name_key", name="uq_uoms_unit_name_key"),
        sa.UniqueConstraint("short_code", name="uq_uoms_short_code"),
    )
    op.create_index("ix_uoms_status", "uoms", ["status"])
    op.create_index("ix_uoms_category", "uoms", ["category"])
    op.create_index("ix_uoms_created_at", "uoms", ["created_at"])

    op.create_table(
        "uom_conversions",
        sa.Column("id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("from_uom_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("to_uom_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column(
            "conversion_ratio",
            sa.Float(),
            nullable=False,
            comment="quantity_in_to = quantity_in_from * conversion_ratio",
        ),
        sa.Column("category", uom_category_enum, nullable=False),
        sa.Column("status", uom_status_enum, nullable=False),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["from_uom_id"], ["uoms.id"], ondelete="RESTRICT"),
        sa.ForeignKeyConstraint(["to_uom_id"], ["uoms.id"], ondelete="RESTRICT"),
        sa.UniqueConstraint("from_uom_id", "to_uom_id", name="uq_uom_conversions_pair"),
        sa.CheckConstraint("from_uom_id <> to_uom_id", name="ck_uom_conversions_distinct"),
        sa.CheckConstraint("conversion_ratio >= 0.001", name="ck_uom_conversions_ratio_min"),
    )
    op.create_index("ix_uom_conversions_to_uom_id", "uom_conversions", ["to_uom_id"])
    op.create_index("ix_uom_conversions_status", "uom_conversions", ["status"])


def downgrade() -> None:
    op.drop_index("ix_uom_conversions_status", table_name="uom_conversions")
    op.drop_index("ix_uom_conversions_to_uom_id", table_name="uom_conversions")
    op.drop_table("uom_conversions")

    op.drop_index("ix_uoms_created_at", table_name="uoms")
    op.drop_index("ix_uoms_category", table_name="uoms")
    op.drop_index("ix_uoms_status", table_name="uoms")
    op.drop_table("uoms")

    sa.Enum(name="uom_status").drop(op.get_bind(), checkfirst=True)
    sa.Enum(name="uom_category").drop(op.get_bind(), checkfirst=True)
    sa.Enum(name="uom_type").drop(op.get_bind(), checkfirst=True)
