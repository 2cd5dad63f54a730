"""Initial schema: buildings, rooms, tenants, payments and tenant documents.

Revision ID: 001_initial_schema
Revises:
Create Date: 2026-10-18 10:00:00.000000

"""

import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision = "001_initial_schema"
down_revision = None
branch_labels = None
depends_on = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.func.current_timestamp(),
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.func.current_timestamp(),
        ),
    ]


def upgrade() -> None:
    # Create buildings table
    op.create_table(
        "buildings",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column(
            "code",
            sa.String(length=20),
            nullable=False,
            comment="Short code from the first letter of each word in the name (e.g. 'gv')",
        ),
        sa.Column("address", sa.String(length=500), nullable=True),
        sa.Column("description", sa.Text(), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.Index("idx_building_name", "name"),
        sa.Index("idx_building_code", "code"),
    )

    # Create rooms table
    op.create_table(
        "rooms",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("building_id", sa.Integer(), nullable=False),
        sa.Column(
            "room_number",
            sa.String(length=50),
            nullable=False,
            comment="Room label as shown to people (e.g. 'A-101')",
        ),
        sa.Column("is_occupied", sa.Boolean(), nullable=False, server_default="0"),
        *_timestamps(),
        sa.ForeignKeyConstraint(["building_id"], ["buildings.id"]),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("building_id", "room_number", name="uq_room_building_number"),
        sa.Index("ix_rooms_building_id", "building_id"),
        sa.Index("idx_room_building_occupied", "building_id", "is_occupied"),
    )

    # Create tenants table
    op.create_table(
        "tenants",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("building_id", sa.Integer(), nullable=False),
        sa.Column("room_id", sa.Integer(), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("phone", sa.String(length=50), nullable=True),
        sa.Column(
            "username",
            sa.String(length=255),
            nullable=False,
            comment="Derived as '<room>@<building code>'",
        ),
        sa.Column(
            "password_hash",
            sa.String(length=255),
            nullable=False,
            comment="bcrypt hash of the generated password",
        ),
        sa.Column("rent", sa.Numeric(12, 2), nullable=False, comment="Monthly rent"),
        sa.Column(
            "maintenance",
            sa.Numeric(12, 2),
            nullable=False,
            server_default="0",
            comment="Monthly maintenance charge",
        ),
        sa.Column(
            "advance_paid",
            sa.Numeric(12, 2),
            nullable=False,
            server_default="0",
            comment="Security deposit collected at move-in",
        ),
        sa.Column("agreement_start", sa.Date(), nullable=True),
        sa.Column("agreement_end", sa.Date(), nullable=True),
        sa.Column(
            "status",
            sa.Enum("ACTIVE", "VACATED", name="tenantstatus", native_enum=False),
            nullable=False,
            server_default="ACTIVE",
        ),
        sa.Column("vacated_on", sa.Date(), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(["building_id"], ["buildings.id"]),
        sa.ForeignKeyConstraint(["room_id"], ["rooms.id"]),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("username"),
        sa.Index("ix_tenants_building_id", "building_id"),
        sa.Index("ix_tenants_room_id", "room_id"),
        sa.Index("ix_tenants_status", "status"),
        sa.Index("idx_tenant_building_status", "building_id", "status"),
    )

    # Create payments table
    op.create_table(
        "payments",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("tenant_id", sa.Integer(), nullable=False),
        sa.Column("amount", sa.Numeric(12, 2), nullable=False),
        sa.Column("paid_on", sa.Date(), nullable=False, comment="Date the money was received"),
        sa.Column(
            "billing_month",
            sa.Date(),
            nullable=True,
            comment="First day of the month this payment settles",
        ),
        sa.Column("payment_type", sa.String(length=20), nullable=False, server_default="rent"),
        sa.Column("method", sa.String(length=20), nullable=False, server_default="cash"),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column(
            "external_reference",
            sa.String(length=255),
            nullable=True,
            comment="Checkout session id for online payments",
        ),
        *_timestamps(),
        sa.ForeignKeyConstraint(["tenant_id"], ["tenants.id"]),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("external_reference"),
        sa.Index("ix_payments_tenant_id", "tenant_id"),
        sa.Index("ix_payments_paid_on", "paid_on"),
        sa.Index("idx_payment_tenant_date", "tenant_id", "paid_on"),
        sa.Index("idx_payment_tenant_month", "tenant_id", "billing_month"),
    )

    # Create tenant_documents table
    op.create_table(
        "tenant_documents",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("tenant_id", sa.Integer(), nullable=False),
        sa.Column("url", sa.String(length=1000), nullable=False),
        sa.Column("label", sa.String(length=255), nullable=False),
        sa.Column("file_name", sa.String(length=255), nullable=False),
        sa.Column("storage_path", sa.String(length=500), nullable=False),
        *_timestamps(),
        sa.ForeignKeyConstraint(["tenant_id"], ["tenants.id"]),
        sa.PrimaryKeyConstraint("id"),
        sa.Index("ix_tenant_documents_tenant_id", "tenant_id"),
    )


def downgrade() -> None:
    op.drop_table("tenant_documents")
    op.drop_table("payments")
    op.drop_table("tenants")
    op.drop_table("rooms")
    op.drop_table("buildings")
