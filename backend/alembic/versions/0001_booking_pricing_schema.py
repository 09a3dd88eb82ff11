"""Tenants, providers, availability slots and bookings.

Revision ID: 0001
Revises:
Create Date: 2026-10-18
"""

from __future__ import annotations

import sqlalchemy as sa
from alembic import op

revision = "0001"
down_revision = None
branch_labels = None
depends_on = None


def _timestamps() -> list[sa.Column]:
    return [
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
    ]


def upgrade() -> None:
    op.create_table(
        "tenants",
        sa.Column("id", sa.Uuid(as_uuid=True), primary_key=True),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("slug", sa.String(120), nullable=False),
        *_timestamps(),
        sa.UniqueConstraint("slug", name="uq_tenants_slug"),
    )
    op.create_table(
        "providers",
        sa.Column("id", sa.Uuid(as_uuid=True), primary_key=True),
        sa.Column(
            "tenant_id",
            sa.Uuid(as_uuid=True),
            sa.ForeignKey("tenants.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("default_hourly_rate", sa.Float()),
        sa.Column("default_pricing_rules", sa.Text()),
        *_timestamps(),
    )
    op.create_table(
        "availability",
        sa.Column("id", sa.Uuid(as_uuid=True), primary_key=True),
        sa.Column(
            "provider_id",
            sa.Uuid(as_uuid=True),
            sa.ForeignKey("providers.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("date", sa.Date(), nullable=False),
        sa.Column("start_time", sa.String(5), nullable=False),
        sa.Column("end_time", sa.String(5), nullable=False),
        sa.Column(
            "is_group_session", sa.Boolean(), server_default=sa.false(), nullable=False
        ),
        sa.Column("max_capacity", sa.Integer(), server_default="1", nullable=False),
        sa.Column("current_bookings", sa.Integer(), server_default="0", nullable=False),
        sa.Column("price", sa.Float()),
        sa.Column("pricing_rules", sa.Text()),
        sa.Column("is_active", sa.Boolean(), server_default=sa.true(), nullable=False),
        *_timestamps(),
    )
    op.create_table(
        "bookings",
        sa.Column("id", sa.Uuid(as_uuid=True), primary_key=True),
        sa.Column(
            "tenant_id",
            sa.Uuid(as_uuid=True),
            sa.ForeignKey("tenants.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column(
            "availability_id",
            sa.Uuid(as_uuid=True),
            sa.ForeignKey("availability.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column(
            "provider_id",
            sa.Uuid(as_uuid=True),
            sa.ForeignKey("providers.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("client_name", sa.String(255), nullable=False),
        sa.Column("client_email", sa.String(255), nullable=False),
        sa.Column("client_phone", sa.String(32)),
        sa.Column("notes", sa.Text()),
        sa.Column("party_size", sa.Integer(), server_default="1", nullable=False),
        sa.Column(
            "open_to_sharing", sa.Boolean(), server_default=sa.false(), nullable=False
        ),
        sa.Column("price_per_person", sa.Float()),
        sa.Column("total_price", sa.Float()),
        sa.Column(
            "status",
            sa.Enum("CONFIRMED", "CANCELLED", name="bookingstatus"),
            nullable=False,
        ),
        *_timestamps(),
    )
    op.create_index("ix_bookings_availability_id", "bookings", ["availability_id"])


def downgrade() -> None:
    op.drop_index("ix_bookings_availability_id", table_name="bookings")
    op.drop_table("bookings")
    op.drop_table("availability")
    op.drop_table("providers")
    op.drop_table("tenants")
    sa.Enum(name="bookingstatus").drop(op.get_bind(), checkfirst=True)
