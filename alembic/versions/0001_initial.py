"""initial

Revision ID: 0001_initial
Revises:
Create Date: 2026-10-19

"""

from alembic import op
import sqlalchemy as sa

revision = "0001_initial"
down_revision = None
branch_labels = None
depends_on = None

def upgrade() -> None:
    op.create_table(
        "packages",
        sa.Column("id", sa.String(length=64), primary_key=True),
        sa.Column("name", sa.String(length=120), nullable=False),
        sa.Column("description", sa.Text(), nullable=False, server_default=""),
        sa.Column("price_per_person", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("min_headcount", sa.Integer(), nullable=False, server_default="1"),
        sa.Column("timing", sa.String(length=120), nullable=False, server_default=""),
        sa.Column("image_url", sa.String(length=512), nullable=False, server_default=""),
        sa.Column("active", sa.Boolean(), nullable=False, server_default=sa.text("true")),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
    )

    op.create_table(
        "bookings",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("package_id", sa.String(length=64), nullable=False),
        sa.Column("package_name", sa.String(length=120), nullable=False, server_default=""),
        sa.Column("checkin_date", sa.String(length=10), nullable=False),
        sa.Column("full_name", sa.String(length=200), nullable=False),
        sa.Column("email", sa.String(length=320), nullable=False),
        sa.Column("phone", sa.String(length=40), nullable=False),
        sa.Column("adults", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("children", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("headcount_total", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("favorite_nature_thing", sa.String(length=200), nullable=False, server_default=""),
        sa.Column("wants_meals", sa.Boolean(), nullable=False, server_default=sa.text("false")),
        sa.Column("wants_transportation", sa.Boolean(), nullable=False, server_default=sa.text("false")),
        sa.Column("wants_tour_guide", sa.Boolean(), nullable=False, server_default=sa.text("false")),
        sa.Column("price_per_person", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("subtotal", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("deposit_due", sa.Float(), nullable=False, server_default="0"),
        sa.Column("deposit_paid_amount", sa.Float(), nullable=True),
        sa.Column("status", sa.String(length=30), nullable=False, server_default="pending_deposit"),
        sa.Column("receipt_url", sa.String(length=1024), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index("ix_bookings_package_id", "bookings", ["package_id"])
    op.create_index("ix_bookings_checkin_date", "bookings", ["checkin_date"])
    op.create_index("ix_bookings_email", "bookings", ["email"])

    op.create_table(
        "settings",
        sa.Column("key", sa.String(length=80), primary_key=True),
        sa.Column("str_value", sa.Text(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
    )


def downgrade() -> None:
    op.drop_table("settings")
    op.drop_index("ix_bookings_email", table_name="bookings")
    op.drop_index("ix_bookings_checkin_date", table_name="bookings")
    op.drop_index("ix_bookings_package_id", table_name="bookings")
    op.drop_table("bookings")
    op.drop_table("packages")
