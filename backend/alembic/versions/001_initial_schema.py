"""Initial schema: courts, promo codes, bookings, admin users; seed court catalogue.

Revision ID: 001
Revises: None
Create Date: 2026-10-16
"""
from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa

revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

DEFAULT_COURTS = [
    # id, name, hourly, daily, weekly, card image
    ("indoor-arena", "Indoor Arena", 30000, 140000, 850000, "indoor arena.jpg"),
    ("lounge", "Lounge", 12000, 90000, 520000, None),
    ("gym", "Gym (Group Workouts)", 10000, 75000, 450000, None),
    ("airport-view", "Airport View", 15000, 120000, 700000, "airport.jpg"),
    ("barbershop", "Barbershop", 12000, 82000, 480000, None),
    ("upskill", "Upskill Center", 14000, 98000, 560000, None),
]


def _timestamps():
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    ]


def upgrade() -> None:
    op.create_table(
        "admin_users",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("hashed_password", sa.String(255), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.text("true")),
        *_timestamps(),
    )
    op.create_index("ix_admin_users_id", "admin_users", ["id"])
    op.create_index("ix_admin_users_email", "admin_users", ["email"], unique=True)

    courts = op.create_table(
        "courts",
        sa.Column("id", sa.String(64), primary_key=True),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("slug", sa.String(64), nullable=True, unique=True),
        sa.Column("hero_image", sa.String(500), nullable=True),
        sa.Column("card_image", sa.String(500), nullable=True),
        sa.Column("hourly_rate", sa.Integer(), nullable=False, server_default=sa.text("0")),
        sa.Column("daily_rate", sa.Integer(), nullable=False, server_default=sa.text("0")),
        sa.Column("weekly_rate", sa.Integer(), nullable=False, server_default=sa.text("0")),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.text("true")),
        *_timestamps(),
        sa.CheckConstraint("hourly_rate >= 0", name="check_court_hourly_rate_non_negative"),
        sa.CheckConstraint("daily_rate >= 0", name="check_court_daily_rate_non_negative"),
        sa.CheckConstraint("weekly_rate >= 0", name="check_court_weekly_rate_non_negative"),
    )
    # The public listing filters on is_active and sorts by name
    op.create_index("ix_courts_active_name", "courts", ["is_active", "name"])

    op.create_table(
        "promo_codes",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("code", sa.String(64), nullable=False),
        sa.Column("type", sa.String(16), nullable=False, server_default=sa.text("'percent'")),
        sa.Column("value", sa.Float(), nullable=False, server_default=sa.text("0")),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.text("true")),
        sa.Column("starts_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("ends_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("max_redemptions", sa.Integer(), nullable=True),
        sa.Column("redeemed_count", sa.Integer(), nullable=False, server_default=sa.text("0")),
        sa.Column("min_amount", sa.Integer(), nullable=True),
        *_timestamps(),
        sa.CheckConstraint("type IN ('percent', 'fixed')", name="check_promo_type"),
        sa.CheckConstraint("value >= 0", name="check_promo_value_non_negative"),
        sa.CheckConstraint("redeemed_count >= 0", name="check_promo_redeemed_non_negative"),
    )
    op.create_index("ix_promo_codes_id", "promo_codes", ["id"])
    # Codes are stored upper-cased; lookups are exact matches
    op.create_index("ix_promo_codes_code", "promo_codes", ["code"], unique=True)

    op.create_table(
        "bookings",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("court_id", sa.String(64), sa.ForeignKey("courts.id"), nullable=False),
        sa.Column("plan", sa.String(10), nullable=False),
        sa.Column("start_date", sa.Date(), nullable=False),
        sa.Column("end_date", sa.Date(), nullable=False),
        sa.Column("start_time", sa.Time(), nullable=True),
        sa.Column("hours", sa.Integer(), nullable=True),
        sa.Column("base_amount", sa.Integer(), nullable=False, server_default=sa.text("0")),
        sa.Column("discount_amount", sa.Integer(), nullable=False, server_default=sa.text("0")),
        sa.Column("total_amount", sa.Integer(), nullable=False, server_default=sa.text("0")),
        sa.Column("promo_code_id", sa.Integer(), sa.ForeignKey("promo_codes.id"), nullable=True),
        sa.Column("customer_name", sa.String(255), nullable=False),
        sa.Column("customer_phone", sa.String(64), nullable=False),
        sa.Column("customer_email", sa.String(255), nullable=False),
        sa.Column("event_type", sa.String(100), nullable=True),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("status", sa.String(20), nullable=False, server_default=sa.text("'pending'")),
        *_timestamps(),
        sa.CheckConstraint("plan IN ('Hourly', 'Daily', 'Weekly')", name="check_booking_plan"),
        sa.CheckConstraint("status IN ('pending', 'confirmed', 'rejected')", name="check_booking_status"),
        sa.CheckConstraint("base_amount >= 0", name="check_booking_base_non_negative"),
        sa.CheckConstraint("discount_amount >= 0", name="check_booking_discount_non_negative"),
        sa.CheckConstraint("total_amount >= 0", name="check_booking_total_non_negative"),
    )
    op.create_index("ix_bookings_id", "bookings", ["id"])
    op.create_index("ix_bookings_court_id", "bookings", ["court_id"])
    # Admin review lists newest first
    op.create_index("ix_bookings_created_at", "bookings", ["created_at"])

    op.bulk_insert(
        courts,
        [
            {
                "id": court_id,
                "name": name,
                "slug": court_id,
                "card_image": image,
                "hourly_rate": hourly,
                "daily_rate": daily,
                "weekly_rate": weekly,
                "is_active": True,
            }
            for court_id, name, hourly, daily, weekly, image in DEFAULT_COURTS
        ],
    )


def downgrade() -> None:
    op.drop_table("bookings")
    op.drop_table("promo_codes")
    op.drop_table("courts")
    op.drop_table("admin_users")
