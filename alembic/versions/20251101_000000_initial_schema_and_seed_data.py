"""Initial schema and seed data for TowGo

Revision ID: 20251101_000000
Revises: None
Create Date: 2025-11-01 00:00:00.000000

This is the initial migration that creates all tables of the TowGo API and
seeds the roadside service catalog:
- users (credentials, OAuth identity, Stripe and trial state, referral code)
- favorites, referrals, user_achievements
- services and payments

Revision format: YYYYMMDD_HHMMSS_description

"""

from datetime import datetime, timezone
from typing import Sequence, Union

import sqlalchemy as sa

from alembic import op

# revision identifiers, used by Alembic.
revision: str = "20251101_000000"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create all tables and seed initial data."""

    # Create users table
    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("username", sa.String(64), nullable=False),
        sa.Column("email", sa.String(255), nullable=True),
        sa.Column("password_hash", sa.String(), nullable=True),
        sa.Column("display_name", sa.String(128), nullable=True),
        sa.Column("avatar", sa.String(), nullable=True),
        sa.Column("email_verified", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("verification_token", sa.String(), nullable=True),
        sa.Column("verification_token_expires", sa.DateTime(timezone=True), nullable=True),
        sa.Column("reset_password_token", sa.String(), nullable=True),
        sa.Column("reset_password_expires", sa.DateTime(timezone=True), nullable=True),
        sa.Column("provider_id", sa.String(), nullable=True),
        sa.Column("provider_user_id", sa.String(), nullable=True),
        sa.Column("vehicle_info", sa.JSON(), nullable=True),
        sa.Column("customer_id", sa.String(), nullable=True),
        sa.Column("subscription_id", sa.String(), nullable=True),
        sa.Column("subscription_status", sa.String(), nullable=True),
        sa.Column("subscription_tier", sa.String(), nullable=False, server_default="free"),
        sa.Column("trial_start_date", sa.DateTime(timezone=True), nullable=True),
        sa.Column("trial_end_date", sa.DateTime(timezone=True), nullable=True),
        sa.Column("referral_code", sa.String(16), nullable=False),
        sa.Column("referred_by_id", sa.Integer(), nullable=True),
        sa.Column("total_invites", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["referred_by_id"], ["users.id"]),
        sa.Index("ix_users_username", "username", unique=True),
        sa.Index("ix_users_email", "email", unique=True),
        sa.Index("ix_users_referral_code", "referral_code", unique=True),
        sa.Index("ix_users_verification_token", "verification_token"),
        sa.Index("ix_users_reset_password_token", "reset_password_token"),
        sa.Index("ix_users_provider_user_id", "provider_user_id"),
        sa.Index("ix_users_customer_id", "customer_id"),
    )

    # Create favorites table
    op.create_table(
        "favorites",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("user_id", sa.Integer(), nullable=False),
        sa.Column("place_id", sa.String(255), nullable=False),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("address", sa.String(), nullable=False),
        sa.Column("phone_number", sa.String(), nullable=True),
        sa.Column("location", sa.JSON(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"]),
        sa.UniqueConstraint("user_id", "place_id", name="uq_favorites_user_place"),
        sa.Index("ix_favorites_user_id", "user_id"),
    )

    # Create services table
    op.create_table(
        "services",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("description", sa.String(), nullable=False),
        sa.Column("price", sa.Float(), nullable=False),
        sa.Column("price_id", sa.String(), nullable=True),
        sa.Column("active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )

    # Create payments table
    op.create_table(
        "payments",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("user_id", sa.Integer(), nullable=False),
        sa.Column("service_id", sa.Integer(), nullable=False),
        sa.Column("amount", sa.Float(), nullable=False),
        sa.Column("currency", sa.String(8), nullable=False, server_default="usd"),
        sa.Column("status", sa.String(), nullable=False, server_default="pending"),
        sa.Column("session_id", sa.String(), nullable=True),
        sa.Column("payment_intent_id", sa.String(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"]),
        sa.ForeignKeyConstraint(["service_id"], ["services.id"]),
        sa.Index("ix_payments_user_id", "user_id"),
        sa.Index("ix_payments_service_id", "service_id"),
        sa.Index("ix_payments_status", "status"),
        sa.Index("ix_payments_session_id", "session_id", unique=True),
        sa.Index("ix_payments_payment_intent_id", "payment_intent_id"),
    )

    # Create referrals table
    op.create_table(
        "referrals",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("referrer_id", sa.Integer(), nullable=False),
        sa.Column("referred_user_id", sa.Integer(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["referrer_id"], ["users.id"]),
        sa.ForeignKeyConstraint(["referred_user_id"], ["users.id"]),
        sa.UniqueConstraint("referred_user_id"),
        sa.Index("ix_referrals_referrer_id", "referrer_id"),
    )

    # Create user_achievements table
    op.create_table(
        "user_achievements",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("user_id", sa.Integer(), nullable=False),
        sa.Column("achievement_id", sa.String(64), nullable=False),
        sa.Column("progress", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("unlocked", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("unlocked_at", sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"]),
        sa.UniqueConstraint("user_id", "achievement_id", name="uq_user_achievements_user_achievement"),
        sa.Index("ix_user_achievements_user_id", "user_id"),
    )

    # Seed the roadside service catalog
    now = datetime.now(timezone.utc)
    services_table = sa.table(
        "services",
        sa.column("name", sa.String),
        sa.column("description", sa.String),
        sa.column("price", sa.Float),
        sa.column("active", sa.Boolean),
        sa.column("created_at", sa.DateTime(timezone=True)),
        sa.column("updated_at", sa.DateTime(timezone=True)),
    )
    default_services = [
        ("Towing", "Tow to the nearest repair shop within 10 miles", 89.99),
        ("Jump Start", "Battery jump start at your location", 49.99),
        ("Tire Change", "Swap a flat tire for your spare", 59.99),
        ("Lockout Service", "Unlock your vehicle when the keys are inside", 54.99),
        ("Fuel Delivery", "Up to 2 gallons of fuel delivered to you", 44.99),
    ]
    op.bulk_insert(
        services_table,
        [
            {
                "name": name,
                "description": description,
                "price": price,
                "active": True,
                "created_at": now,
                "updated_at": now,
            }
            for name, description, price in default_services
        ],
    )


def downgrade() -> None:
    """Drop all tables created in upgrade."""
    op.drop_table("user_achievements")
    op.drop_table("referrals")
    op.drop_table("payments")
    op.drop_table("services")
    op.drop_table("favorites")
    op.drop_table("users")
