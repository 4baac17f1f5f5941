"""create marketplace schema

Revision ID: 5e1c0a7d2b94
Revises: 
Create Date: 2026-10-19 09:30:00.000000
"""

from __future__ import annotations

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = "5e1c0a7d2b94"
down_revision = None
branch_labels = None
depends_on = None

# Amounts are stored in minor units (cents).
MONEY = sa.BigInteger()


def upgrade() -> None:
    op.create_table(
        "accounts",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("name", sa.String(length=100), nullable=False),
        sa.Column("email", sa.String(length=255)),
        sa.Column("avatar", sa.String(length=500)),
        sa.Column("role", sa.String(length=20), server_default="user"),
        sa.Column("is_active", sa.Boolean(), server_default=sa.true()),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True)),
    )
    op.create_index("ix_accounts_email", "accounts", ["email"], unique=True)

    op.create_table(
        "subscriptions",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("user_id", sa.String(length=36), sa.ForeignKey("accounts.id"), nullable=False),
        sa.Column("plan_id", sa.String(length=50), nullable=False, server_default="free"),
        sa.Column("status", sa.String(length=20), nullable=False, server_default="active"),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True)),
    )
    op.create_index("ix_subscriptions_user_id", "subscriptions", ["user_id"], unique=True)

    op.create_table(
        "properties",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("user_id", sa.String(length=36), sa.ForeignKey("accounts.id"), nullable=False),
        sa.Column("title", sa.String(length=255), nullable=False),
        sa.Column("description", sa.Text()),
        sa.Column("price", MONEY, nullable=False, server_default="0"),
        sa.Column("currency", sa.String(length=10), nullable=False, server_default="AED"),
        sa.Column("location", sa.String(length=255)),
        sa.Column("address", sa.String(length=255)),
        sa.Column("type", sa.String(length=30), nullable=False, server_default="apartment"),
        sa.Column("status", sa.String(length=20), nullable=False, server_default="available"),
        sa.Column("bedrooms", sa.Integer()),
        sa.Column("bathrooms", sa.Integer()),
        sa.Column("area", sa.Numeric(12, 2)),
        sa.Column("area_unit", sa.String(length=10), server_default="sqft"),
        sa.Column("images", sa.Text()),
        sa.Column("is_in_marketplace", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("marketplace_price", MONEY),
        sa.Column("marketplace_listing_date", sa.DateTime(timezone=True)),
        sa.Column("marketplace_duration", sa.Integer()),
        sa.Column("marketplace_expires_at", sa.DateTime(timezone=True)),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True)),
    )
    op.create_index("ix_properties_user_id", "properties", ["user_id"])
    op.create_index("ix_properties_is_in_marketplace", "properties", ["is_in_marketplace"])

    op.create_table(
        "wallets",
        sa.Column("user_id", sa.String(length=36), sa.ForeignKey("accounts.id"), primary_key=True),
        sa.Column("balance", MONEY, nullable=False, server_default="0"),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True)),
        sa.CheckConstraint("balance >= 0", name="ck_wallets_balance_non_negative"),
    )

    op.create_table(
        "wallet_transactions",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("user_id", sa.String(length=36), sa.ForeignKey("accounts.id"), nullable=False),
        sa.Column("type", sa.String(length=20), nullable=False),
        sa.Column("amount", MONEY, nullable=False),
        sa.Column("related_listing_id", sa.String(length=36), sa.ForeignKey("properties.id")),
        sa.Column("status", sa.String(length=20), nullable=False, server_default="completed"),
        sa.Column("description", sa.String(length=255)),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True)),
    )
    op.create_index("ix_wallet_transactions_user_id", "wallet_transactions", ["user_id"])
    op.create_index("ix_wallet_transactions_related_listing_id", "wallet_transactions", ["related_listing_id"])

    op.create_table(
        "withdrawal_requests",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("user_id", sa.String(length=36), sa.ForeignKey("accounts.id"), nullable=False),
        sa.Column("amount", MONEY, nullable=False),
        sa.Column("status", sa.String(length=20), nullable=False, server_default="pending"),
        sa.Column("payment_details", sa.Text(), nullable=False),
        sa.Column("reviewed_by", sa.String(length=36), sa.ForeignKey("accounts.id")),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True)),
        sa.CheckConstraint("amount > 0", name="ck_withdrawal_requests_amount_positive"),
    )
    op.create_index("ix_withdrawal_requests_user_id", "withdrawal_requests", ["user_id"])
    op.create_index("ix_withdrawal_requests_status", "withdrawal_requests", ["status"])

    op.create_table(
        "marketplace_transactions",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("buyer_id", sa.String(length=36), sa.ForeignKey("accounts.id"), nullable=False),
        sa.Column("seller_id", sa.String(length=36), sa.ForeignKey("accounts.id"), nullable=False),
        sa.Column("listing_id", sa.String(length=36), sa.ForeignKey("properties.id"), nullable=False),
        sa.Column("sale_price", MONEY, nullable=False),
        sa.Column("platform_fee", MONEY, nullable=False),
        sa.Column("seller_earning", MONEY, nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.CheckConstraint("buyer_id <> seller_id", name="ck_marketplace_transactions_distinct_parties"),
    )
    op.create_index("ix_marketplace_transactions_buyer_id", "marketplace_transactions", ["buyer_id"])
    op.create_index("ix_marketplace_transactions_seller_id", "marketplace_transactions", ["seller_id"])
    op.create_index("ix_marketplace_transactions_listing_id", "marketplace_transactions", ["listing_id"])

    op.create_table(
        "marketplace_messages",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column(
            "transaction_id",
            sa.String(length=36),
            sa.ForeignKey("marketplace_transactions.id"),
            nullable=False,
        ),
        sa.Column("sender_id", sa.String(length=36), sa.ForeignKey("accounts.id"), nullable=False),
        sa.Column("content", sa.Text(), nullable=False),
        sa.Column("is_read", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index("ix_marketplace_messages_transaction_id", "marketplace_messages", ["transaction_id"])


def downgrade() -> None:
    op.drop_index("ix_marketplace_messages_transaction_id", table_name="marketplace_messages")
    op.drop_table("marketplace_messages")
    op.drop_index("ix_marketplace_transactions_listing_id", table_name="marketplace_transactions")
    op.drop_index("ix_marketplace_transactions_seller_id", table_name="marketplace_transactions")
    op.drop_index("ix_marketplace_transactions_buyer_id", table_name="marketplace_transactions")
    op.drop_table("marketplace_transactions")
    op.drop_index("ix_withdrawal_requests_status", table_name="withdrawal_requests")
    op.drop_index("ix_withdrawal_requests_user_id", table_name="withdrawal_requests")
    op.drop_table("withdrawal_requests")
    op.drop_index("ix_wallet_transactions_related_listing_id", table_name="wallet_transactions")
    op.drop_index("ix_wallet_transactions_user_id", table_name="wallet_transactions")
    op.drop_table("wallet_transactions")
    op.drop_table("wallets")
    op.drop_index("ix_properties_is_in_marketplace", table_name="properties")
    op.drop_index("ix_properties_user_id", table_name="properties")
    op.drop_table("properties")
    op.drop_index("ix_subscriptions_user_id", table_name="subscriptions")
    op.drop_table("subscriptions")
    op.drop_index("ix_accounts_email", table_name="accounts")
    op.drop_table("accounts")
