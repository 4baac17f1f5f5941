"""SQLAlchemy ORM models."""
import uuid
from datetime import datetime, timezone
from decimal import ROUND_HALF_UP, Decimal

from sqlalchemy import (
    BigInteger,
    Boolean,
    CheckConstraint,
    Column,
    DateTime,
    ForeignKey,
    Integer,
    Numeric,
    String,
    Text,
    TypeDecorator,
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from estate_market.infrastructure.database.base import Base


class Money(TypeDecorator):
    """Two-decimal amounts stored as integer minor units.

    Every dialect then adds and compares cents exactly; SQLite would
    otherwise keep NUMERIC values as binary floats.
    """

    impl = BigInteger
    cache_ok = True

    def process_bind_param(self, value, dialect):
        if value is None:
            return None
        if isinstance(value, float):
            value = str(value)
        return int((Decimal(value) * 100).to_integral_value(rounding=ROUND_HALF_UP))

    def process_result_value(self, value, dialect):
        if value is None:
            return None
        return Decimal(int(value)).scaleb(-2)


MONEY = Money()


def generate_uuid() -> str:
    return str(uuid.uuid4())


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Account(Base):
    """Profile of an authenticated principal issued by the identity provider."""

    __tablename__ = "accounts"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    name = Column(String(100), nullable=False)
    email = Column(String(255), unique=True, index=True)
    avatar = Column(String(500))
    role = Column(String(20), default="user")
    is_active = Column(Boolean, default=True)
    created_at = Column(DateTime(timezone=True), default=utcnow, server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=utcnow)


class Subscription(Base):
    __tablename__ = "subscriptions"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    user_id = Column(String(36), ForeignKey("accounts.id"), nullable=False, unique=True, index=True)
    plan_id = Column(String(50), nullable=False, default="free")
    status = Column(String(20), nullable=False, default="active")  # active, cancelled, expired
    created_at = Column(DateTime(timezone=True), default=utcnow, server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=utcnow)

    account = relationship("Account")


class Property(Base):
    __tablename__ = "properties"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    user_id = Column(String(36), ForeignKey("accounts.id"), nullable=False, index=True)
    title = Column(String(255), nullable=False)
    description = Column(Text)
    price = Column(MONEY, nullable=False, default=0)
    currency = Column(String(10), nullable=False, default="AED")
    location = Column(String(255))
    address = Column(String(255))
    type = Column(String(30), nullable=False, default="apartment")
    status = Column(String(20), nullable=False, default="available")
    bedrooms = Column(Integer)
    bathrooms = Column(Integer)
    area = Column(Numeric(12, 2))
    area_unit = Column(String(10), default="sqft")
    images = Column(Text)  # JSON encoded list of URLs
    is_in_marketplace = Column(Boolean, nullable=False, default=False, index=True)
    marketplace_price = Column(MONEY)
    marketplace_listing_date = Column(DateTime(timezone=True))
    marketplace_duration = Column(Integer)
    marketplace_expires_at = Column(DateTime(timezone=True))
    created_at = Column(DateTime(timezone=True), default=utcnow, server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=utcnow)

    owner = relationship("Account")


class Wallet(Base):
    __tablename__ = "wallets"
    __table_args__ = (CheckConstraint("balance >= 0", name="ck_wallets_balance_non_negative"),)

    user_id = Column(String(36), ForeignKey("accounts.id"), primary_key=True)
    balance = Column(MONEY, nullable=False, default=0)
    created_at = Column(DateTime(timezone=True), default=utcnow, server_default=func.now())
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)

    account = relationship("Account")


class WalletTransaction(Base):
    __tablename__ = "wallet_transactions"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    user_id = Column(String(36), ForeignKey("accounts.id"), nullable=False, index=True)
    type = Column(String(20), nullable=False)  # deposit, withdrawal, purchase, sale, commission
    amount = Column(MONEY, nullable=False)
    related_listing_id = Column(String(36), ForeignKey("properties.id"), nullable=True, index=True)
    status = Column(String(20), nullable=False, default="completed")  # pending, completed, failed
    description = Column(String(255))
    created_at = Column(DateTime(timezone=True), default=utcnow, server_default=func.now())
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)

    property = relationship("Property")


class WithdrawalRequest(Base):
    __tablename__ = "withdrawal_requests"
    __table_args__ = (CheckConstraint("amount > 0", name="ck_withdrawal_requests_amount_positive"),)

    id = Column(String(36), primary_key=True, default=generate_uuid)
    user_id = Column(String(36), ForeignKey("accounts.id"), nullable=False, index=True)
    amount = Column(MONEY, nullable=False)
    status = Column(String(20), nullable=False, default="pending", index=True)  # pending, approved, rejected
    payment_details = Column(Text, nullable=False)  # JSON encoded, method specific
    reviewed_by = Column(String(36), ForeignKey("accounts.id"))
    created_at = Column(DateTime(timezone=True), default=utcnow, server_default=func.now())
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)

    account = relationship("Account", foreign_keys=[user_id])


class MarketplaceTransaction(Base):
    __tablename__ = "marketplace_transactions"
    __table_args__ = (CheckConstraint("buyer_id <> seller_id", name="ck_marketplace_transactions_distinct_parties"),)

    id = Column(String(36), primary_key=True, default=generate_uuid)
    buyer_id = Column(String(36), ForeignKey("accounts.id"), nullable=False, index=True)
    seller_id = Column(String(36), ForeignKey("accounts.id"), nullable=False, index=True)
    listing_id = Column(String(36), ForeignKey("properties.id"), nullable=False, index=True)
    sale_price = Column(MONEY, nullable=False)
    platform_fee = Column(MONEY, nullable=False)
    seller_earning = Column(MONEY, nullable=False)
    created_at = Column(DateTime(timezone=True), default=utcnow, server_default=func.now())

    buyer = relationship("Account", foreign_keys=[buyer_id])
    seller = relationship("Account", foreign_keys=[seller_id])
    property = relationship("Property")
    messages = relationship("MarketplaceMessage", back_populates="transaction", cascade="all, delete-orphan")


class MarketplaceMessage(Base):
    __tablename__ = "marketplace_messages"

    id = Column(Integer, primary_key=True, autoincrement=True)
    transaction_id = Column(String(36), ForeignKey("marketplace_transactions.id"), nullable=False, index=True)
    sender_id = Column(String(36), ForeignKey("accounts.id"), nullable=False)
    content = Column(Text, nullable=False)
    is_read = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime(timezone=True), default=utcnow, server_default=func.now())

    transaction = relationship("MarketplaceTransaction", back_populates="messages")
    sender = relationship("Account")
