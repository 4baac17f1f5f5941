"""Domain models for wallet operations."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Optional

from estate_market.core.money import ZERO

TRANSACTION_TYPES = frozenset({"deposit", "withdrawal", "purchase", "sale", "commission"})
TRANSACTION_STATUSES = frozenset({"pending", "completed", "failed"})


@dataclass(slots=True)
class WalletSnapshot:
    user_id: str
    balance: Decimal
    currency: str
    updated_at: Optional[datetime]


@dataclass(slots=True)
class PropertyBrief:
    id: str
    title: str
    images: list[str] = field(default_factory=list)


@dataclass(slots=True)
class WalletTransactionRecord:
    id: str
    user_id: str
    type: str
    amount: Decimal
    status: str
    related_listing_id: Optional[str]
    description: Optional[str]
    created_at: datetime
    updated_at: Optional[datetime] = None
    property: Optional[PropertyBrief] = None


@dataclass(slots=True)
class WalletSummary:
    balance: Decimal = ZERO
    total_deposits: Decimal = ZERO
    total_withdrawals: Decimal = ZERO
    total_sales: Decimal = ZERO
    total_purchases: Decimal = ZERO
    total_commissions: Decimal = ZERO
    pending_withdrawals: Decimal = ZERO
