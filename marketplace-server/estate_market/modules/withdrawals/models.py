"""Domain models for withdrawal requests."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Any, Optional

PAYMENT_METHODS = ("bank", "paypal", "crypto")
WITHDRAWAL_STATUSES = frozenset({"pending", "approved", "rejected"})


@dataclass(slots=True)
class RequesterIdentity:
    name: str
    email: Optional[str] = None


@dataclass(slots=True)
class WithdrawalRequestRecord:
    id: str
    user_id: str
    amount: Decimal
    status: str
    payment_details: dict[str, Any] = field(default_factory=dict)
    reviewed_by: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    requester: Optional[RequesterIdentity] = None

    @property
    def is_pending(self) -> bool:
        return self.status == "pending"
