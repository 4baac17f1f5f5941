"""Domain models for subscriptions."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

FREE_PLAN_ID = "free"
SUBSCRIPTION_STATUSES = frozenset({"active", "cancelled", "expired"})


@dataclass(slots=True)
class Subscription:
    user_id: str
    plan_id: str
    status: str
    updated_at: Optional[datetime] = None

    @property
    def is_paid(self) -> bool:
        return self.status == "active" and self.plan_id != FREE_PLAN_ID
