"""Repository protocol for subscriptions."""

from __future__ import annotations

from typing import Protocol

from .models import Subscription


class SubscriptionRepository(Protocol):
    async def get_by_user(self, user_id: str) -> Subscription | None:
        ...

    async def has_active_paid_plan(self, user_id: str, free_plan_id: str) -> bool:
        ...

    async def upsert(self, user_id: str, *, plan_id: str, status: str) -> Subscription:
        ...
