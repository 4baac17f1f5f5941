"""Membership gate: paid subscribers may list and buy in the marketplace."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from sqlalchemy.ext.asyncio import AsyncSession

from estate_market.modules.common.exceptions import MembershipRequiredError, ValidationError

from .models import FREE_PLAN_ID, SUBSCRIPTION_STATUSES, Subscription
from .repository import SubscriptionRepository

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class MembershipService:
    repository: SubscriptionRepository

    @classmethod
    def with_session(cls, session: AsyncSession) -> "MembershipService":
        from estate_market.infrastructure.database.repositories.subscription_repository import (
            SqlSubscriptionRepository,
        )

        return cls(SqlSubscriptionRepository(session))

    async def is_paid_member(self, user_id: str) -> bool:
        """True iff ``user_id`` has an active subscription on a non-free plan.

        Having no subscription at all is the normal case for free users and
        simply yields ``False``.
        """
        return await self.repository.has_active_paid_plan(user_id, FREE_PLAN_ID)

    async def require_paid_member(self, user_id: str, action: str = "use the marketplace") -> None:
        if not await self.is_paid_member(user_id):
            logger.warning("Membership required: user %s tried to %s", user_id, action)
            raise MembershipRequiredError(
                f"Only paid members can {action}. Please upgrade your subscription."
            )

    async def get_subscription(self, user_id: str) -> Subscription | None:
        return await self.repository.get_by_user(user_id)

    async def set_subscription(self, user_id: str, *, plan_id: str, status: str = "active") -> Subscription:
        plan_id = (plan_id or "").strip()
        if not plan_id:
            raise ValidationError("plan_id is required")
        if status not in SUBSCRIPTION_STATUSES:
            raise ValidationError(f"Unsupported subscription status: {status}")
        subscription = await self.repository.upsert(user_id, plan_id=plan_id, status=status)
        logger.info("Subscription for user %s set to plan=%s status=%s", user_id, plan_id, status)
        return subscription
