"""SQLAlchemy implementation for subscription repository"""

from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from estate_market.db.models import Subscription as SubscriptionModel
from estate_market.modules.membership.models import Subscription


class SqlSubscriptionRepository:
    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def get_by_user(self, user_id: str) -> Subscription | None:
        model = await self._get_model(user_id)
        return self._to_domain(model) if model else None

    async def has_active_paid_plan(self, user_id: str, free_plan_id: str) -> bool:
        stmt = (
            select(SubscriptionModel.id)
            .where(
                SubscriptionModel.user_id == user_id,
                SubscriptionModel.status == "active",
                SubscriptionModel.plan_id != free_plan_id,
            )
            .limit(1)
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none() is not None

    async def upsert(self, user_id: str, *, plan_id: str, status: str) -> Subscription:
        model = await self._get_model(user_id)
        if model is None:
            model = SubscriptionModel(user_id=user_id, plan_id=plan_id, status=status)
            self.session.add(model)
        else:
            model.plan_id = plan_id
            model.status = status
        await self.session.flush()
        await self.session.refresh(model)
        return self._to_domain(model)

    async def _get_model(self, user_id: str) -> SubscriptionModel | None:
        stmt = (
            select(SubscriptionModel)
            .where(SubscriptionModel.user_id == user_id)
            .execution_options(populate_existing=True)
        )
        result = await self.session.execute(stmt)
        return result.scalars().first()

    @staticmethod
    def _to_domain(model: SubscriptionModel) -> Subscription:
        return Subscription(
            user_id=model.user_id,
            plan_id=model.plan_id,
            status=model.status,
            updated_at=model.updated_at or model.created_at,
        )
