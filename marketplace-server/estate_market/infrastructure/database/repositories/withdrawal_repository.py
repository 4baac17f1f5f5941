"""SQLAlchemy implementation for withdrawal requests"""

from __future__ import annotations

import json
from decimal import Decimal
from typing import Any, Sequence

from sqlalchemy import desc, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from estate_market.core.money import coerce_amount
from estate_market.db.models import WithdrawalRequest, utcnow
from estate_market.modules.withdrawals.models import RequesterIdentity, WithdrawalRequestRecord


class SqlWithdrawalRepository:
    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def create(self, *, user_id: str, amount: Decimal, payment_details: dict[str, Any]) -> WithdrawalRequestRecord:
        model = WithdrawalRequest(
            user_id=user_id,
            amount=amount,
            status="pending",
            payment_details=json.dumps(payment_details),
        )
        self.session.add(model)
        await self.session.flush()
        await self.session.refresh(model)
        return self._to_domain(model)

    async def get(self, request_id: str) -> WithdrawalRequestRecord | None:
        stmt = (
            select(WithdrawalRequest)
            .where(WithdrawalRequest.id == request_id)
            .execution_options(populate_existing=True)
        )
        result = await self.session.execute(stmt)
        model = result.scalars().first()
        return self._to_domain(model) if model else None

    async def transition(
        self,
        request_id: str,
        *,
        to_status: str,
        reviewed_by: str | None,
    ) -> WithdrawalRequestRecord | None:
        stmt = (
            update(WithdrawalRequest)
            .where(WithdrawalRequest.id == request_id, WithdrawalRequest.status == "pending")
            .values(status=to_status, reviewed_by=reviewed_by, updated_at=utcnow())
            .returning(WithdrawalRequest.id)
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(stmt)
        if result.first() is None:
            return None
        return await self.get(request_id)

    async def count(self, *, user_id: str | None = None, status: str | None = None) -> int:
        stmt = select(func.count()).select_from(WithdrawalRequest).where(*self._filters(user_id, status))
        result = await self.session.execute(stmt)
        return int(result.scalar_one())

    async def list(
        self,
        *,
        user_id: str | None = None,
        status: str | None = None,
        limit: int,
        offset: int,
        with_requester: bool = False,
    ) -> Sequence[WithdrawalRequestRecord]:
        stmt = select(WithdrawalRequest).where(*self._filters(user_id, status))
        if with_requester:
            stmt = stmt.options(selectinload(WithdrawalRequest.account))
        stmt = stmt.order_by(desc(WithdrawalRequest.created_at), WithdrawalRequest.id).offset(offset).limit(limit)
        result = await self.session.execute(stmt)
        return [self._to_domain(row, with_requester) for row in result.scalars().all()]

    @staticmethod
    def _filters(user_id: str | None, status: str | None) -> list:
        filters = []
        if user_id is not None:
            filters.append(WithdrawalRequest.user_id == user_id)
        if status is not None:
            filters.append(WithdrawalRequest.status == status)
        return filters

    @staticmethod
    def _to_domain(model: WithdrawalRequest, with_requester: bool = False) -> WithdrawalRequestRecord:
        requester = None
        if with_requester and model.account is not None:
            requester = RequesterIdentity(name=model.account.name, email=model.account.email)
        return WithdrawalRequestRecord(
            id=model.id,
            user_id=model.user_id,
            amount=coerce_amount(model.amount),
            status=model.status,
            payment_details=json.loads(model.payment_details) if model.payment_details else {},
            reviewed_by=model.reviewed_by,
            created_at=model.created_at,
            updated_at=model.updated_at,
            requester=requester,
        )
