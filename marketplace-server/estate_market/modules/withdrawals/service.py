"""Withdrawal approval workflow.

``pending --approve--> approved`` debits the wallet and appends a completed
withdrawal transaction; ``pending --reject--> rejected`` has no balance
effect. Both transitions are conditional on the request still being
pending, so a request can never be debited twice.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Mapping

from sqlalchemy.ext.asyncio import AsyncSession

from estate_market.core.config import Settings, get_settings
from estate_market.core.money import ZERO, AmountLike, positive_amount
from estate_market.infrastructure.database import atomic
from estate_market.modules.common.exceptions import InsufficientFundsError, ValidationError
from estate_market.modules.common.pagination import Page, PageRequest
from estate_market.modules.wallets.service import WalletService

from .exceptions import WithdrawalNotFoundError, WithdrawalNotPendingError
from .models import WITHDRAWAL_STATUSES, WithdrawalRequestRecord
from .payment_details import validate_payment_details
from .repository import WithdrawalRepository

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class WithdrawalService:
    session: AsyncSession
    repository: WithdrawalRepository
    wallets: WalletService
    settings: Settings = field(default_factory=get_settings)

    @classmethod
    def with_session(cls, session: AsyncSession, settings: Settings | None = None) -> "WithdrawalService":
        from estate_market.infrastructure.database.repositories.withdrawal_repository import (
            SqlWithdrawalRepository,
        )

        settings = settings or get_settings()
        return cls(
            session,
            SqlWithdrawalRepository(session),
            WalletService.with_session(session, settings),
            settings,
        )

    async def request_withdrawal(
        self,
        user_id: str,
        amount: AmountLike,
        payment_details: Mapping[str, Any] | None,
    ) -> WithdrawalRequestRecord:
        amount = positive_amount(amount)
        minimum = self.settings.wallet.min_withdrawal_amount
        if amount < minimum:
            raise ValidationError(f"The minimum withdrawal amount is {minimum} {self.settings.currency}")
        details = validate_payment_details(payment_details)

        async with atomic(self.session):
            # Lock the wallet row so concurrent requests see each other's pending asks.
            wallet = await self.wallets.repository.get_wallet(user_id, for_update=True)
            balance = wallet.balance if wallet is not None else ZERO
            pending = await self.wallets.repository.pending_withdrawal_total(user_id)
            if amount > balance - pending:
                logger.warning(
                    "Withdrawal of %s refused for user %s: balance %s, pending %s",
                    amount,
                    user_id,
                    balance,
                    pending,
                )
                raise InsufficientFundsError("Withdrawal amount exceeds your available wallet balance.")
            record = await self.repository.create(user_id=user_id, amount=amount, payment_details=details)

        logger.info("Withdrawal request %s for %s created by user %s", record.id, amount, user_id)
        return record

    async def approve_withdrawal(self, request_id: str, reviewer_id: str | None = None) -> WithdrawalRequestRecord:
        async with atomic(self.session):
            record = await self._transition(request_id, "approved", reviewer_id)
            await self.wallets.debit(
                record.user_id,
                record.amount,
                type="withdrawal",
                description=f"Withdrawal request {record.id}",
            )
        logger.info("Withdrawal request %s approved, %s debited from user %s", record.id, record.amount, record.user_id)
        return record

    async def reject_withdrawal(self, request_id: str, reviewer_id: str | None = None) -> WithdrawalRequestRecord:
        async with atomic(self.session):
            record = await self._transition(request_id, "rejected", reviewer_id)
        logger.info("Withdrawal request %s rejected", record.id)
        return record

    async def get_request(self, request_id: str) -> WithdrawalRequestRecord:
        record = await self.repository.get(request_id)
        if record is None:
            raise WithdrawalNotFoundError(f"Withdrawal request not found: {request_id}")
        return record

    async def get_withdrawal_requests(self, user_id: str, page: int = 1, page_size: int = 10) -> Page[WithdrawalRequestRecord]:
        request = PageRequest.build(page, page_size, self.settings.marketplace.max_page_size)
        total = await self.repository.count(user_id=user_id)
        if request.is_beyond(total):
            return request.empty(total)
        rows = await self.repository.list(user_id=user_id, limit=request.limit, offset=request.offset)
        return Page(data=list(rows), total=total, page=request.page, page_size=request.page_size)

    async def get_all_withdrawal_requests(
        self,
        status: str = "pending",
        page: int = 1,
        page_size: int = 10,
    ) -> Page[WithdrawalRequestRecord]:
        """Administrative queue, joined with each requester's name and email."""
        if status != "all" and status not in WITHDRAWAL_STATUSES:
            raise ValidationError(f"Unsupported status filter: {status}")
        status_filter = None if status == "all" else status
        request = PageRequest.build(page, page_size, self.settings.marketplace.max_page_size)
        total = await self.repository.count(status=status_filter)
        if request.is_beyond(total):
            return request.empty(total)
        rows = await self.repository.list(
            status=status_filter,
            limit=request.limit,
            offset=request.offset,
            with_requester=True,
        )
        return Page(data=list(rows), total=total, page=request.page, page_size=request.page_size)

    async def _transition(self, request_id: str, to_status: str, reviewer_id: str | None) -> WithdrawalRequestRecord:
        record = await self.repository.transition(request_id, to_status=to_status, reviewed_by=reviewer_id)
        if record is not None:
            return record
        current = await self.get_request(request_id)
        raise WithdrawalNotPendingError(f"Withdrawal request {request_id} is already {current.status}")
