"""Wallet ledger service.

Every balance change is posted together with exactly one ledger
transaction, so a wallet's balance always equals the sum of its completed
transaction amounts. ``credit`` and ``debit`` run inside the caller's
transaction; ``deposit_funds`` is a complete atomic operation on its own.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from decimal import Decimal

from sqlalchemy.ext.asyncio import AsyncSession

from estate_market.core.config import Settings, get_settings
from estate_market.core.money import ZERO, AmountLike, positive_amount
from estate_market.infrastructure.database import atomic
from estate_market.modules.common.exceptions import InsufficientFundsError, ValidationError
from estate_market.modules.common.pagination import Page, PageRequest

from .exceptions import WalletNotFoundError
from .models import WalletSnapshot, WalletSummary, WalletTransactionRecord
from .repository import WalletRepository

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class WalletService:
    session: AsyncSession
    repository: WalletRepository
    settings: Settings = field(default_factory=get_settings)

    @classmethod
    def with_session(cls, session: AsyncSession, settings: Settings | None = None) -> "WalletService":
        from estate_market.infrastructure.database.repositories.wallet_repository import SqlWalletRepository

        settings = settings or get_settings()
        return cls(session, SqlWalletRepository(session, currency=settings.currency), settings)

    async def get_wallet(self, user_id: str) -> WalletSnapshot:
        wallet = await self.repository.get_wallet(user_id)
        if wallet is None:
            raise WalletNotFoundError(f"No wallet for user {user_id}")
        return wallet

    async def get_balance(self, user_id: str) -> Decimal:
        """Current balance, treating a wallet that was never created as empty."""
        wallet = await self.repository.get_wallet(user_id)
        return wallet.balance if wallet is not None else ZERO

    async def get_wallet_summary(self, user_id: str) -> WalletSummary:
        totals = await self.repository.completed_totals_by_type(user_id)
        return WalletSummary(
            balance=await self.get_balance(user_id),
            total_deposits=totals.get("deposit", ZERO),
            total_withdrawals=abs(totals.get("withdrawal", ZERO)),
            total_sales=totals.get("sale", ZERO),
            total_purchases=abs(totals.get("purchase", ZERO)),
            total_commissions=abs(totals.get("commission", ZERO)),
            pending_withdrawals=await self.repository.pending_withdrawal_total(user_id),
        )

    async def get_transactions(self, user_id: str, page: int = 1, page_size: int = 10) -> Page[WalletTransactionRecord]:
        request = PageRequest.build(page, page_size, self.settings.marketplace.max_page_size)
        total = await self.repository.count_transactions(user_id)
        if request.is_beyond(total):
            return request.empty(total)
        rows = await self.repository.list_transactions(user_id, request.limit, request.offset)
        return Page(data=list(rows), total=total, page=request.page, page_size=request.page_size)

    async def deposit_funds(self, user_id: str, amount: AmountLike) -> WalletSnapshot:
        amount = positive_amount(amount)
        cap = self.settings.wallet.max_deposit_amount
        if cap is not None and amount > cap:
            raise ValidationError(f"Deposits are limited to {cap} {self.settings.currency}")
        async with atomic(self.session):
            wallet = await self.credit(user_id, amount, type="deposit", description="Wallet deposit")
        logger.info("Deposit of %s credited to user %s, balance now %s", amount, user_id, wallet.balance)
        return wallet

    async def credit(
        self,
        user_id: str,
        amount: Decimal,
        *,
        type: str,
        related_listing_id: str | None = None,
        description: str | None = None,
    ) -> WalletSnapshot:
        wallet = await self.repository.credit(user_id, amount)
        await self.repository.add_transaction(
            user_id=user_id,
            type=type,
            amount=amount,
            status="completed",
            related_listing_id=related_listing_id,
            description=description,
        )
        return wallet

    async def debit(
        self,
        user_id: str,
        amount: Decimal,
        *,
        type: str,
        related_listing_id: str | None = None,
        description: str | None = None,
    ) -> WalletSnapshot:
        wallet = await self.repository.debit(user_id, amount)
        if wallet is None:
            logger.warning("Insufficient funds: user %s cannot cover %s for %s", user_id, amount, type)
            raise InsufficientFundsError("Insufficient wallet balance. Please top up your wallet.")
        await self.repository.add_transaction(
            user_id=user_id,
            type=type,
            amount=-amount,
            status="completed",
            related_listing_id=related_listing_id,
            description=description,
        )
        return wallet
