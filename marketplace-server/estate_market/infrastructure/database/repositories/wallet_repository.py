"""SQLAlchemy implementation for wallet domain"""

from __future__ import annotations

import json
from decimal import Decimal

from sqlalchemy import desc, func, select, update
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from estate_market.core.money import ZERO, coerce_amount
from estate_market.db.models import Wallet, WalletTransaction, WithdrawalRequest, utcnow
from estate_market.modules.wallets.models import PropertyBrief, WalletSnapshot, WalletTransactionRecord


class SqlWalletRepository:
    def __init__(self, session: AsyncSession, currency: str = "AED") -> None:
        self.session = session
        self.currency = currency

    async def get_wallet(self, user_id: str, *, for_update: bool = False) -> WalletSnapshot | None:
        stmt = select(Wallet).where(Wallet.user_id == user_id)
        if for_update:
            stmt = stmt.with_for_update()
        result = await self.session.execute(stmt.execution_options(populate_existing=True))
        wallet = result.scalars().first()
        return self._to_snapshot(wallet.user_id, wallet.balance, wallet.updated_at) if wallet else None

    async def credit(self, user_id: str, amount: Decimal) -> WalletSnapshot:
        snapshot = await self._apply_delta(user_id, amount)
        if snapshot is None:
            await self._create_wallet(user_id)
            snapshot = await self._apply_delta(user_id, amount)
        assert snapshot is not None
        return snapshot

    async def debit(self, user_id: str, amount: Decimal) -> WalletSnapshot | None:
        # The balance guard and the subtraction are one statement, so
        # concurrent debits against the same wallet can never overdraw it.
        return await self._apply_delta(user_id, -amount, Wallet.balance >= amount)

    async def add_transaction(
        self,
        *,
        user_id: str,
        type: str,
        amount: Decimal,
        status: str,
        related_listing_id: str | None,
        description: str | None,
    ) -> WalletTransactionRecord:
        tx = WalletTransaction(
            user_id=user_id,
            type=type,
            amount=amount,
            status=status,
            related_listing_id=related_listing_id,
            description=description,
        )
        self.session.add(tx)
        await self.session.flush()
        return self._to_transaction(tx, with_property=False)

    async def count_transactions(self, user_id: str) -> int:
        stmt = select(func.count()).select_from(WalletTransaction).where(WalletTransaction.user_id == user_id)
        result = await self.session.execute(stmt)
        return int(result.scalar_one())

    async def list_transactions(self, user_id: str, limit: int, offset: int) -> list[WalletTransactionRecord]:
        stmt = (
            select(WalletTransaction)
            .options(selectinload(WalletTransaction.property))
            .where(WalletTransaction.user_id == user_id)
            .order_by(desc(WalletTransaction.created_at), WalletTransaction.id)
            .offset(offset)
            .limit(limit)
        )
        result = await self.session.execute(stmt)
        return [self._to_transaction(row) for row in result.scalars().all()]

    async def completed_totals_by_type(self, user_id: str) -> dict[str, Decimal]:
        stmt = (
            select(WalletTransaction.type, func.coalesce(func.sum(WalletTransaction.amount), 0))
            .where(WalletTransaction.user_id == user_id, WalletTransaction.status == "completed")
            .group_by(WalletTransaction.type)
        )
        result = await self.session.execute(stmt)
        return {tx_type: coerce_amount(total) for tx_type, total in result.all()}

    async def pending_withdrawal_total(self, user_id: str) -> Decimal:
        stmt = select(func.coalesce(func.sum(WithdrawalRequest.amount), 0)).where(
            WithdrawalRequest.user_id == user_id,
            WithdrawalRequest.status == "pending",
        )
        result = await self.session.execute(stmt)
        return coerce_amount(result.scalar_one())

    async def _apply_delta(self, user_id: str, delta: Decimal, *guards) -> WalletSnapshot | None:
        stmt = (
            update(Wallet)
            .where(Wallet.user_id == user_id, *guards)
            .values(balance=Wallet.balance + delta, updated_at=utcnow())
            .returning(Wallet.user_id, Wallet.balance, Wallet.updated_at)
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(stmt)
        row = result.first()
        if row is None:
            return None
        return self._to_snapshot(row.user_id, row.balance, row.updated_at)

    async def _create_wallet(self, user_id: str) -> None:
        # Two first credits may race to create the row; the loser's insert is a no-op.
        dialect = self.session.get_bind().dialect.name
        values = {"user_id": user_id, "balance": ZERO, "created_at": utcnow(), "updated_at": utcnow()}
        if dialect == "postgresql":
            stmt = postgresql.insert(Wallet).values(**values).on_conflict_do_nothing(index_elements=["user_id"])
        elif dialect == "sqlite":
            stmt = sqlite.insert(Wallet).values(**values).on_conflict_do_nothing(index_elements=["user_id"])
        else:
            if await self.get_wallet(user_id) is not None:
                return
            self.session.add(Wallet(**values))
            await self.session.flush()
            return
        await self.session.execute(stmt)

    def _to_snapshot(self, user_id: str, balance, updated_at) -> WalletSnapshot:
        return WalletSnapshot(
            user_id=user_id,
            balance=coerce_amount(balance),
            currency=self.currency,
            updated_at=updated_at,
        )

    @staticmethod
    def _to_transaction(model: WalletTransaction, with_property: bool = True) -> WalletTransactionRecord:
        brief = None
        if with_property and model.property is not None:
            brief = PropertyBrief(
                id=model.property.id,
                title=model.property.title,
                images=json.loads(model.property.images) if model.property.images else [],
            )
        return WalletTransactionRecord(
            id=model.id,
            user_id=model.user_id,
            type=model.type,
            amount=coerce_amount(model.amount),
            status=model.status,
            related_listing_id=model.related_listing_id,
            description=model.description,
            created_at=model.created_at,
            updated_at=model.updated_at,
            property=brief,
        )
