"""SQLAlchemy implementation for marketplace transactions and messages"""

from __future__ import annotations

import json
from decimal import Decimal
from typing import Sequence

from sqlalchemy import desc, func, or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from estate_market.core.money import coerce_amount
from estate_market.db.models import Account, MarketplaceMessage, MarketplaceTransaction, Property
from estate_market.modules.marketplace.models import (
    MarketplaceMessageRecord,
    MarketplaceTransactionRecord,
    Party,
    SoldProperty,
)


class SqlMarketplaceRepository:
    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def create_transaction(
        self,
        *,
        buyer_id: str,
        seller_id: str,
        listing_id: str,
        sale_price: Decimal,
        platform_fee: Decimal,
        seller_earning: Decimal,
    ) -> MarketplaceTransactionRecord:
        model = MarketplaceTransaction(
            buyer_id=buyer_id,
            seller_id=seller_id,
            listing_id=listing_id,
            sale_price=sale_price,
            platform_fee=platform_fee,
            seller_earning=seller_earning,
        )
        self.session.add(model)
        await self.session.flush()
        return self._to_transaction(model, joined=False)

    async def get_transaction(self, transaction_id: str) -> MarketplaceTransactionRecord | None:
        stmt = (
            self._transaction_query()
            .where(MarketplaceTransaction.id == transaction_id)
            .execution_options(populate_existing=True)
        )
        result = await self.session.execute(stmt)
        model = result.scalars().first()
        return self._to_transaction(model) if model else None

    async def count_transactions(self, user_id: str, role: str) -> int:
        stmt = (
            select(func.count())
            .select_from(MarketplaceTransaction)
            .where(self._role_condition(user_id, role))
        )
        result = await self.session.execute(stmt)
        return int(result.scalar_one())

    async def list_transactions(
        self, user_id: str, role: str, *, offset: int, limit: int
    ) -> Sequence[MarketplaceTransactionRecord]:
        stmt = (
            self._transaction_query()
            .where(self._role_condition(user_id, role))
            .order_by(desc(MarketplaceTransaction.created_at), MarketplaceTransaction.id)
            .offset(offset)
            .limit(limit)
            .execution_options(populate_existing=True)
        )
        result = await self.session.execute(stmt)
        return [self._to_transaction(row) for row in result.scalars().all()]

    async def add_message(self, *, transaction_id: str, sender_id: str, content: str) -> MarketplaceMessageRecord:
        model = MarketplaceMessage(transaction_id=transaction_id, sender_id=sender_id, content=content, is_read=False)
        self.session.add(model)
        await self.session.flush()
        return self._to_message(model, with_sender=False)

    async def get_message(self, message_id: int) -> MarketplaceMessageRecord | None:
        stmt = (
            select(MarketplaceMessage)
            .options(selectinload(MarketplaceMessage.sender))
            .where(MarketplaceMessage.id == message_id)
            .execution_options(populate_existing=True)
        )
        result = await self.session.execute(stmt)
        model = result.scalars().first()
        return self._to_message(model) if model else None

    async def count_messages(self, transaction_id: str) -> int:
        stmt = (
            select(func.count())
            .select_from(MarketplaceMessage)
            .where(MarketplaceMessage.transaction_id == transaction_id)
        )
        result = await self.session.execute(stmt)
        return int(result.scalar_one())

    async def list_messages(
        self, transaction_id: str, *, offset: int, limit: int
    ) -> Sequence[MarketplaceMessageRecord]:
        # Autoincrement ids break ties between messages sharing a timestamp.
        stmt = (
            select(MarketplaceMessage)
            .options(selectinload(MarketplaceMessage.sender))
            .where(MarketplaceMessage.transaction_id == transaction_id)
            .order_by(MarketplaceMessage.created_at, MarketplaceMessage.id)
            .offset(offset)
            .limit(limit)
            .execution_options(populate_existing=True)
        )
        result = await self.session.execute(stmt)
        return [self._to_message(row) for row in result.scalars().all()]

    async def mark_message_read(self, message_id: int) -> bool:
        stmt = (
            update(MarketplaceMessage)
            .where(MarketplaceMessage.id == message_id)
            .values(is_read=True)
            .returning(MarketplaceMessage.id)
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(stmt)
        return result.first() is not None

    @staticmethod
    def _transaction_query():
        return select(MarketplaceTransaction).options(
            selectinload(MarketplaceTransaction.buyer),
            selectinload(MarketplaceTransaction.seller),
            selectinload(MarketplaceTransaction.property),
        )

    @staticmethod
    def _role_condition(user_id: str, role: str):
        if role == "buyer":
            return MarketplaceTransaction.buyer_id == user_id
        if role == "seller":
            return MarketplaceTransaction.seller_id == user_id
        return or_(MarketplaceTransaction.buyer_id == user_id, MarketplaceTransaction.seller_id == user_id)

    @staticmethod
    def _party(account: Account | None) -> Party | None:
        if account is None:
            return None
        return Party(id=account.id, name=account.name, avatar=account.avatar)

    @staticmethod
    def _sold_property(model: Property | None) -> SoldProperty | None:
        if model is None:
            return None
        return SoldProperty(
            id=model.id,
            user_id=model.user_id,
            title=model.title,
            price=coerce_amount(model.price),
            type=model.type,
            status=model.status,
            description=model.description,
            location=model.location,
            images=json.loads(model.images) if model.images else [],
        )

    def _to_transaction(self, model: MarketplaceTransaction, joined: bool = True) -> MarketplaceTransactionRecord:
        return MarketplaceTransactionRecord(
            id=model.id,
            buyer_id=model.buyer_id,
            seller_id=model.seller_id,
            listing_id=model.listing_id,
            sale_price=coerce_amount(model.sale_price),
            platform_fee=coerce_amount(model.platform_fee),
            seller_earning=coerce_amount(model.seller_earning),
            created_at=model.created_at,
            buyer=self._party(model.buyer) if joined else None,
            seller=self._party(model.seller) if joined else None,
            property=self._sold_property(model.property) if joined else None,
        )

    def _to_message(self, model: MarketplaceMessage, with_sender: bool = True) -> MarketplaceMessageRecord:
        return MarketplaceMessageRecord(
            id=model.id,
            transaction_id=model.transaction_id,
            sender_id=model.sender_id,
            content=model.content,
            is_read=bool(model.is_read),
            created_at=model.created_at,
            sender=self._party(model.sender) if with_sender else None,
        )
