"""Repository protocol for marketplace transactions and messages."""

from __future__ import annotations

from decimal import Decimal
from typing import Protocol, Sequence

from .models import MarketplaceMessageRecord, MarketplaceTransactionRecord


class MarketplaceRepository(Protocol):
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
        ...

    async def get_transaction(self, transaction_id: str) -> MarketplaceTransactionRecord | None:
        ...

    async def count_transactions(self, user_id: str, role: str) -> int:
        ...

    async def list_transactions(
        self, user_id: str, role: str, *, offset: int, limit: int
    ) -> Sequence[MarketplaceTransactionRecord]:
        ...

    async def add_message(self, *, transaction_id: str, sender_id: str, content: str) -> MarketplaceMessageRecord:
        ...

    async def get_message(self, message_id: int) -> MarketplaceMessageRecord | None:
        ...

    async def count_messages(self, transaction_id: str) -> int:
        ...

    async def list_messages(
        self, transaction_id: str, *, offset: int, limit: int
    ) -> Sequence[MarketplaceMessageRecord]:
        ...

    async def mark_message_read(self, message_id: int) -> bool:
        ...
