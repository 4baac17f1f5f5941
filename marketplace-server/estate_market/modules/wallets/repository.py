"""Repository protocol for wallet operations."""

from __future__ import annotations

from decimal import Decimal
from typing import Protocol, Sequence

from .models import WalletSnapshot, WalletTransactionRecord


class WalletRepository(Protocol):
    async def get_wallet(self, user_id: str, *, for_update: bool = False) -> WalletSnapshot | None:
        ...

    async def credit(self, user_id: str, amount: Decimal) -> WalletSnapshot:
        ...

    async def debit(self, user_id: str, amount: Decimal) -> WalletSnapshot | None:
        ...

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
        ...

    async def count_transactions(self, user_id: str) -> int:
        ...

    async def list_transactions(self, user_id: str, limit: int, offset: int) -> Sequence[WalletTransactionRecord]:
        ...

    async def completed_totals_by_type(self, user_id: str) -> dict[str, Decimal]:
        ...

    async def pending_withdrawal_total(self, user_id: str) -> Decimal:
        ...
