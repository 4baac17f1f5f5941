"""Repository protocol for withdrawal requests."""

from __future__ import annotations

from decimal import Decimal
from typing import Any, Protocol, Sequence

from .models import WithdrawalRequestRecord


class WithdrawalRepository(Protocol):
    async def create(self, *, user_id: str, amount: Decimal, payment_details: dict[str, Any]) -> WithdrawalRequestRecord:
        ...

    async def get(self, request_id: str) -> WithdrawalRequestRecord | None:
        ...

    async def transition(
        self,
        request_id: str,
        *,
        to_status: str,
        reviewed_by: str | None,
    ) -> WithdrawalRequestRecord | None:
        ...

    async def count(self, *, user_id: str | None = None, status: str | None = None) -> int:
        ...

    async def list(
        self,
        *,
        user_id: str | None = None,
        status: str | None = None,
        limit: int,
        offset: int,
        with_requester: bool = False,
    ) -> Sequence[WithdrawalRequestRecord]:
        ...
