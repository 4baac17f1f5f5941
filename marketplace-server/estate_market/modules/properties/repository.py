"""Repository protocol for the property registry."""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Any, Protocol, Sequence

from .models import ListingFilters, PropertySnapshot


class PropertyRepository(Protocol):
    async def get(self, property_id: str, *, for_update: bool = False) -> PropertySnapshot | None:
        ...

    async def list_by_user(self, user_id: str) -> Sequence[PropertySnapshot]:
        ...

    async def create(self, *, user_id: str, fields: dict[str, Any]) -> PropertySnapshot:
        ...

    async def update(self, property_id: str, fields: dict[str, Any]) -> PropertySnapshot | None:
        ...

    async def set_listing(
        self,
        property_id: str,
        *,
        owner_id: str,
        price: Decimal,
        listed_at: datetime,
        duration_days: int,
        expires_at: datetime,
    ) -> bool:
        ...

    async def clear_listing(self, property_id: str, *, owner_id: str) -> bool:
        ...

    async def close_listing_for_sale(
        self,
        property_id: str,
        *,
        seller_id: str,
        buyer_id: str,
        price: Decimal,
        now: datetime | None,
    ) -> bool:
        ...

    async def count_listings(self, filters: ListingFilters, now: datetime | None) -> int:
        ...

    async def list_listings(
        self,
        filters: ListingFilters,
        now: datetime | None,
        *,
        offset: int,
        limit: int,
    ) -> Sequence[PropertySnapshot]:
        ...

    async def expire_listings(self, now: datetime) -> int:
        ...
