"""Domain models for marketplace sales and the buyer/seller message thread."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Optional

TRANSACTION_ROLES = frozenset({"buyer", "seller", "all"})


@dataclass(slots=True)
class Party:
    id: str
    name: Optional[str] = None
    avatar: Optional[str] = None


@dataclass(slots=True)
class SoldProperty:
    id: str
    user_id: str
    title: str
    price: Decimal
    type: str
    status: str
    description: Optional[str] = None
    location: Optional[str] = None
    images: list[str] = field(default_factory=list)


@dataclass(slots=True)
class MarketplaceTransactionRecord:
    id: str
    buyer_id: str
    seller_id: str
    listing_id: str
    sale_price: Decimal
    platform_fee: Decimal
    seller_earning: Decimal
    created_at: Optional[datetime] = None
    buyer: Optional[Party] = None
    seller: Optional[Party] = None
    property: Optional[SoldProperty] = None

    def involves(self, user_id: str) -> bool:
        return user_id in (self.buyer_id, self.seller_id)


@dataclass(slots=True)
class MarketplaceMessageRecord:
    id: int
    transaction_id: str
    sender_id: str
    content: str
    is_read: bool = False
    created_at: Optional[datetime] = None
    sender: Optional[Party] = None
