"""Domain models for properties and their marketplace listing fields."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Optional

PROPERTY_TYPES = frozenset(
    {
        "apartment",
        "villa",
        "townhouse",
        "penthouse",
        "duplex",
        "studio",
        "office",
        "retail",
        "land",
        "warehouse",
    }
)
PROPERTY_STATUSES = frozenset({"available", "sold", "pending", "rented", "inactive"})


@dataclass(slots=True)
class PropertySnapshot:
    id: str
    user_id: str
    title: str
    price: Decimal
    currency: str
    type: str
    status: str
    description: Optional[str] = None
    location: Optional[str] = None
    address: Optional[str] = None
    bedrooms: Optional[int] = None
    bathrooms: Optional[int] = None
    area: Optional[Decimal] = None
    area_unit: Optional[str] = None
    images: list[str] = field(default_factory=list)
    is_in_marketplace: bool = False
    marketplace_price: Optional[Decimal] = None
    marketplace_listing_date: Optional[datetime] = None
    marketplace_duration: Optional[int] = None
    marketplace_expires_at: Optional[datetime] = None
    owner_name: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


@dataclass(slots=True)
class PropertyCreateInput:
    title: str
    price: Decimal
    type: str = "apartment"
    currency: str = "AED"
    description: Optional[str] = None
    location: Optional[str] = None
    address: Optional[str] = None
    bedrooms: Optional[int] = None
    bathrooms: Optional[int] = None
    area: Optional[Decimal] = None
    area_unit: str = "sqft"
    images: list[str] = field(default_factory=list)


@dataclass(slots=True)
class ListingFilters:
    min_price: Optional[Decimal] = None
    max_price: Optional[Decimal] = None
    type: Optional[str] = None
    location: Optional[str] = None
    bedrooms: Optional[int] = None
    bathrooms: Optional[int] = None
