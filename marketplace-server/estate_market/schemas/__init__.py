"""Pydantic schemas used across the project."""
from datetime import datetime
from decimal import Decimal
from typing import Any, Generic, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, Field

T = TypeVar("T")


class TokenData(BaseModel):
    account_id: str
    role: str


class ErrorDetail(BaseModel):
    code: str
    message: str


class PageResponse(BaseModel, Generic[T]):
    data: list[T]
    total: int
    page: int
    page_size: int

    model_config = ConfigDict(from_attributes=True)


class AccountResponse(BaseModel):
    id: str
    name: str
    email: Optional[str] = None
    avatar: Optional[str] = None
    role: str
    is_active: bool

    model_config = ConfigDict(from_attributes=True)


# Wallet

class WalletResponse(BaseModel):
    user_id: str
    balance: Decimal
    currency: str
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class WalletSummaryResponse(BaseModel):
    balance: Decimal
    total_deposits: Decimal
    total_withdrawals: Decimal
    total_sales: Decimal
    total_purchases: Decimal
    total_commissions: Decimal
    pending_withdrawals: Decimal

    model_config = ConfigDict(from_attributes=True)


class PropertyBriefResponse(BaseModel):
    id: str
    title: str
    images: list[str] = Field(default_factory=list)

    model_config = ConfigDict(from_attributes=True)


class WalletTransactionResponse(BaseModel):
    id: str
    type: str
    amount: Decimal
    status: str
    related_listing_id: Optional[str] = None
    description: Optional[str] = None
    created_at: datetime
    updated_at: Optional[datetime] = None
    property: Optional[PropertyBriefResponse] = None

    model_config = ConfigDict(from_attributes=True)


class DepositRequest(BaseModel):
    amount: Decimal


# Withdrawals

class WithdrawalCreateRequest(BaseModel):
    amount: Decimal
    payment_details: dict[str, Any]


class RequesterResponse(BaseModel):
    name: str
    email: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)


class WithdrawalResponse(BaseModel):
    id: str
    user_id: str
    amount: Decimal
    status: str
    payment_details: dict[str, Any]
    reviewed_by: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    requester: Optional[RequesterResponse] = None

    model_config = ConfigDict(from_attributes=True)


# Properties and listings

class PropertyCreateRequest(BaseModel):
    title: str = Field(..., min_length=1, max_length=255)
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
    images: list[str] = Field(default_factory=list)


class PropertyUpdateRequest(BaseModel):
    title: Optional[str] = Field(None, min_length=1, max_length=255)
    price: Optional[Decimal] = None
    type: Optional[str] = None
    status: Optional[str] = None
    currency: Optional[str] = None
    description: Optional[str] = None
    location: Optional[str] = None
    address: Optional[str] = None
    bedrooms: Optional[int] = None
    bathrooms: Optional[int] = None
    area: Optional[Decimal] = None
    area_unit: Optional[str] = None
    images: Optional[list[str]] = None


class PropertyResponse(BaseModel):
    id: str
    user_id: str
    title: str
    description: Optional[str] = None
    price: Decimal
    currency: str
    location: Optional[str] = None
    address: Optional[str] = None
    type: str
    status: str
    bedrooms: Optional[int] = None
    bathrooms: Optional[int] = None
    area: Optional[Decimal] = None
    area_unit: Optional[str] = None
    images: list[str] = Field(default_factory=list)
    is_in_marketplace: bool
    marketplace_price: Optional[Decimal] = None
    marketplace_listing_date: Optional[datetime] = None
    marketplace_duration: Optional[int] = None
    marketplace_expires_at: Optional[datetime] = None
    owner_name: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class ListingCreateRequest(BaseModel):
    property_id: str
    price: Decimal
    duration: Optional[int] = None


class ListingOptionsResponse(BaseModel):
    """Choices offered by the listing form; any positive duration is still accepted."""

    currency: str
    durations: list[int]
    default_duration: int
    commission_rate: Decimal


class PurchaseRequest(BaseModel):
    expected_price: Optional[Decimal] = None


class PurchaseResponse(BaseModel):
    transaction_id: str


class ExpireListingsResponse(BaseModel):
    expired: int


# Marketplace transactions and messages

class PartyResponse(BaseModel):
    id: str
    name: Optional[str] = None
    avatar: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)


class SoldPropertyResponse(BaseModel):
    id: str
    user_id: str
    title: str
    price: Decimal
    type: str
    status: str
    description: Optional[str] = None
    location: Optional[str] = None
    images: list[str] = Field(default_factory=list)

    model_config = ConfigDict(from_attributes=True)


class MarketplaceTransactionResponse(BaseModel):
    id: str
    buyer_id: str
    seller_id: str
    listing_id: str
    sale_price: Decimal
    platform_fee: Decimal
    seller_earning: Decimal
    created_at: Optional[datetime] = None
    buyer: Optional[PartyResponse] = None
    seller: Optional[PartyResponse] = None
    property: Optional[SoldPropertyResponse] = None

    model_config = ConfigDict(from_attributes=True)


class MessageCreateRequest(BaseModel):
    content: str


class MessageResponse(BaseModel):
    id: int
    transaction_id: str
    sender_id: str
    content: str
    is_read: bool
    created_at: Optional[datetime] = None
    sender: Optional[PartyResponse] = None

    model_config = ConfigDict(from_attributes=True)


# Membership

class MembershipResponse(BaseModel):
    user_id: str
    is_paid_member: bool
    plan_id: Optional[str] = None
    status: Optional[str] = None


class SubscriptionUpdateRequest(BaseModel):
    plan_id: str = Field(..., min_length=1, max_length=50)
    status: str = "active"


# Procedures

class ProcedureCallRequest(BaseModel):
    params: dict[str, Any] = Field(default_factory=dict)


class ProcedureCallResponse(BaseModel):
    data: Any = None
    error: Optional[ErrorDetail] = None
