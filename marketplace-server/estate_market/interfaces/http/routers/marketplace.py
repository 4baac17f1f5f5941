"""Marketplace endpoints: listings, purchases, settlements and buyer/seller messages."""
from __future__ import annotations

from decimal import Decimal
from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from estate_market.core.config import Settings, get_settings
from estate_market.core.security import get_current_account
from estate_market.interfaces.http.deps import get_db_session
from estate_market.interfaces.http.errors import to_http_error
from estate_market.modules.accounts import Account as AccountDomain
from estate_market.modules.common import ForbiddenError, MarketplaceError
from estate_market.modules.marketplace import ListingService, MarketplaceService, MessageService
from estate_market.modules.properties import ListingFilters
from estate_market.schemas import (
    ListingCreateRequest,
    ListingOptionsResponse,
    MarketplaceTransactionResponse,
    MessageCreateRequest,
    MessageResponse,
    PageResponse,
    PropertyResponse,
    PurchaseRequest,
    PurchaseResponse,
)

router = APIRouter()


@router.get("/listing-options", response_model=ListingOptionsResponse, summary="Listing form choices")
async def listing_options(
    account: AccountDomain = Depends(get_current_account),
    settings: Settings = Depends(get_settings),
) -> ListingOptionsResponse:
    marketplace = settings.marketplace
    return ListingOptionsResponse(
        currency=settings.currency,
        durations=sorted(marketplace.allowed_durations),
        default_duration=marketplace.default_duration,
        commission_rate=marketplace.commission_rate,
    )


@router.get("/listings", response_model=PageResponse[PropertyResponse], summary="Browse active listings")
async def list_listings(
    page: int = Query(1),
    page_size: int = Query(10),
    min_price: Optional[Decimal] = Query(None),
    max_price: Optional[Decimal] = Query(None),
    type: Optional[str] = Query(None),
    location: Optional[str] = Query(None),
    bedrooms: Optional[int] = Query(None),
    bathrooms: Optional[int] = Query(None),
    account: AccountDomain = Depends(get_current_account),
    db: AsyncSession = Depends(get_db_session),
) -> PageResponse[PropertyResponse]:
    filters = ListingFilters(
        min_price=min_price,
        max_price=max_price,
        type=type,
        location=location,
        bedrooms=bedrooms,
        bathrooms=bathrooms,
    )
    try:
        result = await ListingService.with_session(db).get_marketplace_listings(page, page_size, filters)
    except MarketplaceError as exc:
        raise to_http_error(exc) from exc
    return PageResponse[PropertyResponse].model_validate(result)


@router.get("/listings/{property_id}", response_model=PropertyResponse, summary="Single listing")
async def get_listing(
    property_id: str,
    account: AccountDomain = Depends(get_current_account),
    db: AsyncSession = Depends(get_db_session),
) -> PropertyResponse:
    try:
        snapshot = await ListingService.with_session(db).get_marketplace_listing(property_id)
    except MarketplaceError as exc:
        raise to_http_error(exc) from exc
    return PropertyResponse.model_validate(snapshot)


@router.post(
    "/listings",
    response_model=PropertyResponse,
    status_code=status.HTTP_201_CREATED,
    summary="List an owned property in the marketplace",
)
async def create_listing(
    payload: ListingCreateRequest,
    account: AccountDomain = Depends(get_current_account),
    db: AsyncSession = Depends(get_db_session),
) -> PropertyResponse:
    service = ListingService.with_session(db)
    try:
        snapshot = await service.list_property_in_marketplace(
            account.id,
            payload.property_id,
            payload.price,
            payload.duration,
        )
    except MarketplaceError as exc:
        raise to_http_error(exc) from exc
    return PropertyResponse.model_validate(snapshot)


@router.delete("/listings/{property_id}", response_model=PropertyResponse, summary="Remove an owned listing")
async def remove_listing(
    property_id: str,
    account: AccountDomain = Depends(get_current_account),
    db: AsyncSession = Depends(get_db_session),
) -> PropertyResponse:
    try:
        snapshot = await ListingService.with_session(db).remove_property_from_marketplace(account.id, property_id)
    except MarketplaceError as exc:
        raise to_http_error(exc) from exc
    return PropertyResponse.model_validate(snapshot)


@router.post(
    "/listings/{property_id}/purchase",
    response_model=PurchaseResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Buy a listing with the wallet balance",
)
async def purchase_listing(
    property_id: str,
    payload: Optional[PurchaseRequest] = None,
    account: AccountDomain = Depends(get_current_account),
    db: AsyncSession = Depends(get_db_session),
) -> PurchaseResponse:
    expected_price = payload.expected_price if payload is not None else None
    try:
        transaction_id = await MarketplaceService.with_session(db).purchase_marketplace_listing(
            account.id,
            property_id,
            expected_price,
        )
    except MarketplaceError as exc:
        raise to_http_error(exc) from exc
    return PurchaseResponse(transaction_id=transaction_id)


@router.get(
    "/transactions",
    response_model=PageResponse[MarketplaceTransactionResponse],
    summary="Sales and purchases of the current account",
)
async def list_transactions(
    role: str = Query("all"),
    page: int = Query(1),
    page_size: int = Query(10),
    account: AccountDomain = Depends(get_current_account),
    db: AsyncSession = Depends(get_db_session),
) -> PageResponse[MarketplaceTransactionResponse]:
    service = MarketplaceService.with_session(db)
    try:
        result = await service.get_user_marketplace_transactions(account.id, role, page, page_size)
    except MarketplaceError as exc:
        raise to_http_error(exc) from exc
    return PageResponse[MarketplaceTransactionResponse].model_validate(result)


@router.get(
    "/transactions/{transaction_id}",
    response_model=MarketplaceTransactionResponse,
    summary="Settlement details",
)
async def get_transaction(
    transaction_id: str,
    account: AccountDomain = Depends(get_current_account),
    db: AsyncSession = Depends(get_db_session),
) -> MarketplaceTransactionResponse:
    try:
        record = await MarketplaceService.with_session(db).get_marketplace_transaction(transaction_id)
    except MarketplaceError as exc:
        raise to_http_error(exc) from exc
    if not record.involves(account.id) and not account.is_admin():
        raise to_http_error(ForbiddenError("Only the buyer and seller can view this transaction"))
    return MarketplaceTransactionResponse.model_validate(record)


@router.get(
    "/transactions/{transaction_id}/messages",
    response_model=PageResponse[MessageResponse],
    summary="Message thread, oldest first",
)
async def list_messages(
    transaction_id: str,
    page: int = Query(1),
    page_size: int = Query(50),
    account: AccountDomain = Depends(get_current_account),
    db: AsyncSession = Depends(get_db_session),
) -> PageResponse[MessageResponse]:
    service = MessageService.with_session(db)
    try:
        result = await service.get_marketplace_messages(transaction_id, account.id, page, page_size)
    except MarketplaceError as exc:
        raise to_http_error(exc) from exc
    return PageResponse[MessageResponse].model_validate(result)


@router.post(
    "/transactions/{transaction_id}/messages",
    response_model=MessageResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Post a message",
)
async def send_message(
    transaction_id: str,
    payload: MessageCreateRequest,
    account: AccountDomain = Depends(get_current_account),
    db: AsyncSession = Depends(get_db_session),
) -> MessageResponse:
    service = MessageService.with_session(db)
    try:
        message = await service.send_marketplace_message(transaction_id, account.id, payload.content)
    except MarketplaceError as exc:
        raise to_http_error(exc) from exc
    return MessageResponse.model_validate(message)


@router.post("/messages/{message_id}/read", response_model=MessageResponse, summary="Mark a message as read")
async def mark_message_read(
    message_id: int,
    account: AccountDomain = Depends(get_current_account),
    db: AsyncSession = Depends(get_db_session),
) -> MessageResponse:
    try:
        message = await MessageService.with_session(db).mark_message_as_read(message_id, account.id)
    except MarketplaceError as exc:
        raise to_http_error(exc) from exc
    return MessageResponse.model_validate(message)
