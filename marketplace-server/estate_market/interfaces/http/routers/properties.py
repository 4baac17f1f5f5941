"""Property registry endpoints."""
from __future__ import annotations

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from estate_market.core.security import get_current_account
from estate_market.infrastructure.database import atomic
from estate_market.interfaces.http.deps import get_db_session
from estate_market.interfaces.http.errors import to_http_error
from estate_market.modules.accounts import Account as AccountDomain
from estate_market.modules.common import MarketplaceError
from estate_market.modules.properties import PropertyCreateInput, PropertyService
from estate_market.schemas import PropertyCreateRequest, PropertyResponse, PropertyUpdateRequest

router = APIRouter()


@router.get("/mine", response_model=list[PropertyResponse], summary="Properties owned by the current account")
async def my_properties(
    account: AccountDomain = Depends(get_current_account),
    db: AsyncSession = Depends(get_db_session),
) -> list[PropertyResponse]:
    rows = await PropertyService.with_session(db).get_properties_by_user_id(account.id)
    return [PropertyResponse.model_validate(row) for row in rows]


@router.post("", response_model=PropertyResponse, status_code=status.HTTP_201_CREATED, summary="Register a property")
async def create_property(
    payload: PropertyCreateRequest,
    account: AccountDomain = Depends(get_current_account),
    db: AsyncSession = Depends(get_db_session),
) -> PropertyResponse:
    service = PropertyService.with_session(db)
    try:
        async with atomic(db):
            snapshot = await service.create_property(account.id, PropertyCreateInput(**payload.model_dump()))
    except MarketplaceError as exc:
        raise to_http_error(exc) from exc
    return PropertyResponse.model_validate(snapshot)


@router.get("/{property_id}", response_model=PropertyResponse, summary="Property details")
async def get_property(
    property_id: str,
    account: AccountDomain = Depends(get_current_account),
    db: AsyncSession = Depends(get_db_session),
) -> PropertyResponse:
    try:
        snapshot = await PropertyService.with_session(db).get_property(property_id)
    except MarketplaceError as exc:
        raise to_http_error(exc) from exc
    return PropertyResponse.model_validate(snapshot)


@router.patch("/{property_id}", response_model=PropertyResponse, summary="Update descriptive fields")
async def update_property(
    property_id: str,
    payload: PropertyUpdateRequest,
    account: AccountDomain = Depends(get_current_account),
    db: AsyncSession = Depends(get_db_session),
) -> PropertyResponse:
    service = PropertyService.with_session(db)
    try:
        async with atomic(db):
            snapshot = await service.update_property(
                property_id,
                payload.model_dump(exclude_unset=True),
                actor_id=account.id,
            )
    except MarketplaceError as exc:
        raise to_http_error(exc) from exc
    return PropertyResponse.model_validate(snapshot)
