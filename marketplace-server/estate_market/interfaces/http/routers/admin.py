"""Administrative endpoints: withdrawal review, subscriptions and listing maintenance."""
from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from estate_market.core.security import get_current_admin
from estate_market.infrastructure.database import atomic
from estate_market.interfaces.http.deps import get_db_session
from estate_market.interfaces.http.errors import to_http_error
from estate_market.modules.accounts import Account as AccountDomain
from estate_market.modules.accounts import AccountService
from estate_market.modules.common import MarketplaceError
from estate_market.modules.marketplace import ListingService
from estate_market.modules.membership import MembershipService
from estate_market.modules.withdrawals import WithdrawalService
from estate_market.schemas import (
    ExpireListingsResponse,
    MembershipResponse,
    PageResponse,
    SubscriptionUpdateRequest,
    WithdrawalResponse,
)

router = APIRouter()


@router.get("/withdrawals", response_model=PageResponse[WithdrawalResponse], summary="Withdrawal review queue")
async def list_withdrawals(
    status: str = Query("pending"),
    page: int = Query(1),
    page_size: int = Query(10),
    admin: AccountDomain = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db_session),
) -> PageResponse[WithdrawalResponse]:
    try:
        result = await WithdrawalService.with_session(db).get_all_withdrawal_requests(status, page, page_size)
    except MarketplaceError as exc:
        raise to_http_error(exc) from exc
    return PageResponse[WithdrawalResponse].model_validate(result)


@router.post("/withdrawals/{request_id}/approve", response_model=WithdrawalResponse, summary="Approve and pay out")
async def approve_withdrawal(
    request_id: str,
    admin: AccountDomain = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db_session),
) -> WithdrawalResponse:
    try:
        record = await WithdrawalService.with_session(db).approve_withdrawal(request_id, admin.id)
    except MarketplaceError as exc:
        raise to_http_error(exc) from exc
    return WithdrawalResponse.model_validate(record)


@router.post("/withdrawals/{request_id}/reject", response_model=WithdrawalResponse, summary="Reject a request")
async def reject_withdrawal(
    request_id: str,
    admin: AccountDomain = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db_session),
) -> WithdrawalResponse:
    try:
        record = await WithdrawalService.with_session(db).reject_withdrawal(request_id, admin.id)
    except MarketplaceError as exc:
        raise to_http_error(exc) from exc
    return WithdrawalResponse.model_validate(record)


@router.put("/subscriptions/{user_id}", response_model=MembershipResponse, summary="Grant or revoke a plan")
async def set_subscription(
    user_id: str,
    payload: SubscriptionUpdateRequest,
    admin: AccountDomain = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db_session),
) -> MembershipResponse:
    service = MembershipService.with_session(db)
    try:
        await AccountService.with_session(db).require(user_id)
        async with atomic(db):
            subscription = await service.set_subscription(user_id, plan_id=payload.plan_id, status=payload.status)
    except MarketplaceError as exc:
        raise to_http_error(exc) from exc
    return MembershipResponse(
        user_id=user_id,
        is_paid_member=subscription.is_paid,
        plan_id=subscription.plan_id,
        status=subscription.status,
    )


@router.post("/marketplace/expire", response_model=ExpireListingsResponse, summary="Close expired listings")
async def expire_listings(
    admin: AccountDomain = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db_session),
) -> ExpireListingsResponse:
    expired = await ListingService.with_session(db).expire_stale_listings()
    return ExpireListingsResponse(expired=expired)
