"""Membership status of the current account."""
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from estate_market.core.security import get_current_account
from estate_market.interfaces.http.deps import get_db_session
from estate_market.modules.accounts import Account as AccountDomain
from estate_market.modules.membership import MembershipService
from estate_market.schemas import MembershipResponse

router = APIRouter()


@router.get("", response_model=MembershipResponse, summary="Paid membership status")
async def get_membership(
    account: AccountDomain = Depends(get_current_account),
    db: AsyncSession = Depends(get_db_session),
) -> MembershipResponse:
    service = MembershipService.with_session(db)
    subscription = await service.get_subscription(account.id)
    return MembershipResponse(
        user_id=account.id,
        is_paid_member=await service.is_paid_member(account.id),
        plan_id=subscription.plan_id if subscription else None,
        status=subscription.status if subscription else None,
    )
