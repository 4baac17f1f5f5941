"""Named atomic procedures.

Each procedure takes the named parameters a client sends (``p_user_id``,
``p_amount``...) and delegates to the service that implements it. The
caller's identity comes from authentication; a non-admin may only act on
their own behalf.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Mapping

from sqlalchemy.ext.asyncio import AsyncSession

from estate_market.core.config import Settings, get_settings
from estate_market.modules.accounts.models import Account
from estate_market.modules.common.exceptions import ForbiddenError, NotFoundError, ValidationError
from estate_market.modules.marketplace.listings import ListingService
from estate_market.modules.marketplace.service import MarketplaceService
from estate_market.modules.wallets.service import WalletService
from estate_market.modules.withdrawals.service import WithdrawalService

logger = logging.getLogger(__name__)

Handler = Callable[["ProcedureContext", Mapping[str, Any]], Awaitable[Any]]


class ProcedureNotFoundError(NotFoundError):
    """No procedure is registered under this name."""


@dataclass(slots=True)
class ProcedureContext:
    session: AsyncSession
    principal: Account
    settings: Settings

    def acting_user(self, params: Mapping[str, Any], key: str = "p_user_id") -> str:
        user_id = params.get(key) or self.principal.id
        if user_id != self.principal.id and not self.principal.is_admin():
            raise ForbiddenError("You can only act on your own account")
        return str(user_id)


@dataclass(frozen=True, slots=True)
class Procedure:
    name: str
    handler: Handler
    admin_only: bool = False


_REGISTRY: dict[str, Procedure] = {}


def procedure(name: str, *, admin_only: bool = False) -> Callable[[Handler], Handler]:
    def decorator(func: Handler) -> Handler:
        _REGISTRY[name] = Procedure(name=name, handler=func, admin_only=admin_only)
        return func

    return decorator


def registered_procedures() -> list[str]:
    return sorted(_REGISTRY)


def _require(params: Mapping[str, Any], key: str) -> Any:
    value = params.get(key)
    if value is None or value == "":
        raise ValidationError(f"Missing parameter: {key}")
    return value


@procedure("process_wallet_deposit")
async def _process_wallet_deposit(ctx: ProcedureContext, params: Mapping[str, Any]) -> Any:
    user_id = ctx.acting_user(params)
    wallets = WalletService.with_session(ctx.session, ctx.settings)
    wallet = await wallets.deposit_funds(user_id, _require(params, "p_amount"))
    return {"user_id": wallet.user_id, "balance": wallet.balance}


@procedure("request_withdrawal")
async def _request_withdrawal(ctx: ProcedureContext, params: Mapping[str, Any]) -> Any:
    user_id = ctx.acting_user(params)
    service = WithdrawalService.with_session(ctx.session, ctx.settings)
    record = await service.request_withdrawal(
        user_id,
        _require(params, "p_amount"),
        params.get("p_payment_details"),
    )
    return record.id


@procedure("approve_withdrawal", admin_only=True)
async def _approve_withdrawal(ctx: ProcedureContext, params: Mapping[str, Any]) -> Any:
    service = WithdrawalService.with_session(ctx.session, ctx.settings)
    await service.approve_withdrawal(str(_require(params, "p_request_id")), ctx.principal.id)
    return True


@procedure("reject_withdrawal", admin_only=True)
async def _reject_withdrawal(ctx: ProcedureContext, params: Mapping[str, Any]) -> Any:
    service = WithdrawalService.with_session(ctx.session, ctx.settings)
    await service.reject_withdrawal(str(_require(params, "p_request_id")), ctx.principal.id)
    return True


@procedure("list_property_in_marketplace")
async def _list_property_in_marketplace(ctx: ProcedureContext, params: Mapping[str, Any]) -> Any:
    user_id = ctx.acting_user(params)
    service = ListingService.with_session(ctx.session, ctx.settings)
    await service.list_property_in_marketplace(
        user_id,
        str(_require(params, "p_property_id")),
        _require(params, "p_price"),
        params.get("p_duration"),
    )
    return True


@procedure("purchase_marketplace_listing")
async def _purchase_marketplace_listing(ctx: ProcedureContext, params: Mapping[str, Any]) -> Any:
    buyer_id = ctx.acting_user(params, "p_buyer_id")
    service = MarketplaceService.with_session(ctx.session, ctx.settings)
    return await service.purchase_marketplace_listing(
        buyer_id,
        str(_require(params, "p_property_id")),
        params.get("p_expected_price"),
    )


async def call_procedure(
    session: AsyncSession,
    name: str,
    params: Mapping[str, Any] | None,
    principal: Account,
    settings: Settings | None = None,
) -> Any:
    entry = _REGISTRY.get(name)
    if entry is None:
        raise ProcedureNotFoundError(f"Unknown procedure: {name}")
    if entry.admin_only and not principal.is_admin():
        logger.warning("User %s attempted admin procedure %s", principal.id, name)
        raise ForbiddenError("This procedure requires administrator privileges")
    ctx = ProcedureContext(session=session, principal=principal, settings=settings or get_settings())
    logger.debug("Calling procedure %s for %s", name, principal.id)
    return await entry.handler(ctx, params or {})
