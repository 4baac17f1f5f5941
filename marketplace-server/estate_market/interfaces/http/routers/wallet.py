"""Wallet endpoints for the current account: balance, ledger, deposits and withdrawals."""
from __future__ import annotations

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from estate_market.core.security import get_current_account
from estate_market.interfaces.http.deps import get_db_session
from estate_market.interfaces.http.errors import to_http_error
from estate_market.modules.accounts import Account as AccountDomain
from estate_market.modules.common import MarketplaceError
from estate_market.modules.wallets import WalletService
from estate_market.modules.withdrawals import WithdrawalService
from estate_market.schemas import (
    DepositRequest,
    PageResponse,
    WalletResponse,
    WalletSummaryResponse,
    WalletTransactionResponse,
    WithdrawalCreateRequest,
    WithdrawalResponse,
)

router = APIRouter()


@router.get("", response_model=WalletResponse, summary="Current wallet balance")
async def get_wallet(
    account: AccountDomain = Depends(get_current_account),
    db: AsyncSession = Depends(get_db_session),
) -> WalletResponse:
    service = WalletService.with_session(db)
    balance = await service.get_balance(account.id)
    return WalletResponse(user_id=account.id, balance=balance, currency=service.settings.currency)


@router.get("/summary", response_model=WalletSummaryResponse, summary="Totals per transaction type")
async def get_wallet_summary(
    account: AccountDomain = Depends(get_current_account),
    db: AsyncSession = Depends(get_db_session),
) -> WalletSummaryResponse:
    summary = await WalletService.with_session(db).get_wallet_summary(account.id)
    return WalletSummaryResponse.model_validate(summary)


@router.get(
    "/transactions",
    response_model=PageResponse[WalletTransactionResponse],
    summary="Ledger entries, newest first",
)
async def list_wallet_transactions(
    page: int = Query(1),
    page_size: int = Query(10),
    account: AccountDomain = Depends(get_current_account),
    db: AsyncSession = Depends(get_db_session),
) -> PageResponse[WalletTransactionResponse]:
    try:
        result = await WalletService.with_session(db).get_transactions(account.id, page, page_size)
    except MarketplaceError as exc:
        raise to_http_error(exc) from exc
    return PageResponse[WalletTransactionResponse].model_validate(result)


@router.post(
    "/deposits",
    response_model=WalletResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Deposit funds",
)
async def deposit_funds(
    payload: DepositRequest,
    account: AccountDomain = Depends(get_current_account),
    db: AsyncSession = Depends(get_db_session),
) -> WalletResponse:
    try:
        wallet = await WalletService.with_session(db).deposit_funds(account.id, payload.amount)
    except MarketplaceError as exc:
        raise to_http_error(exc) from exc
    return WalletResponse.model_validate(wallet)


@router.post(
    "/withdrawals",
    response_model=WithdrawalResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Request a withdrawal",
)
async def request_withdrawal(
    payload: WithdrawalCreateRequest,
    account: AccountDomain = Depends(get_current_account),
    db: AsyncSession = Depends(get_db_session),
) -> WithdrawalResponse:
    service = WithdrawalService.with_session(db)
    try:
        record = await service.request_withdrawal(account.id, payload.amount, payload.payment_details)
    except MarketplaceError as exc:
        raise to_http_error(exc) from exc
    return WithdrawalResponse.model_validate(record)


@router.get(
    "/withdrawals",
    response_model=PageResponse[WithdrawalResponse],
    summary="Own withdrawal requests, newest first",
)
async def list_withdrawals(
    page: int = Query(1),
    page_size: int = Query(10),
    account: AccountDomain = Depends(get_current_account),
    db: AsyncSession = Depends(get_db_session),
) -> PageResponse[WithdrawalResponse]:
    try:
        result = await WithdrawalService.with_session(db).get_withdrawal_requests(account.id, page, page_size)
    except MarketplaceError as exc:
        raise to_http_error(exc) from exc
    return PageResponse[WithdrawalResponse].model_validate(result)
