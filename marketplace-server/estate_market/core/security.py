"""Bearer token identity.

Authentication itself is handled by the identity provider; this module
only turns a signed access token into the current account.
"""
from datetime import datetime, timedelta, timezone
from typing import Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt
from sqlalchemy.ext.asyncio import AsyncSession

from estate_market.core.config import get_settings
from estate_market.interfaces.http.deps.database import get_db_session
from estate_market.modules.accounts.models import Account as AccountDomain
from estate_market.modules.accounts.service import AccountService
from estate_market.schemas import TokenData

security = HTTPBearer()


def create_access_token(account_id: str, role: str, expires_delta: Optional[timedelta] = None) -> str:
    settings = get_settings()
    expire_delta = expires_delta or timedelta(minutes=settings.access_token_expire_minutes)
    payload = {
        "sub": account_id,
        "role": role,
        "exp": datetime.now(timezone.utc) + expire_delta,
    }
    return jwt.encode(payload, settings.secret_key, algorithm=settings.algorithm)


def decode_access_token(token: str) -> TokenData:
    settings = get_settings()
    try:
        payload = jwt.decode(token, settings.secret_key, algorithms=[settings.algorithm])
    except JWTError as exc:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Could not validate credentials") from exc

    account_id = payload.get("sub")
    role = payload.get("role")
    if not all([account_id, role]):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Could not validate credentials")
    return TokenData(account_id=account_id, role=role)


async def get_current_account(
    credentials: HTTPAuthorizationCredentials = Depends(security),
    db: AsyncSession = Depends(get_db_session),
) -> AccountDomain:
    token_data = decode_access_token(credentials.credentials)
    service = AccountService.with_session(db)
    account = await service.get_by_id(token_data.account_id)
    if account is None or not account.is_active:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Account not found or disabled")
    return account


async def get_current_admin(account: AccountDomain = Depends(get_current_account)) -> AccountDomain:
    if not account.is_admin():
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Administrator privileges required")
    return account
