"""Domain services for account profiles.

Authentication itself happens upstream; this service only resolves the
profile behind an authenticated principal id.
"""

from __future__ import annotations

from sqlalchemy.ext.asyncio import AsyncSession

from .exceptions import AccountAlreadyExistsError, AccountNotFoundError
from .models import Account, AccountCreateInput
from .repository import AccountRepository


class AccountService:
    """Encapsulates account lookups and provisioning."""

    def __init__(self, repository: AccountRepository) -> None:
        self._repository = repository

    @classmethod
    def with_session(cls, session: AsyncSession) -> "AccountService":
        from estate_market.infrastructure.database.repositories.account_repository import SqlAccountRepository

        return cls(SqlAccountRepository(session))

    async def get_by_id(self, account_id: str) -> Account | None:
        return await self._repository.get_by_id(account_id)

    async def require(self, account_id: str) -> Account:
        account = await self._repository.get_by_id(account_id)
        if account is None:
            raise AccountNotFoundError(f"Account not found: {account_id}")
        return account

    async def create_account(self, payload: AccountCreateInput) -> Account:
        if payload.email:
            existing = await self._repository.get_by_email(payload.email)
            if existing is not None:
                raise AccountAlreadyExistsError(f"Email already registered: {payload.email}")

        return await self._repository.create_account(
            name=payload.name,
            email=payload.email,
            role=payload.role,
            avatar=payload.avatar,
            is_active=payload.is_active,
        )
