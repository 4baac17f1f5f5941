"""SQLAlchemy implementation of the account repository."""

from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from estate_market.db.models import Account as AccountModel
from estate_market.modules.accounts.models import Account


class SqlAccountRepository:
    """Account repository backed by SQLAlchemy models."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get_by_id(self, account_id: str) -> Account | None:
        stmt = select(AccountModel).where(AccountModel.id == account_id)
        result = await self._session.execute(stmt)
        return self._to_domain(result.scalar_one_or_none())

    async def get_by_email(self, email: str) -> Account | None:
        stmt = select(AccountModel).where(AccountModel.email == email)
        result = await self._session.execute(stmt)
        return self._to_domain(result.scalar_one_or_none())

    async def create_account(
        self,
        *,
        name: str,
        email: str | None,
        role: str,
        avatar: str | None,
        is_active: bool,
    ) -> Account:
        model = AccountModel(
            name=name,
            email=email,
            role=role,
            avatar=avatar,
            is_active=is_active,
        )
        self._session.add(model)
        await self._session.flush()
        await self._session.refresh(model)
        return self._to_domain(model)

    @staticmethod
    def _to_domain(model: AccountModel | None) -> Account | None:
        if model is None:
            return None
        return Account(
            id=str(model.id),
            name=model.name,
            role=model.role or "user",
            is_active=bool(model.is_active),
            email=model.email,
            avatar=model.avatar,
            created_at=model.created_at,
            updated_at=model.updated_at,
        )
