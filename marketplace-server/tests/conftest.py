"""
Shared fixtures: a fresh SQLite database per test, account/property
factories and an HTTP client bound to the test database.
"""

from decimal import Decimal

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from estate_market.core.config import Settings
from estate_market.core.security import create_access_token
from estate_market.db import models  # noqa: F401
from estate_market.infrastructure.database.base import Base
from estate_market.interfaces.http.deps import get_db_session
from estate_market.modules.accounts import AccountCreateInput, AccountService
from estate_market.modules.membership import MembershipService
from estate_market.modules.properties import PropertyCreateInput, PropertyService
from estate_market.modules.wallets import WalletService


@pytest.fixture
def settings():
    return Settings(_env_file=None)


@pytest.fixture
async def engine(tmp_path):
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'marketplace.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(bind=engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
async def session(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture
def make_account(session, settings):
    """Create an account, optionally with a paid plan and a funded wallet."""

    async def _make(name="Test User", *, role="user", paid=False, balance=None, email=None):
        account = await AccountService.with_session(session).create_account(
            AccountCreateInput(name=name, email=email, role=role)
        )
        if paid:
            await MembershipService.with_session(session).set_subscription(account.id, plan_id="premium")
        await session.commit()
        if balance is not None:
            await WalletService.with_session(session, settings).deposit_funds(account.id, Decimal(balance))
        return account

    return _make


@pytest.fixture
def make_property(session):
    async def _make(owner_id, title="Marina View Apartment", price="950000", **fields):
        payload = PropertyCreateInput(title=title, price=Decimal(price), **fields)
        snapshot = await PropertyService.with_session(session).create_property(owner_id, payload)
        await session.commit()
        return snapshot

    return _make


@pytest.fixture
def auth_headers():
    def _headers(account):
        return {"Authorization": f"Bearer {create_access_token(account.id, account.role)}"}

    return _headers


@pytest.fixture
async def client(session_factory):
    from estate_market.main import create_app

    app = create_app()

    async def _test_session():
        async with session_factory() as db:
            try:
                yield db
                await db.commit()
            except Exception:
                await db.rollback()
                raise

    app.dependency_overrides[get_db_session] = _test_session
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as http:
        yield http
    app.dependency_overrides.clear()
