"""
Create the first administrator profile and print an access token for it.
"""
import asyncio

from sqlalchemy import select

from estate_market.core.security import create_access_token
from estate_market.db.models import Account
from estate_market.infrastructure.database import get_session, init_db
from estate_market.modules.accounts import AccountCreateInput, AccountService


async def create_default_admin():
    await init_db()

    async for db in get_session():
        stmt = select(Account).where(Account.role.in_(["admin", "super_admin"]))
        result = await db.execute(stmt)
        existing_admin = result.scalars().first()

        if existing_admin:
            print(f"Administrator already exists: {existing_admin.id}")
            return

        service = AccountService.with_session(db)
        admin = await service.create_account(
            AccountCreateInput(
                name="Administrator",
                email="admin@example.com",
                role="super_admin",
                is_active=True,
            )
        )
        await db.commit()

        print("=" * 50)
        print(f"Administrator created: {admin.id}")
        print(f"Access token: {create_access_token(admin.id, admin.role)}")
        print("=" * 50)


if __name__ == "__main__":
    asyncio.run(create_default_admin())
