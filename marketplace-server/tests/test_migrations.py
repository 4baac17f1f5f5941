"""
Alembic revisions build the same schema the ORM expects.
"""

from pathlib import Path

import pytest
from alembic import command
from alembic.config import Config
from sqlalchemy import BigInteger, create_engine, inspect

from estate_market.core.config import get_settings

SERVER_ROOT = Path(__file__).resolve().parents[1]


@pytest.fixture
def migrated_url(tmp_path, monkeypatch):
    database = tmp_path / "migrated.db"
    monkeypatch.setenv("DATABASE__URL", f"sqlite+aiosqlite:///{database}")
    get_settings.cache_clear()
    config = Config()
    config.set_main_option("script_location", str(SERVER_ROOT / "migrations"))
    try:
        command.upgrade(config, "head")
        yield f"sqlite:///{database}"
    finally:
        get_settings.cache_clear()


class TestInitialRevision:
    """Upgrading an empty database to head"""

    def test_creates_every_table(self, migrated_url):
        engine = create_engine(migrated_url)
        try:
            tables = set(inspect(engine).get_table_names())
        finally:
            engine.dispose()

        assert {
            "accounts",
            "subscriptions",
            "properties",
            "wallets",
            "wallet_transactions",
            "withdrawal_requests",
            "marketplace_transactions",
            "marketplace_messages",
        } <= tables

    def test_money_columns_hold_whole_cents(self, migrated_url):
        engine = create_engine(migrated_url)
        try:
            inspector = inspect(engine)
            columns = {
                (table, column["name"]): column["type"]
                for table in ("wallets", "wallet_transactions", "marketplace_transactions")
                for column in inspector.get_columns(table)
            }
        finally:
            engine.dispose()

        for key in [
            ("wallets", "balance"),
            ("wallet_transactions", "amount"),
            ("marketplace_transactions", "sale_price"),
            ("marketplace_transactions", "platform_fee"),
        ]:
            assert isinstance(columns[key], BigInteger), key
