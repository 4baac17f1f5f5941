"""Application configuration using pydantic settings with structured sections."""

from decimal import Decimal
from functools import lru_cache
from typing import Literal, Optional

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class ServerSettings(BaseModel):
    host: str = "0.0.0.0"
    port: int = 8000
    reload: bool = False


class DatabaseSettings(BaseModel):
    url: str = Field(default="sqlite+aiosqlite:///./marketplace.db", alias="url")
    echo: bool = False
    pool_size: Optional[int] = None
    max_overflow: Optional[int] = None


class SecuritySettings(BaseModel):
    secret_key: str = Field(default="change-me", min_length=8)
    algorithm: str = "HS256"
    access_token_expire_minutes: int = 60 * 24 * 7


class WalletSettings(BaseModel):
    currency: str = "AED"
    min_withdrawal_amount: Decimal = Decimal("100")
    max_deposit_amount: Optional[Decimal] = None


class MarketplaceSettings(BaseModel):
    commission_rate: Decimal = Field(default=Decimal("0.5"), ge=0, le=1)
    allowed_durations: list[int] = Field(default_factory=lambda: [7, 14, 30, 60, 90])
    default_duration: int = 30
    enforce_expiry: bool = True
    max_page_size: int = 100


class LoggingSettings(BaseModel):
    level: str = "INFO"
    format: str = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


class Settings(BaseSettings):
    """Top-level application settings with nested sections."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_nested_delimiter="__",
        extra="ignore",
        case_sensitive=False,
    )

    environment: Literal["development", "staging", "production", "test"] = "development"
    debug: bool = False
    project_name: str = "Estate Marketplace Server"
    api_prefix: str = "/api"

    server: ServerSettings = ServerSettings()
    database: DatabaseSettings = DatabaseSettings()
    security: SecuritySettings = SecuritySettings()
    wallet: WalletSettings = WalletSettings()
    marketplace: MarketplaceSettings = MarketplaceSettings()
    logging: LoggingSettings = LoggingSettings()

    @property
    def database_url(self) -> str:
        return self.database.url

    @property
    def host(self) -> str:
        return self.server.host

    @property
    def port(self) -> int:
        return self.server.port

    @property
    def secret_key(self) -> str:
        return self.security.secret_key

    @property
    def algorithm(self) -> str:
        return self.security.algorithm

    @property
    def access_token_expire_minutes(self) -> int:
        return self.security.access_token_expire_minutes

    @property
    def currency(self) -> str:
        return self.wallet.currency

    @property
    def commission_rate(self) -> Decimal:
        return self.marketplace.commission_rate


@lru_cache()
def get_settings() -> Settings:
    return Settings()
