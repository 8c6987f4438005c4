from decimal import Decimal
from typing import List, Optional

from pydantic import SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from src.platform.constant.path import ENV_EXAMPLE_FILE, ENV_FILE


_ENV_FILE = ENV_FILE if ENV_FILE.exists() else ENV_EXAMPLE_FILE


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=str(_ENV_FILE),
        env_ignore_empty=True,
        extra='ignore',
    )

    PROJECT_NAME: str = 'Ticket Order Fulfillment'
    VERSION: str = '0.1.0'
    DEBUG: bool = True  # Set to False in production

    # CORS
    BACKEND_CORS_ORIGINS: List[str] = []

    @field_validator('BACKEND_CORS_ORIGINS', mode='before')
    @classmethod
    def assemble_cors_origins(cls, v: str | List[str]) -> List[str]:
        if isinstance(v, str) and not v.startswith('['):
            return [i.strip() for i in v.split(',')]
        elif isinstance(v, list):
            return v
        return []

    # PostgreSQL
    POSTGRES_SERVER: str = 'localhost'
    POSTGRES_USER: str = 'postgres'
    POSTGRES_PASSWORD: SecretStr = SecretStr('postgres')
    POSTGRES_DB: str = 'ticketing'
    POSTGRES_PORT: int = 5432

    @property
    def DATABASE_URL_ASYNC(self) -> str:
        password = self.POSTGRES_PASSWORD.get_secret_value()
        return f'postgresql+asyncpg://{self.POSTGRES_USER}:{password}@{self.POSTGRES_SERVER}:{self.POSTGRES_PORT}/{self.POSTGRES_DB}'

    # Connection pool
    DB_POOL_SIZE: int = 10
    DB_POOL_MAX_OVERFLOW: int = 5
    DB_POOL_TIMEOUT: int = 30  # seconds
    DB_POOL_RECYCLE: int = 1800  # seconds
    DB_POOL_PRE_PING: bool = True

    # Outbound services
    INVENTORY_SERVICE_URL: str = 'http://localhost:8002'
    PAYMENT_SERVICE_URL: str = 'http://localhost:8003'
    USER_SERVICE_URL: str = 'http://localhost:8004/v1/users'
    CATALOG_SERVICE_URL: str = 'http://localhost:8005/v1/events'
    # Inventory side only: when unset the "event on sale" check is skipped
    INVENTORY_CATALOG_URL: Optional[str] = None

    # Outbound retry policy (shared by every client)
    HTTP_TIMEOUT_SECONDS: float = 10.0
    HTTP_RETRY_ATTEMPTS: int = 3
    HTTP_RETRY_DELAY_SECONDS: float = 0.5

    # Seat holds
    HOLD_DURATION_SECONDS: int = 900
    SWEEPER_INTERVAL_SECONDS: float = 60.0

    # Order ledger
    IDEMPOTENCY_TTL_SECONDS: int = 3600

    # Pricing
    TAX_RATE: Decimal = Decimal('0.05')

    # Tracing: spans are exported only when an OTLP endpoint is set
    OTEL_EXPORTER_OTLP_ENDPOINT: Optional[str] = None
    OTEL_CONSOLE_EXPORT: bool = False


settings = Settings()  # type: ignore
