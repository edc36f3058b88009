"""
Application configuration
"""
from decimal import Decimal
from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Query engine settings, overridable through environment or .env"""

    # Logging
    LOG_LEVEL: str = "INFO"

    # Default snapshot for scripts (JSON with customers/orders/products)
    SNAPSHOT_PATH: Optional[str] = None

    # Query defaults
    DEFAULT_TOP_K: int = 3
    DISCOUNT_FACTOR: Decimal = Decimal("0.9")

    # Prices are rounded to this quantum after a discount
    MONEY_QUANTUM: Decimal = Decimal("0.01")

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=True, extra="ignore")


def get_settings() -> Settings:
    """Read settings again (picks up environment changes, used by tests)"""
    return Settings()


settings = Settings()
