from __future__ import annotations

from functools import lru_cache
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    app_name: str = "Console Bank"
    database_url: str = "sqlite://"
    log_level: str = "WARNING"
    log_file: Optional[str] = None

    account_id: int = Field(default=1, description="Account bound to the menu session")
    account_name: str = Field(default="John Doe", min_length=1)
    opening_balance: int = Field(
        default=10_000, ge=0, description="Seed balance in minor units (e.g. cents)"
    )
    amount_places: int = Field(default=2, ge=0, le=6)

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="BANK_",
        extra="ignore",
    )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
