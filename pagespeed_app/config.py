from __future__ import annotations

from typing import Annotated

from pydantic import field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict


class Settings(BaseSettings):
    SHOPIFY_APP_API_SECRET: str
    SHOPIFY_INTERNAL_API_TOKEN: str
    SHOPIFY_ADMIN_ACCESS_TOKEN: str | None = None
    SHOPIFY_ADMIN_API_VERSION: str = "2024-01"
    SHOPIFY_REQUEST_TIMEOUT_SECONDS: float = 20.0

    BACKEND_CORS_ORIGINS: Annotated[list[str], NoDecode] = ["*"]

    @field_validator("SHOPIFY_ADMIN_ACCESS_TOKEN")
    @classmethod
    def blank_token_is_unset(cls, value: str | None) -> str | None:
        if value is None:
            return None
        return value.strip() or None

    @field_validator("BACKEND_CORS_ORIGINS", mode="before")
    @classmethod
    def split_origins(cls, value: str | list[str]) -> list[str]:
        if isinstance(value, str):
            return [origin.strip() for origin in value.split(",") if origin.strip()]
        return value

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")


settings = Settings()
