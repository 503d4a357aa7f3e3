# app/backend/core/config.py
from functools import lru_cache
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_CORS_ORIGIN = "http://localhost:5173"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        extra="ignore",
        populate_by_name=True,
    )

    # 기본 앱 설정
    app_env: str = Field("dev", alias="APP_ENV")
    app_version: str = Field("0.1.0", alias="APP_VERSION")
    log_level: str = Field("INFO", alias="LOG_LEVEL")

    # Task service behaviour
    ownership_enforced: bool = Field(True, alias="TASKS_OWNERSHIP_ENFORCED")
    auto_create_tables: bool = Field(True, alias="TASKS_AUTO_CREATE_TABLES")

    # CORS
    cors_allow_origin: Optional[str] = Field(None, alias="CORS_ALLOW_ORIGIN")

    # Auth
    auth_fallback_header: str = Field("X-Authorization", alias="AUTH_FALLBACK_HEADER")
    jwt_secret_key: str = Field("tasks-dev-secret-change-me", alias="JWT_SECRET_KEY")
    jwt_algorithm: str = Field("HS256", alias="JWT_ALGORITHM")
    access_token_expire_minutes: int = Field(720, alias="ACCESS_TOKEN_EXPIRE_MINUTES")
    access_cookie_name: str = Field("access_token", alias="ACCESS_COOKIE_NAME")
    cookie_secure: bool = Field(False, alias="COOKIE_SECURE")

    @property
    def cors_origin(self) -> str:
        """Configured origin, or the per-variant default (open variant allows any origin)."""
        if self.cors_allow_origin:
            return self.cors_allow_origin.strip()
        return DEFAULT_CORS_ORIGIN if self.ownership_enforced else "*"


@lru_cache
def get_settings() -> Settings:
    return Settings()
