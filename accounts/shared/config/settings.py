# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

import sys
from functools import lru_cache
from typing import Annotated

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

_TRUTHY = frozenset({"1", "true", "yes", "on"})
_PLACEHOLDER_SECRETS = frozenset({"", "dev", "development", "test", "changeme"})

_SECTION_CONFIG = SettingsConfigDict(
    env_file=".env",
    env_file_encoding="utf-8",
    extra="ignore",
    validate_by_name=True,
)


def _flag(cls, value: str | bool) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in _TRUTHY
    return bool(value)


class DatabaseConfig(BaseSettings):
    url: str = Field("sqlite:///accounts.db", alias="DATABASE_URL")
    pool_timeout: float = Field(30.0, ge=0.1, alias="DATABASE_POOL_TIMEOUT")
    echo: bool = Field(False, alias="DATABASE_ECHO")

    model_config = _SECTION_CONFIG


class SessionConfig(BaseSettings):
    ttl_seconds: int = Field(3600, ge=1, alias="SESSION_TTL_SECONDS")

    model_config = _SECTION_CONFIG


class AdminConfig(BaseSettings):
    username: str | None = Field(None, alias="ADMIN_USERNAME")
    password: str | None = Field(None, alias="ADMIN_PASSWORD")
    seed_on_startup: bool = Field(True, alias="ADMIN_SEED_ON_STARTUP")

    # Bootstrap profile for the seeded admin
    first_name: str = Field("Main", alias="ADMIN_FIRST_NAME")
    last_name: str = Field("Admin", alias="ADMIN_LAST_NAME")
    email: str = Field("admin@example.com", alias="ADMIN_EMAIL")
    phone_number: str = Field("12345678", alias="ADMIN_PHONE")
    street_number: int | None = Field(None, alias="ADMIN_STREET_NUMBER")
    street_name: str = Field("Admin Lane", alias="ADMIN_STREET_NAME")
    postal_code: int = Field(9999, alias="ADMIN_POSTAL_CODE")
    city: str = Field("AdminCity", alias="ADMIN_CITY")

    model_config = _SECTION_CONFIG

    _parse_seed_flag = field_validator("seed_on_startup", mode="before")(_flag)


class SecurityConfig(BaseSettings):
    # CORS
    allowed_origins: Annotated[list[str], NoDecode] = Field(["*"], alias="ALLOWED_ORIGINS")

    # Rate limiting
    enable_rate_limit: bool = Field(True, alias="ENABLE_RATE_LIMIT")
    rate_limit_requests: int = Field(10, alias="RL_LIMIT")
    rate_limit_window: float = Field(60.0, alias="RL_WINDOW")

    model_config = _SECTION_CONFIG

    @field_validator("allowed_origins", mode="before")
    @classmethod
    def _parse_origins(cls, value: str | list[str]) -> list[str]:
        if isinstance(value, str):
            return [origin.strip() for origin in value.split(",") if origin.strip()]
        return value

    _parse_rate_limit_flag = field_validator("enable_rate_limit", mode="before")(_flag)


def _database_config_factory() -> DatabaseConfig:
    return DatabaseConfig()  # type: ignore[call-arg]


def _session_config_factory() -> SessionConfig:
    return SessionConfig()  # type: ignore[call-arg]


def _admin_config_factory() -> AdminConfig:
    return AdminConfig()  # type: ignore[call-arg]


def _security_config_factory() -> SecurityConfig:
    return SecurityConfig()  # type: ignore[call-arg]


class AppConfig(BaseSettings):
    app_env: str = Field("development", alias="APP_ENV")
    secret_key: str = Field("dev", alias="SECRET_KEY")
    debug_logging: bool = Field(False, alias="DEBUG_LOGGING")
    log_level: str = Field("INFO", alias="LOG_LEVEL")

    database: DatabaseConfig = Field(default_factory=_database_config_factory)
    session: SessionConfig = Field(default_factory=_session_config_factory)
    admin: AdminConfig = Field(default_factory=_admin_config_factory)
    security: SecurityConfig = Field(default_factory=_security_config_factory)

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        validate_assignment=True,
        validate_by_name=True,
    )

    _parse_debug_flag = field_validator("debug_logging", mode="before")(_flag)

    @model_validator(mode="after")
    def _validate_production_settings(self) -> "AppConfig":
        if not self.is_production():
            return self

        if self.secret_key in _PLACEHOLDER_SECRETS:
            print(
                "config: refusing to start, SECRET_KEY is a placeholder while APP_ENV is production",
                file=sys.stderr,
            )
            sys.exit(1)

        if "*" in self.security.allowed_origins:
            print("config: ALLOWED_ORIGINS contains * in production", file=sys.stderr)

        return self

    def is_production(self) -> bool:
        return self.app_env.lower() in ("production", "prod")


@lru_cache(maxsize=1)
def load_config() -> AppConfig:
    return AppConfig()


__all__ = [
    "AdminConfig",
    "AppConfig",
    "DatabaseConfig",
    "SecurityConfig",
    "SessionConfig",
    "load_config",
]
