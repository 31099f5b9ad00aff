"""Environment-driven settings, read once at startup.

Every field maps to a ``SHOP_``-prefixed variable, e.g. ``database_url``
is read from ``SHOP_DATABASE_URL``.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping

import pydantic
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from shopcore.domain.exceptions import ConfigurationError

ENV_PREFIX = "SHOP_"
DEFAULT_DATABASE_URL = "sqlite+aiosqlite:///./data/shop.db"


class Settings(BaseSettings):

    database_url: str = Field(default=DEFAULT_DATABASE_URL, description="SQLAlchemy async URL")
    db_echo: bool = False
    db_pool_size: int = Field(default=5, gt=0)
    db_max_overflow: int = Field(default=10, ge=0)
    notify_url: str | None = None
    notify_token: str | None = None
    notify_timeout: float = Field(default=10.0, gt=0)
    log_level: str = "INFO"
    strict_transitions: bool = False

    model_config = SettingsConfigDict(
        env_prefix=ENV_PREFIX,
        env_ignore_empty=True,
        case_sensitive=False,
        extra="ignore",
        frozen=True,
    )

    @field_validator("database_url")
    @classmethod
    def use_async_driver(cls, value: str) -> str:
        url = value.strip()
        if not url:
            raise ValueError("database URL is empty")
        if url.startswith("postgresql://"):
            url = url.replace("postgresql://", "postgresql+asyncpg://", 1)
        return url

    @field_validator("log_level")
    @classmethod
    def check_log_level(cls, value: str) -> str:
        level = value.upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"unknown log level {value!r}")
        return level

    @field_validator("notify_url", "notify_token", mode="before")
    @classmethod
    def blank_is_unset(cls, value: str | None) -> str | None:
        return value or None

    @property
    def is_sqlite(self) -> bool:
        return self.database_url.startswith("sqlite")

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> Settings:
        """Load settings from the process environment or from *environ*.

        Invalid values surface as ``ConfigurationError``.
        """
        try:
            if environ is None:
                return cls()
            return cls(
                **{
                    key[len(ENV_PREFIX):].lower(): value
                    for key, value in environ.items()
                    if key.upper().startswith(ENV_PREFIX) and value != ""
                }
            )
        except pydantic.ValidationError as exc:
            problems = "; ".join(
                f"{ENV_PREFIX}{'.'.join(str(part) for part in err['loc']).upper()}: {err['msg']}"
                for err in exc.errors()
            )
            raise ConfigurationError(f"Invalid settings: {problems}") from None


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )
