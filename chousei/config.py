"""Typed settings for the scheduling service, read from the environment.

Each concern gets its own ``BaseSettings`` class with its own env prefix;
``get_settings()`` returns one cached container holding all of them:

    from chousei.config import get_settings
    max_days = get_settings().schedule.max_event_days
"""

from functools import lru_cache
from typing import Any

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

_TRUE_VALUES = ("1", "true", "yes")


def _parse_bool(v):
    if isinstance(v, str):
        return v.strip().lower() in _TRUE_VALUES
    return bool(v)


class PostgresSettings(BaseSettings):
    """Row store connection and pool sizing."""

    model_config = SettingsConfigDict(env_prefix="POSTGRES_", extra="ignore", populate_by_name=True)

    host: str = "postgres"
    port: int = 5432
    user: str = "chousei"
    password: str = ""
    database: str = Field(default="chousei", validation_alias="POSTGRES_DB")
    sslmode: str = "disable"
    pool_min_size: int = Field(default=1, ge=0)
    pool_max_size: int = Field(default=5, ge=1)
    pool_timeout: float = Field(default=10.0, description="Seconds to wait for a free connection")
    pool_max_idle: float = Field(default=300.0, description="Seconds before an idle connection is closed")

    def get_dsn(self) -> str:
        return (
            f"host={self.host} port={self.port} dbname={self.database} "
            f"user={self.user} password={self.password} sslmode={self.sslmode}"
        )

    def pool_kwargs(self) -> dict[str, Any]:
        """Keyword arguments for ``AsyncConnectionPool``."""
        return {
            "min_size": self.pool_min_size,
            "max_size": self.pool_max_size,
            "timeout": self.pool_timeout,
            "max_idle": self.pool_max_idle,
        }


class CorsSettings(BaseSettings):
    """Origins allowed to call the API from a browser."""

    model_config = SettingsConfigDict(extra="ignore", populate_by_name=True)

    origins_raw: str = Field(default="http://localhost:3000", validation_alias="CORS_ORIGINS")
    origins_regex: str = Field(default="", validation_alias="CORS_ORIGINS_REGEX")

    @property
    def origins(self) -> list[str]:
        return [o.strip() for o in self.origins_raw.split(",") if o.strip()]

    @property
    def allow_credentials(self) -> bool:
        # Browsers reject credentials together with a wildcard origin.
        return "*" not in self.origins and not self.origins_regex


class _FlagSettings(BaseSettings):
    model_config = SettingsConfigDict(extra="ignore")

    @field_validator("*", mode="before")
    @classmethod
    def parse_flag(cls, v):
        return _parse_bool(v)


class DebugSettings(_FlagSettings):
    """Verbose logging switches."""

    request: bool = Field(default=False, alias="request_debug")


class FeatureSettings(_FlagSettings):
    """Optional subsystems enabled at startup."""

    schedule_db: bool = Field(default=False, alias="enable_schedule_db")


class ScheduleSettings(BaseSettings):
    """Limits applied when events and entries are created."""

    model_config = SettingsConfigDict(env_prefix="SCHEDULE_", extra="ignore")

    max_event_days: int = Field(default=366, ge=1, description="Longest event range in days")
    event_name_max_length: int = Field(default=200, ge=1)
    respondent_name_max_length: int = Field(default=100, ge=1)


class Settings:
    """All settings sections, each loaded with its own prefix."""

    def __init__(self) -> None:
        self.postgres = PostgresSettings()
        self.cors = CorsSettings()
        self.debug = DebugSettings()
        self.features = FeatureSettings()
        self.schedule = ScheduleSettings()


@lru_cache
def get_settings() -> Settings:
    return Settings()


def clear_settings_cache() -> None:
    """Forget the cached settings so the next call re-reads the environment."""
    get_settings.cache_clear()
