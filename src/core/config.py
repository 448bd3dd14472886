"""Application settings, read from the environment."""

import os
from dataclasses import dataclass, field
from functools import lru_cache


def _env_flag(name: str, default: bool = False) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


@dataclass(frozen=True)
class Settings:
    """Central configuration for the database connection and logging."""

    database_url: str = field(
        default_factory=lambda: os.getenv(
            "TABLETALK_DATABASE_URL", "sqlite:///./tabletalk.db"
        )
    )
    sql_echo: bool = field(default_factory=lambda: _env_flag("TABLETALK_SQL_ECHO"))
    log_level: str = field(
        default_factory=lambda: os.getenv("TABLETALK_LOG_LEVEL", "INFO").upper()
    )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
