"""
settings.py — Typed Application Settings
=========================================
One cached `Settings` instance read from the environment (prefix
``ALGOVIZ_``) and an optional ``.env`` file.

    ALGOVIZ_ENV=test
    ALGOVIZ_LOG_LEVEL=DEBUG
    ALGOVIZ_BASE_INTERVAL_MS=1000

Tests that mutate the environment call `load_settings.cache_clear()`.
"""

import logging
from functools import lru_cache
from typing import Literal, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

EnvName = Literal["dev", "test", "prod"]
LogLevelName = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class Settings(BaseSettings):
    """
    Attributes:
        env              : Runtime flag (dev / test / prod).
        log_level        : Level applied by `get_logger`.
        base_interval_ms : Autoplay tick interval at 1x speed.
        default_speed    : Speed multiplier a fresh controller starts with.
        stack_capacity   : Max elements the stack generators accept.
        queue_capacity   : Max elements the queue generators accept.
        array_capacity   : Default capacity for the array generators.
        hash_table_size  : Default bucket count for the hash-table generators.
        max_input_size   : Largest array / tree / graph a generator accepts.
        session_ttl_s    : Idle seconds before the host forgets a session.
        max_sessions     : Sessions the host keeps before evicting the least recently used.
        secret_key       : Flask session key (random when unset).
    """

    env:              EnvName      = Field(default="dev")
    log_level:        LogLevelName = Field(default="INFO")
    base_interval_ms: float        = Field(default=1000.0, gt=0)
    default_speed:    float        = Field(default=1.0, gt=0)
    stack_capacity:   int          = Field(default=10, ge=1)
    queue_capacity:   int          = Field(default=8, ge=1)
    array_capacity:   int          = Field(default=12, ge=1)
    hash_table_size:  int          = Field(default=7, ge=1)
    max_input_size:   int          = Field(default=500, ge=1)
    session_ttl_s:    float        = Field(default=1800.0, gt=0)
    max_sessions:     int          = Field(default=1000, ge=1)
    secret_key:       Optional[str] = Field(default=None)

    model_config = SettingsConfigDict(
        env_prefix="ALGOVIZ_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @property
    def is_test(self) -> bool:
        return self.env == "test"

    def log_level_numeric(self) -> int:
        return getattr(logging, self.log_level, logging.INFO)


@lru_cache(maxsize=1)
def load_settings() -> Settings:
    return Settings()


settings: Settings = load_settings()


def get_logger(name: str = "algoviz") -> logging.Logger:
    """Return a logger configured to `settings.log_level`."""
    logger = logging.getLogger(name)
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(
            logging.Formatter("%(asctime)s | %(levelname)s | %(name)s | %(message)s")
        )
        logger.addHandler(handler)
    logger.setLevel(load_settings().log_level_numeric())
    logger.propagate = False
    return logger
