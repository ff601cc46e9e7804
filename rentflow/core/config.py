"""Configuration module for the Rentflow application."""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from urllib.parse import urlparse

from dotenv import load_dotenv

from rentflow.core.exceptions import ConfigurationError

load_dotenv()


def _as_bool(value: str | None, default: bool = False) -> bool:
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


@dataclass(frozen=True)
class Config:
    """Runtime configuration with validation."""

    APP_NAME: str
    APP_VERSION: str
    ENV: str
    DEBUG: bool
    DATABASE_URL: str
    DB_CONNECTIVITY_REQUIRED: bool
    CELERY_BROKER_URL: str
    CELERY_RESULT_BACKEND: str
    API_PREFIX: str
    LOG_LEVEL: str
    LOG_FILE: str
    INVOICE_DUE_DAY: int
    INVOICE_GENERATION_DAY: int
    INVOICE_GENERATION_HOUR: int
    MATCH_CANDIDATE_FLOOR: float
    MATCH_CONFIRM_THRESHOLD: float
    PHONE_MATCH_DIGITS: int

    @property
    def is_production(self) -> bool:
        return self.ENV == "production"


def _build_config(env: str | None = None) -> Config:
    resolved_env = (env or os.getenv("ENV", "development")).strip().lower()
    debug = _as_bool(os.getenv("DEBUG"), default=(resolved_env != "production"))
    broker_url = os.getenv("CELERY_BROKER_URL", os.getenv("REDIS_URL", "redis://localhost:6379/0"))

    config = Config(
        APP_NAME="Rentflow",
        APP_VERSION=os.getenv("APP_VERSION", "1.0.0"),
        ENV=resolved_env,
        DEBUG=debug if resolved_env != "production" else False,
        DATABASE_URL=os.getenv("DATABASE_URL", "sqlite:///./rentflow.db"),
        DB_CONNECTIVITY_REQUIRED=_as_bool(
            os.getenv("DB_CONNECTIVITY_REQUIRED"), default=(resolved_env == "production")
        ),
        CELERY_BROKER_URL=broker_url,
        CELERY_RESULT_BACKEND=os.getenv("CELERY_RESULT_BACKEND", broker_url),
        API_PREFIX=os.getenv("API_PREFIX", "/api/v1"),
        LOG_LEVEL=os.getenv("LOG_LEVEL", "INFO").upper(),
        LOG_FILE=os.getenv("LOG_FILE", "rentflow.log"),
        INVOICE_DUE_DAY=int(os.getenv("INVOICE_DUE_DAY", "10")),
        INVOICE_GENERATION_DAY=int(os.getenv("INVOICE_GENERATION_DAY", "10")),
        INVOICE_GENERATION_HOUR=int(os.getenv("INVOICE_GENERATION_HOUR", "0")),
        MATCH_CANDIDATE_FLOOR=float(os.getenv("MATCH_CANDIDATE_FLOOR", "60")),
        MATCH_CONFIRM_THRESHOLD=float(os.getenv("MATCH_CONFIRM_THRESHOLD", "70")),
        PHONE_MATCH_DIGITS=int(os.getenv("PHONE_MATCH_DIGITS", "9")),
    )
    _validate_config(config)
    return config


def _validate_database_url(database_url: str) -> None:
    parsed = urlparse(database_url)
    if parsed.scheme not in {"sqlite", "postgresql", "postgresql+psycopg2"}:
        raise ConfigurationError(
            "DATABASE_URL must use sqlite:// or postgresql:// style URL."
        )
    if parsed.scheme.startswith("postgresql") and not parsed.hostname:
        raise ConfigurationError("PostgreSQL DATABASE_URL is missing hostname.")


def _validate_config(config: Config) -> None:
    _validate_database_url(config.DATABASE_URL)

    if config.LOG_LEVEL not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
        raise ConfigurationError("LOG_LEVEL must be one of DEBUG/INFO/WARNING/ERROR/CRITICAL.")
    # Day 28 is the last day every month has.
    if not 1 <= config.INVOICE_DUE_DAY <= 28:
        raise ConfigurationError("INVOICE_DUE_DAY must be between 1 and 28.")
    if not 1 <= config.INVOICE_GENERATION_DAY <= 28:
        raise ConfigurationError("INVOICE_GENERATION_DAY must be between 1 and 28.")
    if not 0 <= config.INVOICE_GENERATION_HOUR <= 23:
        raise ConfigurationError("INVOICE_GENERATION_HOUR must be between 0 and 23.")
    for name in ("MATCH_CANDIDATE_FLOOR", "MATCH_CONFIRM_THRESHOLD"):
        if not 0 <= getattr(config, name) <= 100:
            raise ConfigurationError(f"{name} must be between 0 and 100.")
    if config.MATCH_CANDIDATE_FLOOR > config.MATCH_CONFIRM_THRESHOLD:
        raise ConfigurationError("MATCH_CANDIDATE_FLOOR must not exceed MATCH_CONFIRM_THRESHOLD.")
    if config.PHONE_MATCH_DIGITS < 1:
        raise ConfigurationError("PHONE_MATCH_DIGITS must be >= 1.")
    if config.is_production and "change_me" in config.DATABASE_URL.lower():
        raise ConfigurationError("Production DATABASE_URL uses placeholder credentials.")


@lru_cache(maxsize=8)
def get_config(env: str | None = None) -> Config:
    """Get validated configuration for the requested environment."""
    return _build_config(env)
