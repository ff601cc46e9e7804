"""Startup checks run before the API or worker starts taking work.

Connectivity is verified first. The billing and matching settings are already
range-checked by ``get_config``; here we only warn about combinations that are
valid but leave the payment review queue empty or never confirm a name match.
"""

from __future__ import annotations

import logging

from rentflow.core.config import Config, get_config
from rentflow.core.logging_config import configure_logging
from rentflow.database.db import get_active_database_url, verify_database_connection

logger = logging.getLogger(__name__)

# Below this gap almost every name match lands straight in matched or unmatched.
MIN_REVIEW_BAND = 5.0


def billing_warnings(config: Config) -> list[str]:
    """Return warning events for match thresholds that starve the review queue.

    Confidence tops out at 100 and a name match must score strictly above the
    confirm threshold.
    """
    warnings: list[str] = []
    if config.MATCH_CONFIRM_THRESHOLD - config.MATCH_CANDIDATE_FLOOR < MIN_REVIEW_BAND:
        warnings.append("startup.matching.narrow_review_band")
    if config.MATCH_CONFIRM_THRESHOLD >= 100:
        warnings.append("startup.matching.name_matching_disabled")
    return warnings


def _check_database(config: Config) -> str:
    database_ok = verify_database_connection()
    active_database_url = get_active_database_url()
    if not database_ok and config.DB_CONNECTIVITY_REQUIRED:
        raise RuntimeError("Database connectivity check failed.")
    if not database_ok:
        logger.warning(
            "startup.database.connectivity_optional_failed",
            extra={"event": "startup.database.connectivity_optional_failed"},
        )
    if config.is_production and active_database_url.startswith("sqlite"):
        logger.warning(
            "startup.production.sqlite_detected",
            extra={"event": "startup.production.sqlite_detected"},
        )
    return active_database_url


def validate_startup_config() -> None:
    """Fail-fast connectivity check, then billing config warnings."""
    config = get_config()
    active_database_url = _check_database(config)

    for event in billing_warnings(config):
        logger.warning(
            event,
            extra={
                "event": event,
                "match_candidate_floor": config.MATCH_CANDIDATE_FLOOR,
                "match_confirm_threshold": config.MATCH_CONFIRM_THRESHOLD,
            },
        )

    logger.info(
        "startup.config.validated",
        extra={
            "event": "startup.config.validated",
            "env": config.ENV,
            "database_url_scheme": active_database_url.split("://", 1)[0],
            "db_connectivity_required": config.DB_CONNECTIVITY_REQUIRED,
            "invoice_schedule": f"day {config.INVOICE_GENERATION_DAY} {config.INVOICE_GENERATION_HOUR:02d}:00",
            "invoice_due_day": config.INVOICE_DUE_DAY,
            "match_thresholds": [config.MATCH_CANDIDATE_FLOOR, config.MATCH_CONFIRM_THRESHOLD],
        },
    )


def bootstrap() -> None:
    """Initialize logging and validate runtime configuration."""
    configure_logging()
    validate_startup_config()
