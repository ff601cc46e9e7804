"""Bring the configured database up to the latest schema revision."""

from __future__ import annotations

import logging
from pathlib import Path

from alembic import command
from alembic.config import Config as AlembicConfig

import rentflow.database.db as db_module
from rentflow.core.startup import bootstrap

PROJECT_ROOT = Path(__file__).resolve().parents[2]

logger = logging.getLogger(__name__)


def _build_alembic_config(database_url: str) -> AlembicConfig:
    cfg = AlembicConfig(str(PROJECT_ROOT / "alembic.ini"))
    cfg.set_main_option("script_location", str(PROJECT_ROOT / "migrations"))
    cfg.set_main_option("sqlalchemy.url", database_url)
    return cfg


def init_db() -> None:
    bootstrap()
    active_url = db_module.get_active_database_url()
    command.upgrade(_build_alembic_config(active_url), "head")
    logger.info(
        "database.schema.upgraded",
        extra={"event": "database.schema.upgraded", "database_scheme": active_url.split("://", 1)[0]},
    )


if __name__ == "__main__":
    init_db()
