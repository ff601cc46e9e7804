"""Celery application bootstrap."""

from __future__ import annotations

import os

from celery import Celery
from celery.schedules import crontab

from rentflow.core.config import get_config

cfg = get_config()

celery_app = Celery(
    "rentflow",
    broker=cfg.CELERY_BROKER_URL,
    backend=cfg.CELERY_RESULT_BACKEND,
    include=["rentflow.tasks.invoice_tasks"],
)
celery_app.conf.update(
    task_serializer="json",
    result_serializer="json",
    accept_content=["json"],
    timezone="UTC",
    enable_utc=True,
    task_track_started=True,
)

# Monthly generation run; overdue sweep once a day after midnight.
celery_app.conf.beat_schedule = {
    "generate-monthly-invoices": {
        "task": "invoices.generate_monthly",
        "schedule": crontab(
            minute=0,
            hour=cfg.INVOICE_GENERATION_HOUR,
            day_of_month=cfg.INVOICE_GENERATION_DAY,
        ),
    },
    "mark-overdue-invoices": {
        "task": "invoices.mark_overdue",
        "schedule": crontab(minute=30, hour=0),
    },
}

# Local/dev convenience: run tasks synchronously when requested.
if os.getenv("CELERY_TASK_ALWAYS_EAGER", "false").lower() in {"1", "true", "yes", "on"}:
    celery_app.conf.task_always_eager = True
