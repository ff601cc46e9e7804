"""Scheduled and on-demand invoice lifecycle tasks."""

from __future__ import annotations

import logging
from typing import Any

from rentflow.core.results import to_payload
from rentflow.database.db import get_db_session
from rentflow.services.invoice_generation_service import InvoiceGenerationService
from rentflow.services.invoice_service import InvoiceService
from rentflow.tasks.celery_app import celery_app
from rentflow.tasks.hooks import after_task, before_task
from rentflow.utils.ids import new_trace_id

logger = logging.getLogger(__name__)


def _task_context(task: Any, **fields: Any) -> dict[str, Any]:
    return {"task_id": getattr(task.request, "id", None), "trace_id": new_trace_id(), **fields}


@celery_app.task(bind=True, name="invoices.generate_monthly")
def generate_monthly_invoices(self) -> dict[str, Any]:
    context = _task_context(self)
    logger.info("task.start", extra=before_task("invoices.generate_monthly", context))
    with get_db_session() as db:
        payload = to_payload(InvoiceGenerationService(db).generate_for_current_period())
    context["log_id"] = payload.get("log_id")
    status = "succeeded" if payload["success"] else "failed"
    logger.info("task.finish", extra=after_task("invoices.generate_monthly", context, status=status))
    return payload


@celery_app.task(bind=True, name="invoices.finalize")
def finalize_generation_log(self, log_id: int) -> dict[str, Any]:
    context = _task_context(self, log_id=log_id)
    logger.info("task.start", extra=before_task("invoices.finalize", context))
    with get_db_session() as db:
        payload = to_payload(InvoiceGenerationService(db).finalize(log_id))
    status = "succeeded" if payload["success"] else "failed"
    logger.info("task.finish", extra=after_task("invoices.finalize", context, status=status))
    return payload


@celery_app.task(bind=True, name="invoices.mark_overdue")
def mark_overdue_invoices(self) -> dict[str, Any]:
    context = _task_context(self)
    logger.info("task.start", extra=before_task("invoices.mark_overdue", context))
    with get_db_session() as db:
        updated = InvoiceService(db).mark_overdue()
    logger.info("task.finish", extra=after_task("invoices.mark_overdue", context, status="succeeded"))
    return {"success": True, "invoices_marked_overdue": updated}
