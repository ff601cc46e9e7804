"""Structured logging helpers for billing jobs and tasks."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any


@dataclass(frozen=True)
class LogContext:
    """Normalized context fields expected in structured logs."""

    task_name: str | None = None
    task_id: str | None = None
    log_id: int | None = None
    upload_id: int | None = None
    trace_id: str | None = None


def build_log_event(event: str, context: LogContext, **fields: Any) -> dict[str, Any]:
    """Build a normalized structured log payload."""
    payload: dict[str, Any] = {
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "event": event,
        "task_name": context.task_name,
        "task_id": context.task_id,
        "log_id": context.log_id,
        "upload_id": context.upload_id,
        "trace_id": context.trace_id,
    }
    payload.update(fields)
    return payload
