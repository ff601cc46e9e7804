"""Monthly invoice generation, admin review and finalization.

A generation run turns every active lease into a draft (``PendingInvoice``) under a
new ``GenerationLog``. Drafts stay editable while the log is ``pending_review``.
Finalizing a log converts its drafts into ``Invoice`` rows, deletes the drafts and
moves the log to ``finalized`` in a single transaction, inserting before deleting.
A run that errors moves its log to ``failed`` (or writes a ``failed`` log when none
was created yet).

Only one non-failed run is allowed per billing period.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Any

from sqlalchemy.orm import Session

from rentflow.core.config import Config, get_config
from rentflow.core.exceptions import StorageUnavailableError
from rentflow.core.results import ErrorKind, Failure, Result, Success
from rentflow.models import GenerationLog, GenerationStatus, Invoice, InvoiceStatus, Lease, LeaseStatus, PendingInvoice
from rentflow.orchestration.state_machine import GENERATION_LOG_MACHINE, InvalidTransitionError
from rentflow.services.base_service import BaseService, failure_from_exception
from rentflow.services.invoice_service import InvoiceService
from rentflow.utils.billing_period import BillingPeriod
from rentflow.utils.ids import reserve_invoice_number
from rentflow.utils.money import ZERO, to_money

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GenerationSummary:
    billing_period: str
    invoices_generated: int
    properties_affected: int
    log_id: int | None


@dataclass(frozen=True)
class FinalizationSummary:
    log_id: int
    invoices_finalized: int


class InvoiceGenerationService(BaseService):
    """Invoice lifecycle engine: generate, review, finalize."""

    def __init__(self, db: Session, config: Config | None = None) -> None:
        super().__init__(db)
        self.config = config or get_config()

    # ------------------------------------------------------------------
    # generation
    # ------------------------------------------------------------------

    def generate_for_current_period(self, today: date | None = None) -> Result[GenerationSummary]:
        today = today or date.today()
        period = BillingPeriod.containing(today)

        try:
            self.gateway.ping()
        except StorageUnavailableError as exc:
            logger.error(
                "invoice_generation.storage_unavailable",
                extra={"event": "invoice_generation.storage_unavailable", "billing_period": period.label},
            )
            return Failure(ErrorKind.STORAGE_UNAVAILABLE, str(exc))

        log_id: int | None = None
        try:
            leases = self.gateway.select_rows(Lease, status=LeaseStatus.ACTIVE, order_by=Lease.id)
            if not leases:
                logger.info(
                    "invoice_generation.no_active_leases",
                    extra={"event": "invoice_generation.no_active_leases", "billing_period": period.label},
                )
                return Success(GenerationSummary(period.label, 0, 0, None))

            if self._period_already_generated(period):
                logger.warning(
                    "invoice_generation.duplicate_period",
                    extra={"event": "invoice_generation.duplicate_period", "billing_period": period.label},
                )
                return Failure(
                    ErrorKind.DUPLICATE_PERIOD,
                    f"Invoices for {period.display_name} have already been generated.",
                )

            log = self.gateway.insert_rows(
                GenerationLog,
                [
                    {
                        "billing_period": period.label,
                        "invoices_generated": 0,
                        "properties_affected": 0,
                        "status": GenerationStatus.PENDING_REVIEW,
                        "details": f"Invoice generation for {period.display_name}",
                    }
                ],
            )[0]
            log_id = log.id
            self.commit()
            logger.info(
                "invoice_generation.started",
                extra={"event": "invoice_generation.started", "log_id": log_id, "lease_count": len(leases)},
            )

            rows = self._build_pending_rows(leases, period, today, log_id)
            self.gateway.insert_rows(PendingInvoice, rows)
            # Counts distinct leases; there is no join to units/properties here.
            properties_affected = len({row["lease_id"] for row in rows})
            self.gateway.update_rows(
                GenerationLog,
                {
                    "invoices_generated": len(rows),
                    "properties_affected": properties_affected,
                    "details": (
                        f"Successfully generated {len(rows)} invoices for review. "
                        "Status: Pending Admin Review"
                    ),
                },
                id=log_id,
            )
            self.commit()
        except Exception as exc:
            self.rollback()
            logger.exception(
                "invoice_generation.failed",
                extra={"event": "invoice_generation.failed", "log_id": log_id, "billing_period": period.label},
            )
            self._record_generation_failure(log_id, period, exc)
            return failure_from_exception(exc)

        logger.info(
            "invoice_generation.completed",
            extra={
                "event": "invoice_generation.completed",
                "log_id": log_id,
                "invoices_generated": len(rows),
                "properties_affected": properties_affected,
            },
        )
        return Success(GenerationSummary(period.label, len(rows), properties_affected, log_id))

    def _period_already_generated(self, period: BillingPeriod) -> bool:
        existing = self.gateway.select_rows(
            GenerationLog,
            GenerationLog.status.in_([GenerationStatus.PENDING_REVIEW, GenerationStatus.FINALIZED]),
            billing_period=period.label,
            limit=1,
        )
        return bool(existing)

    def _build_pending_rows(
        self, leases: list[Lease], period: BillingPeriod, today: date, log_id: int
    ) -> list[dict[str, Any]]:
        taken = InvoiceService(self.db).taken_invoice_numbers(period.year, period.month)
        due_date = period.due_date(self.config.INVOICE_DUE_DAY)
        rows: list[dict[str, Any]] = []
        for lease in leases:
            invoice_number = reserve_invoice_number(period.year, period.month, taken)
            taken.add(invoice_number)

            rent_amount = to_money(lease.monthly_rent)
            service_charge_amount = to_money(lease.service_charge)
            utilities_amount = ZERO
            rows.append(
                {
                    "lease_id": lease.id,
                    "invoice_number": invoice_number,
                    "invoice_date": today,
                    "due_date": due_date,
                    "period_start": period.start,
                    "period_end": period.end,
                    "rent_amount": rent_amount,
                    "service_charge_amount": service_charge_amount,
                    "utilities_amount": utilities_amount,
                    "total_amount": rent_amount + service_charge_amount + utilities_amount,
                    "notes": f"Auto-generated invoice for {period.display_name}",
                    "generation_log_id": log_id,
                }
            )
        return rows

    def _record_generation_failure(self, log_id: int | None, period: BillingPeriod, exc: Exception) -> None:
        """Best effort: leave a ``failed`` log behind. Never raises."""
        details = f"Invoice generation failed: {exc}"
        try:
            log = self.gateway.get(GenerationLog, log_id) if log_id is not None else None
            if log is not None:
                self._transition(log, GenerationStatus.FAILED, details=details)
            else:
                self.gateway.insert_rows(
                    GenerationLog,
                    [
                        {
                            "billing_period": period.label,
                            "invoices_generated": 0,
                            "properties_affected": 0,
                            "status": GenerationStatus.FAILED,
                            "details": details,
                        }
                    ],
                )
            self.commit()
        except Exception:
            self.rollback()
            logger.exception(
                "invoice_generation.failure_log_failed",
                extra={"event": "invoice_generation.failure_log_failed", "log_id": log_id},
            )

    def _transition(self, log: GenerationLog, target: GenerationStatus, **patch: Any) -> None:
        GENERATION_LOG_MACHINE.assert_transition(GenerationStatus(log.status).value, target.value)
        self.gateway.update_rows(GenerationLog, {"status": target, **patch}, id=log.id)

    # ------------------------------------------------------------------
    # review
    # ------------------------------------------------------------------

    def list_generation_logs(self, limit: int = 50) -> list[GenerationLog]:
        return self.gateway.select_rows(GenerationLog, order_by=GenerationLog.id.desc(), limit=limit)

    def get_generation_log(self, log_id: int) -> GenerationLog | None:
        return self.gateway.get(GenerationLog, log_id)

    def list_pending_invoices(self, log_id: int) -> list[PendingInvoice]:
        return self.gateway.select_rows(PendingInvoice, generation_log_id=log_id, order_by=PendingInvoice.id)

    def update_pending_invoice(
        self,
        pending_id: int,
        rent_amount: Decimal | int | str | None = None,
        service_charge_amount: Decimal | int | str | None = None,
        utilities_amount: Decimal | int | str | None = None,
        notes: str | None = None,
    ) -> Result[PendingInvoice]:
        """Edit a draft's line amounts or notes; the total is recomputed."""
        try:
            pending = self.gateway.get(PendingInvoice, pending_id)
            if pending is None:
                return Failure(ErrorKind.NOT_FOUND, f"Pending invoice {pending_id} not found.")
            log = self.gateway.get(GenerationLog, pending.generation_log_id)
            if log is None or GenerationStatus(log.status) != GenerationStatus.PENDING_REVIEW:
                return Failure(ErrorKind.INVALID_STATE, "Only drafts awaiting review can be edited.")

            rent = to_money(rent_amount if rent_amount is not None else pending.rent_amount)
            service = to_money(
                service_charge_amount if service_charge_amount is not None else pending.service_charge_amount
            )
            utilities = to_money(utilities_amount if utilities_amount is not None else pending.utilities_amount)
            if min(rent, service, utilities) < 0:
                return Failure(ErrorKind.VALIDATION, "Invoice amounts must not be negative.")

            pending.rent_amount = rent
            pending.service_charge_amount = service
            pending.utilities_amount = utilities
            pending.total_amount = rent + service + utilities
            if notes is not None:
                pending.notes = notes
            self.commit()
            self.db.refresh(pending)
        except Exception as exc:
            self.rollback()
            logger.exception(
                "pending_invoice.update_failed",
                extra={"event": "pending_invoice.update_failed", "pending_id": pending_id},
            )
            return failure_from_exception(exc)
        return Success(pending)

    # ------------------------------------------------------------------
    # finalization
    # ------------------------------------------------------------------

    def finalize(self, log_id: int) -> Result[FinalizationSummary]:
        try:
            self.gateway.ping()
        except StorageUnavailableError as exc:
            logger.error(
                "invoice_finalization.storage_unavailable",
                extra={"event": "invoice_finalization.storage_unavailable", "log_id": log_id},
            )
            return Failure(ErrorKind.STORAGE_UNAVAILABLE, str(exc))

        try:
            log = self.gateway.get(GenerationLog, log_id)
            if log is None:
                return Failure(ErrorKind.NOT_FOUND, f"Generation log {log_id} not found.")

            pending = self.list_pending_invoices(log_id)
            if not pending:
                logger.info(
                    "invoice_finalization.nothing_pending",
                    extra={"event": "invoice_finalization.nothing_pending", "log_id": log_id},
                )
                return Success(FinalizationSummary(log_id, 0))

            self._transition(
                log,
                GenerationStatus.FINALIZED,
                details=f"Finalized {len(pending)} invoices. Ready for collection.",
            )
            self.gateway.insert_rows(Invoice, [self._invoice_row(draft) for draft in pending])
            self.gateway.delete_rows(PendingInvoice, generation_log_id=log_id)
            self.commit()
        except InvalidTransitionError as exc:
            self.rollback()
            logger.warning(
                "invoice_finalization.invalid_state",
                extra={"event": "invoice_finalization.invalid_state", "log_id": log_id},
            )
            return Failure(ErrorKind.INVALID_STATE, str(exc))
        except Exception as exc:
            self.rollback()
            logger.exception(
                "invoice_finalization.failed",
                extra={"event": "invoice_finalization.failed", "log_id": log_id},
            )
            return failure_from_exception(exc)

        logger.info(
            "invoice_finalization.completed",
            extra={"event": "invoice_finalization.completed", "log_id": log_id, "invoices_finalized": len(pending)},
        )
        return Success(FinalizationSummary(log_id, len(pending)))

    @staticmethod
    def _invoice_row(draft: PendingInvoice) -> dict[str, Any]:
        return {
            "lease_id": draft.lease_id,
            "invoice_number": draft.invoice_number,
            "invoice_date": draft.invoice_date,
            "due_date": draft.due_date,
            "period_start": draft.period_start,
            "period_end": draft.period_end,
            "rent_amount": draft.rent_amount,
            "service_charge_amount": draft.service_charge_amount,
            "utilities_amount": draft.utilities_amount,
            "total_amount": draft.total_amount,
            "paid_amount": ZERO,
            "status": InvoiceStatus.UNPAID,
            "notes": draft.notes,
        }
