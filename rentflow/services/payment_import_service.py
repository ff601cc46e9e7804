"""Bulk payment import: match parsed feed rows to tenants and stage them for review."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from decimal import Decimal

from sqlalchemy.orm import Session

from rentflow.core.config import Config, get_config
from rentflow.core.exceptions import StorageUnavailableError
from rentflow.core.results import ErrorKind, Failure, Result, Success
from rentflow.models import (
    ImportedPayment,
    Invoice,
    Lease,
    MatchStatus,
    PaymentMethod,
    PaymentUpload,
    Tenant,
    UploadFileType,
    UploadStatus,
)
from rentflow.models.base import utcnow
from rentflow.orchestration.state_machine import UPLOAD_MACHINE, InvalidTransitionError
from rentflow.services.base_service import BaseService, failure_from_exception
from rentflow.services.invoice_service import InvoiceService
from rentflow.services.payment_matching import MatchResult, TenantCandidate, match_payment
from rentflow.utils.feed_parser import ParsedPayment
from rentflow.utils.money import to_money

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class UploadSummary:
    upload_id: int
    matched_count: int
    unmatched_count: int


@dataclass(frozen=True)
class AcceptedMatch:
    imported_payment_id: int
    payment_id: int
    invoice_id: int
    invoice_status: str
    paid_amount: Decimal


class PaymentImportService(BaseService):
    """Payment matching engine plus the admin actions on its output."""

    def __init__(self, db: Session, config: Config | None = None) -> None:
        super().__init__(db)
        self.config = config or get_config()

    def register_upload(
        self,
        file_name: str,
        file_type: UploadFileType | str = UploadFileType.CSV,
        total_rows: int = 0,
        uploaded_by: int | None = None,
    ) -> PaymentUpload:
        upload = self.gateway.insert_rows(
            PaymentUpload,
            [
                {
                    "file_name": file_name,
                    "file_type": UploadFileType(file_type),
                    "total_rows": total_rows,
                    "uploaded_by": uploaded_by,
                    "status": UploadStatus.PENDING_REVIEW,
                }
            ],
        )[0]
        self.commit()
        self.db.refresh(upload)
        return upload

    def match(self, payment: ParsedPayment, tenants: Iterable[TenantCandidate]) -> MatchResult:
        return match_payment(
            payment,
            tenants,
            candidate_floor=self.config.MATCH_CANDIDATE_FLOOR,
            confirm_threshold=self.config.MATCH_CONFIRM_THRESHOLD,
            phone_digits=self.config.PHONE_MATCH_DIGITS,
        )

    def process_upload(self, upload_id: int, payments: Iterable[ParsedPayment]) -> Result[UploadSummary]:
        """Match and persist every payment, then store the upload's counters.

        Each imported row is committed as soon as it is written. The first failing
        row stops the loop; rows already written stay in place.
        """
        try:
            self.gateway.ping()
        except StorageUnavailableError as exc:
            logger.error(
                "payment_upload.storage_unavailable",
                extra={"event": "payment_upload.storage_unavailable", "upload_id": upload_id},
            )
            return Failure(ErrorKind.STORAGE_UNAVAILABLE, str(exc))

        matched_count = 0
        unmatched_count = 0
        try:
            upload = self.gateway.get(PaymentUpload, upload_id)
            if upload is None:
                return Failure(ErrorKind.NOT_FOUND, f"Payment upload {upload_id} not found.")

            tenants = [
                TenantCandidate.from_tenant(tenant)
                for tenant in self.gateway.select_rows(Tenant, order_by=Tenant.id)
            ]
            for payment in payments:
                result = self.match(payment, tenants)
                self.gateway.insert_rows(
                    ImportedPayment,
                    [
                        {
                            "upload_id": upload_id,
                            "payment_date": payment.payment_date,
                            "amount": to_money(payment.amount),
                            "payer_name": payment.payer_name,
                            "phone_number": payment.phone_number,
                            "reference_code": payment.reference_code,
                            "description": payment.description,
                            "tenant_id": result.tenant_id,
                            "match_status": result.match_status,
                            "match_confidence": result.match_confidence,
                        }
                    ],
                )
                self.commit()
                if result.is_matched:
                    matched_count += 1
                else:
                    unmatched_count += 1

            self.gateway.update_rows(
                PaymentUpload,
                {"matched_count": matched_count, "unmatched_count": unmatched_count},
                id=upload_id,
            )
            self.commit()
        except Exception as exc:
            self.rollback()
            logger.exception(
                "payment_upload.failed",
                extra={
                    "event": "payment_upload.failed",
                    "upload_id": upload_id,
                    "rows_written": matched_count + unmatched_count,
                },
            )
            self._mark_upload_failed(upload_id, matched_count, unmatched_count)
            return failure_from_exception(exc)

        logger.info(
            "payment_upload.processed",
            extra={
                "event": "payment_upload.processed",
                "upload_id": upload_id,
                "matched_count": matched_count,
                "unmatched_count": unmatched_count,
            },
        )
        return Success(UploadSummary(upload_id, matched_count, unmatched_count))

    def _mark_upload_failed(self, upload_id: int, matched_count: int, unmatched_count: int) -> None:
        try:
            upload = self.gateway.get(PaymentUpload, upload_id)
            if upload is None or not UPLOAD_MACHINE.can_transition(
                UploadStatus(upload.status).value, UploadStatus.FAILED.value
            ):
                return
            self.gateway.update_rows(
                PaymentUpload,
                {
                    "status": UploadStatus.FAILED,
                    "matched_count": matched_count,
                    "unmatched_count": unmatched_count,
                },
                id=upload_id,
            )
            self.commit()
        except Exception:
            self.rollback()
            logger.exception(
                "payment_upload.failure_mark_failed",
                extra={"event": "payment_upload.failure_mark_failed", "upload_id": upload_id},
            )

    def list_imported_payments(
        self, upload_id: int, match_status: MatchStatus | str | None = None
    ) -> list[ImportedPayment]:
        filters = {"upload_id": upload_id}
        if match_status is not None:
            filters["match_status"] = MatchStatus(match_status)
        return self.gateway.select_rows(ImportedPayment, order_by=ImportedPayment.id, **filters)

    def assign_tenant(self, imported_payment_id: int, tenant_id: int) -> Result[ImportedPayment]:
        """Manual match chosen by an admin."""
        try:
            row = self.gateway.get(ImportedPayment, imported_payment_id)
            if row is None:
                return Failure(ErrorKind.NOT_FOUND, f"Imported payment {imported_payment_id} not found.")
            if row.is_processed:
                return Failure(ErrorKind.INVALID_STATE, "Imported payment has already been processed.")
            if self.gateway.get(Tenant, tenant_id) is None:
                return Failure(ErrorKind.NOT_FOUND, f"Tenant {tenant_id} not found.")

            row.tenant_id = tenant_id
            row.match_status = MatchStatus.MANUAL
            row.match_confidence = 100
            self.commit()
            self.db.refresh(row)
        except Exception as exc:
            self.rollback()
            logger.exception(
                "imported_payment.assign_failed",
                extra={"event": "imported_payment.assign_failed", "imported_payment_id": imported_payment_id},
            )
            return failure_from_exception(exc)
        return Success(row)

    def accept_match(
        self,
        imported_payment_id: int,
        invoice_id: int,
        method: PaymentMethod | str = PaymentMethod.BANK,
    ) -> Result[AcceptedMatch]:
        """Turn a matched import row into a recorded payment against ``invoice_id``."""
        try:
            row = self.gateway.get(ImportedPayment, imported_payment_id)
            if row is None:
                return Failure(ErrorKind.NOT_FOUND, f"Imported payment {imported_payment_id} not found.")
            if row.is_processed:
                return Failure(ErrorKind.INVALID_STATE, "Imported payment has already been processed.")
            if row.tenant_id is None or MatchStatus(row.match_status) == MatchStatus.UNMATCHED:
                return Failure(ErrorKind.INVALID_STATE, "Assign a tenant before accepting this payment.")

            invoice = self.gateway.get(Invoice, invoice_id)
            if invoice is None:
                return Failure(ErrorKind.NOT_FOUND, f"Invoice {invoice_id} not found.")
            lease = self.gateway.get(Lease, invoice.lease_id)
            if lease is None or lease.tenant_id != row.tenant_id:
                return Failure(ErrorKind.VALIDATION, "Invoice does not belong to the matched tenant.")

            row.invoice_id = invoice_id
            row.is_processed = True
            # record_payment commits the imported row together with the payment.
            payment = InvoiceService(self.db).record_payment(
                invoice_id=invoice_id,
                amount=row.amount,
                payment_date=row.payment_date,
                method=method,
                transaction_reference=row.reference_code,
                notes=f"Imported payment #{row.id} from {row.payer_name}",
            )
            invoice = self.gateway.get(Invoice, invoice_id)
        except Exception as exc:
            self.rollback()
            logger.exception(
                "imported_payment.accept_failed",
                extra={"event": "imported_payment.accept_failed", "imported_payment_id": imported_payment_id},
            )
            return failure_from_exception(exc)

        logger.info(
            "imported_payment.accepted",
            extra={
                "event": "imported_payment.accepted",
                "imported_payment_id": imported_payment_id,
                "payment_id": payment.id,
                "invoice_id": invoice_id,
            },
        )
        return Success(
            AcceptedMatch(
                imported_payment_id=imported_payment_id,
                payment_id=payment.id,
                invoice_id=invoice_id,
                invoice_status=invoice.status.value,
                paid_amount=to_money(invoice.paid_amount),
            )
        )

    def complete_upload(self, upload_id: int) -> Result[PaymentUpload]:
        """Close an upload once every matched row has been accepted."""
        try:
            upload = self.gateway.get(PaymentUpload, upload_id)
            if upload is None:
                return Failure(ErrorKind.NOT_FOUND, f"Payment upload {upload_id} not found.")
            if UploadStatus(upload.status) == UploadStatus.PROCESSED:
                return Success(upload)

            outstanding = self.gateway.select_rows(
                ImportedPayment,
                ImportedPayment.match_status.in_([MatchStatus.MATCHED, MatchStatus.MANUAL]),
                upload_id=upload_id,
                is_processed=False,
                limit=1,
            )
            if outstanding:
                return Failure(ErrorKind.INVALID_STATE, "Matched payments are still awaiting acceptance.")

            UPLOAD_MACHINE.assert_transition(UploadStatus(upload.status).value, UploadStatus.PROCESSED.value)
            upload.status = UploadStatus.PROCESSED
            upload.processed_at = utcnow()
            self.commit()
            self.db.refresh(upload)
        except InvalidTransitionError as exc:
            self.rollback()
            return Failure(ErrorKind.INVALID_STATE, str(exc))
        except Exception as exc:
            self.rollback()
            logger.exception(
                "payment_upload.complete_failed",
                extra={"event": "payment_upload.complete_failed", "upload_id": upload_id},
            )
            return failure_from_exception(exc)
        return Success(upload)
