from __future__ import annotations

import re
from datetime import date
from decimal import Decimal

from sqlalchemy import select

from rentflow.core.exceptions import DatabaseError, ServiceError, StorageUnavailableError
from rentflow.core.results import ErrorKind, Failure, Success
from rentflow.models import GenerationLog, GenerationStatus, Invoice, InvoiceStatus, LeaseStatus, PendingInvoice
import rentflow.services.invoice_generation_service as generation_module
from rentflow.services.invoice_generation_service import InvoiceGenerationService

INVOICE_NUMBER = re.compile(r"^INV-\d{6}-[A-Z0-9]{6}$")


def _logs(session):
    return list(session.scalars(select(GenerationLog).order_by(GenerationLog.id)))


def _pending(session):
    return list(session.scalars(select(PendingInvoice).order_by(PendingInvoice.id)))


def _invoices(session):
    return list(session.scalars(select(Invoice).order_by(Invoice.id)))


def test_generation_creates_reviewable_drafts(session, make_lease):
    lease = make_lease(monthly_rent="10500.00", service_charge="5000.00")
    service = InvoiceGenerationService(db=session)

    result = service.generate_for_current_period(today=date(2025, 2, 10))

    assert isinstance(result, Success)
    summary = result.value
    assert summary.billing_period == "2025-02"
    assert summary.invoices_generated == 1
    assert summary.properties_affected == 1

    [log] = _logs(session)
    assert log.id == summary.log_id
    assert log.status == GenerationStatus.PENDING_REVIEW
    assert log.invoices_generated == 1
    assert log.details == "Successfully generated 1 invoices for review. Status: Pending Admin Review"

    [draft] = _pending(session)
    assert draft.lease_id == lease.id
    assert draft.generation_log_id == log.id
    assert INVOICE_NUMBER.match(draft.invoice_number)
    assert draft.invoice_number.startswith("INV-202502-")
    assert draft.invoice_date == date(2025, 2, 10)
    assert draft.period_start == date(2025, 2, 1)
    assert draft.period_end == date(2025, 2, 28)
    assert draft.due_date == date(2025, 3, 10)
    assert draft.rent_amount == Decimal("10500.00")
    assert draft.service_charge_amount == Decimal("5000.00")
    assert draft.utilities_amount == Decimal("0.00")
    assert draft.total_amount == Decimal("15500.00")
    assert draft.notes == "Auto-generated invoice for February 2025"
    assert _invoices(session) == []


def test_leap_year_and_december_periods(session, make_lease):
    make_lease()
    service = InvoiceGenerationService(db=session)

    assert service.generate_for_current_period(today=date(2024, 2, 15)).ok
    assert service.generate_for_current_period(today=date(2025, 12, 10)).ok

    february, december = _pending(session)
    assert february.period_end == date(2024, 2, 29)
    assert december.period_end == date(2025, 12, 31)
    assert december.due_date == date(2026, 1, 10)
    assert december.invoice_number.startswith("INV-202512-")


def test_only_active_leases_are_billed(session, make_lease):
    make_lease(first_name="Active", last_name="One")
    make_lease(first_name="Active", last_name="Two")
    make_lease(first_name="Gone", last_name="Away", status=LeaseStatus.TERMINATED)

    result = InvoiceGenerationService(db=session).generate_for_current_period(today=date(2025, 2, 10))

    assert result.value.invoices_generated == 2
    assert result.value.properties_affected == 2
    numbers = [draft.invoice_number for draft in _pending(session)]
    assert len(set(numbers)) == 2


def test_no_active_leases_is_a_quiet_success(session, make_lease):
    make_lease(status=LeaseStatus.EXPIRED)

    result = InvoiceGenerationService(db=session).generate_for_current_period(today=date(2025, 2, 10))

    assert isinstance(result, Success)
    assert result.value.invoices_generated == 0
    assert result.value.properties_affected == 0
    assert result.value.log_id is None
    assert _logs(session) == []


def test_second_run_for_same_period_is_rejected(session, make_lease):
    make_lease()
    service = InvoiceGenerationService(db=session)
    assert service.generate_for_current_period(today=date(2025, 2, 10)).ok

    result = service.generate_for_current_period(today=date(2025, 2, 20))

    assert isinstance(result, Failure)
    assert result.kind == ErrorKind.DUPLICATE_PERIOD
    assert "February 2025" in result.message
    assert len(_logs(session)) == 1
    assert len(_pending(session)) == 1


def test_failed_run_does_not_block_a_retry(session, make_lease):
    make_lease()
    session.add(GenerationLog(billing_period="2025-02", status=GenerationStatus.FAILED, details="boom"))
    session.commit()

    result = InvoiceGenerationService(db=session).generate_for_current_period(today=date(2025, 2, 10))

    assert result.ok
    assert result.value.invoices_generated == 1


def test_draft_insert_failure_marks_log_failed(session, make_lease, monkeypatch):
    make_lease()
    service = InvoiceGenerationService(db=session)
    real_insert = service.gateway.insert_rows

    def failing_insert(model, rows):
        if model is PendingInvoice:
            raise DatabaseError("insert PendingInvoice: disk full")
        return real_insert(model, rows)

    monkeypatch.setattr(service.gateway, "insert_rows", failing_insert)

    result = service.generate_for_current_period(today=date(2025, 2, 10))

    assert isinstance(result, Failure)
    assert result.kind == ErrorKind.STORAGE_ERROR
    [log] = _logs(session)
    assert log.status == GenerationStatus.FAILED
    assert log.details.startswith("Invoice generation failed:")
    assert "disk full" in log.details
    assert _pending(session) == []


def test_invoice_number_exhaustion_is_a_service_error(session, make_lease, monkeypatch):
    make_lease()

    def exhausted(year, month, taken):
        raise ServiceError("Could not allocate a unique invoice number after 25 attempts.")

    monkeypatch.setattr(generation_module, "reserve_invoice_number", exhausted)

    result = InvoiceGenerationService(db=session).generate_for_current_period(today=date(2025, 2, 10))

    assert isinstance(result, Failure)
    assert result.kind == ErrorKind.SERVICE_ERROR
    [log] = _logs(session)
    assert log.status == GenerationStatus.FAILED
    assert _pending(session) == []


def test_unreachable_storage_writes_nothing(session, make_lease, monkeypatch):
    make_lease()
    service = InvoiceGenerationService(db=session)

    def unreachable():
        raise StorageUnavailableError("ping: database unavailable")

    monkeypatch.setattr(service.gateway, "ping", unreachable)

    result = service.generate_for_current_period(today=date(2025, 2, 10))

    assert isinstance(result, Failure)
    assert result.kind == ErrorKind.STORAGE_UNAVAILABLE
    assert _logs(session) == []
    assert _pending(session) == []


def test_finalize_moves_drafts_to_invoices(session, make_lease):
    make_lease()
    service = InvoiceGenerationService(db=session)
    log_id = service.generate_for_current_period(today=date(2025, 2, 10)).value.log_id
    [draft] = _pending(session)
    draft_number = draft.invoice_number

    result = service.finalize(log_id)

    assert isinstance(result, Success)
    assert result.value.log_id == log_id
    assert result.value.invoices_finalized == 1
    assert _pending(session) == []
    [invoice] = _invoices(session)
    assert invoice.invoice_number == draft_number
    assert invoice.status == InvoiceStatus.UNPAID
    assert invoice.paid_amount == Decimal("0.00")
    assert invoice.total_amount == Decimal("15500.00")
    assert invoice.due_date == date(2025, 3, 10)
    log = session.get(GenerationLog, log_id)
    session.refresh(log)
    assert log.status == GenerationStatus.FINALIZED
    assert log.details == "Finalized 1 invoices. Ready for collection."


def test_finalize_twice_is_a_no_op(session, make_lease):
    make_lease()
    service = InvoiceGenerationService(db=session)
    log_id = service.generate_for_current_period(today=date(2025, 2, 10)).value.log_id
    assert service.finalize(log_id).value.invoices_finalized == 1

    again = service.finalize(log_id)

    assert isinstance(again, Success)
    assert again.value.invoices_finalized == 0
    assert len(_invoices(session)) == 1


def test_finalize_unknown_log(session):
    result = InvoiceGenerationService(db=session).finalize(999)
    assert isinstance(result, Failure)
    assert result.kind == ErrorKind.NOT_FOUND


def test_finalize_refuses_failed_log_with_drafts(session, make_lease):
    lease = make_lease()
    log = GenerationLog(billing_period="2025-02", status=GenerationStatus.FAILED)
    session.add(log)
    session.flush()
    session.add(
        PendingInvoice(
            lease_id=lease.id,
            invoice_number="INV-202502-ABC123",
            invoice_date=date(2025, 2, 10),
            due_date=date(2025, 3, 10),
            period_start=date(2025, 2, 1),
            period_end=date(2025, 2, 28),
            rent_amount=Decimal("100.00"),
            total_amount=Decimal("100.00"),
            generation_log_id=log.id,
        )
    )
    session.commit()

    result = InvoiceGenerationService(db=session).finalize(log.id)

    assert isinstance(result, Failure)
    assert result.kind == ErrorKind.INVALID_STATE
    assert _invoices(session) == []
    assert len(_pending(session)) == 1


def test_pending_invoice_edit_recomputes_total(session, make_lease):
    make_lease()
    service = InvoiceGenerationService(db=session)
    service.generate_for_current_period(today=date(2025, 2, 10))
    [draft] = _pending(session)

    result = service.update_pending_invoice(draft.id, utilities_amount="1200.50", notes="Water arrears")

    assert isinstance(result, Success)
    assert result.value.utilities_amount == Decimal("1200.50")
    assert result.value.total_amount == Decimal("16700.50")
    assert result.value.notes == "Water arrears"


def test_pending_invoice_edit_rejects_negative_and_unknown(session, make_lease):
    make_lease()
    service = InvoiceGenerationService(db=session)
    service.generate_for_current_period(today=date(2025, 2, 10))
    [draft] = _pending(session)

    negative = service.update_pending_invoice(draft.id, rent_amount="-1")
    missing = service.update_pending_invoice(12345, rent_amount="10")

    assert negative.kind == ErrorKind.VALIDATION
    assert missing.kind == ErrorKind.NOT_FOUND


def test_review_listing(session, make_lease):
    make_lease()
    make_lease(first_name="Mary", last_name="Wanjiru")
    service = InvoiceGenerationService(db=session)
    log_id = service.generate_for_current_period(today=date(2025, 2, 10)).value.log_id

    assert [log.id for log in service.list_generation_logs()] == [log_id]
    assert service.get_generation_log(log_id).billing_period == "2025-02"
    assert len(service.list_pending_invoices(log_id)) == 2


def test_two_lease_february_scenario_round_trips_amounts(session, make_lease):
    make_lease(first_name="John", last_name="Doe", monthly_rent="10000.00", service_charge="500.00")
    make_lease(first_name="Mary", last_name="Wanjiru", monthly_rent="5000.00", service_charge="0.00")
    service = InvoiceGenerationService(db=session)

    log_id = service.generate_for_current_period(today=date(2024, 2, 1)).value.log_id
    drafts = _pending(session)
    assert [draft.total_amount for draft in drafts] == [Decimal("10500.00"), Decimal("5000.00")]
    assert {draft.due_date for draft in drafts} == {date(2024, 3, 10)}
    assert {draft.period_end for draft in drafts} == {date(2024, 2, 29)}
    expected = {
        draft.invoice_number: (draft.rent_amount, draft.service_charge_amount, draft.utilities_amount, draft.total_amount)
        for draft in drafts
    }

    assert service.finalize(log_id).value.invoices_finalized == 2

    finalized = {
        invoice.invoice_number: (
            invoice.rent_amount,
            invoice.service_charge_amount,
            invoice.utilities_amount,
            invoice.total_amount,
        )
        for invoice in _invoices(session)
    }
    assert finalized == expected
