"""Invoice service for direct invoice operations and payment recording."""

from __future__ import annotations

import logging
from datetime import date, datetime
from decimal import Decimal

from rentflow.core.exceptions import NotFoundError, ValidationError
from rentflow.models import Invoice, InvoiceStatus, Lease, Payment, PaymentMethod, PendingInvoice
from rentflow.services.base_service import BaseService
from rentflow.utils.billing_period import BillingPeriod
from rentflow.utils.ids import invoice_number_prefix, reserve_invoice_number
from rentflow.utils.money import ZERO, sum_money, to_money

logger = logging.getLogger(__name__)


def derive_invoice_status(paid_amount: Decimal, total_amount: Decimal) -> InvoiceStatus:
    if paid_amount >= total_amount:
        return InvoiceStatus.FULLY_PAID
    if paid_amount > 0:
        return InvoiceStatus.PARTIALLY_PAID
    return InvoiceStatus.UNPAID


def _to_date(value: str | date | datetime) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return datetime.strptime(value, "%Y-%m-%d").date()


class InvoiceService(BaseService):
    """Service for invoice creation, lookup and payment-driven status changes."""

    def taken_invoice_numbers(self, year: int, month: int) -> set[str]:
        """Numbers already used by invoices or drafts for the given month."""
        prefix = f"{invoice_number_prefix(year, month)}%"
        taken = {row.invoice_number for row in self.gateway.select_rows(Invoice, Invoice.invoice_number.like(prefix))}
        taken.update(
            row.invoice_number
            for row in self.gateway.select_rows(PendingInvoice, PendingInvoice.invoice_number.like(prefix))
        )
        return taken

    def create_invoice(
        self,
        lease_id: int,
        invoice_date: str | date | datetime,
        rent_amount: Decimal | int | str,
        service_charge_amount: Decimal | int | str = ZERO,
        utilities_amount: Decimal | int | str = ZERO,
        invoice_number: str | None = None,
        notes: str | None = None,
    ) -> Invoice:
        if self.gateway.get(Lease, lease_id) is None:
            raise NotFoundError(f"Lease {lease_id} not found.")

        amounts = [to_money(rent_amount), to_money(service_charge_amount), to_money(utilities_amount)]
        if any(amount < 0 for amount in amounts):
            raise ValidationError("Invoice amounts must not be negative.")

        issued_on = _to_date(invoice_date)
        period = BillingPeriod.containing(issued_on)
        if invoice_number is None:
            invoice_number = reserve_invoice_number(
                period.year, period.month, self.taken_invoice_numbers(period.year, period.month)
            )

        invoice = self.gateway.insert_rows(
            Invoice,
            [
                {
                    "lease_id": lease_id,
                    "invoice_number": invoice_number,
                    "invoice_date": issued_on,
                    "due_date": period.due_date(),
                    "period_start": period.start,
                    "period_end": period.end,
                    "rent_amount": amounts[0],
                    "service_charge_amount": amounts[1],
                    "utilities_amount": amounts[2],
                    "total_amount": sum(amounts, ZERO),
                    "paid_amount": ZERO,
                    "status": InvoiceStatus.UNPAID,
                    "notes": notes,
                }
            ],
        )[0]
        self.commit()
        self.db.refresh(invoice)
        return invoice

    def get_invoice(self, invoice_id: int) -> Invoice | None:
        return self.gateway.get(Invoice, invoice_id)

    def list_by_status(self, status: InvoiceStatus | str) -> list[Invoice]:
        return self.gateway.select_rows(Invoice, status=InvoiceStatus(status), order_by=Invoice.id)

    def list_by_lease(self, lease_id: int) -> list[Invoice]:
        return self.gateway.select_rows(Invoice, lease_id=lease_id, order_by=Invoice.period_start)

    def record_payment(
        self,
        invoice_id: int,
        amount: Decimal | int | str,
        payment_date: str | date | datetime,
        method: PaymentMethod | str = PaymentMethod.CASH,
        transaction_reference: str | None = None,
        notes: str | None = None,
    ) -> Payment:
        """Store a payment and re-derive the invoice's paid amount and status."""
        invoice = self.get_invoice(invoice_id)
        if invoice is None:
            raise NotFoundError(f"Invoice {invoice_id} not found.")
        amount = to_money(amount)
        if amount <= 0:
            raise ValidationError("Payment amount must be positive.")

        payment = self.gateway.insert_rows(
            Payment,
            [
                {
                    "invoice_id": invoice.id,
                    "lease_id": invoice.lease_id,
                    "payment_date": _to_date(payment_date),
                    "amount": amount,
                    "payment_method": PaymentMethod(method),
                    "transaction_reference": transaction_reference,
                    "notes": notes,
                }
            ],
        )[0]

        total_paid = sum_money(row.amount for row in self.gateway.select_rows(Payment, invoice_id=invoice.id))
        invoice.paid_amount = total_paid
        invoice.status = derive_invoice_status(total_paid, to_money(invoice.total_amount))
        self.commit()
        self.db.refresh(invoice)
        logger.info(
            "invoice.payment.recorded",
            extra={
                "event": "invoice.payment.recorded",
                "invoice_id": invoice.id,
                "payment_id": payment.id,
                "status": invoice.status.value,
            },
        )
        return payment

    def mark_overdue(self, as_of: date | None = None) -> int:
        """Flag open invoices whose due date has passed; returns how many changed."""
        cutoff = as_of or date.today()
        candidates = self.gateway.select_rows(
            Invoice,
            Invoice.status.in_([InvoiceStatus.UNPAID, InvoiceStatus.PARTIALLY_PAID]),
            Invoice.due_date < cutoff,
        )
        for invoice in candidates:
            invoice.status = InvoiceStatus.OVERDUE
        if candidates:
            self.commit()
        logger.info(
            "invoice.overdue.marked",
            extra={"event": "invoice.overdue.marked", "count": len(candidates), "as_of": cutoff.isoformat()},
        )
        return len(candidates)
