"""Invoice, draft and generation-log schemas for API contracts."""

from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field

from rentflow.models.enums import GenerationStatus, InvoiceStatus, PaymentMethod


class GenerationSummaryResponse(BaseModel):
    billing_period: str
    invoices_generated: int
    properties_affected: int
    log_id: int | None = None


class FinalizationSummaryResponse(BaseModel):
    log_id: int
    invoices_finalized: int


class GenerationLogResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    generation_date: datetime
    billing_period: str | None = None
    invoices_generated: int
    properties_affected: int
    status: GenerationStatus
    details: str | None = None


class PendingInvoiceResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    lease_id: int
    generation_log_id: int
    invoice_number: str
    invoice_date: date
    due_date: date
    period_start: date
    period_end: date
    rent_amount: Decimal
    service_charge_amount: Decimal
    utilities_amount: Decimal
    total_amount: Decimal
    notes: str | None = None


class PendingInvoiceUpdateRequest(BaseModel):
    rent_amount: Decimal | None = Field(default=None, ge=0, max_digits=12, decimal_places=2)
    service_charge_amount: Decimal | None = Field(default=None, ge=0, max_digits=12, decimal_places=2)
    utilities_amount: Decimal | None = Field(default=None, ge=0, max_digits=12, decimal_places=2)
    notes: str | None = Field(default=None, max_length=4000)


class InvoiceResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    lease_id: int
    invoice_number: str
    invoice_date: date
    due_date: date
    period_start: date
    period_end: date
    rent_amount: Decimal
    service_charge_amount: Decimal
    utilities_amount: Decimal
    total_amount: Decimal
    paid_amount: Decimal
    status: InvoiceStatus
    notes: str | None = None


class PaymentCreateRequest(BaseModel):
    amount: Decimal = Field(gt=0, max_digits=12, decimal_places=2)
    payment_date: date
    payment_method: PaymentMethod = PaymentMethod.CASH
    transaction_reference: str | None = Field(default=None, max_length=100)
    notes: str | None = Field(default=None, max_length=4000)


class PaymentResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    invoice_id: int
    lease_id: int
    payment_date: date
    amount: Decimal
    payment_method: PaymentMethod
    transaction_reference: str | None = None
