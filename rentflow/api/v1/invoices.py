"""Invoice generation review, finalization and payment recording endpoints."""

from __future__ import annotations

from dataclasses import asdict

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from rentflow.api.v1._results import map_service_error, unwrap
from rentflow.core.dependencies import get_db_session
from rentflow.core.exceptions import RentflowException
from rentflow.schemas.invoices import (
    FinalizationSummaryResponse,
    GenerationLogResponse,
    GenerationSummaryResponse,
    InvoiceResponse,
    PaymentCreateRequest,
    PaymentResponse,
    PendingInvoiceResponse,
    PendingInvoiceUpdateRequest,
)
from rentflow.services.invoice_generation_service import InvoiceGenerationService
from rentflow.services.invoice_service import InvoiceService

router = APIRouter(prefix="/invoices", tags=["invoices"])


@router.post("/generate", response_model=GenerationSummaryResponse)
def trigger_generation(db: Session = Depends(get_db_session)) -> GenerationSummaryResponse:
    summary = unwrap(InvoiceGenerationService(db).generate_for_current_period())
    return GenerationSummaryResponse(**asdict(summary))


@router.get("/generation-logs", response_model=list[GenerationLogResponse])
def list_generation_logs(
    limit: int = Query(default=50, ge=1, le=500),
    db: Session = Depends(get_db_session),
) -> list[GenerationLogResponse]:
    logs = InvoiceGenerationService(db).list_generation_logs(limit=limit)
    return [GenerationLogResponse.model_validate(log) for log in logs]


@router.get("/generation-logs/{log_id}/pending", response_model=list[PendingInvoiceResponse])
def list_pending_invoices(log_id: int, db: Session = Depends(get_db_session)) -> list[PendingInvoiceResponse]:
    service = InvoiceGenerationService(db)
    if service.get_generation_log(log_id) is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="generation log not found")
    return [PendingInvoiceResponse.model_validate(row) for row in service.list_pending_invoices(log_id)]


@router.patch("/pending/{pending_id}", response_model=PendingInvoiceResponse)
def update_pending_invoice(
    pending_id: int,
    payload: PendingInvoiceUpdateRequest,
    db: Session = Depends(get_db_session),
) -> PendingInvoiceResponse:
    pending = unwrap(
        InvoiceGenerationService(db).update_pending_invoice(pending_id, **payload.model_dump(exclude_none=True))
    )
    return PendingInvoiceResponse.model_validate(pending)


@router.post("/generation-logs/{log_id}/finalize", response_model=FinalizationSummaryResponse)
def finalize_generation_log(log_id: int, db: Session = Depends(get_db_session)) -> FinalizationSummaryResponse:
    summary = unwrap(InvoiceGenerationService(db).finalize(log_id))
    return FinalizationSummaryResponse(**asdict(summary))


@router.get("/{invoice_id}", response_model=InvoiceResponse)
def get_invoice(invoice_id: int, db: Session = Depends(get_db_session)) -> InvoiceResponse:
    invoice = InvoiceService(db).get_invoice(invoice_id)
    if invoice is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="invoice not found")
    return InvoiceResponse.model_validate(invoice)


@router.post("/{invoice_id}/payments", response_model=PaymentResponse, status_code=status.HTTP_201_CREATED)
def record_payment(
    invoice_id: int,
    payload: PaymentCreateRequest,
    db: Session = Depends(get_db_session),
) -> PaymentResponse:
    try:
        payment = InvoiceService(db).record_payment(
            invoice_id=invoice_id,
            amount=payload.amount,
            payment_date=payload.payment_date,
            method=payload.payment_method,
            transaction_reference=payload.transaction_reference,
            notes=payload.notes,
        )
    except RentflowException as exc:
        raise map_service_error(exc) from exc
    return PaymentResponse.model_validate(payment)
