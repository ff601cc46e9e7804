"""Bulk payment import endpoints."""

from __future__ import annotations

from dataclasses import asdict

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from rentflow.api.v1._results import unwrap
from rentflow.core.dependencies import get_db_session
from rentflow.models import PaymentUpload
from rentflow.schemas.payments import (
    AcceptedMatchResponse,
    AcceptMatchRequest,
    AssignTenantRequest,
    ImportedPaymentResponse,
    PaymentUploadRequest,
    PaymentUploadResponse,
)
from rentflow.services.payment_import_service import PaymentImportService
from rentflow.utils.feed_parser import parse_feed

router = APIRouter(prefix="/payments", tags=["payments"])


@router.post("/uploads", response_model=PaymentUploadResponse, status_code=status.HTTP_201_CREATED)
def upload_payments(payload: PaymentUploadRequest, db: Session = Depends(get_db_session)) -> PaymentUploadResponse:
    """Accepts flat CSV text; spreadsheets must be exported to CSV by the client."""
    payments = parse_feed(payload.content)
    service = PaymentImportService(db)
    upload = service.register_upload(
        file_name=payload.file_name,
        file_type=payload.file_type,
        total_rows=len(payments),
        uploaded_by=payload.uploaded_by,
    )
    unwrap(service.process_upload(upload.id, payments))
    db.refresh(upload)
    return PaymentUploadResponse.model_validate(upload)


@router.get("/uploads/{upload_id}/rows", response_model=list[ImportedPaymentResponse])
def list_upload_rows(upload_id: int, db: Session = Depends(get_db_session)) -> list[ImportedPaymentResponse]:
    if db.get(PaymentUpload, upload_id) is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="upload not found")
    rows = PaymentImportService(db).list_imported_payments(upload_id)
    return [ImportedPaymentResponse.model_validate(row) for row in rows]


@router.post("/imported/{imported_payment_id}/assign", response_model=ImportedPaymentResponse)
def assign_tenant(
    imported_payment_id: int,
    payload: AssignTenantRequest,
    db: Session = Depends(get_db_session),
) -> ImportedPaymentResponse:
    row = unwrap(PaymentImportService(db).assign_tenant(imported_payment_id, payload.tenant_id))
    return ImportedPaymentResponse.model_validate(row)


@router.post("/imported/{imported_payment_id}/accept", response_model=AcceptedMatchResponse)
def accept_match(
    imported_payment_id: int,
    payload: AcceptMatchRequest,
    db: Session = Depends(get_db_session),
) -> AcceptedMatchResponse:
    accepted = unwrap(
        PaymentImportService(db).accept_match(
            imported_payment_id, invoice_id=payload.invoice_id, method=payload.payment_method
        )
    )
    return AcceptedMatchResponse(**asdict(accepted))


@router.post("/uploads/{upload_id}/complete", response_model=PaymentUploadResponse)
def complete_upload(upload_id: int, db: Session = Depends(get_db_session)) -> PaymentUploadResponse:
    upload = unwrap(PaymentImportService(db).complete_upload(upload_id))
    return PaymentUploadResponse.model_validate(upload)
