"""Payment import request/response schemas."""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field

from rentflow.models.enums import MatchStatus, PaymentMethod, UploadFileType, UploadStatus


class PaymentUploadRequest(BaseModel):
    file_name: str = Field(min_length=1, max_length=255)
    file_type: UploadFileType = UploadFileType.CSV
    content: str = Field(min_length=1)
    uploaded_by: int | None = Field(default=None, ge=1)


class PaymentUploadResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    file_name: str
    file_type: UploadFileType
    total_rows: int
    matched_count: int
    unmatched_count: int
    status: UploadStatus
    created_at: datetime
    processed_at: datetime | None = None


class ImportedPaymentResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    upload_id: int
    payment_date: datetime
    amount: Decimal
    payer_name: str
    phone_number: str | None = None
    reference_code: str | None = None
    description: str | None = None
    tenant_id: int | None = None
    invoice_id: int | None = None
    match_status: MatchStatus
    match_confidence: int
    is_processed: bool


class AcceptMatchRequest(BaseModel):
    invoice_id: int = Field(ge=1)
    payment_method: PaymentMethod = PaymentMethod.BANK


class AssignTenantRequest(BaseModel):
    tenant_id: int = Field(ge=1)


class AcceptedMatchResponse(BaseModel):
    imported_payment_id: int
    payment_id: int
    invoice_id: int
    invoice_status: str
    paid_amount: Decimal
