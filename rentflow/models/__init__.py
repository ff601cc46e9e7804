"""SQLAlchemy model package for the billing schema."""

from rentflow.models.base import Base
from rentflow.models.enums import (
    GenerationStatus,
    InvoiceStatus,
    LeaseStatus,
    MatchStatus,
    PaymentMethod,
    UnitStatus,
    UnitType,
    UploadFileType,
    UploadStatus,
)
from rentflow.models.invoice import GenerationLog, Invoice, PendingInvoice
from rentflow.models.lease import Lease
from rentflow.models.payment import ImportedPayment, Payment, PaymentUpload
from rentflow.models.property import Property, Unit
from rentflow.models.tenant import Tenant

__all__ = [
    "Base",
    "GenerationLog",
    "GenerationStatus",
    "ImportedPayment",
    "Invoice",
    "InvoiceStatus",
    "Lease",
    "LeaseStatus",
    "MatchStatus",
    "Payment",
    "PaymentMethod",
    "PaymentUpload",
    "PendingInvoice",
    "Property",
    "Tenant",
    "Unit",
    "UnitStatus",
    "UnitType",
    "UploadFileType",
    "UploadStatus",
]
