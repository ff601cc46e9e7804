"""Canonical enum values for the billing schema."""

from __future__ import annotations

import enum


class UnitType(str, enum.Enum):
    BEDSITTER = "bedsitter"
    ONE_BEDROOM = "1BR"
    TWO_BEDROOM = "2BR"
    SHOP = "shop"


class UnitStatus(str, enum.Enum):
    VACANT = "vacant"
    OCCUPIED = "occupied"
    MAINTENANCE = "maintenance"


class LeaseStatus(str, enum.Enum):
    ACTIVE = "active"
    TERMINATED = "terminated"
    EXPIRED = "expired"


class InvoiceStatus(str, enum.Enum):
    UNPAID = "unpaid"
    PARTIALLY_PAID = "partially_paid"
    FULLY_PAID = "fully_paid"
    OVERDUE = "overdue"


class GenerationStatus(str, enum.Enum):
    PENDING_REVIEW = "pending_review"
    FINALIZED = "finalized"
    FAILED = "failed"


class PaymentMethod(str, enum.Enum):
    CASH = "cash"
    MPESA = "mpesa"
    BANK = "bank"


class UploadFileType(str, enum.Enum):
    CSV = "csv"
    EXCEL = "excel"


class UploadStatus(str, enum.Enum):
    PENDING_REVIEW = "pending_review"
    PROCESSED = "processed"
    FAILED = "failed"


class MatchStatus(str, enum.Enum):
    MATCHED = "matched"
    UNMATCHED = "unmatched"
    MANUAL = "manual"


# Invoices that still carry an outstanding balance.
OPEN_INVOICE_STATUSES = (
    InvoiceStatus.UNPAID,
    InvoiceStatus.PARTIALLY_PAID,
    InvoiceStatus.OVERDUE,
)
