"""Payment, payment upload and imported payment model module."""

from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal

from sqlalchemy import Boolean, Date, DateTime, ForeignKey, Index, Integer, Numeric, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from rentflow.models.base import Base, TimestampMixin, enum_type, utcnow
from rentflow.models.enums import MatchStatus, PaymentMethod, UploadFileType, UploadStatus


class Payment(Base, TimestampMixin):
    __tablename__ = "payments"
    __table_args__ = (Index("idx_payments_invoice", "invoice_id"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    invoice_id: Mapped[int] = mapped_column(ForeignKey("invoices.id", ondelete="RESTRICT"), nullable=False)
    lease_id: Mapped[int] = mapped_column(ForeignKey("leases.id", ondelete="RESTRICT"), nullable=False)
    payment_date: Mapped[date] = mapped_column(Date, nullable=False)
    amount: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    payment_method: Mapped[PaymentMethod] = mapped_column(enum_type(PaymentMethod), nullable=False)
    transaction_reference: Mapped[str | None] = mapped_column(String(100))
    notes: Mapped[str | None] = mapped_column(Text)

    invoice = relationship("Invoice", back_populates="payments")


class PaymentUpload(Base):
    __tablename__ = "payment_uploads"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    uploaded_by: Mapped[int | None] = mapped_column(Integer)
    file_name: Mapped[str] = mapped_column(String(255), nullable=False)
    file_type: Mapped[UploadFileType] = mapped_column(enum_type(UploadFileType), nullable=False)
    total_rows: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    matched_count: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    unmatched_count: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    status: Mapped[UploadStatus] = mapped_column(
        enum_type(UploadStatus), default=UploadStatus.PENDING_REVIEW, nullable=False
    )
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, nullable=False)
    processed_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))

    imported_payments = relationship("ImportedPayment", back_populates="upload")


class ImportedPayment(Base):
    __tablename__ = "imported_payments"
    __table_args__ = (
        Index("idx_imported_payments_upload", "upload_id"),
        Index("idx_imported_payments_match_status", "match_status"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    upload_id: Mapped[int] = mapped_column(ForeignKey("payment_uploads.id", ondelete="RESTRICT"), nullable=False)
    payment_date: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    amount: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    payer_name: Mapped[str] = mapped_column(String(255), nullable=False)
    phone_number: Mapped[str | None] = mapped_column(String(20))
    reference_code: Mapped[str | None] = mapped_column(String(100))
    description: Mapped[str | None] = mapped_column(Text)
    tenant_id: Mapped[int | None] = mapped_column(ForeignKey("tenants.id", ondelete="SET NULL"))
    invoice_id: Mapped[int | None] = mapped_column(ForeignKey("invoices.id", ondelete="SET NULL"))
    match_status: Mapped[MatchStatus] = mapped_column(
        enum_type(MatchStatus), default=MatchStatus.UNMATCHED, nullable=False
    )
    match_confidence: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    is_processed: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, nullable=False)

    upload = relationship("PaymentUpload", back_populates="imported_payments")
