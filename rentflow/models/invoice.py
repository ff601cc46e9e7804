"""Invoice, pending invoice and generation log model module."""

from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal

from sqlalchemy import Date, DateTime, ForeignKey, Index, Integer, Numeric, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from rentflow.models.base import Base, TimestampMixin, enum_type, utcnow
from rentflow.models.enums import GenerationStatus, InvoiceStatus


class Invoice(Base, TimestampMixin):
    __tablename__ = "invoices"
    __table_args__ = (
        Index("idx_invoices_status", "status"),
        Index("idx_invoices_lease", "lease_id"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    lease_id: Mapped[int] = mapped_column(ForeignKey("leases.id", ondelete="RESTRICT"), nullable=False)
    invoice_number: Mapped[str] = mapped_column(String(50), unique=True, nullable=False)
    invoice_date: Mapped[date] = mapped_column(Date, nullable=False)
    due_date: Mapped[date] = mapped_column(Date, nullable=False)
    period_start: Mapped[date] = mapped_column(Date, nullable=False)
    period_end: Mapped[date] = mapped_column(Date, nullable=False)
    rent_amount: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    service_charge_amount: Mapped[Decimal] = mapped_column(Numeric(12, 2), default=Decimal("0.00"), nullable=False)
    utilities_amount: Mapped[Decimal] = mapped_column(Numeric(12, 2), default=Decimal("0.00"), nullable=False)
    total_amount: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    paid_amount: Mapped[Decimal] = mapped_column(Numeric(12, 2), default=Decimal("0.00"), nullable=False)
    status: Mapped[InvoiceStatus] = mapped_column(enum_type(InvoiceStatus), default=InvoiceStatus.UNPAID, nullable=False)
    notes: Mapped[str | None] = mapped_column(Text)

    lease = relationship("Lease")
    payments = relationship("Payment", back_populates="invoice")

    @property
    def balance(self) -> Decimal:
        return self.total_amount - self.paid_amount


class GenerationLog(Base):
    __tablename__ = "invoice_generation_logs"
    __table_args__ = (Index("idx_generation_logs_period_status", "billing_period", "status"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    generation_date: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, nullable=False)
    billing_period: Mapped[str | None] = mapped_column(String(7))
    invoices_generated: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    properties_affected: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    status: Mapped[GenerationStatus] = mapped_column(
        enum_type(GenerationStatus), default=GenerationStatus.PENDING_REVIEW, nullable=False
    )
    details: Mapped[str | None] = mapped_column(Text)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, nullable=False)

    pending_invoices = relationship("PendingInvoice", back_populates="generation_log")


class PendingInvoice(Base, TimestampMixin):
    __tablename__ = "pending_invoices"
    __table_args__ = (Index("idx_pending_invoices_log", "generation_log_id"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    lease_id: Mapped[int] = mapped_column(ForeignKey("leases.id", ondelete="RESTRICT"), nullable=False)
    invoice_number: Mapped[str] = mapped_column(String(50), nullable=False)
    invoice_date: Mapped[date] = mapped_column(Date, nullable=False)
    due_date: Mapped[date] = mapped_column(Date, nullable=False)
    period_start: Mapped[date] = mapped_column(Date, nullable=False)
    period_end: Mapped[date] = mapped_column(Date, nullable=False)
    rent_amount: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    service_charge_amount: Mapped[Decimal] = mapped_column(Numeric(12, 2), default=Decimal("0.00"), nullable=False)
    utilities_amount: Mapped[Decimal] = mapped_column(Numeric(12, 2), default=Decimal("0.00"), nullable=False)
    total_amount: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    notes: Mapped[str | None] = mapped_column(Text)
    generation_log_id: Mapped[int] = mapped_column(
        ForeignKey("invoice_generation_logs.id", ondelete="CASCADE"), nullable=False
    )

    generation_log = relationship("GenerationLog", back_populates="pending_invoices")
