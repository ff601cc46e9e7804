"""Lease model module."""

from __future__ import annotations

from datetime import date
from decimal import Decimal

from sqlalchemy import Date, ForeignKey, Index, Integer, Numeric, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from rentflow.models.base import Base, TimestampMixin, enum_type
from rentflow.models.enums import LeaseStatus


class Lease(Base, TimestampMixin):
    __tablename__ = "leases"
    __table_args__ = (Index("idx_leases_status", "status"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    tenant_id: Mapped[int] = mapped_column(ForeignKey("tenants.id", ondelete="RESTRICT"), nullable=False)
    unit_id: Mapped[int] = mapped_column(ForeignKey("units.id", ondelete="RESTRICT"), nullable=False)
    start_date: Mapped[date] = mapped_column(Date, nullable=False)
    end_date: Mapped[date | None] = mapped_column(Date)
    monthly_rent: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    service_charge: Mapped[Decimal] = mapped_column(Numeric(12, 2), default=Decimal("0.00"), nullable=False)
    security_deposit: Mapped[Decimal] = mapped_column(Numeric(12, 2), default=Decimal("0.00"), nullable=False)
    status: Mapped[LeaseStatus] = mapped_column(enum_type(LeaseStatus), default=LeaseStatus.ACTIVE, nullable=False)
    termination_notes: Mapped[str | None] = mapped_column(Text)

    tenant = relationship("Tenant")
    unit = relationship("Unit")
