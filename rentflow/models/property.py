"""Property and unit model module."""

from __future__ import annotations

from decimal import Decimal

from sqlalchemy import ForeignKey, Index, Integer, Numeric, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from rentflow.models.base import Base, TimestampMixin, enum_type
from rentflow.models.enums import UnitStatus, UnitType


class Property(Base, TimestampMixin):
    __tablename__ = "properties"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    address: Mapped[str] = mapped_column(Text, nullable=False)
    description: Mapped[str | None] = mapped_column(Text)

    units = relationship("Unit", back_populates="property")


class Unit(Base, TimestampMixin):
    __tablename__ = "units"
    __table_args__ = (Index("idx_units_status", "status"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    property_id: Mapped[int] = mapped_column(ForeignKey("properties.id", ondelete="RESTRICT"), nullable=False)
    unit_number: Mapped[str] = mapped_column(String(50), nullable=False)
    unit_type: Mapped[UnitType] = mapped_column(enum_type(UnitType), nullable=False)
    base_rent: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    service_charge: Mapped[Decimal] = mapped_column(Numeric(12, 2), default=Decimal("0.00"), nullable=False)
    status: Mapped[UnitStatus] = mapped_column(enum_type(UnitStatus), default=UnitStatus.VACANT, nullable=False)

    property = relationship("Property", back_populates="units")
