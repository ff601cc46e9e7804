"""Aggregate figures for the landing dashboard."""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal

from rentflow.models import Invoice, Unit, UnitStatus
from rentflow.models.enums import OPEN_INVOICE_STATUSES
from rentflow.services.base_service import BaseService
from rentflow.utils.money import sum_money, to_money


@dataclass(frozen=True)
class DashboardStats:
    total_units: int
    occupied_units: int
    vacant_units: int
    occupancy_rate: float
    total_arrears: Decimal


class DashboardService(BaseService):
    def get_stats(self) -> DashboardStats:
        units = self.gateway.select_rows(Unit)
        total_units = len(units)
        occupied_units = sum(1 for unit in units if UnitStatus(unit.status) == UnitStatus.OCCUPIED)
        occupancy_rate = round(occupied_units / total_units * 100, 2) if total_units else 0.0

        open_invoices = self.gateway.select_rows(Invoice, Invoice.status.in_(OPEN_INVOICE_STATUSES))
        total_arrears = sum_money(
            to_money(invoice.total_amount) - to_money(invoice.paid_amount) for invoice in open_invoices
        )

        return DashboardStats(
            total_units=total_units,
            occupied_units=occupied_units,
            vacant_units=total_units - occupied_units,
            occupancy_rate=occupancy_rate,
            total_arrears=total_arrears,
        )
