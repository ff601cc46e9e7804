"""Dashboard schema module."""

from __future__ import annotations

from decimal import Decimal

from pydantic import BaseModel


class DashboardStatsResponse(BaseModel):
    total_units: int
    occupied_units: int
    vacant_units: int
    occupancy_rate: float
    total_arrears: Decimal
