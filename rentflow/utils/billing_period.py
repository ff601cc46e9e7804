"""Calendar arithmetic for monthly billing periods."""

from __future__ import annotations

import calendar
from dataclasses import dataclass
from datetime import date


@dataclass(frozen=True)
class BillingPeriod:
    year: int
    month: int

    @classmethod
    def containing(cls, day: date) -> "BillingPeriod":
        return cls(year=day.year, month=day.month)

    @property
    def start(self) -> date:
        return date(self.year, self.month, 1)

    @property
    def end(self) -> date:
        return date(self.year, self.month, calendar.monthrange(self.year, self.month)[1])

    @property
    def label(self) -> str:
        """``YYYY-MM``, the key stored on generation logs."""
        return f"{self.year:04d}-{self.month:02d}"

    @property
    def display_name(self) -> str:
        return f"{calendar.month_name[self.month]} {self.year}"

    def next(self) -> "BillingPeriod":
        if self.month == 12:
            return BillingPeriod(year=self.year + 1, month=1)
        return BillingPeriod(year=self.year, month=self.month + 1)

    def due_date(self, due_day: int = 10) -> date:
        """Due date falls on ``due_day`` of the following month."""
        following = self.next()
        return date(following.year, following.month, due_day)
