"""Exact two-place decimal helpers for monetary amounts."""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

CENT = Decimal("0.01")
ZERO = Decimal("0.00")
# Largest value a Numeric(12, 2) column holds.
MAX_MONEY = Decimal("9999999999.99")


def to_money(value: Decimal | int | float | str | None) -> Decimal:
    """Quantize to two fractional digits, half-up. ``None`` becomes 0.00."""
    if value is None:
        return ZERO
    if isinstance(value, float):
        # Go through repr so 0.1 stays 0.1 instead of its binary expansion.
        value = repr(value)
    return Decimal(value).quantize(CENT, rounding=ROUND_HALF_UP)


def parse_amount(raw: str | None) -> Decimal:
    """Best-effort amount parse; anything unreadable or non-finite is 0."""
    if raw is None:
        return Decimal(0)
    cleaned = raw.strip()
    if not cleaned:
        return Decimal(0)
    try:
        amount = Decimal(cleaned)
    except InvalidOperation:
        return Decimal(0)
    if not amount.is_finite():
        return Decimal(0)
    return amount


def parse_money(raw: str | None) -> Decimal | None:
    """Parse and quantize a feed amount; ``None`` unless it is a storable positive sum."""
    try:
        amount = to_money(parse_amount(raw))
    except InvalidOperation:
        return None
    if amount <= ZERO or amount > MAX_MONEY:
        return None
    return amount


def sum_money(values) -> Decimal:
    return sum((to_money(value) for value in values), ZERO)
