"""Best-effort parser for comma-separated bank / mobile-money payment exports.

The first line is a header. Columns are located by substring match on the
lower-cased header names, so ``Payer Name``, ``Transaction Date`` or ``Amount (KES)``
all resolve. Quoted fields, embedded commas and other delimiters are not supported;
spreadsheets must be exported to flat CSV first.

Rows that cannot be interpreted are dropped without raising. Callers only see the
rows that survived.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal

from rentflow.utils.money import parse_money

logger = logging.getLogger(__name__)

UNKNOWN_PAYER = "Unknown"

# Canonical column -> header substrings, checked in order.
COLUMN_TOKENS: dict[str, tuple[str, ...]] = {
    "date": ("date",),
    "amount": ("amount",),
    "name": ("name", "payer"),
    "phone": ("phone",),
    "reference": ("reference", "ref"),
    "description": ("description", "note"),
}

DATE_FORMATS = (
    "%Y-%m-%d",
    "%Y-%m-%d %H:%M:%S",
    "%Y-%m-%d %H:%M",
    "%Y/%m/%d",
    "%d/%m/%Y",
    "%d/%m/%Y %H:%M",
    "%d-%m-%Y",
    "%d.%m.%Y",
)


@dataclass(frozen=True)
class ParsedPayment:
    payment_date: datetime
    amount: Decimal
    payer_name: str
    phone_number: str | None = None
    reference_code: str | None = None
    description: str | None = None


def locate_columns(header_line: str) -> dict[str, int]:
    """Map each canonical column to the first matching header index, or -1."""
    header = [column.strip().lower() for column in header_line.split(",")]
    indices: dict[str, int] = {}
    for key, tokens in COLUMN_TOKENS.items():
        indices[key] = next(
            (idx for idx, column in enumerate(header) if any(token in column for token in tokens)),
            -1,
        )
    return indices


def parse_payment_date(raw: str) -> datetime | None:
    value = raw.strip()
    if not value:
        return None
    try:
        return datetime.fromisoformat(value)
    except ValueError:
        pass
    for fmt in DATE_FORMATS:
        try:
            return datetime.strptime(value, fmt)
        except ValueError:
            continue
    return None


def _field(parts: list[str], idx: int) -> str | None:
    if idx < 0 or idx >= len(parts):
        return None
    return parts[idx]


def _optional(parts: list[str], idx: int) -> str | None:
    value = _field(parts, idx)
    return value or None


def parse_feed(raw_text: str, now: datetime | None = None) -> list[ParsedPayment]:
    """Parse a payment export into structured rows.

    A row is kept when its amount rounds to a positive cent value that fits a
    money column and a payer name can be resolved. A blank cell in an existing
    name column resolves to ``"Unknown"``; a feed with no name column resolves
    nothing and yields no rows. Rows without a date column are stamped with ``now``.
    """
    lines = raw_text.strip().splitlines()
    if len(lines) < 2:
        return []

    columns = locate_columns(lines[0])
    stamp = now or datetime.now()
    payments: list[ParsedPayment] = []

    for line_no, line in enumerate(lines[1:], start=2):
        parts = [part.strip() for part in line.split(",")]
        if len(parts) < 2:
            continue

        amount = parse_money(_field(parts, columns["amount"]))
        if amount is None:
            logger.debug(
                "payment_feed.row_skipped",
                extra={"event": "payment_feed.row_skipped", "line": line_no, "reason": "amount"},
            )
            continue

        if columns["name"] < 0:
            continue
        payer_name = _field(parts, columns["name"]) or UNKNOWN_PAYER

        if columns["date"] >= 0:
            payment_date = parse_payment_date(_field(parts, columns["date"]) or "")
            if payment_date is None:
                logger.debug(
                    "payment_feed.row_skipped",
                    extra={"event": "payment_feed.row_skipped", "line": line_no, "reason": "date"},
                )
                continue
        else:
            payment_date = stamp

        payments.append(
            ParsedPayment(
                payment_date=payment_date,
                amount=amount,
                payer_name=payer_name,
                phone_number=_optional(parts, columns["phone"]),
                reference_code=_optional(parts, columns["reference"]),
                description=_optional(parts, columns["description"]),
            )
        )

    return payments
