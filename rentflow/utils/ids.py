"""Identifier generation helpers."""

from __future__ import annotations

import secrets
import string
import uuid
from collections.abc import Container

from rentflow.core.exceptions import ServiceError

INVOICE_SUFFIX_ALPHABET = string.ascii_uppercase + string.digits
INVOICE_SUFFIX_LENGTH = 6


def new_trace_id() -> str:
    return uuid.uuid4().hex


def invoice_number_prefix(year: int, month: int) -> str:
    return f"INV-{year:04d}{month:02d}-"


def new_invoice_number(year: int, month: int) -> str:
    """``INV-<YYYY><MM>-<6 chars of A-Z0-9>``."""
    suffix = "".join(secrets.choice(INVOICE_SUFFIX_ALPHABET) for _ in range(INVOICE_SUFFIX_LENGTH))
    return f"{invoice_number_prefix(year, month)}{suffix}"


def reserve_invoice_number(year: int, month: int, taken: Container[str], max_attempts: int = 25) -> str:
    """Draw numbers until one is not in ``taken``."""
    for _ in range(max_attempts):
        candidate = new_invoice_number(year, month)
        if candidate not in taken:
            return candidate
    raise ServiceError(f"Could not allocate a unique invoice number after {max_attempts} attempts.")
