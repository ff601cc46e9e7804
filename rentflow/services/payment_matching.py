"""Heuristic matching of imported payments to tenants.

Matching runs in priority order: an exact match on the normalized phone number
wins outright with confidence 100; otherwise payer names are compared against each
tenant's ``"first last"`` name by normalized Levenshtein similarity. A name candidate
must clear ``candidate_floor`` to be considered and its rounded confidence must
exceed ``confirm_threshold`` to be reported as matched.
"""

from __future__ import annotations

import math
import re
from collections.abc import Iterable
from dataclasses import dataclass

from rentflow.models.enums import MatchStatus
from rentflow.models.tenant import Tenant
from rentflow.utils.feed_parser import ParsedPayment

DEFAULT_CANDIDATE_FLOOR = 60.0
DEFAULT_CONFIRM_THRESHOLD = 70.0
DEFAULT_PHONE_DIGITS = 9

PHONE_MATCH_REASON = "Phone number match"
NO_MATCH_REASON = "No clear match found"

_NON_DIGITS = re.compile(r"\D")


@dataclass(frozen=True)
class TenantCandidate:
    """The slice of a tenant the matcher looks at."""

    id: int
    full_name: str
    phone: str | None = None

    @classmethod
    def from_tenant(cls, tenant: Tenant) -> "TenantCandidate":
        return cls(id=tenant.id, full_name=tenant.full_name, phone=tenant.phone)


@dataclass(frozen=True)
class MatchResult:
    match_status: MatchStatus
    match_confidence: int
    match_reason: str
    tenant_id: int | None = None

    @property
    def is_matched(self) -> bool:
        return self.match_status == MatchStatus.MATCHED


def normalize_phone(phone: str | None, digits: int = DEFAULT_PHONE_DIGITS) -> str:
    """Strip non-digits and keep the trailing ``digits`` so country codes drop out."""
    if not phone:
        return ""
    return _NON_DIGITS.sub("", phone)[-digits:]


def edit_distance(first: str, second: str) -> int:
    """Levenshtein distance with unit costs, one rolling row."""
    if len(first) < len(second):
        first, second = second, first
    previous = list(range(len(second) + 1))
    for i, left in enumerate(first, start=1):
        current = [i]
        for j, right in enumerate(second, start=1):
            substitution = previous[j - 1] + (left != right)
            current.append(min(previous[j] + 1, current[j - 1] + 1, substitution))
        previous = current
    return previous[-1]


def calculate_similarity(first: str, second: str) -> float:
    """Case-insensitive similarity in percent: ``(maxLen - distance) / maxLen * 100``."""
    s1 = first.strip().lower()
    s2 = second.strip().lower()
    if s1 == s2:
        return 100.0
    longest = max(len(s1), len(s2))
    if longest == 0:
        return 100.0
    return (longest - edit_distance(s1, s2)) / longest * 100


def _round_confidence(similarity: float) -> int:
    return int(math.floor(similarity + 0.5))


def match_payment(
    payment: ParsedPayment,
    tenants: Iterable[TenantCandidate],
    *,
    candidate_floor: float = DEFAULT_CANDIDATE_FLOOR,
    confirm_threshold: float = DEFAULT_CONFIRM_THRESHOLD,
    phone_digits: int = DEFAULT_PHONE_DIGITS,
) -> MatchResult:
    pool = list(tenants)

    payer_phone = normalize_phone(payment.phone_number, phone_digits)
    if payer_phone:
        for tenant in pool:
            if normalize_phone(tenant.phone, phone_digits) == payer_phone:
                return MatchResult(
                    match_status=MatchStatus.MATCHED,
                    match_confidence=100,
                    match_reason=PHONE_MATCH_REASON,
                    tenant_id=tenant.id,
                )

    best_tenant: TenantCandidate | None = None
    best_similarity = 0.0
    for tenant in pool:
        similarity = calculate_similarity(payment.payer_name, tenant.full_name)
        # Strict comparison keeps the first tenant on a tie.
        if similarity > candidate_floor and similarity > best_similarity:
            best_tenant = tenant
            best_similarity = similarity

    confidence = _round_confidence(best_similarity) if best_tenant is not None else 0
    if best_tenant is not None and confidence > confirm_threshold:
        return MatchResult(
            match_status=MatchStatus.MATCHED,
            match_confidence=confidence,
            match_reason=f"Name match ({confidence}% similarity)",
            tenant_id=best_tenant.id,
        )

    return MatchResult(
        match_status=MatchStatus.UNMATCHED,
        match_confidence=confidence,
        match_reason=NO_MATCH_REASON,
    )
