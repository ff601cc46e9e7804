from __future__ import annotations

from datetime import datetime
from decimal import Decimal

import pytest

from rentflow.models import MatchStatus
from rentflow.services.payment_matching import (
    NO_MATCH_REASON,
    PHONE_MATCH_REASON,
    TenantCandidate,
    calculate_similarity,
    edit_distance,
    match_payment,
    normalize_phone,
)
from rentflow.utils.feed_parser import ParsedPayment


def _payment(payer_name: str, phone_number: str | None = None) -> ParsedPayment:
    return ParsedPayment(
        payment_date=datetime(2025, 2, 5),
        amount=Decimal("15500"),
        payer_name=payer_name,
        phone_number=phone_number,
    )


TENANTS = [
    TenantCandidate(id=1, full_name="John Doe", phone="+254712345678"),
    TenantCandidate(id=2, full_name="Mary Wanjiru", phone="0722111222"),
]


def test_edit_distance_unit_costs():
    assert edit_distance("kitten", "sitting") == 3
    assert edit_distance("", "abc") == 3
    assert edit_distance("same", "same") == 0


@pytest.mark.parametrize(
    ("first", "second"),
    [("John Doe", "Jon Doe"), ("Mary", "Marion"), ("", "abc"), ("Peter Kamau", "kamau peter")],
)
def test_similarity_is_symmetric_and_bounded(first, second):
    forward = calculate_similarity(first, second)
    assert forward == calculate_similarity(second, first)
    assert 0 <= forward <= 100


def test_similarity_ignores_case_and_outer_whitespace():
    assert calculate_similarity("  JOHN doe ", "john DOE") == 100
    assert calculate_similarity("Jon Doe", "John Doe") == pytest.approx(87.5)


def test_normalize_phone_keeps_last_nine_digits():
    assert normalize_phone("0712-345-678") == "712345678"
    assert normalize_phone("+254 712 345 678") == "712345678"
    assert normalize_phone("(0712) 345678", digits=6) == "345678"
    assert normalize_phone(None) == ""
    assert normalize_phone("n/a") == ""


def test_phone_match_wins_with_full_confidence():
    result = match_payment(_payment("Somebody Else", "0712 345 678"), TENANTS)
    assert result.match_status == MatchStatus.MATCHED
    assert result.match_confidence == 100
    assert result.match_reason == PHONE_MATCH_REASON
    assert result.tenant_id == 1


def test_phone_match_beats_better_name_match():
    result = match_payment(_payment("John Doe", "0722111222"), TENANTS)
    assert result.tenant_id == 2
    assert result.match_reason == PHONE_MATCH_REASON


def test_close_name_matches_with_rounded_confidence():
    result = match_payment(_payment("Jon Doe"), TENANTS)
    assert result.is_matched
    assert result.tenant_id == 1
    assert result.match_confidence == 88
    assert result.match_reason == "Name match (88% similarity)"


def test_candidate_at_threshold_is_not_confirmed():
    tenants = [TenantCandidate(id=7, full_name="abcdefghij")]
    result = match_payment(_payment("abcdefgxyz"), tenants)
    assert result.match_status == MatchStatus.UNMATCHED
    assert result.match_confidence == 70
    assert result.tenant_id is None
    assert result.match_reason == NO_MATCH_REASON


def test_dissimilar_name_is_unmatched_with_zero_confidence():
    result = match_payment(_payment("Zachariah Otieno"), TENANTS)
    assert result.match_status == MatchStatus.UNMATCHED
    assert result.match_confidence == 0
    assert result.tenant_id is None


def test_empty_phones_never_match():
    tenants = [TenantCandidate(id=3, full_name="Grace Akinyi", phone=None)]
    result = match_payment(_payment("Unknown", phone_number="   "), tenants)
    assert result.match_status == MatchStatus.UNMATCHED


def test_first_tenant_wins_a_tie():
    tenants = [
        TenantCandidate(id=4, full_name="Peter Kamau"),
        TenantCandidate(id=5, full_name="Peter Kamau"),
    ]
    assert match_payment(_payment("Peter Kamau"), tenants).tenant_id == 4


def test_no_tenants_means_no_match():
    result = match_payment(_payment("John Doe", "0712345678"), [])
    assert result.match_status == MatchStatus.UNMATCHED
    assert result.match_confidence == 0


def test_thresholds_are_configurable():
    tenants = [TenantCandidate(id=7, full_name="abcdefghij")]
    result = match_payment(_payment("abcdefgxyz"), tenants, confirm_threshold=65)
    assert result.is_matched
    assert result.tenant_id == 7


def test_degenerate_empty_names_are_identical():
    assert calculate_similarity("", "") == 100
    assert calculate_similarity("John Doe", "John Doe") == 100
