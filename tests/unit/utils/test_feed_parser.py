from __future__ import annotations

from datetime import datetime
from decimal import Decimal

from rentflow.utils.feed_parser import UNKNOWN_PAYER, locate_columns, parse_feed


def test_keeps_only_rows_with_positive_amounts():
    feed = "\n".join(
        [
            "Date,Amount,Name,Phone,Reference",
            "2025-02-05,15500,John Doe,0712345678,QAB123",
            "2025-02-06,-100,Jane Roe,0722000000,QAB124",
            "2025-02-07,abc,Jim Poe,0733000000,QAB125",
            "2025-02-08,0,Ann Moe,0744000000,QAB126",
        ]
    )
    rows = parse_feed(feed)
    assert len(rows) == 1
    row = rows[0]
    assert row.payment_date == datetime(2025, 2, 5)
    assert row.amount == Decimal("15500")
    assert row.payer_name == "John Doe"
    assert row.phone_number == "0712345678"
    assert row.reference_code == "QAB123"
    assert row.description is None


def test_header_only_or_empty_input_yields_nothing():
    assert parse_feed("Date,Amount,Name") == []
    assert parse_feed("") == []
    assert parse_feed("   \n  ") == []


def test_columns_found_by_header_substring():
    header = "Transaction Date,Amount (KES),Payer Name,Phone Number,Ref,Notes"
    columns = locate_columns(header)
    assert columns == {"date": 0, "amount": 1, "name": 2, "phone": 3, "reference": 4, "description": 5}


def test_missing_optional_columns_resolve_to_minus_one():
    columns = locate_columns("Amount,Name")
    assert columns["date"] == -1
    assert columns["phone"] == -1
    assert columns["reference"] == -1


def test_blank_name_cell_becomes_unknown():
    rows = parse_feed("Date,Amount,Name\n2025-02-05,500,")
    assert len(rows) == 1
    assert rows[0].payer_name == UNKNOWN_PAYER


def test_feed_without_name_column_yields_nothing():
    assert parse_feed("Date,Amount,Phone\n2025-02-05,500,0712345678") == []


def test_feed_without_date_column_uses_now():
    now = datetime(2025, 2, 10, 9, 30)
    rows = parse_feed("Amount,Name\n500,John Doe", now=now)
    assert rows[0].payment_date == now


def test_day_first_dates_are_understood():
    rows = parse_feed("Date,Amount,Name\n05/02/2025,500,John Doe")
    assert rows[0].payment_date == datetime(2025, 2, 5)


def test_unreadable_dates_and_short_lines_are_dropped():
    feed = "Date,Amount,Name\nsometime,500,John Doe\njunk\n2025-02-05,700,Mary Wanjiru"
    rows = parse_feed(feed)
    assert [row.payer_name for row in rows] == ["Mary Wanjiru"]


def test_payer_name_header_scenario():
    feed = "Date,Amount,Payer Name\n2025-01-15,50000,John Doe\n2025-01-16,-1000,Jane Smith"
    [row] = parse_feed(feed)
    assert row.payer_name == "John Doe"
    assert row.amount == 50000
    assert row.payment_date == datetime(2025, 1, 15)


def test_amounts_outside_money_range_are_dropped():
    feed = "\n".join(
        [
            "Date,Amount,Name",
            "2025-02-05,1e30,John Doe",
            "2025-02-06,500,John Doe",
            "2025-02-07,0.004,Jane Roe",
            "2025-02-08,10000000000,Jim Poe",
        ]
    )
    [row] = parse_feed(feed)
    assert row.payment_date == datetime(2025, 2, 6)
    assert str(row.amount) == "500.00"


def test_amounts_are_rounded_to_cents():
    [row] = parse_feed("Date,Amount,Name\n2025-02-05,0.005,John Doe")
    assert str(row.amount) == "0.01"
