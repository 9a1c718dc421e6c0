"""Tests for invoice cutover and month arithmetic."""

from datetime import date, datetime, timedelta, timezone

import pytest

from app.errors import ValidationError
from app.services.dates import (
    add_months,
    advance_due_date,
    invoice_bucket,
    next_due_date,
    to_utc_date,
)


def test_purchase_after_closing_day_rolls_to_next_invoice():
    assert invoice_bucket(date(2025, 3, 26), 25) == (4, 2025)


def test_purchase_before_closing_day_stays_on_current_invoice():
    assert invoice_bucket(date(2025, 3, 24), 25) == (3, 2025)


def test_purchase_on_closing_day_stays_on_current_invoice():
    assert invoice_bucket(date(2025, 3, 25), 25) == (3, 2025)


def test_december_purchase_after_closing_rolls_into_next_year():
    assert invoice_bucket(date(2025, 12, 28), 25) == (1, 2026)


def test_closing_day_past_month_end_closes_on_last_day():
    """A card closing on the 31st closes February on its last day."""
    assert invoice_bucket(date(2025, 2, 28), 31) == (2, 2025)
    assert invoice_bucket(date(2024, 2, 29), 30) == (2, 2024)
    assert invoice_bucket(date(2025, 1, 31), 31) == (1, 2025)


def test_closing_day_30_in_february_of_non_leap_year():
    assert invoice_bucket(date(2025, 2, 28), 30) == (2, 2025)
    assert invoice_bucket(date(2025, 3, 1), 30) == (3, 2025)


@pytest.mark.parametrize("closing_day", [0, 32, -1])
def test_invalid_closing_day_is_rejected(closing_day):
    with pytest.raises(ValueError):
        invoice_bucket(date(2025, 3, 1), closing_day)


def test_aware_datetime_is_bucketed_by_its_utc_day():
    """23:30 on the 25th at UTC-3 is already the 26th in UTC."""
    local = datetime(2025, 3, 25, 23, 30, tzinfo=timezone(timedelta(hours=-3)))
    assert to_utc_date(local) == date(2025, 3, 26)
    assert invoice_bucket(local, 25) == (4, 2025)


def test_to_utc_date_accepts_iso_strings():
    assert to_utc_date("2025-03-10") == date(2025, 3, 10)


def test_add_months_clamps_to_shorter_month():
    assert add_months(date(2025, 1, 31), 1) == date(2025, 2, 28)
    assert add_months(date(2024, 1, 31), 1) == date(2024, 2, 29)
    assert add_months(date(2025, 11, 15), 2) == date(2026, 1, 15)


def test_next_due_date_this_month_or_next():
    assert next_due_date(date(2025, 3, 5), 10) == date(2025, 3, 10)
    assert next_due_date(date(2025, 3, 10), 10) == date(2025, 3, 10)
    assert next_due_date(date(2025, 3, 11), 10) == date(2025, 4, 10)
    assert next_due_date(date(2025, 2, 28), 31) == date(2025, 2, 28)


def test_advance_due_date_keeps_bill_day_after_short_month():
    """A bill due on the 31st falls on Feb 28 and returns to Mar 31."""
    feb = advance_due_date(date(2025, 1, 31), 1, 31)
    assert feb == date(2025, 2, 28)
    assert advance_due_date(feb, 1, 31) == date(2025, 3, 31)
    assert advance_due_date(date(2025, 6, 10), 12, 10) == date(2026, 6, 10)


@pytest.mark.parametrize("value", [None, "not a date", ""])
def test_to_utc_date_rejects_missing_or_unparseable_values(value):
    with pytest.raises(ValidationError):
        to_utc_date(value)
