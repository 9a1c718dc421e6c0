"""Tests for the installment splitter."""

from datetime import date
from decimal import Decimal

import pytest

from app.errors import ValidationError
from app.services.installments import split_installments


def test_remainder_goes_to_the_first_installment():
    parts = split_installments(Decimal("100.00"), 3, date(2025, 3, 10), 25)

    assert [p.value for p in parts] == [Decimal("33.34"), Decimal("33.33"), Decimal("33.33")]
    assert sum(p.value for p in parts) == Decimal("100.00")
    assert [p.number for p in parts] == [1, 2, 3]


def test_installments_are_dated_month_by_month():
    parts = split_installments(Decimal("100.00"), 3, date(2025, 3, 10), 25)

    assert [p.date for p in parts] == [date(2025, 3, 10), date(2025, 4, 10), date(2025, 5, 10)]
    assert [(p.invoice_month, p.invoice_year) for p in parts] == [(3, 2025), (4, 2025), (5, 2025)]


def test_each_installment_is_bucketed_by_closing_day():
    """A purchase after the closing day pushes every installment one invoice out."""
    parts = split_installments(Decimal("90.00"), 3, date(2025, 11, 28), 25)

    assert [(p.invoice_month, p.invoice_year) for p in parts] == [(12, 2025), (1, 2026), (2, 2026)]


@pytest.mark.parametrize(
    "total, count",
    [("0.07", 3), ("1000.00", 7), ("999.99", 12), ("0.05", 5), ("12345.67", 120)],
)
def test_parts_always_sum_to_the_total(total, count):
    parts = split_installments(Decimal(total), count, date(2025, 1, 31), 31)

    assert len(parts) == count
    assert sum(p.value for p in parts) == Decimal(total)
    assert all(p.value >= Decimal("0.01") for p in parts)


def test_month_end_purchase_clamps_installment_dates():
    parts = split_installments(Decimal("30.00"), 3, date(2025, 1, 31), 31)

    assert [p.date for p in parts] == [date(2025, 1, 31), date(2025, 2, 28), date(2025, 3, 31)]


@pytest.mark.parametrize("count", [0, -2])
def test_non_positive_count_is_rejected(count):
    with pytest.raises(ValidationError):
        split_installments(Decimal("100.00"), count, date(2025, 3, 10), 25)


def test_value_smaller_than_one_cent_per_part_is_rejected():
    with pytest.raises(ValidationError):
        split_installments(Decimal("0.02"), 3, date(2025, 3, 10), 25)


def test_more_than_two_decimals_is_rejected():
    with pytest.raises(ValidationError):
        split_installments(Decimal("10.005"), 2, date(2025, 3, 10), 25)
