from dataclasses import dataclass
from datetime import date
from decimal import Decimal, ROUND_DOWN
from typing import List

from app.errors import ValidationError
from app.services.dates import add_months, invoice_bucket, to_utc_date
from app.utils.decimal_utils import coerce_decimal

CENT = Decimal("0.01")


@dataclass(frozen=True)
class Installment:
    number: int
    value: Decimal
    date: date
    invoice_month: int
    invoice_year: int


def to_cents(value) -> int:
    amount = coerce_decimal(value)
    if amount != amount.quantize(CENT):
        raise ValidationError("Values may have at most two decimal places")
    return int(amount.quantize(CENT) * 100)


def to_money(value) -> Decimal:
    """Validate a ledger value: positive, whole cents, returned quantized."""
    if value is None:
        raise ValidationError("A value is required")
    cents = to_cents(value)
    if cents <= 0:
        raise ValidationError("Transaction value must be positive")
    return (Decimal(cents) / 100).quantize(CENT)


def split_installments(total_value, count: int, start_date, closing_day: int) -> List[Installment]:
    """Divide a card purchase into ``count`` monthly installments.

    Every part gets the floor of the per-installment cents and the first one
    also takes the remainder, so the parts add up to ``total_value`` exactly.
    Installment ``i`` is dated ``start_date + i`` calendar months and bucketed
    into its own invoice.
    """
    if count is None or count <= 0:
        raise ValidationError("Installments must be a positive number")
    total_cents = to_cents(total_value)
    if total_cents <= 0:
        raise ValidationError("Transaction value must be positive")
    if total_cents < count:
        raise ValidationError("Value is too small to split into that many installments")

    base, remainder = divmod(total_cents, count)
    start = to_utc_date(start_date)

    parts = []
    for i in range(count):
        cents = base + remainder if i == 0 else base
        installment_date = add_months(start, i)
        month, year = invoice_bucket(installment_date, closing_day)
        parts.append(
            Installment(
                number=i + 1,
                value=(Decimal(cents) / 100).quantize(CENT, rounding=ROUND_DOWN),
                date=installment_date,
                invoice_month=month,
                invoice_year=year,
            )
        )
    return parts
