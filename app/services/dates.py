"""Date rules shared by the ledger: invoice cutover and month arithmetic."""

import calendar
from datetime import date, datetime, timezone

import pandas as pd

from app.errors import ValidationError


def to_utc_date(value) -> date:
    """Normalize a date or datetime to its calendar day in UTC."""
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            value = value.astimezone(timezone.utc)
        return value.date()
    if isinstance(value, date):
        return value
    if value is None:
        raise ValidationError("A date is required")
    try:
        stamp = pd.Timestamp(value)
    except (TypeError, ValueError):
        raise ValidationError(f"Unrecognized date: {value!r}")
    if pd.isna(stamp):
        raise ValidationError(f"Unrecognized date: {value!r}")
    if stamp.tzinfo is not None:
        stamp = stamp.tz_convert("UTC")
    return stamp.date()


def last_day_of_month(year: int, month: int) -> int:
    return calendar.monthrange(year, month)[1]


def invoice_bucket(transaction_date, closing_day: int) -> tuple[int, int]:
    """Map a purchase date to the (month, year) of the invoice it belongs to.

    Purchases up to the end of ``closing_day`` stay on the current month's
    invoice; anything later rolls into the following month. A closing day past
    the end of a short month closes on that month's last day.
    """
    if not 1 <= closing_day <= 31:
        raise ValueError(f"closing_day must be between 1 and 31, got {closing_day}")
    day = to_utc_date(transaction_date)
    effective_closing = min(closing_day, last_day_of_month(day.year, day.month))

    month, year = day.month, day.year
    if day.day > effective_closing:
        month += 1
        if month > 12:
            month = 1
            year += 1
    return month, year


def add_months(start, months: int) -> date:
    """Calendar month arithmetic; the day is clamped to the target month's length."""
    shifted = pd.Timestamp(to_utc_date(start)) + pd.DateOffset(months=months)
    return shifted.date()


def on_day(year: int, month: int, day: int) -> date:
    return date(year, month, min(day, last_day_of_month(year, month)))


def next_due_date(today: date, due_day: int) -> date:
    """First occurrence of ``due_day`` on or after ``today``."""
    if today.day <= min(due_day, last_day_of_month(today.year, today.month)):
        return on_day(today.year, today.month, due_day)
    following = add_months(on_day(today.year, today.month, 1), 1)
    return on_day(following.year, following.month, due_day)


def advance_due_date(current: date, months: int, due_day: int) -> date:
    """Move a due date forward by whole months, keeping the bill's day of month."""
    target = add_months(on_day(current.year, current.month, 1), months)
    return on_day(target.year, target.month, due_day)
