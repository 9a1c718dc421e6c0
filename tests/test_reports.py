"""Tests for reports and statement import."""

import io
from datetime import date
from decimal import Decimal

import pandas as pd
import pytest

from app.errors import ValidationError
from app.models.bank_statement import BankStatement
from app.models.enums import TransactionType
from app.schemas.transaction import TransactionCreate
from app.services import ledger, reports
from app.services.statements import import_statement
from conftest import balance_of


def _record(db, seed, type, value, when, category_id, **target):
    target = target or {"account_id": seed.checking.id}
    payload = TransactionCreate(
        type=type, value=value, date=when, description="row", category_id=category_id, **target
    )
    return ledger.create_transaction(db, seed.user.id, payload)


def test_expenses_by_category_sums_in_cents(db, seed):
    _record(db, seed, "EXPENSE", "0.10", date(2025, 3, 1), seed.food.id)
    _record(db, seed, "EXPENSE", "0.20", date(2025, 3, 2), seed.food.id)
    _record(db, seed, "EXPENSE", "900.00", date(2025, 3, 3), seed.housing.id, card_id=seed.card.id)
    _record(db, seed, "EXPENSE", "5.00", date(2025, 4, 1), seed.food.id)
    _record(db, seed, "INCOME", "50.00", date(2025, 3, 1), seed.salary.id)
    db.commit()

    totals = reports.expenses_by_category(db, seed.user.id, date(2025, 3, 1), date(2025, 3, 31))

    assert totals == [
        {"name": "Housing", "value": Decimal("900.00")},
        {"name": "Food", "value": Decimal("0.30")},
    ]


def test_monthly_summary_has_twelve_rows(db, seed):
    _record(db, seed, "INCOME", "3000.00", date(2025, 1, 5), seed.salary.id)
    _record(db, seed, "EXPENSE", "120.00", date(2025, 1, 7), seed.food.id)
    _record(db, seed, "EXPENSE", "80.00", date(2025, 2, 7), seed.food.id)
    _record(db, seed, "EXPENSE", "99.00", date(2024, 12, 31), seed.food.id)
    db.commit()

    summary = reports.monthly_summary(db, seed.user.id, 2025)

    assert len(summary) == 12
    assert summary[0] == {"month": 1, "income": Decimal("3000.00"), "expenses": Decimal("120.00")}
    assert summary[1] == {"month": 2, "income": Decimal("0.00"), "expenses": Decimal("80.00")}
    assert summary[11]["expenses"] == Decimal("0.00")


def test_export_writes_one_csv_row_per_transaction(db, seed):
    _record(db, seed, "EXPENSE", "12.34", date(2025, 3, 1), seed.food.id)
    _record(db, seed, "EXPENSE", "10.00", date(2025, 3, 2), seed.food.id, card_id=seed.card.id)
    db.commit()

    df = pd.read_csv(io.StringIO(reports.export_transactions_csv(db, seed.user.id)), dtype=str)

    assert list(df.columns) == reports.EXPORT_COLUMNS
    assert len(df) == 2
    assert df.iloc[0]["date"] == "2025-03-02"
    assert df.iloc[1]["value"] == "12.34"
    assert df.iloc[1]["category"] == "Food"


def test_import_statement_records_rows_and_skips_duplicates(db, seed):
    contents = (
        b"date,description,amount\n"
        b"2025-03-01,PAYROLL ACME,1500.00\n"
        b"2025-03-02,Pizza place,-40.00\n"
        b"2025-03-03,Mystery,-10.00\n"
    )

    statement, added = import_statement(db, seed.user.id, seed.checking.id, "march.csv", contents)
    db.commit()

    assert statement.row_count == 3
    assert [tx.type for tx in added] == [TransactionType.INCOME, TransactionType.EXPENSE, TransactionType.EXPENSE]
    assert added[0].category_id == seed.salary.id
    assert added[1].category_id == seed.food.id
    assert added[2].category_id is None
    assert balance_of(db, seed.checking) == Decimal("2450.00")

    _, again = import_statement(db, seed.user.id, seed.checking.id, "march.csv", contents)
    db.commit()

    assert again == []
    assert db.query(BankStatement).count() == 2
    assert balance_of(db, seed.checking) == Decimal("2450.00")


def test_import_statement_reports_unreadable_files(db, seed):
    with pytest.raises(ValidationError):
        import_statement(db, seed.user.id, seed.checking.id, "bad.csv", b"foo,bar\n1,2\n")


def test_import_statement_rejects_sub_cent_amounts(db, seed):
    contents = b"date,description,amount\n2025-03-09,Bakery,-4.50\n2025-03-10,Coffee shop,-10.005\n"

    with pytest.raises(ValidationError):
        import_statement(db, seed.user.id, seed.checking.id, "march.csv", contents)
    db.rollback()

    assert balance_of(db, seed.checking) == Decimal("1000.00")
    assert db.query(BankStatement).count() == 0
