"""Read-side aggregates over the caller's transactions (pandas)."""

from datetime import date
from decimal import Decimal
from typing import Dict, List

import pandas as pd
from sqlalchemy.orm import Session

from app.models.category import Category
from app.models.enums import TransactionType
from app.models.transaction import Transaction

EXPORT_COLUMNS = [
    "id", "date", "type", "value", "description", "category", "account_id", "card_id", "invoice_id",
]


def _cents(value) -> int:
    return int(Decimal(value) * 100)


def _from_cents(cents) -> Decimal:
    return (Decimal(int(cents)) / 100).quantize(Decimal("0.01"))


def expenses_by_category(db: Session, user_id: int, start: date, end: date) -> List[Dict]:
    rows = (
        db.query(Transaction.value, Category.description)
        .outerjoin(Category, Transaction.category_id == Category.id)
        .filter(
            Transaction.user_id == user_id,
            Transaction.type == TransactionType.EXPENSE,
            Transaction.date >= start,
            Transaction.date <= end,
        )
        .all()
    )
    if not rows:
        return []

    df = pd.DataFrame(
        {
            "name": [name or "Uncategorized" for _, name in rows],
            "cents": [_cents(value) for value, _ in rows],
        }
    )
    totals = df.groupby("name")["cents"].sum().sort_values(ascending=False)
    return [{"name": name, "value": _from_cents(cents)} for name, cents in totals.items()]


def monthly_summary(db: Session, user_id: int, year: int) -> List[Dict]:
    rows = (
        db.query(Transaction.date, Transaction.type, Transaction.value)
        .filter(
            Transaction.user_id == user_id,
            Transaction.type.in_([TransactionType.INCOME, TransactionType.EXPENSE]),
            Transaction.date >= date(year, 1, 1),
            Transaction.date <= date(year, 12, 31),
        )
        .all()
    )
    summary = {m: {"month": m, "income": Decimal("0.00"), "expenses": Decimal("0.00")} for m in range(1, 13)}
    if not rows:
        return list(summary.values())

    df = pd.DataFrame(
        {
            "month": [d.month for d, _, _ in rows],
            "type": [t.value for _, t, _ in rows],
            "cents": [_cents(v) for _, _, v in rows],
        }
    )
    grouped = df.groupby(["month", "type"])["cents"].sum()
    for (month, tx_type), cents in grouped.items():
        key = "income" if tx_type == TransactionType.INCOME.value else "expenses"
        summary[int(month)][key] = _from_cents(cents)
    return list(summary.values())


def export_transactions_csv(db: Session, user_id: int) -> str:
    rows = (
        db.query(Transaction, Category.description)
        .outerjoin(Category, Transaction.category_id == Category.id)
        .filter(Transaction.user_id == user_id)
        .order_by(Transaction.date.desc(), Transaction.id.desc())
        .all()
    )
    df = pd.DataFrame(
        [
            {
                "id": tx.id,
                "date": tx.date.isoformat(),
                "type": tx.type.value,
                "value": str(tx.value),
                "description": tx.description or "",
                "category": category or "",
                "account_id": tx.account_id or "",
                "card_id": tx.card_id or "",
                "invoice_id": tx.invoice_id or "",
            }
            for tx, category in rows
        ],
        columns=EXPORT_COLUMNS,
    )
    return df.to_csv(index=False)
