"""Tests for bill, debt and invoice payments."""

from datetime import date
from decimal import Decimal

import pytest

from app.errors import ConflictError, OwnershipError, ValidationError
from app.models.bill import Bill, BillPayment
from app.models.debt import Debt, DebtPayment
from app.models.enums import BillPaymentStatus, DebtStatus, DebtType, Recurrence, TransactionType
from app.models.invoice import Invoice
from app.models.transaction import Transaction
from app.schemas.transaction import TransactionCreate
from app.services import ledger, payments
from conftest import balance_of


def _bill(db, seed, recurrence=Recurrence.MONTHLY, **target):
    target = target or {"account_id": seed.checking.id}
    bill = Bill(
        user_id=seed.user.id,
        description="Aluguel",
        amount=Decimal("2200.00"),
        due_day=10,
        recurrence=recurrence,
        category_id=seed.housing.id,
        **target,
    )
    db.add(bill)
    db.flush()
    payment = payments.schedule_first_payment(db, bill, today=date(2025, 3, 1))
    db.commit()
    return bill, payment


def _debt(db, seed, outstanding="1000.00"):
    debt = Debt(
        user_id=seed.user.id,
        description="Car loan",
        creditor="Bank",
        type=DebtType.LOAN,
        initial_amount=Decimal("1000.00"),
        outstanding_balance=Decimal(outstanding),
        start_date=date(2025, 1, 1),
        status=DebtStatus.ACTIVE,
    )
    db.add(debt)
    db.commit()
    return debt


def _card_charge(db, seed, value, when=date(2025, 3, 10)):
    payload = TransactionCreate(
        type="EXPENSE",
        value=value,
        date=when,
        description="Charge",
        category_id=seed.food.id,
        card_id=seed.card.id,
    )
    return ledger.create_transaction(db, seed.user.id, payload)


# ----------------------------------------------------------------
# Bills
# ----------------------------------------------------------------
def test_first_payment_is_scheduled_on_next_due_day(db, seed):
    _, payment = _bill(db, seed)

    assert payment.due_date == date(2025, 3, 10)
    assert payment.status == BillPaymentStatus.PENDING
    assert payment.amount == Decimal("2200.00")


def test_paying_monthly_bill_records_expense_and_schedules_next(db, seed):
    seed.checking.balance = Decimal("5000.00")
    db.commit()
    bill, payment = _bill(db, seed)

    paid, next_payment = payments.pay_bill(db, seed.user.id, payment.id, date(2025, 3, 9))
    db.commit()

    tx = db.get(Transaction, paid.transaction_id)
    assert paid.status == BillPaymentStatus.PAID
    assert paid.payment_date == date(2025, 3, 9)
    assert tx.type == TransactionType.EXPENSE
    assert tx.value == Decimal("2200.00")
    assert tx.account_id == seed.checking.id
    assert balance_of(db, seed.checking) == Decimal("2800.00")
    assert next_payment.status == BillPaymentStatus.PENDING
    assert next_payment.due_date == date(2025, 4, 10)
    assert next_payment.bill_id == bill.id


def test_yearly_bill_advances_twelve_months(db, seed):
    _, payment = _bill(db, seed, recurrence=Recurrence.YEARLY)

    _, next_payment = payments.pay_bill(db, seed.user.id, payment.id, date(2025, 3, 10))
    db.commit()

    assert next_payment.due_date == date(2026, 3, 10)


def test_one_off_bill_schedules_nothing_after_payment(db, seed):
    bill, payment = _bill(db, seed, recurrence=Recurrence.NONE)

    _, next_payment = payments.pay_bill(db, seed.user.id, payment.id, date(2025, 3, 10))
    db.commit()

    assert next_payment is None
    assert db.query(BillPayment).filter_by(bill_id=bill.id).count() == 1


def test_bill_payment_cannot_be_paid_twice(db, seed):
    _, payment = _bill(db, seed)
    payments.pay_bill(db, seed.user.id, payment.id, date(2025, 3, 9))
    db.commit()

    with pytest.raises(ConflictError):
        payments.pay_bill(db, seed.user.id, payment.id, date(2025, 3, 9))
    db.rollback()

    assert db.query(Transaction).count() == 1
    assert db.query(BillPayment).count() == 2


def test_bill_on_card_lands_on_invoice(db, seed):
    _, payment = _bill(db, seed, card_id=seed.card.id)

    paid, _ = payments.pay_bill(db, seed.user.id, payment.id, date(2025, 3, 26))
    db.commit()

    tx = db.get(Transaction, paid.transaction_id)
    invoice = db.get(Invoice, tx.invoice_id)
    assert (invoice.month, invoice.year) == (4, 2025)
    assert invoice.total_amount == Decimal("2200.00")


def test_paying_another_users_bill_is_forbidden(db, seed, other):
    _, payment = _bill(db, other)

    with pytest.raises(OwnershipError):
        payments.pay_bill(db, seed.user.id, payment.id)


def test_bill_transaction_cannot_be_deleted(db, seed):
    _, payment = _bill(db, seed)
    paid, _ = payments.pay_bill(db, seed.user.id, payment.id, date(2025, 3, 9))
    db.commit()

    with pytest.raises(ConflictError):
        ledger.delete_transaction(db, seed.user.id, paid.transaction_id)


# ----------------------------------------------------------------
# Debts
# ----------------------------------------------------------------
def test_partial_debt_payment_reduces_outstanding_balance(db, seed):
    debt = _debt(db, seed)

    debt, debt_payment = payments.pay_debt(
        db,
        seed.user.id,
        debt.id,
        amount_paid=Decimal("400.00"),
        date=date(2025, 3, 5),
        category_id=seed.housing.id,
        account_id=seed.checking.id,
    )
    db.commit()

    assert debt.outstanding_balance == Decimal("600.00")
    assert debt.status == DebtStatus.ACTIVE
    assert debt_payment.amount == Decimal("400.00")
    assert balance_of(db, seed.checking) == Decimal("600.00")


def test_paying_the_full_balance_marks_debt_paid_off(db, seed):
    debt = _debt(db, seed, outstanding="300.00")

    debt, _ = payments.pay_debt(
        db,
        seed.user.id,
        debt.id,
        amount_paid=Decimal("300.00"),
        date=date(2025, 3, 5),
        category_id=seed.housing.id,
        account_id=seed.checking.id,
    )
    db.commit()

    assert debt.outstanding_balance == Decimal("0.00")
    assert debt.status == DebtStatus.PAID_OFF

    with pytest.raises(ConflictError):
        payments.pay_debt(
            db,
            seed.user.id,
            debt.id,
            amount_paid=Decimal("1.00"),
            date=date(2025, 3, 6),
            category_id=seed.housing.id,
            account_id=seed.checking.id,
        )


def test_overpaying_a_debt_is_rejected(db, seed):
    debt = _debt(db, seed, outstanding="300.00")

    with pytest.raises(ValidationError):
        payments.pay_debt(
            db,
            seed.user.id,
            debt.id,
            amount_paid=Decimal("300.01"),
            date=date(2025, 3, 5),
            category_id=seed.housing.id,
            account_id=seed.checking.id,
        )
    db.rollback()

    assert balance_of(db, seed.checking) == Decimal("1000.00")
    assert db.query(DebtPayment).count() == 0


def test_debt_payment_needs_an_expense_category(db, seed):
    debt = _debt(db, seed)

    with pytest.raises(ValidationError):
        payments.pay_debt(
            db,
            seed.user.id,
            debt.id,
            amount_paid=Decimal("10.00"),
            date=date(2025, 3, 5),
            category_id=seed.salary.id,
            account_id=seed.checking.id,
        )


def test_cancelled_debt_accepts_no_payments(db, seed):
    debt = _debt(db, seed)
    payments.cancel_debt(db, seed.user.id, debt.id)
    db.commit()

    with pytest.raises(ConflictError):
        payments.cancel_debt(db, seed.user.id, debt.id)
    with pytest.raises(ConflictError):
        payments.pay_debt(
            db,
            seed.user.id,
            debt.id,
            amount_paid=Decimal("10.00"),
            date=date(2025, 3, 5),
            category_id=seed.housing.id,
            account_id=seed.checking.id,
        )


# ----------------------------------------------------------------
# Invoices
# ----------------------------------------------------------------
def test_paying_an_invoice_debits_the_account_once(db, seed):
    _card_charge(db, seed, "100.00")
    _card_charge(db, seed, "50.00")
    db.commit()
    invoice = db.query(Invoice).one()

    paid = payments.pay_invoice(
        db,
        seed.user.id,
        invoice.id,
        payment_date=date(2025, 4, 5),
        account_id=seed.checking.id,
        category_id=seed.housing.id,
    )
    db.commit()

    assert paid.is_paid is True
    assert balance_of(db, seed.checking) == Decimal("850.00")
    payment_tx = db.query(Transaction).filter(Transaction.account_id == seed.checking.id).one()
    assert payment_tx.description == "Invoice payment Visa 03/2025"
    assert payment_tx.value == Decimal("150.00")

    with pytest.raises(ConflictError):
        payments.pay_invoice(
            db,
            seed.user.id,
            invoice.id,
            payment_date=date(2025, 4, 6),
            account_id=seed.checking.id,
            category_id=seed.housing.id,
        )
    db.rollback()
    assert balance_of(db, seed.checking) == Decimal("850.00")


def test_empty_invoice_cannot_be_paid(db, seed):
    [tx] = _card_charge(db, seed, "100.00")
    db.commit()
    ledger.delete_transaction(db, seed.user.id, tx.id)
    db.commit()
    invoice = db.query(Invoice).one()

    with pytest.raises(ValidationError):
        payments.pay_invoice(
            db,
            seed.user.id,
            invoice.id,
            payment_date=date(2025, 4, 5),
            account_id=seed.checking.id,
            category_id=seed.housing.id,
        )
    db.rollback()

    db.expire_all()
    assert db.get(Invoice, invoice.id).is_paid is False


def test_another_users_invoice_is_forbidden(db, seed, other):
    _card_charge(db, other, "10.00")
    db.commit()
    invoice = db.query(Invoice).one()

    with pytest.raises(OwnershipError):
        payments.get_owned_invoice(db, invoice.id, seed.user.id)
