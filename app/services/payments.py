"""Bill, debt and invoice payments.

Each payment ends in a ledger write through ``record_transaction``, plus the
bookkeeping for the obligation it settles. Status flips are conditional
UPDATEs, so two concurrent attempts to pay the same thing cannot both win.
"""

import logging
from datetime import date as date_type
from decimal import Decimal

from sqlalchemy import update
from sqlalchemy.orm import Session

from app.errors import ConflictError, NotFoundError, OwnershipError, ValidationError
from app.models.bill import Bill, BillPayment
from app.models.card import Card
from app.models.category import Category
from app.models.debt import Debt, DebtPayment
from app.models.enums import BillPaymentStatus, CategoryType, DebtStatus, Recurrence, TransactionType
from app.models.invoice import Invoice
from app.services.dates import advance_due_date, next_due_date, to_utc_date
from app.services.deltas import apply_delta
from app.services.ledger import record_transaction
from app.services.targets import AccountTarget, find_owned, get_owned, resolve_target
from app.utils.decimal_utils import coerce_decimal

logger = logging.getLogger(__name__)

RECURRENCE_MONTHS = {Recurrence.MONTHLY: 1, Recurrence.YEARLY: 12}


def _expense_category(db: Session, category_id: int, user_id: int) -> Category:
    category = find_owned(db, Category, category_id, user_id, "Category")
    if category.type != CategoryType.EXPENSE:
        raise ValidationError(f"Category {category.description!r} is not an expense category")
    return category


# ----------------------------------------------------------------
# Bills
# ----------------------------------------------------------------
def schedule_first_payment(db: Session, bill: Bill, today: date_type | None = None) -> BillPayment:
    payment = BillPayment(
        bill_id=bill.id,
        due_date=next_due_date(today or date_type.today(), bill.due_day),
        amount=bill.amount,
        status=BillPaymentStatus.PENDING,
    )
    db.add(payment)
    db.flush()
    return payment


def _owned_bill_payment(db: Session, payment_id: int, user_id: int) -> BillPayment:
    payment = db.get(BillPayment, payment_id)
    if payment is None:
        raise NotFoundError("Bill payment not found")
    if payment.bill.user_id != user_id:
        raise OwnershipError("Bill payment does not belong to the user")
    return payment


def pay_bill(db: Session, user_id: int, payment_id: int, payment_date=None):
    """Settle a PENDING bill payment.

    Creates the EXPENSE on the bill's account or card, marks the payment PAID
    with the new transaction, and schedules the next occurrence when the bill
    recurs. Returns ``(paid_payment, next_payment_or_None)``.
    """
    payment = _owned_bill_payment(db, payment_id, user_id)
    bill = payment.bill
    paid_on = to_utc_date(payment_date) if payment_date else date_type.today()

    flipped = db.execute(
        update(BillPayment)
        .where(BillPayment.id == payment.id, BillPayment.status == BillPaymentStatus.PENDING)
        .values(status=BillPaymentStatus.PAID, payment_date=paid_on)
        .execution_options(synchronize_session=False)
    )
    if flipped.rowcount == 0:
        raise ConflictError("This bill payment has already been paid")

    tx = record_transaction(
        db,
        user_id,
        type=TransactionType.EXPENSE,
        value=payment.amount,
        date=paid_on,
        description=bill.description,
        category_id=bill.category_id,
        target=resolve_target(bill.account_id, bill.card_id),
    )
    db.refresh(payment)
    payment.transaction_id = tx.id

    next_payment = None
    months = RECURRENCE_MONTHS.get(bill.recurrence)
    if months:
        next_payment = BillPayment(
            bill_id=bill.id,
            due_date=advance_due_date(payment.due_date, months, bill.due_day),
            amount=bill.amount,
            status=BillPaymentStatus.PENDING,
        )
        db.add(next_payment)
    db.flush()
    logger.info(
        f"Bill {bill.id} payment {payment.id} paid with transaction {tx.id}"
        + (f"; next due {next_payment.due_date}" if next_payment else "")
    )
    return payment, next_payment


# ----------------------------------------------------------------
# Debts
# ----------------------------------------------------------------
def pay_debt(
    db: Session,
    user_id: int,
    debt_id: int,
    *,
    amount_paid,
    date,
    category_id: int,
    account_id=None,
    card_id=None,
):
    """Pay down an ACTIVE debt. Returns ``(debt, debt_payment)``."""
    debt = get_owned(db, Debt, debt_id, user_id, "Debt")
    if debt.status != DebtStatus.ACTIVE:
        raise ConflictError(f"Debt is {debt.status.value} and accepts no further payments")

    amount = coerce_decimal(amount_paid)
    if amount <= 0:
        raise ValidationError("Payment amount must be positive")
    if amount > coerce_decimal(debt.outstanding_balance):
        raise ValidationError("Payment cannot exceed the outstanding balance")
    _expense_category(db, category_id, user_id)

    tx = record_transaction(
        db,
        user_id,
        type=TransactionType.EXPENSE,
        value=amount,
        date=date,
        description=f"Debt payment: {debt.description}",
        category_id=category_id,
        target=resolve_target(account_id, card_id),
    )

    remaining = apply_delta(db, Debt.outstanding_balance, debt.id, -amount, floor=Decimal("0"))
    if remaining <= 0:
        debt.status = DebtStatus.PAID_OFF

    debt_payment = DebtPayment(
        debt_id=debt.id,
        amount=amount,
        payment_date=to_utc_date(date),
        transaction_id=tx.id,
    )
    db.add(debt_payment)
    db.flush()
    logger.info(f"Debt {debt.id} paid {amount}; outstanding {remaining} ({debt.status.value})")
    return debt, debt_payment


def cancel_debt(db: Session, user_id: int, debt_id: int) -> Debt:
    debt = get_owned(db, Debt, debt_id, user_id, "Debt")
    if debt.status != DebtStatus.ACTIVE:
        raise ConflictError(f"Debt is already {debt.status.value}")
    debt.status = DebtStatus.CANCELLED
    db.flush()
    return debt


# ----------------------------------------------------------------
# Invoices
# ----------------------------------------------------------------
def get_owned_invoice(db: Session, invoice_id: int, user_id: int) -> Invoice:
    invoice = db.get(Invoice, invoice_id)
    if invoice is None:
        raise NotFoundError("Invoice not found")
    if invoice.card.user_id != user_id:
        raise OwnershipError("Invoice does not belong to the user")
    return invoice


def pay_invoice(db: Session, user_id: int, invoice_id: int, *, payment_date, account_id: int, category_id: int) -> Invoice:
    """Pay an invoice in full from one of the caller's accounts."""
    invoice = get_owned_invoice(db, invoice_id, user_id)
    card = db.get(Card, invoice.card_id)
    _expense_category(db, category_id, user_id)

    total = db.execute(
        update(Invoice)
        .where(Invoice.id == invoice.id, Invoice.is_paid.is_(False))
        .values(is_paid=True)
        .returning(Invoice.total_amount)
        .execution_options(synchronize_session=False)
    ).scalar_one_or_none()
    if total is None:
        raise ConflictError("This invoice has already been paid")
    total = coerce_decimal(total)
    if total <= 0:
        raise ValidationError("This invoice has nothing to pay")

    record_transaction(
        db,
        user_id,
        type=TransactionType.EXPENSE,
        value=total,
        date=payment_date,
        description=f"Invoice payment {card.name} {invoice.month:02d}/{invoice.year}",
        category_id=category_id,
        target=AccountTarget(int(account_id)),
    )
    db.refresh(invoice)
    logger.info(f"Invoice {invoice.id} of card {card.id} paid with {total} from account {account_id}")
    return invoice
