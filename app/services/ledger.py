"""Ledger mutation engine.

Every transaction has exactly one ledger effect: it moves the balance of one
account, or the total of one card invoice. The functions here apply and reverse
that effect next to the row writes, on the caller's session, without
committing. The route commits once, so the aggregate change and the row change
land together or not at all.
"""

import logging
from decimal import Decimal
from typing import List

from sqlalchemy.orm import Session

import settings
from app.errors import ConflictError, ValidationError
from app.models.account import Account
from app.models.bill import BillPayment
from app.models.category import Category
from app.models.debt import DebtPayment
from app.models.enums import TransactionType
from app.models.invoice import Invoice
from app.models.transaction import Transaction
from app.schemas.transaction import TransactionCreate, TransactionUpdate
from app.services import transfers
from app.services.dates import invoice_bucket, to_utc_date
from app.services.deltas import apply_delta, upsert_invoice
from app.services.installments import split_installments, to_money
from app.services.targets import (
    AccountTarget,
    CardTarget,
    Target,
    find_owned,
    get_owned,
    load_account,
    load_card,
    resolve_target,
    target_columns,
)
from app.utils.decimal_utils import coerce_decimal

logger = logging.getLogger(__name__)

ZERO = Decimal("0")


def parse_transaction_type(raw) -> TransactionType:
    if isinstance(raw, TransactionType):
        return raw
    try:
        return TransactionType(str(raw).upper())
    except ValueError:
        allowed = ", ".join(t.value for t in TransactionType)
        raise ValidationError(f"Unknown transaction type {raw!r}; expected one of {allowed}")


def _account_delta(tx_type: TransactionType, value: Decimal) -> Decimal:
    return value if tx_type == TransactionType.INCOME else -value


def _check_category(db: Session, category_id, tx_type: TransactionType, user_id: int):
    if category_id is None:
        raise ValidationError("A category is required")
    category = find_owned(db, Category, category_id, user_id, "Category")
    if category.type.value != tx_type.value:
        raise ValidationError(
            f"Category {category.description!r} is {category.type.value}, not {tx_type.value}"
        )
    return category


def target_of(tx: Transaction) -> Target:
    return resolve_target(tx.account_id, tx.card_id)


# ----------------------------------------------------------------
# Effect application
# ----------------------------------------------------------------
def apply_effect(db: Session, tx: Transaction, user_id: int) -> None:
    """Apply ``tx``'s effect to its account or card invoice.

    Card-bound rows are stamped with the invoice they were bucketed into.
    """
    if tx.type == TransactionType.TRANSFER:
        raise ValidationError("Transfers are applied by the transfer operator")
    value = coerce_decimal(tx.value)
    target = target_of(tx)

    if isinstance(target, AccountTarget):
        load_account(db, target.account_id, user_id)
        floor = None
        if tx.type == TransactionType.EXPENSE and settings.BLOCK_OVERDRAFT_ON_EXPENSE:
            floor = ZERO
        balance = apply_delta(db, Account.balance, target.account_id, _account_delta(tx.type, value), floor=floor)
        tx.invoice_id = None
        logger.info(f"{tx.type.value} {value} applied to account {target.account_id}; balance {balance}")
        return

    if tx.type != TransactionType.EXPENSE:
        raise ValidationError("Cards only accept expenses")
    card = load_card(db, target.card_id, user_id)
    month, year = invoice_bucket(tx.date, card.closing_day)
    invoice_id, is_paid = upsert_invoice(db, card.id, month, year, value)
    if is_paid:
        raise ConflictError(f"Invoice {month:02d}/{year} of card {card.name!r} is already paid")
    tx.invoice_id = invoice_id
    logger.info(f"EXPENSE {value} applied to card {card.id} invoice {month:02d}/{year} (id={invoice_id})")


def reverse_effect(db: Session, tx: Transaction) -> None:
    """Undo the effect ``tx`` had, using its stored type, value and target."""
    value = coerce_decimal(tx.value)
    if tx.account_id is not None:
        apply_delta(db, Account.balance, tx.account_id, -_account_delta(tx.type, value))
        logger.info(f"Reversed {tx.type.value} {value} on account {tx.account_id}")
        return

    invoice = db.get(Invoice, tx.invoice_id)
    if invoice is not None and invoice.is_paid:
        raise ConflictError(f"Transaction {tx.id} belongs to a paid invoice")
    # the invoice row stays even when its total drops to zero
    apply_delta(db, Invoice.total_amount, tx.invoice_id, -value)
    logger.info(f"Reversed EXPENSE {value} on invoice {tx.invoice_id}")


def record_transaction(
    db: Session,
    user_id: int,
    *,
    type: TransactionType,
    value,
    date,
    description,
    category_id,
    target: Target,
) -> Transaction:
    """Create one transaction row and apply its effect in the same unit."""
    tx = Transaction(
        type=type,
        value=to_money(value),
        date=to_utc_date(date),
        description=description,
        category_id=category_id,
        user_id=user_id,
        **target_columns(target),
    )
    apply_effect(db, tx, user_id)
    db.add(tx)
    db.flush()
    return tx


# ----------------------------------------------------------------
# Intents
# ----------------------------------------------------------------
def create_transaction(db: Session, user_id: int, payload: TransactionCreate) -> List[Transaction]:
    """Turn a submitted intent into one or more ledger rows."""
    tx_type = parse_transaction_type(payload.type)
    value = to_money(payload.value)

    if tx_type == TransactionType.TRANSFER:
        if payload.card_id:
            raise ValidationError("Transfers move money between accounts, not cards")
        if not payload.account_id or not payload.target_account_id:
            raise ValidationError("Transfers need an origin account and a target account")
        return [
            transfers.transfer(
                db,
                user_id,
                origin_account_id=payload.account_id,
                destination_account_id=payload.target_account_id,
                value=value,
                date=payload.date,
                description=payload.description,
                category_id=payload.category_id,
            )
        ]

    if not payload.description:
        raise ValidationError("A description is required")
    _check_category(db, payload.category_id, tx_type, user_id)
    target = resolve_target(payload.account_id, payload.card_id)

    if isinstance(target, AccountTarget) or payload.installments == 1:
        if payload.installments > 1:
            raise ValidationError("Installments are only allowed on credit cards")
        return [
            record_transaction(
                db,
                user_id,
                type=tx_type,
                value=value,
                date=payload.date,
                description=payload.description,
                category_id=payload.category_id,
                target=target,
            )
        ]

    if tx_type != TransactionType.EXPENSE:
        raise ValidationError("Cards only accept expenses")
    card = load_card(db, target.card_id, user_id)
    parts = split_installments(value, payload.installments, payload.date, card.closing_day)
    created = []
    for part in parts:
        created.append(
            record_transaction(
                db,
                user_id,
                type=tx_type,
                value=part.value,
                date=part.date,
                description=f"{payload.description} ({part.number}/{len(parts)})",
                category_id=payload.category_id,
                target=CardTarget(card.id),
            )
        )
    logger.info(f"Card {card.id} purchase of {value} split into {len(parts)} installments")
    return created


def _ensure_unlinked(db: Session, tx: Transaction) -> None:
    linked = (
        db.query(BillPayment.id).filter(BillPayment.transaction_id == tx.id).first()
        or db.query(DebtPayment.id).filter(DebtPayment.transaction_id == tx.id).first()
    )
    if linked:
        raise ConflictError(f"Transaction {tx.id} settles a bill or debt payment and cannot be changed")


def update_transaction(db: Session, user_id: int, tx_id: int, payload: TransactionUpdate) -> Transaction:
    """Reverse the stored effect, apply the changes, then apply the new effect."""
    tx = get_owned(db, Transaction, tx_id, user_id, "Transaction")
    if tx.type == TransactionType.TRANSFER:
        raise ValidationError("Transfers cannot be edited; delete and recreate them")
    _ensure_unlinked(db, tx)
    changes = payload.model_dump(exclude_unset=True)
    for field in ("type", "value", "date"):
        if field in changes and changes[field] is None:
            raise ValidationError(f"{field} cannot be null")

    new_type = parse_transaction_type(changes.get("type", tx.type))
    if new_type == TransactionType.TRANSFER:
        raise ValidationError("A transaction cannot be turned into a transfer")
    if "account_id" in changes or "card_id" in changes:
        new_target = resolve_target(changes.get("account_id"), changes.get("card_id"))
    else:
        new_target = target_of(tx)
    new_category = changes.get("category_id", tx.category_id)
    _check_category(db, new_category, new_type, user_id)
    new_value = to_money(changes["value"]) if "value" in changes else tx.value
    new_date = to_utc_date(changes["date"]) if "date" in changes else tx.date

    reverse_effect(db, tx)

    tx.type = new_type
    tx.value = new_value
    tx.date = new_date
    if "description" in changes:
        tx.description = changes["description"]
    tx.category_id = new_category
    for column, value in target_columns(new_target).items():
        setattr(tx, column, value)
    tx.invoice_id = None

    apply_effect(db, tx, user_id)
    db.flush()
    return tx


def delete_transaction(db: Session, user_id: int, tx_id: int) -> None:
    tx = get_owned(db, Transaction, tx_id, user_id, "Transaction")
    _ensure_unlinked(db, tx)
    if tx.type == TransactionType.TRANSFER:
        transfers.reverse_transfer(db, tx)
    else:
        reverse_effect(db, tx)
    db.delete(tx)
    db.flush()
    logger.info(f"Transaction {tx_id} deleted")
