import logging

from sqlalchemy.orm import Session

import settings
from app.errors import ValidationError
from app.models.account import Account
from app.models.category import Category
from app.models.enums import TransactionType
from app.models.transaction import Transaction
from app.services.dates import to_utc_date
from app.services.deltas import apply_delta
from app.services.installments import to_money
from app.services.targets import find_owned, load_account
from app.utils.decimal_utils import coerce_decimal

logger = logging.getLogger(__name__)


def transfer(
    db: Session,
    user_id: int,
    *,
    origin_account_id: int,
    destination_account_id: int,
    value,
    date,
    description=None,
    category_id=None,
) -> Transaction:
    """Move ``value`` from one of the caller's accounts to another.

    Both balance updates and the TRANSFER audit row share the caller's unit of
    work. With BLOCK_OVERDRAFT_ON_TRANSFER on, the debit is refused when it
    would take the origin below zero.
    """
    value = to_money(value)
    if int(origin_account_id) == int(destination_account_id):
        raise ValidationError("Origin and destination accounts must differ")

    origin = load_account(db, origin_account_id, user_id)
    destination = load_account(db, destination_account_id, user_id)
    if category_id is not None:
        find_owned(db, Category, category_id, user_id, "Category")

    floor = 0 if settings.BLOCK_OVERDRAFT_ON_TRANSFER else None
    apply_delta(db, Account.balance, origin.id, -value, floor=floor)
    apply_delta(db, Account.balance, destination.id, value)

    tx = Transaction(
        type=TransactionType.TRANSFER,
        value=value,
        date=to_utc_date(date),
        description=description or f"Transfer to {destination.name}",
        category_id=category_id,
        user_id=user_id,
        account_id=origin.id,
        target_account_id=destination.id,
    )
    db.add(tx)
    db.flush()
    logger.info(f"Transferred {value} from account {origin.id} to account {destination.id}")
    return tx


def reverse_transfer(db: Session, tx: Transaction) -> None:
    value = coerce_decimal(tx.value)
    floor = 0 if settings.BLOCK_OVERDRAFT_ON_TRANSFER else None
    apply_delta(db, Account.balance, tx.target_account_id, -value, floor=floor)
    apply_delta(db, Account.balance, tx.account_id, value)
    logger.info(f"Reversed transfer {tx.id} of {value}")
