"""Where a transaction or bill lands: exactly one account or one card.

Storage keeps two nullable columns; everything above storage works with the
``Target`` variant so the exactly-one rule is checked in one place.
"""

from dataclasses import dataclass
from typing import Union

from sqlalchemy.orm import Session

from app.errors import NotFoundError, OwnershipError, ValidationError
from app.models.account import Account
from app.models.card import Card


@dataclass(frozen=True)
class AccountTarget:
    account_id: int


@dataclass(frozen=True)
class CardTarget:
    card_id: int


Target = Union[AccountTarget, CardTarget]


def resolve_target(account_id=None, card_id=None) -> Target:
    if account_id and card_id:
        raise ValidationError("Use either an account or a card, not both")
    if account_id:
        return AccountTarget(int(account_id))
    if card_id:
        return CardTarget(int(card_id))
    raise ValidationError("An account or a card is required")


def target_columns(target: Target) -> dict:
    if isinstance(target, AccountTarget):
        return {"account_id": target.account_id, "card_id": None}
    return {"account_id": None, "card_id": target.card_id}


def get_owned(db: Session, model, obj_id: int, user_id: int, label: str):
    """Load a row addressed directly by the caller.

    Missing rows answer 404; rows that exist under another user answer 403.
    """
    obj = db.get(model, obj_id)
    if obj is None:
        raise NotFoundError(f"{label} not found")
    if obj.user_id != user_id:
        raise OwnershipError(f"{label} does not belong to the user")
    return obj


def find_owned(db: Session, model, obj_id: int, user_id: int, label: str):
    """Load a row referenced from a request body; foreign rows read as missing."""
    obj = db.query(model).filter(model.id == obj_id, model.user_id == user_id).first()
    if obj is None:
        raise NotFoundError(f"{label} not found or does not belong to the user")
    return obj


def load_account(db: Session, account_id: int, user_id: int) -> Account:
    account = find_owned(db, Account, account_id, user_id, "Account")
    if not account.active:
        raise ValidationError(f"Account {account_id} is inactive")
    return account


def load_card(db: Session, card_id: int, user_id: int) -> Card:
    card = find_owned(db, Card, card_id, user_id, "Card")
    if not card.active:
        raise ValidationError(f"Card {card_id} is inactive")
    return card
