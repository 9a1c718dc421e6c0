"""Single writer for the running aggregates.

``accounts.balance``, ``invoices.total_amount`` and ``debts.outstanding_balance``
are only ever moved by a signed delta applied inside the database, never by
assigning a value computed in Python. The UPDATE both changes and returns the
column, so two requests touching the same row cannot lose each other's update.
"""

import logging
from decimal import Decimal

from sqlalchemy import update
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.orm import Session
from sqlalchemy.orm.attributes import set_committed_value
from sqlalchemy.orm.util import identity_key

from app.errors import InsufficientFundsError, NotFoundError
from app.models.invoice import Invoice
from app.utils.decimal_utils import coerce_decimal

logger = logging.getLogger(__name__)


def apply_delta(db: Session, column, row_id: int, delta, floor=None) -> Decimal:
    """Add ``delta`` to ``column`` of row ``row_id`` and return the new value.

    With ``floor`` set, the row is only updated when the result stays at or
    above it; otherwise InsufficientFundsError is raised and nothing changes.
    """
    model = column.class_
    delta = coerce_decimal(delta)
    stmt = update(model).where(model.id == row_id)
    if floor is not None:
        stmt = stmt.where(column + delta >= floor)
    stmt = (
        stmt.values({column.key: column + delta})
        .returning(column)
        .execution_options(synchronize_session=False)
    )
    new_value = db.execute(stmt).scalar_one_or_none()

    if new_value is None:
        if db.get(model, row_id) is None:
            raise NotFoundError(f"{model.__name__} {row_id} not found")
        raise InsufficientFundsError(
            f"{model.__name__} {row_id} cannot absorb a change of {delta}"
        )

    new_value = coerce_decimal(new_value)
    cached = db.identity_map.get(identity_key(model, row_id))
    if cached is not None:
        set_committed_value(cached, column.key, new_value)
    logger.debug(f"{model.__tablename__}.{column.key}[{row_id}] {delta:+} -> {new_value}")
    return new_value


def _insert_for(db: Session):
    dialect = db.get_bind().dialect.name
    if dialect == "postgresql":
        return postgresql.insert
    if dialect == "sqlite":
        return sqlite.insert
    raise NotImplementedError(f"Invoice upsert is not supported on {dialect}")


def upsert_invoice(db: Session, card_id: int, month: int, year: int, amount) -> tuple[int, bool]:
    """Insert the (card, month, year) invoice or add ``amount`` to its total.

    Returns the invoice id and whether it was already paid.
    """
    amount = coerce_decimal(amount)
    insert = _insert_for(db)
    stmt = insert(Invoice).values(
        card_id=card_id, month=month, year=year, total_amount=amount, is_paid=False
    )
    stmt = stmt.on_conflict_do_update(
        index_elements=[Invoice.card_id, Invoice.month, Invoice.year],
        set_={"total_amount": Invoice.total_amount + stmt.excluded.total_amount},
    ).returning(Invoice.id, Invoice.is_paid)
    invoice_id, is_paid = db.execute(stmt).one()

    cached = db.identity_map.get(identity_key(Invoice, invoice_id))
    if cached is not None:
        db.expire(cached, ["total_amount"])
    return invoice_id, bool(is_paid)
