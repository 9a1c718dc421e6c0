import logging
from typing import List, Tuple

from sqlalchemy.orm import Session

from app.errors import ValidationError
from app.models.bank_statement import BankStatement
from app.models.category import Category
from app.models.enums import TransactionType
from app.models.transaction import Transaction
from app.services.installments import CENT
from app.services.ledger import record_transaction
from app.services.targets import AccountTarget, load_account
from app.utils.transaction_utils import auto_categorize, read_statement_csv

logger = logging.getLogger(__name__)


def import_statement(
    db: Session, user_id: int, account_id: int, file_name: str, contents: bytes
) -> Tuple[BankStatement, List[Transaction]]:
    """Import a CSV statement into an account, one ledger row per line.

    Lines already present (same date, description, value and direction) are
    skipped, so re-uploading a statement is harmless.
    """
    account = load_account(db, account_id, user_id)
    try:
        rows = read_statement_csv(contents)
    except ValueError as exc:
        raise ValidationError(f"Could not read statement: {exc}")
    for row in rows:
        if row["amount"] != row["amount"].quantize(CENT):
            raise ValidationError(f"Statement amount {row['amount']} has more than two decimal places")

    categories = {
        (c.description.strip().lower(), c.type.value): c.id
        for c in db.query(Category).filter(Category.user_id == user_id, Category.active.is_(True))
    }

    added: List[Transaction] = []
    for row in rows:
        amount = row["amount"]
        if amount == 0:
            continue
        tx_type = TransactionType.INCOME if amount > 0 else TransactionType.EXPENSE
        value = abs(amount)

        exists = db.query(Transaction.id).filter_by(
            user_id=user_id,
            account_id=account.id,
            type=tx_type,
            value=value,
            date=row["date"],
            description=row["description"],
        ).first()
        if exists:
            continue

        label = auto_categorize(row["description"]).lower()
        added.append(
            record_transaction(
                db,
                user_id,
                type=tx_type,
                value=value,
                date=row["date"],
                description=row["description"],
                category_id=categories.get((label, tx_type.value)),
                target=AccountTarget(account.id),
            )
        )

    statement = BankStatement(
        user_id=user_id,
        account_id=account.id,
        file_name=file_name,
        file_type="text/csv",
        row_count=len(added),
    )
    db.add(statement)
    db.flush()
    logger.info(f"Imported {len(added)} of {len(rows)} statement lines into account {account.id}")
    return statement, added
