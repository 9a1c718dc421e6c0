from fastapi import APIRouter, Depends, File, Form, UploadFile, status
from sqlalchemy.orm import Session
from typing import List

from app.db.dependency import get_db
from app.errors import ValidationError
from app.models.bank_statement import BankStatement
from app.models.user import User
from app.schemas.report import BankStatementOut
from app.schemas.transaction import TransactionOut
from app.services.statements import import_statement
from app.services.targets import get_owned
from app.utils.auth import get_current_user

router = APIRouter()

@router.post("/import", status_code=status.HTTP_201_CREATED)
async def upload_statement(
    file: UploadFile = File(...),
    account_id: int = Form(...),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    if not (file.filename or "").lower().endswith(".csv"):
        raise ValidationError("Only CSV statements are supported")
    contents = await file.read()
    if not contents.strip():
        raise ValidationError("The uploaded file is empty")

    statement, added = import_statement(db, current_user.id, account_id, file.filename, contents)
    db.commit()
    return {
        "statement": BankStatementOut.model_validate(statement),
        "transactions": [TransactionOut.model_validate(tx) for tx in added],
    }

@router.get("", response_model=List[BankStatementOut])
def list_statements(db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    return (
        db.query(BankStatement)
        .filter(BankStatement.user_id == current_user.id)
        .order_by(BankStatement.import_date.desc())
        .all()
    )

@router.delete("/{statement_id}")
def delete_statement(
    statement_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    # imported transactions stay; they are ordinary ledger rows by now
    statement = get_owned(db, BankStatement, statement_id, current_user.id, "Statement")
    db.delete(statement)
    db.commit()
    return {"detail": "Deleted successfully"}
