from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from typing import List

from app.db.dependency import get_db
from app.models.investment import Investment
from app.models.user import User
from app.schemas.investment import InvestmentCreate, InvestmentOut
from app.utils.auth import get_current_user

router = APIRouter()

@router.post("", response_model=InvestmentOut, status_code=status.HTTP_201_CREATED)
def create_investment(
    payload: InvestmentCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    investment = Investment(**payload.model_dump(), user_id=current_user.id)
    db.add(investment)
    db.commit()
    db.refresh(investment)
    return investment

@router.get("", response_model=List[InvestmentOut])
def list_investments(db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    return (
        db.query(Investment)
        .filter(Investment.user_id == current_user.id)
        .order_by(Investment.acquisition_date.desc())
        .all()
    )
