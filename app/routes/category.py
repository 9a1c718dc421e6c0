from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from typing import List

from app.db.dependency import get_db
from app.errors import ConflictError
from app.models.bill import Bill
from app.models.category import Category
from app.models.transaction import Transaction
from app.models.user import User
from app.schemas.category import CategoryCreate, CategoryOut, CategoryUpdate
from app.services.targets import get_owned
from app.utils.auth import get_current_user

router = APIRouter()

@router.post("", response_model=CategoryOut, status_code=status.HTTP_201_CREATED)
def create_category(
    payload: CategoryCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    category = Category(description=payload.description, type=payload.type, user_id=current_user.id)
    db.add(category)
    db.commit()
    db.refresh(category)
    return category

@router.get("", response_model=List[CategoryOut])
def list_categories(db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    return (
        db.query(Category)
        .filter(Category.user_id == current_user.id)
        .order_by(Category.description)
        .all()
    )

@router.get("/{category_id}", response_model=CategoryOut)
def get_category(
    category_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return get_owned(db, Category, category_id, current_user.id, "Category")

@router.put("/{category_id}", response_model=CategoryOut)
def update_category(
    category_id: int,
    payload: CategoryUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    category = get_owned(db, Category, category_id, current_user.id, "Category")
    for field, value in payload.model_dump(exclude_unset=True).items():
        setattr(category, field, value)
    db.commit()
    db.refresh(category)
    return category

@router.patch("/{category_id}/status", response_model=CategoryOut)
def toggle_category(
    category_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    category = get_owned(db, Category, category_id, current_user.id, "Category")
    category.active = not category.active
    db.commit()
    db.refresh(category)
    return category

@router.delete("/{category_id}")
def delete_category(
    category_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    category = get_owned(db, Category, category_id, current_user.id, "Category")
    linked = (
        db.query(Transaction.id).filter(Transaction.category_id == category.id).first()
        or db.query(Bill.id).filter(Bill.category_id == category.id).first()
    )
    if linked:
        raise ConflictError("Category is used by transactions or bills; deactivate it instead")
    db.delete(category)
    db.commit()
    return {"detail": "Deleted successfully"}
