import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from app.db.dependency import get_db
from app.errors import ConflictError
from app.models.user import User
from app.schemas.auth import LoginRequest, RegisterRequest, TokenOut, UserOut
from app.utils.auth import create_access_token, get_current_user, verify_password

logger = logging.getLogger(__name__)

router = APIRouter()

@router.post("/register", response_model=UserOut, status_code=status.HTTP_201_CREATED)
def register_user(
    payload: RegisterRequest,
    db: Session = Depends(get_db)
):
    existing_user = db.query(User).filter_by(email=payload.email).first()
    if existing_user:
        raise ConflictError("Email already registered")

    user = User(name=payload.name, email=payload.email)
    user.set_password(payload.password)
    db.add(user)
    db.commit()
    db.refresh(user)
    logger.info(f"User {user.id} registered")
    return user

@router.post("/login", response_model=TokenOut)
def login(user: LoginRequest, db: Session = Depends(get_db)):
    db_user = db.query(User).filter(User.email == user.email).first()
    if not db_user or not verify_password(user.password, db_user.hashed_password):
        raise HTTPException(status_code=401, detail="Invalid credentials")

    access_token = create_access_token(data={"sub": db_user.email})
    return {"access_token": access_token, "token_type": "bearer"}

@router.get("/me", response_model=UserOut)
def me(current_user: User = Depends(get_current_user)):
    return current_user
