from sqlalchemy import Boolean, Column, Enum, ForeignKey, Integer, Numeric, String
from sqlalchemy.orm import relationship
from app.db.session import Base
from app.models.enums import AccountType

class Account(Base):
    __tablename__ = "accounts"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    name = Column(String, nullable=False)
    type = Column(Enum(AccountType, native_enum=False, length=16), nullable=False)
    # running total, changed only through app.services.deltas
    balance = Column(Numeric(14, 2), nullable=False, default=0)
    active = Column(Boolean, nullable=False, default=True)

    user = relationship("User", back_populates="accounts")
    cards = relationship("Card", back_populates="account")
