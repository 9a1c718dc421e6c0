from sqlalchemy import Boolean, Column, ForeignKey, Integer, Numeric, String
from sqlalchemy.orm import relationship
from app.db.session import Base

class Card(Base):
    __tablename__ = "cards"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    account_id = Column(Integer, ForeignKey("accounts.id"), nullable=False)
    name = Column(String, nullable=False)
    credit_limit = Column(Numeric(14, 2), nullable=False, default=0)
    closing_day = Column(Integer, nullable=False)
    due_day = Column(Integer, nullable=False)
    active = Column(Boolean, nullable=False, default=True)

    user = relationship("User", back_populates="cards")
    account = relationship("Account", back_populates="cards")
    invoices = relationship("Invoice", back_populates="card", cascade="all, delete-orphan")
