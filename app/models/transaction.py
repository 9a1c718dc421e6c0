from sqlalchemy import Column, Date, DateTime, Enum, ForeignKey, Integer, Numeric, String
from sqlalchemy.orm import relationship
from datetime import datetime
from app.db.session import Base
from app.models.enums import TransactionType

class Transaction(Base):
    __tablename__ = "transactions"

    id = Column(Integer, primary_key=True, index=True)
    type = Column(Enum(TransactionType, native_enum=False, length=16), nullable=False)
    value = Column(Numeric(14, 2), nullable=False)
    date = Column(Date, nullable=False, index=True)
    description = Column(String, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    category_id = Column(Integer, ForeignKey("categories.id"), nullable=True)

    # exactly one target: account_id, or card_id + invoice_id
    account_id = Column(Integer, ForeignKey("accounts.id"), nullable=True, index=True)
    card_id = Column(Integer, ForeignKey("cards.id"), nullable=True, index=True)
    invoice_id = Column(Integer, ForeignKey("invoices.id"), nullable=True, index=True)
    # set on TRANSFER audit rows only
    target_account_id = Column(Integer, ForeignKey("accounts.id"), nullable=True)

    user = relationship("User", back_populates="transactions")
    category = relationship("Category")
    account = relationship("Account", foreign_keys=[account_id])
    target_account = relationship("Account", foreign_keys=[target_account_id])
    card = relationship("Card")
    invoice = relationship("Invoice", back_populates="transactions")
