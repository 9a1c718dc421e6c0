from sqlalchemy import Boolean, Column, Date, Enum, ForeignKey, Integer, Numeric, String
from sqlalchemy.orm import relationship
from app.db.session import Base
from app.models.enums import BillPaymentStatus, Recurrence

class Bill(Base):
    __tablename__ = "bills"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    description = Column(String, nullable=False)
    amount = Column(Numeric(14, 2), nullable=False)
    due_day = Column(Integer, nullable=False)
    recurrence = Column(Enum(Recurrence, native_enum=False, length=16), nullable=False, default=Recurrence.NONE)
    active = Column(Boolean, nullable=False, default=True)
    category_id = Column(Integer, ForeignKey("categories.id"), nullable=False)
    account_id = Column(Integer, ForeignKey("accounts.id"), nullable=True)
    card_id = Column(Integer, ForeignKey("cards.id"), nullable=True)

    user = relationship("User", back_populates="bills")
    category = relationship("Category")
    payments = relationship(
        "BillPayment", back_populates="bill", cascade="all, delete-orphan", order_by="BillPayment.due_date"
    )


class BillPayment(Base):
    __tablename__ = "bill_payments"

    id = Column(Integer, primary_key=True, index=True)
    bill_id = Column(Integer, ForeignKey("bills.id"), nullable=False, index=True)
    due_date = Column(Date, nullable=False)
    amount = Column(Numeric(14, 2), nullable=False)
    status = Column(Enum(BillPaymentStatus, native_enum=False, length=16), nullable=False, default=BillPaymentStatus.PENDING)
    payment_date = Column(Date, nullable=True)
    transaction_id = Column(Integer, ForeignKey("transactions.id"), nullable=True)

    bill = relationship("Bill", back_populates="payments")
    transaction = relationship("Transaction")
