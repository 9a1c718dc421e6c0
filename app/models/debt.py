from sqlalchemy import Column, Date, Enum, Float, ForeignKey, Integer, Numeric, String
from sqlalchemy.orm import relationship
from app.db.session import Base
from app.models.enums import DebtStatus, DebtType

class Debt(Base):
    __tablename__ = "debts"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    description = Column(String, nullable=False)
    creditor = Column(String, nullable=True)
    type = Column(Enum(DebtType, native_enum=False, length=16), nullable=False)
    initial_amount = Column(Numeric(14, 2), nullable=False)
    # changed only by payments, through app.services.deltas
    outstanding_balance = Column(Numeric(14, 2), nullable=False)
    interest_rate = Column(Float, nullable=True)
    minimum_payment = Column(Numeric(14, 2), nullable=True)
    payment_due_day = Column(Integer, nullable=True)
    start_date = Column(Date, nullable=False)
    estimated_end_date = Column(Date, nullable=True)
    status = Column(Enum(DebtStatus, native_enum=False, length=16), nullable=False, default=DebtStatus.ACTIVE)

    user = relationship("User", back_populates="debts")
    payments = relationship("DebtPayment", back_populates="debt", cascade="all, delete-orphan")


class DebtPayment(Base):
    __tablename__ = "debt_payments"

    id = Column(Integer, primary_key=True, index=True)
    debt_id = Column(Integer, ForeignKey("debts.id"), nullable=False, index=True)
    amount = Column(Numeric(14, 2), nullable=False)
    payment_date = Column(Date, nullable=False)
    transaction_id = Column(Integer, ForeignKey("transactions.id"), nullable=True)

    debt = relationship("Debt", back_populates="payments")
    transaction = relationship("Transaction")
