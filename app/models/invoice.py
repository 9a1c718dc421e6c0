from sqlalchemy import Boolean, Column, ForeignKey, Integer, Numeric, UniqueConstraint
from sqlalchemy.orm import relationship
from app.db.session import Base

class Invoice(Base):
    __tablename__ = "invoices"
    __table_args__ = (
        UniqueConstraint("card_id", "month", "year", name="uq_invoice_card_month_year"),
    )

    id = Column(Integer, primary_key=True, index=True)
    card_id = Column(Integer, ForeignKey("cards.id"), nullable=False, index=True)
    month = Column(Integer, nullable=False)
    year = Column(Integer, nullable=False)
    # sum of the linked transactions' values, changed only through app.services.deltas
    total_amount = Column(Numeric(14, 2), nullable=False, default=0)
    is_paid = Column(Boolean, nullable=False, default=False)

    card = relationship("Card", back_populates="invoices")
    transactions = relationship("Transaction", back_populates="invoice", order_by="Transaction.date")
