from sqlalchemy import Column, Date, ForeignKey, Integer, Numeric, String
from sqlalchemy.orm import relationship
from app.db.session import Base

class Investment(Base):
    __tablename__ = "investments"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    type = Column(String, nullable=False)
    description = Column(String, nullable=False)
    quantity = Column(Numeric(18, 6), nullable=False)
    acquisition_value = Column(Numeric(14, 2), nullable=False)
    acquisition_date = Column(Date, nullable=False)

    user = relationship("User", back_populates="investments")
