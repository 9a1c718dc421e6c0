from sqlalchemy import Column, DateTime, ForeignKey, Integer, String
from datetime import datetime
from app.db.session import Base

class BankStatement(Base):
    __tablename__ = "bank_statements"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    account_id = Column(Integer, ForeignKey("accounts.id"), nullable=False)
    file_name = Column(String, nullable=False)
    file_type = Column(String, nullable=False)
    import_date = Column(DateTime, default=datetime.utcnow)
    row_count = Column(Integer, nullable=False, default=0)
