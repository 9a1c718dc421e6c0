from sqlalchemy import Boolean, Column, Enum, ForeignKey, Integer, String
from sqlalchemy.orm import relationship
from app.db.session import Base
from app.models.enums import CategoryType

class Category(Base):
    __tablename__ = "categories"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    description = Column(String, nullable=False)
    type = Column(Enum(CategoryType, native_enum=False, length=16), nullable=False)
    active = Column(Boolean, nullable=False, default=True)

    user = relationship("User", back_populates="categories")
