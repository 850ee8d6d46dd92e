# pos_api/models/categories.py

from sqlalchemy import Column, Integer, String
from sqlalchemy.orm import relationship

from pos_api.database import Base


class Category(Base):
    __tablename__ = "categories"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, unique=True, index=True, nullable=False)

    products = relationship("Product", back_populates="category")
