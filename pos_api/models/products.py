# pos_api/models/products.py

from sqlalchemy import CheckConstraint, Column, Integer, String, Numeric, ForeignKey
from sqlalchemy.orm import relationship

from pos_api.database import Base


class Product(Base):
    __tablename__ = "products"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, unique=True, index=True, nullable=False)
    description = Column(String, nullable=True)
    sale_price = Column(Numeric(10, 2), nullable=False)
    cost = Column(Numeric(10, 2), nullable=True)
    stock = Column(Integer, nullable=False, default=0)

    category_id = Column(Integer, ForeignKey("categories.id"), nullable=False, index=True)

    category = relationship("Category", back_populates="products")

    __table_args__ = (
        CheckConstraint("length(name) > 0", name="ck_product_name_not_empty"),
        CheckConstraint("sale_price > 0", name="ck_sale_price_positive"),
        CheckConstraint("cost IS NULL OR cost >= 0", name="ck_cost_non_negative"),
        CheckConstraint("stock >= 0", name="ck_stock_non_negative"),
    )
