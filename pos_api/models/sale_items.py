# pos_api/models/sale_items.py

from sqlalchemy import CheckConstraint, Column, Integer, ForeignKey, Numeric
from sqlalchemy.orm import relationship

from pos_api.database import Base


class SaleItem(Base):
    __tablename__ = "sale_items"

    id = Column(Integer, primary_key=True, index=True)

    sale_id = Column(Integer, ForeignKey("sales.id", ondelete="CASCADE"), nullable=False, index=True)
    product_id = Column(Integer, ForeignKey("products.id"), nullable=False, index=True)

    quantity = Column(Integer, nullable=False, default=1)
    # Captured at sale time, never looked up again
    unit_price = Column(Numeric(10, 2), nullable=False)
    subtotal = Column(Numeric(10, 2), nullable=False)

    sale = relationship("Sale", back_populates="items")
    product = relationship("Product")

    __table_args__ = (
        CheckConstraint("quantity >= 1", name="ck_sale_item_quantity_positive"),
    )
