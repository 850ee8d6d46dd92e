# pos_api/models/sales.py

from sqlalchemy import CheckConstraint, Column, Index, Integer, DateTime, ForeignKey, Numeric, String
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship

from pos_api.database import Base

PAYMENT_METHODS = ("cash", "card", "transfer", "other")

STATUS_COMPLETED = "completed"


class Sale(Base):
    __tablename__ = "sales"

    id = Column(Integer, primary_key=True, index=True)

    sold_at = Column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
        index=True,
    )

    total = Column(Numeric(10, 2), nullable=False, default=0)

    payment_method = Column(String, nullable=False)
    status = Column(String, nullable=False, default=STATUS_COMPLETED)

    customer_id = Column(
        Integer,
        ForeignKey("customers.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)

    items = relationship(
        "SaleItem",
        back_populates="sale",
        cascade="all, delete-orphan",
        order_by="SaleItem.id",
    )
    customer = relationship("Customer")
    operator = relationship("User")

    __table_args__ = (
        Index("ix_sales_customer_sold_at", "customer_id", "sold_at"),
        CheckConstraint(
            "payment_method IN ('cash', 'card', 'transfer', 'other')",
            name="ck_payment_method_valid",
        ),
        CheckConstraint("total >= 0", name="ck_sale_total_non_negative"),
    )
