# pos_api/models/customers.py

import json

from sqlalchemy import Column, Integer, String, Text, DateTime, Numeric
from sqlalchemy.sql import func

from pos_api.database import Base


def encode_favorite_products(values) -> str | None:
    if values is None:
        return None
    return json.dumps(list(values))


def decode_favorite_products(raw: str | None) -> list:
    if not raw:
        return []
    return json.loads(raw)


class Customer(Base):
    __tablename__ = "customers"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False)
    surname = Column(String, nullable=True)
    phone = Column(String, unique=True, index=True, nullable=False)
    email = Column(String, unique=True, nullable=True)
    address = Column(String, nullable=True)

    registered_at = Column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
    )

    # Set by the sale processor only
    last_purchase_at = Column(DateTime(timezone=True), nullable=True)

    # Stored as-is, never recomputed
    average_ticket = Column(Numeric(10, 2), nullable=False, default=0)

    # Opaque JSON text; the sale path never reads it
    favorite_products_json = Column("favorite_products", Text, nullable=True)

    @property
    def favorite_products(self) -> list:
        return decode_favorite_products(self.favorite_products_json)

    @favorite_products.setter
    def favorite_products(self, values):
        self.favorite_products_json = encode_favorite_products(values)
