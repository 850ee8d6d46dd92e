# schemas/sale.py

from pydantic import BaseModel
from datetime import datetime
from typing import List, Optional
from decimal import Decimal

# Value checks (payment method, quantities, prices) live in
# services.sales.validate_sale_request so direct callers get them too.

class SaleItemCreate(BaseModel):
    product_id: int
    quantity: int
    unit_price: Optional[Decimal] = None

class SaleCreate(BaseModel):
    customer_id: Optional[int] = None
    payment_method: str
    items: List[SaleItemCreate]
    # Advisory only, the persisted total is always recomputed
    total: Optional[Decimal] = None

class SaleItemProduct(BaseModel):
    name: str
    description: Optional[str]

    class Config:
        from_attributes = True

class SaleItemResponse(BaseModel):
    id: int
    product_id: int
    quantity: int
    unit_price: Decimal
    subtotal: Decimal
    product: SaleItemProduct

    class Config:
        from_attributes = True

class SaleCustomer(BaseModel):
    name: str
    surname: Optional[str]
    phone: str

    class Config:
        from_attributes = True

class SaleOperator(BaseModel):
    username: str

    class Config:
        from_attributes = True

class SaleResponse(BaseModel):
    id: int
    sold_at: datetime
    total: Decimal
    payment_method: str
    status: str
    customer_id: Optional[int]
    user_id: int
    items: List[SaleItemResponse]
    customer: Optional[SaleCustomer]
    operator: SaleOperator

    class Config:
        from_attributes = True

class SaleSummaryResponse(BaseModel):
    id: int
    sold_at: datetime
    total: Decimal
    payment_method: str
    status: str
    customer: Optional[SaleCustomer]
    operator: SaleOperator

    class Config:
        from_attributes = True
