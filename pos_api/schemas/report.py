# schemas/report.py

from pydantic import BaseModel
from datetime import date
from decimal import Decimal
from typing import Optional


class DailySalesResponse(BaseModel):
    day: date
    total_sales: Decimal
    sales_count: int


class SalesByDateResponse(BaseModel):
    start_date: date
    end_date: date
    total_sales: Decimal
    sales_count: int


class TopProductResponse(BaseModel):
    product_id: int
    name: str
    description: Optional[str]
    total_quantity_sold: int


class TopCustomerResponse(BaseModel):
    customer_id: int
    name: str
    surname: Optional[str]
    phone: str
    total_purchases: int


