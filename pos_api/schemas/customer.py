from datetime import datetime
from decimal import Decimal
from pydantic import BaseModel, EmailStr, Field


class CustomerCreate(BaseModel):
    name: str = Field(..., min_length=2, max_length=100)
    surname: str | None = Field(None, max_length=100)
    phone: str = Field(..., pattern=r"^[0-9]{7,15}$")
    address: str | None = Field(None, max_length=255)
    email: EmailStr | None = None
    favorite_products: list[int] | None = None


class CustomerUpdate(BaseModel):
    name: str | None = Field(None, min_length=2, max_length=100)
    surname: str | None = Field(None, max_length=100)
    phone: str | None = Field(None, pattern=r"^[0-9]{7,15}$")
    address: str | None = Field(None, max_length=255)
    email: EmailStr | None = None
    favorite_products: list[int] | None = None


class CustomerResponse(BaseModel):
    id: int
    name: str
    surname: str | None
    phone: str
    email: str | None
    address: str | None
    registered_at: datetime
    last_purchase_at: datetime | None
    average_ticket: Decimal
    favorite_products: list

    class Config:
        from_attributes = True
