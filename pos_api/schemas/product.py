from decimal import Decimal
from pydantic import BaseModel, Field


class ProductCreate(BaseModel):
    name: str = Field(..., min_length=3, max_length=100)
    description: str | None = Field(None, max_length=255)

    sale_price: Decimal = Field(
        ...,
        gt=0,
        lt=100_000_000,
        decimal_places=2,
        description="Sale price must be positive and below 100 million"
    )

    cost: Decimal | None = Field(
        None,
        ge=0,
        lt=100_000_000,
        decimal_places=2,
    )

    stock: int = Field(0, ge=0)
    category_id: int = Field(..., ge=1)


class ProductUpdate(BaseModel):
    name: str | None = Field(None, min_length=3, max_length=100)
    description: str | None = Field(None, max_length=255)
    sale_price: Decimal | None = Field(None, gt=0, lt=100_000_000, decimal_places=2)
    cost: Decimal | None = Field(None, ge=0, lt=100_000_000, decimal_places=2)
    stock: int | None = Field(None, ge=0)
    category_id: int | None = Field(None, ge=1)


class ProductCategory(BaseModel):
    name: str

    class Config:
        from_attributes = True


class ProductResponse(BaseModel):
    id: int
    name: str
    description: str | None
    sale_price: Decimal
    cost: Decimal | None
    stock: int
    category_id: int
    category: ProductCategory | None = None

    class Config:
        from_attributes = True
