from pydantic import BaseModel, Field


class CategoryCreate(BaseModel):
    name: str = Field(..., min_length=2, max_length=100)


class CategoryUpdate(BaseModel):
    name: str = Field(..., min_length=2, max_length=100)


class CategoryResponse(BaseModel):
    id: int
    name: str

    class Config:
        from_attributes = True
