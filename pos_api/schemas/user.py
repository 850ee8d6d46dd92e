from pydantic import BaseModel, Field
from datetime import datetime
from typing import Literal

class UserCreate(BaseModel):
    username: str = Field(..., min_length=3, max_length=50, description="Login name, must be unique")
    password: str = Field(..., min_length=6, max_length=72, description="Plain password (will be hashed). Minimum 6 characters.")
    role: Literal["admin", "seller"] = Field("seller", description="Only admins may create other admins")

class UserResponse(BaseModel):
    id: int
    username: str
    role: str
    created_at: datetime

    class Config:
        from_attributes = True
