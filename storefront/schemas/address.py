"""
Pydantic схемы адресов доставки.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


class AddressCreate(BaseModel):
    label: str = Field(..., min_length=1, max_length=100)
    street: str = Field(..., min_length=1)
    city: str = Field(..., min_length=1, max_length=100)
    region: str = Field(..., min_length=1, max_length=100)
    postal_code: str = Field(..., min_length=1, max_length=20)
    country: Optional[str] = Field(None, max_length=100)
    is_default: bool = False


class AddressOut(BaseModel):
    id: int
    label: str
    street: str
    city: str
    region: str
    postal_code: str
    country: str
    is_default: bool
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True
