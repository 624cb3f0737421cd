"""
Pydantic схемы товаров.
"""

from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, Field

from storefront.schemas.category import CategoryBrief
from storefront.schemas.user import UserBrief


class ProductCreate(BaseModel):
    name: str = Field(..., min_length=1)
    description: str = Field(..., min_length=1)
    price: Decimal = Field(..., ge=0, decimal_places=2)
    image: Optional[str] = None
    category_id: int
    assigned_to_id: Optional[int] = None


class ProductUpdate(BaseModel):
    """Частичное обновление; assigned_to_id=None снимает назначение."""

    name: Optional[str] = Field(None, min_length=1)
    description: Optional[str] = Field(None, min_length=1)
    price: Optional[Decimal] = Field(None, ge=0, decimal_places=2)
    image: Optional[str] = None
    category_id: Optional[int] = None
    assigned_to_id: Optional[int] = None


class ProductOut(BaseModel):
    id: int
    name: str
    description: str
    price: Decimal
    image: Optional[str] = None
    category: CategoryBrief
    assigned_to: Optional[UserBrief] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True
