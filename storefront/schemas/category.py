"""
Pydantic схемы категорий.
"""

from typing import Optional

from pydantic import BaseModel, Field


class CategoryBrief(BaseModel):
    """Краткая информация о категории (вложенная в товар/пользователя)."""

    id: int
    name: str
    emoji: str

    class Config:
        from_attributes = True


class CategoryCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    emoji: str = Field(..., min_length=1, max_length=16)
    description: Optional[str] = None


class CategoryUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    emoji: Optional[str] = Field(None, min_length=1, max_length=16)
    description: Optional[str] = None


class CategoryOut(CategoryBrief):
    description: Optional[str] = None
    products_count: int = 0
