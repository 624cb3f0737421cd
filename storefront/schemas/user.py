"""
Pydantic схемы пользователей и аутентификации.
"""

from datetime import datetime
from typing import List

from pydantic import BaseModel, Field

from storefront.db.models import UserRole
from storefront.schemas.category import CategoryBrief


# ==================== ПОЛЬЗОВАТЕЛИ ====================


class UserBrief(BaseModel):
    """Краткая информация о пользователе."""

    id: int
    username: str

    class Config:
        from_attributes = True


class UserCreate(BaseModel):
    """Схема для создания пользователя-компании."""

    username: str = Field(..., min_length=1, max_length=100)
    password: str = Field(..., description="Пароль")
    category_ids: List[int] = Field(default_factory=list, description="Доступные категории")


class UserCategoriesUpdate(BaseModel):
    """Схема для замены доступов к категориям."""

    category_ids: List[int]


class UserOut(BaseModel):
    """Схема для вывода пользователя."""

    id: int
    username: str
    role: UserRole
    created_at: datetime
    categories: List[CategoryBrief] = []


# ==================== АУТЕНТИФИКАЦИЯ ====================


class LoginRequest(BaseModel):
    """Схема для входа в систему."""

    username: str = Field(..., description="Username")
    password: str = Field(..., description="Пароль")


class LoginResponse(BaseModel):
    """Схема ответа при входе в систему."""

    access_token: str
    token_type: str = "bearer"
    expires_in: int
    user: UserOut


class ChangePasswordRequest(BaseModel):
    """Схема для смены пароля."""

    current_password: str = Field(..., description="Текущий пароль")
    new_password: str = Field(..., description="Новый пароль")
