"""
Модели пользователя и доступа к категориям.
"""

import enum
from datetime import datetime
from typing import List

from sqlalchemy import DateTime, Enum, ForeignKey, Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.sql import func

from .base import Base


class UserRole(str, enum.Enum):
    """Роль пользователя."""

    ADMIN = "ADMIN"
    USER = "USER"


class User(Base):
    """
    Модель пользователя.

    ADMIN видит весь каталог, USER (компания) - только назначенные категории.
    Удаление пользователя удаляет его заказы, адреса и доступы к категориям.
    """

    __tablename__ = "users"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    username: Mapped[str] = mapped_column(
        String(100), unique=True, index=True, nullable=False
    )
    hashed_password: Mapped[str] = mapped_column(String(255), nullable=False)
    role: Mapped[UserRole] = mapped_column(
        Enum(UserRole, native_enum=False, length=16),
        default=UserRole.USER,
        nullable=False,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )

    category_links: Mapped[List["UserCategory"]] = relationship(
        back_populates="user", cascade="all,delete-orphan"
    )
    orders: Mapped[List["Order"]] = relationship(
        back_populates="user", cascade="all,delete-orphan"
    )
    addresses: Mapped[List["Address"]] = relationship(
        back_populates="user", cascade="all,delete-orphan"
    )
    assigned_products: Mapped[List["Product"]] = relationship(
        back_populates="assigned_to"
    )

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN

    @property
    def category_ids(self) -> List[int]:
        return [link.category_id for link in self.category_links]

    def __repr__(self) -> str:
        return f"<User(id={self.id}, username='{self.username}', role='{self.role}')>"


class UserCategory(Base):
    """Доступ пользователя-компании к категории."""

    __tablename__ = "user_categories"

    __table_args__ = (
        UniqueConstraint("user_id", "category_id", name="uq_user_category"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    user_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"), index=True
    )
    category_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("categories.id", ondelete="CASCADE"), index=True
    )

    user: Mapped["User"] = relationship(back_populates="category_links")
    category: Mapped["Category"] = relationship(back_populates="user_links")
