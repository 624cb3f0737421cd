"""
Модель категории товаров.
"""

from datetime import datetime
from typing import List, Optional

from sqlalchemy import DateTime, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.sql import func

from .base import Base


class Category(Base):
    """
    Модель категории товаров.

    Attributes:
        id: Уникальный идентификатор категории
        name: Уникальное название категории
        emoji: Иконка категории
        description: Описание категории
        products: Товары категории (удаляются вместе с категорией)
        user_links: Доступы пользователей к категории
    """

    __tablename__ = "categories"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    name: Mapped[str] = mapped_column(String(255), unique=True, index=True)
    emoji: Mapped[str] = mapped_column(String(16))
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )

    # Связь с товарами (каскадное удаление)
    products: Mapped[List["Product"]] = relationship(
        back_populates="category",
        cascade="all,delete",
    )
    user_links: Mapped[List["UserCategory"]] = relationship(
        back_populates="category",
        cascade="all,delete-orphan",
    )

    def __repr__(self) -> str:
        return f"<Category(id={self.id}, name='{self.name}')>"
