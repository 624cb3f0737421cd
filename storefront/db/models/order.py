"""
Модели заказа и позиций заказа.
"""

import enum
from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    DateTime,
    Enum,
    ForeignKey,
    Integer,
    Numeric,
    String,
    Text,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.sql import func

from .base import Base


class OrderStatus(str, enum.Enum):
    """Статусы заказа в порядке прямого движения (CANCELLED - боковой выход)."""

    PENDING = "PENDING"
    CONFIRMED = "CONFIRMED"
    PROCESSING = "PROCESSING"
    SHIPPED = "SHIPPED"
    DELIVERED = "DELIVERED"
    CANCELLED = "CANCELLED"


class Order(Base):
    """
    Модель заказа.

    Attributes:
        id: ID заказа
        user_id: Владелец заказа
        total: Сумма заказа, фиксируется при создании
        status: Статус заказа
        delivery_address: Снимок адреса доставки (строка, не внешний ключ)
        po_number: Номер заказа на закупку (PO)
        customer_email: Email для уведомлений
        email_notification: Отправлять ли письма при смене статуса
        created_at: Дата создания
        updated_at: Дата обновления
        items: Позиции заказа
    """

    __tablename__ = "orders"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    user_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"), index=True
    )
    total: Mapped[Decimal] = mapped_column(Numeric(12, 2))
    status: Mapped[OrderStatus] = mapped_column(
        Enum(OrderStatus, native_enum=False, length=32),
        default=OrderStatus.PENDING,
        index=True,
    )

    delivery_address: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    po_number: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    customer_email: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    email_notification: Mapped[bool] = mapped_column(Boolean, default=True)

    # Временные метки
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    user: Mapped["User"] = relationship(back_populates="orders")
    # Связь с позициями заказа
    items: Mapped[List["OrderItem"]] = relationship(
        back_populates="order",
        cascade="all,delete-orphan",
        lazy="selectin",
    )

    __table_args__ = (CheckConstraint("total >= 0", name="ck_orders_total"),)


class OrderItem(Base):
    """
    Модель позиции заказа.

    Attributes:
        id: Уникальный идентификатор позиции
        order_id: ID заказа
        product_id: ID товара (обнуляется при удалении товара)
        quantity: Количество товара
        product_name: Название товара (снимок)
        price: Цена за единицу (снимок)
    """

    __tablename__ = "order_items"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    order_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("orders.id", ondelete="CASCADE"), index=True
    )
    product_id: Mapped[Optional[int]] = mapped_column(
        Integer, ForeignKey("products.id", ondelete="SET NULL"), nullable=True
    )

    quantity: Mapped[int] = mapped_column(Integer)
    product_name: Mapped[str] = mapped_column(Text)
    price: Mapped[Decimal] = mapped_column(Numeric(10, 2))

    # Связь с заказом
    order: Mapped[Order] = relationship(back_populates="items")
    product: Mapped[Optional["Product"]] = relationship(back_populates="order_items")

    __table_args__ = (CheckConstraint("quantity > 0", name="ck_order_items_quantity"),)

    @property
    def line_total(self) -> Decimal:
        return self.price * self.quantity
