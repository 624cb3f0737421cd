"""
Модели базы данных.

Импортирует все модели для корректной работы SQLAlchemy.
"""

from .address import Address
from .base import Base
from .category import Category
from .order import Order, OrderItem, OrderStatus
from .product import Product
from .user import User, UserCategory, UserRole

__all__ = [
    "Base",
    "Address",
    "Category",
    "Product",
    "Order",
    "OrderItem",
    "OrderStatus",
    "User",
    "UserCategory",
    "UserRole",
]
