"""
Pydantic схемы заказов.
"""

from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, Field

from storefront.db.models import OrderStatus


class OrderLineIn(BaseModel):
    """Строка корзины: товар, количество и цена, которую видел клиент."""

    product_id: int
    quantity: int = Field(ge=1)
    price: Optional[Decimal] = Field(None, ge=0)


class OrderCreate(BaseModel):
    """
    Запрос на оформление заказа.

    Адрес доставки задается строкой или ID сохраненного адреса.
    """

    items: List[OrderLineIn] = []
    delivery_address: Optional[str] = None
    address_id: Optional[int] = None
    po_number: Optional[str] = Field(None, max_length=100)
    customer_email: Optional[str] = None
    email_notification: bool = True


class OrderStatusUpdate(BaseModel):
    status: str


class OrderItemOut(BaseModel):
    id: int
    product_id: Optional[int]
    product_name: str
    quantity: int
    price: Decimal

    class Config:
        from_attributes = True


class OrderOut(BaseModel):
    id: int
    user_id: int
    username: Optional[str] = None
    status: OrderStatus
    total: Decimal
    delivery_address: Optional[str]
    po_number: Optional[str]
    customer_email: Optional[str]
    email_notification: bool
    created_at: Optional[datetime]
    updated_at: Optional[datetime]
    items: List[OrderItemOut]

    class Config:
        from_attributes = True


class PageMeta(BaseModel):
    """Страница списка: номер, размер, всего записей и страниц."""

    page: int
    page_size: int
    total: int
    total_pages: int

    @classmethod
    def create(cls, page: int, page_size: int, total: int) -> "PageMeta":
        # Пустой список все равно занимает одну страницу
        total_pages = max(1, -(-total // page_size))
        return cls(page=page, page_size=page_size, total=total, total_pages=total_pages)


class OrderPage(BaseModel):
    items: List[OrderOut]
    meta: PageMeta


class RecentOrder(BaseModel):
    id: int
    username: str
    status: OrderStatus
    total: Decimal
    items_count: int
    created_at: Optional[datetime]


class DashboardStats(BaseModel):
    """Общая статистика дашборда."""

    total_products: int
    total_users: int
    total_orders: int
    total_categories: int
    total_revenue: Decimal
    recent_orders: List[RecentOrder]
