"""
API endpoints для работы с заказами.

Содержит оформление заказа из корзины, просмотр заказов
и управление статусами (для администратора).
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from storefront.core.auth import Actor, get_current_actor, require_admin
from storefront.core.exceptions import InvalidInputError
from storefront.db.database import get_db
from storefront.db.models import Order
from storefront.schemas.order import (
    OrderCreate,
    OrderOut,
    OrderPage,
    OrderStatusUpdate,
    PageMeta,
)
from storefront.services.notification_service import NotificationDispatcher, get_notifier
from storefront.services.order_service import order_service

router = APIRouter()


def order_to_dict(order: Order) -> dict:
    """Заказ с позициями и именем покупателя для ответа API."""
    return {
        "id": order.id,
        "user_id": order.user_id,
        "username": order.user.username if order.user else None,
        "status": order.status,
        "total": order.total,
        "delivery_address": order.delivery_address,
        "po_number": order.po_number,
        "customer_email": order.customer_email,
        "email_notification": order.email_notification,
        "created_at": order.created_at,
        "updated_at": order.updated_at,
        "items": [
            {
                "id": item.id,
                "product_id": item.product_id,
                "product_name": item.product_name,
                "quantity": item.quantity,
                "price": item.price,
            }
            for item in order.items
        ],
    }


@router.get("", response_model=OrderPage)
def list_orders(
    page: int = Query(1, ge=1, description="Номер страницы"),
    page_size: int = Query(20, ge=1, le=100, description="Размер страницы"),
    status: Optional[str] = Query(
        None,
        description="Фильтр по статусу: PENDING/CONFIRMED/PROCESSING/SHIPPED/DELIVERED/CANCELLED",
    ),
    actor: Actor = Depends(get_current_actor),
    db: Session = Depends(get_db),
):
    """
    Получить список заказов с пагинацией.

    Администратор видит все заказы, компания - только свои.

    Args:
        page: Номер страницы (начиная с 1)
        page_size: Размер страницы (1-100)
        status: Фильтр по статусу заказа
        actor: Текущий пользователь
        db: Сессия базы данных

    Returns:
        OrderPage: Заказы (новые первыми) с метаданными пагинации
    """
    orders, total = order_service.list_orders(
        db, actor, status=status, page=page, page_size=page_size
    )
    return {
        "items": [order_to_dict(order) for order in orders],
        "meta": PageMeta.create(page, page_size, total),
    }


@router.post("", response_model=OrderOut, status_code=201)
def create_order(
    payload: OrderCreate,
    actor: Actor = Depends(get_current_actor),
    db: Session = Depends(get_db),
    notifier: NotificationDispatcher = Depends(get_notifier),
):
    """
    Оформить заказ из корзины.

    Ожидает JSON:
    {
      "items": [{"product_id": 1, "quantity": 2, "price": "9.99"}, ...],
      "delivery_address": "...",
      "po_number": "PO-123",
      "customer_email": "buyer@example.com"
    }

    Вместо delivery_address можно передать address_id сохраненного адреса.
    Письмо-подтверждение отправляется в фоне и не задерживает ответ.

    Raises:
        InvalidInputError: Пустая корзина, нет адреса или некорректный email
        NotFoundError: Товар не найден или недоступен пользователю
    """
    order = order_service.place_order(db, actor, payload, notifier=notifier)
    return order_to_dict(order)


@router.delete("")
def clear_orders(
    clear_all: bool = Query(False, alias="clearAll"),
    actor: Actor = Depends(require_admin),
    db: Session = Depends(get_db),
):
    """Удалить все заказы (требует clearAll=true)."""
    if not clear_all:
        raise InvalidInputError("Invalid operation")
    removed = order_service.clear_all(db)
    return {"message": "All orders cleared", "removed": removed}


@router.get("/{order_id}", response_model=OrderOut)
def get_order(
    order_id: int,
    actor: Actor = Depends(get_current_actor),
    db: Session = Depends(get_db),
):
    """Получить заказ по ID (свой или любой для администратора)."""
    return order_to_dict(order_service.get_order(db, actor, order_id))


@router.put("/{order_id}/status", response_model=OrderOut)
def update_order_status(
    order_id: int,
    status_data: OrderStatusUpdate,
    actor: Actor = Depends(require_admin),
    db: Session = Depends(get_db),
    notifier: NotificationDispatcher = Depends(get_notifier),
):
    """
    Обновить статус заказа.

    Разрешены переходы только вперед по цепочке
    PENDING -> CONFIRMED -> PROCESSING -> SHIPPED -> DELIVERED
    и отмена из любого статуса (если не отключено ORDER_STATUS_STRICT).
    """
    order = order_service.update_status(
        db, order_id, status_data.status, notifier=notifier
    )
    return order_to_dict(order)
