"""
Сервис заказов: оформление, просмотр, смена статуса и статистика.

Заказ и его позиции создаются одним коммитом. Цена каждой позиции
фиксируется в момент оформления и не меняется вместе с товаром.
"""

import logging
from decimal import Decimal
from typing import Dict, List, Optional, Tuple

from email_validator import EmailNotValidError, validate_email
from sqlalchemy import delete, desc, func, select
from sqlalchemy.orm import Session, selectinload

from storefront.core.auth import Actor
from storefront.core.config import settings
from storefront.core.exceptions import InvalidInputError, NotFoundError
from storefront.db.models import (
    Address,
    Category,
    Order,
    OrderItem,
    OrderStatus,
    Product,
    User,
    UserRole,
)
from storefront.schemas.order import OrderCreate
from storefront.services.catalog_service import visible_products
from storefront.services.email_templates import OrderEmailData
from storefront.services.order_status import check_transition, parse_status

logger = logging.getLogger(__name__)

CENTS = Decimal("0.01")


def normalize_email(value: Optional[str]) -> str:
    """
    Синтаксическая проверка email (локальная часть @ домен с точкой).

    Внутренние домены (.local, .test и т.п.) допускаются.
    """
    value = (value or "").strip()
    if not value:
        raise InvalidInputError("Email address is required")
    try:
        email = validate_email(
            value, check_deliverability=False, globally_deliverable=False
        )
    except EmailNotValidError:
        raise InvalidInputError("Email address is invalid")
    if "." not in email.domain:
        raise InvalidInputError("Email address is invalid")
    return email.normalized


class OrderService:
    """Операции с заказами."""

    def __init__(self, config=settings):
        self.config = config

    # ==================== ОФОРМЛЕНИЕ ====================

    def place_order(self, db: Session, actor: Actor, payload: OrderCreate, notifier=None) -> Order:
        """
        Оформить заказ из строк корзины.

        Все проверки выполняются до записи в БД. После коммита в очередь
        ставится письмо-подтверждение; его судьба на заказ не влияет.
        """
        if not payload.items:
            raise InvalidInputError("Order must have items")

        delivery_address = self._resolve_delivery_address(db, actor, payload)
        customer_email = normalize_email(payload.customer_email)
        po_number = (payload.po_number or "").strip() or None

        products = self._load_orderable_products(
            db, actor, [line.product_id for line in payload.items]
        )

        total = Decimal("0.00")
        order_items = []
        for line in payload.items:
            product = products[line.product_id]
            price = self._line_price(product, line.price)
            total += price * line.quantity
            order_items.append(
                OrderItem(
                    product_id=product.id,
                    product_name=product.name,
                    quantity=line.quantity,
                    price=price,
                )
            )

        order = Order(
            user_id=actor.id,
            total=total.quantize(CENTS),
            status=OrderStatus.PENDING,
            delivery_address=delivery_address,
            po_number=po_number,
            customer_email=customer_email,
            email_notification=payload.email_notification,
            items=order_items,
        )
        db.add(order)
        db.commit()
        db.refresh(order)
        logger.info(
            f"Order {order.id} placed by user {actor.id}: "
            f"{len(order_items)} line(s), total {order.total}"
        )

        if notifier is not None:
            self._notify(
                notifier.order_confirmation,
                OrderEmailData.from_order(order, customer_name=actor.username),
            )
        return order

    def _resolve_delivery_address(
        self, db: Session, actor: Actor, payload: OrderCreate
    ) -> str:
        text = (payload.delivery_address or "").strip()
        if text:
            return text
        if payload.address_id is not None:
            address = db.get(Address, payload.address_id)
            if address is None or address.user_id != actor.id:
                raise NotFoundError("Address not found")
            return address.as_text()
        raise InvalidInputError("Delivery address is required")

    def _load_orderable_products(
        self, db: Session, actor: Actor, product_ids: List[int]
    ) -> Dict[int, Product]:
        """Товары заказа; невидимые пользователю считаются несуществующими."""
        rows = db.scalars(
            visible_products(actor).where(Product.id.in_(set(product_ids)))
        ).all()
        products = {product.id: product for product in rows}
        missing = sorted({pid for pid in product_ids if pid not in products})
        if missing:
            raise NotFoundError(
                f"Unknown product ID(s): {', '.join(str(pid) for pid in missing)}"
            )
        return products

    def _line_price(self, product: Product, submitted: Optional[Decimal]) -> Decimal:
        """Цена позиции: из запроса или из карточки товара."""
        if self.config.TRUST_CLIENT_PRICES:
            if submitted is None:
                raise InvalidInputError(f"Price is required for product {product.id}")
            return Decimal(submitted).quantize(CENTS)

        current = Decimal(product.price).quantize(CENTS)
        if submitted is not None and Decimal(submitted).quantize(CENTS) != current:
            raise InvalidInputError(
                f"Price for product {product.id} has changed, please refresh your cart"
            )
        return current

    # ==================== ПРОСМОТР ====================

    def list_orders(
        self,
        db: Session,
        actor: Actor,
        status: Optional[str] = None,
        page: int = 1,
        page_size: int = 20,
    ) -> Tuple[List[Order], int]:
        """Заказы: ADMIN видит все, USER только свои."""
        conditions = []
        if not actor.is_admin:
            conditions.append(Order.user_id == actor.id)
        if status:
            conditions.append(Order.status == parse_status(status))

        total = db.scalar(select(func.count(Order.id)).where(*conditions)) or 0
        stmt = (
            select(Order)
            .options(selectinload(Order.items), selectinload(Order.user))
            .where(*conditions)
            .order_by(desc(Order.created_at), desc(Order.id))
            .offset((page - 1) * page_size)
            .limit(page_size)
        )
        return list(db.scalars(stmt).all()), total

    def get_order(self, db: Session, actor: Actor, order_id: int) -> Order:
        order = db.scalar(
            select(Order)
            .options(selectinload(Order.items), selectinload(Order.user))
            .where(Order.id == order_id)
        )
        # Чужой заказ для USER неотличим от несуществующего
        if order is None or (not actor.is_admin and order.user_id != actor.id):
            raise NotFoundError("Order not found")
        return order

    # ==================== СТАТУС ====================

    def update_status(
        self, db: Session, order_id: int, new_status, notifier=None
    ) -> Order:
        """
        Сменить статус заказа (только ADMIN).

        Сумма и позиции заказа не меняются. Письмо отправляется, если у
        заказа есть email и включены уведомления.
        """
        status = parse_status(new_status)
        order = db.get(Order, order_id)
        if order is None:
            raise NotFoundError("Order not found")

        previous = order.status
        if not check_transition(previous, status, strict=self.config.ORDER_STATUS_STRICT):
            return order

        order.status = status
        db.commit()
        db.refresh(order)
        logger.info(f"Order {order.id} status {previous.value} -> {status.value}")

        if notifier is not None and order.customer_email and order.email_notification:
            self._notify(
                notifier.status_update,
                OrderEmailData.from_order(order, customer_name=order.user.username),
            )
        return order

    def clear_all(self, db: Session) -> int:
        """Удалить все заказы (только ADMIN)."""
        db.execute(delete(OrderItem))
        removed = db.execute(delete(Order)).rowcount
        db.commit()
        logger.warning(f"All orders cleared ({removed})")
        return removed

    # ==================== ДАШБОРД ====================

    def dashboard(self, db: Session) -> dict:
        revenue = db.scalar(
            select(func.coalesce(func.sum(Order.total), 0)).where(
                Order.status != OrderStatus.CANCELLED
            )
        )
        recent = db.execute(
            select(Order, User.username, func.count(OrderItem.id).label("items_count"))
            .join(User, User.id == Order.user_id)
            .outerjoin(OrderItem, OrderItem.order_id == Order.id)
            .group_by(Order.id, User.username)
            .order_by(desc(Order.created_at), desc(Order.id))
            .limit(10)
        ).all()

        return {
            "total_products": db.scalar(select(func.count(Product.id))) or 0,
            "total_users": db.scalar(
                select(func.count(User.id)).where(User.role == UserRole.USER)
            ) or 0,
            "total_orders": db.scalar(select(func.count(Order.id))) or 0,
            "total_categories": db.scalar(select(func.count(Category.id))) or 0,
            "total_revenue": Decimal(str(revenue or 0)).quantize(CENTS),
            "recent_orders": [
                {
                    "id": order.id,
                    "username": username,
                    "status": order.status,
                    "total": order.total,
                    "items_count": int(items_count or 0),
                    "created_at": order.created_at,
                }
                for order, username, items_count in recent
            ],
        }

    # ==================== УВЕДОМЛЕНИЯ ====================

    @staticmethod
    def _notify(send, data: OrderEmailData) -> None:
        """Постановка письма в очередь; ошибки только логируются."""
        try:
            send(data)
        except Exception as e:
            logger.error(f"[Email] Could not queue email for order {data.order_id}: {e}")


order_service = OrderService()
