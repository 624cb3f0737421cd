"""
Жизненный цикл статуса заказа.

PENDING -> CONFIRMED -> PROCESSING -> SHIPPED -> DELIVERED.
CANCELLED достижим из любого статуса и является конечным.
"""

from typing import Dict, FrozenSet

from storefront.core.exceptions import InvalidInputError
from storefront.db.models import OrderStatus

FORWARD_ORDER = (
    OrderStatus.PENDING,
    OrderStatus.CONFIRMED,
    OrderStatus.PROCESSING,
    OrderStatus.SHIPPED,
    OrderStatus.DELIVERED,
)


def _build_transitions() -> Dict[OrderStatus, FrozenSet[OrderStatus]]:
    transitions = {}
    for index, status in enumerate(FORWARD_ORDER):
        transitions[status] = frozenset(FORWARD_ORDER[index + 1:]) | {OrderStatus.CANCELLED}
    transitions[OrderStatus.CANCELLED] = frozenset()
    return transitions


# Разрешенные переходы: только вперед (с пропусками) и отмена из любого статуса
TRANSITIONS = _build_transitions()


def parse_status(value) -> OrderStatus:
    """Значение из запроса -> OrderStatus."""
    if isinstance(value, OrderStatus):
        return value
    try:
        return OrderStatus(str(value).strip().upper())
    except ValueError:
        raise InvalidInputError("Invalid status")


def can_transition(current: OrderStatus, new: OrderStatus) -> bool:
    return new in TRANSITIONS[current]


def check_transition(current: OrderStatus, new: OrderStatus, strict: bool = True) -> bool:
    """
    Проверка перехода статуса.

    Returns:
        bool: False, если статус не меняется (повторная установка)

    Raises:
        InvalidInputError: Переход запрещен в строгом режиме
    """
    if current == new:
        return False
    if strict and not can_transition(current, new):
        raise InvalidInputError(
            f"Cannot change order status from {current.value} to {new.value}"
        )
    return True
