"""
Корзина покупателя.

Корзина живет только на стороне клиента в рамках одной сессии и нигде
не сохраняется: при оформлении она превращается в запрос OrderCreate.
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import Dict, List, Optional

from storefront.schemas.order import OrderCreate, OrderLineIn

CENTS = Decimal("0.01")


@dataclass
class CartLine:
    """Строка корзины."""

    product_id: int
    name: str
    price: Decimal
    quantity: int

    @property
    def subtotal(self) -> Decimal:
        return (self.price * self.quantity).quantize(CENTS)


class Cart:
    """
    Корзина: товары в порядке добавления с количеством и текущей суммой.

    Example:
        cart = Cart()
        cart.add(product_id=1, name="Hammer", price=Decimal("9.99"), quantity=2)
        cart.total  # Decimal("19.98")
    """

    def __init__(self):
        self._lines: Dict[int, CartLine] = {}

    def add(self, product_id: int, name: str, price, quantity: int = 1) -> CartLine:
        """Добавить товар; повторное добавление увеличивает количество."""
        if quantity < 1:
            raise ValueError("Quantity must be at least 1")
        price = Decimal(str(price))
        if price < 0:
            raise ValueError("Price must be non-negative")

        line = self._lines.get(product_id)
        if line is None:
            line = CartLine(product_id=product_id, name=name, price=price, quantity=0)
            self._lines[product_id] = line
        line.quantity += quantity
        return line

    def set_quantity(self, product_id: int, quantity: int) -> None:
        """Изменить количество; 0 и меньше удаляет строку."""
        if product_id not in self._lines:
            raise KeyError(product_id)
        if quantity <= 0:
            self.remove(product_id)
        else:
            self._lines[product_id].quantity = quantity

    def remove(self, product_id: int) -> None:
        self._lines.pop(product_id, None)

    def clear(self) -> None:
        self._lines.clear()

    @property
    def lines(self) -> List[CartLine]:
        return list(self._lines.values())

    @property
    def item_count(self) -> int:
        return sum(line.quantity for line in self._lines.values())

    @property
    def total(self) -> Decimal:
        return sum((line.subtotal for line in self._lines.values()), Decimal("0.00"))

    def is_empty(self) -> bool:
        return not self._lines

    def __len__(self) -> int:
        return len(self._lines)

    def to_order(
        self,
        customer_email: str,
        delivery_address: Optional[str] = None,
        address_id: Optional[int] = None,
        po_number: Optional[str] = None,
        email_notification: bool = True,
    ) -> OrderCreate:
        """Оформление: преобразование корзины в запрос на создание заказа."""
        return OrderCreate(
            items=[
                OrderLineIn(
                    product_id=line.product_id,
                    quantity=line.quantity,
                    price=line.price,
                )
                for line in self._lines.values()
            ],
            delivery_address=delivery_address,
            address_id=address_id,
            po_number=po_number,
            customer_email=customer_email,
            email_notification=email_notification,
        )
