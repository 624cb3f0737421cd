from decimal import Decimal

import pytest

from storefront.services.cart import Cart


class TestCart:
    def test_add_merges_quantities(self):
        cart = Cart()
        cart.add(1, "Hammer", "9.99")
        cart.add(1, "Hammer", "9.99", quantity=2)
        cart.add(2, "Saw", Decimal("15.00"))

        assert len(cart) == 2
        assert cart.item_count == 4
        assert cart.total == Decimal("44.97")
        assert [line.name for line in cart.lines] == ["Hammer", "Saw"]

    def test_set_quantity_and_remove(self):
        cart = Cart()
        cart.add(1, "Hammer", "9.99")
        cart.add(2, "Saw", "15.00")

        cart.set_quantity(1, 5)
        assert cart.lines[0].subtotal == Decimal("49.95")

        cart.set_quantity(2, 0)
        assert [line.product_id for line in cart.lines] == [1]

        with pytest.raises(KeyError):
            cart.set_quantity(3, 1)

    def test_invalid_lines(self):
        cart = Cart()
        with pytest.raises(ValueError):
            cart.add(1, "Hammer", "9.99", quantity=0)
        with pytest.raises(ValueError):
            cart.add(1, "Hammer", "-1")
        assert cart.is_empty()

    def test_to_order(self):
        cart = Cart()
        cart.add(1, "Hammer", "9.99", quantity=2)
        order = cart.to_order("buyer@acme.com", delivery_address="1 High Street", po_number="PO-7")

        assert [(line.product_id, line.quantity, line.price) for line in order.items] == [
            (1, 2, Decimal("9.99"))
        ]
        assert order.delivery_address == "1 High Street"
        assert order.po_number == "PO-7"
        assert order.email_notification is True

    def test_clear(self):
        cart = Cart()
        cart.add(1, "Hammer", "9.99")
        cart.clear()
        assert cart.is_empty()
        assert cart.total == Decimal("0.00")
