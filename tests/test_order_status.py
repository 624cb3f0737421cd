import pytest

from storefront.core.config import settings
from storefront.core.exceptions import InvalidInputError
from storefront.db.models import OrderStatus
from storefront.services.order_status import (
    FORWARD_ORDER,
    can_transition,
    check_transition,
    parse_status,
)

from conftest import auth_headers


class TestTransitions:
    def test_forward_moves_are_allowed(self):
        for index, current in enumerate(FORWARD_ORDER):
            for later in FORWARD_ORDER[index + 1:]:
                assert can_transition(current, later)

    def test_backward_moves_are_rejected(self):
        assert not can_transition(OrderStatus.SHIPPED, OrderStatus.PENDING)
        with pytest.raises(InvalidInputError):
            check_transition(OrderStatus.DELIVERED, OrderStatus.PROCESSING)

    def test_cancel_from_any_state(self):
        for status in FORWARD_ORDER:
            assert can_transition(status, OrderStatus.CANCELLED)

    def test_cancelled_is_terminal(self):
        for status in FORWARD_ORDER:
            assert not can_transition(OrderStatus.CANCELLED, status)

    def test_same_status_is_noop(self):
        assert check_transition(OrderStatus.PENDING, OrderStatus.PENDING) is False
        assert check_transition(OrderStatus.CANCELLED, OrderStatus.CANCELLED) is False

    def test_lenient_mode_allows_anything(self):
        assert check_transition(OrderStatus.CANCELLED, OrderStatus.PENDING, strict=False)

    def test_parse_status(self):
        assert parse_status("shipped") == OrderStatus.SHIPPED
        assert parse_status(OrderStatus.PENDING) == OrderStatus.PENDING
        with pytest.raises(InvalidInputError, match="Invalid status"):
            parse_status("LOST")


@pytest.fixture
def placed_order(client, make_category, make_product, make_company):
    def _place(customer_email="buyer@acme.com", email_notification=True):
        tools = make_category()
        hammer = make_product(tools, "Hammer", price="9.99")
        acme = make_company("acme", [tools])
        response = client.post(
            "/api/v1/orders",
            json={
                "items": [{"product_id": hammer.id, "quantity": 3}],
                "delivery_address": "1 High Street",
                "customer_email": customer_email,
                "email_notification": email_notification,
            },
            headers=auth_headers(acme),
        )
        assert response.status_code == 201
        return response.json(), acme

    return _place


def set_status(client, headers, order_id, status):
    return client.put(
        f"/api/v1/orders/{order_id}/status", json={"status": status}, headers=headers
    )


class TestStatusEndpoint:
    def test_status_change_sends_email(self, client, admin_headers, placed_order, notifier):
        order, _ = placed_order()
        response = set_status(client, admin_headers, order["id"], "confirmed")
        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "CONFIRMED"
        assert data["total"] == order["total"]
        assert data["items"] == order["items"]

        assert len(notifier.status_updates) == 1
        email = notifier.status_updates[0]
        assert email.status == OrderStatus.CONFIRMED
        assert email.customer_name == "acme"

    def test_setting_same_status_sends_nothing(
        self, client, admin_headers, placed_order, notifier
    ):
        order, _ = placed_order()
        response = set_status(client, admin_headers, order["id"], "PENDING")
        assert response.status_code == 200
        assert response.json()["status"] == "PENDING"
        assert notifier.status_updates == []

    def test_notifications_disabled(self, client, admin_headers, placed_order, notifier):
        order, _ = placed_order(email_notification=False)
        assert set_status(client, admin_headers, order["id"], "SHIPPED").status_code == 200
        assert notifier.status_updates == []

    def test_backward_transition_is_rejected(self, client, admin_headers, placed_order):
        order, _ = placed_order()
        set_status(client, admin_headers, order["id"], "DELIVERED")
        response = set_status(client, admin_headers, order["id"], "PENDING")
        assert response.status_code == 400
        assert response.json()["error"] == "validation"

    def test_cancelled_order_stays_cancelled(self, client, admin_headers, placed_order):
        order, _ = placed_order()
        assert set_status(client, admin_headers, order["id"], "CANCELLED").status_code == 200
        assert set_status(client, admin_headers, order["id"], "CONFIRMED").status_code == 400

    def test_lenient_mode(self, client, admin_headers, placed_order, monkeypatch):
        monkeypatch.setattr(settings, "ORDER_STATUS_STRICT", False)
        order, _ = placed_order()
        set_status(client, admin_headers, order["id"], "DELIVERED")
        response = set_status(client, admin_headers, order["id"], "PENDING")
        assert response.status_code == 200
        assert response.json()["status"] == "PENDING"

    def test_invalid_status(self, client, admin_headers, placed_order):
        order, _ = placed_order()
        response = set_status(client, admin_headers, order["id"], "LOST")
        assert response.status_code == 400
        assert response.json()["detail"] == "Invalid status"

    def test_unknown_order(self, client, admin_headers):
        assert set_status(client, admin_headers, 999, "CONFIRMED").status_code == 404

    def test_company_cannot_change_status(self, client, placed_order):
        order, acme = placed_order()
        response = set_status(client, auth_headers(acme), order["id"], "CONFIRMED")
        assert response.status_code == 403
