"""
HTML шаблоны писем о заказах.

Все подставляемые значения экранируются. Письмо состоит из шапки с
названием магазина, тела с данными заказа и подвала.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from decimal import Decimal
from html import escape
from typing import List, Optional

from storefront.core.config import settings
from storefront.db.models import Order, OrderStatus

STATUS_EMOJI = {
    OrderStatus.PENDING: "⏳",
    OrderStatus.CONFIRMED: "✅",
    OrderStatus.PROCESSING: "🔄",
    OrderStatus.SHIPPED: "🚚",
    OrderStatus.DELIVERED: "📦",
    OrderStatus.CANCELLED: "❌",
}

STATUS_MESSAGES = {
    OrderStatus.PENDING: "Your order is pending and will be reviewed shortly.",
    OrderStatus.CONFIRMED: "Great news! Your order has been confirmed and is being prepared.",
    OrderStatus.PROCESSING: "Your order is currently being processed.",
    OrderStatus.SHIPPED: "Your order has been shipped and is on its way to you!",
    OrderStatus.DELIVERED: "Your order has been delivered. We hope you enjoy your purchase!",
    OrderStatus.CANCELLED: "Your order has been cancelled. If you have questions, please contact us.",
}

# (фон, текст) бейджа статуса
STATUS_COLORS = {
    OrderStatus.PENDING: ("#fef3c7", "#92400e"),
    OrderStatus.CONFIRMED: ("#dbeafe", "#1e40af"),
    OrderStatus.PROCESSING: ("#e0e7ff", "#3730a3"),
    OrderStatus.SHIPPED: ("#ede9fe", "#5b21b6"),
    OrderStatus.DELIVERED: ("#d1fae5", "#065f46"),
    OrderStatus.CANCELLED: ("#fee2e2", "#991b1b"),
}

DEFAULT_EMOJI = "📋"
DEFAULT_MESSAGE = "Your order status has been updated."
DEFAULT_COLORS = ("#f1f5f9", "#334155")

_LABEL = "padding: 4px 0; color: #64748b; font-size: 14px;"
_VALUE = "padding: 4px 0; text-align: right; color: #334155; font-size: 14px;"
_VALUE_BOLD = "padding: 4px 0; text-align: right; font-weight: 600; color: #334155; font-size: 14px;"
_TH = "padding: 12px 16px; font-size: 13px; font-weight: 600; color: #64748b; border-bottom: 2px solid #e2e8f0;"
_TD = "padding: 12px 16px; border-bottom: 1px solid #e2e8f0;"


@dataclass
class EmailLine:
    name: str
    quantity: int
    price: Decimal

    @property
    def subtotal(self) -> Decimal:
        return self.price * self.quantity


@dataclass
class OrderEmailData:
    """Снимок данных заказа для письма, не зависящий от сессии БД."""

    order_id: int
    customer_email: str
    customer_name: str
    total: Decimal
    items: List[EmailLine] = field(default_factory=list)
    delivery_address: Optional[str] = None
    po_number: Optional[str] = None
    created_at: Optional[datetime] = None
    status: OrderStatus = OrderStatus.PENDING

    @classmethod
    def from_order(cls, order: Order, customer_name: str) -> "OrderEmailData":
        return cls(
            order_id=order.id,
            customer_email=order.customer_email,
            customer_name=customer_name,
            total=order.total,
            items=[
                EmailLine(name=item.product_name, quantity=item.quantity, price=item.price)
                for item in order.items
            ],
            delivery_address=order.delivery_address,
            po_number=order.po_number,
            created_at=order.created_at,
            status=order.status,
        )


@dataclass
class RenderedEmail:
    to: str
    subject: str
    html: str


def format_currency(amount) -> str:
    return f"{settings.CURRENCY_SYMBOL}{Decimal(amount):.2f}"


def format_date(value: Optional[datetime]) -> str:
    if value is None:
        value = datetime.now(timezone.utc)
    return value.strftime("%d %B %Y, %H:%M")


def status_emoji(status: OrderStatus) -> str:
    return STATUS_EMOJI.get(status, DEFAULT_EMOJI)


def status_message(status: OrderStatus) -> str:
    return STATUS_MESSAGES.get(status, DEFAULT_MESSAGE)


def _row(label: str, value: str, style: str = _VALUE) -> str:
    return f"""
        <tr>
          <td style="{_LABEL}">{label}</td>
          <td style="{style}">{value}</td>
        </tr>"""


def build_items_table(items: List[EmailLine]) -> str:
    rows = "".join(
        f"""
      <tr>
        <td style="{_TD} color: #334155;">{escape(item.name)}</td>
        <td style="{_TD} text-align: center; color: #64748b;">{item.quantity}</td>
        <td style="{_TD} text-align: right; color: #334155;">{format_currency(item.price)}</td>
        <td style="{_TD} text-align: right; font-weight: 600; color: #334155;">{format_currency(item.subtotal)}</td>
      </tr>"""
        for item in items
    )
    return f"""
    <table style="width: 100%; border-collapse: collapse; margin: 16px 0;">
      <thead>
        <tr style="background-color: #f8fafc;">
          <th style="{_TH} text-align: left;">Product</th>
          <th style="{_TH} text-align: center;">Qty</th>
          <th style="{_TH} text-align: right;">Price</th>
          <th style="{_TH} text-align: right;">Subtotal</th>
        </tr>
      </thead>
      <tbody>{rows}</tbody>
    </table>"""


def _delivery_block(address: Optional[str]) -> str:
    if not address:
        return ""
    return f"""
    <div style="margin-top: 24px;">
      <h3 style="color: #334155; margin: 0 0 8px; font-size: 16px;">📍 Delivery Address</h3>
      <p style="color: #64748b; margin: 0; font-size: 14px; line-height: 1.5;">{escape(address)}</p>
    </div>"""


def base_template(title: str, content: str) -> str:
    store = escape(settings.STORE_NAME)
    year = datetime.now(timezone.utc).year
    return f"""<!DOCTYPE html>
<html>
<head><meta charset="utf-8"><meta name="viewport" content="width=device-width, initial-scale=1.0"></head>
<body style="margin: 0; padding: 0; background-color: #f1f5f9; font-family: -apple-system, BlinkMacSystemFont, 'Segoe UI', Roboto, sans-serif;">
  <div style="max-width: 600px; margin: 0 auto; padding: 24px;">
    <!-- Header -->
    <div style="background: linear-gradient(135deg, #059669, #10b981); border-radius: 12px 12px 0 0; padding: 32px; text-align: center;">
      <h1 style="color: white; margin: 0; font-size: 24px;">{store}</h1>
      <p style="color: #d1fae5; margin: 8px 0 0; font-size: 14px;">{escape(title)}</p>
    </div>
    <!-- Body -->
    <div style="background: white; padding: 32px; border-radius: 0 0 12px 12px; box-shadow: 0 2px 8px rgba(0,0,0,0.06);">
      {content}
    </div>
    <!-- Footer -->
    <div style="text-align: center; padding: 24px; color: #94a3b8; font-size: 12px;">
      <p style="margin: 0;">© {year} {store}. All rights reserved.</p>
      <p style="margin: 4px 0 0;">This is an automated email. Please do not reply.</p>
    </div>
  </div>
</body>
</html>"""


def render_order_confirmation(data: OrderEmailData) -> RenderedEmail:
    """Письмо-подтверждение нового заказа."""
    buyer = escape(data.customer_name)
    bg, fg = STATUS_COLORS[OrderStatus.PENDING]
    badge = (
        f'<span style="background: {bg}; color: {fg}; padding: 2px 10px; border-radius: 12px; '
        f'font-size: 12px; font-weight: 600;">{status_emoji(OrderStatus.PENDING)} PENDING</span>'
    )
    po_row = _row("PO Number:", escape(data.po_number), _VALUE_BOLD) if data.po_number else ""

    content = f"""
    <h2 style="color: #334155; margin: 0 0 8px;">Order Confirmation</h2>
    <p style="color: #64748b; margin: 0 0 24px; font-size: 15px;">
      Thank you for your order, <strong>{buyer}</strong>! Here are your order details:
    </p>

    <div style="background: #f8fafc; border-radius: 8px; padding: 16px; margin-bottom: 24px;">
      <table style="width: 100%;">{_row("Order Number:", f"#{data.order_id}", _VALUE_BOLD)}{_row("Date:", format_date(data.created_at))}{_row("Status:", badge)}{po_row}{_row("Buyer:", buyer)}
      </table>
    </div>

    <h3 style="color: #334155; margin: 0 0 4px; font-size: 16px;">Items Ordered</h3>
    {build_items_table(data.items)}

    <div style="background: #f0fdf4; border-radius: 8px; padding: 16px; margin: 16px 0;">
      <table style="width: 100%;">
        <tr>
          <td style="font-size: 18px; font-weight: 700; color: #334155;">Total</td>
          <td style="text-align: right; font-size: 18px; font-weight: 700; color: #059669;">{format_currency(data.total)}</td>
        </tr>
      </table>
    </div>
    {_delivery_block(data.delivery_address)}

    <hr style="border: none; border-top: 1px solid #e2e8f0; margin: 24px 0;">
    <p style="color: #64748b; font-size: 13px; margin: 0; text-align: center;">
      We'll email you when your order status is updated.
    </p>"""

    return RenderedEmail(
        to=data.customer_email,
        subject=f"Order Confirmation - #{data.order_id}",
        html=base_template("Order Confirmation", content),
    )


def render_status_update(data: OrderEmailData) -> RenderedEmail:
    """Письмо об изменении статуса заказа."""
    status = data.status
    emoji = status_emoji(status)
    bg, fg = STATUS_COLORS.get(status, DEFAULT_COLORS)
    buyer = escape(data.customer_name)
    po_row = _row("PO Number:", escape(data.po_number), _VALUE_BOLD) if data.po_number else ""
    total_style = "padding: 4px 0; text-align: right; font-weight: 600; color: #059669; font-size: 14px;"

    content = f"""
    <div style="text-align: center; margin-bottom: 24px;">
      <div style="font-size: 48px; margin-bottom: 8px;">{emoji}</div>
      <h2 style="color: #334155; margin: 0 0 8px;">Order Status Update</h2>
      <p style="color: #64748b; margin: 0; font-size: 15px;">{status_message(status)}</p>
    </div>

    <div style="text-align: center; margin-bottom: 24px;">
      <span style="background: {bg}; color: {fg}; padding: 6px 20px; border-radius: 20px; font-size: 14px; font-weight: 700; letter-spacing: 0.5px;">
        {emoji} {status.value}
      </span>
    </div>

    <div style="background: #f8fafc; border-radius: 8px; padding: 16px; margin-bottom: 24px;">
      <table style="width: 100%;">{_row("Order Number:", f"#{data.order_id}", _VALUE_BOLD)}{_row("Buyer:", buyer)}{po_row}{_row("Total:", format_currency(data.total), total_style)}
      </table>
    </div>

    <h3 style="color: #334155; margin: 0 0 4px; font-size: 16px;">Items in this Order</h3>
    {build_items_table(data.items)}
    {_delivery_block(data.delivery_address)}

    <hr style="border: none; border-top: 1px solid #e2e8f0; margin: 24px 0;">
    <p style="color: #64748b; font-size: 13px; margin: 0; text-align: center;">
      Thank you for shopping with us!
    </p>"""

    return RenderedEmail(
        to=data.customer_email,
        subject=f"Order #{data.order_id} - {status.value} {emoji}",
        html=base_template("Order Status Update", content),
    )
