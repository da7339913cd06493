"""Email utilities for the orders app.

Uses Django's email backend, with links composed from FRONTEND_URL.
"""

from django.conf import settings
from django.core.mail import send_mail

from common.choices import OrderStatus

STATUS_MESSAGES = {
    OrderStatus.CONFIRMED: "Your order has been confirmed and we're preparing it!",
    OrderStatus.PREPARING: "Your delicious treats are being prepared with care.",
    OrderStatus.READY: "Your order is ready for pickup!",
    OrderStatus.COMPLETED: "Your order has been picked up. Enjoy!",
    OrderStatus.CANCELLED: "Your order has been cancelled. If you have questions, please contact us.",
}
DEFAULT_STATUS_MESSAGE = "Your order status has been updated."


def _bakery_name() -> str:
    return getattr(settings, "BAKERY_NAME", "Sweet Dreams Bakery")


def order_url(order) -> str:
    frontend = getattr(settings, "FRONTEND_URL", "")
    return f"{frontend.rstrip('/')}/checkout/success?order={order.number or order.id}"


def send_order_confirmation_email(order) -> None:
    """Send the order summary to the customer's email address.

    Lists each line with its total and the pickup slot. Silently no-ops if no
    email is present.
    """
    if not order.customer_email:
        return

    lines = [
        f"  {item.product_name} x {item.quantity}  ${item.line_total:.2f}" for item in order.items.all()
    ]
    subject = f"Order Confirmation - {_bakery_name()} #{order.number or order.id}"
    body = (
        f"Thank you for your order, {order.customer_name}!\n\n"
        f"Your order #{order.number or order.id} has been received and is being prepared with love.\n\n"
        "Order Details:\n" + "\n".join(lines) + "\n\n"
        f"Total: ${order.total:.2f}\n"
        f"Pickup: {order.pickup_date.isoformat()} at {order.pickup_time.strftime('%H:%M')}\n\n"
        f"You can view your order here: {order_url(order)}\n\n"
        "We'll send you another email when your order is ready for pickup.\n"
    )

    send_mail(
        subject,
        body,
        getattr(settings, "DEFAULT_FROM_EMAIL", None),
        [order.customer_email],
        fail_silently=False,
    )


def send_order_status_email(order) -> None:
    """Notify the customer that their order moved to a new status."""
    if not order.customer_email:
        return

    subject = f"Order Update - {_bakery_name()} #{order.number or order.id}"
    body = (
        f"Hi {order.customer_name},\n\n"
        f"{STATUS_MESSAGES.get(order.status, DEFAULT_STATUS_MESSAGE)}\n\n"
        f"Order #{order.number or order.id}\n"
        f"Status: {order.get_status_display()}\n\n"
        f"Thank you for choosing {_bakery_name()}!\n"
    )

    send_mail(
        subject,
        body,
        getattr(settings, "DEFAULT_FROM_EMAIL", None),
        [order.customer_email],
        fail_silently=False,
    )
