import logging
from typing import Callable

from django.conf import settings
from django.shortcuts import get_object_or_404

from catalog.models import Product
from orders.models import MAX_LINE_QUANTITY
from orders.services import PickupWindowError, create_order, ensure_pickup_window

from .state import CartLineItem, CartState, SessionCartStorage


class CartError(Exception):
    """Domain error for cart operations."""


class CheckoutError(CartError):
    """Checkout could not be submitted; the cart is left as it was."""


logger = logging.getLogger("bakery.cart")


def get_session_cart(session) -> CartState:
    """Load the cart kept in ``session``, including the panel visibility flag."""
    return CartState(
        SessionCartStorage(session),
        is_open=bool(session.get(settings.CART_UI_SESSION_KEY, False)),
    )


def save_cart_visibility(session, cart: CartState) -> None:
    session[settings.CART_UI_SESSION_KEY] = cart.is_open


def add_product(cart: CartState, *, product_id: int) -> CartLineItem:
    """Add one unit of a catalog product to the cart.

    Raises Http404 for unknown products and CartError for products that are
    out of stock or already at the per-line quantity limit.
    """
    product = get_object_or_404(Product, pk=product_id)
    if not product.in_stock:
        raise CartError("Product is out of stock.")
    existing = cart.get_line(product.id)
    if existing is not None and existing.quantity >= MAX_LINE_QUANTITY:
        raise CartError(f"Quantity must be at most {MAX_LINE_QUANTITY}.")
    line = cart.add_item(product)
    logger.info(
        "cart.item_added",
        extra={
            "event": "cart.item_added",
            "product_id": line.product_id,
            "quantity": line.quantity,
            "unit_price": str(line.unit_price),
        },
    )
    return line


def change_quantity(cart: CartState, *, product_id: int, quantity: int) -> None:
    cart.update_quantity(product_id, quantity)
    logger.info(
        "cart.item_quantity_updated",
        extra={"event": "cart.item_quantity_updated", "product_id": product_id, "quantity": quantity},
    )


def remove_product(cart: CartState, *, product_id: int) -> None:
    cart.remove_item(product_id)
    logger.info("cart.item_removed", extra={"event": "cart.item_removed", "product_id": product_id})


def empty_cart(cart: CartState) -> None:
    cart.clear_cart()
    logger.info("cart.cleared", extra={"event": "cart.cleared"})


def build_order_request(cart: CartState, data: dict) -> dict:
    """Order submission payload: contact and pickup fields plus one item per cart line."""
    return {
        "customer_name": data["customer_name"],
        "customer_email": data["customer_email"],
        "customer_phone": data["customer_phone"],
        "pickup_date": data["pickup_date"],
        "pickup_time": data["pickup_time"],
        "special_instructions": data.get("special_instructions") or "",
        "items": [
            {"product_id": line.product_id, "quantity": line.quantity, "price": line.unit_price}
            for line in cart.lines
        ],
    }


def checkout_cart(
    cart: CartState,
    *,
    data: dict,
    user=None,
    submit: Callable = create_order,
    now=None,
):
    """Submit the cart as an order and empty it on success.

    ``data`` holds validated contact and pickup fields. The pickup slot must
    be in the future and leave at least the cart's longest pre-order lead
    time. If ``submit`` raises, the cart is left untouched and the error
    propagates so the customer can retry.
    """
    if not len(cart):
        raise CheckoutError("Cart is empty.")
    if any(line.quantity > MAX_LINE_QUANTITY for line in cart.lines):
        raise CheckoutError(f"Quantity must be at most {MAX_LINE_QUANTITY} per item.")
    try:
        ensure_pickup_window(
            data["pickup_date"],
            data["pickup_time"],
            lead_hours=cart.get_min_order_time(),
            now=now,
        )
    except PickupWindowError as exc:
        raise CheckoutError(str(exc)) from exc

    payload = build_order_request(cart, data)
    order = submit(user=user, now=now, **payload)
    cart.clear_cart()
    logger.info(
        "cart.checked_out",
        extra={
            "event": "cart.checked_out",
            "order_id": getattr(order, "id", None),
            "items": len(payload["items"]),
            "user_id": getattr(user, "id", None),
        },
    )
    return order

