import hashlib
import json
import logging
from datetime import date, datetime, time, timedelta
from decimal import Decimal
from typing import Callable, Iterable, Optional, Tuple

from django.conf import settings
from django.db import IntegrityError, transaction
from django.utils import timezone

from catalog.selectors import get_products_by_ids
from common.choices import OrderStatus

from .emails import send_order_confirmation_email, send_order_status_email
from .models import MAX_ORDER_TOTAL, IdempotencyKey, Order, OrderItem

logger = logging.getLogger("bakery.orders")


class OrderError(Exception):
    """Domain error for order creation and updates."""


class PickupWindowError(OrderError):
    """Requested pickup time is in the past or inside the lead-time window."""


class InvalidStatusTransition(OrderError):
    """Requested status change is not allowed from the order's current status."""

    def __init__(self, current: str, requested: str):
        self.current = current
        self.requested = requested
        super().__init__(f"Cannot change order status from {current} to {requested}.")


FORWARD_FLOW = (
    OrderStatus.PENDING,
    OrderStatus.CONFIRMED,
    OrderStatus.PREPARING,
    OrderStatus.READY,
    OrderStatus.COMPLETED,
)
TERMINAL_STATUSES = frozenset({OrderStatus.COMPLETED, OrderStatus.CANCELLED})


def _build_transitions() -> dict:
    table = {}
    for index, status in enumerate(FORWARD_FLOW):
        allowed = set(FORWARD_FLOW[index + 1 :])
        if status not in TERMINAL_STATUSES:
            allowed.add(OrderStatus.CANCELLED)
        table[status] = frozenset(allowed)
    table[OrderStatus.CANCELLED] = frozenset()
    return table


ALLOWED_TRANSITIONS = _build_transitions()


def can_transition(current: str, requested: str) -> bool:
    if current == requested:
        return True
    return requested in ALLOWED_TRANSITIONS.get(current, frozenset())


def pickup_datetime(pickup_date: date, pickup_time: time) -> datetime:
    """Combine a pickup date and time into an aware datetime in the bakery's time zone."""
    naive = datetime.combine(pickup_date, pickup_time)
    return timezone.make_aware(naive, timezone.get_current_timezone())


def ensure_pickup_window(pickup_date: date, pickup_time: time, *, lead_hours: int = 0, now=None) -> datetime:
    """Validate that pickup is in the future and respects the lead time.

    Raises PickupWindowError otherwise; returns the combined pickup datetime.
    """
    now = now or timezone.now()
    when = pickup_datetime(pickup_date, pickup_time)
    if when <= now:
        raise PickupWindowError("Pickup time must be in the future.")
    lead_hours = int(lead_hours or 0)
    if lead_hours and when < now + timedelta(hours=lead_hours):
        raise PickupWindowError(f"Pickup must be at least {lead_hours} hours from now for pre-order items.")
    return when


@transaction.atomic
def create_order(
    *,
    user=None,
    customer_name: str,
    customer_email: str,
    customer_phone: str,
    pickup_date: date,
    pickup_time: time,
    special_instructions: str = "",
    items: Iterable[dict],
    now=None,
) -> Order:
    """Create an Order and its OrderItems from submitted line snapshots.

    Each item is ``{"product_id", "quantity", "price"}``; the submitted price is
    the snapshot the customer saw and is stored as the line's unit price.
    Product names are snapshotted from the catalog at submission time.
    """

    items = list(items or [])
    if not items:
        raise OrderError("Order must contain at least one item.")

    products = get_products_by_ids([item["product_id"] for item in items])
    missing = [item["product_id"] for item in items if int(item["product_id"]) not in products]
    if missing:
        raise OrderError(f"Unknown product(s): {', '.join(str(pid) for pid in missing)}.")

    lead_hours = max((p.lead_time_hours for p in products.values()), default=0)
    ensure_pickup_window(pickup_date, pickup_time, lead_hours=lead_hours, now=now)

    order = Order.objects.create(
        user=user if getattr(user, "is_authenticated", False) else None,
        customer_name=customer_name,
        customer_email=customer_email,
        customer_phone=customer_phone,
        pickup_date=pickup_date,
        pickup_time=pickup_time,
        special_instructions=special_instructions or "",
        status=Order.STATUS_PENDING,
    )
    total = Decimal("0.00")
    for item in items:
        product = products[int(item["product_id"])]
        unit_price = Decimal(str(item["price"]))
        quantity = int(item["quantity"])
        OrderItem.objects.create(
            order=order,
            product=product,
            product_name=product.name,
            quantity=quantity,
            unit_price=unit_price,
        )
        total += unit_price * quantity
    if total > MAX_ORDER_TOTAL:
        raise OrderError("Order total exceeds the maximum allowed.")
    order.total = total
    # Generate user-friendly order number (unique)
    order.number = f"ORD-{int(order.id):06d}"
    order.save(update_fields=["total", "number"])

    logger.info(
        "order.created",
        extra={
            "event": "order.created",
            "order_id": order.id,
            "user_id": order.user_id,
            "items": len(items),
            "total": str(order.total),
        },
    )
    transaction.on_commit(lambda: _notify(send_order_confirmation_email, order))
    return order


def transition_order_status(order: Order, status: str, *, actor=None) -> Order:
    """Move an order to a new status following the allowed transition table.

    Same-status requests return the order unchanged. Disallowed moves raise
    InvalidStatusTransition.
    """

    if status not in OrderStatus.values:
        raise OrderError(f"Unknown order status: {status}.")
    prev = order.status
    if prev == status:
        return order
    if not can_transition(prev, status):
        raise InvalidStatusTransition(prev, status)

    order.status = status
    order.save(update_fields=["status", "updated_at"])
    logger.info(
        "order_status_changed",
        extra={
            "event": "order_status_changed",
            "order_id": order.id,
            "user_id": order.user_id,
            "actor_id": getattr(actor, "id", None),
            "status_from": prev,
            "status_to": order.status,
        },
    )
    _notify(send_order_status_email, order)
    return order


def _notify(sender: Callable[[Order], None], order: Order) -> None:
    # Email delivery must never undo or block the order mutation
    try:
        sender(order)
    except Exception:
        logger.warning(
            "order.email_failed",
            exc_info=True,
            extra={"event": "order.email_failed", "order_id": order.id, "sender": sender.__name__},
        )


def idempotency_scope(user=None, session_key: Optional[str] = None) -> str:
    if getattr(user, "id", None):
        return f"user:{user.id}"
    if session_key:
        return f"session:{session_key}"
    return "anon"


def with_idempotency(
    *,
    key: str,
    user,
    path: str,
    method: str,
    handler: Callable[[], Tuple[dict, int]],
    request_hash: Optional[str] = None,
    session_key: Optional[str] = None,
) -> Tuple[dict, int]:
    """Run handler idempotently and persist its response for the given key and scope.

    - Scope is "user:<id>" for authenticated callers, "session:<key>" for anonymous
      callers with a session, otherwise "anon".
    - If a record exists and the stored `request_hash` differs from the provided one, returns 409.
    - If a record exists but response is not yet stored, returns 409 to indicate in-progress.
    - Client errors (4xx) are not stored so a corrected request can reuse the key.
    """

    scope = idempotency_scope(user, session_key)
    method = str(method).upper()
    path = str(path)
    ttl = timedelta(hours=int(getattr(settings, "IDEMPOTENCY_TTL_HOURS", 24)))

    IdempotencyKey.objects.filter(
        key=key, scope=scope, path=path, method=method, expires_at__lt=timezone.now()
    ).delete()

    try:
        with transaction.atomic():
            idem = IdempotencyKey.objects.create(
                key=key,
                user=user if getattr(user, "id", None) else None,
                scope=scope,
                path=path,
                method=method,
                request_hash=request_hash,
                expires_at=timezone.now() + ttl,
            )
    except IntegrityError:
        idem = IdempotencyKey.objects.get(key=key, scope=scope, path=path, method=method)
        # Guard against key reuse with different fingerprints
        if idem.request_hash and request_hash and idem.request_hash != request_hash:
            return {"detail": "Idempotency key reused with different request payload"}, 409
        if idem.response_json is not None and idem.response_code is not None:
            return idem.response_json, int(idem.response_code)
        return {"detail": "Request in progress"}, 409

    try:
        body, code = handler()
    except Exception:
        IdempotencyKey.objects.filter(id=idem.id).delete()
        raise

    if 400 <= code < 500:
        IdempotencyKey.objects.filter(id=idem.id).delete()
        return body, code

    IdempotencyKey.objects.filter(id=idem.id).update(response_json=_json_safe(body), response_code=code)
    return body, code


def _json_safe(value):
    if isinstance(value, Decimal):
        return str(value)
    if isinstance(value, dict):
        return {k: _json_safe(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_json_safe(v) for v in value]
    return value


def compute_request_hash(data: Optional[dict]) -> Optional[str]:
    """Compute a canonical SHA256 hash of the request body.

    Uses sorted keys JSON representation to stabilize the hash across equivalent payloads.
    Returns None when data is falsy.
    """
    if not data:
        return None
    try:
        payload = json.dumps(data, sort_keys=True, separators=(",", ":"), default=str)
        return hashlib.sha256(payload.encode("utf-8")).hexdigest()
    except (TypeError, ValueError):
        return None


def purge_expired_idempotency_keys(now=None) -> int:
    """Delete idempotency records past their expiry; returns the number removed."""
    now = now or timezone.now()
    deleted, _ = IdempotencyKey.objects.filter(expires_at__lt=now).delete()
    return deleted
