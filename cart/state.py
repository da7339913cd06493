"""Shopping cart state container.

``CartState`` owns the customer's line items and the cart panel's
visibility flag. Callers only go through its operations; the line mapping is
never handed out. Every line mutation is written through a storage backend
(the Django session for HTTP callers) as a small versioned JSON payload, and
hydration validates that payload before trusting it.
"""

import logging
from dataclasses import dataclass, replace
from decimal import ROUND_HALF_UP, Decimal
from typing import Iterator, Optional, Protocol

from django.conf import settings

from .serializers import CartPayloadSerializer

logger = logging.getLogger("bakery.cart")

CART_PAYLOAD_VERSION = 1
CENT = Decimal("0.01")


@dataclass(frozen=True)
class CartLineItem:
    """One product in the cart, with the product details captured when it was added."""

    product_id: int
    name: str
    unit_price: Decimal
    image: str = ""
    quantity: int = 1
    pre_order: bool = False
    min_order_time: int = 0

    @classmethod
    def from_product(cls, product) -> "CartLineItem":
        return cls(
            product_id=int(product.id),
            name=product.name,
            unit_price=Decimal(str(product.price)),
            image=product.image or "",
            quantity=1,
            pre_order=bool(product.pre_order),
            min_order_time=int(product.min_order_time or 0),
        )

    @property
    def line_total(self) -> Decimal:
        return self.unit_price * self.quantity

    def to_payload(self) -> dict:
        return {
            "product_id": self.product_id,
            "name": self.name,
            "unit_price": str(self.unit_price),
            "image": self.image,
            "quantity": self.quantity,
            "pre_order": self.pre_order,
            "min_order_time": self.min_order_time,
        }


class CartStorage(Protocol):
    def load(self) -> Optional[object]: ...

    def save(self, payload: dict) -> None: ...


class MemoryCartStorage:
    """Keeps the payload on the instance; used outside of HTTP requests."""

    def __init__(self, payload: Optional[object] = None):
        self.payload = payload

    def load(self) -> Optional[object]:
        return self.payload

    def save(self, payload: dict) -> None:
        self.payload = payload


class SessionCartStorage:
    """Persists the payload in the Django session under ``CART_SESSION_KEY``."""

    def __init__(self, session, key: Optional[str] = None):
        self.session = session
        self.key = key or settings.CART_SESSION_KEY

    def load(self) -> Optional[object]:
        return self.session.get(self.key)

    def save(self, payload: dict) -> None:
        self.session[self.key] = payload
        self.session.modified = True


def serialize_lines(lines) -> dict:
    return {"version": CART_PAYLOAD_VERSION, "lines": [line.to_payload() for line in lines]}


def deserialize_lines(payload) -> Optional[list[CartLineItem]]:
    """Return the validated lines of a stored payload, or None if it can't be trusted."""
    serializer = CartPayloadSerializer(data=payload)
    if not serializer.is_valid():
        return None
    if serializer.validated_data["version"] != CART_PAYLOAD_VERSION:
        return None
    return [CartLineItem(**line) for line in serializer.validated_data["lines"]]


class CartState:
    """The customer's cart: ordered line items keyed by product id, plus ``is_open``.

    Lines keep insertion order. Totals are derived on demand and never stored.
    """

    def __init__(self, storage: Optional[CartStorage] = None, *, is_open: bool = False):
        self._storage = storage if storage is not None else MemoryCartStorage()
        self._lines: dict[int, CartLineItem] = {}
        self._is_open = bool(is_open)
        self._hydrate()

    def __len__(self) -> int:
        return len(self._lines)

    def __iter__(self) -> Iterator[CartLineItem]:
        return iter(tuple(self._lines.values()))

    def __contains__(self, product_id) -> bool:
        return product_id in self._lines

    @property
    def lines(self) -> tuple[CartLineItem, ...]:
        return tuple(self._lines.values())

    @property
    def is_open(self) -> bool:
        return self._is_open

    def get_line(self, product_id: int) -> Optional[CartLineItem]:
        return self._lines.get(product_id)

    def add_item(self, product) -> CartLineItem:
        """Add one unit of ``product``.

        A product already in the cart has its quantity bumped; its stored
        price and details are left as they were when first added.
        """
        existing = self._lines.get(product.id)
        if existing is not None:
            line = replace(existing, quantity=existing.quantity + 1)
        else:
            line = CartLineItem.from_product(product)
        self._lines[line.product_id] = line
        self._persist()
        return line

    def remove_item(self, product_id: int) -> None:
        if self._lines.pop(product_id, None) is not None:
            self._persist()

    def update_quantity(self, product_id: int, quantity: int) -> None:
        """Set a line's quantity; zero or less removes the line. Unknown ids are ignored."""
        if quantity <= 0:
            self.remove_item(product_id)
            return
        existing = self._lines.get(product_id)
        if existing is None:
            return
        self._lines[product_id] = replace(existing, quantity=int(quantity))
        self._persist()

    def clear_cart(self) -> None:
        self._lines.clear()
        self._persist()

    def toggle_cart(self) -> bool:
        self._is_open = not self._is_open
        return self._is_open

    def open_cart(self) -> None:
        self._is_open = True

    def close_cart(self) -> None:
        self._is_open = False

    def get_total_items(self) -> int:
        return sum(line.quantity for line in self._lines.values())

    def get_total_price(self) -> Decimal:
        total = sum((line.line_total for line in self._lines.values()), Decimal("0"))
        return total.quantize(CENT, rounding=ROUND_HALF_UP)

    def get_min_order_time(self) -> int:
        """Longest lead time, in hours, among pre-order lines (0 if none)."""
        return max((line.min_order_time for line in self._lines.values() if line.pre_order), default=0)

    def to_payload(self) -> dict:
        return serialize_lines(self._lines.values())

    def _hydrate(self) -> None:
        try:
            payload = self._storage.load()
        except Exception:
            logger.warning("cart.load_failed", exc_info=True, extra={"event": "cart.load_failed"})
            return
        if payload is None:
            return
        lines = deserialize_lines(payload)
        if lines is None:
            logger.warning("cart.payload_discarded", extra={"event": "cart.payload_discarded"})
            self._persist()
            return
        self._lines = {line.product_id: line for line in lines}

    def _persist(self) -> None:
        # The in-memory cart stays authoritative when the backing store rejects a write
        try:
            self._storage.save(self.to_payload())
        except Exception:
            logger.warning(
                "cart.persist_failed",
                exc_info=True,
                extra={"event": "cart.persist_failed", "lines": len(self._lines)},
            )
