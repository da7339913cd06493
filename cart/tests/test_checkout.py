from datetime import date, datetime, time, timedelta
from datetime import timezone as dt_timezone
from decimal import Decimal

import pytest
from cart.services import CheckoutError, build_order_request, checkout_cart
from cart.state import CartState, MemoryCartStorage
from catalog.tests.factories import ProductFactory
from orders.models import Order

NOW = datetime(2025, 6, 10, 9, 0, tzinfo=dt_timezone.utc)


def details(pickup_date=date(2025, 6, 14), pickup_time=time(10, 30), **overrides):
    data = {
        "customer_name": "Jane Doe",
        "customer_email": "jane@example.com",
        "customer_phone": "+15551234567",
        "pickup_date": pickup_date,
        "pickup_time": pickup_time,
        "special_instructions": "",
    }
    data.update(overrides)
    return data


class RecordingSubmit:
    def __init__(self, error=None):
        self.calls = []
        self.error = error

    def __call__(self, **kwargs):
        self.calls.append(kwargs)
        if self.error is not None:
            raise self.error
        return Order(id=1)


def test_empty_cart_is_rejected_before_submission():
    submit = RecordingSubmit()
    with pytest.raises(CheckoutError, match="Cart is empty"):
        checkout_cart(CartState(), data=details(), submit=submit, now=NOW)
    assert submit.calls == []


@pytest.mark.django_db
def test_build_order_request_has_one_item_per_line():
    cake = ProductFactory(price=Decimal("24.99"))
    bun = ProductFactory(price=Decimal("15.99"))
    cart = CartState()
    cart.add_item(cake)
    cart.add_item(cake)
    cart.add_item(bun)

    payload = build_order_request(cart, details(special_instructions=None))

    assert payload["special_instructions"] == ""
    assert payload["items"] == [
        {"product_id": cake.id, "quantity": 2, "price": Decimal("24.99")},
        {"product_id": bun.id, "quantity": 1, "price": Decimal("15.99")},
    ]


@pytest.mark.django_db
def test_pickup_in_the_past_is_rejected_and_cart_kept():
    cart = CartState()
    cart.add_item(ProductFactory())
    submit = RecordingSubmit()

    with pytest.raises(CheckoutError, match="must be in the future"):
        checkout_cart(cart, data=details(pickup_date=date(2025, 6, 9)), submit=submit, now=NOW)

    assert submit.calls == []
    assert cart.get_total_items() == 1


@pytest.mark.django_db
def test_pickup_inside_pre_order_lead_time_is_rejected():
    cart = CartState()
    cart.add_item(ProductFactory(pre_order=True, min_order_time=48))
    submit = RecordingSubmit()
    tomorrow = (NOW + timedelta(hours=24)).date()

    with pytest.raises(CheckoutError, match="at least 48 hours"):
        checkout_cart(cart, data=details(pickup_date=tomorrow, pickup_time=time(9, 0)), submit=submit, now=NOW)
    assert submit.calls == []


@pytest.mark.django_db
def test_successful_checkout_submits_and_clears_cart():
    storage = MemoryCartStorage()
    cart = CartState(storage)
    cart.add_item(ProductFactory(pre_order=True, min_order_time=24))
    submit = RecordingSubmit()

    order = checkout_cart(cart, data=details(), submit=submit, now=NOW)

    assert order.id == 1
    assert len(submit.calls) == 1
    assert submit.calls[0]["customer_email"] == "jane@example.com"
    assert submit.calls[0]["now"] == NOW
    assert len(cart) == 0
    assert storage.payload["lines"] == []


@pytest.mark.django_db
def test_failed_submission_leaves_cart_intact():
    cart = CartState()
    cart.add_item(ProductFactory(price=Decimal("3.00")))
    submit = RecordingSubmit(error=ConnectionError("backend unavailable"))

    with pytest.raises(ConnectionError):
        checkout_cart(cart, data=details(), submit=submit, now=NOW)

    assert cart.get_total_items() == 1
    assert cart.get_total_price() == Decimal("3.00")


@pytest.mark.django_db
def test_checkout_creates_order_from_cart_snapshot():
    cake = ProductFactory(name="Chocolate Cake", price=Decimal("15.99"))
    cart = CartState()
    cart.add_item(cake)
    cart.update_quantity(cake.id, 2)
    cake.price = Decimal("20.00")
    cake.save()

    order = checkout_cart(cart, data=details(), now=NOW)

    order.refresh_from_db()
    assert order.total == Decimal("31.98")
    item = order.items.get()
    assert (item.product_name, item.quantity, item.unit_price) == ("Chocolate Cake", 2, Decimal("15.99"))
    assert len(cart) == 0


@pytest.mark.django_db
def test_line_above_quantity_limit_is_rejected_before_submission():
    cart = CartState()
    product = ProductFactory()
    cart.add_item(product)
    cart.update_quantity(product.id, 1000)
    submit = RecordingSubmit()

    with pytest.raises(CheckoutError, match="at most 999"):
        checkout_cart(cart, data=details(), submit=submit, now=NOW)
    assert submit.calls == []
    assert cart.get_total_items() == 1000
