from datetime import time, timedelta
from decimal import Decimal

import pytest
from catalog.tests.factories import ProductFactory
from django.core import mail
from django.urls import reverse
from django.utils import timezone
from orders.models import Order
from orders.services import OrderError, create_order
from users.tests.factories import UserFactory

from .factories import OrderFactory

pytestmark = pytest.mark.django_db


def order_payload(items, days_ahead=3, **overrides):
    data = {
        "customerName": "Jane Doe",
        "customerEmail": "jane@example.com",
        "customerPhone": "+15551234567",
        "pickupDate": (timezone.localdate() + timedelta(days=days_ahead)).isoformat(),
        "pickupTime": "10:30",
        "items": items,
    }
    data.update(overrides)
    return data


def test_anonymous_customer_can_place_order(api_client, django_capture_on_commit_callbacks):
    cake = ProductFactory(name="Chocolate Cake", price=Decimal("15.99"))
    bun = ProductFactory(name="Cinnamon Bun", price=Decimal("3.50"))
    items = [
        {"productId": cake.id, "quantity": 2, "price": "15.99"},
        {"productId": bun.id, "quantity": 1, "price": "3.50"},
    ]

    with django_capture_on_commit_callbacks(execute=True):
        resp = api_client.post(reverse("orders:order-list"), order_payload(items), format="json")

    assert resp.status_code == 201
    body = resp.json()
    order = Order.objects.get()
    assert body["number"] == f"ORD-{order.id:06d}"
    assert body["status"] == "pending"
    assert body["total"] == "35.48"
    assert body["pickup_time"] == "10:30"
    assert body["special_instructions"] == ""
    assert [item["product_name"] for item in body["items"]] == ["Chocolate Cake", "Cinnamon Bun"]
    assert order.user is None

    assert len(mail.outbox) == 1
    message = mail.outbox[0]
    assert message.to == ["jane@example.com"]
    assert order.number in message.subject
    assert "Chocolate Cake x 2" in message.body
    assert "Total: $35.48" in message.body


def test_signed_in_customer_order_is_linked(api_client):
    user = UserFactory()
    api_client.force_authenticate(user)
    product = ProductFactory()
    items = [{"productId": product.id, "quantity": 1, "price": "4.50"}]

    resp = api_client.post(reverse("orders:order-list"), order_payload(items), format="json")

    assert resp.status_code == 201
    assert Order.objects.get().user == user


@pytest.mark.parametrize(
    "overrides, field",
    [
        ({"customerName": "J"}, "customerName"),
        ({"customerName": "J4ne"}, "customerName"),
        ({"customerEmail": "nope"}, "customerEmail"),
        ({"customerPhone": "0123"}, "customerPhone"),
        ({"pickupTime": "10:30pm"}, "pickupTime"),
        ({"specialInstructions": "x" * 501}, "specialInstructions"),
        ({"items": []}, "items"),
    ],
)
def test_create_order_validation(api_client, overrides, field):
    product = ProductFactory()
    items = [{"productId": product.id, "quantity": 1, "price": "4.50"}]
    data = order_payload(items)
    data.update(overrides)
    resp = api_client.post(reverse("orders:order-list"), data, format="json")
    assert resp.status_code == 400
    assert field in resp.json()
    assert Order.objects.count() == 0


def test_create_order_rejects_bad_lines(api_client):
    product = ProductFactory()
    items = [
        {"productId": product.id, "quantity": 0, "price": "4.50"},
        {"productId": product.id, "quantity": 1, "price": "-1.00"},
    ]
    resp = api_client.post(reverse("orders:order-list"), order_payload(items), format="json")
    assert resp.status_code == 400
    assert "items" in resp.json()


def test_create_order_rejects_duplicate_products(api_client):
    product = ProductFactory()
    items = [
        {"productId": product.id, "quantity": 1, "price": "4.50"},
        {"productId": product.id, "quantity": 2, "price": "4.50"},
    ]
    resp = api_client.post(reverse("orders:order-list"), order_payload(items), format="json")
    assert resp.status_code == 400


def test_create_order_rejects_past_pickup(api_client):
    product = ProductFactory()
    items = [{"productId": product.id, "quantity": 1, "price": "4.50"}]
    resp = api_client.post(reverse("orders:order-list"), order_payload(items, days_ahead=-1), format="json")
    assert resp.status_code == 400
    assert resp.json()["detail"] == "Pickup time must be in the future."


def test_create_order_enforces_pre_order_lead_time(api_client):
    cake = ProductFactory(pre_order=True, min_order_time=72)
    items = [{"productId": cake.id, "quantity": 1, "price": "4.50"}]

    resp = api_client.post(reverse("orders:order-list"), order_payload(items, days_ahead=1), format="json")
    assert resp.status_code == 400
    assert resp.json()["detail"] == "Pickup must be at least 72 hours from now for pre-order items."

    resp = api_client.post(reverse("orders:order-list"), order_payload(items, days_ahead=5), format="json")
    assert resp.status_code == 201


def test_create_order_unknown_product(api_client):
    items = [{"productId": 4242, "quantity": 1, "price": "4.50"}]
    resp = api_client.post(reverse("orders:order-list"), order_payload(items), format="json")
    assert resp.status_code == 400
    assert resp.json()["detail"] == "Unknown product(s): 4242."


def test_listing_orders_requires_authentication(api_client):
    resp = api_client.get(reverse("orders:order-list"))
    assert resp.status_code == 401


def test_customer_sees_only_own_orders(api_client):
    user = UserFactory()
    mine = OrderFactory(user=user)
    OrderFactory(user=UserFactory())
    OrderFactory()
    api_client.force_authenticate(user)

    resp = api_client.get(reverse("orders:order-list"))

    assert resp.status_code == 200
    assert [row["id"] for row in resp.json()["results"]] == [mine.id]


def test_order_detail_is_scoped_to_owner(api_client):
    user = UserFactory()
    mine = OrderFactory(user=user)
    theirs = OrderFactory(user=UserFactory())
    api_client.force_authenticate(user)

    resp = api_client.get(reverse("orders:order-detail", kwargs={"order_id": mine.id}))
    assert resp.status_code == 200
    assert resp.json()["number"] == mine.number

    resp = api_client.get(reverse("orders:order-detail", kwargs={"order_id": theirs.id}))
    assert resp.status_code == 404


def test_create_order_rejects_quantity_above_line_limit(api_client):
    product = ProductFactory()
    items = [{"productId": product.id, "quantity": 1000, "price": "4.50"}]
    resp = api_client.post(reverse("orders:order-list"), order_payload(items), format="json")
    assert resp.status_code == 400
    assert resp.json()["items"] == [{"quantity": ["Quantity must be at most 999"]}]


def test_create_order_rejects_total_above_column_limit():
    product = ProductFactory()
    with pytest.raises(OrderError, match="exceeds the maximum"):
        create_order(
            customer_name="Jane Doe",
            customer_email="jane@example.com",
            customer_phone="+15551234567",
            pickup_date=timezone.localdate() + timedelta(days=3),
            pickup_time=time(10, 30),
            items=[{"product_id": product.id, "quantity": 2, "price": Decimal("9999999999.99")}],
        )
    assert Order.objects.count() == 0
