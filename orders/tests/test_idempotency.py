from datetime import timedelta

import pytest
from catalog.tests.factories import ProductFactory
from django.urls import reverse
from django.utils import timezone
from orders.models import IdempotencyKey, Order
from orders.services import compute_request_hash, idempotency_scope, with_idempotency
from users.tests.factories import UserFactory

pytestmark = pytest.mark.django_db


def payload(product, quantity=1):
    return {
        "customerName": "Jane Doe",
        "customerEmail": "jane@example.com",
        "customerPhone": "+15551234567",
        "pickupDate": (timezone.localdate() + timedelta(days=2)).isoformat(),
        "pickupTime": "09:00",
        "items": [{"productId": product.id, "quantity": quantity, "price": "4.50"}],
    }


def test_scope_prefers_user_then_session():
    user = UserFactory()
    assert idempotency_scope(user, "abc") == f"user:{user.id}"
    assert idempotency_scope(None, "abc") == "session:abc"
    assert idempotency_scope(None, None) == "anon"


def test_request_hash_is_order_independent():
    assert compute_request_hash({"a": 1, "b": 2}) == compute_request_hash({"b": 2, "a": 1})
    assert compute_request_hash({}) is None


def test_replay_returns_stored_response_without_rerunning_handler():
    calls = []

    def handler():
        calls.append(1)
        return {"ok": True}, 201

    kwargs = dict(key="k1", user=None, path="/p", method="post", handler=handler, request_hash="h")
    assert with_idempotency(**kwargs) == ({"ok": True}, 201)
    assert with_idempotency(**kwargs) == ({"ok": True}, 201)
    assert len(calls) == 1


def test_handler_exception_releases_key():
    def failing():
        raise RuntimeError("boom")

    with pytest.raises(RuntimeError):
        with_idempotency(key="k2", user=None, path="/p", method="POST", handler=failing)
    assert not IdempotencyKey.objects.exists()


def test_expired_record_is_replaced():
    IdempotencyKey.objects.create(
        key="k3",
        scope="anon",
        path="/p",
        method="POST",
        response_json={"stale": True},
        response_code=201,
        expires_at=timezone.now() - timedelta(minutes=1),
    )
    body, code = with_idempotency(key="k3", user=None, path="/p", method="POST", handler=lambda: ({"new": 1}, 201))
    assert (body, code) == ({"new": 1}, 201)


def test_api_replay_and_conflict(api_client):
    user = UserFactory()
    api_client.force_authenticate(user)
    product = ProductFactory()
    url = reverse("orders:order-list")

    first = api_client.post(url, payload(product), format="json", HTTP_IDEMPOTENCY_KEY="order-1")
    replay = api_client.post(url, payload(product), format="json", HTTP_IDEMPOTENCY_KEY="order-1")
    conflict = api_client.post(url, payload(product, quantity=3), format="json", HTTP_IDEMPOTENCY_KEY="order-1")

    assert first.status_code == replay.status_code == 201
    assert replay.json()["id"] == first.json()["id"]
    assert conflict.status_code == 409
    assert Order.objects.count() == 1


def test_same_key_is_independent_per_user(api_client):
    product = ProductFactory()
    url = reverse("orders:order-list")
    for _ in range(2):
        api_client.force_authenticate(UserFactory())
        resp = api_client.post(url, payload(product), format="json", HTTP_IDEMPOTENCY_KEY="shared")
        assert resp.status_code == 201
    assert Order.objects.count() == 2
