import logging
from decimal import Decimal
from types import SimpleNamespace

import pytest
from cart.state import CartLineItem, CartState, MemoryCartStorage, SessionCartStorage


def make_product(pid, price="4.50", *, name=None, pre_order=False, min_order_time=0, image=""):
    return SimpleNamespace(
        id=pid,
        name=name or f"Treat {pid}",
        price=Decimal(price),
        image=image,
        pre_order=pre_order,
        min_order_time=min_order_time,
    )


class FakeSession(dict):
    modified = False


class FailingStorage:
    def __init__(self, payload=None):
        self.payload = payload

    def load(self):
        return self.payload

    def save(self, payload):
        raise OSError("quota exceeded")


def test_adding_same_product_bumps_quantity_on_one_line():
    cart = CartState()
    product = make_product(1)
    for _ in range(5):
        cart.add_item(product)

    assert len(cart) == 1
    assert cart.get_line(1).quantity == 5


def test_add_item_snapshots_price():
    cart = CartState()
    product = make_product(1, "24.99")
    cart.add_item(product)
    product.price = Decimal("30.00")
    cart.add_item(product)

    line = cart.get_line(1)
    assert line.unit_price == Decimal("24.99")
    assert line.quantity == 2


def test_two_products_total_price_and_items():
    cart = CartState()
    cart.add_item(make_product(1, "24.99"))
    cart.add_item(make_product(2, "15.99"))

    assert cart.get_total_price() == Decimal("40.98")
    assert cart.get_total_items() == 2


def test_update_quantity_then_add_other_product():
    cart = CartState()
    cart.add_item(make_product(1))
    cart.update_quantity(1, 3)
    cart.add_item(make_product(2))

    assert cart.get_total_items() == 4


@pytest.mark.parametrize("quantity", [0, -1, -10])
def test_update_quantity_to_zero_or_less_removes_line(quantity):
    cart = CartState()
    cart.add_item(make_product(1))
    cart.update_quantity(1, quantity)

    assert 1 not in cart
    assert cart.get_total_items() == 0


def test_update_quantity_has_no_upper_bound_and_ignores_unknown_ids():
    cart = CartState()
    cart.add_item(make_product(1))
    cart.update_quantity(1, 500)
    cart.update_quantity(99, 3)

    assert cart.get_line(1).quantity == 500
    assert 99 not in cart


def test_remove_unknown_item_is_noop():
    cart = CartState()
    cart.add_item(make_product(1))
    cart.remove_item(2)
    assert [line.product_id for line in cart] == [1]


def test_min_order_time_is_max_over_pre_order_lines():
    cart = CartState()
    assert cart.get_min_order_time() == 0
    cart.add_item(make_product(1, pre_order=True, min_order_time=24))
    cart.add_item(make_product(2, pre_order=True, min_order_time=48))
    cart.add_item(make_product(3, pre_order=False, min_order_time=96))

    assert cart.get_min_order_time() == 48


def test_total_price_rounds_half_up_and_is_stable():
    cart = CartState()
    cart.add_item(make_product(1, "0.10"))
    cart.update_quantity(1, 3)
    cart.add_item(make_product(2, "19.99"))

    first = cart.get_total_price()
    assert first == Decimal("20.29")
    assert cart.get_total_price() == first
    assert cart.get_total_items() == 4


def test_clear_cart_resets_getters_but_keeps_visibility():
    cart = CartState()
    cart.add_item(make_product(1, pre_order=True, min_order_time=24))
    cart.open_cart()
    cart.clear_cart()

    assert cart.get_total_items() == 0
    assert cart.get_total_price() == Decimal("0.00")
    assert cart.get_min_order_time() == 0
    assert cart.is_open is True


def test_toggle_twice_returns_to_original_state():
    cart = CartState()
    original = cart.is_open
    cart.toggle_cart()
    assert cart.is_open is not original
    cart.toggle_cart()
    assert cart.is_open is original


def test_open_and_close_do_not_write_lines():
    storage = MemoryCartStorage()
    cart = CartState(storage)
    cart.open_cart()
    cart.close_cart()
    assert storage.payload is None


def test_lines_keep_insertion_order_and_are_immutable():
    cart = CartState()
    cart.add_item(make_product(3))
    cart.add_item(make_product(1))
    cart.add_item(make_product(2))
    cart.add_item(make_product(3))

    lines = cart.lines
    assert [line.product_id for line in lines] == [3, 1, 2]
    assert isinstance(lines, tuple)
    with pytest.raises(AttributeError):
        lines[0].quantity = 10


def test_mutations_persist_and_rehydrate():
    storage = MemoryCartStorage()
    cart = CartState(storage)
    cart.add_item(make_product(1, "24.99", image="https://img.example.com/cake.jpg"))
    cart.add_item(make_product(2, "15.99", pre_order=True, min_order_time=48))
    cart.update_quantity(1, 2)

    assert storage.payload["version"] == 1
    restored = CartState(storage)
    assert restored.lines == cart.lines
    assert restored.get_total_price() == Decimal("65.97")
    assert restored.get_min_order_time() == 48


def test_remove_and_clear_persist():
    storage = MemoryCartStorage()
    cart = CartState(storage)
    cart.add_item(make_product(1))
    cart.add_item(make_product(2))
    cart.remove_item(1)
    assert [line["product_id"] for line in storage.payload["lines"]] == [2]
    cart.clear_cart()
    assert storage.payload == {"version": 1, "lines": []}


@pytest.mark.parametrize(
    "payload",
    [
        "not json at all",
        ["a", "list"],
        {"lines": []},
        {"version": 2, "lines": []},
        {"version": 1, "lines": "nope"},
        {"version": 1, "lines": [{"product_id": 1, "name": "Bun", "unit_price": "2.00", "quantity": 0}]},
        {"version": 1, "lines": [{"product_id": 1, "name": "Bun", "unit_price": "-2.00", "quantity": 1}]},
        {"version": 1, "lines": [{"product_id": 1, "name": "Bun", "unit_price": "abc", "quantity": 1}]},
        {
            "version": 1,
            "lines": [
                {"product_id": 1, "name": "Bun", "unit_price": "2.00", "quantity": 1},
                {"product_id": 1, "name": "Bun", "unit_price": "2.00", "quantity": 2},
            ],
        },
    ],
)
def test_malformed_payload_is_discarded(payload, caplog):
    storage = MemoryCartStorage(payload)
    with caplog.at_level(logging.WARNING, logger="bakery.cart"):
        cart = CartState(storage)

    assert len(cart) == 0
    assert cart.get_total_price() == Decimal("0.00")
    assert storage.payload == {"version": 1, "lines": []}
    assert any(r.message == "cart.payload_discarded" for r in caplog.records)


def test_failing_storage_write_keeps_cart_in_memory(caplog):
    cart = CartState(FailingStorage())
    with caplog.at_level(logging.WARNING, logger="bakery.cart"):
        cart.add_item(make_product(1, "3.00"))
        cart.add_item(make_product(1, "3.00"))

    assert cart.get_total_items() == 2
    assert cart.get_total_price() == Decimal("6.00")
    assert any(r.message == "cart.persist_failed" for r in caplog.records)


def test_failing_storage_read_starts_empty():
    class Unreadable:
        def load(self):
            raise OSError("storage unavailable")

        def save(self, payload):
            pass

    cart = CartState(Unreadable())
    assert len(cart) == 0


def test_session_storage_uses_configured_key(settings):
    settings.CART_SESSION_KEY = "test.cart"
    session = FakeSession()
    cart = CartState(SessionCartStorage(session))
    cart.add_item(make_product(5, "1.25"))

    assert session["test.cart"]["lines"][0]["unit_price"] == "1.25"
    assert CartState(SessionCartStorage(session)).get_line(5) == CartLineItem(
        product_id=5, name="Treat 5", unit_price=Decimal("1.25")
    )


def test_summary_renders_very_large_quantities():
    from cart.serializers import CartReadSerializer

    cart = CartState()
    cart.add_item(make_product(1, "24.99"))
    cart.update_quantity(1, 10**12)

    data = CartReadSerializer.from_cart(cart=cart).data
    assert data["total_price"] == "24990000000000.00"
    assert data["items"][0]["line_total"] == "24990000000000.00"
