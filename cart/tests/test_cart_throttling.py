import pytest
from catalog.tests.factories import ProductFactory
from django.urls import reverse
from rest_framework.test import APIClient

pytestmark = pytest.mark.django_db


@pytest.fixture
def cart_rate(settings):
    rates = dict(settings.REST_FRAMEWORK["DEFAULT_THROTTLE_RATES"], cart="2/min")
    settings.REST_FRAMEWORK = {**settings.REST_FRAMEWORK, "DEFAULT_THROTTLE_RATES": rates}


def view_cart(client):
    return client.get(reverse("cart:cart-detail")).status_code


def test_stored_session_gets_its_own_budget(cart_rate, settings):
    shopper = APIClient()
    shopper.post(reverse("cart:cart-add-item"), {"product_id": ProductFactory().id}, format="json")
    assert settings.SESSION_COOKIE_NAME in shopper.cookies

    assert [view_cart(shopper) for _ in range(3)] == [200, 200, 429]
    # The shopper's session budget is separate from the anonymous IP budget
    assert view_cart(APIClient()) == 200


def test_unknown_session_cookies_share_the_ip_budget(cart_rate, settings):
    codes = []
    for n in range(3):
        client = APIClient()
        client.cookies[settings.SESSION_COOKIE_NAME] = f"madeupsessionkey{n:08d}"
        codes.append(view_cart(client))
    assert codes == [200, 200, 429]
