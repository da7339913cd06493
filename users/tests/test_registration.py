import pytest
from django.contrib.auth import get_user_model
from django.urls import reverse

from .factories import UserFactory

pytestmark = pytest.mark.django_db


def signup(**overrides):
    data = {
        "name": "Jane Doe",
        "email": "Jane@Example.com ",
        "password": "Sweet1234",
        "confirm_password": "Sweet1234",
        "phone": "+15551234567",
        "terms": True,
    }
    data.update(overrides)
    return data


def test_register_creates_customer(api_client):
    resp = api_client.post(reverse("register"), signup(), format="json")

    assert resp.status_code == 201
    body = resp.json()
    assert body["email"] == "jane@example.com"
    assert body["name"] == "Jane Doe"
    assert body["is_staff"] is False
    assert "password" not in body
    user = get_user_model().objects.get(email="jane@example.com")
    assert user.username == "jane@example.com"
    assert (user.first_name, user.last_name) == ("Jane", "Doe")
    assert user.check_password("Sweet1234")


@pytest.mark.parametrize("password", ["sweet1234", "SWEET1234", "SweetTreats", "Sw1", "Sw1" + "a" * 100])
def test_register_rejects_weak_passwords(api_client, password):
    resp = api_client.post(
        reverse("register"), signup(password=password, confirm_password=password), format="json"
    )
    assert resp.status_code == 400
    assert "password" in resp.json()


def test_register_password_mismatch(api_client):
    resp = api_client.post(reverse("register"), signup(confirm_password="Sweet12345"), format="json")
    assert resp.status_code == 400
    assert resp.json()["confirm_password"] == ["Passwords don't match"]


def test_register_requires_terms(api_client):
    resp = api_client.post(reverse("register"), signup(terms=False), format="json")
    assert resp.status_code == 400
    assert resp.json()["terms"] == ["You must accept the terms and conditions"]


def test_register_duplicate_email(api_client):
    UserFactory(email="jane@example.com")
    resp = api_client.post(reverse("register"), signup(), format="json")
    assert resp.status_code == 400
    assert "email" in resp.json()


def test_register_rejects_invalid_name_and_phone(api_client):
    resp = api_client.post(reverse("register"), signup(name="J@ne", phone="abc"), format="json")
    assert resp.status_code == 400
    assert {"name", "phone"} <= set(resp.json())
