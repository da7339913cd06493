import pytest
from catalog.models import Category, Product
from catalog.tests.factories import CategoryFactory, ProductFactory
from rest_framework.test import APIClient
from users.tests.factories import StaffUserFactory, UserFactory


def _product_payload(category, **overrides):
    payload = {
        "name": "Lemon Tart",
        "description": "Zesty lemon curd in a butter crust",
        "price": "6.50",
        "category": category.id,
        "in_stock": True,
        "featured": False,
        "pre_order": False,
        "min_order_time": 0,
    }
    payload.update(overrides)
    return payload


@pytest.mark.django_db
def test_admin_create_product_requires_staff():
    category = CategoryFactory()
    client = APIClient()

    client.force_authenticate(user=UserFactory())
    resp_forbidden = client.post("/api/v1/admin/catalog/products/", _product_payload(category), format="json")
    assert resp_forbidden.status_code == 403

    client.force_authenticate(user=StaffUserFactory())
    resp = client.post("/api/v1/admin/catalog/products/", _product_payload(category), format="json")
    assert resp.status_code == 201
    assert resp.data["slug"] == "lemon-tart"


@pytest.mark.django_db
def test_admin_create_product_anonymous_is_unauthorized():
    category = CategoryFactory()
    client = APIClient()
    resp = client.post("/api/v1/admin/catalog/products/", _product_payload(category), format="json")
    assert resp.status_code == 401


@pytest.mark.django_db
@pytest.mark.parametrize(
    "overrides, field",
    [
        ({"price": "0"}, "price"),
        ({"price": "10000.00"}, "price"),
        ({"min_order_time": 169}, "min_order_time"),
        ({"min_order_time": -1}, "min_order_time"),
        ({"name": "x" * 101}, "name"),
        ({"allergens": "x" * 201}, "allergens"),
    ],
)
def test_admin_product_field_limits(overrides, field):
    category = CategoryFactory()
    client = APIClient()
    client.force_authenticate(user=StaffUserFactory())
    resp = client.post("/api/v1/admin/catalog/products/", _product_payload(category, **overrides), format="json")
    assert resp.status_code == 400
    assert field in resp.data


@pytest.mark.django_db
def test_admin_partial_update_keeps_slug():
    product = ProductFactory(name="Old Name", slug="old-name")
    client = APIClient()
    client.force_authenticate(user=StaffUserFactory())
    resp = client.patch(f"/api/v1/admin/catalog/products/{product.id}/", {"name": "New Name"}, format="json")
    assert resp.status_code == 200
    product.refresh_from_db()
    assert product.name == "New Name"
    assert product.slug == "old-name"


@pytest.mark.django_db
def test_admin_delete_requires_confirmation():
    product = ProductFactory()
    client = APIClient()
    client.force_authenticate(user=StaffUserFactory())

    resp = client.delete(f"/api/v1/admin/catalog/products/{product.id}/")
    assert resp.status_code == 400
    assert Product.objects.filter(id=product.id).exists()

    resp = client.delete(f"/api/v1/admin/catalog/products/{product.id}/?confirm=true")
    assert resp.status_code == 204
    assert not Product.objects.filter(id=product.id).exists()


@pytest.mark.django_db
def test_admin_delete_category_with_products_conflicts():
    category = CategoryFactory()
    ProductFactory(category=category)
    client = APIClient()
    client.force_authenticate(user=StaffUserFactory())

    resp = client.delete(f"/api/v1/admin/catalog/categories/{category.id}/?confirm=true")
    assert resp.status_code == 409
    assert Category.objects.filter(id=category.id).exists()


@pytest.mark.django_db
def test_admin_create_category_generates_unique_slug():
    CategoryFactory(name="Cakes", slug="cakes")
    client = APIClient()
    client.force_authenticate(user=StaffUserFactory())

    resp = client.post("/api/v1/admin/catalog/categories/", {"name": "Cakes"}, format="json")
    assert resp.status_code == 201
    assert resp.data["slug"] == "cakes-2"
