from decimal import Decimal

import pytest
from catalog.models import Category, Product
from catalog.tests.factories import CategoryFactory, ProductFactory
from django.core.management import call_command
from django.db import IntegrityError, transaction


@pytest.mark.django_db
def test_lead_time_applies_only_to_pre_order_products():
    assert ProductFactory(pre_order=True, min_order_time=48).lead_time_hours == 48
    assert ProductFactory(pre_order=False, min_order_time=48).lead_time_hours == 0


@pytest.mark.django_db
def test_price_must_be_positive_at_database_level():
    category = CategoryFactory()
    with pytest.raises(IntegrityError):
        with transaction.atomic():
            Product.objects.create(
                name="Free Bun", slug="free-bun", price=Decimal("0.00"), category=category, description=""
            )


@pytest.mark.django_db
def test_seed_bakery_is_idempotent():
    call_command("seed_bakery")
    categories = Category.objects.count()
    products = Product.objects.count()
    assert categories == 4
    assert products > 0

    call_command("seed_bakery")
    assert Category.objects.count() == categories
    assert Product.objects.count() == products
    assert Product.objects.filter(pre_order=True, min_order_time__gt=0).exists()
