from datetime import time, timedelta
from decimal import Decimal

import factory
from catalog.tests.factories import ProductFactory
from django.utils import timezone
from factory.django import DjangoModelFactory
from orders.models import Order, OrderItem


class OrderFactory(DjangoModelFactory):
    class Meta:
        model = Order

    user = None
    number = factory.Sequence(lambda n: f"ORD-{n + 1:06d}")
    customer_name = "Jane Doe"
    customer_email = factory.Sequence(lambda n: f"buyer{n}@example.com")
    customer_phone = "+15551234567"
    pickup_date = factory.LazyFunction(lambda: timezone.localdate() + timedelta(days=3))
    pickup_time = time(10, 30)
    total = Decimal("0.00")


class OrderItemFactory(DjangoModelFactory):
    class Meta:
        model = OrderItem

    order = factory.SubFactory(OrderFactory)
    product = factory.SubFactory(ProductFactory)
    product_name = factory.LazyAttribute(lambda o: o.product.name)
    quantity = 1
    unit_price = Decimal("4.50")
