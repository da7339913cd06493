from decimal import Decimal

import factory
from catalog.models import Category, Product
from factory import Faker
from factory.django import DjangoModelFactory


class CategoryFactory(DjangoModelFactory):
    class Meta:
        model = Category

    name = factory.Sequence(lambda n: f"Category {n}")
    slug = factory.LazyAttribute(lambda o: o.name.lower().replace(" ", "-"))
    description = Faker("sentence")


class ProductFactory(DjangoModelFactory):
    class Meta:
        model = Product

    name = factory.Sequence(lambda n: f"Treat {n}")
    slug = factory.LazyAttribute(lambda o: "-".join(o.name.lower().split()))
    description = Faker("sentence")
    price = Decimal("4.50")
    category = factory.SubFactory(CategoryFactory)
    in_stock = True
    featured = False
    pre_order = False
    min_order_time = 0
    ingredients = "flour, sugar, butter"
    allergens = "gluten, dairy"
