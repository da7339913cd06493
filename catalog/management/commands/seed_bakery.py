"""Seed the bakery catalog for local development.

Creates the storefront categories and a starter product range. Re-running is
idempotent; existing rows are matched by slug and left untouched.
"""

from decimal import Decimal

from django.core.management.base import BaseCommand
from django.db import transaction
from django.utils.text import slugify

from catalog.models import Category, Product

CATEGORIES = [
    ("Cakes", "Delicious handcrafted cakes for every occasion"),
    ("Pastries", "Fresh pastries baked daily"),
    ("Bread", "Artisan breads made with premium ingredients"),
    ("Cookies", "Homemade cookies with love"),
]

PRODUCTS = [
    {
        "name": "Chocolate Dream Cake",
        "description": "Rich chocolate cake with chocolate ganache frosting",
        "price": "45.99",
        "category": "Cakes",
        "featured": True,
        "pre_order": True,
        "min_order_time": 48,
        "ingredients": "Flour, cocoa powder, eggs, butter, sugar, vanilla",
        "allergens": "Contains gluten, eggs, dairy",
    },
    {
        "name": "Vanilla Bean Cheesecake",
        "description": "Creamy vanilla cheesecake with graham cracker crust",
        "price": "38.99",
        "category": "Cakes",
        "featured": True,
        "pre_order": True,
        "min_order_time": 24,
        "ingredients": "Cream cheese, vanilla beans, eggs, graham crackers",
        "allergens": "Contains gluten, eggs, dairy",
    },
    {
        "name": "Red Velvet Cake",
        "description": "Classic red velvet with cream cheese frosting",
        "price": "42.99",
        "category": "Cakes",
        "pre_order": True,
        "min_order_time": 24,
        "ingredients": "Flour, cocoa powder, buttermilk, eggs, food coloring",
        "allergens": "Contains gluten, eggs, dairy",
    },
    {
        "name": "Butter Croissants",
        "description": "Flaky, buttery croissants baked fresh daily",
        "price": "3.99",
        "category": "Pastries",
        "featured": True,
        "ingredients": "Flour, butter, yeast, milk, eggs",
        "allergens": "Contains gluten, eggs, dairy",
    },
    {
        "name": "Apple Danish",
        "description": "Sweet pastry filled with cinnamon apples",
        "price": "4.99",
        "category": "Pastries",
        "ingredients": "Flour, butter, apples, cinnamon, sugar",
        "allergens": "Contains gluten, dairy",
    },
    {
        "name": "Chocolate Eclair",
        "description": "Choux pastry filled with cream and topped with chocolate",
        "price": "5.99",
        "category": "Pastries",
        "featured": True,
        "ingredients": "Flour, eggs, butter, cream, chocolate",
        "allergens": "Contains gluten, eggs, dairy",
    },
    {
        "name": "Artisan Sourdough",
        "description": "Traditional sourdough with crispy crust",
        "price": "8.99",
        "category": "Bread",
        "featured": True,
        "pre_order": True,
        "min_order_time": 12,
        "ingredients": "Flour, sourdough starter, salt, water",
        "allergens": "Contains gluten",
    },
    {
        "name": "Whole Wheat Bread",
        "description": "Healthy whole wheat bread, perfect for sandwiches",
        "price": "6.99",
        "category": "Bread",
        "ingredients": "Whole wheat flour, yeast, honey, salt",
        "allergens": "Contains gluten",
    },
    {
        "name": "Chocolate Chip Cookies",
        "description": "Classic chocolate chip cookies, soft and chewy",
        "price": "2.99",
        "category": "Cookies",
        "featured": True,
        "ingredients": "Flour, chocolate chips, butter, brown sugar, eggs",
        "allergens": "Contains gluten, eggs, dairy",
    },
    {
        "name": "Oatmeal Raisin Cookies",
        "description": "Hearty oatmeal cookies with plump raisins",
        "price": "2.79",
        "category": "Cookies",
        "ingredients": "Oats, raisins, flour, butter, cinnamon",
        "allergens": "Contains gluten, dairy",
    },
]


class Command(BaseCommand):
    help = "Seed bakery categories and products"

    @transaction.atomic
    def handle(self, *args, **options):
        self.stdout.write("Seeding bakery catalog...")

        categories = {}
        for name, description in CATEGORIES:
            category, _ = Category.objects.get_or_create(
                slug=slugify(name),
                defaults={"name": name, "description": description},
            )
            categories[name] = category

        created = 0
        for data in PRODUCTS:
            _, was_created = Product.objects.get_or_create(
                slug=slugify(data["name"]),
                defaults={
                    "name": data["name"],
                    "description": data["description"],
                    "price": Decimal(data["price"]),
                    "category": categories[data["category"]],
                    "featured": data.get("featured", False),
                    "pre_order": data.get("pre_order", False),
                    "min_order_time": data.get("min_order_time", 0),
                    "ingredients": data["ingredients"],
                    "allergens": data["allergens"],
                },
            )
            created += int(was_created)

        self.stdout.write(self.style.SUCCESS(f"Bakery seed complete ({created} new products)."))
