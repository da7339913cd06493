"""Admin serializers for write endpoints in the catalog app.

Field limits mirror the back-office product and category forms.
"""

from decimal import Decimal

from django.utils.text import slugify
from rest_framework import serializers

from .models import MAX_MIN_ORDER_TIME_HOURS, MAX_PRODUCT_PRICE, Category, Product


def _unique_slug(model, value: str) -> str:
    base = slugify(value)[:100] or "item"
    slug = base
    n = 2
    while model.objects.filter(slug=slug).exists():
        slug = f"{base}-{n}"
        n += 1
    return slug


class CategoryAdminSerializer(serializers.ModelSerializer):
    name = serializers.CharField(max_length=50)
    slug = serializers.SlugField(max_length=60, required=False)
    description = serializers.CharField(max_length=200, required=False, allow_blank=True)

    class Meta:
        model = Category
        fields = ["id", "name", "slug", "description", "image", "created_at", "updated_at"]
        read_only_fields = ["id", "created_at", "updated_at"]

    def validate(self, attrs):
        if self.instance is None and not attrs.get("slug"):
            attrs["slug"] = _unique_slug(Category, attrs["name"])
        return attrs


class ProductAdminSerializer(serializers.ModelSerializer):
    name = serializers.CharField(max_length=100)
    slug = serializers.SlugField(max_length=120, required=False)
    description = serializers.CharField(max_length=500, required=False, allow_blank=True)
    price = serializers.DecimalField(
        max_digits=8,
        decimal_places=2,
        min_value=Decimal("0.01"),
        max_value=MAX_PRODUCT_PRICE,
        error_messages={
            "min_value": "Price must be greater than 0.",
            "max_value": "Price must be less than 10000.",
        },
    )
    min_order_time = serializers.IntegerField(min_value=0, max_value=MAX_MIN_ORDER_TIME_HOURS, required=False)
    ingredients = serializers.CharField(max_length=300, required=False, allow_blank=True)
    allergens = serializers.CharField(max_length=200, required=False, allow_blank=True)
    category = serializers.PrimaryKeyRelatedField(queryset=Category.objects.all())

    class Meta:
        model = Product
        fields = [
            "id",
            "name",
            "slug",
            "description",
            "price",
            "image",
            "category",
            "in_stock",
            "featured",
            "pre_order",
            "min_order_time",
            "ingredients",
            "allergens",
            "created_at",
            "updated_at",
        ]
        read_only_fields = ["id", "created_at", "updated_at"]

    def validate(self, attrs):
        if self.instance is None and not attrs.get("slug"):
            attrs["slug"] = _unique_slug(Product, attrs["name"])
        return attrs
