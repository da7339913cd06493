"""Catalog app models.

Categories and the baked goods sold in them. Products carry the pricing and
lead-time fields the cart snapshots at add time.
"""

from decimal import Decimal

from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models

MAX_PRODUCT_PRICE = Decimal("9999.99")
MAX_MIN_ORDER_TIME_HOURS = 168


class TimeStampedModel(models.Model):
    """Abstract base model adding created/updated timestamps."""

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        abstract = True


class Category(TimeStampedModel):
    """Product grouping shown on the storefront (cakes, cookies, ...)."""

    name = models.CharField(max_length=50)
    slug = models.SlugField(max_length=60, unique=True)
    description = models.CharField(max_length=200, blank=True)
    image = models.URLField(blank=True)

    class Meta:
        ordering = ["name"]
        verbose_name_plural = "categories"

    def __str__(self) -> str:  # pragma: no cover
        return self.name


class Product(TimeStampedModel):
    """A baked good available for pickup.

    Pre-order products need ``min_order_time`` hours of notice before the
    pickup slot.
    """

    name = models.CharField(max_length=100)
    slug = models.SlugField(max_length=120, unique=True)
    description = models.CharField(max_length=500, blank=True)
    price = models.DecimalField(
        max_digits=8,
        decimal_places=2,
        validators=[MinValueValidator(Decimal("0.01")), MaxValueValidator(MAX_PRODUCT_PRICE)],
    )
    image = models.URLField(blank=True)
    category = models.ForeignKey(Category, related_name="products", on_delete=models.PROTECT)
    in_stock = models.BooleanField(default=True, db_index=True)
    featured = models.BooleanField(default=False, db_index=True)
    pre_order = models.BooleanField(default=False)
    min_order_time = models.PositiveSmallIntegerField(
        default=0,
        validators=[MaxValueValidator(MAX_MIN_ORDER_TIME_HOURS)],
        help_text="Hours of advance notice required for pre-orders",
    )
    ingredients = models.CharField(max_length=300, blank=True)
    allergens = models.CharField(max_length=200, blank=True)

    class Meta:
        ordering = ["-created_at"]
        constraints = [
            models.CheckConstraint(name="product_price_positive", condition=models.Q(price__gt=0)),
            models.CheckConstraint(
                name="product_min_order_time_bounded",
                condition=models.Q(min_order_time__lte=MAX_MIN_ORDER_TIME_HOURS),
            ),
        ]
        indexes = [
            models.Index(fields=["category", "in_stock"], name="product_category_stock_idx"),
        ]

    def __str__(self) -> str:  # pragma: no cover
        return self.name

    @property
    def lead_time_hours(self) -> int:
        """Notice required before pickup; zero unless the product is a pre-order."""
        return int(self.min_order_time) if self.pre_order else 0
