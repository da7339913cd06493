import django.core.validators
import django.db.models.deletion
from decimal import Decimal

from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="Category",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("name", models.CharField(max_length=50)),
                ("slug", models.SlugField(max_length=60, unique=True)),
                ("description", models.CharField(blank=True, max_length=200)),
                ("image", models.URLField(blank=True)),
            ],
            options={
                "ordering": ["name"],
                "verbose_name_plural": "categories",
            },
        ),
        migrations.CreateModel(
            name="Product",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("name", models.CharField(max_length=100)),
                ("slug", models.SlugField(max_length=120, unique=True)),
                ("description", models.CharField(blank=True, max_length=500)),
                (
                    "price",
                    models.DecimalField(
                        decimal_places=2,
                        max_digits=8,
                        validators=[
                            django.core.validators.MinValueValidator(Decimal("0.01")),
                            django.core.validators.MaxValueValidator(Decimal("9999.99")),
                        ],
                    ),
                ),
                ("image", models.URLField(blank=True)),
                ("in_stock", models.BooleanField(db_index=True, default=True)),
                ("featured", models.BooleanField(db_index=True, default=False)),
                ("pre_order", models.BooleanField(default=False)),
                (
                    "min_order_time",
                    models.PositiveSmallIntegerField(
                        default=0,
                        help_text="Hours of advance notice required for pre-orders",
                        validators=[django.core.validators.MaxValueValidator(168)],
                    ),
                ),
                ("ingredients", models.CharField(blank=True, max_length=300)),
                ("allergens", models.CharField(blank=True, max_length=200)),
                (
                    "category",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="products",
                        to="catalog.category",
                    ),
                ),
            ],
            options={
                "ordering": ["-created_at"],
                "indexes": [models.Index(fields=["category", "in_stock"], name="product_category_stock_idx")],
                "constraints": [
                    models.CheckConstraint(condition=models.Q(("price__gt", 0)), name="product_price_positive"),
                    models.CheckConstraint(
                        condition=models.Q(("min_order_time__lte", 168)), name="product_min_order_time_bounded"
                    ),
                ],
            },
        ),
    ]
