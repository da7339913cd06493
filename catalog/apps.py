"""Django app configuration for the bakery catalog."""

from django.apps import AppConfig


class CatalogConfig(AppConfig):
    """Categories and products sold on the storefront."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "catalog"
