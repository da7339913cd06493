from django.apps import AppConfig


class CartConfig(AppConfig):
    """Session-backed shopping cart and checkout; the app owns no tables."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "cart"
