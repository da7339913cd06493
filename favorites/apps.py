"""Django app configuration for customer favorites."""

from django.apps import AppConfig


class FavoritesConfig(AppConfig):
    """Products a signed-in customer has saved for later."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "favorites"
