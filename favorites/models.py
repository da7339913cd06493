from django.conf import settings
from django.db import models


class Favorite(models.Model):
    """A product saved by a customer; one row per (user, product) pair."""

    user = models.ForeignKey(settings.AUTH_USER_MODEL, related_name="favorites", on_delete=models.CASCADE)
    product = models.ForeignKey("catalog.Product", related_name="favorited_by", on_delete=models.CASCADE)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-created_at", "-id"]
        constraints = [
            models.UniqueConstraint(fields=["user", "product"], name="uniq_favorite_user_product"),
        ]

    def __str__(self) -> str:  # pragma: no cover
        return f"Favorite(user={self.user_id}, product={self.product_id})"
