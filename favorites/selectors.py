from django.db.models import QuerySet

from .models import Favorite


def list_favorites(user) -> QuerySet[Favorite]:
    return Favorite.objects.filter(user_id=user.id).select_related("product", "product__category")


def list_favorite_product_ids(user) -> list[int]:
    return list(Favorite.objects.filter(user_id=user.id).order_by("-created_at", "-id").values_list("product_id", flat=True))
