import logging

from django.db import IntegrityError, transaction
from django.shortcuts import get_object_or_404

from catalog.models import Product

from .models import Favorite

logger = logging.getLogger("bakery.favorites")


class FavoriteError(Exception):
    """Domain error for favorite operations."""


def add_favorite(*, user, product_id: int) -> Favorite:
    """Save a product for the user.

    Raises Http404 for unknown products and FavoriteError if it is already saved.
    """
    product = get_object_or_404(Product, pk=product_id)
    try:
        with transaction.atomic():
            favorite = Favorite.objects.create(user=user, product=product)
    except IntegrityError:
        raise FavoriteError("Product is already in favorites.")
    logger.info(
        "favorite.added",
        extra={"event": "favorite.added", "user_id": user.id, "product_id": product.id},
    )
    return favorite


def remove_favorite(*, user, product_id: int) -> bool:
    """Remove a saved product; returns False when it was not saved."""
    deleted, _ = Favorite.objects.filter(user_id=user.id, product_id=product_id).delete()
    if deleted:
        logger.info(
            "favorite.removed",
            extra={"event": "favorite.removed", "user_id": user.id, "product_id": product_id},
        )
    return bool(deleted)
