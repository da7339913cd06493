"""Selectors for the catalog domain.

Read-only query helpers shared by the public and admin APIs. Selectors
return querysets or single instances and never mutate.
"""

from typing import Iterable, Optional

from django.db.models import Count, Q, QuerySet

from .models import Category, Product

FEATURED_PRODUCTS_LIMIT = 6


def list_categories(ordering: Optional[Iterable[str]] = None) -> QuerySet[Category]:
    """Return categories annotated with ``product_count`` (in-stock products only)."""

    ordering = list(ordering or ("name",))
    return Category.objects.annotate(
        product_count=Count("products", filter=Q(products__in_stock=True)),
    ).order_by(*ordering)


def get_category_by_slug(slug: str) -> Optional[Category]:
    try:
        return Category.objects.get(slug=slug)
    except Category.DoesNotExist:
        return None


def list_products(
    *,
    category_slug: Optional[str] = None,
    in_stock: Optional[bool] = None,
    featured: Optional[bool] = None,
    search: Optional[str] = None,
    ordering: Optional[Iterable[str]] = None,
) -> QuerySet[Product]:
    """Return products with common filters and the category joined in."""

    qs = Product.objects.select_related("category")
    if category_slug:
        qs = qs.filter(category__slug=category_slug)
    if in_stock is not None:
        qs = qs.filter(in_stock=in_stock)
    if featured is not None:
        qs = qs.filter(featured=featured)
    if search:
        qs = qs.filter(
            Q(name__icontains=search) | Q(description__icontains=search) | Q(category__name__icontains=search)
        )
    ordering = list(ordering or ("-created_at",))
    return qs.order_by(*ordering)


def list_featured_products(limit: int = FEATURED_PRODUCTS_LIMIT) -> QuerySet[Product]:
    """Featured, in-stock products for the storefront landing page."""

    return list_products(featured=True, in_stock=True)[:limit]


def list_products_in_category(*, category_slug: str) -> QuerySet[Product]:
    """In-stock products of a category, newest first."""

    return list_products(category_slug=category_slug, in_stock=True)


def get_products_by_ids(product_ids: Iterable[int]) -> dict[int, Product]:
    """Map of id → product for the given ids; unknown ids are simply absent."""

    return {p.id: p for p in Product.objects.filter(pk__in=list(product_ids))}
