"""Read-only order queries for customer and admin endpoints."""

from decimal import Decimal
from typing import Optional

from django.db.models import QuerySet, Sum
from django.utils import timezone

from common.choices import OrderStatus

from .models import Order


def list_orders_for_user(user) -> QuerySet[Order]:
    return Order.objects.filter(user_id=user.id).prefetch_related("items").order_by("-created_at", "-id")


def get_order_for_user(user, order_id) -> Optional[Order]:
    try:
        return list_orders_for_user(user).get(id=int(order_id))
    except (Order.DoesNotExist, ValueError, TypeError):
        return None


def list_all_orders(*, status: Optional[str] = None, number: Optional[str] = None) -> QuerySet[Order]:
    qs = Order.objects.select_related("user").prefetch_related("items").order_by("-created_at", "-id")
    if status:
        qs = qs.filter(status=status)
    if number:
        qs = qs.filter(number=number)
    return qs


def order_stats(now=None) -> dict:
    """Dashboard figures for the admin overview.

    ``today_orders`` and ``monthly_revenue`` use the bakery's local calendar;
    revenue excludes cancelled orders.
    """
    now = timezone.localtime(now or timezone.now())
    start_of_day = now.replace(hour=0, minute=0, second=0, microsecond=0)
    start_of_month = start_of_day.replace(day=1)

    revenue = (
        Order.objects.filter(created_at__gte=start_of_month)
        .exclude(status=OrderStatus.CANCELLED)
        .aggregate(total=Sum("total"))["total"]
    )
    return {
        "total_orders": Order.objects.count(),
        "today_orders": Order.objects.filter(created_at__gte=start_of_day).count(),
        "monthly_revenue": (revenue or Decimal("0.00")).quantize(Decimal("0.01")),
        "pending_orders": Order.objects.filter(status=OrderStatus.PENDING).count(),
    }
