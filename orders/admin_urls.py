"""Staff-only order routes mounted under ``/api/v1/admin/``."""

from django.urls import path

from .views import AdminOrderListView, AdminOrderStatsView, AdminOrderStatusView

app_name = "orders_admin"

urlpatterns = [
    path("orders/", AdminOrderListView.as_view(), name="admin-order-list"),
    path("orders/<int:order_id>/status/", AdminOrderStatusView.as_view(), name="admin-order-status"),
    path("stats/", AdminOrderStatsView.as_view(), name="admin-stats"),
]
