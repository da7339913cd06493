"""Cart URL routes (v1)."""

from django.urls import path

from .views import (
    CartAddItemView,
    CartCheckoutView,
    CartClearView,
    CartDetailView,
    CartItemView,
    CartVisibilityView,
)

app_name = "cart"

urlpatterns = [
    path("", CartDetailView.as_view(), name="cart-detail"),
    path("items/", CartAddItemView.as_view(), name="cart-add-item"),
    path("items/<int:product_id>/", CartItemView.as_view(), name="cart-item"),
    path("clear/", CartClearView.as_view(), name="cart-clear"),
    path("toggle/", CartVisibilityView.as_view(visibility="toggle"), name="cart-toggle"),
    path("open/", CartVisibilityView.as_view(visibility="open"), name="cart-open"),
    path("close/", CartVisibilityView.as_view(visibility="close"), name="cart-close"),
    path("checkout/", CartCheckoutView.as_view(), name="cart-checkout"),
]
