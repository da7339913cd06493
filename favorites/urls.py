"""URL routes for the favorites app (v1)."""

from django.urls import path

from .views import FavoriteDeleteView, FavoriteListCreateView

app_name = "favorites"

urlpatterns = [
    path("", FavoriteListCreateView.as_view(), name="favorite-list"),
    path("<int:product_id>/", FavoriteDeleteView.as_view(), name="favorite-delete"),
]
