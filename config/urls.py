"""
URL configuration for the bakery backend.

Public storefront APIs live under /api/v1/; staff-only APIs under
/api/v1/admin/. The Django admin stays at /admin/.
"""

from django.contrib import admin
from django.urls import include, path
from drf_spectacular.views import SpectacularAPIView, SpectacularSwaggerView

from .health import health

admin.site.site_header = "Sweet Dreams Bakery Admin"
admin.site.index_title = "Admin"

urlpatterns = [
    path("admin/", admin.site.urls),
    # API schema and Swagger UI
    path("api/schema/", SpectacularAPIView.as_view(), name="api-schema"),
    path("api/docs/", SpectacularSwaggerView.as_view(url_name="api-schema"), name="api-docs"),
    # Healthcheck
    path("health/", health, name="health"),
    # Versioned v1 routes only
    path("api/v1/", include("users.urls")),
    path("api/v1/catalog/", include("catalog.urls")),
    path("api/v1/cart/", include("cart.urls")),
    path("api/v1/orders/", include("orders.urls")),
    path("api/v1/favorites/", include("favorites.urls")),
    path("api/v1/admin/catalog/", include("catalog.admin_urls")),
    path("api/v1/admin/", include("orders.admin_urls")),
]
