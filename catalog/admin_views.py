"""Admin viewsets for write endpoints in the catalog app.

Endpoints are restricted to staff users. Deletes are destructive and must be
confirmed explicitly with ``?confirm=true``.
"""

import logging

from django.db.models import ProtectedError
from drf_spectacular.types import OpenApiTypes
from drf_spectacular.utils import OpenApiParameter, extend_schema, extend_schema_view
from rest_framework import permissions, status, viewsets
from rest_framework.response import Response

from common.throttling import SettingsScopedRateThrottle

from .admin_serializers import CategoryAdminSerializer, ProductAdminSerializer
from .models import Category, Product

logger = logging.getLogger("bakery.catalog")

CONFIRM_PARAMETER = OpenApiParameter(
    "confirm",
    OpenApiTypes.BOOL,
    location="query",
    required=True,
    description="Must be `true` to perform the deletion",
)


class AdminBaseViewSet(viewsets.ModelViewSet):
    permission_classes = [permissions.IsAdminUser]
    throttle_scope = "catalog_admin_write"
    throttle_classes = [SettingsScopedRateThrottle]

    def destroy(self, request, *args, **kwargs):
        if str(request.query_params.get("confirm", "")).lower() not in {"true", "1", "yes"}:
            return Response(
                {"detail": "Deletion must be confirmed with confirm=true."},
                status=status.HTTP_400_BAD_REQUEST,
            )
        instance = self.get_object()
        try:
            self.perform_destroy(instance)
        except ProtectedError:
            return Response(
                {"detail": "Cannot delete while other records still reference it."},
                status=status.HTTP_409_CONFLICT,
            )
        logger.info(
            "catalog.deleted",
            extra={
                "event": "catalog.deleted",
                "model": instance._meta.model_name,
                "object_id": kwargs.get(self.lookup_url_kwarg or self.lookup_field),
                "user_id": getattr(request.user, "id", None),
            },
        )
        return Response(status=status.HTTP_204_NO_CONTENT)


@extend_schema_view(
    list=extend_schema(tags=["Admin Endpoints"], summary="List categories (admin)"),
    retrieve=extend_schema(tags=["Admin Endpoints"], summary="Get category (admin)"),
    create=extend_schema(tags=["Admin Endpoints"], summary="Create category"),
    update=extend_schema(tags=["Admin Endpoints"], summary="Update category"),
    partial_update=extend_schema(tags=["Admin Endpoints"], summary="Partial update category"),
    destroy=extend_schema(
        tags=["Admin Endpoints"],
        summary="Delete category",
        description="Requires `confirm=true`. Returns 409 while the category still has products.",
        parameters=[CONFIRM_PARAMETER],
    ),
)
class CategoryAdminViewSet(AdminBaseViewSet):
    queryset = Category.objects.all().order_by("name")
    serializer_class = CategoryAdminSerializer


@extend_schema_view(
    list=extend_schema(tags=["Admin Endpoints"], summary="List products (admin)"),
    retrieve=extend_schema(tags=["Admin Endpoints"], summary="Get product (admin)"),
    create=extend_schema(tags=["Admin Endpoints"], summary="Create product"),
    update=extend_schema(tags=["Admin Endpoints"], summary="Update product"),
    partial_update=extend_schema(tags=["Admin Endpoints"], summary="Partial update product"),
    destroy=extend_schema(
        tags=["Admin Endpoints"],
        summary="Delete product",
        description="Requires `confirm=true`.",
        parameters=[CONFIRM_PARAMETER],
    ),
)
class ProductAdminViewSet(AdminBaseViewSet):
    queryset = Product.objects.select_related("category").order_by("-created_at")
    serializer_class = ProductAdminSerializer
