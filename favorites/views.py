"""Favorites API views.

Endpoints are authenticated and scoped to the current user.
"""

from drf_spectacular.types import OpenApiTypes
from drf_spectacular.utils import OpenApiExample, OpenApiParameter, extend_schema
from rest_framework import generics, permissions, status
from rest_framework.response import Response
from rest_framework.views import APIView

from common.throttling import SettingsScopedRateThrottle

from .selectors import list_favorite_product_ids, list_favorites
from .serializers import FavoriteCreateSerializer, FavoriteIdsSerializer, FavoriteSerializer
from .services import FavoriteError, add_favorite, remove_favorite


class FavoriteListCreateView(generics.ListAPIView):
    """List or add the current user's favorite products."""

    permission_classes = [permissions.IsAuthenticated]
    serializer_class = FavoriteSerializer
    throttle_scope = "favorites"
    throttle_classes = [SettingsScopedRateThrottle]

    def get_queryset(self):
        return list_favorites(self.request.user)

    @extend_schema(
        tags=["Favorites Endpoints"],
        summary="List favorites",
        description="Returns favorite products, newest first. With `ids_only=true` returns only the product ids.",
        parameters=[
            OpenApiParameter("ids_only", OpenApiTypes.BOOL, location="query", description="Return only product ids"),
        ],
        examples=[
            OpenApiExample("Ids only", value={"favorite_ids": [3, 7]}, response_only=True),
        ],
    )
    def get(self, request, *args, **kwargs):
        if str(request.query_params.get("ids_only", "")).lower() in {"true", "1", "yes"}:
            data = FavoriteIdsSerializer({"favorite_ids": list_favorite_product_ids(request.user)}).data
            return Response(data)
        return super().get(request, *args, **kwargs)

    @extend_schema(
        tags=["Favorites Endpoints"],
        summary="Add favorite",
        request=FavoriteCreateSerializer,
        responses={201: FavoriteSerializer},
        examples=[
            OpenApiExample("Add", value={"product_id": 3}, request_only=True),
            OpenApiExample(
                "Already saved",
                value={"detail": "Product is already in favorites."},
                response_only=True,
                status_codes=["400"],
            ),
        ],
    )
    def post(self, request, *args, **kwargs):
        serializer = FavoriteCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        try:
            favorite = add_favorite(user=request.user, product_id=serializer.validated_data["product_id"])
        except FavoriteError as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_400_BAD_REQUEST)
        return Response(FavoriteSerializer(favorite).data, status=status.HTTP_201_CREATED)


class FavoriteDeleteView(APIView):
    """Remove a product from the current user's favorites."""

    permission_classes = [permissions.IsAuthenticated]
    throttle_scope = "favorites"
    throttle_classes = [SettingsScopedRateThrottle]

    @extend_schema(
        tags=["Favorites Endpoints"],
        summary="Remove favorite",
        description="Removing a product that is not a favorite is not an error.",
        responses={204: None},
    )
    def delete(self, request, product_id: int):
        remove_favorite(user=request.user, product_id=product_id)
        return Response(status=status.HTTP_204_NO_CONTENT)
