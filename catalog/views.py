"""Read-only viewsets for the storefront catalog."""

from django_filters import rest_framework as filters
from drf_spectacular.types import OpenApiTypes
from drf_spectacular.utils import OpenApiExample, OpenApiParameter, extend_schema, extend_schema_view
from rest_framework import filters as drf_filters
from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.response import Response
from rest_framework.throttling import AnonRateThrottle, UserRateThrottle

from common.throttling import SettingsScopedRateThrottle

from . import selectors
from .models import Product
from .serializers import CategorySerializer, ProductDetailSerializer, ProductListSerializer


@extend_schema_view(
    list=extend_schema(
        summary="List categories",
        description="Returns categories ordered by name with the number of in-stock products in each.",
        tags=["Catalog Endpoints"],
        examples=[
            OpenApiExample(
                "Category list",
                value={
                    "count": 1,
                    "next": None,
                    "previous": None,
                    "results": [
                        {
                            "id": 1,
                            "name": "Cakes",
                            "slug": "cakes",
                            "description": "Delicious handcrafted cakes for every occasion",
                            "image": "",
                            "product_count": 3,
                        }
                    ],
                },
                response_only=True,
            )
        ],
    ),
    retrieve=extend_schema(
        summary="Get category by slug",
        tags=["Catalog Endpoints"],
    ),
)
class CategoryViewSet(viewsets.ReadOnlyModelViewSet):
    serializer_class = CategorySerializer
    lookup_field = "slug"
    throttle_scope = "catalog"
    throttle_classes = [SettingsScopedRateThrottle, UserRateThrottle, AnonRateThrottle]

    def get_queryset(self):
        return selectors.list_categories()

    @extend_schema(
        tags=["Catalog Endpoints"],
        summary="List products in category",
        description="Returns in-stock products within a category by slug",
    )
    @action(detail=True, methods=["get"], url_path="products")
    def products(self, request, slug=None):
        if selectors.get_category_by_slug(slug) is None:
            return Response({"detail": "Not found."}, status=status.HTTP_404_NOT_FOUND)
        qs = selectors.list_products_in_category(category_slug=slug)
        return Response(ProductListSerializer(qs, many=True).data)


class ProductFilterSet(filters.FilterSet):
    category = filters.CharFilter(field_name="category__slug")
    in_stock = filters.BooleanFilter(field_name="in_stock")
    featured = filters.BooleanFilter(field_name="featured")
    pre_order = filters.BooleanFilter(field_name="pre_order")

    class Meta:
        model = Product
        fields = ["category", "in_stock", "featured", "pre_order"]


@extend_schema_view(
    list=extend_schema(
        summary="List products",
        description=(
            "Returns all products. Filter by `category` slug, `in_stock`, `featured` or `pre_order`; "
            "order by `name`, `price` or `created_at`; search via `search` or `q`."
        ),
        tags=["Catalog Endpoints"],
        parameters=[
            OpenApiParameter("category", OpenApiTypes.STR, location="query", description="Filter by category slug"),
            OpenApiParameter("in_stock", OpenApiTypes.BOOL, location="query", description="Only in-stock products"),
            OpenApiParameter("featured", OpenApiTypes.BOOL, location="query", description="Only featured products"),
            OpenApiParameter("pre_order", OpenApiTypes.BOOL, location="query", description="Only pre-order products"),
            OpenApiParameter("search", OpenApiTypes.STR, location="query", description="Search products by text"),
            OpenApiParameter("q", OpenApiTypes.STR, location="query", description="Alias for `search`"),
        ],
    ),
    retrieve=extend_schema(
        summary="Get product by slug",
        description="Returns a product with its ingredients and allergens",
        tags=["Catalog Endpoints"],
    ),
)
class ProductViewSet(viewsets.ReadOnlyModelViewSet):
    lookup_field = "slug"
    lookup_value_regex = "[^/]+"
    filterset_class = ProductFilterSet
    throttle_scope = "catalog"
    throttle_classes = [SettingsScopedRateThrottle, UserRateThrottle, AnonRateThrottle]

    class QSearchFilter(drf_filters.SearchFilter):
        search_param = "q"

    filter_backends = [
        filters.DjangoFilterBackend,
        drf_filters.OrderingFilter,
        drf_filters.SearchFilter,
        QSearchFilter,
    ]
    ordering_fields = ["name", "price", "created_at"]
    search_fields = ["name", "description", "category__name"]

    def get_queryset(self):
        return selectors.list_products()

    def get_serializer_class(self):
        return ProductDetailSerializer if self.action == "retrieve" else ProductListSerializer

    @extend_schema(
        tags=["Catalog Endpoints"],
        summary="List featured products",
        description="Up to six featured products that are currently in stock",
    )
    @action(detail=False, methods=["get"], url_path="featured")
    def featured(self, request):
        qs = selectors.list_featured_products()
        return Response(ProductListSerializer(qs, many=True).data)
