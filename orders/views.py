"""Orders API endpoints.

Customers create orders (anonymously or signed in) and list their own;
staff list all orders, move them through the status workflow and read the
dashboard stats.
"""

from django.http import Http404
from drf_spectacular.utils import OpenApiExample, OpenApiParameter, extend_schema
from rest_framework import generics, status
from rest_framework.pagination import PageNumberPagination
from rest_framework.permissions import AllowAny, IsAdminUser, IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from common.throttling import SettingsScopedRateThrottle

from . import selectors
from .models import Order
from .serializers import (
    OrderCreateSerializer,
    OrderSerializer,
    OrderStatsSerializer,
    OrderStatusUpdateSerializer,
)
from .services import (
    InvalidStatusTransition,
    OrderError,
    compute_request_hash,
    create_order,
    transition_order_status,
    with_idempotency,
)

IDEMPOTENCY_KEY_PARAMETER = OpenApiParameter(
    name="Idempotency-Key",
    location=OpenApiParameter.HEADER,
    required=False,
    description="Makes the request idempotent within scope+path+method",
    type=str,
)

ORDER_EXAMPLE = {
    "id": 42,
    "number": "ORD-000042",
    "status": "pending",
    "customer_name": "Jane Doe",
    "customer_email": "jane@example.com",
    "customer_phone": "+15551234567",
    "pickup_date": "2025-06-14",
    "pickup_time": "10:30",
    "special_instructions": "",
    "total": "40.98",
    "created_at": "2025-06-10T12:00:00Z",
    "updated_at": "2025-06-10T12:00:00Z",
    "items": [
        {
            "id": 1,
            "product": 3,
            "product_name": "Chocolate Cake",
            "quantity": 2,
            "unit_price": "15.99",
            "line_total": "31.98",
        }
    ],
}


def idempotent_response(request, handler, *, hash_payload=None):
    """Run ``handler`` honoring the request's ``Idempotency-Key`` header, if any.

    Anonymous callers are scoped by their session key, so a session is
    created when the request has none yet. The key is bound to a hash of
    ``hash_payload`` (the request body by default); an empty payload skips
    the comparison.
    """
    idem_key = request.headers.get("Idempotency-Key")
    if not idem_key:
        body, code = handler()
        return Response(body, status=code)

    session_key = None
    if not request.user.is_authenticated:
        if not request.session.session_key:
            request.session.save()
        session_key = request.session.session_key
    body, code = with_idempotency(
        key=idem_key,
        user=request.user,
        path=str(request.path),
        method=str(request.method),
        request_hash=compute_request_hash(request.data if hash_payload is None else hash_payload),
        handler=handler,
        session_key=session_key,
    )
    return Response(body, status=code)


class DefaultPagination(PageNumberPagination):
    page_size = 20
    page_size_query_param = "page_size"


class OrderListCreateView(generics.ListAPIView):
    """List the signed-in customer's orders, or place a new order.

    Placing an order is open to anonymous customers; listing requires
    authentication.
    """

    serializer_class = OrderSerializer
    pagination_class = DefaultPagination
    throttle_classes = [SettingsScopedRateThrottle]

    def initial(self, request, *args, **kwargs):
        self.throttle_scope = "orders_write" if request.method == "POST" else "orders"
        super().initial(request, *args, **kwargs)

    def get_permissions(self):
        if self.request.method == "POST":
            return [AllowAny()]
        return [IsAuthenticated()]

    def get_queryset(self):
        return selectors.list_orders_for_user(self.request.user)

    @extend_schema(
        tags=["Orders"],
        summary="List my orders",
        description="List the current user's orders, newest first.",
    )
    def get(self, request, *args, **kwargs):
        return super().get(request, *args, **kwargs)

    @extend_schema(
        tags=["Orders"],
        summary="Create order",
        description=(
            "Places a pickup order from submitted line snapshots. Pickup must be in the future and "
            "respect the longest pre-order lead time among the products. Idempotent when "
            "Idempotency-Key header is set."
        ),
        parameters=[IDEMPOTENCY_KEY_PARAMETER],
        request=OrderCreateSerializer,
        responses={201: OrderSerializer},
        examples=[
            OpenApiExample(
                "Create order",
                value={
                    "customerName": "Jane Doe",
                    "customerEmail": "jane@example.com",
                    "customerPhone": "+15551234567",
                    "pickupDate": "2025-06-14",
                    "pickupTime": "10:30",
                    "specialInstructions": "",
                    "items": [{"productId": 3, "quantity": 2, "price": "15.99"}],
                },
                request_only=True,
            ),
            OpenApiExample("Created", value=ORDER_EXAMPLE, response_only=True, status_codes=["201"]),
            OpenApiExample(
                "Pickup too early",
                value={"detail": "Pickup must be at least 48 hours from now for pre-order items."},
                response_only=True,
                status_codes=["400"],
            ),
        ],
    )
    def post(self, request, *args, **kwargs):
        serializer = OrderCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        def _handler():
            try:
                order = create_order(user=request.user, **serializer.validated_data)
            except OrderError as exc:
                return {"detail": str(exc)}, 400
            return OrderSerializer(order).data, 201

        return idempotent_response(request, _handler)


class OrderDetailView(generics.RetrieveAPIView):
    """Retrieve a single order for the authenticated user."""

    permission_classes = [IsAuthenticated]
    throttle_scope = "orders"
    throttle_classes = [SettingsScopedRateThrottle]
    serializer_class = OrderSerializer

    def get_object(self):
        order = selectors.get_order_for_user(self.request.user, self.kwargs["order_id"])
        if order is None:
            raise Http404("Not found.")
        return order

    @extend_schema(tags=["Orders"], summary="Get order detail")
    def get(self, request, *args, **kwargs):
        return super().get(request, *args, **kwargs)


class AdminOrderListView(generics.ListAPIView):
    """All orders for the back office, newest first.

    Filters:
    - `status`: one of the OrderStatus values
    - `number`: exact match of order number
    """

    permission_classes = [IsAdminUser]
    serializer_class = OrderSerializer
    pagination_class = DefaultPagination
    throttle_scope = "orders"
    throttle_classes = [SettingsScopedRateThrottle]

    def get_queryset(self):
        return selectors.list_all_orders(
            status=self.request.query_params.get("status"),
            number=self.request.query_params.get("number"),
        )

    @extend_schema(
        tags=["Admin Endpoints"],
        summary="List all orders",
        parameters=[
            OpenApiParameter(name="status", description="Order status filter", required=False, type=str),
            OpenApiParameter(name="number", description="Order number exact match", required=False, type=str),
            OpenApiParameter(name="page", description="Page number", required=False, type=int),
            OpenApiParameter(name="page_size", description="Items per page", required=False, type=int),
        ],
    )
    def get(self, request, *args, **kwargs):
        return super().get(request, *args, **kwargs)


class AdminOrderStatusView(APIView):
    """Move an order to a new status.

    Forward moves along pending → confirmed → preparing → ready → completed
    are allowed (steps may be skipped); any open order may be cancelled.
    Completed and cancelled orders are final.
    """

    permission_classes = [IsAdminUser]
    throttle_scope = "orders_write"
    throttle_classes = [SettingsScopedRateThrottle]

    @extend_schema(
        tags=["Admin Endpoints"],
        summary="Update order status",
        request=OrderStatusUpdateSerializer,
        responses={200: OrderSerializer},
        examples=[
            OpenApiExample("Confirm", value={"status": "confirmed"}, request_only=True),
            OpenApiExample(
                "Invalid transition",
                value={"detail": "Cannot change order status from completed to pending."},
                response_only=True,
                status_codes=["409"],
            ),
        ],
    )
    def patch(self, request, order_id: int):
        try:
            order = Order.objects.get(pk=order_id)
        except Order.DoesNotExist:
            raise Http404
        serializer = OrderStatusUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        try:
            updated = transition_order_status(order, serializer.validated_data["status"], actor=request.user)
        except InvalidStatusTransition as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_409_CONFLICT)
        except OrderError as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_400_BAD_REQUEST)
        return Response(OrderSerializer(updated).data)


class AdminOrderStatsView(APIView):
    """Dashboard counters: totals, today's orders, this month's revenue, pending orders."""

    permission_classes = [IsAdminUser]
    throttle_scope = "orders"
    throttle_classes = [SettingsScopedRateThrottle]

    @extend_schema(
        tags=["Admin Endpoints"],
        summary="Order stats",
        responses={200: OrderStatsSerializer},
        examples=[
            OpenApiExample(
                "Stats",
                value={"total_orders": 120, "today_orders": 4, "monthly_revenue": "1520.40", "pending_orders": 3},
                response_only=True,
            )
        ],
    )
    def get(self, request):
        return Response(OrderStatsSerializer(selectors.order_stats()).data)
