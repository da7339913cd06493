"""DRF views for cart operations.

The cart lives in the caller's session, so every endpoint works for
anonymous shoppers as well as signed-in customers.
"""

from drf_spectacular.utils import OpenApiExample, extend_schema, inline_serializer
from rest_framework import serializers as rf_serializers
from rest_framework import status
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from rest_framework.views import APIView

from common.throttling import SessionScopedRateThrottle, SettingsScopedRateThrottle
from orders.emails import order_url
from orders.serializers import OrderSerializer
from orders.services import OrderError
from orders.views import IDEMPOTENCY_KEY_PARAMETER, idempotent_response

from .serializers import AddItemSerializer, CartReadSerializer, CheckoutSerializer, UpdateItemQuantitySerializer
from .services import (
    CartError,
    CheckoutError,
    add_product,
    change_quantity,
    checkout_cart,
    empty_cart,
    get_session_cart,
    remove_product,
    save_cart_visibility,
)

CART_EXAMPLE = {
    "items": [
        {
            "product_id": 3,
            "name": "Chocolate Cake",
            "unit_price": "15.99",
            "image": "",
            "quantity": 2,
            "pre_order": False,
            "min_order_time": 0,
            "line_total": "31.98",
        },
        {
            "product_id": 7,
            "name": "Wedding Cake",
            "unit_price": "9.00",
            "image": "",
            "quantity": 1,
            "pre_order": True,
            "min_order_time": 48,
            "line_total": "9.00",
        },
    ],
    "is_open": False,
    "total_items": 3,
    "total_price": "40.98",
    "min_order_time": 48,
}

CartMutationError = inline_serializer(name="CartMutationError", fields={"detail": rf_serializers.CharField()})


def _cart_response(cart, code=status.HTTP_200_OK):
    return Response(CartReadSerializer.from_cart(cart=cart).data, status=code)


class CartBaseView(APIView):
    permission_classes = [AllowAny]
    throttle_scope = "cart_write"
    throttle_classes = [SessionScopedRateThrottle]


class CartDetailView(CartBaseView):
    """Return the caller's cart."""

    throttle_scope = "cart"

    @extend_schema(
        tags=["Cart Endpoints"],
        summary="Get cart",
        description="Returns the cart lines with totals, the longest pre-order lead time and the panel state.",
        responses={200: CartReadSerializer},
        examples=[OpenApiExample("Cart", value=CART_EXAMPLE, response_only=True)],
    )
    def get(self, request):
        return _cart_response(get_session_cart(request.session))


class CartAddItemView(CartBaseView):
    """Add one unit of a product to the cart."""

    @extend_schema(
        tags=["Cart Endpoints"],
        summary="Add item to cart",
        description=(
            "Adds one unit of the product. A product already in the cart has its quantity increased; "
            "its price stays the one captured when it was first added."
        ),
        request=AddItemSerializer,
        responses={
            201: CartReadSerializer,
            400: CartMutationError,
            404: inline_serializer(name="NotFoundError", fields={"detail": rf_serializers.CharField()}),
        },
        examples=[OpenApiExample("Add", value={"product_id": 3}, request_only=True)],
    )
    def post(self, request):
        serializer = AddItemSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        cart = get_session_cart(request.session)
        try:
            add_product(cart, product_id=serializer.validated_data["product_id"])
        except CartError as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_400_BAD_REQUEST)
        return _cart_response(cart, status.HTTP_201_CREATED)


class CartItemView(CartBaseView):
    """Update the quantity of, or remove, a cart line."""

    @extend_schema(
        tags=["Cart Endpoints"],
        summary="Update cart item quantity",
        description="Sets the line quantity. Zero or a negative quantity removes the line; unknown products are ignored.",
        request=UpdateItemQuantitySerializer,
        responses={200: CartReadSerializer},
        examples=[OpenApiExample("Update", value={"quantity": 3}, request_only=True)],
    )
    def patch(self, request, product_id: int):
        serializer = UpdateItemQuantitySerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        cart = get_session_cart(request.session)
        change_quantity(cart, product_id=product_id, quantity=serializer.validated_data["quantity"])
        return _cart_response(cart)

    @extend_schema(
        tags=["Cart Endpoints"],
        summary="Remove cart item",
        description="Removes the line if present.",
        responses={204: None},
    )
    def delete(self, request, product_id: int):
        cart = get_session_cart(request.session)
        remove_product(cart, product_id=product_id)
        return Response(status=status.HTTP_204_NO_CONTENT)


class CartClearView(CartBaseView):
    """Remove every line from the cart."""

    @extend_schema(
        tags=["Cart Endpoints"],
        summary="Clear cart",
        responses={200: CartReadSerializer},
    )
    def post(self, request):
        cart = get_session_cart(request.session)
        empty_cart(cart)
        return _cart_response(cart)


class CartVisibilityView(CartBaseView):
    """Open, close or toggle the cart panel."""

    throttle_scope = "cart"
    visibility = "toggle"

    @extend_schema(
        tags=["Cart Endpoints"],
        summary="Change cart panel visibility",
        description="`toggle/` flips the panel state; `open/` and `close/` set it. Cart lines are not affected.",
        request=None,
        responses={200: CartReadSerializer},
    )
    def post(self, request):
        cart = get_session_cart(request.session)
        if self.visibility == "open":
            cart.open_cart()
        elif self.visibility == "close":
            cart.close_cart()
        else:
            cart.toggle_cart()
        save_cart_visibility(request.session, cart)
        return _cart_response(cart)


class CartCheckoutView(CartBaseView):
    """Submit the cart as a pickup order."""

    throttle_scope = "orders_write"
    throttle_classes = [SettingsScopedRateThrottle]

    @extend_schema(
        tags=["Cart Endpoints"],
        summary="Checkout cart",
        description=(
            "Places an order for every line in the cart and empties the cart. The pickup slot must be in the "
            "future and at least as far out as the longest pre-order lead time in the cart. On failure the "
            "cart is left unchanged. Idempotent when Idempotency-Key header is set; reusing a key with "
            "different cart contents returns 409."
        ),
        parameters=[IDEMPOTENCY_KEY_PARAMETER],
        request=CheckoutSerializer,
        responses={
            201: inline_serializer(
                name="CheckoutResponse",
                fields={"order": OrderSerializer(), "confirmation_url": rf_serializers.CharField()},
            ),
            400: CartMutationError,
        },
        examples=[
            OpenApiExample(
                "Checkout",
                value={
                    "customerName": "Jane Doe",
                    "customerEmail": "jane@example.com",
                    "customerPhone": "+15551234567",
                    "pickupDate": "2025-06-14",
                    "pickupTime": "10:30",
                    "specialInstructions": "Happy birthday on top, please",
                },
                request_only=True,
            ),
            OpenApiExample("Empty cart", value={"detail": "Cart is empty."}, response_only=True, status_codes=["400"]),
        ],
    )
    def post(self, request):
        serializer = CheckoutSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        cart = get_session_cart(request.session)

        def _handler():
            try:
                order = checkout_cart(cart, data=serializer.validated_data, user=request.user)
            except (CheckoutError, OrderError) as exc:
                return {"detail": str(exc)}, 400
            return {"order": OrderSerializer(order).data, "confirmation_url": order_url(order)}, 201

        # A successful checkout empties the cart, so a retry with an empty cart replays the stored order
        fingerprint = {"form": request.data, "lines": cart.to_payload()["lines"]} if len(cart) else {}
        return idempotent_response(request, _handler, hash_payload=fingerprint)
