"""Cart serializers for the stored payload, API reads and write operations."""

from decimal import Decimal

from rest_framework import serializers

from orders.models import MAX_LINE_QUANTITY
from orders.serializers import CustomerDetailsSerializer


class CartLineSnapshotSerializer(serializers.Serializer):
    """Validates one stored cart line before it is rebuilt."""

    product_id = serializers.IntegerField(min_value=1)
    name = serializers.CharField(max_length=100)
    unit_price = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=Decimal("0.00"))
    image = serializers.CharField(allow_blank=True, required=False, default="")
    quantity = serializers.IntegerField(min_value=1)
    pre_order = serializers.BooleanField(required=False, default=False)
    min_order_time = serializers.IntegerField(min_value=0, required=False, default=0)


class CartPayloadSerializer(serializers.Serializer):
    """Validates the versioned payload kept in the session."""

    version = serializers.IntegerField()
    lines = CartLineSnapshotSerializer(many=True)

    def validate_lines(self, value):
        ids = [line["product_id"] for line in value]
        if len(ids) != len(set(ids)):
            raise serializers.ValidationError("Duplicate product ids.")
        return value


class CartLineReadSerializer(serializers.Serializer):
    """Read serializer for a cart line."""

    product_id = serializers.IntegerField()
    name = serializers.CharField()
    unit_price = serializers.DecimalField(max_digits=12, decimal_places=2)
    image = serializers.CharField()
    quantity = serializers.IntegerField()
    pre_order = serializers.BooleanField()
    min_order_time = serializers.IntegerField()
    line_total = serializers.DecimalField(max_digits=None, decimal_places=2)


class CartReadSerializer(serializers.Serializer):
    """Read serializer for the cart summary and lines."""

    items = CartLineReadSerializer(many=True)
    is_open = serializers.BooleanField()
    total_items = serializers.IntegerField()
    total_price = serializers.DecimalField(max_digits=None, decimal_places=2)
    min_order_time = serializers.IntegerField()

    @classmethod
    def from_cart(cls, *, cart):
        return cls(
            {
                "items": list(cart.lines),
                "is_open": cart.is_open,
                "total_items": cart.get_total_items(),
                "total_price": cart.get_total_price(),
                "min_order_time": cart.get_min_order_time(),
            }
        )


class AddItemSerializer(serializers.Serializer):
    """Write serializer for adding one unit of a product to the cart."""

    product_id = serializers.IntegerField(min_value=1)


class UpdateItemQuantitySerializer(serializers.Serializer):
    """Write serializer for setting a line quantity; zero or less removes the line."""

    quantity = serializers.IntegerField(
        max_value=MAX_LINE_QUANTITY,
        error_messages={"max_value": f"Quantity must be at most {MAX_LINE_QUANTITY}"},
    )


class CheckoutSerializer(CustomerDetailsSerializer):
    """Contact and pickup details submitted with the cart at checkout."""
