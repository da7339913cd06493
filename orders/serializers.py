"""DRF serializers for Orders.

Request serializers accept the storefront's camelCase field names and map
them onto snake_case attributes via ``source``; responses are snake_case.
"""

from decimal import Decimal

from rest_framework import serializers

from common.choices import OrderStatus
from common.validators import validate_person_name, validate_phone

from .models import MAX_LINE_QUANTITY, Order, OrderItem

PICKUP_TIME_FORMATS = ["%H:%M"]


class CustomerDetailsSerializer(serializers.Serializer):
    """Contact and pickup fields collected by the checkout form."""

    customerName = serializers.CharField(
        source="customer_name",
        min_length=2,
        max_length=50,
        validators=[validate_person_name],
        error_messages={
            "min_length": "Name must be at least 2 characters",
            "max_length": "Name must be less than 50 characters",
        },
    )
    customerEmail = serializers.EmailField(
        source="customer_email", error_messages={"invalid": "Invalid email address"}
    )
    customerPhone = serializers.CharField(source="customer_phone", max_length=17, validators=[validate_phone])
    pickupDate = serializers.DateField(source="pickup_date")
    pickupTime = serializers.TimeField(
        source="pickup_time",
        input_formats=PICKUP_TIME_FORMATS,
        error_messages={"invalid": "Invalid time format (HH:MM)"},
    )
    specialInstructions = serializers.CharField(
        source="special_instructions",
        max_length=500,
        required=False,
        allow_blank=True,
        default="",
        error_messages={"max_length": "Special instructions must be less than 500 characters"},
    )


class OrderLineInputSerializer(serializers.Serializer):
    productId = serializers.IntegerField(source="product_id", min_value=1)
    quantity = serializers.IntegerField(
        min_value=1,
        max_value=MAX_LINE_QUANTITY,
        error_messages={"max_value": f"Quantity must be at most {MAX_LINE_QUANTITY}"},
    )
    price = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=Decimal("0.00"))


class OrderCreateSerializer(CustomerDetailsSerializer):
    items = OrderLineInputSerializer(many=True, allow_empty=False)

    def validate_items(self, value):
        ids = [item["product_id"] for item in value]
        if len(ids) != len(set(ids)):
            raise serializers.ValidationError("Each product may appear only once.")
        return value


class OrderItemSerializer(serializers.ModelSerializer):
    """API representation of an order line item with computed line_total."""

    line_total = serializers.DecimalField(max_digits=14, decimal_places=2, read_only=True)

    class Meta:
        model = OrderItem
        fields = [
            "id",
            "product",
            "product_name",
            "quantity",
            "unit_price",
            "line_total",
        ]
        read_only_fields = fields


class OrderSerializer(serializers.ModelSerializer):
    items = OrderItemSerializer(many=True, read_only=True)
    pickup_time = serializers.TimeField(format="%H:%M", read_only=True)

    class Meta:
        model = Order
        fields = [
            "id",
            "number",
            "status",
            "customer_name",
            "customer_email",
            "customer_phone",
            "pickup_date",
            "pickup_time",
            "special_instructions",
            "total",
            "created_at",
            "updated_at",
            "items",
        ]
        read_only_fields = fields


class OrderStatusUpdateSerializer(serializers.Serializer):
    status = serializers.CharField()

    def validate_status(self, value: str) -> str:
        normalized = str(value).strip().lower()
        if normalized not in OrderStatus.values:
            raise serializers.ValidationError("Invalid status value")
        return normalized


class OrderStatsSerializer(serializers.Serializer):
    total_orders = serializers.IntegerField()
    today_orders = serializers.IntegerField()
    monthly_revenue = serializers.DecimalField(max_digits=14, decimal_places=2)
    pending_orders = serializers.IntegerField()
