"""Order DRF serializers for API input/output.

The serializer operates at the Interface layer (API Views).
Business logic lives in the Service Layer, which receives
Pydantic DTOs from ``dtos.py``.
"""

from __future__ import annotations

from rest_framework import serializers

from modules.orders.models import Order, OrderStatusHistory

# ---------------------------------------------------------------------------
# Input Serializers
# ---------------------------------------------------------------------------


class AddressSerializer(serializers.Serializer):
    """Structured shipping / pickup address."""

    full_name = serializers.CharField(required=False, default="", allow_blank=True)
    address = serializers.CharField()
    city = serializers.CharField()
    state = serializers.CharField(required=False, default="", allow_blank=True)
    phone = serializers.CharField(required=False, default="", allow_blank=True)


class CreateOrderSerializer(serializers.Serializer):
    """Validates the checkout request payload."""

    product_id = serializers.UUIDField()
    quantity = serializers.IntegerField(min_value=1, default=1)
    shipping_address = AddressSerializer()
    notes = serializers.CharField(required=False, default="", allow_blank=True)


# ---------------------------------------------------------------------------
# Output Serializers (Read)
# ---------------------------------------------------------------------------


class StatusHistorySerializer(serializers.ModelSerializer):
    """Read serializer for order status history records."""

    class Meta:
        model = OrderStatusHistory
        fields = [
            "id",
            "old_status",
            "new_status",
            "notes",
            "created_at",
        ]
        read_only_fields = fields


class OrderSerializer(serializers.ModelSerializer):
    """Read serializer for orders with their status history."""

    product_title = serializers.CharField(
        source="product.title", read_only=True, default=None
    )
    status_history = StatusHistorySerializer(many=True, read_only=True)

    class Meta:
        model = Order
        fields = [
            "id",
            "order_number",
            "buyer_id",
            "seller_id",
            "product_id",
            "product_title",
            "quantity",
            "total_amount",
            "currency",
            "shipping_address",
            "status",
            "payment_status",
            "payment_provider",
            "provider_reference",
            "confirmed_at",
            "notes",
            "created_at",
            "updated_at",
            "status_history",
        ]
        read_only_fields = fields


class OrderListSerializer(serializers.ModelSerializer):
    """Lightweight serializer for order lists (no nested relations)."""

    product_title = serializers.CharField(
        source="product.title", read_only=True, default=None
    )

    class Meta:
        model = Order
        fields = [
            "id",
            "order_number",
            "buyer_id",
            "seller_id",
            "product_title",
            "quantity",
            "total_amount",
            "currency",
            "status",
            "payment_status",
            "created_at",
        ]
        read_only_fields = fields
