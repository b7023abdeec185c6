"""Delivery job serializers."""

from __future__ import annotations

from rest_framework import serializers

from modules.deliveries.models import DeliveryJob


class AdvanceJobSerializer(serializers.Serializer):
    """Target status of an advance request.

    Left as free text: unknown values are rejected by the state machine.
    """

    status = serializers.CharField(max_length=20)


class DeliveryJobSerializer(serializers.ModelSerializer):
    order_number = serializers.CharField(source="order.order_number", read_only=True)
    total_amount = serializers.DecimalField(
        source="order.total_amount", max_digits=12, decimal_places=2, read_only=True
    )
    currency = serializers.CharField(source="order.currency", read_only=True)

    class Meta:
        model = DeliveryJob
        fields = [
            "id",
            "order_id",
            "order_number",
            "total_amount",
            "currency",
            "pickup_address",
            "delivery_address",
            "assigned_agent_id",
            "status",
            "assigned_at",
            "completed_at",
            "notes",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields
