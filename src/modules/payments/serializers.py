"""Payment serializers."""

from __future__ import annotations

from rest_framework import serializers

from modules.payments.models import Payment


class ManualConfirmationSerializer(serializers.Serializer):
    """Admin confirmation of a payment received outside the gateway flow."""

    order_id = serializers.UUIDField()
    provider_reference = serializers.CharField(max_length=255)
    provider = serializers.CharField(max_length=50, required=False, default="manual")
    amount = serializers.DecimalField(
        max_digits=12, decimal_places=2, required=False, allow_null=True, default=None
    )


class PaymentSerializer(serializers.ModelSerializer):
    class Meta:
        model = Payment
        fields = [
            "id",
            "order_id",
            "amount",
            "currency",
            "provider",
            "provider_reference",
            "status",
            "created_at",
        ]
        read_only_fields = fields


class PaymentConfirmationSerializer(serializers.Serializer):
    order_id = serializers.UUIDField(source="order.id")
    order_status = serializers.CharField(source="order.status")
    payment_status = serializers.CharField(source="order.payment_status")
    payment = PaymentSerializer()
    delivery_job_id = serializers.UUIDField(source="job.id", default=None)
