"""Dashboard serializers."""

from __future__ import annotations

from rest_framework import serializers

from modules.orders.models import Order


def _display_name(user) -> str:
    profile = getattr(user, "profile", None)
    if profile is not None:
        return profile.display_name
    return user.get_username()


class DashboardOrderSerializer(serializers.ModelSerializer):
    buyer_name = serializers.SerializerMethodField()
    seller_name = serializers.SerializerMethodField()
    product_title = serializers.CharField(
        source="product.title", read_only=True, default=None
    )
    delivery_job_id = serializers.UUIDField(read_only=True, allow_null=True)
    delivery_status = serializers.CharField(read_only=True, allow_null=True)

    class Meta:
        model = Order
        fields = [
            "id",
            "order_number",
            "buyer_id",
            "buyer_name",
            "seller_id",
            "seller_name",
            "product_title",
            "quantity",
            "total_amount",
            "currency",
            "shipping_address",
            "status",
            "payment_status",
            "delivery_job_id",
            "delivery_status",
            "created_at",
        ]
        read_only_fields = fields

    def get_buyer_name(self, obj: Order) -> str:
        return _display_name(obj.buyer)

    def get_seller_name(self, obj: Order) -> str:
        return _display_name(obj.seller)


class BuyerStatsSerializer(serializers.Serializer):
    total = serializers.IntegerField()
    success = serializers.IntegerField()
    pending = serializers.IntegerField()
    failed = serializers.IntegerField()
    amount_total = serializers.DecimalField(max_digits=14, decimal_places=2)
