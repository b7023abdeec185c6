"""Payment records.

One row per order settled by a gateway charge.  A single charge may pay
several orders, so the provider reference is only unique per order.
"""

from __future__ import annotations

from decimal import Decimal

from django.core.serializers.json import DjangoJSONEncoder
from django.db import models

from modules.core.models import BaseModel
from modules.orders.constants import PaymentStatus
from modules.payments.constants import PaymentProvider


class Payment(BaseModel):
    order = models.ForeignKey(
        "orders.Order",
        on_delete=models.PROTECT,
        related_name="payments",
    )
    amount = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        default=Decimal("0.00"),
    )
    currency = models.CharField(max_length=3, default="NGN")
    provider = models.CharField(
        max_length=50,
        choices=PaymentProvider.choices,
        default=PaymentProvider.PAYSTACK,
    )
    provider_reference = models.CharField(max_length=255)
    status = models.CharField(
        max_length=20,
        choices=PaymentStatus.choices,
        default=PaymentStatus.COMPLETED,
    )
    metadata = models.JSONField(default=dict, blank=True, encoder=DjangoJSONEncoder)

    class Meta:
        db_table = "payments"
        ordering = ["-created_at"]
        constraints = [
            models.UniqueConstraint(
                fields=["provider", "provider_reference", "order"],
                name="payments_reference_per_order_unique",
            ),
        ]
        indexes = [
            models.Index(fields=["provider_reference"], name="payments_reference_idx"),
        ]

    def __str__(self) -> str:
        return f"{self.provider}:{self.provider_reference} ({self.amount} {self.currency})"
