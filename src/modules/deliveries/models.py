"""DeliveryJob model.

Business rules enforced by the database:
- an agent is set exactly when the job has left ``pending``
  (cancelled jobs are exempt);
- at most one non-cancelled job per order.
"""

from __future__ import annotations

from django.conf import settings
from django.db import models

from modules.core.models import BaseModel
from modules.deliveries.constants import TERMINAL_STATES, DeliveryStatus
from shared.domain.events import DomainEventMixin
from shared.domain.value_objects import Address


class DeliveryJob(DomainEventMixin, BaseModel):
    """One delivery of one paid order.

    Only ``status``, ``assigned_agent``, ``assigned_at`` and
    ``completed_at`` change after creation, always through conditional
    updates in the repository.
    """

    order = models.ForeignKey(
        "orders.Order",
        on_delete=models.PROTECT,
        related_name="delivery_jobs",
    )
    pickup_address = models.JSONField(default=dict, blank=True)
    delivery_address = models.JSONField(default=dict, blank=True)
    assigned_agent = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name="delivery_jobs",
    )
    status = models.CharField(
        max_length=20,
        choices=DeliveryStatus.choices,
        default=DeliveryStatus.PENDING,
    )
    assigned_at = models.DateTimeField(null=True, blank=True, default=None)
    completed_at = models.DateTimeField(null=True, blank=True, default=None)
    notes = models.TextField(blank=True, default="")

    class Meta:
        db_table = "delivery_jobs"
        ordering = ["created_at"]
        indexes = [
            models.Index(fields=["status", "created_at"], name="djobs_status_idx"),
            models.Index(
                fields=["assigned_agent", "-assigned_at"], name="djobs_agent_idx"
            ),
        ]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(status=DeliveryStatus.CANCELLED)
                | models.Q(status=DeliveryStatus.PENDING, assigned_agent__isnull=True)
                | (
                    ~models.Q(status=DeliveryStatus.PENDING)
                    & models.Q(assigned_agent__isnull=False)
                ),
                name="djobs_agent_iff_claimed",
            ),
            models.UniqueConstraint(
                fields=["order"],
                condition=~models.Q(status=DeliveryStatus.CANCELLED),
                name="djobs_one_live_job_per_order",
            ),
        ]

    @property
    def is_terminal(self) -> bool:
        return self.status in TERMINAL_STATES

    @property
    def pickup(self) -> Address:
        return Address.from_json(self.pickup_address)

    @property
    def destination(self) -> Address:
        return Address.from_json(self.delivery_address)

    def __str__(self) -> str:
        return f"DeliveryJob {self.id} [{self.status}]"
