"""Notification model.

Append-only from the engine's point of view: rows are created once per
triggering event and only ``read`` changes afterwards, by the recipient.
Rows disappear only through the recipient's deletion (CASCADE).
"""

from __future__ import annotations

from django.conf import settings
from django.core.serializers.json import DjangoJSONEncoder
from django.db import models

from modules.core.models import BaseModel


class Notification(BaseModel):
    recipient = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="notifications",
    )
    title = models.CharField(max_length=255)
    message = models.TextField(blank=True, default="")
    type = models.CharField(max_length=50)
    payload = models.JSONField(default=dict, blank=True, encoder=DjangoJSONEncoder)
    read = models.BooleanField(default=False)

    class Meta:
        db_table = "notifications"
        ordering = ["created_at", "id"]
        indexes = [
            models.Index(
                fields=["recipient", "created_at", "id"],
                name="notifications_feed_idx",
            ),
            models.Index(
                fields=["recipient", "read"],
                name="notifications_unread_idx",
            ),
        ]

    def __str__(self) -> str:
        return f"{self.type} -> {self.recipient_id}: {self.title}"
