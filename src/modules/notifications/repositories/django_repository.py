"""Django ORM implementation of the notification repository."""

from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, List, Optional
from uuid import UUID

from django.core.exceptions import ValidationError
from django.db.models import Q
from django.utils import timezone

from modules.notifications.models import Notification
from modules.notifications.repositories.interfaces import INotificationRepository


class NotificationDjangoRepository(INotificationRepository):
    """Concrete notification repository backed by Django ORM."""

    def create(
        self,
        recipient_id: int,
        type: str,
        title: str,
        message: str,
        payload: Optional[Dict[str, Any]] = None,
    ) -> Notification:
        return Notification.objects.create(
            recipient_id=recipient_id,
            type=type,
            title=title,
            message=message,
            payload=payload or {},
        )

    def get_for_recipient(
        self, notification_id: Any, recipient_id: int
    ) -> Optional[Notification]:
        try:
            return Notification.objects.filter(
                id=notification_id, recipient_id=recipient_id
            ).first()
        except (ValueError, ValidationError):
            return None

    def list_for(self, recipient_id: int) -> List[Notification]:
        return list(
            Notification.objects.filter(recipient_id=recipient_id).order_by(
                "created_at", "id"
            )
        )

    def list_after(
        self, recipient_id: int, created_at: datetime, after_id: UUID
    ) -> List[Notification]:
        return list(
            Notification.objects.filter(recipient_id=recipient_id)
            .filter(
                Q(created_at__gt=created_at)
                | Q(created_at=created_at, id__gt=after_id)
            )
            .order_by("created_at", "id")
        )

    def mark_read(self, notification_id: Any, recipient_id: int) -> int:
        try:
            return Notification.objects.filter(
                id=notification_id, recipient_id=recipient_id
            ).update(read=True, updated_at=timezone.now())
        except (ValueError, ValidationError):
            return 0

    def mark_all_read(self, recipient_id: int) -> int:
        return Notification.objects.filter(
            recipient_id=recipient_id, read=False
        ).update(read=True, updated_at=timezone.now())

    def unread_count(self, recipient_id: int) -> int:
        return Notification.objects.filter(recipient_id=recipient_id, read=False).count()
