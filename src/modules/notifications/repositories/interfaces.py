"""Notification repository interface."""

from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import datetime
from typing import TYPE_CHECKING, Any, Dict, List, Optional
from uuid import UUID

if TYPE_CHECKING:
    from modules.notifications.models import Notification


class INotificationRepository(ABC):
    """Repository contract for per-recipient notification records."""

    @abstractmethod
    def create(
        self,
        recipient_id: int,
        type: str,
        title: str,
        message: str,
        payload: Optional[Dict[str, Any]] = None,
    ) -> Notification:
        """Append one notification."""

    @abstractmethod
    def get_for_recipient(
        self, notification_id: Any, recipient_id: int
    ) -> Optional[Notification]:
        """Retrieve a notification only if it belongs to *recipient_id*."""

    @abstractmethod
    def list_for(self, recipient_id: int) -> List[Notification]:
        """All notifications of a recipient in creation order."""

    @abstractmethod
    def list_after(
        self, recipient_id: int, created_at: datetime, after_id: UUID
    ) -> List[Notification]:
        """Notifications created strictly after the ``(created_at, id)`` anchor."""

    @abstractmethod
    def mark_read(self, notification_id: Any, recipient_id: int) -> int:
        """Set ``read=True``; returns the number of rows changed."""

    @abstractmethod
    def mark_all_read(self, recipient_id: int) -> int:
        """Mark every unread notification read; returns the count."""

    @abstractmethod
    def unread_count(self, recipient_id: int) -> int:
        """Number of unread notifications."""
