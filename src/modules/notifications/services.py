"""Notification Dispatcher and the per-user notification feed.

The dispatcher is the single write path for notifications.  Every other
service calls ``notify`` / ``notify_role`` *after* its own state change,
and a failing notification is logged and dropped: the triggering
transition always wins over its side effects.

The feed models a user's live subscription as a resumable cursor (the id
of the last notification the client has seen).  A client that reconnects
with an unknown cursor, or none, receives the full current set first.

``created_at`` is stamped before the insert commits, so a row can become
visible after a later-stamped one was already delivered.  Resuming
therefore re-scans ``overlap`` seconds before the cursor.  Delivery is
at-least-once: clients de-duplicate by id, and ``watch`` never repeats a
row within one stream.
"""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from datetime import timedelta
from typing import (
    TYPE_CHECKING,
    AbstractSet,
    Any,
    Callable,
    Dict,
    Iterator,
    List,
    Optional,
)
from uuid import UUID

import structlog
from django.conf import settings
from django.db import DatabaseError, transaction

from modules.notifications.exceptions import NotificationNotFound, UnknownRecipientError

if TYPE_CHECKING:
    from modules.accounts.services import UserDirectory
    from modules.notifications.models import Notification
    from modules.notifications.repositories.interfaces import INotificationRepository

logger = structlog.get_logger(__name__)


class NotificationDispatcher:
    """Fan-out of user-facing notifications triggered by state transitions."""

    def __init__(
        self,
        notification_repository: INotificationRepository,
        user_directory: UserDirectory,
    ) -> None:
        self._notification_repo = notification_repository
        self._users = user_directory

    def notify(
        self,
        user_id: int,
        type: str,
        title: str,
        message: str,
        payload: Optional[Dict[str, Any]] = None,
    ) -> Optional[Notification]:
        """Append one notification for *user_id*.

        Returns the created record, or ``None`` when the recipient is
        unknown or the write failed.  Never raises for those cases.
        """
        log = logger.bind(recipient_id=user_id, notification_type=type)
        try:
            notification = self._deliver(user_id, type, title, message, payload)
        except UnknownRecipientError:
            log.warning("notification.unknown_recipient")
            return None
        except DatabaseError:
            log.exception("notification.write_failed")
            return None

        log.info("notification.created", notification_id=str(notification.id))
        return notification

    def notify_role(
        self,
        role: str,
        type: str,
        title: str,
        message: str,
        payload: Optional[Dict[str, Any]] = None,
    ) -> List[Notification]:
        """Notify every holder of *role* (e.g. the admin pool)."""
        recipients = self._users.user_ids_with_role(role)
        if not recipients:
            logger.warning("notification.no_recipients", role=role, notification_type=type)

        created = []
        for user_id in recipients:
            notification = self.notify(user_id, type, title, message, payload)
            if notification is not None:
                created.append(notification)
        return created

    def _deliver(
        self,
        user_id: int,
        type: str,
        title: str,
        message: str,
        payload: Optional[Dict[str, Any]],
    ) -> Notification:
        if user_id is None or not self._users.exists(user_id):
            raise UnknownRecipientError(f"Recipient {user_id} does not exist.")
        # Savepoint: a failed insert must not poison the caller's transaction.
        with transaction.atomic():
            return self._notification_repo.create(
                recipient_id=user_id,
                type=type,
                title=title,
                message=message,
                payload=payload,
            )


@dataclass(frozen=True)
class FeedPage:
    """One delivery to a subscriber.

    ``reset`` tells the client to drop its local state and replace it with
    ``notifications``; otherwise they are appended.
    """

    reset: bool
    cursor: Optional[UUID]
    notifications: List[Notification] = field(default_factory=list)


class NotificationFeed:
    """Read side of a user's notification subscription."""

    def __init__(
        self,
        notification_repository: INotificationRepository,
        poll_interval: Optional[float] = None,
        timeout: Optional[float] = None,
        overlap: Optional[float] = None,
        sleep: Callable[[float], None] = time.sleep,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._notification_repo = notification_repository
        self._poll_interval = (
            settings.NOTIFICATION_STREAM_POLL_SECONDS
            if poll_interval is None
            else poll_interval
        )
        self._timeout = (
            settings.NOTIFICATION_STREAM_TIMEOUT_SECONDS if timeout is None else timeout
        )
        self._overlap = timedelta(
            seconds=(
                settings.NOTIFICATION_CURSOR_OVERLAP_SECONDS
                if overlap is None
                else overlap
            )
        )
        self._sleep = sleep
        self._clock = clock

    def sync(
        self,
        user_id: int,
        cursor: Optional[Any] = None,
        seen: AbstractSet[UUID] = frozenset(),
    ) -> FeedPage:
        """Return what the client may be missing since *cursor*.

        Rows in *seen* are left out.  The returned cursor never moves
        back, even when only late rows from the overlap were found.
        """
        anchor = (
            self._notification_repo.get_for_recipient(cursor, user_id)
            if cursor
            else None
        )
        if anchor is None:
            if cursor:
                logger.info("notification.feed_reset", user_id=user_id, cursor=str(cursor))
            items = self._notification_repo.list_for(user_id)
            return FeedPage(
                reset=True,
                cursor=items[-1].id if items else None,
                notifications=items,
            )

        since = anchor.created_at - self._overlap
        items = [
            notification
            for notification in self._notification_repo.list_after(
                user_id, since, anchor.id
            )
            if notification.id != anchor.id and notification.id not in seen
        ]
        newest = max([anchor, *items], key=_feed_position)
        return FeedPage(reset=False, cursor=newest.id, notifications=items)

    def watch(self, user_id: int, cursor: Optional[Any] = None) -> Iterator[FeedPage]:
        """Bounded polling subscription.

        Yields the catch-up page first, then one page per poll (possibly
        empty, which the transport can turn into a keep-alive) until the
        timeout elapses.
        """
        deadline = self._clock() + self._timeout
        seen: set = set()
        page = self.sync(user_id, cursor)
        while True:
            seen.update(notification.id for notification in page.notifications)
            cursor = page.cursor
            yield page
            if self._clock() >= deadline:
                return
            self._sleep(self._poll_interval)
            page = self.sync(user_id, cursor, seen)

    def mark_read(self, user_id: int, notification_id: Any) -> None:
        """Raises ``NotificationNotFound`` unless the caller owns it."""
        if not self._notification_repo.mark_read(notification_id, user_id):
            raise NotificationNotFound(f"Notification {notification_id} not found.")
        logger.info(
            "notification.marked_read",
            user_id=user_id,
            notification_id=str(notification_id),
        )

    def mark_all_read(self, user_id: int) -> int:
        count = self._notification_repo.mark_all_read(user_id)
        logger.info("notification.marked_all_read", user_id=user_id, count=count)
        return count

    def unread_count(self, user_id: int) -> int:
        return self._notification_repo.unread_count(user_id)


def _feed_position(notification: Notification) -> tuple:
    return (notification.created_at, notification.id)


def build_dispatcher() -> NotificationDispatcher:
    """Wire the dispatcher with its Django repositories."""
    from modules.accounts.repositories.django_repository import AccountDjangoRepository
    from modules.accounts.services import UserDirectory
    from modules.notifications.repositories.django_repository import (
        NotificationDjangoRepository,
    )

    return NotificationDispatcher(
        notification_repository=NotificationDjangoRepository(),
        user_directory=UserDirectory(AccountDjangoRepository()),
    )
