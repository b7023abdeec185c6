"""Notification domain exceptions."""

from __future__ import annotations

from shared.domain.exceptions import DownstreamFailure, NotFoundError


class UnknownRecipientError(DownstreamFailure):
    """The notification recipient does not exist.

    Never propagated past the dispatcher: a missing recipient must not
    roll back the transition that triggered the notification.
    """

    default_code = "unknown_recipient"


class NotificationNotFound(NotFoundError):
    """No notification with this id belongs to the caller."""

    default_code = "notification_not_found"
