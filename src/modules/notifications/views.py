"""Notification API views.

``list`` is the polling form of the subscription (``?cursor=<last id>``),
``stream`` the Server-Sent-Events form.  Both resume from the client's
cursor and fall back to the full current set when it is unknown.
"""

from __future__ import annotations

import json
from typing import Iterator

from django.core.serializers.json import DjangoJSONEncoder
from django.http import StreamingHttpResponse
from rest_framework import status
from rest_framework.decorators import action
from rest_framework.renderers import JSONRenderer
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.viewsets import ViewSet

from modules.notifications.renderers import EventStreamRenderer
from modules.notifications.repositories.django_repository import (
    NotificationDjangoRepository,
)
from modules.notifications.serializers import FeedPageSerializer, NotificationSerializer
from modules.notifications.services import FeedPage, NotificationFeed


class NotificationViewSet(ViewSet):
    """Per-user notification feed.  Recipients may only mark read."""

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._feed = NotificationFeed(NotificationDjangoRepository())

    def list(self, request: Request) -> Response:
        """GET /api/v1/notifications/?cursor=<id>"""
        page = self._feed.sync(request.user.pk, request.query_params.get("cursor"))
        serializer = FeedPageSerializer(
            {
                "reset": page.reset,
                "cursor": page.cursor,
                "unread_count": self._feed.unread_count(request.user.pk),
                "notifications": page.notifications,
            }
        )
        return Response(serializer.data)

    @action(detail=True, methods=["post"])
    def read(self, request: Request, pk: str | None = None) -> Response:
        """POST /api/v1/notifications/{pk}/read/"""
        self._feed.mark_read(request.user.pk, pk)
        return Response(status=status.HTTP_204_NO_CONTENT)

    @action(detail=False, methods=["post"], url_path="read-all")
    def read_all(self, request: Request) -> Response:
        """POST /api/v1/notifications/read-all/"""
        count = self._feed.mark_all_read(request.user.pk)
        return Response({"marked_read": count})

    @action(
        detail=False,
        methods=["get"],
        renderer_classes=[EventStreamRenderer, JSONRenderer],
    )
    def stream(self, request: Request) -> StreamingHttpResponse:
        """GET /api/v1/notifications/stream/

        Resumes from ``Last-Event-ID`` (set by browsers on reconnect) or
        ``?cursor=``.
        """
        cursor = request.headers.get("Last-Event-ID") or request.query_params.get(
            "cursor"
        )
        pages = self._feed.watch(request.user.pk, cursor)
        response = StreamingHttpResponse(
            _format_event_stream(pages), content_type="text/event-stream"
        )
        response["Cache-Control"] = "no-cache"
        response["X-Accel-Buffering"] = "no"
        return response


def _format_event_stream(pages: Iterator[FeedPage]) -> Iterator[str]:
    for page in pages:
        if page.reset:
            yield "event: reset\ndata: {}\n\n"
        if not page.notifications and not page.reset:
            yield ": keep-alive\n\n"
            continue
        for notification in page.notifications:
            data = json.dumps(NotificationSerializer(notification).data, cls=DjangoJSONEncoder)
            yield f"id: {notification.id}\nevent: notification\ndata: {data}\n\n"
