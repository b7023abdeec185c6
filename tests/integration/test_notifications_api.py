"""HTTP tests for the notification feed, read state and SSE stream."""

from __future__ import annotations

import json

import pytest
from rest_framework import status

from modules.notifications.constants import NotificationType
from modules.notifications.models import Notification

pytestmark = pytest.mark.integration

URL = "/api/v1/notifications/"


@pytest.fixture()
def notes(dispatcher, buyer):
    return [
        dispatcher.notify(
            buyer.pk, type=NotificationType.ORDER_STATUS, title=title, message=title
        )
        for title in ("Order Payment Confirmed", "Delivery agent assigned")
    ]


class TestFeed:
    def test_first_request_returns_full_set(self, client_for, buyer, notes):
        response = client_for(buyer).get(URL)

        assert response.status_code == status.HTTP_200_OK
        body = response.json()
        assert body["reset"] is True
        assert body["unread_count"] == 2
        assert body["cursor"] == str(notes[-1].id)
        assert [n["title"] for n in body["results"]] == [
            "Order Payment Confirmed",
            "Delivery agent assigned",
        ]

    def test_cursor_resumes(self, client_for, buyer, notes):
        response = client_for(buyer).get(URL, {"cursor": str(notes[0].id)})

        body = response.json()
        assert body["reset"] is False
        assert [n["id"] for n in body["results"]] == [str(notes[1].id)]

    def test_feed_is_private(self, client_for, seller, notes):
        body = client_for(seller).get(URL).json()

        assert body["results"] == []
        assert body["unread_count"] == 0


class TestReadState:
    def test_mark_one_read(self, client_for, buyer, notes):
        response = client_for(buyer).post(f"{URL}{notes[0].id}/read/")

        assert response.status_code == status.HTTP_204_NO_CONTENT
        assert Notification.objects.get(id=notes[0].id).read is True
        assert Notification.objects.get(id=notes[1].id).read is False

    def test_cannot_mark_someone_elses(self, client_for, seller, notes):
        response = client_for(seller).post(f"{URL}{notes[0].id}/read/")

        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response.json()["errors"][0]["code"] == "notification_not_found"

    def test_mark_all_read(self, client_for, buyer, notes):
        response = client_for(buyer).post(f"{URL}read-all/")

        assert response.json() == {"marked_read": 2}
        assert not Notification.objects.filter(recipient=buyer, read=False).exists()


class TestStream:
    @pytest.fixture(autouse=True)
    def _short_stream(self, settings):
        settings.NOTIFICATION_STREAM_TIMEOUT_SECONDS = 0
        settings.NOTIFICATION_STREAM_POLL_SECONDS = 0

    @staticmethod
    def _read(response) -> str:
        return b"".join(response.streaming_content).decode()

    def test_stream_starts_with_reset_and_full_set(self, client_for, buyer, notes):
        response = client_for(buyer).get(f"{URL}stream/")

        assert response.status_code == status.HTTP_200_OK
        assert response["Content-Type"] == "text/event-stream"
        assert response["Cache-Control"] == "no-cache"
        content = self._read(response)
        assert content.startswith("event: reset\n")
        assert content.count("event: notification\n") == 2
        assert f"id: {notes[1].id}\n" in content

    def test_last_event_id_resumes(self, client_for, buyer, notes):
        response = client_for(buyer).get(
            f"{URL}stream/", HTTP_LAST_EVENT_ID=str(notes[0].id)
        )

        content = self._read(response)
        assert "event: reset" not in content
        frames = [f for f in content.split("\n\n") if f.startswith("id: ")]
        assert len(frames) == 1
        payload = json.loads(frames[0].split("data: ", 1)[1])
        assert payload["title"] == "Delivery agent assigned"

    def test_idle_resume_sends_keep_alive(self, settings, client_for, buyer, notes):
        settings.NOTIFICATION_CURSOR_OVERLAP_SECONDS = 0
        response = client_for(buyer).get(f"{URL}stream/", {"cursor": str(notes[1].id)})

        assert self._read(response) == ": keep-alive\n\n"

    def test_resume_redelivers_recent_rows_before_the_cursor(
        self, client_for, buyer, notes
    ):
        response = client_for(buyer).get(f"{URL}stream/", {"cursor": str(notes[1].id)})

        content = self._read(response)
        assert "event: reset" not in content
        assert f"id: {notes[0].id}\n" in content
        assert f"id: {notes[1].id}\n" not in content
