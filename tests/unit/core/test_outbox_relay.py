"""Tests for the transactional outbox rows and the relay task."""

from __future__ import annotations

from decimal import Decimal
from unittest.mock import patch
from uuid import uuid4

import pytest

from modules.core.models import EventStatus, OutboxEvent
from modules.core.outbox import drain_domain_events, record_event
from modules.core.tasks import publish_outbox_events
from modules.orders.events import OrderCreated
from modules.orders.handlers import order_created_handler
from modules.orders.models import Order

pytestmark = pytest.mark.unit


def _order_created() -> OrderCreated:
    return OrderCreated(aggregate_id=uuid4(), buyer_id=1, seller_id=2)


class TestOutboxRows:
    def test_record_event_persists_pending_row(self):
        event = _order_created()

        row = record_event(event, "orders")

        assert row.status == EventStatus.PENDING
        assert row.event_type == "OrderCreated"
        assert row.topic == "orders"
        assert row.aggregate_id == str(event.aggregate_id)
        assert row.payload["buyer_id"] == 1

    def test_drain_clears_the_aggregate_buffer(self):
        order = Order(buyer_id=1, seller_id=2, total_amount=Decimal("10.00"))
        order.add_domain_event(_order_created())
        order.add_domain_event(_order_created())

        rows = drain_domain_events(order, "orders")

        assert len(rows) == 2
        assert order.domain_events == []
        assert OutboxEvent.objects.count() == 2

    def test_mark_as_failed_increments_retry_count(self):
        row = record_event(_order_created(), "orders")

        row.mark_as_failed("boom")
        row.mark_as_failed("boom again")
        row.refresh_from_db()

        assert row.status == EventStatus.FAILED
        assert row.retry_count == 2
        assert row.error_message == "boom again"


class TestRelay:
    def test_publishes_pending_rows(self):
        row = record_event(_order_created(), "orders")

        result = publish_outbox_events()

        row.refresh_from_db()
        assert result == {"published": 1, "failed": 0}
        assert row.status == EventStatus.PUBLISHED
        assert row.processed_at is not None

    def test_unknown_event_type_is_marked_failed(self):
        row = OutboxEvent.objects.create(
            event_type="SomethingElse", payload={}, aggregate_id="x", topic="misc"
        )

        result = publish_outbox_events()

        row.refresh_from_db()
        assert result == {"published": 0, "failed": 1}
        assert row.status == EventStatus.FAILED
        assert "SomethingElse" in row.error_message

    def test_handler_error_is_recorded_on_the_row(self):
        row = record_event(_order_created(), "orders")

        with patch.object(
            order_created_handler, "handle", side_effect=RuntimeError("handler down")
        ):
            result = publish_outbox_events()

        row.refresh_from_db()
        assert result["failed"] == 1
        assert row.status == EventStatus.FAILED
        assert row.error_message == "handler down"

    def test_rows_past_max_retries_are_left_alone(self):
        row = OutboxEvent.objects.create(
            event_type="OrderCreated",
            payload={},
            aggregate_id="x",
            topic="orders",
            status=EventStatus.FAILED,
            retry_count=5,
        )

        result = publish_outbox_events()

        row.refresh_from_db()
        assert result == {"published": 0, "failed": 0}
        assert row.retry_count == 5
