"""Asynchronous tasks for the core module (outbox relay)."""

from __future__ import annotations

import structlog
from celery import shared_task
from django.db import transaction

from modules.core.models import EventStatus, OutboxEvent
from shared.domain.events import rehydrate
from shared.infrastructure.bus import event_bus

logger = structlog.get_logger(__name__)

OUTBOX_BATCH_SIZE = 100
OUTBOX_MAX_RETRIES = 5


@shared_task(name="core.publish_outbox_events")
def publish_outbox_events(batch_size: int = OUTBOX_BATCH_SIZE) -> dict:
    """Relay pending (and retryable failed) outbox rows to the event bus.

    Rows are locked with ``SKIP LOCKED`` so concurrent workers never
    publish the same event twice.  Unknown event types are marked failed.
    """
    published = 0
    failed = 0
    with transaction.atomic():
        rows = list(
            OutboxEvent.objects.select_for_update(skip_locked=True)
            .filter(
                status__in=[EventStatus.PENDING, EventStatus.FAILED],
                retry_count__lt=OUTBOX_MAX_RETRIES,
            )
            .order_by("created_at")[:batch_size]
        )
        for row in rows:
            event_class = event_bus.event_class_for(row.event_type)
            if event_class is None:
                row.mark_as_failed(f"No handler registered for {row.event_type}")
                failed += 1
                continue
            try:
                with transaction.atomic():
                    event_bus.publish(rehydrate(event_class, row.payload))
            except Exception as exc:  # handler errors are recorded on the row
                logger.exception(
                    "outbox.publish_failed",
                    outbox_id=str(row.id),
                    event_type=row.event_type,
                )
                row.mark_as_failed(str(exc))
                failed += 1
                continue
            row.mark_as_published()
            published += 1

    logger.info("outbox.relay_completed", published=published, failed=failed)
    return {"published": published, "failed": failed}
