"""Event handlers for Deliveries domain events."""

from __future__ import annotations

import structlog

from modules.deliveries.events import (
    DeliveryJobAdvanced,
    DeliveryJobClaimed,
    DeliveryJobCreated,
)
from shared.domain.bus import IEventHandler

logger = structlog.get_logger(__name__)


class DeliveryJobCreatedHandler(IEventHandler[DeliveryJobCreated]):
    def handle(self, event: DeliveryJobCreated) -> None:
        logger.info(
            f"Processing creation of delivery job {event.aggregate_id}",
            job_id=str(event.aggregate_id),
            order_id=event.order_id,
            source=event.source,
        )


class DeliveryJobClaimedHandler(IEventHandler[DeliveryJobClaimed]):
    def handle(self, event: DeliveryJobClaimed) -> None:
        logger.info(
            f"Processing claim of delivery job {event.aggregate_id}",
            job_id=str(event.aggregate_id),
            agent_id=event.agent_id,
        )


class DeliveryJobAdvancedHandler(IEventHandler[DeliveryJobAdvanced]):
    def handle(self, event: DeliveryJobAdvanced) -> None:
        logger.info(
            f"Processing status change of delivery job {event.aggregate_id}",
            job_id=str(event.aggregate_id),
            old_status=event.old_status,
            new_status=event.new_status,
        )


job_created_handler = DeliveryJobCreatedHandler()
job_claimed_handler = DeliveryJobClaimedHandler()
job_advanced_handler = DeliveryJobAdvancedHandler()
