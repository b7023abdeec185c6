"""Event handlers for Payments domain events."""

from __future__ import annotations

import structlog

from modules.payments.events import PaymentConfirmed
from shared.domain.bus import IEventHandler

logger = structlog.get_logger(__name__)


class PaymentConfirmedHandler(IEventHandler[PaymentConfirmed]):
    def handle(self, event: PaymentConfirmed) -> None:
        logger.info(
            f"Processing payment confirmation of order {event.aggregate_id}",
            order_id=str(event.aggregate_id),
            payment_id=event.payment_id,
            provider=event.provider,
        )


payment_confirmed_handler = PaymentConfirmedHandler()
