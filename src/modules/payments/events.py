"""Domain events for the Payments bounded context."""

from __future__ import annotations

from dataclasses import dataclass

from shared.domain.events import DomainEvent


@dataclass(frozen=True, kw_only=True)
class PaymentConfirmed(DomainEvent):
    """Raised when an order's payment flips to ``completed``.

    ``aggregate_id`` is the order id.
    """

    payment_id: str
    provider: str
    provider_reference: str
    amount: str
