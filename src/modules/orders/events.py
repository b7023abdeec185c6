"""Domain events for the Orders bounded context."""

from __future__ import annotations

from dataclasses import dataclass

from shared.domain.events import DomainEvent


@dataclass(frozen=True, kw_only=True)
class OrderCreated(DomainEvent):
    """Raised when checkout creates an order."""

    buyer_id: int
    seller_id: int


@dataclass(frozen=True, kw_only=True)
class OrderStatusChanged(DomainEvent):
    """Raised when an order status changes."""

    old_status: str
    new_status: str


@dataclass(frozen=True, kw_only=True)
class OrderDelivered(DomainEvent):
    """Raised when delivery completion flips the order to ``delivered``."""

    delivery_job_id: str
