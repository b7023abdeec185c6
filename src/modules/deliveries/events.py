"""Domain events for the Deliveries bounded context."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from shared.domain.events import DomainEvent


@dataclass(frozen=True, kw_only=True)
class DeliveryJobCreated(DomainEvent):
    order_id: str
    source: str = "payment"


@dataclass(frozen=True, kw_only=True)
class DeliveryJobClaimed(DomainEvent):
    order_id: str
    agent_id: int


@dataclass(frozen=True, kw_only=True)
class DeliveryJobAdvanced(DomainEvent):
    order_id: str
    agent_id: int
    old_status: str
    new_status: str
    completed_at: Optional[str] = None
