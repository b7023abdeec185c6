"""Domain event primitives shared by every bounded context.

Events are immutable dataclasses.  Concrete events declare their own
fields as keyword-only so they can follow the defaulted base fields.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any
from uuid import UUID, uuid4


@dataclass(frozen=True, kw_only=True)
class DomainEvent:
    """Base domain event (immutable)."""

    aggregate_id: UUID
    event_id: UUID = field(default_factory=uuid4)
    occurred_on: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    event_name: str = field(init=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "event_name", self.__class__.__name__)


class DomainEventMixin:
    """Mixin for aggregate roots that collect domain events in memory.

    Events are drained into the transactional outbox by the repository
    that persists the aggregate.
    """

    _domain_events: list[DomainEvent]

    def add_domain_event(self, event: DomainEvent) -> None:
        if not hasattr(self, "_domain_events"):
            self._domain_events = []
        self._domain_events.append(event)

    def clear_domain_events(self) -> None:
        if hasattr(self, "_domain_events"):
            self._domain_events.clear()

    @property
    def domain_events(self) -> list[DomainEvent]:
        if not hasattr(self, "_domain_events"):
            self._domain_events = []
        return list(self._domain_events)


def rehydrate(event_class: type[DomainEvent], payload: dict[str, Any]) -> DomainEvent:
    """Rebuild an event from its JSON outbox payload.

    Only init fields are passed back; ``event_name`` is recomputed.
    """
    data = {key: value for key, value in payload.items() if key != "event_name"}
    data["aggregate_id"] = UUID(str(data["aggregate_id"]))
    if "event_id" in data:
        data["event_id"] = UUID(str(data["event_id"]))
    if isinstance(data.get("occurred_on"), str):
        data["occurred_on"] = datetime.fromisoformat(data["occurred_on"])
    return event_class(**data)
