"""In-memory event bus implementation."""

from __future__ import annotations

from typing import Dict, List, Type

import structlog

from shared.domain.bus import IEventBus, IEventHandler
from shared.domain.events import DomainEvent

logger = structlog.get_logger(__name__)


class InMemoryEventBus(IEventBus):
    """Simple in-process event bus.

    Handlers are keyed by event class; the class is also indexed by name
    so the outbox relay can rebuild events from stored payloads.
    """

    def __init__(self) -> None:
        self._handlers: Dict[Type[DomainEvent], List[IEventHandler]] = {}
        self._classes: Dict[str, Type[DomainEvent]] = {}

    def subscribe(self, event_class: Type[DomainEvent], handler: IEventHandler) -> None:
        self._classes[event_class.__name__] = event_class
        handlers = self._handlers.setdefault(event_class, [])
        if handler not in handlers:
            handlers.append(handler)

    def event_class_for(self, event_name: str) -> Type[DomainEvent] | None:
        return self._classes.get(event_name)

    def publish(self, event: DomainEvent) -> int:
        """Deliver *event* to its handlers, returning how many ran."""
        handlers = self._handlers.get(type(event), [])
        for handler in handlers:
            handler.handle(event)
        logger.debug(
            "event_bus.published", event_name=event.event_name, handlers=len(handlers)
        )
        return len(handlers)


# Global bus instance (singleton)

event_bus = InMemoryEventBus()
