"""Helpers shared by repositories that write to the transactional outbox."""

from __future__ import annotations

import json
from dataclasses import asdict
from datetime import datetime
from decimal import Decimal
from typing import Any, Dict, List
from uuid import UUID

from shared.domain.events import DomainEvent, DomainEventMixin

from modules.core.models import OutboxEvent


def drain_domain_events(entity: DomainEventMixin, topic: str) -> List[OutboxEvent]:
    """Persist every pending event of *entity* and clear its buffer.

    Must run inside the transaction that saved the aggregate.
    """
    rows = [record_event(event, topic) for event in entity.domain_events]
    entity.clear_domain_events()
    return rows


def record_event(event: DomainEvent, topic: str) -> OutboxEvent:
    return OutboxEvent.objects.create(
        event_type=event.event_name,
        aggregate_id=str(event.aggregate_id),
        payload=serialize_event_payload(event),
        topic=topic,
    )


def serialize_event_payload(event: Any) -> Dict[str, Any]:
    data = asdict(event)
    data["event_name"] = event.event_name
    normalized = _normalize_for_json(data)
    return json.loads(json.dumps(normalized))


def _normalize_for_json(value: Any) -> Any:
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, UUID):
        return str(value)
    if isinstance(value, Decimal):
        return str(value)
    if isinstance(value, list):
        return [_normalize_for_json(item) for item in value]
    if isinstance(value, dict):
        return {key: _normalize_for_json(val) for key, val in value.items()}
    return value
