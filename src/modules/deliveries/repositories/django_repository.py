"""Django ORM implementation of the DeliveryJob repository.

``claim`` and ``transition`` are single ``UPDATE ... WHERE`` statements
on the expected state.  The database serialises concurrent writers on the
row, so exactly one of any number of racing claims reports success and no
application lock is involved.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, List, Optional, Tuple

import structlog
from django.core.exceptions import ValidationError
from django.db import IntegrityError, transaction
from django.db.models import Exists, OuterRef

from modules.core.outbox import drain_domain_events, record_event
from modules.deliveries.constants import DeliveryStatus
from modules.deliveries.events import DeliveryJobCreated
from modules.deliveries.models import DeliveryJob
from modules.deliveries.repositories.interfaces import IDeliveryJobRepository
from modules.orders.constants import OrderStatus, PaymentStatus
from modules.orders.models import Order
from shared.domain.events import DomainEvent

logger = structlog.get_logger(__name__)

OUTBOX_TOPIC = "deliveries"


class DeliveryJobDjangoRepository(IDeliveryJobRepository):
    """Concrete DeliveryJob repository backed by Django ORM."""

    def _queryset(self):
        return DeliveryJob.objects.select_related("order", "assigned_agent")

    # ------------------------------------------------------------------
    # Read
    # ------------------------------------------------------------------

    def get_by_id(self, id: Any) -> Optional[DeliveryJob]:
        try:
            return self._queryset().filter(id=id).first()
        except (ValueError, ValidationError):
            return None

    def list(self, filters: Optional[Dict[str, Any]] = None) -> List[DeliveryJob]:
        queryset = self._queryset()
        if filters:
            queryset = queryset.filter(**filters)
        return list(queryset)

    def exists(self, id: Any) -> bool:
        try:
            return DeliveryJob.objects.filter(id=id).exists()
        except (ValueError, ValidationError):
            return False

    def list_available(self) -> List[DeliveryJob]:
        return list(
            self._queryset()
            .filter(status=DeliveryStatus.PENDING, assigned_agent__isnull=True)
            .order_by("created_at", "id")
        )

    def list_for_agent(self, agent_id: int) -> List[DeliveryJob]:
        return list(
            self._queryset()
            .filter(assigned_agent_id=agent_id)
            .order_by("-assigned_at", "-id")
        )

    def get_live_for_order(self, order_id: Any) -> Optional[DeliveryJob]:
        return (
            self._queryset()
            .filter(order_id=order_id)
            .exclude(status=DeliveryStatus.CANCELLED)
            .first()
        )

    # ------------------------------------------------------------------
    # Write
    # ------------------------------------------------------------------

    @transaction.atomic
    def save(self, entity: DeliveryJob) -> DeliveryJob:
        entity.save()
        drain_domain_events(entity, OUTBOX_TOPIC)
        return entity

    def create_for_order(
        self,
        order_id: Any,
        pickup_address: Dict[str, Any],
        delivery_address: Dict[str, Any],
        source: str = "payment",
    ) -> Tuple[DeliveryJob, bool]:
        try:
            # Savepoint: the partial unique index may reject the insert.
            with transaction.atomic():
                job = DeliveryJob(
                    order_id=order_id,
                    pickup_address=pickup_address,
                    delivery_address=delivery_address,
                    notes="Awaiting claim by delivery agent",
                )
                job.add_domain_event(
                    DeliveryJobCreated(
                        aggregate_id=job.id, order_id=str(order_id), source=source
                    )
                )
                self.save(job)
        except IntegrityError:
            existing = self.get_live_for_order(order_id)
            if existing is None:
                raise
            logger.info(
                "delivery.job_create_race_lost",
                order_id=str(order_id),
                job_id=str(existing.id),
            )
            return existing, False
        return self.get_by_id(job.id) or job, True

    def claim(self, job_id: Any, agent_id: int, claimed_at: datetime) -> bool:
        try:
            updated = DeliveryJob.objects.filter(
                id=job_id,
                status=DeliveryStatus.PENDING,
                assigned_agent__isnull=True,
            ).update(
                status=DeliveryStatus.ASSIGNED,
                assigned_agent_id=agent_id,
                assigned_at=claimed_at,
                updated_at=claimed_at,
            )
        except (ValueError, ValidationError):
            return False
        return updated == 1

    def transition(
        self,
        job_id: Any,
        agent_id: int,
        from_status: str,
        to_status: str,
        at: datetime,
    ) -> bool:
        changes: Dict[str, Any] = {"status": to_status, "updated_at": at}
        if to_status == DeliveryStatus.DELIVERED:
            changes["completed_at"] = at
        updated = DeliveryJob.objects.filter(
            id=job_id,
            status=from_status,
            assigned_agent_id=agent_id,
        ).update(**changes)
        return updated == 1

    def record(self, event: DomainEvent) -> None:
        record_event(event, OUTBOX_TOPIC)

    # ------------------------------------------------------------------
    # Reconciliation
    # ------------------------------------------------------------------

    def orders_missing_job(self, confirmed_before: datetime) -> List[Order]:
        live_jobs = DeliveryJob.objects.filter(order=OuterRef("pk")).exclude(
            status=DeliveryStatus.CANCELLED
        )
        return list(
            Order.objects.select_related("buyer", "seller")
            .filter(
                payment_status=PaymentStatus.COMPLETED,
                status=OrderStatus.CONFIRMED,
                confirmed_at__lte=confirmed_before,
            )
            .exclude(Exists(live_jobs))
            .order_by("confirmed_at")
        )
