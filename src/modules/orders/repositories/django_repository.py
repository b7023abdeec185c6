"""Django ORM implementation of the Order repository.

Satisfies ``IOrderRepository`` using Django's QuerySet API.

Concurrency control on status changes uses conditional ``UPDATE``
statements keyed on the expected current state: concurrent writers
(duplicate payment webhooks, for instance) cannot both succeed, and no
row lock is held across application code.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, List, Optional

import structlog
from django.core.exceptions import ValidationError
from django.db import transaction
from django.utils import timezone

from modules.core.outbox import drain_domain_events, record_event
from modules.orders.constants import DELIVERABLE_STATES, OrderStatus, PaymentStatus
from modules.orders.models import Order, OrderStatusHistory
from modules.orders.repositories.interfaces import IOrderRepository
from shared.domain.events import DomainEvent

logger = structlog.get_logger(__name__)

OUTBOX_TOPIC = "orders"


class OrderDjangoRepository(IOrderRepository):
    """Concrete Order repository backed by Django ORM."""

    # ------------------------------------------------------------------
    # Create
    # ------------------------------------------------------------------

    @transaction.atomic
    def create(self, data: Dict[str, Any]) -> Order:
        """Create a pending order.

        ``data`` keys: ``buyer_id``, ``seller_id``, ``product_id``,
        ``quantity``, ``total_amount``, ``currency``, ``shipping_address``
        and optionally ``notes`` / ``idempotency_key``.
        """
        order = Order(
            buyer_id=data["buyer_id"],
            seller_id=data["seller_id"],
            product_id=data.get("product_id"),
            quantity=data.get("quantity", 1),
            total_amount=data["total_amount"],
            currency=data.get("currency", "NGN"),
            shipping_address=data.get("shipping_address") or {},
            notes=data.get("notes", ""),
            idempotency_key=data.get("idempotency_key"),
        )
        order.save()
        logger.info("order.created", order_id=str(order.id), buyer_id=order.buyer_id)
        return order

    # ------------------------------------------------------------------
    # Read
    # ------------------------------------------------------------------

    def get_by_id(self, id: Any) -> Optional[Order]:
        """Retrieve an order with eager-loaded relations.

        Returns ``None`` for non-existent or invalid IDs.
        """
        try:
            return (
                Order.objects.select_related("buyer", "seller", "product")
                .prefetch_related("status_history")
                .filter(id=id)
                .first()
            )
        except (ValueError, ValidationError):
            return None

    def list(self, filters: Optional[Dict[str, Any]] = None) -> List[Order]:
        """List orders with optional ORM look-ups (``buyer_id``, ``status``...)."""
        queryset = Order.objects.select_related("buyer", "seller", "product")
        if filters:
            queryset = queryset.filter(**filters)
        return list(queryset)

    def get_by_idempotency_key(self, key: str) -> Optional[Order]:
        return (
            Order.objects.select_related("buyer", "seller", "product")
            .filter(idempotency_key=key)
            .first()
        )

    # ------------------------------------------------------------------
    # Save (IRepository contract)
    # ------------------------------------------------------------------

    @transaction.atomic
    def save(self, entity: Order) -> Order:
        """Persist an order and drain its domain events into the outbox."""
        entity.save()
        events = drain_domain_events(entity, OUTBOX_TOPIC)
        logger.info("order.saved", order_id=str(entity.id), event_count=len(events))
        return entity

    # ------------------------------------------------------------------
    # Status changes
    # ------------------------------------------------------------------

    def add_history(
        self,
        order_id: Any,
        status: str,
        notes: str = "",
        old_status: Optional[str] = None,
        user_id: Optional[int] = None,
    ) -> OrderStatusHistory:
        """Record a status change in the order's audit trail."""
        history = OrderStatusHistory.objects.create(
            order_id=order_id,
            old_status=old_status,
            new_status=status,
            notes=notes,
            user_id=user_id,
        )
        logger.info(
            "order.history_added",
            order_id=str(order_id),
            old_status=old_status,
            new_status=status,
        )
        return history

    def confirm_payment(
        self, order_id: Any, provider: str, reference: str, confirmed_at: datetime
    ) -> bool:
        try:
            updated = Order.objects.filter(
                id=order_id,
                payment_status=PaymentStatus.PENDING,
                status=OrderStatus.PENDING,
            ).update(
                payment_status=PaymentStatus.COMPLETED,
                status=OrderStatus.CONFIRMED,
                payment_provider=provider,
                provider_reference=reference,
                confirmed_at=confirmed_at,
                updated_at=confirmed_at,
            )
        except (ValueError, ValidationError):
            return False
        return updated == 1

    def mark_delivered(self, order_id: Any) -> Optional[str]:
        previous = (
            Order.objects.filter(id=order_id).values_list("status", flat=True).first()
        )
        if previous not in DELIVERABLE_STATES:
            return None
        updated = Order.objects.filter(
            id=order_id,
            status=previous,
            payment_status=PaymentStatus.COMPLETED,
        ).update(status=OrderStatus.DELIVERED, updated_at=timezone.now())
        return previous if updated == 1 else None

    def record(self, event: DomainEvent) -> None:
        record_event(event, OUTBOX_TOPIC)
