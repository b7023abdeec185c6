"""Django ORM implementation of the Payment repository."""

from __future__ import annotations

from decimal import Decimal
from typing import Any, Dict, List, Optional

import structlog
from django.core.exceptions import ValidationError

from modules.core.outbox import record_event
from modules.payments.models import Payment
from modules.payments.repositories.interfaces import IPaymentRepository
from shared.domain.events import DomainEvent

logger = structlog.get_logger(__name__)

OUTBOX_TOPIC = "payments"


class PaymentDjangoRepository(IPaymentRepository):
    def get_by_id(self, id: Any) -> Optional[Payment]:
        try:
            return Payment.objects.select_related("order").filter(id=id).first()
        except (ValueError, ValidationError):
            return None

    def list(self, filters: Optional[Dict[str, Any]] = None) -> List[Payment]:
        queryset = Payment.objects.select_related("order")
        if filters:
            queryset = queryset.filter(**filters)
        return list(queryset)

    def list_for_order(self, order_id: Any) -> List[Payment]:
        return list(Payment.objects.filter(order_id=order_id).order_by("-created_at"))

    def save(self, entity: Payment) -> Payment:
        entity.save()
        return entity

    def create(
        self,
        order_id: Any,
        amount: Decimal,
        currency: str,
        provider: str,
        provider_reference: str,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> Payment:
        payment = Payment.objects.create(
            order_id=order_id,
            amount=amount,
            currency=currency,
            provider=provider,
            provider_reference=provider_reference,
            metadata=metadata or {},
        )
        logger.info(
            "payment.recorded",
            payment_id=str(payment.id),
            order_id=str(order_id),
            provider=provider,
        )
        return payment

    def record(self, event: DomainEvent) -> None:
        record_event(event, OUTBOX_TOPIC)
