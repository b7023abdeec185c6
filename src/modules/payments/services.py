"""Payment Confirmation Handler.

Turns a "payment confirmed" signal into a confirmed order, a payment
record, a pending delivery job and the buyer/admin notifications.

The order flip is the commit point.  It is a conditional update, so a
redelivered or concurrent signal for the same order finds nothing to
update and is reported as ``AlreadyConfirmedError`` without touching the
job or sending notifications a second time.  Job creation runs in its
own transaction after the flip: when it fails the order stays confirmed
and ``deliveries.reconcile_missing_jobs`` creates the job later.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import TYPE_CHECKING, Callable, Optional, Tuple

import structlog
from django.db import DatabaseError, transaction
from django.utils import timezone

from modules.notifications.constants import NotificationType
from modules.orders.constants import OrderStatus
from modules.orders.events import OrderStatusChanged
from modules.orders.exceptions import OrderNotFoundError
from modules.payments.events import PaymentConfirmed
from modules.payments.exceptions import AlreadyConfirmedError

if TYPE_CHECKING:
    from modules.deliveries.models import DeliveryJob
    from modules.deliveries.services import DeliveryJobRegistry
    from modules.notifications.services import NotificationDispatcher
    from modules.orders.models import Order
    from modules.orders.repositories.interfaces import IOrderRepository
    from modules.payments.dtos import PaymentConfirmedDTO
    from modules.payments.models import Payment
    from modules.payments.repositories.interfaces import IPaymentRepository

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class PaymentConfirmation:
    order: Order
    payment: Payment
    job: Optional[DeliveryJob]


class PaymentConfirmationService:
    def __init__(
        self,
        order_repository: IOrderRepository,
        payment_repository: IPaymentRepository,
        registry: DeliveryJobRegistry,
        dispatcher: NotificationDispatcher,
        clock: Callable[[], datetime] = timezone.now,
    ) -> None:
        self._order_repo = order_repository
        self._payment_repo = payment_repository
        self._registry = registry
        self._dispatcher = dispatcher
        self._clock = clock

    def on_payment_confirmed(self, dto: PaymentConfirmedDTO) -> PaymentConfirmation:
        """Apply a payment-confirmed signal to its order.

        Raises:
            OrderNotFoundError: unknown order id.
            AlreadyConfirmedError: the order is no longer awaiting payment.
        """
        log = logger.bind(
            order_id=str(dto.order_id),
            provider=dto.provider,
            provider_reference=dto.provider_reference,
        )
        order = self._order_repo.get_by_id(dto.order_id)
        if order is None:
            log.warning("payment.order_not_found")
            raise OrderNotFoundError(f"Order {dto.order_id} not found.")

        with transaction.atomic():
            if not self._order_repo.confirm_payment(
                order.id, dto.provider, dto.provider_reference, self._clock()
            ):
                log.info(
                    "payment.already_confirmed",
                    status=order.status,
                    payment_status=order.payment_status,
                )
                raise AlreadyConfirmedError(
                    f"Order {order.order_number} is already confirmed."
                )
            payment = self._payment_repo.create(
                order_id=order.id,
                amount=self._settled_amount(order, dto.amount),
                currency=order.currency,
                provider=dto.provider,
                provider_reference=dto.provider_reference,
                metadata=dto.metadata,
            )
            self._order_repo.add_history(
                order_id=order.id,
                status=OrderStatus.CONFIRMED,
                notes=f"Payment confirmed ({dto.provider} {dto.provider_reference})",
                old_status=OrderStatus.PENDING,
            )
            self._order_repo.record(
                OrderStatusChanged(
                    aggregate_id=order.id,
                    old_status=OrderStatus.PENDING,
                    new_status=OrderStatus.CONFIRMED,
                )
            )
            self._payment_repo.record(
                PaymentConfirmed(
                    aggregate_id=order.id,
                    payment_id=str(payment.id),
                    provider=dto.provider,
                    provider_reference=dto.provider_reference,
                    amount=str(payment.amount),
                )
            )

        log.info("payment.confirmed", payment_id=str(payment.id))
        order = self._order_repo.get_by_id(order.id)

        self._dispatcher.notify(
            order.buyer_id,
            type=NotificationType.ORDER_STATUS,
            title="Order Payment Confirmed",
            message=(
                "Your order will soon be delivered. Delivery agent will claim "
                "and update you with delivery time."
            ),
            payload={"order_id": str(order.id), "status": OrderStatus.CONFIRMED},
        )

        job, created = self._create_job(order)
        if created:
            self._registry.announce_job(order, job)
        return PaymentConfirmation(order=order, payment=payment, job=job)

    def _create_job(self, order: Order) -> Tuple[Optional[DeliveryJob], bool]:
        try:
            with transaction.atomic():
                return self._registry.create_for_order(order)
        except DatabaseError:
            logger.exception("payment.delivery_job_creation_failed", order_id=str(order.id))
            return None, False

    def _settled_amount(self, order: Order, reported: Optional[Decimal]) -> Decimal:
        if reported is None:
            return order.total_amount
        if reported != order.total_amount:
            logger.warning(
                "payment.amount_mismatch",
                order_id=str(order.id),
                expected=str(order.total_amount),
                reported=str(reported),
            )
        return reported


def build_confirmation_service() -> PaymentConfirmationService:
    from modules.deliveries.services import build_registry
    from modules.notifications.services import build_dispatcher
    from modules.orders.repositories.django_repository import OrderDjangoRepository
    from modules.payments.repositories.django_repository import (
        PaymentDjangoRepository,
    )

    return PaymentConfirmationService(
        order_repository=OrderDjangoRepository(),
        payment_repository=PaymentDjangoRepository(),
        registry=build_registry(),
        dispatcher=build_dispatcher(),
    )
