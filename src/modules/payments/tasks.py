"""Celery tasks for the Payments context."""

from __future__ import annotations

from typing import Any, Dict, Optional

import structlog
from celery import shared_task

from modules.orders.exceptions import OrderNotFoundError
from modules.payments.constants import PAYSTACK
from modules.payments.dtos import PaymentConfirmedDTO
from modules.payments.exceptions import AlreadyConfirmedError
from modules.payments.services import build_confirmation_service

logger = structlog.get_logger(__name__)


@shared_task(name="payments.confirm_payment")
def confirm_payment(
    order_id: str,
    provider_reference: str,
    provider: str = PAYSTACK,
    amount: Optional[str] = None,
) -> Dict[str, Any]:
    """Apply a payment-confirmed signal asynchronously.

    Redelivery is safe: an already confirmed order reports
    ``already_confirmed``.
    """
    dto = PaymentConfirmedDTO(
        order_id=order_id,
        provider_reference=provider_reference,
        provider=provider,
        amount=amount,
    )
    try:
        confirmation = build_confirmation_service().on_payment_confirmed(dto)
    except AlreadyConfirmedError:
        return {"order_id": order_id, "status": "already_confirmed"}
    except OrderNotFoundError:
        logger.error("payment.task_order_not_found", order_id=order_id)
        return {"order_id": order_id, "status": "not_found"}

    return {
        "order_id": order_id,
        "status": "confirmed",
        "delivery_job_id": str(confirmation.job.id) if confirmation.job else None,
    }
