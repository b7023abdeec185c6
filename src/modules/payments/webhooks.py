"""Paystack webhook parsing.

Paystack signs the raw request body with HMAC-SHA512 using the account's
secret key and sends the hex digest in ``X-Paystack-Signature``.  The
order ids travel in the charge metadata, either as a top-level
``order_ids`` string or as a ``custom_fields`` entry of that name
(comma separated in both cases).
"""

from __future__ import annotations

import hashlib
import hmac
from decimal import Decimal
from typing import Any, Dict, List, Optional
from uuid import UUID

import structlog

from modules.payments.constants import (
    MINOR_UNITS_PER_MAJOR,
    PAYSTACK,
    PAYSTACK_CHARGE_SUCCESS,
)
from modules.payments.dtos import PaymentConfirmedDTO
from modules.payments.exceptions import InvalidWebhookPayload, InvalidWebhookSignature

logger = structlog.get_logger(__name__)


def verify_signature(raw_body: bytes, signature: Optional[str], secret: str) -> None:
    if not secret:
        raise InvalidWebhookSignature("Webhook secret is not configured.")
    expected = sign(raw_body, secret)
    if not signature or not hmac.compare_digest(expected, signature.strip().lower()):
        raise InvalidWebhookSignature("Invalid webhook signature.")


def sign(raw_body: bytes, secret: str) -> str:
    return hmac.new(secret.encode("utf-8"), raw_body, hashlib.sha512).hexdigest()


def extract_order_ids(data: Dict[str, Any]) -> List[UUID]:
    metadata = data.get("metadata") or {}
    if not isinstance(metadata, dict):
        return []

    raw = metadata.get("order_ids")
    if not raw:
        for field in metadata.get("custom_fields") or []:
            if isinstance(field, dict) and field.get("variable_name") == "order_ids":
                raw = field.get("value")
                break
    if isinstance(raw, list):
        raw = ",".join(str(item) for item in raw)

    order_ids: List[UUID] = []
    for token in str(raw or "").split(","):
        token = token.strip()
        if not token:
            continue
        try:
            order_id = UUID(token)
        except ValueError:
            logger.warning("payment.webhook_bad_order_id", value=token)
            continue
        if order_id not in order_ids:
            order_ids.append(order_id)
    return order_ids


def confirmations_from_event(event: Dict[str, Any]) -> List[PaymentConfirmedDTO]:
    """One signal per order paid by a ``charge.success`` event.

    Other event types yield nothing.
    """
    if event.get("event") != PAYSTACK_CHARGE_SUCCESS:
        return []
    data = event.get("data")
    if not isinstance(data, dict) or not data.get("reference"):
        raise InvalidWebhookPayload("charge.success event without a reference.")

    order_ids = extract_order_ids(data)
    if not order_ids:
        raise InvalidWebhookPayload("charge.success event without order ids.")

    # The charge amount covers every order; it is only attributed when
    # the charge paid exactly one.
    amount = None
    if len(order_ids) == 1 and data.get("amount") is not None:
        amount = Decimal(str(data["amount"])) / MINOR_UNITS_PER_MAJOR

    metadata = {
        "event": PAYSTACK_CHARGE_SUCCESS,
        "channel": data.get("channel"),
        "paid_at": data.get("paid_at"),
        "charge_amount": data.get("amount"),
        "charge_currency": data.get("currency"),
    }
    return [
        PaymentConfirmedDTO(
            order_id=order_id,
            provider_reference=str(data["reference"]),
            provider=PAYSTACK,
            amount=amount,
            metadata=metadata,
        )
        for order_id in order_ids
    ]
