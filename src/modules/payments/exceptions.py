"""Payment domain exceptions."""

from __future__ import annotations

from shared.domain.exceptions import DomainError, IdempotentNoOp, PermissionDenied


class AlreadyConfirmedError(IdempotentNoOp):
    """The payment-confirmed signal was already applied to this order.

    Gateways redeliver webhooks; callers treat this as success.
    """

    default_code = "already_confirmed"


class InvalidWebhookSignature(PermissionDenied):
    default_code = "invalid_signature"


class InvalidWebhookPayload(DomainError):
    default_code = "invalid_payload"
