"""Payment-confirmed entry points.

The gateway webhook is unauthenticated and verified by signature; the
manual confirmation endpoint is restricted to admins.  A signal for an
order that is already confirmed is a success for both.
"""

from __future__ import annotations

import json

import structlog
from django.conf import settings
from rest_framework import status
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from modules.accounts.permissions import IsAdminRole
from modules.orders.exceptions import OrderNotFoundError
from modules.payments.constants import PAYSTACK_SIGNATURE_HEADER
from modules.payments.dtos import PaymentConfirmedDTO
from modules.payments.exceptions import AlreadyConfirmedError, InvalidWebhookPayload
from modules.payments.serializers import (
    ManualConfirmationSerializer,
    PaymentConfirmationSerializer,
)
from modules.payments.services import build_confirmation_service
from modules.payments.webhooks import confirmations_from_event, verify_signature

logger = structlog.get_logger(__name__)


class PaystackWebhookView(APIView):
    """POST /api/v1/payments/webhook/paystack/"""

    authentication_classes: list = []
    permission_classes = [AllowAny]
    throttle_classes: list = []

    def post(self, request: Request) -> Response:
        raw_body = request.body
        verify_signature(
            raw_body,
            request.headers.get(PAYSTACK_SIGNATURE_HEADER),
            settings.PAYSTACK_SECRET_KEY,
        )
        try:
            event = json.loads(raw_body or b"{}")
        except ValueError as exc:
            raise InvalidWebhookPayload("Webhook body is not valid JSON.") from exc
        if not isinstance(event, dict):
            raise InvalidWebhookPayload("Webhook body must be a JSON object.")

        signals = confirmations_from_event(event)
        if not signals:
            logger.info("payment.webhook_ignored", webhook_event=event.get("event"))
            return Response({"status": "ignored"})

        service = build_confirmation_service()
        results = {}
        for signal in signals:
            try:
                service.on_payment_confirmed(signal)
                results[str(signal.order_id)] = "confirmed"
            except AlreadyConfirmedError:
                results[str(signal.order_id)] = "already_confirmed"
            except OrderNotFoundError:
                results[str(signal.order_id)] = "not_found"
        logger.info("payment.webhook_processed", results=results)
        return Response({"status": "processed", "results": results})


class ManualConfirmationView(APIView):
    """POST /api/v1/payments/confirm/"""

    permission_classes = [IsAuthenticated, IsAdminRole]

    def post(self, request: Request) -> Response:
        serializer = ManualConfirmationSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        dto = PaymentConfirmedDTO(
            order_id=data["order_id"],
            provider_reference=data["provider_reference"],
            provider=data["provider"],
            amount=data.get("amount"),
            metadata={"confirmed_by": request.user.pk},
        )
        try:
            confirmation = build_confirmation_service().on_payment_confirmed(dto)
        except AlreadyConfirmedError as exc:
            return Response({"status": "already_confirmed", "detail": str(exc)})

        return Response(
            PaymentConfirmationSerializer(confirmation).data,
            status=status.HTTP_201_CREATED,
        )
