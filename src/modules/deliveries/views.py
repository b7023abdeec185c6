"""Delivery agent API.

The pool of available jobs, the agent's own jobs, claim and advance.
Claim and advance repeat the role check inside the services; domain
errors are rendered by the shared exception handler (409 for a lost
claim race, 403 for a foreign job).
"""

from __future__ import annotations

from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.throttling import BaseThrottle
from rest_framework.viewsets import ViewSet

from modules.accounts.permissions import IsDeliveryAgentRole
from modules.deliveries.serializers import AdvanceJobSerializer, DeliveryJobSerializer
from modules.deliveries.services import build_registry, build_state_machine


class DeliveryJobViewSet(ViewSet):
    permission_classes = [IsAuthenticated, IsDeliveryAgentRole]

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._registry = build_registry()
        self._state_machine = build_state_machine()

    def get_permissions(self):
        # Claim and advance perform their own capability check.
        if self.action in {"claim", "advance"}:
            return [IsAuthenticated()]
        return super().get_permissions()

    def get_throttles(self) -> list[BaseThrottle]:
        self.throttle_scope = "delivery_claim" if self.action == "claim" else None
        return super().get_throttles()

    @action(detail=False, methods=["get"])
    def available(self, request: Request) -> Response:
        """GET /api/v1/deliveries/jobs/available/"""
        jobs = self._registry.list_available()
        return Response(DeliveryJobSerializer(jobs, many=True).data)

    @action(detail=False, methods=["get"])
    def mine(self, request: Request) -> Response:
        """GET /api/v1/deliveries/jobs/mine/"""
        jobs = self._registry.list_for_agent(request.user.pk)
        return Response(DeliveryJobSerializer(jobs, many=True).data)

    @action(detail=True, methods=["post"])
    def claim(self, request: Request, pk: str | None = None) -> Response:
        """POST /api/v1/deliveries/jobs/{pk}/claim/"""
        job = self._registry.claim(pk, request.user.pk)
        return Response(DeliveryJobSerializer(job).data)

    @action(detail=True, methods=["post"])
    def advance(self, request: Request, pk: str | None = None) -> Response:
        """POST /api/v1/deliveries/jobs/{pk}/advance/  ``{"status": "picked_up"}``"""
        serializer = AdvanceJobSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        job = self._state_machine.advance(
            pk, request.user.pk, serializer.validated_data["status"]
        )
        return Response(DeliveryJobSerializer(job).data)
