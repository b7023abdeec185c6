import time
from typing import Any, Dict

import structlog
from django.core.cache import cache
from django.db import DatabaseError, connections
from django.http import HttpRequest, JsonResponse
from django.utils import timezone
from rest_framework.permissions import IsAuthenticated
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from modules.accounts.repositories.django_repository import AccountDjangoRepository
from modules.accounts.services import UserDirectory
from modules.core.models import EventStatus, OutboxEvent

logger = structlog.get_logger(__name__)


def _timed(check) -> Dict[str, Any]:
    start = time.monotonic()
    extra = check() or {}
    return {
        "status": "up",
        "response_time_ms": round((time.monotonic() - start) * 1000, 2),
        **extra,
    }


def _check_database() -> None:
    conn = connections["default"]
    conn.ensure_connection()
    with conn.cursor() as cursor:
        cursor.execute("SELECT 1")
        cursor.fetchone()


def _check_cache() -> None:
    cache.set("_health_check", "ok", 10)
    if cache.get("_health_check") != "ok":
        raise ConnectionError("Cache read failed")


def _check_outbox() -> Dict[str, Any]:
    backlog = OutboxEvent.objects.exclude(status=EventStatus.PUBLISHED).count()
    return {"backlog": backlog}


def health_check(request: HttpRequest) -> JsonResponse:
    """GET /health

    Database and cache must be up; the outbox backlog is informational.
    """
    services: Dict[str, Dict[str, Any]] = {}
    overall_healthy = True

    try:
        services["database"] = _timed(_check_database)
    except DatabaseError:
        services["database"] = {"status": "down"}
        overall_healthy = False
        logger.error("health_check.database_down")

    try:
        services["cache"] = _timed(_check_cache)
    except Exception:
        services["cache"] = {"status": "down"}
        overall_healthy = False
        logger.error("health_check.cache_down")

    if overall_healthy:
        services["outbox"] = _timed(_check_outbox)

    status_label = "healthy" if overall_healthy else "unhealthy"
    logger.info("health_check.completed", status=status_label)

    return JsonResponse(
        {
            "status": status_label,
            "timestamp": timezone.now().isoformat(),
            "services": services,
        },
        status=200 if overall_healthy else 503,
    )


class MeView(APIView):
    """GET /api/v1/me

    The authenticated user with the roles the engine checks.
    """

    permission_classes = [IsAuthenticated]

    def get(self, request: Request) -> Response:
        directory = UserDirectory(AccountDjangoRepository())
        user = request.user
        profile = getattr(user, "profile", None)
        return Response(
            {
                "id": user.pk,
                "username": user.get_username(),
                "roles": directory.roles_of(user.pk),
                "display_name": profile.display_name if profile else user.get_username(),
            }
        )
