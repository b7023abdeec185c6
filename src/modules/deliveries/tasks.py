"""Celery tasks for the Deliveries context."""

from __future__ import annotations

from typing import Dict, Optional

import structlog
from celery import shared_task

from modules.deliveries.services import build_registry

logger = structlog.get_logger(__name__)


@shared_task(name="deliveries.reconcile_missing_jobs")
def reconcile_missing_jobs(grace_seconds: Optional[int] = None) -> Dict[str, int]:
    """Repair confirmed orders left without a delivery job."""
    repaired = build_registry().reconcile_missing_jobs(grace_seconds)
    if repaired:
        logger.warning("delivery.reconcile_repaired_jobs", count=len(repaired))
    return {"repaired": len(repaired)}
