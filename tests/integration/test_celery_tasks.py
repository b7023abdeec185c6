"""Celery configuration and the fulfillment tasks run eagerly."""

from __future__ import annotations

from unittest.mock import patch

import pytest
from django.db import DatabaseError

from modules.deliveries.models import DeliveryJob
from modules.deliveries.repositories.django_repository import DeliveryJobDjangoRepository
from modules.deliveries.tasks import reconcile_missing_jobs
from modules.payments.tasks import confirm_payment

pytestmark = pytest.mark.integration


class TestCeleryConfig:
    def test_app_is_exported(self):
        from config import celery_app

        assert celery_app.main == "harvest"

    def test_serializer_is_json(self, settings):
        assert settings.CELERY_TASK_SERIALIZER == "json"
        assert settings.CELERY_ACCEPT_CONTENT == ["json"]
        assert settings.CELERY_TIMEZONE == settings.TIME_ZONE

    def test_beat_schedule_runs_reconciliation_and_relay(self, settings):
        tasks = {entry["task"] for entry in settings.CELERY_BEAT_SCHEDULE.values()}

        assert tasks == {"deliveries.reconcile_missing_jobs", "core.publish_outbox_events"}

    def test_tasks_are_registered_by_name(self):
        from config.celery import app

        app.loader.import_default_modules()
        assert {
            "deliveries.reconcile_missing_jobs",
            "payments.confirm_payment",
            "core.publish_outbox_events",
        } <= set(app.tasks)


class TestConfirmPaymentTask:
    def test_confirms_and_reports_job(self, admin_user, order):
        result = confirm_payment.apply(args=[str(order.id), "PSK-REF-0001"]).get()

        job = DeliveryJob.objects.get(order=order)
        assert result == {
            "order_id": str(order.id),
            "status": "confirmed",
            "delivery_job_id": str(job.id),
        }

    def test_redelivery(self, order):
        confirm_payment.apply(args=[str(order.id), "PSK-REF-0001"]).get()

        result = confirm_payment.apply(args=[str(order.id), "PSK-REF-0001"]).get()

        assert result["status"] == "already_confirmed"

    def test_unknown_order(self):
        order_id = "00000000-0000-0000-0000-000000000000"

        result = confirm_payment.apply(args=[order_id, "PSK-REF-0001"]).get()

        assert result == {"order_id": order_id, "status": "not_found"}


class TestReconcileTask:
    def test_repairs_missing_jobs(self, order):
        with patch.object(
            DeliveryJobDjangoRepository,
            "create_for_order",
            side_effect=DatabaseError("insert failed"),
        ):
            confirm_payment.apply(args=[str(order.id), "PSK-REF-0001"]).get()

        result = reconcile_missing_jobs.apply(kwargs={"grace_seconds": 0}).get()

        assert result == {"repaired": 1}
        assert DeliveryJob.objects.filter(order=order).count() == 1

    def test_nothing_to_do(self):
        assert reconcile_missing_jobs.apply().get() == {"repaired": 0}
