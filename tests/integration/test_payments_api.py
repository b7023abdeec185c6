"""HTTP tests for the Paystack webhook and admin confirmation."""

from __future__ import annotations

import json

import pytest
from rest_framework import status

from modules.deliveries.models import DeliveryJob
from modules.notifications.models import Notification
from modules.orders.constants import OrderStatus
from modules.payments.models import Payment
from modules.payments.webhooks import sign

pytestmark = pytest.mark.integration

WEBHOOK_URL = "/api/v1/payments/webhook/paystack/"
CONFIRM_URL = "/api/v1/payments/confirm/"
SECRET = "sk_test_integration"


@pytest.fixture(autouse=True)
def _paystack_secret(settings):
    settings.PAYSTACK_SECRET_KEY = SECRET


def _charge_success(*orders, reference="PSK-REF-0001", amount=500000):
    return {
        "event": "charge.success",
        "data": {
            "reference": reference,
            "amount": amount,
            "currency": "NGN",
            "channel": "card",
            "metadata": {"order_ids": ",".join(str(o.id) for o in orders)},
        },
    }


def _post_webhook(client, event, secret=SECRET, signature=None):
    body = json.dumps(event).encode()
    return client.post(
        WEBHOOK_URL,
        data=body,
        content_type="application/json",
        HTTP_X_PAYSTACK_SIGNATURE=signature if signature is not None else sign(body, secret),
    )


class TestPaystackWebhook:
    def test_signed_charge_confirms_order(self, api_client, admin_user, order):
        response = _post_webhook(api_client, _charge_success(order))

        assert response.status_code == status.HTTP_200_OK
        assert response.json() == {
            "status": "processed",
            "results": {str(order.id): "confirmed"},
        }
        order.refresh_from_db()
        assert order.status == OrderStatus.CONFIRMED
        assert order.payment_provider == "paystack"
        assert DeliveryJob.objects.filter(order=order).count() == 1
        payment = Payment.objects.get(order=order)
        assert str(payment.amount) == "5000.00"
        assert payment.metadata["channel"] == "card"

    def test_bad_signature_is_rejected(self, api_client, order):
        response = _post_webhook(api_client, _charge_success(order), secret="wrong")

        assert response.status_code == status.HTTP_403_FORBIDDEN
        assert response.json()["errors"][0]["code"] == "invalid_signature"
        order.refresh_from_db()
        assert order.status == OrderStatus.PENDING

    def test_missing_signature_is_rejected(self, api_client, order):
        response = _post_webhook(api_client, _charge_success(order), signature="")

        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_redelivery_is_acknowledged(self, api_client, admin_user, order):
        _post_webhook(api_client, _charge_success(order))

        response = _post_webhook(api_client, _charge_success(order))

        assert response.status_code == status.HTTP_200_OK
        assert response.json()["results"] == {str(order.id): "already_confirmed"}
        assert DeliveryJob.objects.filter(order=order).count() == 1
        assert Notification.objects.filter(recipient=admin_user).count() == 1

    def test_one_charge_for_several_orders(self, api_client, admin_user, order, make_order):
        second = make_order()

        response = _post_webhook(api_client, _charge_success(order, second, amount=1000000))

        assert set(response.json()["results"].values()) == {"confirmed"}
        assert DeliveryJob.objects.count() == 2
        amounts = set(Payment.objects.values_list("amount", flat=True))
        assert {str(a) for a in amounts} == {"5000.00"}

    def test_other_events_are_ignored(self, api_client, order):
        response = _post_webhook(api_client, {"event": "transfer.success", "data": {}})

        assert response.json() == {"status": "ignored"}

    def test_malformed_payload_is_400(self, api_client):
        response = _post_webhook(
            api_client, {"event": "charge.success", "data": {"reference": "X"}}
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()["errors"][0]["code"] == "invalid_payload"

    def test_unknown_order_is_reported(self, api_client, order):
        order_id = str(order.id)
        order.delete()

        event = _charge_success(order)
        event["data"]["metadata"]["order_ids"] = order_id
        response = _post_webhook(api_client, event)

        assert response.json()["results"] == {order_id: "not_found"}


class TestManualConfirmation:
    def test_admin_confirms_order(self, client_for, admin_user, order):
        response = client_for(admin_user).post(
            CONFIRM_URL,
            {"order_id": str(order.id), "provider_reference": "BANK-TRF-77"},
            format="json",
        )

        assert response.status_code == status.HTTP_201_CREATED
        body = response.json()
        assert body["order_status"] == OrderStatus.CONFIRMED
        assert body["payment"]["provider"] == "manual"
        assert body["delivery_job_id"] is not None

    def test_second_confirmation_is_200(self, client_for, admin_user, order):
        client = client_for(admin_user)
        payload = {"order_id": str(order.id), "provider_reference": "BANK-TRF-77"}
        client.post(CONFIRM_URL, payload, format="json")

        response = client.post(CONFIRM_URL, payload, format="json")

        assert response.status_code == status.HTTP_200_OK
        assert response.json()["status"] == "already_confirmed"

    def test_only_admins(self, client_for, buyer, order):
        response = client_for(buyer).post(
            CONFIRM_URL,
            {"order_id": str(order.id), "provider_reference": "BANK-TRF-77"},
            format="json",
        )

        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_unknown_order_is_404(self, client_for, admin_user):
        response = client_for(admin_user).post(
            CONFIRM_URL,
            {
                "order_id": "00000000-0000-0000-0000-000000000000",
                "provider_reference": "BANK-TRF-77",
            },
            format="json",
        )

        assert response.status_code == status.HTTP_404_NOT_FOUND
