"""Payments URL configuration."""

from __future__ import annotations

from django.urls import path

from modules.payments.views import ManualConfirmationView, PaystackWebhookView

urlpatterns = [
    path(
        "payments/webhook/paystack/",
        PaystackWebhookView.as_view(),
        name="payments-paystack-webhook",
    ),
    path("payments/confirm/", ManualConfirmationView.as_view(), name="payments-confirm"),
]
