"""Unit tests for PaymentConfirmationService with mocked collaborators."""

from __future__ import annotations

from datetime import datetime, timezone
from decimal import Decimal
from types import SimpleNamespace
from unittest.mock import MagicMock, sentinel
from uuid import uuid4

import pytest
from django.db import DatabaseError

from modules.notifications.constants import NotificationType
from modules.orders.constants import OrderStatus
from modules.orders.events import OrderStatusChanged
from modules.orders.exceptions import OrderNotFoundError
from modules.orders.models import Order
from modules.orders.repositories.interfaces import IOrderRepository
from modules.payments.dtos import PaymentConfirmedDTO
from modules.payments.events import PaymentConfirmed
from modules.payments.exceptions import AlreadyConfirmedError
from modules.payments.repositories.interfaces import IPaymentRepository
from modules.payments.services import PaymentConfirmationService

pytestmark = pytest.mark.unit

NOW = datetime(2026, 3, 2, 9, 30, tzinfo=timezone.utc)


@pytest.fixture()
def order():
    return Order(
        order_number="ORD-20260302-0A1B2C",
        buyer_id=11,
        seller_id=22,
        total_amount=Decimal("5000.00"),
        currency="NGN",
    )


@pytest.fixture()
def order_repo(order):
    repo = MagicMock(spec=IOrderRepository)
    repo.get_by_id.return_value = order
    repo.confirm_payment.return_value = True
    return repo


@pytest.fixture()
def payment_repo():
    repo = MagicMock(spec=IPaymentRepository)
    repo.create.side_effect = lambda **kwargs: SimpleNamespace(id=uuid4(), **kwargs)
    return repo


@pytest.fixture()
def registry():
    registry = MagicMock()
    registry.create_for_order.return_value = (sentinel.job, True)
    return registry


@pytest.fixture()
def service(order_repo, payment_repo, registry):
    return PaymentConfirmationService(
        order_repository=order_repo,
        payment_repository=payment_repo,
        registry=registry,
        dispatcher=MagicMock(),
        clock=lambda: NOW,
    )


def _signal(order, **overrides):
    data = {"order_id": order.id, "provider_reference": "PSK-REF-0001"}
    data.update(overrides)
    return PaymentConfirmedDTO(**data)


def test_confirms_order_and_creates_job(service, order, order_repo, payment_repo, registry):
    confirmation = service.on_payment_confirmed(_signal(order))

    order_repo.confirm_payment.assert_called_once_with(
        order.id, "paystack", "PSK-REF-0001", NOW
    )
    assert payment_repo.create.call_args.kwargs["amount"] == Decimal("5000.00")
    assert confirmation.job is sentinel.job
    registry.create_for_order.assert_called_once_with(order)
    registry.announce_job.assert_called_once_with(order, sentinel.job)


def test_records_history_and_events(service, order, order_repo, payment_repo):
    service.on_payment_confirmed(_signal(order))

    history = order_repo.add_history.call_args.kwargs
    assert history["old_status"] == OrderStatus.PENDING
    assert history["status"] == OrderStatus.CONFIRMED
    assert isinstance(order_repo.record.call_args.args[0], OrderStatusChanged)
    assert isinstance(payment_repo.record.call_args.args[0], PaymentConfirmed)


def test_notifies_buyer_once(service, order):
    service.on_payment_confirmed(_signal(order))

    service._dispatcher.notify.assert_called_once()
    args, kwargs = service._dispatcher.notify.call_args
    assert args == (11,)
    assert kwargs["type"] == NotificationType.ORDER_STATUS
    assert kwargs["title"] == "Order Payment Confirmed"


def test_unknown_order(service, order_repo):
    order_repo.get_by_id.return_value = None

    with pytest.raises(OrderNotFoundError):
        service.on_payment_confirmed(
            PaymentConfirmedDTO(order_id=uuid4(), provider_reference="PSK-REF-0001")
        )
    order_repo.confirm_payment.assert_not_called()


def test_duplicate_signal_has_no_side_effects(service, order, order_repo, payment_repo, registry):
    order_repo.confirm_payment.return_value = False

    with pytest.raises(AlreadyConfirmedError):
        service.on_payment_confirmed(_signal(order))

    payment_repo.create.assert_not_called()
    registry.create_for_order.assert_not_called()
    service._dispatcher.notify.assert_not_called()


def test_job_made_by_reconciliation_is_not_announced_again(service, order, registry):
    registry.create_for_order.return_value = (sentinel.job, False)

    confirmation = service.on_payment_confirmed(_signal(order))

    assert confirmation.job is sentinel.job
    registry.announce_job.assert_not_called()


def test_job_creation_failure_keeps_confirmation(service, order, registry):
    registry.create_for_order.side_effect = DatabaseError("insert failed")

    confirmation = service.on_payment_confirmed(_signal(order))

    assert confirmation.job is None
    registry.announce_job.assert_not_called()
    service._dispatcher.notify.assert_called_once()


def test_reported_amount_is_recorded_even_on_mismatch(service, order, payment_repo):
    service.on_payment_confirmed(_signal(order, amount=Decimal("4500.00")))

    assert payment_repo.create.call_args.kwargs["amount"] == Decimal("4500.00")


def test_blank_reference_is_rejected():
    with pytest.raises(ValueError):
        PaymentConfirmedDTO(order_id=uuid4(), provider_reference="   ")
