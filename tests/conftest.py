from __future__ import annotations

from decimal import Decimal
from typing import Iterable

import pytest
from django.contrib.auth import get_user_model
from django.core.cache import cache
from rest_framework.test import APIClient

from modules.accounts.constants import Role
from modules.accounts.models import Profile
from modules.accounts.repositories.django_repository import AccountDjangoRepository
from modules.accounts.services import UserDirectory
from modules.catalog.models import Product, ProductStatus
from modules.deliveries.repositories.django_repository import DeliveryJobDjangoRepository
from modules.deliveries.services import DeliveryJobRegistry, DeliveryStateMachine
from modules.notifications.repositories.django_repository import (
    NotificationDjangoRepository,
)
from modules.notifications.services import NotificationDispatcher
from modules.orders.models import Order
from modules.orders.repositories.django_repository import OrderDjangoRepository
from modules.payments.dtos import PaymentConfirmedDTO
from modules.payments.repositories.django_repository import PaymentDjangoRepository
from modules.payments.services import PaymentConfirmationService

User = get_user_model()


@pytest.fixture(autouse=True)
def _use_db(db):
    """Automatically use the test database for all tests."""


@pytest.fixture(autouse=True)
def _local_cache(settings):
    """Throttling and the health check run against an in-process cache."""
    settings.CACHES = {
        "default": {"BACKEND": "django.core.cache.backends.locmem.LocMemCache"}
    }
    cache.clear()
    yield
    cache.clear()


@pytest.fixture()
def api_client():
    """DRF APIClient for testing API endpoints."""
    return APIClient()


@pytest.fixture()
def api_client_with_correlation(api_client):
    """APIClient pre-configured with a known correlation ID header."""
    cid = "test-correlation-id-fixture"
    api_client.defaults["HTTP_X_REQUEST_ID"] = cid
    return api_client, cid


# ---------------------------------------------------------------------------
# Users and roles
# ---------------------------------------------------------------------------


@pytest.fixture()
def make_user():
    def _make(username: str, roles: Iterable[str] = (), **profile):
        user = User.objects.create_user(username=username, password="testpass123")
        if profile:
            Profile.objects.create(user=user, **profile)
        AccountDjangoRepository().assign_roles(user.pk, roles)
        return user

    return _make


@pytest.fixture()
def admin_user(make_user):
    return make_user("admin", [Role.ADMIN], full_name="Market Admin")


@pytest.fixture()
def seller(make_user):
    return make_user(
        "seller",
        [Role.SELLER],
        full_name="Adaeze Okafor",
        business_name="Okafor Farms",
        street_address="12 Farm Road",
        location_city="Ibadan",
        location_state="Oyo",
    )


@pytest.fixture()
def buyer(make_user):
    return make_user("buyer", [Role.BUYER], full_name="Tunde Bello")


@pytest.fixture()
def agent(make_user):
    return make_user("agent_a", [Role.DELIVERY_AGENT], full_name="Musa Ibrahim")


@pytest.fixture()
def other_agent(make_user):
    return make_user("agent_b", [Role.DELIVERY_AGENT], full_name="Ngozi Eze")


@pytest.fixture()
def client_for():
    def _client(user) -> APIClient:
        client = APIClient()
        client.force_authenticate(user=user)
        return client

    return _client


# ---------------------------------------------------------------------------
# Catalog and orders
# ---------------------------------------------------------------------------


@pytest.fixture()
def product(seller):
    return Product.objects.create(
        seller=seller,
        title="Yam tubers (10)",
        price=Decimal("5000.00"),
        status=ProductStatus.ACTIVE,
    )


@pytest.fixture()
def make_order(buyer, seller, product):
    def _make(**overrides) -> Order:
        data = {
            "buyer": buyer,
            "seller": seller,
            "product": product,
            "quantity": 1,
            "total_amount": Decimal("5000.00"),
            "shipping_address": {
                "full_name": "Tunde Bello",
                "address": "4 Allen Avenue",
                "city": "Ikeja",
                "state": "Lagos",
                "phone": "08029876543",
            },
        }
        data.update(overrides)
        return Order.objects.create(**data)

    return _make


@pytest.fixture()
def order(make_order):
    """Order O1: ₦5,000, awaiting payment."""
    return make_order()


# ---------------------------------------------------------------------------
# Services wired with the Django repositories
# ---------------------------------------------------------------------------


@pytest.fixture()
def user_directory():
    return UserDirectory(AccountDjangoRepository())


@pytest.fixture()
def dispatcher(user_directory):
    return NotificationDispatcher(
        notification_repository=NotificationDjangoRepository(),
        user_directory=user_directory,
    )


@pytest.fixture()
def registry(user_directory, dispatcher):
    return DeliveryJobRegistry(
        job_repository=DeliveryJobDjangoRepository(),
        user_directory=user_directory,
        dispatcher=dispatcher,
    )


@pytest.fixture()
def state_machine(user_directory, dispatcher):
    return DeliveryStateMachine(
        job_repository=DeliveryJobDjangoRepository(),
        order_repository=OrderDjangoRepository(),
        user_directory=user_directory,
        dispatcher=dispatcher,
    )


@pytest.fixture()
def confirmation_service(registry, dispatcher):
    return PaymentConfirmationService(
        order_repository=OrderDjangoRepository(),
        payment_repository=PaymentDjangoRepository(),
        registry=registry,
        dispatcher=dispatcher,
    )


@pytest.fixture()
def confirm(confirmation_service):
    def _confirm(order: Order, reference: str = "PSK-REF-0001"):
        return confirmation_service.on_payment_confirmed(
            PaymentConfirmedDTO(order_id=order.id, provider_reference=reference)
        )

    return _confirm


@pytest.fixture()
def pending_job(admin_user, order, confirm):
    """Job J1 for the confirmed order O1, waiting in the pool."""
    return confirm(order).job


@pytest.fixture()
def claimed_job(pending_job, registry, agent):
    return registry.claim(pending_job.id, agent.pk)
