"""Delivery job repositories package."""

from modules.deliveries.repositories.django_repository import (
    DeliveryJobDjangoRepository,
)
from modules.deliveries.repositories.interfaces import IDeliveryJobRepository

__all__ = ["DeliveryJobDjangoRepository", "IDeliveryJobRepository"]
