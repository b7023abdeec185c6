"""Dashboard repositories package."""

from modules.dashboards.repositories.django_repository import DashboardDjangoRepository
from modules.dashboards.repositories.interfaces import IDashboardRepository

__all__ = ["DashboardDjangoRepository", "IDashboardRepository"]
