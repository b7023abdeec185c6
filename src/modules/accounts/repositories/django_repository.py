"""Django ORM implementation of the account repository.

Follows the Null Object pattern of the other repositories: look-ups
return ``None`` / ``False`` instead of raising, the service layer decides
what a missing user means.
"""

from __future__ import annotations

from typing import Iterable, List, Optional

import structlog
from django.contrib.auth import get_user_model
from django.db import transaction

from modules.accounts.models import Profile, UserRole
from modules.accounts.repositories.interfaces import IAccountRepository

logger = structlog.get_logger(__name__)


class AccountDjangoRepository(IAccountRepository):
    """Concrete account repository backed by Django ORM."""

    def user_exists(self, user_id: int) -> bool:
        User = get_user_model()
        try:
            return User.objects.filter(pk=user_id, is_active=True).exists()
        except (TypeError, ValueError):
            return False

    def roles_of(self, user_id: int) -> List[str]:
        return list(
            UserRole.objects.filter(user_id=user_id)
            .order_by("role")
            .values_list("role", flat=True)
        )

    def has_role(self, user_id: int, role: str) -> bool:
        try:
            return UserRole.objects.filter(
                user_id=user_id, role=role, user__is_active=True
            ).exists()
        except (TypeError, ValueError):
            return False

    def user_ids_with_role(self, role: str) -> List[int]:
        return list(
            UserRole.objects.filter(role=role, user__is_active=True)
            .order_by("user_id")
            .values_list("user_id", flat=True)
        )

    def get_profile(self, user_id: int) -> Optional[Profile]:
        return Profile.objects.select_related("user").filter(user_id=user_id).first()

    @transaction.atomic
    def assign_roles(self, user_id: int, roles: Iterable[str]) -> None:
        for role in roles:
            _, created = UserRole.objects.get_or_create(user_id=user_id, role=role)
            if created:
                logger.info("account.role_assigned", user_id=user_id, role=role)
