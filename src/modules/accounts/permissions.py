"""DRF permission classes based on account roles."""

from __future__ import annotations

from rest_framework.permissions import BasePermission

from modules.accounts.constants import Role
from modules.accounts.repositories.django_repository import AccountDjangoRepository


class HasRole(BasePermission):
    """Grant access to authenticated users holding ``required_role``.

    Subclass and set ``required_role``; the services repeat the check for
    operations where the role is part of the contract (claim, advance).
    """

    required_role: str = ""
    message = "You do not have the role required for this action."

    def has_permission(self, request, view) -> bool:
        user = request.user
        if not (user and user.is_authenticated):
            return False
        return AccountDjangoRepository().has_role(user.pk, self.required_role)


class IsAdminRole(HasRole):
    required_role = Role.ADMIN


class IsSellerRole(HasRole):
    required_role = Role.SELLER


class IsDeliveryAgentRole(HasRole):
    required_role = Role.DELIVERY_AGENT
