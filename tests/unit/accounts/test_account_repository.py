"""Tests for the Django account repository and role permissions."""

from __future__ import annotations

from types import SimpleNamespace

import pytest

from modules.accounts.constants import Role
from modules.accounts.models import UserRole
from modules.accounts.permissions import IsAdminRole, IsDeliveryAgentRole
from modules.accounts.repositories.django_repository import AccountDjangoRepository

pytestmark = pytest.mark.unit


@pytest.fixture()
def repo():
    return AccountDjangoRepository()


def test_assign_roles_is_idempotent(repo, make_user):
    user = make_user("multi", [Role.SELLER, Role.BUYER])

    repo.assign_roles(user.pk, [Role.SELLER])

    assert UserRole.objects.filter(user=user).count() == 2
    assert repo.roles_of(user.pk) == [Role.BUYER, Role.SELLER]


def test_inactive_users_lose_their_roles(repo, agent):
    agent.is_active = False
    agent.save(update_fields=["is_active"])

    assert not repo.has_role(agent.pk, Role.DELIVERY_AGENT)
    assert agent.pk not in repo.user_ids_with_role(Role.DELIVERY_AGENT)
    assert not repo.user_exists(agent.pk)


def test_lookups_tolerate_garbage_ids(repo):
    assert repo.user_exists("not-a-number") is False
    assert repo.has_role("not-a-number", Role.ADMIN) is False


def test_role_permission_classes(agent):
    request = SimpleNamespace(user=agent)

    assert IsDeliveryAgentRole().has_permission(request, None)
    assert not IsAdminRole().has_permission(request, None)
