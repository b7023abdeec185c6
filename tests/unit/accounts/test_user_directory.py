"""Unit tests for UserDirectory with a mocked account repository."""

from __future__ import annotations

from unittest.mock import MagicMock

import pytest

from modules.accounts.constants import Role
from modules.accounts.exceptions import PickupAddressUnavailable
from modules.accounts.models import Profile
from modules.accounts.repositories.interfaces import IAccountRepository
from modules.accounts.services import UserDirectory
from shared.domain.exceptions import PermissionDenied

pytestmark = pytest.mark.unit


@pytest.fixture()
def repo():
    return MagicMock(spec=IAccountRepository)


@pytest.fixture()
def directory(repo):
    return UserDirectory(repo)


class TestRequireRole:
    def test_passes_for_role_holder(self, directory, repo):
        repo.has_role.return_value = True

        directory.require_role(7, Role.DELIVERY_AGENT)

        repo.has_role.assert_called_once_with(7, Role.DELIVERY_AGENT)

    def test_raises_permission_denied_otherwise(self, directory, repo):
        repo.has_role.return_value = False

        with pytest.raises(PermissionDenied, match="delivery_agent"):
            directory.require_role(7, Role.DELIVERY_AGENT)


class TestPickupAddress:
    def test_uses_the_seller_profile(self, directory, repo):
        repo.get_profile.return_value = Profile(
            full_name="Adaeze Okafor",
            business_name="Okafor Farms",
            street_address="12 Farm Road",
            location_city="Ibadan",
            location_state="Oyo",
            phone="08031234567",
        )

        address = directory.get_pickup_address(3)

        assert address.full_name == "Okafor Farms"
        assert address.address == "12 Farm Road"
        assert address.city == "Ibadan"
        assert address.phone == "08031234567"

    def test_missing_profile_is_unavailable(self, directory, repo):
        repo.get_profile.return_value = None

        with pytest.raises(PickupAddressUnavailable):
            directory.get_pickup_address(3)

    def test_profile_without_location_is_unavailable(self, directory, repo):
        repo.get_profile.return_value = Profile(full_name="Adaeze Okafor")

        with pytest.raises(PickupAddressUnavailable):
            directory.get_pickup_address(3)


def test_role_queries_delegate_to_repository(directory, repo):
    repo.user_ids_with_role.return_value = [1, 4]
    repo.roles_of.return_value = [Role.BUYER, Role.SELLER]

    assert directory.user_ids_with_role(Role.ADMIN) == [1, 4]
    assert directory.roles_of(2) == [Role.BUYER, Role.SELLER]
