"""User directory: the engine's read-only view of the User/Role store."""

from __future__ import annotations

from typing import TYPE_CHECKING, List

import structlog

from modules.accounts.exceptions import PickupAddressUnavailable
from shared.domain.exceptions import PermissionDenied
from shared.domain.value_objects import Address

if TYPE_CHECKING:
    from modules.accounts.repositories.interfaces import IAccountRepository

logger = structlog.get_logger(__name__)


class UserDirectory:
    """Role checks and address resolution for the fulfillment services."""

    def __init__(self, account_repository: IAccountRepository) -> None:
        self._account_repo = account_repository

    def exists(self, user_id: int) -> bool:
        return self._account_repo.user_exists(user_id)

    def has_role(self, user_id: int, role: str) -> bool:
        return self._account_repo.has_role(user_id, role)

    def roles_of(self, user_id: int) -> List[str]:
        return self._account_repo.roles_of(user_id)

    def require_role(self, user_id: int, role: str) -> None:
        """Capability check performed at the entry of guarded operations.

        Raises:
            PermissionDenied: the user does not hold *role*.
        """
        if not self._account_repo.has_role(user_id, role):
            logger.warning("account.capability_denied", user_id=user_id, role=role)
            raise PermissionDenied(f"User {user_id} does not hold the {role} role.")

    def user_ids_with_role(self, role: str) -> List[int]:
        return self._account_repo.user_ids_with_role(role)

    def get_pickup_address(self, seller_id: int) -> Address:
        """Resolve the seller's registered address.

        Raises:
            PickupAddressUnavailable: no profile, or the profile has no
                street address, city or state.
        """
        profile = self._account_repo.get_profile(seller_id)
        if profile is None:
            raise PickupAddressUnavailable(f"Seller {seller_id} has no profile.")
        address = profile.as_address()
        if not (address.address or address.city or address.state):
            raise PickupAddressUnavailable(
                f"Seller {seller_id} has no registered address."
            )
        return address
