"""Account repository interface.

Read access to users, their roles and profiles.  The engine never
writes here outside of development seeding.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Iterable, List, Optional

if TYPE_CHECKING:
    from modules.accounts.models import Profile


class IAccountRepository(ABC):
    """Repository contract for users, roles and profiles."""

    @abstractmethod
    def user_exists(self, user_id: int) -> bool:
        """Return ``True`` if an active user with this id exists."""

    @abstractmethod
    def roles_of(self, user_id: int) -> List[str]:
        """Return the role values held by the user."""

    @abstractmethod
    def has_role(self, user_id: int, role: str) -> bool:
        """Check role membership."""

    @abstractmethod
    def user_ids_with_role(self, role: str) -> List[int]:
        """Return the ids of every active user holding *role*."""

    @abstractmethod
    def get_profile(self, user_id: int) -> Optional[Profile]:
        """Retrieve a user's profile, ``None`` if not registered."""

    @abstractmethod
    def assign_roles(self, user_id: int, roles: Iterable[str]) -> None:
        """Grant roles to a user (idempotent)."""
