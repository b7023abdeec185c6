"""Profile and role models (User/Role store).

Authentication itself is Django's ``auth.User``.  This app only stores
what the fulfillment engine reads:

- ``Profile``: display name and registered address.  A seller's address
  becomes the pickup address of their delivery jobs.
- ``UserRole``: role membership, one row per (user, role).
"""

from __future__ import annotations

from django.conf import settings
from django.db import models

from modules.accounts.constants import Role
from modules.core.models import BaseModel
from shared.domain.value_objects import Address


class Profile(BaseModel):
    """Per-user profile, created on registration."""

    user = models.OneToOneField(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="profile",
    )
    full_name = models.CharField(max_length=255, blank=True, default="")
    business_name = models.CharField(max_length=255, blank=True, default="")
    phone = models.CharField(max_length=20, blank=True, default="")
    street_address = models.CharField(max_length=255, blank=True, default="")
    location_city = models.CharField(max_length=100, blank=True, default="")
    location_state = models.CharField(max_length=100, blank=True, default="")

    class Meta:
        db_table = "profiles"

    @property
    def display_name(self) -> str:
        return self.business_name or self.full_name or self.user.get_username()

    def as_address(self) -> Address:
        return Address(
            full_name=self.display_name,
            address=self.street_address,
            city=self.location_city,
            state=self.location_state,
            phone=self.phone,
        )

    def __str__(self) -> str:
        return self.display_name


class UserRole(BaseModel):
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="roles",
    )
    role = models.CharField(max_length=20, choices=Role.choices)

    class Meta:
        db_table = "user_roles"
        constraints = [
            models.UniqueConstraint(
                fields=["user", "role"], name="user_roles_user_role_unique"
            ),
        ]
        indexes = [
            models.Index(fields=["role"], name="user_roles_role_idx"),
        ]

    def __str__(self) -> str:
        return f"{self.user_id}:{self.role}"
