"""Value objects shared between aggregates.

``Address`` is the structured location stored in
``Order.shipping_address`` and in both address columns of a delivery job.
"""

from __future__ import annotations

from typing import Any, Dict, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field


class Address(BaseModel):
    """Immutable structured address.

    Checkout clients send ``fullName``; both spellings are accepted and
    the snake_case form is what gets persisted.  Unknown keys are dropped.
    """

    model_config = ConfigDict(frozen=True, extra="ignore", populate_by_name=True)

    full_name: str = Field(
        default="", validation_alias=AliasChoices("full_name", "fullName")
    )
    address: str = ""
    city: str = ""
    state: str = ""
    phone: str = ""

    @classmethod
    def from_json(cls, data: Optional[Dict[str, Any]]) -> Address:
        return cls.model_validate(data or {})

    def to_json(self) -> Dict[str, str]:
        return self.model_dump()

    @property
    def is_blank(self) -> bool:
        return not any(self.model_dump().values())

    def __str__(self) -> str:
        parts = [self.address, self.city, self.state]
        return ", ".join(part for part in parts if part) or "N/A"


PLACEHOLDER_PICKUP = Address(address="Seller location")
