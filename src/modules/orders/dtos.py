"""Order DTOs for the Service Layer.

Framework-agnostic data transfer objects using Pydantic v2.
These are the contracts between the API layer (DRF Serializers)
and the Service layer.  DTOs are immutable (``frozen=True``).
"""

from __future__ import annotations

from typing import Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, field_validator

from shared.domain.value_objects import Address


class CreateOrderDTO(BaseModel):
    """Immutable DTO for checkout requests.

    The buyer picks a product and a quantity; seller, price and currency
    are resolved from the catalog by the Service Layer.
    """

    model_config = ConfigDict(frozen=True)

    buyer_id: int
    product_id: UUID
    quantity: int = 1
    shipping_address: Address
    notes: Optional[str] = ""
    idempotency_key: Optional[str] = None

    @field_validator("quantity")
    @classmethod
    def quantity_must_be_positive(cls, v: int) -> int:
        if v < 1:
            raise ValueError("Quantity must be at least 1.")
        return v

    @field_validator("shipping_address")
    @classmethod
    def address_must_be_deliverable(cls, v: Address) -> Address:
        if not v.address or not v.city:
            raise ValueError("Shipping address needs at least a street and a city.")
        return v
