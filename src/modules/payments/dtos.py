"""Payment DTOs for the Service Layer."""

from __future__ import annotations

from decimal import Decimal
from typing import Any, Dict, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator

from modules.payments.constants import PAYSTACK


class PaymentConfirmedDTO(BaseModel):
    """The "payment confirmed" signal for one order.

    Produced by the gateway webhook, the admin confirmation endpoint and
    the ``payments.confirm_payment`` task.
    """

    model_config = ConfigDict(frozen=True)

    order_id: UUID
    provider_reference: str
    provider: str = PAYSTACK
    amount: Optional[Decimal] = None
    metadata: Dict[str, Any] = Field(default_factory=dict)

    @field_validator("provider_reference")
    @classmethod
    def reference_must_not_be_blank(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Provider reference cannot be blank.")
        return v
