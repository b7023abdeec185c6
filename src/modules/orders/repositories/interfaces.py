"""Order repository interface.

Extends ``IRepository[Order]`` with the writes the fulfillment engine
performs on the Order Store: conditional status flips plus the audit
trail, and idempotency-key look-up for checkout.

The Service Layer depends exclusively on this contract (DIP).
"""

from __future__ import annotations

from abc import abstractmethod
from datetime import datetime
from typing import TYPE_CHECKING, Any, Dict, List, Optional

from modules.core.repositories.interfaces import IRepository
from shared.domain.events import DomainEvent

if TYPE_CHECKING:
    from modules.orders.models import Order, OrderStatusHistory


class IOrderRepository(IRepository["Order"]):
    """Repository contract for the Order aggregate root."""

    @abstractmethod
    def create(self, data: Dict[str, Any]) -> Order:
        """Create a pending order from checkout data."""

    @abstractmethod
    def get_by_id(self, id: Any) -> Optional[Order]:
        """Retrieve an order with buyer, seller and product loaded."""

    @abstractmethod
    def list(self, filters: Optional[Dict[str, Any]] = None) -> List[Order]:
        """List orders with optional filters."""

    @abstractmethod
    def add_history(
        self,
        order_id: Any,
        status: str,
        notes: str = "",
        old_status: Optional[str] = None,
        user_id: Optional[int] = None,
    ) -> OrderStatusHistory:
        """Record a status change in the order's audit trail."""

    @abstractmethod
    def get_by_idempotency_key(self, key: str) -> Optional[Order]:
        """Retrieve an order by its idempotency key."""

    @abstractmethod
    def confirm_payment(
        self, order_id: Any, provider: str, reference: str, confirmed_at: datetime
    ) -> bool:
        """Flip ``pending/pending`` to ``confirmed/completed``.

        Single conditional update; returns ``False`` when the order was
        not awaiting payment (already confirmed, or unknown).
        """

    @abstractmethod
    def mark_delivered(self, order_id: Any) -> Optional[str]:
        """Flip a paid, non-terminal order to ``delivered``.

        Returns the previous status, or ``None`` if nothing changed.
        """

    @abstractmethod
    def record(self, event: DomainEvent) -> None:
        """Write an outbox event for a change made by a conditional update."""
