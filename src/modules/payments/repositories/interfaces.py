"""Payment repository interface."""

from __future__ import annotations

from abc import abstractmethod
from decimal import Decimal
from typing import TYPE_CHECKING, Any, Dict, List, Optional

from modules.core.repositories.interfaces import IRepository
from shared.domain.events import DomainEvent

if TYPE_CHECKING:
    from modules.payments.models import Payment


class IPaymentRepository(IRepository["Payment"]):
    @abstractmethod
    def create(
        self,
        order_id: Any,
        amount: Decimal,
        currency: str,
        provider: str,
        provider_reference: str,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> Payment:
        """Record a completed payment for an order."""

    @abstractmethod
    def list_for_order(self, order_id: Any) -> List[Payment]:
        """Payments recorded for an order, newest first."""

    @abstractmethod
    def record(self, event: DomainEvent) -> None:
        """Write an outbox event in the caller's transaction."""
