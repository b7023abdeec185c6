"""Delivery job repository interface.

Every state change goes through a conditional write keyed on the state
the caller observed; a ``False`` return means another writer got there
first.
"""

from __future__ import annotations

from abc import abstractmethod
from datetime import datetime
from typing import TYPE_CHECKING, Any, Dict, List, Optional, Tuple

from modules.core.repositories.interfaces import IRepository
from shared.domain.events import DomainEvent

if TYPE_CHECKING:
    from modules.deliveries.models import DeliveryJob
    from modules.orders.models import Order


class IDeliveryJobRepository(IRepository["DeliveryJob"]):
    """Repository contract for the DeliveryJob aggregate."""

    @abstractmethod
    def get_by_id(self, id: Any) -> Optional[DeliveryJob]:
        """Retrieve a job with its order loaded, ``None`` if unknown."""

    @abstractmethod
    def list(self, filters: Optional[Dict[str, Any]] = None) -> List[DeliveryJob]:
        """List jobs with optional filters."""

    @abstractmethod
    def exists(self, id: Any) -> bool:
        """Return ``True`` if a job with this id exists."""

    @abstractmethod
    def list_available(self) -> List[DeliveryJob]:
        """Pending, unassigned jobs, oldest first."""

    @abstractmethod
    def list_for_agent(self, agent_id: int) -> List[DeliveryJob]:
        """Every job ever assigned to the agent, newest first."""

    @abstractmethod
    def get_live_for_order(self, order_id: Any) -> Optional[DeliveryJob]:
        """The order's non-cancelled job, if any."""

    @abstractmethod
    def create_for_order(
        self,
        order_id: Any,
        pickup_address: Dict[str, Any],
        delivery_address: Dict[str, Any],
        source: str = "payment",
    ) -> Tuple[DeliveryJob, bool]:
        """Insert a pending job unless the order already has a live one.

        Returns ``(job, created)``.
        """

    @abstractmethod
    def claim(self, job_id: Any, agent_id: int, claimed_at: datetime) -> bool:
        """``pending`` + no agent → ``assigned`` to *agent_id*."""

    @abstractmethod
    def transition(
        self,
        job_id: Any,
        agent_id: int,
        from_status: str,
        to_status: str,
        at: datetime,
    ) -> bool:
        """Move a job held by *agent_id* from *from_status* to *to_status*."""

    @abstractmethod
    def record(self, event: DomainEvent) -> None:
        """Write an outbox event for a change made by a conditional update."""

    @abstractmethod
    def orders_missing_job(self, confirmed_before: datetime) -> List[Order]:
        """Paid, confirmed orders older than the cutoff with no live job."""
