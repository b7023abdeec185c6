"""Read-model repository for the dashboards.

Projections only: nothing here writes.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Dict


class IDashboardRepository(ABC):
    @abstractmethod
    def all_orders(self) -> Any:
        """Every order with buyer, product and current delivery status."""

    @abstractmethod
    def seller_orders(self, seller_id: int) -> Any:
        """Orders placed against the seller's products, newest first."""

    @abstractmethod
    def buyer_orders(self, buyer_id: int) -> Any:
        """The buyer's order history, newest first."""

    @abstractmethod
    def buyer_stats(self, buyer_id: int) -> Dict[str, Any]:
        """Counts per outcome and the value of delivered orders."""
