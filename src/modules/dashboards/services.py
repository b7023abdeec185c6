"""Role dashboards (read models).

Admins see every order, sellers the orders for their products, buyers
their own history with outcome counts.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from modules.dashboards.repositories.interfaces import IDashboardRepository


@dataclass(frozen=True)
class BuyerStats:
    total: int
    success: int
    pending: int
    failed: int
    amount_total: Decimal


class DashboardService:
    def __init__(self, dashboard_repository: IDashboardRepository) -> None:
        self._repo = dashboard_repository

    def admin_orders(self) -> Any:
        return self._repo.all_orders()

    def seller_orders(self, seller_id: int) -> Any:
        return self._repo.seller_orders(seller_id)

    def buyer_history(self, buyer_id: int) -> Any:
        return self._repo.buyer_orders(buyer_id)

    def buyer_stats(self, buyer_id: int) -> BuyerStats:
        """``success`` counts delivered orders, ``failed`` cancelled ones.

        ``amount_total`` is the value of delivered orders only.
        """
        return BuyerStats(**self._repo.buyer_stats(buyer_id))
