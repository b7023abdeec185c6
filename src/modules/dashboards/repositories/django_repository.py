"""Django ORM projections for the dashboards.

Querysets are returned unevaluated so the views can filter and paginate
them.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Any, Dict

from django.db.models import Count, DecimalField, OuterRef, Q, QuerySet, Subquery, Sum
from django.db.models.functions import Coalesce

from modules.dashboards.repositories.interfaces import IDashboardRepository
from modules.deliveries.constants import DeliveryStatus
from modules.deliveries.models import DeliveryJob
from modules.orders.constants import OrderStatus
from modules.orders.models import Order


class DashboardDjangoRepository(IDashboardRepository):
    def _orders(self) -> QuerySet:
        live_job = DeliveryJob.objects.filter(order=OuterRef("pk")).exclude(
            status=DeliveryStatus.CANCELLED
        )
        return (
            Order.objects.select_related("buyer__profile", "seller__profile", "product")
            .annotate(
                delivery_job_id=Subquery(live_job.values("id")[:1]),
                delivery_status=Subquery(live_job.values("status")[:1]),
            )
            .order_by("-created_at", "-id")
        )

    def all_orders(self) -> QuerySet:
        return self._orders()

    def seller_orders(self, seller_id: int) -> QuerySet:
        return self._orders().filter(seller_id=seller_id)

    def buyer_orders(self, buyer_id: int) -> QuerySet:
        return self._orders().filter(buyer_id=buyer_id)

    def buyer_stats(self, buyer_id: int) -> Dict[str, Any]:
        zero = Decimal("0.00")
        return Order.objects.filter(buyer_id=buyer_id).aggregate(
            total=Count("id"),
            success=Count("id", filter=Q(status=OrderStatus.DELIVERED)),
            pending=Count("id", filter=Q(status=OrderStatus.PENDING)),
            failed=Count("id", filter=Q(status=OrderStatus.CANCELLED)),
            amount_total=Coalesce(
                Sum("total_amount", filter=Q(status=OrderStatus.DELIVERED)),
                zero,
                output_field=DecimalField(max_digits=14, decimal_places=2),
            ),
        )
