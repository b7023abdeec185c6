"""Dashboard API views."""

from __future__ import annotations

from django_filters.rest_framework import DjangoFilterBackend
from rest_framework.filters import OrderingFilter, SearchFilter
from rest_framework.generics import GenericAPIView
from rest_framework.permissions import IsAuthenticated
from rest_framework.request import Request
from rest_framework.response import Response

from modules.accounts.permissions import IsAdminRole, IsSellerRole
from modules.core.pagination import StandardResultsSetPagination
from modules.dashboards.repositories.django_repository import DashboardDjangoRepository
from modules.dashboards.serializers import BuyerStatsSerializer, DashboardOrderSerializer
from modules.dashboards.services import DashboardService
from modules.orders.filters import OrderFilter


class _OrderDashboardView(GenericAPIView):
    serializer_class = DashboardOrderSerializer
    pagination_class = StandardResultsSetPagination
    filterset_class = OrderFilter
    filter_backends = [DjangoFilterBackend, SearchFilter, OrderingFilter]
    search_fields = ["order_number", "product__title"]
    ordering_fields = ["created_at", "total_amount", "status"]

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._service = DashboardService(DashboardDjangoRepository())

    def get(self, request: Request) -> Response:
        queryset = self.filter_queryset(self.get_queryset())
        page = self.paginate_queryset(queryset)
        serializer = self.get_serializer(page, many=True)
        return self.get_paginated_response(serializer.data)


class AdminOrdersView(_OrderDashboardView):
    """GET /api/v1/dashboards/admin/orders/"""

    permission_classes = [IsAuthenticated, IsAdminRole]

    def get_queryset(self):
        return self._service.admin_orders()


class SellerOrdersView(_OrderDashboardView):
    """GET /api/v1/dashboards/seller/orders/"""

    permission_classes = [IsAuthenticated, IsSellerRole]

    def get_queryset(self):
        return self._service.seller_orders(self.request.user.pk)


class BuyerStatsView(GenericAPIView):
    """GET /api/v1/dashboards/buyer/stats/

    Outcome counts plus the most recent orders.
    """

    permission_classes = [IsAuthenticated]
    history_limit = 50

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._service = DashboardService(DashboardDjangoRepository())

    def get(self, request: Request) -> Response:
        stats = self._service.buyer_stats(request.user.pk)
        history = self._service.buyer_history(request.user.pk)[: self.history_limit]
        return Response(
            {
                "stats": BuyerStatsSerializer(stats).data,
                "history": DashboardOrderSerializer(history, many=True).data,
            }
        )
