"""Dashboards URL configuration."""

from __future__ import annotations

from django.urls import path

from modules.dashboards.views import AdminOrdersView, BuyerStatsView, SellerOrdersView

urlpatterns = [
    path("dashboards/admin/orders/", AdminOrdersView.as_view(), name="dashboard-admin-orders"),
    path(
        "dashboards/seller/orders/",
        SellerOrdersView.as_view(),
        name="dashboard-seller-orders",
    ),
    path("dashboards/buyer/stats/", BuyerStatsView.as_view(), name="dashboard-buyer-stats"),
]
