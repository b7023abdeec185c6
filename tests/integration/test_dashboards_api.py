"""HTTP tests for the admin, seller and buyer dashboards."""

from __future__ import annotations

from decimal import Decimal

import pytest
from rest_framework import status

from modules.orders.constants import OrderStatus

pytestmark = pytest.mark.integration


class TestAdminOrders:
    URL = "/api/v1/dashboards/admin/orders/"

    def test_lists_every_order_with_job_status(self, client_for, admin_user, pending_job, make_order):
        make_order()

        response = client_for(admin_user).get(self.URL)

        assert response.status_code == status.HTTP_200_OK
        body = response.json()
        assert body["count"] == 2
        by_id = {row["id"]: row for row in body["results"]}
        paid = by_id[str(pending_job.order_id)]
        assert paid["delivery_status"] == "pending"
        assert paid["delivery_job_id"] == str(pending_job.id)
        assert paid["buyer_name"] == "Tunde Bello"
        assert paid["seller_name"] == "Okafor Farms"

    def test_filter_by_payment_status(self, client_for, admin_user, pending_job, make_order):
        make_order()

        body = client_for(admin_user).get(self.URL, {"payment_status": "completed"}).json()

        assert [row["id"] for row in body["results"]] == [str(pending_job.order_id)]

    def test_admins_only(self, client_for, buyer):
        assert client_for(buyer).get(self.URL).status_code == status.HTTP_403_FORBIDDEN


class TestSellerOrders:
    URL = "/api/v1/dashboards/seller/orders/"

    def test_lists_only_own_sales(self, client_for, seller, order, make_user, make_order):
        other_seller = make_user("other_seller", ["seller"])
        make_order(seller=other_seller)

        body = client_for(seller).get(self.URL).json()

        assert [row["id"] for row in body["results"]] == [str(order.id)]
        assert body["results"][0]["delivery_status"] is None

    def test_sellers_only(self, client_for, agent):
        assert client_for(agent).get(self.URL).status_code == status.HTTP_403_FORBIDDEN


class TestBuyerStats:
    URL = "/api/v1/dashboards/buyer/stats/"

    def test_counts_outcomes(self, client_for, buyer, make_order):
        make_order()
        make_order(status=OrderStatus.CANCELLED)
        make_order(
            status=OrderStatus.DELIVERED,
            payment_status="completed",
            total_amount=Decimal("7500.00"),
        )

        body = client_for(buyer).get(self.URL).json()

        assert body["stats"] == {
            "total": 3,
            "success": 1,
            "pending": 1,
            "failed": 1,
            "amount_total": "7500.00",
        }
        assert len(body["history"]) == 3

    def test_empty_history(self, client_for, make_user):
        newcomer = make_user("newcomer", ["buyer"])

        body = client_for(newcomer).get(self.URL).json()

        assert body["stats"]["total"] == 0
        assert body["stats"]["amount_total"] == "0.00"
        assert body["history"] == []
