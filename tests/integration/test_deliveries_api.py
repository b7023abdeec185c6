"""HTTP tests for the delivery agent endpoints."""

from __future__ import annotations

import pytest
from rest_framework import status

from modules.deliveries.constants import DeliveryStatus
from modules.orders.constants import OrderStatus

pytestmark = pytest.mark.integration

BASE = "/api/v1/deliveries/jobs/"


def _advance(client, job_id, target):
    return client.post(f"{BASE}{job_id}/advance/", {"status": target}, format="json")


class TestPool:
    def test_available_lists_pending_jobs(self, client_for, agent, pending_job, order):
        response = client_for(agent).get(f"{BASE}available/")

        assert response.status_code == status.HTTP_200_OK
        (job,) = response.json()
        assert job["id"] == str(pending_job.id)
        assert job["order_number"] == order.order_number
        assert job["total_amount"] == "5000.00"
        assert job["status"] == DeliveryStatus.PENDING
        assert job["pickup_address"]["city"] == "Ibadan"
        assert job["delivery_address"]["city"] == "Ikeja"

    def test_pool_is_for_delivery_agents_only(self, client_for, buyer, pending_job):
        response = client_for(buyer).get(f"{BASE}available/")

        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_mine_lists_claimed_jobs(self, client_for, agent, other_agent, claimed_job):
        mine = client_for(agent).get(f"{BASE}mine/").json()
        theirs = client_for(other_agent).get(f"{BASE}mine/").json()

        assert [job["id"] for job in mine] == [str(claimed_job.id)]
        assert theirs == []


class TestClaim:
    def test_claim(self, client_for, agent, pending_job):
        response = client_for(agent).post(f"{BASE}{pending_job.id}/claim/")

        assert response.status_code == status.HTTP_200_OK
        body = response.json()
        assert body["status"] == DeliveryStatus.ASSIGNED
        assert body["assigned_agent_id"] == agent.pk

    def test_losing_claim_gets_409_with_message(
        self, client_for, agent, other_agent, pending_job
    ):
        client_for(agent).post(f"{BASE}{pending_job.id}/claim/")

        response = client_for(other_agent).post(f"{BASE}{pending_job.id}/claim/")

        assert response.status_code == status.HTTP_409_CONFLICT
        assert response.json()["errors"][0] == {
            "code": "claim_conflict",
            "detail": "This job has already been claimed. Please pick another job.",
            "attr": None,
        }

    def test_non_agent_claim_is_forbidden(self, client_for, buyer, pending_job):
        response = client_for(buyer).post(f"{BASE}{pending_job.id}/claim/")

        assert response.status_code == status.HTTP_403_FORBIDDEN
        assert response.json()["errors"][0]["code"] == "permission_denied"

    def test_unknown_job_is_404(self, client_for, agent):
        response = client_for(agent).post(f"{BASE}not-a-job/claim/")

        assert response.status_code == status.HTTP_404_NOT_FOUND


class TestAdvance:
    def test_walks_the_path(self, client_for, agent, claimed_job, order):
        client = client_for(agent)

        for target in ("picked_up", "in_transit", "delivered"):
            response = _advance(client, claimed_job.id, target)
            assert response.status_code == status.HTTP_200_OK
            assert response.json()["status"] == target

        assert response.json()["completed_at"] is not None
        order.refresh_from_db()
        assert order.status == OrderStatus.DELIVERED

    def test_skip_is_409(self, client_for, agent, claimed_job):
        response = _advance(client_for(agent), claimed_job.id, "delivered")

        assert response.status_code == status.HTTP_409_CONFLICT
        assert response.json()["errors"][0]["code"] == "invalid_transition"

    def test_unknown_status_is_409(self, client_for, agent, claimed_job):
        response = _advance(client_for(agent), claimed_job.id, "teleported")

        assert response.status_code == status.HTTP_409_CONFLICT

    def test_terminal_job_is_409(self, client_for, agent, claimed_job):
        client = client_for(agent)
        for target in ("picked_up", "in_transit", "delivered"):
            _advance(client, claimed_job.id, target)

        response = _advance(client, claimed_job.id, "picked_up")

        assert response.status_code == status.HTTP_409_CONFLICT
        assert response.json()["errors"][0]["detail"] == "This delivery is already completed."

    def test_terminal_job_rejects_unknown_status(self, client_for, agent, claimed_job):
        client = client_for(agent)
        for target in ("picked_up", "in_transit", "delivered"):
            _advance(client, claimed_job.id, target)

        response = _advance(client, claimed_job.id, "teleported")

        assert response.status_code == status.HTTP_409_CONFLICT
        assert response.json()["errors"][0]["detail"] == "This delivery is already completed."

    def test_foreign_agent_is_403(self, client_for, other_agent, claimed_job):
        response = _advance(client_for(other_agent), claimed_job.id, "picked_up")

        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_missing_status_is_400(self, client_for, agent, claimed_job):
        response = client_for(agent).post(
            f"{BASE}{claimed_job.id}/advance/", {}, format="json"
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()["errors"][0]["attr"] == "status"
