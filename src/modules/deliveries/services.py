"""Delivery Job Registry and Delivery State Machine.

The registry owns the pool of jobs: creation (from payment confirmation
or reconciliation), the available list, and the claim.  The state machine
walks a claimed job along its fixed path until delivery.

Both services do the capability check first, then one conditional write.
Notifications go out after the write has committed and never undo it.
"""

from __future__ import annotations

from datetime import datetime, timedelta
from typing import TYPE_CHECKING, Any, Callable, List, Optional, Tuple

import structlog
from django.conf import settings
from django.db import DatabaseError, transaction
from django.utils import timezone

from modules.accounts.constants import Role
from modules.accounts.exceptions import PickupAddressUnavailable
from modules.deliveries.constants import (
    BUYER_STATUS_MESSAGES,
    NEXT_STATUS,
    DeliveryStatus,
)
from modules.deliveries.events import DeliveryJobAdvanced, DeliveryJobClaimed
from modules.deliveries.exceptions import (
    ClaimConflict,
    DeliveryJobNotFound,
    InvalidTransitionError,
    TerminalStateError,
)
from modules.notifications.constants import NotificationType
from modules.orders.constants import OrderStatus
from modules.orders.events import OrderDelivered
from shared.domain.exceptions import PermissionDenied
from shared.domain.value_objects import PLACEHOLDER_PICKUP, Address

if TYPE_CHECKING:
    from modules.accounts.services import UserDirectory
    from modules.deliveries.models import DeliveryJob
    from modules.deliveries.repositories.interfaces import IDeliveryJobRepository
    from modules.notifications.services import NotificationDispatcher
    from modules.orders.models import Order
    from modules.orders.repositories.interfaces import IOrderRepository

logger = structlog.get_logger(__name__)


class DeliveryJobRegistry:
    """Pool of delivery jobs and the single-winner claim."""

    def __init__(
        self,
        job_repository: IDeliveryJobRepository,
        user_directory: UserDirectory,
        dispatcher: NotificationDispatcher,
        clock: Callable[[], datetime] = timezone.now,
    ) -> None:
        self._job_repo = job_repository
        self._users = user_directory
        self._dispatcher = dispatcher
        self._clock = clock

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def list_available(self) -> List[DeliveryJob]:
        """Jobs any agent may claim, oldest first."""
        return self._job_repo.list_available()

    def list_for_agent(self, agent_id: int) -> List[DeliveryJob]:
        return self._job_repo.list_for_agent(agent_id)

    # ------------------------------------------------------------------
    # Creation
    # ------------------------------------------------------------------

    def create_for_order(
        self, order: Order, source: str = "payment"
    ) -> Tuple[DeliveryJob, bool]:
        """Return ``(job, created)`` for the order's live job.

        ``created`` is false when another caller already made the job, in
        which case the job must not be announced again.

        The delivery address is copied from the order; the pickup address
        is the seller's registered address, or a placeholder when it
        cannot be resolved.
        """
        existing = self._job_repo.get_live_for_order(order.id)
        if existing is not None:
            logger.info(
                "delivery.job_exists",
                order_id=str(order.id),
                job_id=str(existing.id),
            )
            return existing, False

        job, created = self._job_repo.create_for_order(
            order.id,
            pickup_address=self._resolve_pickup(order.seller_id).to_json(),
            delivery_address=order.address.to_json(),
            source=source,
        )
        if created:
            logger.info(
                "delivery.job_created",
                order_id=str(order.id),
                job_id=str(job.id),
                source=source,
            )
        return job, created

    def announce_job(self, order: Order, job: DeliveryJob) -> None:
        """Tell the admin pool a new job is waiting to be claimed."""
        self._dispatcher.notify_role(
            Role.ADMIN,
            type=NotificationType.DELIVERY_JOB,
            title="New Delivery Job Created",
            message=(
                f"Order {order.order_number} payment confirmed. "
                "Delivery job is now available for claim."
            ),
            payload={"order_id": str(order.id), "job_id": str(job.id)},
        )

    def _resolve_pickup(self, seller_id: int) -> Address:
        try:
            return self._users.get_pickup_address(seller_id)
        except PickupAddressUnavailable as exc:
            logger.warning(
                "delivery.pickup_address_unresolved",
                seller_id=seller_id,
                reason=str(exc),
            )
            return PLACEHOLDER_PICKUP

    # ------------------------------------------------------------------
    # Claim
    # ------------------------------------------------------------------

    def claim(self, job_id: Any, agent_id: int) -> DeliveryJob:
        """Assign a pending job to *agent_id*.

        Raises:
            PermissionDenied: the caller is not a delivery agent.
            DeliveryJobNotFound: no such job.
            ClaimConflict: the job is no longer pending and unassigned.
        """
        log = logger.bind(job_id=str(job_id), agent_id=agent_id)
        self._users.require_role(agent_id, Role.DELIVERY_AGENT)

        with transaction.atomic():
            if not self._job_repo.claim(job_id, agent_id, self._clock()):
                if not self._job_repo.exists(job_id):
                    raise DeliveryJobNotFound(f"Delivery job {job_id} not found.")
                log.info("delivery.claim_conflict")
                raise ClaimConflict()

            job = self._job_repo.get_by_id(job_id)
            self._job_repo.record(
                DeliveryJobClaimed(
                    aggregate_id=job.id,
                    order_id=str(job.order_id),
                    agent_id=agent_id,
                )
            )

        log.info("delivery.claimed", order_id=str(job.order_id))
        _notify_buyer(self._dispatcher, job, DeliveryStatus.ASSIGNED)
        return job

    # ------------------------------------------------------------------
    # Reconciliation
    # ------------------------------------------------------------------

    def reconcile_missing_jobs(
        self, grace_seconds: Optional[int] = None
    ) -> List[DeliveryJob]:
        """Create the job for every confirmed order that lacks one.

        Orders confirmed less than *grace_seconds* ago are skipped so an
        in-flight payment confirmation is not raced.
        """
        if grace_seconds is None:
            grace_seconds = settings.DELIVERY_RECONCILE_GRACE_SECONDS
        cutoff = self._clock() - timedelta(seconds=grace_seconds)

        repaired = []
        for order in self._job_repo.orders_missing_job(cutoff):
            try:
                with transaction.atomic():
                    job, created = self.create_for_order(
                        order, source="reconciliation"
                    )
            except DatabaseError:
                logger.exception("delivery.reconcile_failed", order_id=str(order.id))
                continue
            if not created:
                logger.info(
                    "delivery.reconcile_skipped",
                    order_id=str(order.id),
                    job_id=str(job.id),
                )
                continue
            logger.warning(
                "delivery.job_reconciled", order_id=str(order.id), job_id=str(job.id)
            )
            self.announce_job(order, job)
            repaired.append(job)

        logger.info("delivery.reconcile_completed", repaired=len(repaired))
        return repaired


class DeliveryStateMachine:
    """Moves claimed jobs along ``assigned → picked_up → in_transit → delivered``."""

    def __init__(
        self,
        job_repository: IDeliveryJobRepository,
        order_repository: IOrderRepository,
        user_directory: UserDirectory,
        dispatcher: NotificationDispatcher,
        clock: Callable[[], datetime] = timezone.now,
    ) -> None:
        self._job_repo = job_repository
        self._order_repo = order_repository
        self._users = user_directory
        self._dispatcher = dispatcher
        self._clock = clock

    def advance(self, job_id: Any, agent_id: int, target_status: str) -> DeliveryJob:
        """Move the job one step forward.

        A delivered or cancelled job rejects every request, whatever the
        target.

        Raises:
            PermissionDenied: not a delivery agent, or not this job's agent.
            DeliveryJobNotFound: no such job.
            TerminalStateError: the job is delivered or cancelled.
            InvalidTransitionError: unknown target, unclaimed job, or a
                target that is not the immediate successor.
        """
        log = logger.bind(job_id=str(job_id), agent_id=agent_id, target=target_status)

        self._users.require_role(agent_id, Role.DELIVERY_AGENT)

        job = self._job_repo.get_by_id(job_id)
        if job is None:
            raise DeliveryJobNotFound(f"Delivery job {job_id} not found.")
        if job.is_terminal:
            log.info("delivery.terminal_rejected", status=job.status)
            raise _terminal_error(job.status)
        if target_status not in DeliveryStatus.values:
            raise InvalidTransitionError(f"Unknown delivery status '{target_status}'.")
        if job.status == DeliveryStatus.PENDING:
            raise InvalidTransitionError("This job must be claimed before it can be updated.")
        if job.assigned_agent_id != agent_id:
            log.warning("delivery.not_assigned_agent", assigned_agent_id=job.assigned_agent_id)
            raise PermissionDenied("This job is assigned to another agent.")
        if NEXT_STATUS.get(job.status) != target_status:
            raise InvalidTransitionError(
                f"Cannot move a job from '{job.status}' to '{target_status}'."
            )

        previous = job.status
        now = self._clock()
        with transaction.atomic():
            if not self._job_repo.transition(job.id, agent_id, previous, target_status, now):
                current = self._job_repo.get_by_id(job.id)
                if current is not None and current.is_terminal:
                    raise _terminal_error(current.status)
                raise InvalidTransitionError(
                    f"Job {job.id} changed while it was being updated."
                )
            self._job_repo.record(
                DeliveryJobAdvanced(
                    aggregate_id=job.id,
                    order_id=str(job.order_id),
                    agent_id=agent_id,
                    old_status=previous,
                    new_status=target_status,
                    completed_at=(
                        now.isoformat() if target_status == DeliveryStatus.DELIVERED else None
                    ),
                )
            )
            if target_status == DeliveryStatus.DELIVERED:
                self._complete_order(job, agent_id)

        log.info("delivery.advanced", old_status=previous, new_status=target_status)
        updated = self._job_repo.get_by_id(job.id)
        _notify_buyer(self._dispatcher, updated, target_status)
        return updated

    def _complete_order(self, job: DeliveryJob, agent_id: int) -> None:
        previous = self._order_repo.mark_delivered(job.order_id)
        if previous is None:
            logger.warning("delivery.order_not_completed", order_id=str(job.order_id))
            return
        self._order_repo.add_history(
            order_id=job.order_id,
            status=OrderStatus.DELIVERED,
            notes="Delivery completed",
            old_status=previous,
            user_id=agent_id,
        )
        self._order_repo.record(
            OrderDelivered(aggregate_id=job.order_id, delivery_job_id=str(job.id))
        )


def _terminal_error(status: str) -> TerminalStateError:
    if status == DeliveryStatus.CANCELLED:
        return TerminalStateError("This delivery has been cancelled.")
    return TerminalStateError()


def _notify_buyer(dispatcher: NotificationDispatcher, job: DeliveryJob, status: str) -> None:
    title, template = BUYER_STATUS_MESSAGES[status]
    dispatcher.notify(
        job.order.buyer_id,
        type=NotificationType.ORDER_STATUS,
        title=title,
        message=template.format(order_number=job.order.order_number),
        payload={
            "order_id": str(job.order_id),
            "job_id": str(job.id),
            "status": status,
        },
    )


# ---------------------------------------------------------------------------
# Wiring
# ---------------------------------------------------------------------------


def build_registry() -> DeliveryJobRegistry:
    from modules.accounts.repositories.django_repository import AccountDjangoRepository
    from modules.accounts.services import UserDirectory
    from modules.deliveries.repositories.django_repository import (
        DeliveryJobDjangoRepository,
    )
    from modules.notifications.services import build_dispatcher

    return DeliveryJobRegistry(
        job_repository=DeliveryJobDjangoRepository(),
        user_directory=UserDirectory(AccountDjangoRepository()),
        dispatcher=build_dispatcher(),
    )


def build_state_machine() -> DeliveryStateMachine:
    from modules.accounts.repositories.django_repository import AccountDjangoRepository
    from modules.accounts.services import UserDirectory
    from modules.deliveries.repositories.django_repository import (
        DeliveryJobDjangoRepository,
    )
    from modules.notifications.services import build_dispatcher
    from modules.orders.repositories.django_repository import OrderDjangoRepository

    return DeliveryStateMachine(
        job_repository=DeliveryJobDjangoRepository(),
        order_repository=OrderDjangoRepository(),
        user_directory=UserDirectory(AccountDjangoRepository()),
        dispatcher=build_dispatcher(),
    )
