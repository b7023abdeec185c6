"""Delivery domain exceptions."""

from __future__ import annotations

from shared.domain.exceptions import ConflictError, NotFoundError


class DeliveryJobNotFound(NotFoundError):
    default_code = "delivery_job_not_found"


class ClaimConflict(ConflictError):
    """Another agent claimed the job first (or it left the pool)."""

    default_code = "claim_conflict"

    def __init__(
        self, message: str = "This job has already been claimed. Please pick another job."
    ) -> None:
        super().__init__(message)


class InvalidTransitionError(ConflictError):
    """The requested status is not the job's immediate successor."""

    default_code = "invalid_transition"


class TerminalStateError(ConflictError):
    """The job is delivered or cancelled and can no longer change."""

    default_code = "terminal_state"

    def __init__(self, message: str = "This delivery is already completed.") -> None:
        super().__init__(message)
