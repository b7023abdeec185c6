"""Account domain exceptions."""

from __future__ import annotations

from shared.domain.exceptions import DownstreamFailure, NotFoundError


class UserNotFound(NotFoundError):
    """The referenced user does not exist."""

    default_code = "user_not_found"


class PickupAddressUnavailable(DownstreamFailure):
    """The seller has no usable registered address."""

    default_code = "pickup_address_unavailable"
