"""Order domain exceptions.

Raised by the Service Layer when business rules are violated.
The API layer (Views) catches these and translates them into
appropriate HTTP responses.
"""

from __future__ import annotations

from shared.domain.exceptions import ConflictError, DomainError, NotFoundError


class OrderNotFoundError(NotFoundError):
    """The requested order does not exist (or is not visible to the caller)."""

    default_code = "order_not_found"


class InvalidOrderStatus(ConflictError):
    """An order status transition outside the state machine was attempted."""

    default_code = "invalid_order_status"


class ProductNotFound(NotFoundError):
    """The product referenced at checkout does not exist."""

    default_code = "product_not_found"


class ProductUnavailable(DomainError):
    """The product is not an active listing."""

    default_code = "product_unavailable"


class InvalidCheckout(DomainError):
    """The checkout request violates a business rule (e.g. self-purchase)."""

    default_code = "invalid_checkout"
