"""Delivery job states and the fixed transition path.

``pending → assigned → picked_up → in_transit → delivered``.  ``cancelled``
is a valid stored value but nothing in the engine sets it.
"""

from django.db import models


class DeliveryStatus(models.TextChoices):
    PENDING = "pending", "Pending"
    ASSIGNED = "assigned", "Assigned"
    PICKED_UP = "picked_up", "Picked up"
    IN_TRANSIT = "in_transit", "In transit"
    DELIVERED = "delivered", "Delivered"
    CANCELLED = "cancelled", "Cancelled"


NEXT_STATUS: dict[str, str] = {
    DeliveryStatus.PENDING: DeliveryStatus.ASSIGNED,
    DeliveryStatus.ASSIGNED: DeliveryStatus.PICKED_UP,
    DeliveryStatus.PICKED_UP: DeliveryStatus.IN_TRANSIT,
    DeliveryStatus.IN_TRANSIT: DeliveryStatus.DELIVERED,
}

TERMINAL_STATES: set[str] = {DeliveryStatus.DELIVERED, DeliveryStatus.CANCELLED}

# At most one job per order may hold one of these.
LIVE_STATES: set[str] = set(DeliveryStatus.values) - {DeliveryStatus.CANCELLED}

# Buyer-facing notification text per reached status.
BUYER_STATUS_MESSAGES: dict[str, tuple[str, str]] = {
    DeliveryStatus.ASSIGNED: (
        "Delivery agent assigned",
        "A delivery agent has been assigned to your order {order_number}.",
    ),
    DeliveryStatus.PICKED_UP: (
        "Order picked up",
        "Your order {order_number} has been picked up from the seller.",
    ),
    DeliveryStatus.IN_TRANSIT: (
        "Order in transit",
        "Your order {order_number} is on its way.",
    ),
    DeliveryStatus.DELIVERED: (
        "Order delivered",
        "Your order {order_number} has been delivered.",
    ),
}
