"""Order service layer (Order Store use cases).

Checkout creates orders; everything after that (payment confirmation,
delivery completion) is driven by the fulfillment services through the
repository's conditional updates.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Dict, List, Optional

import structlog
from django.db import transaction

from modules.orders.constants import OrderStatus
from modules.orders.events import OrderCreated
from modules.orders.exceptions import (
    InvalidCheckout,
    OrderNotFoundError,
    ProductNotFound,
    ProductUnavailable,
)

if TYPE_CHECKING:
    from modules.catalog.repositories.interfaces import IProductRepository
    from modules.orders.dtos import CreateOrderDTO
    from modules.orders.models import Order
    from modules.orders.repositories.interfaces import IOrderRepository

logger = structlog.get_logger(__name__)


class OrderService:
    """Application service for Order use-cases.

    Receives repositories via constructor injection (DIP).
    """

    def __init__(
        self,
        order_repository: IOrderRepository,
        product_repository: IProductRepository,
    ) -> None:
        self._order_repo = order_repository
        self._product_repo = product_repository

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    @transaction.atomic
    def create_order(self, dto: CreateOrderDTO) -> Order:
        """Create a pending order for one product (checkout).

        Raises:
            ProductNotFound: the product does not exist.
            ProductUnavailable: the listing is not active.
            InvalidCheckout: the buyer is the product's seller.
        """
        log = logger.bind(buyer_id=dto.buyer_id, product_id=str(dto.product_id))
        log.info("order.creation_started")

        if dto.idempotency_key:
            existing = self._order_repo.get_by_idempotency_key(dto.idempotency_key)
            if existing:
                log.info(
                    "order.idempotency_hit",
                    order_id=str(existing.id),
                    key=dto.idempotency_key,
                )
                return existing

        product = self._product_repo.get_by_id(str(dto.product_id))
        if not product:
            raise ProductNotFound(f"Product {dto.product_id} not found.")
        if not product.is_purchasable:
            raise ProductUnavailable(f"Product {dto.product_id} is not available.")
        if product.seller_id == dto.buyer_id:
            raise InvalidCheckout("Sellers cannot buy their own products.")

        order = self._order_repo.create(
            {
                "buyer_id": dto.buyer_id,
                "seller_id": product.seller_id,
                "product_id": product.id,
                "quantity": dto.quantity,
                "total_amount": product.price * dto.quantity,
                "currency": product.currency,
                "shipping_address": dto.shipping_address.to_json(),
                "notes": dto.notes or "",
                "idempotency_key": dto.idempotency_key,
            }
        )
        order.add_domain_event(
            OrderCreated(
                aggregate_id=order.id,
                buyer_id=order.buyer_id,
                seller_id=order.seller_id,
            )
        )
        self._order_repo.save(order)
        self._order_repo.add_history(
            order_id=order.id,
            status=OrderStatus.PENDING,
            notes="Order created",
            user_id=dto.buyer_id,
        )

        log.info("order.checkout_completed", order_id=str(order.id))
        return self._order_repo.get_by_id(order.id) or order

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get_order(self, order_id: Any, buyer_id: Optional[int] = None) -> Order:
        """Retrieve a single order, optionally scoped to its buyer.

        Raises:
            OrderNotFoundError: unknown id, or owned by another buyer.
        """
        order = self._order_repo.get_by_id(order_id)
        if not order or (buyer_id is not None and order.buyer_id != buyer_id):
            raise OrderNotFoundError(f"Order {order_id} not found.")
        return order

    def list_orders(self, filters: Optional[Dict[str, Any]] = None) -> List[Order]:
        """Return a list of orders, optionally filtered."""
        return self._order_repo.list(filters)
