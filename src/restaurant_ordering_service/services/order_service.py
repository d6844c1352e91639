"""Order service for placing and managing orders."""

import asyncio
import logging

from restaurant_ordering_service.exceptions import (
    InvalidRequestError,
    NotFoundError,
    StoreOperationError,
)
from restaurant_ordering_service.models.order_models import Order, OrderCreate, OrderStatusEnum
from restaurant_ordering_service.observability.decorators import traced
from restaurant_ordering_service.observability.metrics import (
    record_order_placed,
    record_order_status_change,
)
from restaurant_ordering_service.repositories.ordering_repositories import (
    CartRepository,
    OrderRepository,
)

logger = logging.getLogger(__name__)


class OrderService:
    """Service for the order lifecycle.

    Placing an order inserts it and then, when the caller named a session, deletes that
    session's cart. The two writes are independent: an order can exist while its cart
    survives if the second write fails.
    """

    def __init__(self, order_repository: OrderRepository, cart_repository: CartRepository) -> None:
        """Initialize the OrderService.

        Args:
            order_repository: Repository for orders
            cart_repository: Repository for carts, used to clear the ordering session's cart
        """
        self.order_repository = order_repository
        self.cart_repository = cart_repository

    @traced("list_orders")
    async def list_orders(self) -> list[Order]:
        return await asyncio.to_thread(self.order_repository.list_orders)

    @traced("get_order")
    async def get_order(self, order_id: str) -> Order:
        """Get an order by ID.

        Raises:
            NotFoundError: If no order has this ID
        """
        order = await asyncio.to_thread(self.order_repository.get_order, order_id)
        if order is None:
            raise NotFoundError("Order not found")
        return order

    @traced("place_order")
    async def place_order(self, payload: OrderCreate) -> Order:
        """Place a new order.

        The status always starts as pending and the total is stored as submitted.

        Args:
            payload: Order request

        Returns:
            Order: The stored order

        Raises:
            InvalidRequestError: If the order has no items
        """
        if not payload.items:
            raise InvalidRequestError("Order must contain at least one item")

        order = await asyncio.to_thread(self.order_repository.create_order, payload.to_order())
        record_order_placed(len(order.items), float(order.total_price))
        logger.info(f"Placed order {order.id} with {len(order.items)} lines")

        if payload.session_id:
            await self._clear_session_cart(payload.session_id, order.id)

        return order

    async def _clear_session_cart(self, session_id: str, order_id: str) -> None:
        """Delete the cart the order was placed from, logging rather than raising on failure."""
        try:
            await asyncio.to_thread(self.cart_repository.delete_cart, session_id)
        except StoreOperationError as e:
            logger.warning(
                f"Order {order_id} placed but cart for session {session_id} was not cleared: "
                f"{e.details}"
            )

    @traced("update_order_status")
    async def update_status(self, order_id: str, status: OrderStatusEnum) -> Order:
        """Overwrite an order's status. Any status may follow any other.

        Raises:
            NotFoundError: If no order has this ID
        """
        order = await asyncio.to_thread(self.order_repository.update_status, order_id, status)
        if order is None:
            raise NotFoundError("Order not found")

        record_order_status_change(status.value)
        logger.info(f"Order {order_id} status set to {status.value}")
        return order

    @traced("delete_order")
    async def delete_order(self, order_id: str) -> None:
        """Delete an order.

        Raises:
            NotFoundError: If no order has this ID
        """
        if not await asyncio.to_thread(self.order_repository.delete_order, order_id):
            raise NotFoundError("Order not found")
        logger.info(f"Deleted order {order_id}")
