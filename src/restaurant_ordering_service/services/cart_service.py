"""Cart service for session-scoped shopping carts."""

import asyncio
import logging

from restaurant_ordering_service.models.cart_models import Cart, CartUpdate
from restaurant_ordering_service.observability.decorators import traced
from restaurant_ordering_service.observability.metrics import record_cart_write
from restaurant_ordering_service.repositories.ordering_repositories import CartRepository

logger = logging.getLogger(__name__)


class CartService:
    """Service for reading and replacing carts.

    A cart belongs to whoever knows its session identifier. Reading an unknown session
    creates an empty cart, and writes always replace the full item list.
    """

    def __init__(self, cart_repository: CartRepository) -> None:
        """Initialize the CartService.

        Args:
            cart_repository: Repository for carts
        """
        self.cart_repository = cart_repository

    @traced("get_cart")
    async def get_or_create_cart(self, session_id: str) -> Cart:
        """Return the session's cart, creating an empty one if there is none.

        Args:
            session_id: Client session identifier

        Returns:
            Cart: Existing or newly created cart
        """
        cart = await asyncio.to_thread(self.cart_repository.get_cart, session_id)
        if cart is not None:
            return cart

        logger.info(f"Creating empty cart for session {session_id}")
        return await asyncio.to_thread(self.cart_repository.create_cart, session_id)

    @traced("replace_cart")
    async def replace_items(self, session_id: str, payload: CartUpdate) -> Cart:
        """Replace every item in the session's cart.

        Args:
            session_id: Client session identifier
            payload: The new, complete item list

        Returns:
            Cart: The cart after the write
        """
        cart = await asyncio.to_thread(
            self.cart_repository.replace_items, session_id, payload.items
        )
        record_cart_write("replace")
        return cart

    @traced("clear_cart")
    async def clear_cart(self, session_id: str) -> bool:
        """Delete the session's cart. Clearing a missing cart is not an error.

        Returns:
            bool: True if a cart existed and was deleted
        """
        deleted = await asyncio.to_thread(self.cart_repository.delete_cart, session_id)
        record_cart_write("delete")
        return deleted
