"""Local cart state kept in step with the server-side cart.

Every mutation updates local state at once and then pushes the whole item list to the
server in the background. A failed push is only logged, so local and server state can
differ until the next successful push.
"""

import asyncio
import logging
from decimal import Decimal
from typing import Any

from restaurant_ordering_service.client.ordering_client import MenuEntry, OrderingApiClient
from restaurant_ordering_service.models.common_models import ItemSnapshot

logger = logging.getLogger(__name__)

FALLBACK_MENU = [
    MenuEntry(
        _id="1",
        name="Double-Double Burger",
        description="Two beef patties, two slices of cheese, fresh lettuce & tomato",
        price=Decimal("5.99"),
    ),
    MenuEntry(
        _id="2",
        name="Cheeseburger",
        description="Classic single patty burger with melted cheese",
        price=Decimal("3.99"),
    ),
    MenuEntry(
        _id="3",
        name="French Fries",
        description="Golden, crispy fries made fresh",
        price=Decimal("2.49"),
    ),
    MenuEntry(
        _id="4",
        name="Shakes",
        description="Chocolate, Strawberry, or Vanilla made with real ice cream",
        price=Decimal("2.99"),
    ),
]

GUEST_CUSTOMER = {
    "name": "Guest Customer",
    "email": "guest@example.com",
    "phone": "555-0000",
}

MENU_UNAVAILABLE_MESSAGE = "Failed to load menu. Please try again later."
CHECKOUT_FAILED_MESSAGE = "Failed to place order. Please try again."


class CheckoutError(Exception):
    """Raised when an order could not be placed. The cart is left untouched."""


class CartSession:
    """Cart for one session, mirrored to the server on every change.

    Mutating methods schedule background pushes on the running event loop, so they
    must be called from async code. Use flush() to wait for pending pushes.
    """

    def __init__(self, api_client: OrderingApiClient, session_id: str) -> None:
        """Initialize the session.

        Args:
            api_client: Client for the ordering API
            session_id: Durable session identifier
        """
        self.api_client = api_client
        self.session_id = session_id
        self.items: list[ItemSnapshot] = []
        self.menu: list[MenuEntry] = []
        self.menu_error: str | None = None
        self._pending: set[asyncio.Task[bool]] = set()

    @property
    def total_items(self) -> int:
        return sum(line.quantity for line in self.items)

    @property
    def total_price(self) -> Decimal:
        return sum((line.price * line.quantity for line in self.items), Decimal("0"))

    async def load(self) -> None:
        """Fetch the menu and the server-side cart."""
        await asyncio.gather(self.load_menu(), self.load_cart())

    async def load_menu(self) -> list[MenuEntry]:
        """Fetch the menu, substituting the built-in menu if the fetch fails."""
        menu = await self.api_client.get_menu()
        if menu is None:
            self.menu_error = MENU_UNAVAILABLE_MESSAGE
            self.menu = list(FALLBACK_MENU)
        else:
            self.menu_error = None
            self.menu = menu
        return self.menu

    async def load_cart(self) -> list[ItemSnapshot]:
        """Replace local items with the server's cart. Local items are kept on failure."""
        items = await self.api_client.get_cart(self.session_id)
        if items is not None:
            self.items = items
        return self.items

    def add_item(self, entry: MenuEntry | ItemSnapshot) -> None:
        """Add one unit of an item, merging with an existing line of the same name."""
        for index, line in enumerate(self.items):
            if line.name == entry.name:
                self.items[index] = line.model_copy(update={"quantity": line.quantity + 1})
                break
        else:
            self.items.append(ItemSnapshot(name=entry.name, price=entry.price, quantity=1))

        self._push()

    def update_quantity(self, name: str, change: int) -> None:
        """Change a line's quantity by a delta, dropping it when it reaches zero."""
        updated = []
        for line in self.items:
            if line.name != name:
                updated.append(line)
                continue
            quantity = max(0, line.quantity + change)
            if quantity > 0:
                updated.append(line.model_copy(update={"quantity": quantity}))

        self.items = updated
        self._push()

    def remove_item(self, name: str) -> None:
        self.items = [line for line in self.items if line.name != name]
        self._push()

    async def clear(self) -> None:
        """Empty the cart locally and delete it on the server. Server failures are logged."""
        self.items = []
        if not await self.api_client.clear_cart(self.session_id):
            logger.warning(f"Cart for session {self.session_id} was cleared locally only")

    async def checkout(self) -> dict[str, Any] | None:
        """Place an order for the current cart as the guest customer.

        Returns:
            The placed order, or None if the cart is empty

        Raises:
            CheckoutError: If the server did not accept the order
        """
        if not self.items:
            return None

        await self.flush()
        order = await self.api_client.place_order(
            items=list(self.items),
            total_price=self.total_price,
            customer_info=dict(GUEST_CUSTOMER),
            session_id=self.session_id,
        )
        if order is None:
            raise CheckoutError(CHECKOUT_FAILED_MESSAGE)

        self.items = []
        logger.info(f"Order {order.get('_id')} placed for session {self.session_id}")
        return order

    async def flush(self) -> None:
        """Wait for every scheduled cart push to finish."""
        if self._pending:
            await asyncio.gather(*self._pending)

    def _push(self) -> None:
        snapshot = list(self.items)
        task = asyncio.get_running_loop().create_task(
            self.api_client.save_cart(self.session_id, snapshot)
        )
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)
