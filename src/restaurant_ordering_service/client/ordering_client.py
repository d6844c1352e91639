"""Client for the restaurant ordering REST API."""

import logging
import os
from decimal import Decimal
from typing import Any

import httpx
from pydantic import Field

from restaurant_ordering_service.models.common_models import CamelModel, ItemSnapshot, Money

logger = logging.getLogger(__name__)

DEFAULT_API_URL = "http://localhost:5000/api"

# Failures reported as None/False; ValueError covers non-JSON bodies and pydantic errors
SOFT_FAILURES = (httpx.HTTPStatusError, httpx.RequestError, ValueError)


def default_api_url() -> str:
    """API base URL from ORDERING_API_URL, falling back to the local development server."""
    return os.getenv("ORDERING_API_URL", DEFAULT_API_URL)


class MenuEntry(CamelModel):
    """Menu item as displayed by the client."""

    id: str = Field(..., alias="_id")
    name: str
    description: str = ""
    price: Money
    category: str | None = None
    image_url: str | None = None


class OrderingApiClient:
    """HTTP client for the menu, cart and order endpoints.

    Every method reports failure with None/False and logs the cause, so callers can
    degrade instead of crashing.
    """

    def __init__(self, base_url: str | None = None, timeout: float = 10.0) -> None:
        """Initialize the client.

        Args:
            base_url: API base URL including the /api prefix
            timeout: Per-request timeout in seconds
        """
        self.base_url = (base_url or default_api_url()).rstrip("/")
        self.timeout = timeout

    async def _request(self, method: str, path: str, **kwargs: Any) -> Any:
        async with httpx.AsyncClient(timeout=self.timeout) as client:
            response = await client.request(method, f"{self.base_url}{path}", **kwargs)
            response.raise_for_status()
            return response.json()

    async def get_menu(self) -> list[MenuEntry] | None:
        """Fetch the available menu items.

        Returns:
            List of MenuEntry objects, or None on failure
        """
        try:
            data = await self._request("GET", "/menu")
            if not isinstance(data, list):
                raise ValueError(f"expected a list of menu items, got {type(data).__name__}")
            return [MenuEntry.model_validate(entry) for entry in data]

        except SOFT_FAILURES as e:
            logger.error(f"Error fetching menu: {e}")
            return None

    async def get_cart(self, session_id: str) -> list[ItemSnapshot] | None:
        """Fetch the items of the session's cart (the server creates it if missing).

        Returns:
            List of cart lines, or None on failure
        """
        try:
            data = await self._request("GET", f"/cart/{session_id}")
            if not isinstance(data, dict):
                raise ValueError(f"expected a cart object, got {type(data).__name__}")
            lines = data.get("items") or []
            if not isinstance(lines, list):
                raise ValueError(f"expected a list of cart items, got {type(lines).__name__}")
            return [ItemSnapshot.model_validate(line) for line in lines]

        except SOFT_FAILURES as e:
            logger.error(f"Error fetching cart: {e}")
            return None

    async def save_cart(self, session_id: str, items: list[ItemSnapshot]) -> bool:
        """Replace the session's server-side cart with the given lines.

        Returns:
            bool: True if the server accepted the cart
        """
        body = {"items": [line.model_dump(mode="json", by_alias=True) for line in items]}
        try:
            await self._request("POST", f"/cart/{session_id}", json=body)
            return True

        except SOFT_FAILURES as e:
            logger.error(f"Error syncing cart: {e}")
            return False

    async def clear_cart(self, session_id: str) -> bool:
        """Delete the session's server-side cart.

        Returns:
            bool: True if the server confirmed the deletion
        """
        try:
            await self._request("DELETE", f"/cart/{session_id}")
            return True

        except SOFT_FAILURES as e:
            logger.error(f"Error clearing cart: {e}")
            return False

    async def place_order(
        self,
        items: list[ItemSnapshot],
        total_price: Decimal,
        customer_info: dict[str, str],
        session_id: str | None = None,
    ) -> dict[str, Any] | None:
        """Submit an order.

        Args:
            items: Order lines
            total_price: Total computed by the caller
            customer_info: Customer name, email and phone
            session_id: Session whose cart the server should clear

        Returns:
            The stored order as returned by the server, or None on failure
        """
        body: dict[str, Any] = {
            "items": [line.model_dump(mode="json", by_alias=True) for line in items],
            "totalPrice": float(total_price),
            "customerInfo": customer_info,
        }
        if session_id:
            body["sessionId"] = session_id

        try:
            order = await self._request("POST", "/orders", json=body)
            if not isinstance(order, dict):
                raise ValueError(f"expected an order object, got {type(order).__name__}")
            return order

        except SOFT_FAILURES as e:
            logger.error(f"Error placing order: {e}")
            return None
