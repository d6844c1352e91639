"""Component tests for the ordering API client."""

import json
from decimal import Decimal

import httpx
import pytest

from restaurant_ordering_service.client.cart_session import (
    FALLBACK_MENU,
    MENU_UNAVAILABLE_MESSAGE,
    CartSession,
    CheckoutError,
)
from restaurant_ordering_service.client.ordering_client import (
    DEFAULT_API_URL,
    OrderingApiClient,
    default_api_url,
)
from restaurant_ordering_service.models.common_models import ItemSnapshot

BASE_URL = "http://api.test/api"


@pytest.mark.component
class TestOrderingApiClient:
    """Test suite for OrderingApiClient against mocked HTTP responses."""

    @pytest.fixture
    def client(self) -> OrderingApiClient:
        """Create a client pointed at the test API."""
        return OrderingApiClient(base_url=f"{BASE_URL}/")

    def test_base_url_trailing_slash_is_dropped(self, client: OrderingApiClient) -> None:
        assert client.base_url == BASE_URL

    def test_default_api_url(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test the API URL falls back to the local development server."""
        monkeypatch.delenv("ORDERING_API_URL", raising=False)
        assert default_api_url() == DEFAULT_API_URL

        monkeypatch.setenv("ORDERING_API_URL", "https://shop.example.com/api")
        assert OrderingApiClient().base_url == "https://shop.example.com/api"

    @pytest.mark.asyncio
    async def test_get_menu_success(self, client: OrderingApiClient, httpx_mock) -> None:
        """Test fetching the menu parses camelCase entries."""
        httpx_mock.add_response(
            url=f"{BASE_URL}/menu",
            method="GET",
            json=[
                {
                    "_id": "0123456789abcdef0123456789abcdef",
                    "name": "Shakes",
                    "description": "Chocolate, Strawberry, or Vanilla",
                    "price": 2.99,
                    "category": "drinks",
                    "available": True,
                    "imageUrl": "https://example.com/shake.png",
                    "createdAt": "2024-01-15T10:30:00Z",
                }
            ],
        )

        menu = await client.get_menu()

        assert menu is not None
        assert menu[0].price == Decimal("2.99")
        assert menu[0].image_url == "https://example.com/shake.png"

    @pytest.mark.asyncio
    async def test_get_menu_server_error(self, client: OrderingApiClient, httpx_mock) -> None:
        """Test that a failing menu fetch returns None."""
        httpx_mock.add_response(url=f"{BASE_URL}/menu", method="GET", status_code=500)

        assert await client.get_menu() is None

    @pytest.mark.asyncio
    async def test_get_menu_unreachable(self, client: OrderingApiClient, httpx_mock) -> None:
        """Test that a connection failure returns None."""
        httpx_mock.add_exception(httpx.ConnectError("Connection refused"))

        assert await client.get_menu() is None

    @pytest.mark.asyncio
    async def test_get_cart(
        self, client: OrderingApiClient, httpx_mock, mock_session_id: str
    ) -> None:
        """Test fetching the session's cart items."""
        httpx_mock.add_response(
            url=f"{BASE_URL}/cart/{mock_session_id}",
            method="GET",
            json={
                "_id": "0123456789abcdef0123456789abcdef",
                "sessionId": mock_session_id,
                "items": [{"name": "French Fries", "price": 2.49, "quantity": 2}],
                "lastUpdated": "2024-01-15T10:30:00Z",
            },
        )

        items = await client.get_cart(mock_session_id)

        assert items == [ItemSnapshot(name="French Fries", price=Decimal("2.49"), quantity=2)]

    @pytest.mark.asyncio
    async def test_save_cart_sends_full_item_list(
        self, client: OrderingApiClient, httpx_mock, mock_session_id: str
    ) -> None:
        """Test that saving posts every line with numeric prices."""
        httpx_mock.add_response(
            url=f"{BASE_URL}/cart/{mock_session_id}", method="POST", json={"items": []}
        )

        saved = await client.save_cart(
            mock_session_id, [ItemSnapshot(name="Shakes", price=Decimal("2.99"), quantity=2)]
        )

        assert saved is True
        request = httpx_mock.get_request()
        assert json.loads(request.content) == {
            "items": [{"name": "Shakes", "price": 2.99, "quantity": 2}]
        }

    @pytest.mark.asyncio
    async def test_save_cart_failure(
        self, client: OrderingApiClient, httpx_mock, mock_session_id: str
    ) -> None:
        """Test that a rejected cart write reports False."""
        httpx_mock.add_response(
            url=f"{BASE_URL}/cart/{mock_session_id}", method="POST", status_code=400
        )

        assert await client.save_cart(mock_session_id, []) is False

    @pytest.mark.asyncio
    async def test_clear_cart(
        self, client: OrderingApiClient, httpx_mock, mock_session_id: str
    ) -> None:
        """Test deleting the server-side cart."""
        httpx_mock.add_response(
            url=f"{BASE_URL}/cart/{mock_session_id}",
            method="DELETE",
            json={"message": "Cart cleared successfully"},
        )

        assert await client.clear_cart(mock_session_id) is True

    @pytest.mark.asyncio
    async def test_place_order(
        self, client: OrderingApiClient, httpx_mock, mock_session_id: str
    ) -> None:
        """Test that the order body carries items, total, customer and session."""
        httpx_mock.add_response(
            url=f"{BASE_URL}/orders",
            method="POST",
            status_code=201,
            json={"_id": "0123456789abcdef0123456789abcdef", "status": "pending"},
        )

        order = await client.place_order(
            items=[ItemSnapshot(name="French Fries", price=Decimal("2.49"), quantity=2)],
            total_price=Decimal("4.98"),
            customer_info={"name": "Guest Customer"},
            session_id=mock_session_id,
        )

        assert order == {"_id": "0123456789abcdef0123456789abcdef", "status": "pending"}
        body = json.loads(httpx_mock.get_request().content)
        assert body == {
            "items": [{"name": "French Fries", "price": 2.49, "quantity": 2}],
            "totalPrice": 4.98,
            "customerInfo": {"name": "Guest Customer"},
            "sessionId": mock_session_id,
        }

    @pytest.mark.asyncio
    async def test_place_order_rejected(self, client: OrderingApiClient, httpx_mock) -> None:
        """Test that a rejected order returns None."""
        httpx_mock.add_response(
            url=f"{BASE_URL}/orders",
            method="POST",
            status_code=400,
            json={"error": "Order must contain at least one item"},
        )

        order = await client.place_order(items=[], total_price=Decimal("0"), customer_info={})

        assert order is None


@pytest.mark.component
class TestUnexpectedResponseBodies:
    """Successful status codes with bodies the client cannot use are soft failures."""

    @pytest.fixture
    def client(self) -> OrderingApiClient:
        return OrderingApiClient(base_url=BASE_URL)

    @pytest.mark.asyncio
    async def test_get_menu_html_body(self, client: OrderingApiClient, httpx_mock) -> None:
        """Test that a non-JSON menu response returns None."""
        httpx_mock.add_response(url=f"{BASE_URL}/menu", method="GET", text="<html>proxy</html>")

        assert await client.get_menu() is None

    @pytest.mark.asyncio
    async def test_get_menu_object_body(self, client: OrderingApiClient, httpx_mock) -> None:
        httpx_mock.add_response(url=f"{BASE_URL}/menu", method="GET", json={"items": []})

        assert await client.get_menu() is None

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "response_kwargs",
        [{"text": "<html>proxy</html>"}, {"json": ["not", "a", "cart"]}, {"json": {"items": 3}}],
    )
    async def test_get_cart_unusable_body(
        self,
        client: OrderingApiClient,
        httpx_mock,
        mock_session_id: str,
        response_kwargs: dict,
    ) -> None:
        """Test that cart bodies of the wrong shape return None."""
        httpx_mock.add_response(
            url=f"{BASE_URL}/cart/{mock_session_id}", method="GET", **response_kwargs
        )

        assert await client.get_cart(mock_session_id) is None

    @pytest.mark.asyncio
    async def test_save_cart_html_body(
        self, client: OrderingApiClient, httpx_mock, mock_session_id: str
    ) -> None:
        httpx_mock.add_response(
            url=f"{BASE_URL}/cart/{mock_session_id}", method="POST", text="<html>ok</html>"
        )

        assert await client.save_cart(mock_session_id, []) is False

    @pytest.mark.asyncio
    async def test_place_order_html_body(self, client: OrderingApiClient, httpx_mock) -> None:
        httpx_mock.add_response(url=f"{BASE_URL}/orders", method="POST", text="<html>ok</html>")

        order = await client.place_order(items=[], total_price=Decimal("0"), customer_info={})

        assert order is None

    @pytest.mark.asyncio
    async def test_cart_session_load_falls_back_on_html_menu(
        self, client: OrderingApiClient, httpx_mock, mock_session_id: str
    ) -> None:
        """Test that a session shows the built-in menu when the menu body is not JSON."""
        httpx_mock.add_response(url=f"{BASE_URL}/menu", method="GET", text="<html>proxy</html>")
        httpx_mock.add_response(
            url=f"{BASE_URL}/cart/{mock_session_id}", method="GET", text="<html>proxy</html>"
        )
        session = CartSession(api_client=client, session_id=mock_session_id)

        await session.load()

        assert session.menu == FALLBACK_MENU
        assert session.menu_error == MENU_UNAVAILABLE_MESSAGE
        assert session.items == []

    @pytest.mark.asyncio
    async def test_checkout_after_unusable_push_response(
        self, client: OrderingApiClient, httpx_mock, mock_session_id: str
    ) -> None:
        """Test that a garbled cart push does not break checkout error reporting."""
        httpx_mock.add_response(
            url=f"{BASE_URL}/cart/{mock_session_id}", method="POST", text="<html>ok</html>"
        )
        httpx_mock.add_response(url=f"{BASE_URL}/orders", method="POST", text="<html>ok</html>")
        session = CartSession(api_client=client, session_id=mock_session_id)
        session.add_item(FALLBACK_MENU[0])

        with pytest.raises(CheckoutError):
            await session.checkout()

        assert session.total_items == 1
