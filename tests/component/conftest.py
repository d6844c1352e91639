"""Fixtures wiring the real services and API to in-memory repositories."""

from unittest.mock import MagicMock

import pytest
from fastapi.testclient import TestClient

from restaurant_ordering_service.handlers.api_handler import create_app
from restaurant_ordering_service.persistence.document_store import DocumentStore
from restaurant_ordering_service.services.cart_service import CartService
from restaurant_ordering_service.services.menu_service import MenuService
from restaurant_ordering_service.services.order_service import OrderService
from tests.component.in_memory_repositories import (
    InMemoryCartRepository,
    InMemoryMenuItemRepository,
    InMemoryOrderRepository,
)


@pytest.fixture
def menu_repository() -> InMemoryMenuItemRepository:
    return InMemoryMenuItemRepository()


@pytest.fixture
def order_repository() -> InMemoryOrderRepository:
    return InMemoryOrderRepository()


@pytest.fixture
def cart_repository() -> InMemoryCartRepository:
    return InMemoryCartRepository()


@pytest.fixture
def api_client(
    menu_repository: InMemoryMenuItemRepository,
    order_repository: InMemoryOrderRepository,
    cart_repository: InMemoryCartRepository,
) -> TestClient:
    """Test client for the full application backed by in-memory repositories."""
    app = create_app(
        menu_service=MenuService(menu_repository=menu_repository),
        cart_service=CartService(cart_repository=cart_repository),
        order_service=OrderService(
            order_repository=order_repository, cart_repository=cart_repository
        ),
        store=MagicMock(spec=DocumentStore),
    )
    return TestClient(app, raise_server_exceptions=False)
