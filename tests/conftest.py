"""Shared pytest fixtures and configuration for all tests."""

import os
from decimal import Decimal

import pytest

# Entry point modules skip building the real application in test mode
os.environ.setdefault("ENVIRONMENT", "test")


@pytest.fixture
def mock_session_id() -> str:
    """Fixture providing a standard test session ID."""
    return "session_1700000000000_abc123xyz"


@pytest.fixture
def mock_item_id() -> str:
    """Fixture providing a well-formed record identifier."""
    return "0123456789abcdef0123456789abcdef"


@pytest.fixture
def mock_menu_item_record(mock_item_id: str) -> dict:
    """Fixture providing a stored menu item as DynamoDB returns it."""
    return {
        "id": mock_item_id,
        "name": "Cheeseburger",
        "description": "Classic single patty burger with melted cheese",
        "price": Decimal("3.99"),
        "category": "burgers",
        "available": True,
        "created_at": "2024-01-15T10:30:00+00:00",
    }


@pytest.fixture
def mock_order_record(mock_item_id: str) -> dict:
    """Fixture providing a stored order as DynamoDB returns it."""
    return {
        "id": mock_item_id,
        "items": [{"name": "French Fries", "price": Decimal("2.49"), "quantity": Decimal("2")}],
        "total_price": Decimal("4.98"),
        "customer_info": {"name": "Guest Customer", "email": "guest@example.com"},
        "status": "pending",
        "order_date": "2024-01-15T10:30:00+00:00",
    }


@pytest.fixture
def mock_cart_record(mock_session_id: str, mock_item_id: str) -> dict:
    """Fixture providing a stored cart as DynamoDB returns it."""
    return {
        "session_id": mock_session_id,
        "id": mock_item_id,
        "items": [{"name": "French Fries", "price": Decimal("2.49"), "quantity": Decimal("2")}],
        "last_updated": "2024-01-15T10:30:00+00:00",
    }
