"""Menu service for catalog reads, edits and seeding."""

import asyncio
import logging
from datetime import UTC, datetime
from decimal import Decimal

from restaurant_ordering_service.exceptions import NotFoundError
from restaurant_ordering_service.models.common_models import new_identifier
from restaurant_ordering_service.models.menu_models import MenuItem, MenuItemCreate, MenuItemUpdate
from restaurant_ordering_service.observability.decorators import traced
from restaurant_ordering_service.observability.metrics import record_menu_seed
from restaurant_ordering_service.repositories.ordering_repositories import MenuItemRepository

logger = logging.getLogger(__name__)

# name, description, price, category
SEED_MENU = [
    (
        "Double-Double Burger",
        "Two beef patties, two slices of cheese, fresh lettuce & tomato",
        "5.99",
        "burgers",
    ),
    ("Cheeseburger", "Classic single patty burger with melted cheese", "3.99", "burgers"),
    ("French Fries", "Golden, crispy fries made fresh", "2.49", "sides"),
    ("Shakes", "Chocolate, Strawberry, or Vanilla made with real ice cream", "2.99", "drinks"),
]


def build_seed_items() -> list[MenuItem]:
    """Build fresh records for the fixed seed menu."""
    now = datetime.now(UTC)
    return [
        MenuItem(
            id=new_identifier(),
            name=name,
            description=description,
            price=Decimal(price),
            category=category,
            available=True,
            created_at=now,
        )
        for name, description, price, category in SEED_MENU
    ]


class MenuService:
    """Service for the menu catalog.

    Listing only ever returns available items. Lookups, updates and deletes of an
    unknown identifier raise NotFoundError.
    """

    def __init__(self, menu_repository: MenuItemRepository) -> None:
        """Initialize the MenuService.

        Args:
            menu_repository: Repository for menu items
        """
        self.menu_repository = menu_repository

    @traced("list_menu_items")
    async def list_available_items(self) -> list[MenuItem]:
        return await asyncio.to_thread(self.menu_repository.list_available)

    @traced("get_menu_item")
    async def get_item(self, item_id: str) -> MenuItem:
        """Get a menu item by ID.

        Raises:
            NotFoundError: If no item has this ID
        """
        item = await asyncio.to_thread(self.menu_repository.get_item, item_id)
        if item is None:
            raise NotFoundError("Menu item not found")
        return item

    @traced("create_menu_item")
    async def create_item(self, payload: MenuItemCreate) -> MenuItem:
        item = await asyncio.to_thread(self.menu_repository.create_item, payload.to_menu_item())
        logger.info(f"Created menu item {item.id} ({item.name})")
        return item

    @traced("update_menu_item")
    async def update_item(self, item_id: str, payload: MenuItemUpdate) -> MenuItem:
        """Apply a partial update to a menu item.

        Raises:
            NotFoundError: If no item has this ID
        """
        item = await asyncio.to_thread(
            self.menu_repository.update_item, item_id, payload.to_dynamodb_changes()
        )
        if item is None:
            raise NotFoundError("Menu item not found")
        return item

    @traced("delete_menu_item")
    async def delete_item(self, item_id: str) -> None:
        """Delete a menu item.

        Raises:
            NotFoundError: If no item has this ID
        """
        if not await asyncio.to_thread(self.menu_repository.delete_item, item_id):
            raise NotFoundError("Menu item not found")
        logger.info(f"Deleted menu item {item_id}")

    @traced("seed_menu")
    async def seed(self) -> list[MenuItem]:
        """Wipe the catalog and repopulate it with the fixed seed menu.

        Returns:
            list: The seeded items
        """
        items = await asyncio.to_thread(self.menu_repository.replace_all, build_seed_items())
        record_menu_seed(len(items))
        logger.info(f"Seeded menu with {len(items)} items")
        return items
