"""DynamoDB repository classes for menu items, orders and carts.

Absence of a record is an expected outcome and is reported with None/False.
Store failures are raised as StoreOperationError carrying the operation's message and
the underlying error text.
"""

import logging
from datetime import UTC, datetime
from typing import Any

from boto3.dynamodb.conditions import Attr
from botocore.exceptions import BotoCoreError, ClientError
from mypy_boto3_dynamodb.service_resource import Table

from restaurant_ordering_service.exceptions import (
    InvalidIdentifierError,
    InvalidUpdateTargetError,
    OrderingServiceError,
    StoreOperationError,
)
from restaurant_ordering_service.models.cart_models import Cart
from restaurant_ordering_service.models.common_models import (
    ItemSnapshot,
    is_valid_identifier,
    new_identifier,
)
from restaurant_ordering_service.models.menu_models import MenuItem
from restaurant_ordering_service.models.order_models import Order, OrderStatusEnum
from restaurant_ordering_service.persistence.document_store import DocumentStore

logger = logging.getLogger(__name__)


def is_conditional_check_failure(error: Exception) -> bool:
    """Check whether a boto error is a failed ConditionExpression."""
    if not isinstance(error, ClientError):
        return False
    return error.response.get("Error", {}).get("Code") == "ConditionalCheckFailedException"


def scan_all(table: Table, **kwargs: Any) -> list[dict[str, Any]]:
    """Scan a table following LastEvaluatedKey until every page is read."""
    items: list[dict[str, Any]] = []
    while True:
        response = table.scan(**kwargs)
        items.extend(response.get("Items", []))
        last_key = response.get("LastEvaluatedKey")
        if not last_key:
            return items
        kwargs["ExclusiveStartKey"] = last_key


def check_identifier(
    identifier: str,
    message: str,
    error_class: type[OrderingServiceError] = InvalidIdentifierError,
) -> None:
    """Reject identifiers the store could never have generated.

    Reads and deletes report a malformed identifier as a store failure (500); updates
    pass InvalidUpdateTargetError so it is reported as a bad request (400).

    Raises:
        OrderingServiceError: error_class, if the identifier is malformed
    """
    if not is_valid_identifier(identifier):
        raise error_class(message, details=f"Invalid identifier: {identifier!r}")


class MenuItemRepository:
    """Repository for menu item CRUD operations.

    Manages menu item records in DynamoDB with id as partition key.
    """

    def __init__(self, store: DocumentStore) -> None:
        """Initialize repository.

        Args:
            store: Shared document store handle
        """
        self.store = store
        self.table: Table = store.menu_items_table

    def list_available(self) -> list[MenuItem]:
        """List menu items that are currently available.

        Returns:
            list: Available MenuItem objects (empty list if none)
        """
        try:
            items = scan_all(self.table, FilterExpression=Attr("available").eq(True))
        except (BotoCoreError, ClientError) as e:
            logger.error(f"Failed to list menu items: {e}")
            raise StoreOperationError("Failed to fetch menu items", str(e)) from e

        return [MenuItem.from_dynamodb_item(item) for item in items]

    def get_item(self, item_id: str) -> MenuItem | None:
        """Retrieve a menu item by ID.

        Args:
            item_id: Menu item identifier

        Returns:
            MenuItem if found, None otherwise
        """
        check_identifier(item_id, "Failed to fetch menu item")

        try:
            response = self.table.get_item(Key={"id": item_id})
        except (BotoCoreError, ClientError) as e:
            logger.error(f"Failed to get menu item {item_id}: {e}")
            raise StoreOperationError("Failed to fetch menu item", str(e)) from e

        if "Item" not in response:
            return None

        return MenuItem.from_dynamodb_item(response["Item"])

    def create_item(self, item: MenuItem) -> MenuItem:
        """Save a new menu item.

        Args:
            item: MenuItem to save

        Returns:
            MenuItem: The stored item
        """
        try:
            self.table.put_item(Item=item.to_dynamodb_item())
        except (BotoCoreError, ClientError) as e:
            logger.error(f"Failed to save menu item: {e}")
            raise StoreOperationError("Failed to create menu item", str(e)) from e

        return item

    def update_item(self, item_id: str, changes: dict[str, Any]) -> MenuItem | None:
        """Overwrite the given fields of an existing menu item.

        Args:
            item_id: Menu item identifier
            changes: Attribute name to new value

        Returns:
            The updated MenuItem, or None if no item has this ID
        """
        check_identifier(item_id, "Failed to update menu item", InvalidUpdateTargetError)

        if not changes:
            return self.get_item(item_id)

        names: dict[str, str] = {}
        values: dict[str, Any] = {}
        assignments = []
        for index, (attribute, value) in enumerate(sorted(changes.items())):
            names[f"#f{index}"] = attribute
            values[f":v{index}"] = value
            assignments.append(f"#f{index} = :v{index}")

        try:
            response = self.table.update_item(
                Key={"id": item_id},
                UpdateExpression="SET " + ", ".join(assignments),
                ConditionExpression="attribute_exists(id)",
                ExpressionAttributeNames=names,
                ExpressionAttributeValues=values,
                ReturnValues="ALL_NEW",
            )
        except (BotoCoreError, ClientError) as e:
            if is_conditional_check_failure(e):
                return None
            logger.error(f"Failed to update menu item {item_id}: {e}")
            raise StoreOperationError("Failed to update menu item", str(e)) from e

        return MenuItem.from_dynamodb_item(response["Attributes"])

    def delete_item(self, item_id: str) -> bool:
        """Delete a menu item.

        Args:
            item_id: Menu item identifier

        Returns:
            bool: True if an item was deleted, False if no item has this ID
        """
        check_identifier(item_id, "Failed to delete menu item")

        try:
            self.table.delete_item(
                Key={"id": item_id}, ConditionExpression="attribute_exists(id)"
            )
            return True

        except (BotoCoreError, ClientError) as e:
            if is_conditional_check_failure(e):
                return False
            logger.error(f"Failed to delete menu item {item_id}: {e}")
            raise StoreOperationError("Failed to delete menu item", str(e)) from e

    def replace_all(self, items: list[MenuItem]) -> list[MenuItem]:
        """Delete every menu item, then store the given ones.

        Args:
            items: Menu items making up the new catalog

        Returns:
            list: The stored items
        """
        try:
            existing = scan_all(self.table, ProjectionExpression="id")
            with self.table.batch_writer() as batch:
                for item in existing:
                    batch.delete_item(Key={"id": item["id"]})
            with self.table.batch_writer() as batch:
                for menu_item in items:
                    batch.put_item(Item=menu_item.to_dynamodb_item())
        except (BotoCoreError, ClientError) as e:
            logger.error(f"Failed to replace menu items: {e}")
            raise StoreOperationError("Failed to seed database", str(e)) from e

        logger.info(f"Replaced {len(existing)} menu items with {len(items)} items")
        return items


class OrderRepository:
    """Repository for order CRUD operations.

    Manages order records in DynamoDB with id as partition key.
    """

    def __init__(self, store: DocumentStore) -> None:
        """Initialize repository.

        Args:
            store: Shared document store handle
        """
        self.store = store
        self.table: Table = store.orders_table

    def list_orders(self) -> list[Order]:
        """List all orders, newest first.

        Returns:
            list: Order objects sorted by order date descending
        """
        try:
            items = scan_all(self.table)
        except (BotoCoreError, ClientError) as e:
            logger.error(f"Failed to list orders: {e}")
            raise StoreOperationError("Failed to fetch orders", str(e)) from e

        orders = [Order.from_dynamodb_item(item) for item in items]
        return sorted(orders, key=lambda order: order.order_date, reverse=True)

    def get_order(self, order_id: str) -> Order | None:
        """Retrieve an order by ID.

        Args:
            order_id: Order identifier

        Returns:
            Order if found, None otherwise
        """
        check_identifier(order_id, "Failed to fetch order")

        try:
            response = self.table.get_item(Key={"id": order_id})
        except (BotoCoreError, ClientError) as e:
            logger.error(f"Failed to get order {order_id}: {e}")
            raise StoreOperationError("Failed to fetch order", str(e)) from e

        if "Item" not in response:
            return None

        return Order.from_dynamodb_item(response["Item"])

    def create_order(self, order: Order) -> Order:
        """Save a new order.

        Args:
            order: Order to save

        Returns:
            Order: The stored order
        """
        try:
            self.table.put_item(Item=order.to_dynamodb_item())
        except (BotoCoreError, ClientError) as e:
            logger.error(f"Failed to save order: {e}")
            raise StoreOperationError("Failed to create order", str(e)) from e

        return order

    def update_status(self, order_id: str, status: OrderStatusEnum) -> Order | None:
        """Overwrite the status of an order.

        Args:
            order_id: Order identifier
            status: New status

        Returns:
            The updated Order, or None if no order has this ID
        """
        check_identifier(order_id, "Failed to update order status", InvalidUpdateTargetError)

        try:
            response = self.table.update_item(
                Key={"id": order_id},
                UpdateExpression="SET #status = :status",
                ConditionExpression="attribute_exists(id)",
                ExpressionAttributeNames={"#status": "status"},
                ExpressionAttributeValues={":status": status.value},
                ReturnValues="ALL_NEW",
            )
        except (BotoCoreError, ClientError) as e:
            if is_conditional_check_failure(e):
                return None
            logger.error(f"Failed to update order status {order_id}: {e}")
            raise StoreOperationError("Failed to update order status", str(e)) from e

        return Order.from_dynamodb_item(response["Attributes"])

    def delete_order(self, order_id: str) -> bool:
        """Delete an order.

        Args:
            order_id: Order identifier

        Returns:
            bool: True if an order was deleted, False if no order has this ID
        """
        check_identifier(order_id, "Failed to delete order")

        try:
            self.table.delete_item(
                Key={"id": order_id}, ConditionExpression="attribute_exists(id)"
            )
            return True

        except (BotoCoreError, ClientError) as e:
            if is_conditional_check_failure(e):
                return False
            logger.error(f"Failed to delete order {order_id}: {e}")
            raise StoreOperationError("Failed to delete order", str(e)) from e


class CartRepository:
    """Repository for cart CRUD operations.

    Manages cart records in DynamoDB with session_id as partition key, which also
    guarantees at most one cart per session.
    """

    def __init__(self, store: DocumentStore) -> None:
        """Initialize repository.

        Args:
            store: Shared document store handle
        """
        self.store = store
        self.table: Table = store.carts_table

    def get_cart(self, session_id: str) -> Cart | None:
        """Retrieve the cart for a session.

        Args:
            session_id: Client session identifier

        Returns:
            Cart if found, None otherwise
        """
        try:
            response = self.table.get_item(Key={"session_id": session_id})
        except (BotoCoreError, ClientError) as e:
            logger.error(f"Failed to get cart for session {session_id}: {e}")
            raise StoreOperationError("Failed to fetch cart", str(e)) from e

        if "Item" not in response:
            return None

        return Cart.from_dynamodb_item(response["Item"])

    def create_cart(self, session_id: str) -> Cart:
        """Create an empty cart for a session.

        If a concurrent request created the cart first, that cart is returned instead.

        Args:
            session_id: Client session identifier

        Returns:
            Cart: The session's cart
        """
        cart = Cart(
            id=new_identifier(),
            session_id=session_id,
            items=[],
            last_updated=datetime.now(UTC),
        )

        try:
            self.table.put_item(
                Item=cart.to_dynamodb_item(),
                ConditionExpression="attribute_not_exists(session_id)",
            )
        except (BotoCoreError, ClientError) as e:
            if is_conditional_check_failure(e):
                existing = self.get_cart(session_id)
                if existing is not None:
                    return existing
            logger.error(f"Failed to create cart for session {session_id}: {e}")
            raise StoreOperationError("Failed to fetch cart", str(e)) from e

        return cart

    def replace_items(self, session_id: str, items: list[ItemSnapshot]) -> Cart:
        """Replace a session's cart items, creating the cart if needed.

        Args:
            session_id: Client session identifier
            items: The complete new list of cart lines

        Returns:
            Cart: The cart after the write
        """
        try:
            response = self.table.update_item(
                Key={"session_id": session_id},
                UpdateExpression=(
                    "SET #items = :items, #last_updated = :now, #id = if_not_exists(#id, :id)"
                ),
                ExpressionAttributeNames={
                    "#items": "items",
                    "#last_updated": "last_updated",
                    "#id": "id",
                },
                ExpressionAttributeValues={
                    ":items": [snapshot.to_dynamodb_item() for snapshot in items],
                    ":now": datetime.now(UTC).isoformat(),
                    ":id": new_identifier(),
                },
                ReturnValues="ALL_NEW",
            )
        except (BotoCoreError, ClientError) as e:
            logger.error(f"Failed to update cart for session {session_id}: {e}")
            raise StoreOperationError("Failed to update cart", str(e)) from e

        return Cart.from_dynamodb_item(response["Attributes"])

    def delete_cart(self, session_id: str) -> bool:
        """Delete the cart for a session.

        Args:
            session_id: Client session identifier

        Returns:
            bool: True if a cart was deleted, False if the session had none
        """
        try:
            response = self.table.delete_item(
                Key={"session_id": session_id}, ReturnValues="ALL_OLD"
            )
        except (BotoCoreError, ClientError) as e:
            logger.error(f"Failed to delete cart for session {session_id}: {e}")
            raise StoreOperationError("Failed to clear cart", str(e)) from e

        return "Attributes" in response
