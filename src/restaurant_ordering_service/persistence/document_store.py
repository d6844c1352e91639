"""DynamoDB document store handle.

The store is constructed once when the process starts and passed to every repository.
It owns the boto3 resource, knows the three table names and tracks whether the store
has been reached at least once.
"""

import logging
from dataclasses import dataclass

from botocore.exceptions import BotoCoreError, ClientError
from mypy_boto3_dynamodb.service_resource import DynamoDBServiceResource, Table

from restaurant_ordering_service.exceptions import StoreConnectionError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TableNames:
    """Names of the DynamoDB tables backing each collection."""

    menu_items: str = "restaurant-menu-items"
    orders: str = "restaurant-orders"
    carts: str = "restaurant-carts"


# Partition key attribute for each collection
MENU_ITEMS_KEY = "id"
ORDERS_KEY = "id"
CARTS_KEY = "session_id"


class DocumentStore:
    """Connection handle shared by the menu, order and cart repositories."""

    def __init__(
        self, dynamodb_resource: DynamoDBServiceResource, table_names: TableNames | None = None
    ) -> None:
        """Initialize the store.

        Args:
            dynamodb_resource: Boto3 DynamoDB resource
            table_names: Table names to use (defaults apply when omitted)
        """
        self.dynamodb = dynamodb_resource
        self.table_names = table_names or TableNames()
        self._connected = False

    @property
    def connected(self) -> bool:
        """Whether the store has been reached successfully."""
        return self._connected

    @property
    def menu_items_table(self) -> Table:
        return self.dynamodb.Table(self.table_names.menu_items)

    @property
    def orders_table(self) -> Table:
        return self.dynamodb.Table(self.table_names.orders)

    @property
    def carts_table(self) -> Table:
        return self.dynamodb.Table(self.table_names.carts)

    def ensure_connected(self) -> None:
        """Verify the store is reachable, once per handle.

        Raises:
            StoreConnectionError: If the store cannot be reached
        """
        if self._connected:
            return

        try:
            self.dynamodb.meta.client.list_tables(Limit=1)
        except (BotoCoreError, ClientError) as e:
            logger.error(f"DynamoDB connection error: {e}")
            raise StoreConnectionError(str(e)) from e

        self._connected = True
        logger.info("Connected to DynamoDB")

    def create_tables(self) -> list[str]:
        """Create any of the three tables that do not exist yet.

        Intended for local development against DynamoDB Local.

        Returns:
            list: Names of the tables that were created
        """
        client = self.dynamodb.meta.client
        existing: set[str] = set()
        for page in client.get_paginator("list_tables").paginate():
            existing.update(page.get("TableNames", []))

        wanted = {
            self.table_names.menu_items: MENU_ITEMS_KEY,
            self.table_names.orders: ORDERS_KEY,
            self.table_names.carts: CARTS_KEY,
        }

        created = []
        for table_name, key in wanted.items():
            if table_name in existing:
                continue

            table = self.dynamodb.create_table(
                TableName=table_name,
                KeySchema=[{"AttributeName": key, "KeyType": "HASH"}],
                AttributeDefinitions=[{"AttributeName": key, "AttributeType": "S"}],
                BillingMode="PAY_PER_REQUEST",
            )
            table.wait_until_exists()
            created.append(table_name)
            logger.info(f"Created DynamoDB table {table_name}")

        return created
