"""Order models.

An order stores snapshots of the purchased items together with the total the client
submitted. The total is not recomputed from the items.
"""

from datetime import UTC, datetime
from decimal import Decimal
from enum import Enum
from typing import Any

from pydantic import Field

from restaurant_ordering_service.models.common_models import (
    CamelModel,
    ItemSnapshot,
    Money,
    new_identifier,
    parse_timestamp,
)


class OrderStatusEnum(str, Enum):
    """Enumeration of order status values.

    Any value may follow any other; there is no transition graph.
    """

    PENDING = "pending"
    CONFIRMED = "confirmed"
    PREPARING = "preparing"
    READY = "ready"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"


class CustomerInfo(CamelModel):
    """Contact details attached to an order."""

    name: str | None = None
    email: str | None = None
    phone: str | None = None

    def to_dynamodb_item(self) -> dict[str, Any]:
        """Convert to a DynamoDB map, leaving out unset sub-fields."""
        return self.model_dump(exclude_none=True)


class Order(CamelModel):
    """Stored order."""

    id: str = Field(..., alias="_id", description="Generated identifier")
    items: list[ItemSnapshot] = Field(..., description="Snapshots of ordered items")
    total_price: Money = Field(..., description="Total as submitted by the client")
    customer_info: CustomerInfo | None = Field(None, description="Customer contact details")
    status: OrderStatusEnum = Field(default=OrderStatusEnum.PENDING, description="Order status")
    order_date: datetime = Field(..., description="Placement timestamp")
    notes: str | None = Field(None, description="Free-form notes")

    def to_dynamodb_item(self) -> dict[str, Any]:
        """Convert to DynamoDB item format.

        Returns:
            dict: DynamoDB-compatible representation
        """
        item: dict[str, Any] = {
            "id": self.id,
            "items": [snapshot.to_dynamodb_item() for snapshot in self.items],
            "total_price": self.total_price,
            "status": self.status.value,
            "order_date": self.order_date.isoformat(),
        }

        if self.customer_info is not None:
            item["customer_info"] = self.customer_info.to_dynamodb_item()

        if self.notes is not None:
            item["notes"] = self.notes

        return item

    @classmethod
    def from_dynamodb_item(cls, item: dict[str, Any]) -> "Order":
        """Create Order from DynamoDB item.

        Args:
            item: DynamoDB item dictionary

        Returns:
            Order: Parsed model instance
        """
        data: dict[str, Any] = {
            "id": item["id"],
            "items": [ItemSnapshot.from_dynamodb_item(i) for i in item.get("items", [])],
            "total_price": Decimal(str(item["total_price"])),
            "status": OrderStatusEnum(item["status"]),
            "order_date": parse_timestamp(item["order_date"]),
        }

        if "customer_info" in item:
            data["customer_info"] = CustomerInfo(**item["customer_info"])

        if "notes" in item:
            data["notes"] = item["notes"]

        return cls(**data)


class OrderCreate(CamelModel):
    """Request body for placing an order.

    A status supplied by the caller is ignored; new orders always start as pending.
    """

    items: list[ItemSnapshot] | None = None
    total_price: Money
    customer_info: CustomerInfo | None = None
    notes: str | None = None
    session_id: str | None = None

    def to_order(self) -> Order:
        """Build the record to store as a new pending order."""
        return Order(
            id=new_identifier(),
            items=self.items or [],
            total_price=self.total_price,
            customer_info=self.customer_info,
            status=OrderStatusEnum.PENDING,
            order_date=datetime.now(UTC),
            notes=self.notes,
        )


class OrderStatusUpdate(CamelModel):
    """Request body for changing an order's status."""

    status: OrderStatusEnum
