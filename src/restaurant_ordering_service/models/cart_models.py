"""Shopping cart models.

A cart is keyed by an opaque session identifier chosen by the client. There is at most
one cart per session, and every write replaces its items wholesale.
"""

from datetime import datetime
from typing import Any

from pydantic import Field

from restaurant_ordering_service.models.common_models import (
    CamelModel,
    ItemSnapshot,
    parse_timestamp,
)


class Cart(CamelModel):
    """Stored cart."""

    id: str = Field(..., alias="_id", description="Generated identifier")
    session_id: str = Field(..., min_length=1, description="Client session identifier")
    items: list[ItemSnapshot] = Field(default_factory=list, description="Cart lines")
    last_updated: datetime = Field(..., description="Timestamp of the last write")

    def to_dynamodb_item(self) -> dict[str, Any]:
        """Convert to DynamoDB item format.

        Returns:
            dict: DynamoDB-compatible representation
        """
        return {
            "session_id": self.session_id,
            "id": self.id,
            "items": [snapshot.to_dynamodb_item() for snapshot in self.items],
            "last_updated": self.last_updated.isoformat(),
        }

    @classmethod
    def from_dynamodb_item(cls, item: dict[str, Any]) -> "Cart":
        """Create Cart from DynamoDB item.

        Args:
            item: DynamoDB item dictionary

        Returns:
            Cart: Parsed model instance
        """
        return cls(
            id=item["id"],
            session_id=item["session_id"],
            items=[ItemSnapshot.from_dynamodb_item(i) for i in item.get("items", [])],
            last_updated=parse_timestamp(item["last_updated"]),
        )


class CartUpdate(CamelModel):
    """Request body replacing a cart's items."""

    items: list[ItemSnapshot] = Field(default_factory=list)
