"""Shared building blocks for the ordering data models.

Records are exchanged with clients in camelCase and stored in DynamoDB in snake_case.
Money amounts are kept as Decimal (DynamoDB has no float type) and rendered as JSON numbers.
"""

import re
import uuid
from datetime import datetime
from decimal import Decimal
from typing import Annotated, Any

from pydantic import BaseModel, ConfigDict, Field, PlainSerializer
from pydantic.alias_generators import to_camel

IDENTIFIER_PATTERN = re.compile(r"[0-9a-f]{32}")

Money = Annotated[
    Decimal,
    PlainSerializer(float, return_type=float, when_used="json"),
]


def new_identifier() -> str:
    """Generate a new record identifier."""
    return uuid.uuid4().hex


def is_valid_identifier(value: str) -> bool:
    """Check whether a value has the record identifier format."""
    return bool(IDENTIFIER_PATTERN.fullmatch(value))


def parse_timestamp(value: str) -> datetime:
    """Parse an ISO-8601 timestamp stored in DynamoDB."""
    return datetime.fromisoformat(value)


class CamelModel(BaseModel):
    """Base model exposing camelCase aliases while accepting field names too."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ItemSnapshot(CamelModel):
    """Copy of a menu item's name and price taken when it was added to a cart or order."""

    name: str = Field(..., min_length=1, description="Item name at the time it was added")
    price: Money = Field(..., ge=0, description="Unit price at the time it was added")
    quantity: int = Field(..., ge=1, description="Number of units")

    def to_dynamodb_item(self) -> dict[str, Any]:
        """Convert to a DynamoDB map."""
        return {"name": self.name, "price": self.price, "quantity": self.quantity}

    @classmethod
    def from_dynamodb_item(cls, item: dict[str, Any]) -> "ItemSnapshot":
        """Create an ItemSnapshot from a DynamoDB map."""
        return cls(
            name=item["name"],
            price=Decimal(str(item["price"])),
            quantity=int(item["quantity"]),
        )
