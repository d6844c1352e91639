"""Menu catalog models.

A MenuItem is a catalog entry. Orders and carts copy its name and price rather than
referencing it, so edits here never change historical carts or orders.
"""

from datetime import UTC, datetime
from decimal import Decimal
from typing import Any

from pydantic import Field, field_validator

from restaurant_ordering_service.models.common_models import (
    CamelModel,
    Money,
    new_identifier,
    parse_timestamp,
)

DEFAULT_CATEGORY = "main"


class MenuItem(CamelModel):
    """Stored menu item."""

    id: str = Field(..., alias="_id", description="Generated identifier")
    name: str = Field(..., description="Item name")
    description: str = Field(..., description="Item description")
    price: Money = Field(..., ge=0, description="Item price")
    category: str = Field(default=DEFAULT_CATEGORY, description="Menu category")
    available: bool = Field(default=True, description="Whether item is currently available")
    image_url: str | None = Field(None, description="URL to item image")
    created_at: datetime = Field(..., description="Creation timestamp")

    def to_dynamodb_item(self) -> dict[str, Any]:
        """Convert to DynamoDB item format.

        Returns:
            dict: DynamoDB-compatible representation
        """
        item: dict[str, Any] = {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "price": self.price,
            "category": self.category,
            "available": self.available,
            "created_at": self.created_at.isoformat(),
        }

        if self.image_url is not None:
            item["image_url"] = self.image_url

        return item

    @classmethod
    def from_dynamodb_item(cls, item: dict[str, Any]) -> "MenuItem":
        """Create MenuItem from DynamoDB item.

        Args:
            item: DynamoDB item dictionary

        Returns:
            MenuItem: Parsed model instance
        """
        return cls(
            id=item["id"],
            name=item["name"],
            description=item["description"],
            price=Decimal(str(item["price"])),
            category=item.get("category", DEFAULT_CATEGORY),
            available=item.get("available", True),
            image_url=item.get("image_url"),
            created_at=parse_timestamp(item["created_at"]),
        )


class MenuItemCreate(CamelModel):
    """Request body for creating a menu item."""

    name: str = Field(..., min_length=1)
    description: str = Field(..., min_length=1)
    price: Money = Field(..., ge=0)
    category: str = DEFAULT_CATEGORY
    available: bool = True
    image_url: str | None = None
    created_at: datetime | None = None

    def to_menu_item(self) -> MenuItem:
        """Build the record to store, generating the identifier and creation time."""
        return MenuItem(
            id=new_identifier(),
            name=self.name,
            description=self.description,
            price=self.price,
            category=self.category,
            available=self.available,
            image_url=self.image_url,
            created_at=self.created_at or datetime.now(UTC),
        )


class MenuItemUpdate(CamelModel):
    """Request body for a partial menu item update.

    Any field may be omitted. Fields that are required on creation cannot be cleared.
    """

    name: str | None = Field(None, min_length=1)
    description: str | None = Field(None, min_length=1)
    price: Money | None = Field(None, ge=0)
    category: str | None = None
    available: bool | None = None
    image_url: str | None = None
    created_at: datetime | None = None

    @field_validator(
        "name", "description", "price", "category", "available", "created_at", mode="before"
    )
    @classmethod
    def reject_null(cls, v: Any) -> Any:
        """Reject an explicit null for a field that must always have a value."""
        if v is None:
            raise ValueError("field cannot be null")
        return v

    def to_dynamodb_changes(self) -> dict[str, Any]:
        """Return the supplied fields as DynamoDB attribute values.

        Returns:
            dict: Attribute name to new value, only for fields present in the request
        """
        changes = {name: getattr(self, name) for name in self.model_fields_set}
        if self.created_at is not None:
            changes["created_at"] = self.created_at.isoformat()
        return changes
