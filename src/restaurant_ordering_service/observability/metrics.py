"""Custom metrics for the restaurant ordering service."""

from opentelemetry import metrics

meter = metrics.get_meter("ordering-svc")

orders_placed_counter = meter.create_counter(
    name="orders_placed_total",
    description="Total number of orders placed",
    unit="1",
)

order_status_change_counter = meter.create_counter(
    name="order_status_changes_total",
    description="Total number of order status updates by new status",
    unit="1",
)

order_value_histogram = meter.create_histogram(
    name="order_total_price",
    description="Client-submitted total price of placed orders",
    unit="1",
)

cart_write_counter = meter.create_counter(
    name="cart_writes_total",
    description="Total number of cart replacements and deletions",
    unit="1",
)

menu_seed_counter = meter.create_counter(
    name="menu_seed_total",
    description="Total number of times the menu was wiped and reseeded",
    unit="1",
)


def record_order_placed(item_count: int, total_price: float) -> None:
    """Record a placed order.

    Args:
        item_count: Number of distinct lines in the order
        total_price: Total price as submitted
    """
    orders_placed_counter.add(1, {"line_count": item_count})
    order_value_histogram.record(total_price)


def record_order_status_change(status: str) -> None:
    """Record an order status update.

    Args:
        status: The new status value
    """
    order_status_change_counter.add(1, {"status": status})


def record_cart_write(operation: str) -> None:
    """Record a cart write.

    Args:
        operation: "replace" or "delete"
    """
    cart_write_counter.add(1, {"operation": operation})


def record_menu_seed(item_count: int) -> None:
    """Record a menu reseed.

    Args:
        item_count: Number of items written
    """
    menu_seed_counter.add(1, {"item_count": item_count})
