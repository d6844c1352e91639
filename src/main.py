"""Main application entry point for the restaurant ordering service.

This module provides the FastAPI application factory and configuration
for running the service locally or in production.
"""

import logging
import os
from typing import Any

import boto3
from botocore.config import Config
from fastapi import FastAPI

from restaurant_ordering_service.handlers.api_handler import create_app
from restaurant_ordering_service.observability import configure_logging, setup_observability
from restaurant_ordering_service.persistence.document_store import DocumentStore, TableNames
from restaurant_ordering_service.repositories.ordering_repositories import (
    CartRepository,
    MenuItemRepository,
    OrderRepository,
)
from restaurant_ordering_service.services.cart_service import CartService
from restaurant_ordering_service.services.menu_service import MenuService
from restaurant_ordering_service.services.order_service import OrderService

logger = logging.getLogger(__name__)

# One fixed connection-level timeout and no retries
DYNAMODB_CLIENT_CONFIG = Config(
    connect_timeout=30,
    read_timeout=45,
    retries={"total_max_attempts": 1, "mode": "standard"},
)


def get_dynamodb_resource() -> Any:
    """Create DynamoDB resource with appropriate configuration.

    DYNAMODB_ENDPOINT is the store's connection string; when it is unset the regional
    AWS endpoint is used.

    Returns:
        Boto3 DynamoDB resource configured for environment
    """
    endpoint_url = os.getenv("DYNAMODB_ENDPOINT")
    region = os.getenv("AWS_REGION", "us-east-1")

    if endpoint_url:
        # Local DynamoDB - use environment variables or defaults for credentials
        access_key = os.getenv("AWS_ACCESS_KEY_ID", "dummy")
        secret_key = os.getenv("AWS_SECRET_ACCESS_KEY", "dummy")
        logger.info(f"Using local DynamoDB at {endpoint_url}")
        return boto3.resource(
            "dynamodb",
            endpoint_url=endpoint_url,
            region_name=region,
            aws_access_key_id=access_key,
            aws_secret_access_key=secret_key,
            config=DYNAMODB_CLIENT_CONFIG,
        )
    else:
        logger.info(f"Using AWS DynamoDB in region {region}")
        # Production - boto3 will use default credential chain (IAM role, env vars, etc.)
        return boto3.resource("dynamodb", region_name=region, config=DYNAMODB_CLIENT_CONFIG)


def get_table_names() -> TableNames:
    """Read table names from the environment."""
    defaults = TableNames()
    return TableNames(
        menu_items=os.getenv("DYNAMODB_MENU_ITEMS_TABLE", defaults.menu_items),
        orders=os.getenv("DYNAMODB_ORDERS_TABLE", defaults.orders),
        carts=os.getenv("DYNAMODB_CARTS_TABLE", defaults.carts),
    )


def get_cors_origins() -> list[str]:
    """Read allowed CORS origins (comma-separated) from the environment."""
    origins_str = os.getenv("CORS_ALLOW_ORIGINS", "*")
    return [origin.strip() for origin in origins_str.split(",") if origin.strip()]


def create_document_store() -> DocumentStore:
    """Create the document store handle, creating tables first when configured to.

    Returns:
        DocumentStore shared by every repository
    """
    store = DocumentStore(dynamodb_resource=get_dynamodb_resource(), table_names=get_table_names())

    if os.getenv("DYNAMODB_CREATE_TABLES", "false").lower() == "true":
        created = store.create_tables()
        logger.info(f"Table bootstrap complete, created: {', '.join(created) or 'none'}")

    return store


def create_application() -> FastAPI:
    """Create and configure the FastAPI application with all dependencies.

    This factory function:
    1. Configures logging
    2. Creates the document store handle
    3. Initializes repositories
    4. Creates services
    5. Creates FastAPI app with the ordering routes
    6. Sets up observability

    Returns:
        Configured FastAPI application instance
    """
    log_level = os.getenv("LOG_LEVEL", "INFO")
    configure_logging(log_level)

    logger.info("Initializing restaurant ordering service...")

    store = create_document_store()

    menu_repository = MenuItemRepository(store)
    order_repository = OrderRepository(store)
    cart_repository = CartRepository(store)

    logger.info(
        f"Repositories configured - menu: {store.table_names.menu_items}, "
        f"orders: {store.table_names.orders}, carts: {store.table_names.carts}"
    )

    app = create_app(
        menu_service=MenuService(menu_repository=menu_repository),
        cart_service=CartService(cart_repository=cart_repository),
        order_service=OrderService(
            order_repository=order_repository, cart_repository=cart_repository
        ),
        store=store,
        cors_origins=get_cors_origins(),
    )

    setup_observability(app)

    logger.info("Restaurant ordering service initialized successfully")

    return app


# Create the FastAPI application instance (only when not in test mode)
# This prevents the app from being created during test collection
if os.getenv("ENVIRONMENT") != "test":  # noqa: SIM108
    app = create_application()
else:
    # Create a placeholder app for test imports
    app = FastAPI()


if __name__ == "__main__":
    """Run the application with uvicorn when executed directly."""
    import uvicorn

    port = int(os.getenv("PORT", "5000"))
    host = os.getenv("HOST", "0.0.0.0")

    logger.info(f"Starting development server on {host}:{port}")
    logger.info(f"API documentation available at http://{host}:{port}/docs")

    uvicorn.run(
        "main:app",
        host=host,
        port=port,
        reload=True,
        log_level=os.getenv("LOG_LEVEL", "info").lower(),
    )
