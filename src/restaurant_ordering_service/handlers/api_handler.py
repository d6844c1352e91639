"""FastAPI application for the restaurant ordering REST API."""

import logging

from fastapi import APIRouter, Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel
from starlette.exceptions import HTTPException as StarletteHTTPException

from restaurant_ordering_service.exceptions import OrderingServiceError
from restaurant_ordering_service.models.cart_models import Cart, CartUpdate
from restaurant_ordering_service.models.menu_models import MenuItem, MenuItemCreate, MenuItemUpdate
from restaurant_ordering_service.models.order_models import (
    Order,
    OrderCreate,
    OrderStatusUpdate,
)
from restaurant_ordering_service.persistence.document_store import DocumentStore
from restaurant_ordering_service.services.cart_service import CartService
from restaurant_ordering_service.services.menu_service import MenuService
from restaurant_ordering_service.services.order_service import OrderService

logger = logging.getLogger(__name__)


class HealthResponse(BaseModel):
    """Health check response model."""

    status: str
    message: str


class MessageResponse(BaseModel):
    """Confirmation returned by delete endpoints."""

    message: str


class SeedResponse(BaseModel):
    """Response model for menu seeding."""

    message: str
    items: list[MenuItem]


def require_store(request: Request) -> None:
    """Dependency that fails the request before its handler runs if the store is unreachable."""
    request.app.state.store.ensure_connected()


def describe_validation_errors(exc: RequestValidationError) -> dict[str, str]:
    """Map each invalid request field to its first error message.

    Returns:
        dict: Dotted field path (e.g. "items.0.price") to message
    """
    fields: dict[str, str] = {}
    for error in exc.errors():
        path = [str(part) for part in error.get("loc", ()) if part != "body"]
        fields.setdefault(".".join(path) or "body", error.get("msg", "Invalid value"))
    return fields


def register_exception_handlers(app: FastAPI) -> None:
    """Install the JSON error responses shared by every route."""

    @app.exception_handler(OrderingServiceError)
    async def handle_service_error(_request: Request, exc: OrderingServiceError) -> JSONResponse:
        if exc.status_code >= 500:
            logger.error(f"{exc.message}: {exc.details}")
        return JSONResponse(status_code=exc.status_code, content=exc.to_response_body())

    @app.exception_handler(RequestValidationError)
    async def handle_validation_error(
        _request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        fields = describe_validation_errors(exc)
        details = "; ".join(f"{field}: {message}" for field, message in fields.items())
        return JSONResponse(
            status_code=400,
            content={"error": "Validation failed", "details": details, "fields": fields},
        )

    @app.exception_handler(StarletteHTTPException)
    async def handle_http_error(_request: Request, exc: StarletteHTTPException) -> JSONResponse:
        # Unknown paths and unsupported methods both read as a missing route
        if exc.status_code in (404, 405):
            return JSONResponse(status_code=404, content={"error": "Route not found"})
        return JSONResponse(status_code=exc.status_code, content={"error": str(exc.detail)})

    @app.exception_handler(Exception)
    async def handle_unexpected_error(_request: Request, exc: Exception) -> JSONResponse:
        logger.exception(f"Unhandled error: {exc}")
        return JSONResponse(
            status_code=500,
            content={"error": "Something went wrong!", "details": str(exc)},
        )


def create_app(
    menu_service: MenuService,
    cart_service: CartService,
    order_service: OrderService,
    store: DocumentStore,
    cors_origins: list[str] | None = None,
) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        menu_service: Service for the menu catalog
        cart_service: Service for session carts
        order_service: Service for orders
        store: Document store handle, checked before every data route runs
        cors_origins: Allowed CORS origins (all origins when omitted)

    Returns:
        Configured FastAPI application
    """
    app = FastAPI(
        title="Restaurant Ordering API",
        description="Menu catalog, session carts and order placement",
        version="1.0.0",
    )

    # Store services in app state for access in route handlers
    app.state.menu_service = menu_service
    app.state.cart_service = cart_service
    app.state.order_service = order_service
    app.state.store = store

    app.add_middleware(
        CORSMiddleware,
        allow_origins=cors_origins or ["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )
    register_exception_handlers(app)

    @app.get("/api/health", response_model=HealthResponse, tags=["Health"])
    async def health_check() -> HealthResponse:
        """Liveness probe. Does not touch the document store."""
        return HealthResponse(status="ok", message="Server is running")

    router = APIRouter(prefix="/api", dependencies=[Depends(require_store)])

    # Menu

    @router.get("/menu", response_model=list[MenuItem], tags=["Menu"])
    async def list_menu_items() -> list[MenuItem]:
        """List menu items that are currently available."""
        items: list[MenuItem] = await app.state.menu_service.list_available_items()
        return items

    @router.get("/menu/{item_id}", response_model=MenuItem, tags=["Menu"])
    async def get_menu_item(item_id: str) -> MenuItem:
        item: MenuItem = await app.state.menu_service.get_item(item_id)
        return item

    @router.post("/menu", response_model=MenuItem, status_code=201, tags=["Menu"])
    async def create_menu_item(payload: MenuItemCreate) -> MenuItem:
        item: MenuItem = await app.state.menu_service.create_item(payload)
        return item

    @router.put("/menu/{item_id}", response_model=MenuItem, tags=["Menu"])
    async def update_menu_item(item_id: str, payload: MenuItemUpdate) -> MenuItem:
        """Update the supplied fields of a menu item."""
        item: MenuItem = await app.state.menu_service.update_item(item_id, payload)
        return item

    @router.delete("/menu/{item_id}", response_model=MessageResponse, tags=["Menu"])
    async def delete_menu_item(item_id: str) -> MessageResponse:
        await app.state.menu_service.delete_item(item_id)
        return MessageResponse(message="Menu item deleted successfully")

    # Cart

    @router.get("/cart/{session_id}", response_model=Cart, tags=["Cart"])
    async def get_cart(session_id: str) -> Cart:
        """Get the session's cart, creating an empty one on first access."""
        cart: Cart = await app.state.cart_service.get_or_create_cart(session_id)
        return cart

    @router.post("/cart/{session_id}", response_model=Cart, tags=["Cart"])
    async def replace_cart(session_id: str, payload: CartUpdate) -> Cart:
        """Replace the session's cart items with the submitted list."""
        cart: Cart = await app.state.cart_service.replace_items(session_id, payload)
        return cart

    @router.delete("/cart/{session_id}", response_model=MessageResponse, tags=["Cart"])
    async def clear_cart(session_id: str) -> MessageResponse:
        await app.state.cart_service.clear_cart(session_id)
        return MessageResponse(message="Cart cleared successfully")

    # Orders

    @router.get("/orders", response_model=list[Order], tags=["Orders"])
    async def list_orders() -> list[Order]:
        """List all orders, newest first."""
        orders: list[Order] = await app.state.order_service.list_orders()
        return orders

    @router.get("/orders/{order_id}", response_model=Order, tags=["Orders"])
    async def get_order(order_id: str) -> Order:
        order: Order = await app.state.order_service.get_order(order_id)
        return order

    @router.post("/orders", response_model=Order, status_code=201, tags=["Orders"])
    async def place_order(payload: OrderCreate) -> Order:
        """Place an order and clear the originating session's cart."""
        logger.info(f"Placing order with {len(payload.items or [])} lines")
        order: Order = await app.state.order_service.place_order(payload)
        return order

    @router.patch("/orders/{order_id}/status", response_model=Order, tags=["Orders"])
    async def update_order_status(order_id: str, payload: OrderStatusUpdate) -> Order:
        order: Order = await app.state.order_service.update_status(order_id, payload.status)
        return order

    @router.delete("/orders/{order_id}", response_model=MessageResponse, tags=["Orders"])
    async def delete_order(order_id: str) -> MessageResponse:
        await app.state.order_service.delete_order(order_id)
        return MessageResponse(message="Order deleted successfully")

    # Seed

    @router.get("/seed", response_model=SeedResponse, tags=["Seed"])
    async def seed_menu() -> SeedResponse:
        """Wipe the menu and repopulate it with the fixed seed items."""
        items = await app.state.menu_service.seed()
        return SeedResponse(message="Database seeded successfully", items=items)

    app.include_router(router)

    return app
