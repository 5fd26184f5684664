"""
Service container for dependency injection.

The container is built by the application lifespan and kept on
``app.state``; route handlers reach it through ``get_services``. There is no
module-level instance.
"""
import logging
from typing import Optional

from storefront.adapters.http_framework import HTTPFrameworkAdapter
from storefront.config import Settings
from storefront.seed import ensure_demo_user, seed_products
from storefront.services import (
    CartService,
    CatalogService,
    OrderService,
    PrintingService,
    PrototypingService,
    UserService,
)
from storefront.storage import StorageInterface, create_storage
from storefront.uploads import FileStore

http_adapter = HTTPFrameworkAdapter()
Header = http_adapter.Header
Request = http_adapter.Request

logger = logging.getLogger(__name__)


class ServiceContainer:
    """Container for all application services."""

    def __init__(self, settings: Settings, storage: Optional[StorageInterface] = None):
        """
        Initialize services over one storage object.

        Args:
            settings: Service settings
            storage: Pre-built storage (tests); built from settings when None
        """
        self.settings = settings
        self.storage = storage if storage is not None else create_storage(settings)
        self.file_store = FileStore(settings.uploads_dir)

        self.catalog = CatalogService(self.storage)
        self.cart = CartService(self.storage)
        self.orders = OrderService(self.storage)
        self.prototyping = PrototypingService(self.storage, self.file_store)
        self.printing = PrintingService(self.storage, self.file_store)
        self.users = UserService(self.storage)

        if settings.seed_data:
            seed_products(self.storage)
        self.demo_user = ensure_demo_user(self.storage, settings.demo_username)
        logger.info(
            f"Services initialized on {self.storage.backend_name} storage "
            f"(demo user {self.demo_user.id})"
        )

    def close(self) -> None:
        self.storage.close()
        logger.info("Storage closed")


def get_services(request: Request) -> ServiceContainer:
    """Get the service container of the running application."""
    return request.app.state.services


def get_catalog_service(request: Request) -> CatalogService:
    return get_services(request).catalog


def get_cart_service(request: Request) -> CartService:
    return get_services(request).cart


def get_order_service(request: Request) -> OrderService:
    return get_services(request).orders


def get_prototyping_service(request: Request) -> PrototypingService:
    return get_services(request).prototyping


def get_printing_service(request: Request) -> PrintingService:
    return get_services(request).printing


def get_user_service(request: Request) -> UserService:
    return get_services(request).users


def get_current_user_id(
    request: Request,
    x_user_id: Optional[str] = Header(None, description="Acting user; defaults to the demo user"),
) -> str:
    """
    Resolve the acting user.

    Requests without an ``X-User-ID`` header act as the demo user. An
    unknown id is rejected with 404.
    """
    services = get_services(request)
    if not x_user_id:
        return services.demo_user.id
    return services.users.get_user(x_user_id).id
