"""
Storage interface - defines the contract for all storage backends.

A backend supplies one ``Collection`` per entity kind: a small set of
document primitives over JSON-compatible dicts keyed by ``id``. The shared
repositories in ``storefront.storage.repositories`` build the CRUD contract
on top of those primitives, so every backend behaves the same for the same
sequence of operations.
"""
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Mapping, Optional, Sequence

from storefront.storage.schema import (
    EntityDefinition,
    USERS,
    PRODUCTS,
    CART_ITEMS,
    ORDERS,
    PROTOTYPING_PROJECTS,
    PRINTING_REQUESTS,
)
from storefront.storage.repositories import (
    UserRepository,
    ProductRepository,
    OwnedRepository,
)


class Collection(ABC):
    """Abstract document primitives for one entity kind."""

    def __init__(self, entity: EntityDefinition):
        self.entity = entity

    @abstractmethod
    def insert(self, document: Dict[str, Any]) -> None:
        """Store a new document. Raises DuplicateRecordError on a unique clash."""

    @abstractmethod
    def get(self, record_id: str) -> Optional[Dict[str, Any]]:
        """Get a document by ID, or None."""

    @abstractmethod
    def find(self, filters: Optional[Mapping[str, Any]] = None, ignore_case: bool = False) -> List[Dict[str, Any]]:
        """List documents whose fields equal every filter value."""

    @abstractmethod
    def search(self, query: str, fields: Sequence[str]) -> List[Dict[str, Any]]:
        """List documents where any of ``fields`` contains ``query`` (case-insensitive, literal)."""

    @abstractmethod
    def update(self, record_id: str, fields: Mapping[str, Any]) -> bool:
        """Set ``fields`` on one document. Returns False if it does not exist."""

    @abstractmethod
    def delete(self, record_id: str) -> bool:
        """Delete one document. Returns False if it did not exist."""

    @abstractmethod
    def delete_many(self, filters: Mapping[str, Any]) -> int:
        """Delete every document matching ``filters``; returns the count."""

    @abstractmethod
    def count(self) -> int:
        """Number of stored documents."""

    def check_fields(self, names) -> None:
        unknown = [n for n in names if n not in self.entity.column_names]
        if unknown:
            raise ValueError(f"Unknown field(s) for {self.entity.name}: {', '.join(unknown)}")


class StorageInterface(ABC):
    """
    Abstract interface for storage operations.

    Subclasses set up their connection state, then call
    ``super().__init__()`` which asks for one collection per entity kind and
    wires the repositories.
    """

    backend_name = "abstract"

    def __init__(self):
        self.users = UserRepository(USERS, self.create_collection(USERS))
        self.products = ProductRepository(PRODUCTS, self.create_collection(PRODUCTS))
        self.cart_items = OwnedRepository(CART_ITEMS, self.create_collection(CART_ITEMS))
        self.orders = OwnedRepository(ORDERS, self.create_collection(ORDERS))
        self.prototyping_projects = OwnedRepository(
            PROTOTYPING_PROJECTS, self.create_collection(PROTOTYPING_PROJECTS)
        )
        self.printing_requests = OwnedRepository(
            PRINTING_REQUESTS, self.create_collection(PRINTING_REQUESTS)
        )

    @abstractmethod
    def create_collection(self, entity: EntityDefinition) -> Collection:
        """Create the backend collection for one entity kind."""

    @abstractmethod
    def health_check(self) -> Dict[str, Any]:
        """Report backend health: at least ``status`` ('healthy'/'unhealthy')."""

    @abstractmethod
    def close(self) -> None:
        """Release connections held by the backend."""

    def repositories(self) -> Dict[str, Any]:
        """All repositories keyed by entity name."""
        return {
            USERS.name: self.users,
            PRODUCTS.name: self.products,
            CART_ITEMS.name: self.cart_items,
            ORDERS.name: self.orders,
            PROTOTYPING_PROJECTS.name: self.prototyping_projects,
            PRINTING_REQUESTS.name: self.printing_requests,
        }
