"""
Canonical schema for the six entity kinds.

One ``EntityDefinition`` per kind drives every backend: the SQL backend
builds its tables from ``columns``, the document backend names its
collection and indexes from it, and the memory backend enforces the same
unique fields.
"""
from dataclasses import dataclass
from typing import Optional, Tuple, Type

from pydantic import BaseModel

from storefront.models import (
    User,
    Product,
    CartItem,
    Order,
    PrototypingProject,
    PrintingRequest,
)


@dataclass(frozen=True)
class Column:
    """A stored field. ``is_json`` fields hold lists/objects serialized as text in SQL."""
    name: str
    sql_type: str = "TEXT"
    nullable: bool = True
    unique: bool = False
    references: Optional[str] = None
    is_json: bool = False

    def ddl(self) -> str:
        parts = [self.name, self.sql_type]
        if self.name == "id":
            parts.append("PRIMARY KEY")
        else:
            if not self.nullable:
                parts.append("NOT NULL")
            if self.unique:
                parts.append("UNIQUE")
            if self.references:
                parts.append(f"REFERENCES {self.references}")
        return " ".join(parts)


@dataclass(frozen=True)
class EntityDefinition:
    """Describes how one entity kind is stored and queried."""
    name: str
    label: str
    record_model: Type[BaseModel]
    columns: Tuple[Column, ...]
    owner_field: Optional[str] = None
    category_field: Optional[str] = None
    search_fields: Tuple[str, ...] = ()

    @property
    def column_names(self) -> Tuple[str, ...]:
        return tuple(c.name for c in self.columns)

    @property
    def json_columns(self) -> Tuple[str, ...]:
        return tuple(c.name for c in self.columns if c.is_json)

    @property
    def unique_columns(self) -> Tuple[str, ...]:
        return tuple(c.name for c in self.columns if c.unique)

    @property
    def indexed_columns(self) -> Tuple[str, ...]:
        return tuple(c for c in (self.owner_field, self.category_field) if c)

    @property
    def has_updated_at(self) -> bool:
        return "updated_at" in self.column_names


_ID = Column("id")
_CREATED_AT = Column("created_at", nullable=False)
_OWNER = Column("user_id", references="users(id)")


USERS = EntityDefinition(
    name="users",
    label="User",
    record_model=User,
    columns=(
        _ID,
        Column("username", nullable=False, unique=True),
        Column("email", nullable=False, unique=True),
        Column("password_hash", nullable=False),
        Column("full_name", nullable=False),
        Column("address", is_json=True),
        Column("role", nullable=False),
        _CREATED_AT,
    ),
)

PRODUCTS = EntityDefinition(
    name="products",
    label="Product",
    record_model=Product,
    columns=(
        _ID,
        Column("name", nullable=False),
        Column("description", nullable=False),
        # Money is kept as exact decimal text
        Column("price", nullable=False),
        Column("category", nullable=False),
        Column("images", nullable=False, is_json=True),
        Column("stock", "INTEGER", nullable=False),
        Column("variants", nullable=False, is_json=True),
        _CREATED_AT,
    ),
    category_field="category",
    search_fields=("name", "description", "category"),
)

CART_ITEMS = EntityDefinition(
    name="cart_items",
    label="Cart item",
    record_model=CartItem,
    columns=(
        _ID,
        _OWNER,
        Column("product_id", nullable=False),
        Column("quantity", "INTEGER", nullable=False),
        _CREATED_AT,
    ),
    owner_field="user_id",
)

ORDERS = EntityDefinition(
    name="orders",
    label="Order",
    record_model=Order,
    columns=(
        _ID,
        _OWNER,
        Column("total", nullable=False),
        Column("status", nullable=False),
        Column("items", nullable=False, is_json=True),
        _CREATED_AT,
        Column("updated_at", nullable=False),
    ),
    owner_field="user_id",
)

PROTOTYPING_PROJECTS = EntityDefinition(
    name="prototyping_projects",
    label="Prototyping project",
    record_model=PrototypingProject,
    columns=(
        _ID,
        _OWNER,
        Column("project_name", nullable=False),
        Column("category", nullable=False),
        Column("description", nullable=False),
        Column("budget_range"),
        Column("timeline"),
        Column("status", nullable=False),
        Column("files", nullable=False, is_json=True),
        _CREATED_AT,
    ),
    owner_field="user_id",
)

PRINTING_REQUESTS = EntityDefinition(
    name="printing_requests",
    label="Printing request",
    record_model=PrintingRequest,
    columns=(
        _ID,
        _OWNER,
        Column("file", nullable=False, is_json=True),
        Column("material", nullable=False),
        Column("quality", nullable=False),
        Column("infill_density", "INTEGER", nullable=False),
        Column("color", nullable=False),
        Column("estimated_cost", nullable=False),
        Column("estimated_time", nullable=False),
        Column("status", nullable=False),
        _CREATED_AT,
    ),
    owner_field="user_id",
)

# Users first: the other tables reference it
ENTITIES = (USERS, PRODUCTS, CART_ITEMS, ORDERS, PROTOTYPING_PROJECTS, PRINTING_REQUESTS)
