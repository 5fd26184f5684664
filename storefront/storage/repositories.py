"""
Repository pattern implementation for the storefront data access layer.

Repositories implement the CRUD contract once, on top of a backend
``Collection``. They own id and timestamp assignment, validate every record
against its pydantic model, and return records in a deterministic order
(creation time, then id) whatever the backend's natural order is.
"""
import logging
from typing import Any, Dict, Generic, List, Mapping, Optional, TypeVar, Union, TYPE_CHECKING

from pydantic import BaseModel

from storefront.models.common import new_record_id, utc_now
from storefront.storage.schema import EntityDefinition

if TYPE_CHECKING:
    from storefront.storage.interface import Collection

logger = logging.getLogger(__name__)

RecordT = TypeVar("RecordT", bound=BaseModel)

# Assigned on create, never changed afterwards
IMMUTABLE_FIELDS = frozenset({"id", "created_at"})


class Repository(Generic[RecordT]):
    """Repository for one entity kind."""

    def __init__(self, entity: EntityDefinition, collection: "Collection"):
        """Initialize repository with the backend collection for ``entity``.

        Args:
            entity: Definition of the entity kind
            collection: Backend collection holding its documents
        """
        self.entity = entity
        self.collection = collection

    def create(self, data: Union[BaseModel, Mapping[str, Any]]) -> RecordT:
        """Create a new record.

        Args:
            data: Create-model instance (or mapping) without id/timestamps

        Returns:
            The stored record, with fresh id and creation timestamp
        """
        fields = data.model_dump() if isinstance(data, BaseModel) else dict(data)
        now = utc_now()
        fields.update(id=new_record_id(), created_at=now)
        if self.entity.has_updated_at:
            fields["updated_at"] = now

        record = self.entity.record_model.model_validate(fields)
        document = self._to_document(record)
        self.collection.insert(document)
        logger.info(f"Created {self.entity.label.lower()} {document['id']}")
        return self._from_document(document)

    def get_by_id(self, record_id: str) -> Optional[RecordT]:
        """Get a record by ID.

        Returns:
            The record if found, None otherwise
        """
        document = self.collection.get(record_id)
        return self._from_document(document) if document else None

    def list_all(self) -> List[RecordT]:
        """List every record."""
        return self._records(self.collection.find())

    def update(self, record_id: str, fields: Mapping[str, Any]) -> Optional[RecordT]:
        """Update only the given fields of an existing record.

        Args:
            record_id: Record ID to update
            fields: Field names mapped to new values

        Returns:
            The updated record, or None if no record has this ID

        Raises:
            ValueError: If a field is unknown or immutable
            pydantic.ValidationError: If the merged record is invalid
        """
        immutable = IMMUTABLE_FIELDS.intersection(fields)
        if immutable:
            raise ValueError(f"Field(s) cannot be updated: {', '.join(sorted(immutable))}")
        self.collection.check_fields(fields.keys())

        current = self.get_by_id(record_id)
        if current is None:
            return None

        merged = current.model_dump()
        merged.update(fields)
        changed = set(fields)
        if self.entity.has_updated_at:
            merged["updated_at"] = utc_now()
            changed.add("updated_at")

        record = self.entity.record_model.model_validate(merged)
        document = self._to_document(record)
        if not self.collection.update(record_id, {k: document[k] for k in changed}):
            # Removed between the read and the write
            return None
        return self.get_by_id(record_id)

    def delete(self, record_id: str) -> bool:
        """Delete a record.

        Returns:
            True if a record was removed, False if none had this ID
        """
        deleted = self.collection.delete(record_id)
        if deleted:
            logger.info(f"Deleted {self.entity.label.lower()} {record_id}")
        return deleted

    def count(self) -> int:
        return self.collection.count()

    def _to_document(self, record: BaseModel) -> Dict[str, Any]:
        computed = set(type(record).model_computed_fields)
        return record.model_dump(mode="json", exclude=computed)

    def _from_document(self, document: Mapping[str, Any]) -> RecordT:
        return self.entity.record_model.model_validate(dict(document))

    def _records(self, documents) -> List[RecordT]:
        records = [self._from_document(d) for d in documents]
        return sorted(records, key=lambda r: (r.created_at, r.id))


class OwnedRepository(Repository[RecordT]):
    """Repository for records that belong to a user."""

    def list_by_owner(self, user_id: str) -> List[RecordT]:
        """List records whose owner is exactly ``user_id``."""
        return self._records(self.collection.find({self.entity.owner_field: user_id}))

    def clear_by_owner(self, user_id: str) -> int:
        """Delete every record of one owner; other owners are untouched.

        Returns:
            Number of records deleted
        """
        deleted = self.collection.delete_many({self.entity.owner_field: user_id})
        logger.info(f"Cleared {deleted} {self.entity.name} for user {user_id}")
        return deleted


class ProductRepository(Repository[RecordT]):
    """Repository for catalog products."""

    def list_by_category(self, category: str) -> List[RecordT]:
        """List products in ``category`` (case-insensitive exact match)."""
        return self._records(
            self.collection.find({self.entity.category_field: category}, ignore_case=True)
        )

    def search(self, query: str) -> List[RecordT]:
        """Search name, description and category for a case-insensitive substring."""
        return self._records(self.collection.search(query, self.entity.search_fields))


class UserRepository(Repository[RecordT]):
    """Repository for users."""

    def get_by_username(self, username: str) -> Optional[RecordT]:
        return self._first(self.collection.find({"username": username}))

    def get_by_email(self, email: str) -> Optional[RecordT]:
        """Get a user by email (case-insensitive, as email domains are)."""
        return self._first(self.collection.find({"email": email}, ignore_case=True))

    def _first(self, documents) -> Optional[RecordT]:
        records = self._records(documents)
        return records[0] if records else None
