"""
In-memory implementation of the storage interface.

Documents live in per-collection dicts guarded by a re-entrant lock. Every
document is deep-copied on the way in and on the way out, so callers can
never mutate stored state through a returned value.
"""
import copy
import logging
import threading
from typing import Any, Dict, List, Mapping, Optional, Sequence

from storefront.exceptions import DuplicateRecordError
from storefront.storage.interface import Collection, StorageInterface
from storefront.storage.schema import EntityDefinition

logger = logging.getLogger(__name__)


def _fold(value: Any) -> Any:
    return value.lower() if isinstance(value, str) else value


class MemoryCollection(Collection):
    """Dict-backed collection for one entity kind."""

    def __init__(self, entity: EntityDefinition):
        super().__init__(entity)
        self._documents: Dict[str, Dict[str, Any]] = {}
        self._lock = threading.RLock()

    def _matches(self, document: Mapping[str, Any], filters: Mapping[str, Any], ignore_case: bool) -> bool:
        for name, expected in filters.items():
            actual = document.get(name)
            if ignore_case:
                actual, expected = _fold(actual), _fold(expected)
            if actual != expected:
                return False
        return True

    def _check_unique(self, document: Mapping[str, Any], exclude_id: Optional[str] = None) -> None:
        for name in self.entity.unique_columns:
            value = document.get(name)
            if value is None:
                continue
            for other in self._documents.values():
                if other["id"] != exclude_id and other.get(name) == value:
                    raise DuplicateRecordError(self.entity.label, name, value)

    def insert(self, document: Dict[str, Any]) -> None:
        self.check_fields(document.keys())
        with self._lock:
            if document["id"] in self._documents:
                raise DuplicateRecordError(self.entity.label, "id", document["id"])
            self._check_unique(document)
            self._documents[document["id"]] = copy.deepcopy(document)

    def get(self, record_id: str) -> Optional[Dict[str, Any]]:
        with self._lock:
            document = self._documents.get(record_id)
            return copy.deepcopy(document) if document is not None else None

    def find(self, filters: Optional[Mapping[str, Any]] = None, ignore_case: bool = False) -> List[Dict[str, Any]]:
        filters = filters or {}
        self.check_fields(filters.keys())
        with self._lock:
            return [
                copy.deepcopy(d) for d in self._documents.values()
                if self._matches(d, filters, ignore_case)
            ]

    def search(self, query: str, fields: Sequence[str]) -> List[Dict[str, Any]]:
        self.check_fields(fields)
        needle = query.lower()
        with self._lock:
            return [
                copy.deepcopy(d) for d in self._documents.values()
                if any(needle in str(d.get(f) or "").lower() for f in fields)
            ]

    def update(self, record_id: str, fields: Mapping[str, Any]) -> bool:
        self.check_fields(fields.keys())
        with self._lock:
            current = self._documents.get(record_id)
            if current is None:
                return False
            candidate = dict(current)
            candidate.update(copy.deepcopy(dict(fields)))
            self._check_unique(candidate, exclude_id=record_id)
            self._documents[record_id] = candidate
            return True

    def delete(self, record_id: str) -> bool:
        with self._lock:
            return self._documents.pop(record_id, None) is not None

    def delete_many(self, filters: Mapping[str, Any]) -> int:
        self.check_fields(filters.keys())
        with self._lock:
            doomed = [i for i, d in self._documents.items() if self._matches(d, filters, False)]
            for record_id in doomed:
                del self._documents[record_id]
            return len(doomed)

    def count(self) -> int:
        with self._lock:
            return len(self._documents)


class MemoryStorage(StorageInterface):
    """Process-local storage; contents are lost on restart."""

    backend_name = "memory"

    def __init__(self):
        self._collections: Dict[str, MemoryCollection] = {}
        super().__init__()
        logger.info("Initialized in-memory storage")

    def create_collection(self, entity: EntityDefinition) -> MemoryCollection:
        collection = MemoryCollection(entity)
        self._collections[entity.name] = collection
        return collection

    def health_check(self) -> Dict[str, Any]:
        return {
            "status": "healthy",
            "backend": self.backend_name,
            "collections": {name: c.count() for name, c in self._collections.items()},
        }

    def close(self) -> None:
        """Nothing to release."""
