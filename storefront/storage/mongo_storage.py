"""
MongoDB implementation of the storage interface.

Each entity kind is one collection. The record id is stored as ``_id``; it is
mapped back to ``id`` on the way out so callers never see driver types.
"""
import logging
import re
from typing import Any, Dict, List, Mapping, Optional, Sequence

from pymongo import ASCENDING, MongoClient
from pymongo.errors import DuplicateKeyError, PyMongoError

from storefront.exceptions import DuplicateRecordError, StorageError
from storefront.storage.interface import Collection, StorageInterface
from storefront.storage.schema import EntityDefinition
from storefront.tracing import trace_span

logger = logging.getLogger(__name__)


def _to_mongo(document: Mapping[str, Any]) -> Dict[str, Any]:
    stored = dict(document)
    stored["_id"] = stored.pop("id")
    return stored


def _from_mongo(stored: Optional[Mapping[str, Any]]) -> Optional[Dict[str, Any]]:
    if stored is None:
        return None
    document = dict(stored)
    document["id"] = str(document.pop("_id"))
    return document


def _literal(value: str, anchored: bool = False) -> Dict[str, str]:
    """Case-insensitive regex matching ``value`` literally."""
    pattern = re.escape(value)
    if anchored:
        pattern = f"^{pattern}$"
    return {"$regex": pattern, "$options": "i"}


class MongoCollection(Collection):
    """One MongoDB collection."""

    def __init__(self, entity: EntityDefinition, storage: "MongoStorage"):
        super().__init__(entity)
        self.storage = storage
        self._collection = storage.db[entity.name]

    def _run(self, action: str, operation):
        with trace_span(f"mongodb.{action}", attributes={"db.system": "mongodb", "db.mongodb.collection": self.entity.name}):
            try:
                return operation()
            except DuplicateKeyError as e:
                key = (e.details or {}).get("keyValue") or {}
                field = next(iter(key), "id")
                raise DuplicateRecordError(self.entity.label, "id" if field == "_id" else field) from e
            except PyMongoError as e:
                logger.error(f"MongoDB {action} on {self.entity.name} failed", exc_info=True)
                raise StorageError(f"Failed to {action} {self.entity.label.lower()}: {e}") from e

    def _filter(self, filters: Mapping[str, Any], ignore_case: bool) -> Dict[str, Any]:
        query = {}
        for name, value in filters.items():
            key = "_id" if name == "id" else name
            if ignore_case and isinstance(value, str):
                query[key] = _literal(value, anchored=True)
            else:
                query[key] = value
        return query

    def ensure_indexes(self) -> None:
        for name in self.entity.unique_columns:
            self._run("index", lambda n=name: self._collection.create_index([(n, ASCENDING)], unique=True))
        for name in self.entity.indexed_columns:
            self._run("index", lambda n=name: self._collection.create_index([(n, ASCENDING)]))

    def insert(self, document: Dict[str, Any]) -> None:
        self.check_fields(document.keys())
        self._run("create", lambda: self._collection.insert_one(_to_mongo(document)))

    def get(self, record_id: str) -> Optional[Dict[str, Any]]:
        return _from_mongo(self._run("get", lambda: self._collection.find_one({"_id": record_id})))

    def find(self, filters: Optional[Mapping[str, Any]] = None, ignore_case: bool = False) -> List[Dict[str, Any]]:
        filters = filters or {}
        self.check_fields(filters.keys())
        query = self._filter(filters, ignore_case)
        return [_from_mongo(d) for d in self._run("list", lambda: list(self._collection.find(query)))]

    def search(self, query: str, fields: Sequence[str]) -> List[Dict[str, Any]]:
        self.check_fields(fields)
        if not fields:
            return []
        condition = {"$or": [{f: _literal(query)} for f in fields]}
        return [_from_mongo(d) for d in self._run("search", lambda: list(self._collection.find(condition)))]

    def update(self, record_id: str, fields: Mapping[str, Any]) -> bool:
        self.check_fields(fields.keys())
        if not fields:
            return self.get(record_id) is not None
        result = self._run(
            "update", lambda: self._collection.update_one({"_id": record_id}, {"$set": dict(fields)})
        )
        return result.matched_count > 0

    def delete(self, record_id: str) -> bool:
        result = self._run("delete", lambda: self._collection.delete_one({"_id": record_id}))
        return result.deleted_count > 0

    def delete_many(self, filters: Mapping[str, Any]) -> int:
        self.check_fields(filters.keys())
        query = self._filter(filters, False)
        return self._run("delete", lambda: self._collection.delete_many(query)).deleted_count

    def count(self) -> int:
        return self._run("count", lambda: self._collection.count_documents({}))


class MongoStorage(StorageInterface):
    """Storage backed by a MongoDB database."""

    backend_name = "mongodb"

    def __init__(self, url: str, db_name: str, client: Optional[MongoClient] = None):
        self._owns_client = client is None
        self.client = client if client is not None else MongoClient(url, serverSelectionTimeoutMS=5000)
        self.db = self.client[db_name]
        self.db_name = db_name
        super().__init__()
        for repository in self.repositories().values():
            repository.collection.ensure_indexes()
        logger.info(f"Initialized MongoDB storage: database {db_name}")

    def create_collection(self, entity: EntityDefinition) -> MongoCollection:
        return MongoCollection(entity, self)

    def health_check(self) -> Dict[str, Any]:
        try:
            self.client.admin.command("ping")
        except PyMongoError as e:
            logger.error("MongoDB health check failed", exc_info=True)
            return {"status": "unhealthy", "backend": self.backend_name, "error": str(e)}
        return {"status": "healthy", "backend": self.backend_name, "database": self.db_name}

    def close(self) -> None:
        if self._owns_client:
            self.client.close()
