"""
Storage abstraction layer.
Provides one interface for data persistence, with the backend chosen once at startup.
"""
import logging

from .interface import Collection, StorageInterface
from .memory_storage import MemoryStorage
from .sql_storage import SQLStorage
from .mongo_storage import MongoStorage
from .db_adapter import get_database_adapter

logger = logging.getLogger(__name__)


def create_storage(settings) -> StorageInterface:
    """
    Build the storage backend named by ``settings.storage_backend``.

    Raises:
        ValueError: If the backend name is unknown
        StorageError: If the backend cannot be initialized
    """
    backend = settings.storage_backend
    logger.info(f"Creating storage backend: {backend}")
    if backend == "memory":
        return MemoryStorage()
    if backend == "sqlite":
        adapter = get_database_adapter("sqlite", settings.db_path)
        return SQLStorage(adapter, settings.slow_query_threshold)
    if backend == "postgresql":
        adapter = get_database_adapter("postgresql", settings.postgresql_dsn)
        return SQLStorage(adapter, settings.slow_query_threshold)
    if backend == "mongodb":
        return MongoStorage(settings.mongodb_url, settings.mongodb_db_name)
    raise ValueError(f"Unknown storage backend: {backend}")


__all__ = [
    'Collection',
    'StorageInterface',
    'MemoryStorage',
    'SQLStorage',
    'MongoStorage',
    'create_storage',
]
