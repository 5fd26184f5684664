"""
Shared fixtures.

``storage`` is parametrized over every backend: memory and SQLite always,
MongoDB and PostgreSQL when a test server answers.
"""
import os
import shutil
import tempfile
import uuid

import pytest

from storefront.config import Settings
from storefront.storage import MemoryStorage, MongoStorage, SQLStorage
from storefront.storage.db_adapter import get_database_adapter
from storefront.storage.schema import ENTITIES

MONGODB_TEST_URL = os.getenv("MONGODB_TEST_URL", "mongodb://localhost:27017")
POSTGRESQL_TEST_CONN = os.getenv(
    "POSTGRESQL_TEST_CONN",
    "host=localhost port=5432 dbname=postgres user=postgres password=postgres"
)


def check_mongodb_available():
    """Check if MongoDB is available for testing."""
    from pymongo import MongoClient
    from pymongo.errors import PyMongoError

    client = MongoClient(MONGODB_TEST_URL, serverSelectionTimeoutMS=500)
    try:
        client.admin.command("ping")
        return True
    except PyMongoError:
        return False
    finally:
        client.close()


def check_postgresql_available():
    """Check if PostgreSQL is available for testing."""
    try:
        import psycopg2
    except ImportError:
        return False
    try:
        conn = psycopg2.connect(POSTGRESQL_TEST_CONN, connect_timeout=1)
        conn.close()
        return True
    except psycopg2.Error:
        return False


mongodb_available = pytest.mark.skipif(
    not check_mongodb_available(),
    reason="MongoDB not available (set MONGODB_TEST_URL to a running server)"
)

postgresql_available = pytest.mark.skipif(
    not check_postgresql_available(),
    reason="PostgreSQL not available (install psycopg2-binary and ensure PostgreSQL is running)"
)


@pytest.fixture
def temp_dir():
    """Temporary directory removed after the test."""
    path = tempfile.mkdtemp()
    yield path
    shutil.rmtree(path, ignore_errors=True)


def _drop_postgresql_tables():
    import psycopg2

    conn = psycopg2.connect(POSTGRESQL_TEST_CONN)
    try:
        cursor = conn.cursor()
        for entity in reversed(ENTITIES):
            cursor.execute(f"DROP TABLE IF EXISTS {entity.name} CASCADE")
        conn.commit()
    finally:
        conn.close()


@pytest.fixture(params=[
    "memory",
    "sqlite",
    pytest.param("mongodb", marks=mongodb_available),
    pytest.param("postgresql", marks=postgresql_available),
])
def storage(request, temp_dir):
    """A fresh, empty storage backend."""
    backend = request.param
    if backend == "memory":
        store = MemoryStorage()
    elif backend == "sqlite":
        adapter = get_database_adapter("sqlite", os.path.join(temp_dir, "test.db"))
        store = SQLStorage(adapter)
    elif backend == "mongodb":
        store = MongoStorage(MONGODB_TEST_URL, f"storefront_test_{uuid.uuid4().hex[:8]}")
    else:
        _drop_postgresql_tables()
        store = SQLStorage(get_database_adapter("postgresql", POSTGRESQL_TEST_CONN))

    yield store

    if backend == "mongodb":
        store.client.drop_database(store.db_name)
    store.close()
    if backend == "postgresql":
        _drop_postgresql_tables()


@pytest.fixture
def memory_storage():
    return MemoryStorage()


@pytest.fixture
def settings(temp_dir):
    """Settings for an app on the memory backend with uploads in a temp dir."""
    return Settings(
        storage_backend="memory",
        uploads_dir=os.path.join(temp_dir, "uploads"),
        seed_data=True,
        log_level="WARNING",
    )


@pytest.fixture
def client(settings):
    """Test client over a fully wired app; the lifespan runs inside the block."""
    from fastapi.testclient import TestClient
    from storefront.app import create_app

    with TestClient(create_app(settings)) as test_client:
        yield test_client
