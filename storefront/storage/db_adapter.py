"""
Database adapters for the SQL storage backend.

An adapter hides the driver differences between SQLite and PostgreSQL:
connection setup, placeholder style, row shape and the driver's exception
classes. Queries are written once with ``?`` placeholders.
"""
import logging
import os
import sqlite3
import threading
from enum import Enum
from typing import Any, Optional, Sequence, Tuple

logger = logging.getLogger(__name__)


def _lower(value):
    return value.lower() if isinstance(value, str) else value


class DatabaseType(str, Enum):
    SQLITE = "sqlite"
    POSTGRESQL = "postgresql"


class BaseDatabaseAdapter:
    """Common adapter surface."""

    db_type: DatabaseType
    # Driver exception classes, filled in by subclasses
    integrity_errors: Tuple[type, ...] = ()
    driver_errors: Tuple[type, ...] = ()

    def connect(self):
        raise NotImplementedError

    def close(self, conn) -> None:
        conn.close()

    def normalize_query(self, query: str) -> str:
        return query

    def execute(self, cursor, query: str, params: Optional[Sequence[Any]] = None):
        cursor.execute(self.normalize_query(query), tuple(params or ()))
        return cursor

    def describe(self) -> str:
        raise NotImplementedError


class SQLiteAdapter(BaseDatabaseAdapter):
    """SQLite adapter. ``:memory:`` databases share one connection."""

    db_type = DatabaseType.SQLITE
    integrity_errors = (sqlite3.IntegrityError,)
    driver_errors = (sqlite3.Error,)

    def __init__(self, db_path: str):
        self.db_path = db_path
        self._shared = None
        self._shared_lock = threading.RLock()
        if db_path == ":memory:":
            self._shared = self._open()
        else:
            db_dir = os.path.dirname(os.path.abspath(db_path))
            if db_dir:
                os.makedirs(db_dir, exist_ok=True)

    def _open(self):
        conn = sqlite3.connect(self.db_path, check_same_thread=False)
        conn.row_factory = sqlite3.Row
        # Built-in LOWER only folds ASCII letters
        conn.create_function("LOWER", 1, _lower, deterministic=True)
        return conn

    def connect(self):
        if self._shared is not None:
            self._shared_lock.acquire()
            return self._shared
        return self._open()

    def close(self, conn) -> None:
        if conn is self._shared:
            self._shared_lock.release()
            return
        conn.close()

    def dispose(self) -> None:
        if self._shared is not None:
            self._shared.close()
            self._shared = None

    def describe(self) -> str:
        return self.db_path


class PostgreSQLAdapter(BaseDatabaseAdapter):
    """PostgreSQL adapter on psycopg2 (install the ``postgresql`` extra)."""

    db_type = DatabaseType.POSTGRESQL

    def __init__(self, dsn: str):
        import psycopg2
        import psycopg2.extras

        self._psycopg2 = psycopg2
        self._cursor_factory = psycopg2.extras.RealDictCursor
        self.integrity_errors = (psycopg2.IntegrityError,)
        self.driver_errors = (psycopg2.Error,)
        self.dsn = dsn

    def connect(self):
        return self._psycopg2.connect(self.dsn, cursor_factory=self._cursor_factory)

    def normalize_query(self, query: str) -> str:
        return query.replace("?", "%s")

    def describe(self) -> str:
        # Never expose the password
        return " ".join(p for p in self.dsn.split() if not p.startswith("password="))

    def dispose(self) -> None:
        """Connections are per-operation; nothing is pooled."""


def get_database_adapter(db_type: str, target: str) -> BaseDatabaseAdapter:
    """
    Create the adapter for ``db_type``.

    Args:
        db_type: 'sqlite' or 'postgresql'
        target: SQLite file path, or a libpq connection string
    """
    db_type = DatabaseType(db_type.lower())
    if db_type == DatabaseType.POSTGRESQL:
        logger.info("Using PostgreSQL database adapter")
        return PostgreSQLAdapter(target)
    logger.info(f"Using SQLite database adapter: {target}")
    return SQLiteAdapter(target)
