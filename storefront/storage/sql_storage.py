"""
SQL implementation of the storage interface (SQLite and PostgreSQL).

Each entity kind is one table built from its ``EntityDefinition``. List and
object fields are stored as JSON text. Each operation opens a connection
through the adapter, runs in one transaction and closes it again.
"""
import json
import logging
import time
from contextlib import contextmanager
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple

from opentelemetry import trace

from storefront.exceptions import ConflictError, DuplicateRecordError, StorageError
from storefront.storage.db_adapter import BaseDatabaseAdapter
from storefront.storage.interface import Collection, StorageInterface
from storefront.storage.schema import ENTITIES, EntityDefinition
from storefront.tracing import trace_span

logger = logging.getLogger(__name__)


def escape_like(value: str) -> str:
    """Escape LIKE wildcards so the value matches literally."""
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


class SQLStorage(StorageInterface):
    """Storage backed by a relational database through a db adapter."""

    def __init__(self, adapter: BaseDatabaseAdapter, slow_query_threshold: float = 0.1):
        self.adapter = adapter
        self.backend_name = adapter.db_type.value
        self.slow_query_threshold = slow_query_threshold
        self._init_schema()
        super().__init__()
        logger.info(f"Initialized {self.backend_name} storage: {adapter.describe()}")

    def create_collection(self, entity: EntityDefinition) -> "SQLCollection":
        return SQLCollection(entity, self)

    @contextmanager
    def transaction(self):
        """Yield a cursor; commit on success, roll back on any error."""
        conn = self.adapter.connect()
        try:
            cursor = conn.cursor()
            try:
                yield cursor
                conn.commit()
            except BaseException:
                conn.rollback()
                raise
        finally:
            self.adapter.close(conn)

    def execute(self, cursor, query: str, params: Optional[Sequence[Any]] = None):
        """
        Execute a query with performance logging and tracing.

        Args:
            cursor: Database cursor
            query: SQL query string with ``?`` placeholders
            params: Query parameters

        Returns:
            Cursor after execution
        """
        query_type = query.strip().split(None, 1)[0].lower()
        start_time = time.time()
        with trace_span(
            f"db.{query_type}",
            attributes={
                "db.system": self.backend_name,
                "db.operation": query_type,
            },
            kind=trace.SpanKind.CLIENT,
        ) as span:
            try:
                result = self.adapter.execute(cursor, query, params)
            except Exception:
                duration = time.time() - start_time
                logger.error(f"Query failed after {duration:.4f}s: {query[:200]}", exc_info=True)
                raise
            duration = time.time() - start_time
            span.set_attribute("db.duration_ms", duration * 1000)
            if duration >= self.slow_query_threshold:
                query_preview = query[:200] + "..." if len(query) > 200 else query
                logger.warning(
                    f"Slow query: {duration:.4f}s - {query_preview}",
                    extra={"duration": duration, "params_count": len(params) if params else 0},
                )
                span.set_attribute("db.slow_query", True)
            else:
                logger.debug(f"Query executed in {duration:.4f}s")
            return result

    def _init_schema(self) -> None:
        """Create tables and indexes if they do not exist yet."""
        try:
            with self.transaction() as cursor:
                for entity in ENTITIES:
                    columns = ",\n    ".join(c.ddl() for c in entity.columns)
                    self.execute(cursor, f"CREATE TABLE IF NOT EXISTS {entity.name} (\n    {columns}\n)")
                    for column in entity.indexed_columns:
                        self.execute(
                            cursor,
                            f"CREATE INDEX IF NOT EXISTS idx_{entity.name}_{column} "
                            f"ON {entity.name} ({column})",
                        )
        except self.adapter.driver_errors as e:
            raise StorageError(f"Failed to initialize schema: {e}") from e

    def health_check(self) -> Dict[str, Any]:
        try:
            with self.transaction() as cursor:
                self.execute(cursor, "SELECT 1")
                cursor.fetchone()
        except self.adapter.driver_errors as e:
            logger.error("Database health check failed", exc_info=True)
            return {"status": "unhealthy", "backend": self.backend_name, "error": str(e)}
        return {"status": "healthy", "backend": self.backend_name, "database": self.adapter.describe()}

    def close(self) -> None:
        self.adapter.dispose()


class SQLCollection(Collection):
    """One table."""

    def __init__(self, entity: EntityDefinition, storage: SQLStorage):
        super().__init__(entity)
        self.storage = storage
        self.table = entity.name

    @contextmanager
    def _operation(self, action: str):
        """Run one operation, translating driver errors into storage errors."""
        adapter = self.storage.adapter
        try:
            with self.storage.transaction() as cursor:
                yield cursor
        except adapter.integrity_errors as e:
            message = str(e).lower()
            if "unique" in message or "duplicate" in message:
                field = next((c for c in self.entity.unique_columns if c in message), "id")
                raise DuplicateRecordError(self.entity.label, field) from e
            raise ConflictError(f"Cannot {action} {self.entity.label.lower()}: {e}") from e
        except adapter.driver_errors as e:
            raise StorageError(f"Failed to {action} {self.entity.label.lower()}: {e}") from e

    def _encode(self, name: str, value: Any) -> Any:
        if name in self.entity.json_columns and value is not None:
            return json.dumps(value)
        return value

    def _decode(self, row) -> Dict[str, Any]:
        document = dict(row)
        for name in self.entity.json_columns:
            if document.get(name) is not None:
                document[name] = json.loads(document[name])
        return document

    def _where(self, filters: Mapping[str, Any], ignore_case: bool) -> Tuple[str, List[Any]]:
        clauses, params = [], []
        for name, value in filters.items():
            if value is None:
                clauses.append(f"{name} IS NULL")
            elif ignore_case and isinstance(value, str):
                clauses.append(f"LOWER({name}) = LOWER(?)")
                params.append(value)
            else:
                clauses.append(f"{name} = ?")
                params.append(self._encode(name, value))
        where = f" WHERE {' AND '.join(clauses)}" if clauses else ""
        return where, params

    def insert(self, document: Dict[str, Any]) -> None:
        self.check_fields(document.keys())
        names = list(document)
        placeholders = ", ".join("?" for _ in names)
        query = f"INSERT INTO {self.table} ({', '.join(names)}) VALUES ({placeholders})"
        with self._operation("create") as cursor:
            self.storage.execute(cursor, query, [self._encode(n, document[n]) for n in names])

    def get(self, record_id: str) -> Optional[Dict[str, Any]]:
        with self._operation("get") as cursor:
            self.storage.execute(cursor, f"SELECT * FROM {self.table} WHERE id = ?", (record_id,))
            row = cursor.fetchone()
        return self._decode(row) if row else None

    def find(self, filters: Optional[Mapping[str, Any]] = None, ignore_case: bool = False) -> List[Dict[str, Any]]:
        filters = filters or {}
        self.check_fields(filters.keys())
        where, params = self._where(filters, ignore_case)
        with self._operation("list") as cursor:
            self.storage.execute(cursor, f"SELECT * FROM {self.table}{where}", params)
            rows = cursor.fetchall()
        return [self._decode(r) for r in rows]

    def search(self, query: str, fields: Sequence[str]) -> List[Dict[str, Any]]:
        self.check_fields(fields)
        if not fields:
            return []
        pattern = f"%{escape_like(query.lower())}%"
        where = " OR ".join(f"LOWER({f}) LIKE ? ESCAPE '\\'" for f in fields)
        with self._operation("search") as cursor:
            self.storage.execute(cursor, f"SELECT * FROM {self.table} WHERE {where}", [pattern] * len(fields))
            rows = cursor.fetchall()
        return [self._decode(r) for r in rows]

    def update(self, record_id: str, fields: Mapping[str, Any]) -> bool:
        self.check_fields(fields.keys())
        if not fields:
            return self.get(record_id) is not None
        assignments = ", ".join(f"{name} = ?" for name in fields)
        params = [self._encode(n, v) for n, v in fields.items()] + [record_id]
        with self._operation("update") as cursor:
            self.storage.execute(cursor, f"UPDATE {self.table} SET {assignments} WHERE id = ?", params)
            return cursor.rowcount > 0

    def delete(self, record_id: str) -> bool:
        with self._operation("delete") as cursor:
            self.storage.execute(cursor, f"DELETE FROM {self.table} WHERE id = ?", (record_id,))
            return cursor.rowcount > 0

    def delete_many(self, filters: Mapping[str, Any]) -> int:
        self.check_fields(filters.keys())
        where, params = self._where(filters, False)
        with self._operation("delete") as cursor:
            self.storage.execute(cursor, f"DELETE FROM {self.table}{where}", params)
            return cursor.rowcount

    def count(self) -> int:
        with self._operation("count") as cursor:
            self.storage.execute(cursor, f"SELECT COUNT(*) AS total FROM {self.table}")
            row = cursor.fetchone()
        return int(dict(row)["total"])
