"""
Runtime configuration read from environment variables.
"""
import os
from dataclasses import dataclass
from typing import Optional


STORAGE_BACKENDS = ("memory", "sqlite", "postgresql", "mongodb")


def _env_bool(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() in ("1", "true", "yes", "on")


def _postgresql_dsn() -> str:
    """Build a libpq connection string from the DB_* variables."""
    db_host = os.getenv("DB_HOST", "localhost")
    db_port = os.getenv("DB_PORT", "5432")
    db_name = os.getenv("DB_NAME", "storefront")
    db_user = os.getenv("DB_USER", "postgres")
    db_password = os.getenv("DB_PASSWORD", "")

    if db_password:
        return f"host={db_host} port={db_port} dbname={db_name} user={db_user} password={db_password}"
    return f"host={db_host} port={db_port} dbname={db_name} user={db_user}"


@dataclass
class Settings:
    """Service settings. Build with ``Settings.from_env()`` in production."""
    storage_backend: str = "memory"
    db_path: str = "./data/storefront.db"
    postgresql_dsn: Optional[str] = None
    mongodb_url: str = "mongodb://localhost:27017"
    mongodb_db_name: str = "storefront"
    uploads_dir: str = "./uploads"
    seed_data: bool = True
    demo_username: str = "demo"
    port: int = 8000
    log_level: str = "INFO"
    slow_query_threshold: float = 0.1
    tracing_enabled: bool = False
    otel_service_name: str = "storefront"
    otel_exporter_endpoint: str = "http://localhost:4317"

    def __post_init__(self):
        self.storage_backend = self.storage_backend.lower()
        if self.storage_backend not in STORAGE_BACKENDS:
            raise ValueError(
                f"Invalid storage backend '{self.storage_backend}'. "
                f"Must be one of: {', '.join(STORAGE_BACKENDS)}"
            )
        if self.storage_backend == "postgresql" and not self.postgresql_dsn:
            self.postgresql_dsn = _postgresql_dsn()

    @classmethod
    def from_env(cls) -> "Settings":
        """Read settings from the process environment."""
        backend = os.getenv("STOREFRONT_STORAGE_BACKEND", "memory")
        return cls(
            storage_backend=backend,
            db_path=os.getenv("STOREFRONT_DB_PATH", "./data/storefront.db"),
            mongodb_url=os.getenv("MONGODB_URL", "mongodb://localhost:27017"),
            mongodb_db_name=os.getenv("MONGODB_DB_NAME", "storefront"),
            uploads_dir=os.getenv("STOREFRONT_UPLOADS_DIR", "./uploads"),
            seed_data=_env_bool("STOREFRONT_SEED_DATA", "true"),
            demo_username=os.getenv("STOREFRONT_DEMO_USER", "demo"),
            port=int(os.getenv("STOREFRONT_PORT", "8000")),
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
            slow_query_threshold=float(os.getenv("DB_QUERY_SLOW_THRESHOLD", "0.1")),
            tracing_enabled=_env_bool("OTEL_TRACING_ENABLED", "false"),
            otel_service_name=os.getenv("OTEL_SERVICE_NAME", "storefront"),
            otel_exporter_endpoint=os.getenv("OTEL_EXPORTER_OTLP_ENDPOINT", "http://localhost:4317"),
        )
