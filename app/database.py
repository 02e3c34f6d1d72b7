from typing import List, Optional
from sqlalchemy import create_engine, text
from sqlalchemy.orm import Session, sessionmaker, declarative_base
from app.config import settings
import logging
import os

logger = logging.getLogger(__name__)

DATABASE_URL = settings.database_url

# Safety check: Prevent accidental production database usage in tests
if os.getenv("TESTING") == "true" and not DATABASE_URL.startswith("sqlite"):
    import warnings
    warnings.warn(
        f"Tests are configured but DATABASE_URL points to non-SQLite: {DATABASE_URL[:50]}...\n"
        "Set DATABASE_URL=sqlite:///:memory: before importing app modules.",
        RuntimeWarning,
        stacklevel=2,
    )

# SQLite needs check_same_thread, PostgreSQL doesn't
if DATABASE_URL.startswith("sqlite"):
    from sqlalchemy.pool import NullPool

    engine_kwargs = {
        "connect_args": {"check_same_thread": False},
        "poolclass": NullPool,  # No connection pooling for SQLite
        "echo": False,
    }
else:
    connect_args = {"connect_timeout": settings.DB_CONNECT_TIMEOUT}
    if settings.DATABASE_SSL:
        # Managed Postgres (RDS) presents a certificate we don't pin
        connect_args["sslmode"] = "require"
    engine_kwargs = {
        "connect_args": connect_args,
        "pool_size": settings.DB_POOL_SIZE,
        "max_overflow": settings.DB_MAX_OVERFLOW,
        "pool_pre_ping": True,  # Verify connections before using
        "pool_recycle": 1800,
        "pool_timeout": settings.DB_POOL_TIMEOUT,
        "echo": False,
    }

engine = create_engine(DATABASE_URL, **engine_kwargs)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
Base = declarative_base()


def connect() -> Session:
    """Check a connection out of the pool for a multi-statement unit of work.

    The returned session already holds a live connection, so connection
    failures surface here rather than on the first query. Callers own the
    session and must close it.
    """
    db = SessionLocal()
    try:
        db.connection()
    except Exception:
        db.close()
        raise
    return db


def query(sql: str, params: Optional[dict] = None) -> List[dict]:
    """Run one parameterized statement on its own connection."""
    with engine.begin() as conn:
        result = conn.execute(text(sql), params or {})
        if not result.returns_rows:
            return []
        return [dict(row) for row in result.mappings()]


def check_connection() -> bool:
    try:
        query("SELECT 1")
        return True
    except Exception as exc:
        logger.warning(f"Database connectivity check failed: {exc}")
        return False
