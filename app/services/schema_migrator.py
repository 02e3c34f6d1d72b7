"""Best-effort schema fixes applied once at startup.

Databases created before photos were stored as data URLs have a bounded
``property_photos.photo_url`` and no coordinate columns. Each step inspects
the live schema first, so running it against an up-to-date database is a
no-op.
"""

from typing import Dict
from sqlalchemy import inspect, text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.types import String
import logging

logger = logging.getLogger(__name__)

APPLIED = "applied"
SKIPPED = "skipped"
FAILED = "failed"

COORDINATE_COLUMNS = ("latitude", "longitude")


def _columns(engine: Engine, table: str) -> Dict[str, dict]:
    inspector = inspect(engine)
    if not inspector.has_table(table):
        return {}
    return {col["name"]: col for col in inspector.get_columns(table)}


def widen_photo_url(engine: Engine) -> str:
    if engine.dialect.name != "postgresql":
        return SKIPPED

    column = _columns(engine, "property_photos").get("photo_url")
    if column is None:
        return SKIPPED
    col_type = column["type"]
    if not isinstance(col_type, String) or col_type.length is None:
        return SKIPPED

    logger.info(f"Widening property_photos.photo_url from VARCHAR({col_type.length}) to TEXT")
    with engine.begin() as conn:
        conn.execute(text("ALTER TABLE property_photos ALTER COLUMN photo_url TYPE TEXT"))
    return APPLIED


def add_coordinate_columns(engine: Engine) -> str:
    columns = _columns(engine, "properties")
    if not columns:
        return SKIPPED

    missing = [name for name in COORDINATE_COLUMNS if name not in columns]
    if not missing:
        return SKIPPED

    column_type = "DOUBLE PRECISION" if engine.dialect.name == "postgresql" else "FLOAT"
    with engine.begin() as conn:
        for name in missing:
            logger.info(f"Adding properties.{name}")
            conn.execute(text(f"ALTER TABLE properties ADD COLUMN {name} {column_type}"))
    return APPLIED


MIGRATIONS = (
    ("widen_photo_url", widen_photo_url),
    ("add_coordinate_columns", add_coordinate_columns),
)


def run_startup_migrations(engine: Engine) -> Dict[str, str]:
    """Run every step, recording its outcome; never raises."""
    results = {}
    for name, step in MIGRATIONS:
        try:
            results[name] = step(engine)
        except SQLAlchemyError as e:
            logger.warning(f"Startup migration {name} failed: {e}")
            results[name] = FAILED
    logger.info(f"Startup migrations: {results}")
    return results
