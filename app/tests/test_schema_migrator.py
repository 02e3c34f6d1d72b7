from sqlalchemy import create_engine, inspect, text
from sqlalchemy.exc import OperationalError
from sqlalchemy.pool import StaticPool
from app.services import schema_migrator
from app.services.schema_migrator import (
    APPLIED,
    FAILED,
    SKIPPED,
    add_coordinate_columns,
    run_startup_migrations,
    widen_photo_url,
)


def _legacy_engine():
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    with engine.begin() as conn:
        conn.execute(text("CREATE TABLE properties (id INTEGER PRIMARY KEY, title VARCHAR(255))"))
        conn.execute(
            text("CREATE TABLE property_photos (id INTEGER PRIMARY KEY, photo_url VARCHAR(500))")
        )
    return engine


def test_adds_missing_coordinate_columns_once():
    engine = _legacy_engine()
    assert add_coordinate_columns(engine) == APPLIED

    columns = {col["name"] for col in inspect(engine).get_columns("properties")}
    assert {"latitude", "longitude"} <= columns

    assert add_coordinate_columns(engine) == SKIPPED


def test_missing_table_is_skipped():
    engine = create_engine("sqlite:///:memory:", poolclass=StaticPool)
    assert add_coordinate_columns(engine) == SKIPPED


def test_photo_url_widening_only_runs_on_postgres():
    assert widen_photo_url(_legacy_engine()) == SKIPPED


def test_current_schema_is_a_no_op(test_engine):
    assert run_startup_migrations(test_engine) == {
        "widen_photo_url": SKIPPED,
        "add_coordinate_columns": SKIPPED,
    }


def test_failures_are_recorded_not_raised(monkeypatch):
    def broken(engine):
        raise OperationalError("ALTER TABLE", {}, Exception("permission denied"))

    monkeypatch.setattr(
        schema_migrator,
        "MIGRATIONS",
        (("broken", broken), ("add_coordinate_columns", add_coordinate_columns)),
    )
    assert run_startup_migrations(_legacy_engine()) == {
        "broken": FAILED,
        "add_coordinate_columns": APPLIED,
    }
