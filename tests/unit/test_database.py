"""Unit tests for catalog_store/infrastructure/database.py.

Tests cover StoreSettings defaults, env var override, URL construction and
the SQLite engine's connect-time pragmas.
"""

from sqlalchemy import Engine
from sqlalchemy.pool import NullPool

from catalog_store.infrastructure.database import (
    StoreSettings,
    create_store_engine,
    get_settings,
    sqlite_url,
)


# --- StoreSettings ---

def test_settings_default_does_not_create_missing_files(monkeypatch):
    monkeypatch.delenv("CATALOG_STORE_CREATE_MISSING_DATA_FILE", raising=False)
    assert StoreSettings().create_missing_data_file is False


def test_settings_default_enforces_foreign_keys(monkeypatch):
    monkeypatch.delenv("CATALOG_STORE_ENFORCE_FOREIGN_KEYS", raising=False)
    assert StoreSettings().enforce_foreign_keys is True


def test_settings_reads_sql_echo_from_env(monkeypatch):
    monkeypatch.setenv("CATALOG_STORE_SQL_ECHO", "true")
    assert StoreSettings().sql_echo is True


def test_settings_explicit_values_win():
    assert StoreSettings(busy_timeout_seconds=1.5).busy_timeout_seconds == 1.5


def test_get_settings_is_cached():
    assert get_settings() is get_settings()


# --- sqlite_url ---

def test_sqlite_url_uses_read_write_mode_by_default(tmp_path):
    assert sqlite_url(str(tmp_path / "catalog.db")).query["mode"] == "rw"


def test_sqlite_url_create_mode(tmp_path):
    assert sqlite_url(str(tmp_path / "catalog.db"), create=True).query["mode"] == "rwc"


def test_sqlite_url_is_uri_form(tmp_path):
    url = sqlite_url(str(tmp_path / "catalog.db"))
    assert url.database.startswith("file:/")
    assert url.query["uri"] == "true"


def test_sqlite_url_makes_relative_paths_absolute():
    assert sqlite_url("catalog.db").database.endswith("/catalog.db")


def test_sqlite_url_escapes_spaces(tmp_path):
    assert "%20" in sqlite_url(str(tmp_path / "my catalog.db")).database


# --- create_store_engine ---

def test_engine_uses_null_pool(tmp_path):
    engine = create_store_engine(str(tmp_path / "catalog.db"), StoreSettings())
    assert isinstance(engine, Engine)
    assert isinstance(engine.pool, NullPool)
    engine.dispose()


def test_engine_enables_foreign_keys(tmp_path):
    engine = create_store_engine(
        str(tmp_path / "catalog.db"), StoreSettings(create_missing_data_file=True)
    )
    with engine.connect() as conn:
        assert conn.exec_driver_sql("PRAGMA foreign_keys").scalar() == 1
    engine.dispose()


def test_engine_can_leave_foreign_keys_off(tmp_path):
    settings = StoreSettings(create_missing_data_file=True, enforce_foreign_keys=False)
    engine = create_store_engine(str(tmp_path / "catalog.db"), settings)
    with engine.connect() as conn:
        assert conn.exec_driver_sql("PRAGMA foreign_keys").scalar() == 0
    engine.dispose()


def test_engine_creates_file_only_when_allowed(tmp_path):
    path = tmp_path / "catalog.db"
    engine = create_store_engine(str(path), StoreSettings(create_missing_data_file=True))
    with engine.connect():
        pass
    engine.dispose()
    assert path.exists()
