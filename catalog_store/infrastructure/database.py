"""SQLAlchemy engine construction and store settings for SQLite data files."""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from urllib.parse import quote

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict
from sqlalchemy import Engine, create_engine, event
from sqlalchemy.engine import URL
from sqlalchemy.pool import NullPool


class StoreSettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="CATALOG_STORE_", env_file=".env", extra="ignore"
    )

    sql_echo: bool = False
    # Opening a missing data file fails unless this is set.
    create_missing_data_file: bool = False
    enforce_foreign_keys: bool = True
    busy_timeout_seconds: float = Field(default=5.0, ge=0)


@lru_cache
def get_settings() -> StoreSettings:
    """Return the process-wide settings, read once from the environment."""
    return StoreSettings()


def sqlite_url(file_path: str, create: bool = False) -> URL:
    """Build a URI-mode SQLite URL for file_path.

    mode=rw refuses to create the file; mode=rwc creates it when missing.
    """
    uri_path = quote(Path(file_path).absolute().as_posix(), safe="/:")
    return URL.create(
        "sqlite",
        database=f"file:{uri_path}",
        query={"mode": "rwc" if create else "rw", "uri": "true"},
    )


def create_store_engine(file_path: str, settings: StoreSettings) -> Engine:
    """Create an engine bound to a single SQLite data file.

    NullPool hands every checkout a fresh DBAPI connection and closes it on
    release, so disposing the owning context leaves no file handle open.
    """
    engine = create_engine(
        sqlite_url(file_path, create=settings.create_missing_data_file),
        echo=settings.sql_echo,
        poolclass=NullPool,
        connect_args={"timeout": settings.busy_timeout_seconds},
    )

    if settings.enforce_foreign_keys:

        @event.listens_for(engine, "connect")
        def _set_sqlite_pragma(dbapi_connection, connection_record):  # noqa: ANN001
            cursor = dbapi_connection.cursor()
            cursor.execute("PRAGMA foreign_keys=ON")
            cursor.close()

    return engine
