"""Storage-context factory.

create_context() opens the data file named by an entity connection string and
hands the open connection to a schema descriptor: a callable (normally a
StorageContext subclass) that builds the schema-bound context.  Concrete
repositories supply the descriptor, so the generic repository never needs to
know which schema it is serving.

Failures are logged at error severity and raised once; there is no retry and
no fallback.
"""

from __future__ import annotations

import logging
from typing import Callable

from sqlalchemy import Connection
from sqlalchemy.exc import SQLAlchemyError

from catalog_store.domain.errors import (
    ArgumentError,
    InstantiationError,
    StoreConnectionError,
)
from catalog_store.infrastructure.database import (
    StoreSettings,
    create_store_engine,
    get_settings,
)

from .connection import EntityConnectionString
from .context import StorageContext

logger = logging.getLogger(__name__)

ContextFactory = Callable[[Connection, str], StorageContext]


def open_connection(
    connection_string: EntityConnectionString,
    settings: StoreSettings,
    log: logging.Logger | None = None,
) -> Connection:
    """Open and probe a connection to the data file.

    Raises StoreConnectionError if the file is missing (and may not be created)
    or is not a SQLite database.
    """
    log = log or logger
    data_source = connection_string.data_source
    engine = create_store_engine(data_source, settings)
    connection: Connection | None = None
    try:
        connection = engine.connect()
        connection.exec_driver_sql("PRAGMA schema_version").scalar()
        # The probe autobegins a transaction; end it so the session owns the next one.
        connection.rollback()
    except SQLAlchemyError as exc:
        if connection is not None:
            connection.close()
        engine.dispose()
        log.error("StoreConnectionError: cannot open %s: %s", data_source, exc)
        raise StoreConnectionError(f"Cannot open data file {data_source!r}") from exc
    return connection


def create_context(
    connection_string: EntityConnectionString | str,
    context_factory: ContextFactory,
    settings: StoreSettings | None = None,
    log: logging.Logger | None = None,
) -> StorageContext:
    """Open the data file and build a schema-bound StorageContext over it.

    The returned context owns the connection; disposing it closes the file.
    """
    log = log or logger
    settings = settings or get_settings()

    if context_factory is None:
        log.error("ArgumentError: context_factory")
        raise ArgumentError("context_factory")
    if isinstance(connection_string, str):
        try:
            connection_string = EntityConnectionString.parse(connection_string)
        except ArgumentError as exc:
            log.error("ArgumentError: %s", exc)
            raise

    connection = open_connection(connection_string, settings, log)

    context: StorageContext | None = None
    try:
        context = context_factory(connection, connection_string.metadata)
        if not isinstance(context, StorageContext):
            raise TypeError(
                f"Context factory returned {type(context).__name__}, not a StorageContext"
            )
        if settings.create_missing_data_file:
            context.create_schema()
    except Exception as exc:
        log.error("InstantiationError: %s", exc)
        if isinstance(context, StorageContext):
            context.dispose()
        else:
            engine = connection.engine
            connection.close()
            engine.dispose()
        if isinstance(exc, InstantiationError):
            raise
        raise InstantiationError(
            f"Cannot construct storage context for {connection_string.metadata!r}"
        ) from exc

    log.debug("Opened %r on %s", context, connection_string.data_source)
    return context
