"""Persistence package.

Importing this package registers every schema model with the metadata
registry (so metadata locators resolve) and exports the storage machinery and
all repository implementations.
"""

from catalog_store.infrastructure.persistence.connection import (
    EntityConnectionString,
    build_connection_string,
)
from catalog_store.infrastructure.persistence.context import (
    Query,
    RecordSet,
    StorageContext,
)
from catalog_store.infrastructure.persistence.factory import create_context
from catalog_store.infrastructure.persistence.models import *  # noqa: F401, F403
from catalog_store.infrastructure.persistence.models import __all__ as _orm_all
from catalog_store.infrastructure.persistence.repositories import (
    LoggingRepository,
    PatternLocationRepository,
    Repositories,
    RepositoryState,
    SqlRepository,
    get_repositories,
    open_pattern_catalog,
)

__all__ = _orm_all + [
    "EntityConnectionString",
    "build_connection_string",
    "Query",
    "RecordSet",
    "StorageContext",
    "create_context",
    "LoggingRepository",
    "PatternLocationRepository",
    "Repositories",
    "RepositoryState",
    "SqlRepository",
    "get_repositories",
    "open_pattern_catalog",
]
