"""Typed repositories over SQLite pattern-catalog data files."""

from catalog_store.domain.errors import (
    ArgumentError,
    ContextDisposedError,
    EntityLookupError,
    EntityNotFoundError,
    InstantiationError,
    MetadataError,
    MultipleEntitiesFoundError,
    RepositoryDisposedError,
    RepositoryError,
    StoreConnectionError,
)
from catalog_store.domain.repositories import Repository, SaveOptions
from catalog_store.infrastructure.database import StoreSettings
from catalog_store.infrastructure.persistence import (
    LoggingRepository,
    PatternLocation,
    PatternLocationRepository,
    get_repositories,
    open_pattern_catalog,
)

__all__ = [
    "ArgumentError",
    "ContextDisposedError",
    "EntityLookupError",
    "EntityNotFoundError",
    "InstantiationError",
    "MetadataError",
    "MultipleEntitiesFoundError",
    "RepositoryDisposedError",
    "RepositoryError",
    "StoreConnectionError",
    "Repository",
    "SaveOptions",
    "StoreSettings",
    "LoggingRepository",
    "PatternLocation",
    "PatternLocationRepository",
    "get_repositories",
    "open_pattern_catalog",
]
