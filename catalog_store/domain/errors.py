"""Error taxonomy for the catalog data-access layer.

Every error raised by this package derives from RepositoryError and also from
the closest built-in exception, so callers may catch either:

  ArgumentError              -- a required argument is None/empty (ValueError)
  EntityLookupError          -- single()/first() found no match, or single()
                                found more than one (LookupError)
  StoreConnectionError       -- the data file could not be opened (ConnectionError)
  InstantiationError         -- the schema-bound context could not be built
  DisposedError              -- a repository or context was used after dispose()
"""

from __future__ import annotations


class RepositoryError(Exception):
    """Root of every error raised by catalog_store."""


class ArgumentError(RepositoryError, ValueError):
    """A required argument was None or empty."""

    def __init__(self, argument: str, message: str | None = None) -> None:
        self.argument = argument
        super().__init__(message or f"Argument '{argument}' must not be null or empty")


class EntityLookupError(RepositoryError, LookupError):
    """A lookup that must produce a result did not."""


class EntityNotFoundError(EntityLookupError):
    """No entity satisfied the predicate."""


class MultipleEntitiesFoundError(EntityLookupError):
    """More than one entity satisfied a predicate that must match exactly once."""


class StoreConnectionError(RepositoryError, ConnectionError):
    """The backing data file could not be opened."""


class InstantiationError(RepositoryError):
    """The schema-bound storage context could not be constructed."""


class MetadataError(InstantiationError):
    """A schema-metadata locator does not resolve to a registered model."""


class DisposedError(RepositoryError, RuntimeError):
    """An object was used after it was disposed."""


class RepositoryDisposedError(DisposedError):
    pass


class ContextDisposedError(DisposedError):
    pass


__all__ = [
    "RepositoryError",
    "ArgumentError",
    "EntityLookupError",
    "EntityNotFoundError",
    "MultipleEntitiesFoundError",
    "StoreConnectionError",
    "InstantiationError",
    "MetadataError",
    "DisposedError",
    "RepositoryDisposedError",
    "ContextDisposedError",
]
