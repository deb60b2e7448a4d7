"""Generic SQLAlchemy repository over a StorageContext.

SqlRepository[T] is built in one of two modes, fixed for its lifetime:

  owning   SqlRepository(T, file_path=..., context_factory=..., model_name=...)
           builds the entity connection string, opens the data file through
           create_context() and disposes the context in dispose().
  shared   SqlRepository(T, context=...)
           wraps a context someone else opened and never disposes it.

Every failure inside an operation is logged once at error severity through the
injected logger and re-raised unchanged.  Call bracketing (invoked/completed)
is the job of LoggingRepository, not of this class.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from enum import Enum
from typing import Generic, TypeVar

from catalog_store.domain.errors import (
    ArgumentError,
    EntityNotFoundError,
    MultipleEntitiesFoundError,
    RepositoryDisposedError,
)
from catalog_store.domain.repositories.base import Predicate, Repository, SaveOptions
from catalog_store.infrastructure.database import StoreSettings
from catalog_store.infrastructure.persistence.connection import build_connection_string
from catalog_store.infrastructure.persistence.context import (
    Query,
    RecordSet,
    StorageContext,
)
from catalog_store.infrastructure.persistence.factory import (
    ContextFactory,
    create_context,
)

T = TypeVar("T")


class RepositoryState(str, Enum):
    CREATED = "created"
    ACTIVE = "active"
    DISPOSED = "disposed"


class SqlRepository(Repository[T], Generic[T]):
    def __init__(
        self,
        entity_type: type[T],
        *,
        file_path: str | None = None,
        context_factory: ContextFactory | None = None,
        model_name: str | None = None,
        context: StorageContext | None = None,
        settings: StoreSettings | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        self._state = RepositoryState.CREATED
        self._logger = logger or logging.getLogger(__name__)
        self._entity_type = entity_type
        self._owns_context = context is None
        self._context: StorageContext | None = None
        self._record_set: RecordSet[T] | None = None

        if entity_type is None:
            self._logger.error("ArgumentError: entity_type")
            raise ArgumentError("entity_type")

        if context is not None:
            if file_path is not None:
                self._logger.error("ArgumentError: file_path given with a shared context")
                raise ArgumentError(
                    "file_path", "Pass either file_path or a shared context, not both"
                )
            self._context = context
        else:
            connection_string = build_connection_string(file_path, model_name, self._logger)
            self._context = create_context(
                connection_string, context_factory, settings=settings, log=self._logger
            )

        try:
            self._record_set = self._context.record_set(entity_type)
        except Exception as exc:
            self._logger.error("%s: %s", type(exc).__name__, exc)
            if self._owns_context:
                self._context.dispose()
            self._context = None
            raise

        self._state = RepositoryState.ACTIVE

    @property
    def state(self) -> RepositoryState:
        return self._state

    @property
    def owns_context(self) -> bool:
        return self._owns_context

    @property
    def entity_type(self) -> type[T]:
        return self._entity_type

    @property
    def context(self) -> StorageContext | None:
        """The underlying context; None once disposed."""
        return self._context

    def _active_record_set(self) -> RecordSet[T]:
        if self._state is not RepositoryState.ACTIVE or self._record_set is None:
            raise RepositoryDisposedError(f"{type(self).__name__} has been disposed")
        return self._record_set

    def _active_context(self) -> StorageContext:
        self._active_record_set()
        if self._context is None:
            raise RepositoryDisposedError(f"{type(self).__name__} has been disposed")
        return self._context

    @contextmanager
    def _operation(self, name: str) -> Iterator[None]:
        try:
            yield
        except Exception as exc:
            self._logger.error(
                "%s.%s() failed: %s: %s", type(self).__name__, name, type(exc).__name__, exc
            )
            raise

    # --- queries ---

    def fetch(self) -> Query[T]:
        with self._operation("fetch"):
            return self._active_record_set().query()

    def get_all(self) -> list[T]:
        with self._operation("get_all"):
            return self._active_record_set().query().all()

    def find(self, predicate: Predicate) -> Query[T]:
        with self._operation("find"):
            return self._active_record_set().query().where(predicate)

    def single(self, predicate: Predicate) -> T:
        with self._operation("single"):
            matches = self._active_record_set().query().where(predicate).limit(2).all()
            if not matches:
                raise EntityNotFoundError(
                    f"No {self._entity_type.__name__} matches the predicate"
                )
            if len(matches) > 1:
                raise MultipleEntitiesFoundError(
                    f"More than one {self._entity_type.__name__} matches the predicate"
                )
            return matches[0]

    def first(self, predicate: Predicate) -> T:
        with self._operation("first"):
            match = self._active_record_set().query().where(predicate).first_or_none()
            if match is None:
                raise EntityNotFoundError(
                    f"No {self._entity_type.__name__} matches the predicate"
                )
            return match

    # --- mutations ---

    def add(self, entity: T) -> None:
        with self._operation("add"):
            record_set = self._active_record_set()
            if entity is None:
                raise ArgumentError("entity")
            record_set.add_object(entity)

    def attach(self, entity: T) -> None:
        with self._operation("attach"):
            record_set = self._active_record_set()
            if entity is None:
                raise ArgumentError("entity")
            record_set.attach(entity)

    def delete(self, entity: T) -> None:
        with self._operation("delete"):
            record_set = self._active_record_set()
            if entity is None:
                raise ArgumentError("entity")
            record_set.delete_object(entity)

    def delete_where(self, predicate: Predicate) -> int:
        with self._operation("delete_where"):
            record_set = self._active_record_set()
            matches = record_set.query().where(predicate).all()
            for record in matches:
                record_set.delete_object(record)
            return len(matches)

    def save_changes(self, options: SaveOptions | None = None) -> int:
        with self._operation("save_changes"):
            context = self._active_context()
            if options is None:
                return context.save_changes()
            return context.save_changes(options)

    # --- lifetime ---

    def dispose(self) -> None:
        """Release the context if this repository owns it.

        A shared context is left open for its owner.  Either way the reference
        is dropped before release is attempted, so a failing release can never
        be repeated, and the repository cannot be used again.
        """
        if self._state is RepositoryState.DISPOSED:
            return
        context, self._context = self._context, None
        self._record_set = None
        self._state = RepositoryState.DISPOSED
        if self._owns_context and context is not None:
            with self._operation("dispose"):
                context.dispose()

    def __repr__(self) -> str:
        mode = "owning" if self._owns_context else "shared"
        return f"<{type(self).__name__}[{self._entity_type.__name__}] {mode} {self._state.value}>"
