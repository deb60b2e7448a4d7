"""Storage context: one live connection, one session, per-type record sets.

A StorageContext is the unit of lifetime for a SQLite data file.  It owns the
Connection it was built with (and that connection's Engine); dispose() closes
both.  The session runs with autoflush disabled, so queries read the store
state as of the last save_changes() and never see pending inserts.
"""

from __future__ import annotations

from collections.abc import Callable, Iterator
from itertools import islice
from types import TracebackType
from typing import Any, Generic, TypeVar

from sqlalchemy import ColumnElement, Connection, Select, func, inspect, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, make_transient_to_detached

from catalog_store.domain.errors import ArgumentError, ContextDisposedError
from catalog_store.domain.repositories.base import Predicate, SaveOptions

from .metadata import SchemaModel, resolve_metadata

T = TypeVar("T")


def _is_sql_expression(predicate: Any) -> bool:
    return isinstance(predicate, ColumnElement) or hasattr(predicate, "__clause_element__")


class Query(Generic[T]):
    """Lazily evaluated, composable, restartable query over one entity type.

    Nothing touches the store until the query is iterated, and every iteration
    re-executes.  SQL predicates narrow the statement; callable predicates are
    applied in Python to the rows the statement returns.  Rows come back in
    primary-key order unless order_by() says otherwise.
    """

    def __init__(
        self,
        context: StorageContext,
        entity_type: type[T],
        criteria: tuple[Any, ...] = (),
        filters: tuple[Callable[[T], bool], ...] = (),
        ordering: tuple[Any, ...] | None = None,
        limit: int | None = None,
    ) -> None:
        self._context = context
        self._entity_type = entity_type
        self._criteria = criteria
        self._filters = filters
        self._ordering = ordering
        self._limit = limit

    @property
    def entity_type(self) -> type[T]:
        return self._entity_type

    def _derive(self, **changes: Any) -> Query[T]:
        params = dict(
            criteria=self._criteria,
            filters=self._filters,
            ordering=self._ordering,
            limit=self._limit,
        )
        params.update(changes)
        return Query(self._context, self._entity_type, **params)

    def where(self, predicate: Predicate) -> Query[T]:
        if predicate is None:
            raise ArgumentError("predicate")
        if _is_sql_expression(predicate):
            return self._derive(criteria=self._criteria + (predicate,))
        if callable(predicate):
            return self._derive(filters=self._filters + (predicate,))
        raise ArgumentError(
            "predicate", "Predicate must be a SQL expression or a callable"
        )

    def order_by(self, *clauses: Any) -> Query[T]:
        return self._derive(ordering=clauses)

    def limit(self, count: int) -> Query[T]:
        if count < 0:
            raise ArgumentError("count", "Limit must not be negative")
        return self._derive(limit=count)

    def statement(self) -> Select[tuple[T]]:
        """The SQL portion of this query; callable predicates are not included."""
        ordering = self._ordering
        if ordering is None:
            ordering = tuple(inspect(self._entity_type).primary_key)
        stmt = select(self._entity_type).where(*self._criteria).order_by(*ordering)
        if self._limit is not None and not self._filters:
            stmt = stmt.limit(self._limit)
        return stmt

    def __iter__(self) -> Iterator[T]:
        session = self._context._require_session()
        rows: Iterator[T] = iter(session.scalars(self.statement()).all())
        for predicate in self._filters:
            rows = filter(predicate, rows)
        if self._limit is not None and self._filters:
            rows = islice(rows, self._limit)
        return rows

    def all(self) -> list[T]:
        return list(self)

    def first_or_none(self) -> T | None:
        query = self if self._filters else self.limit(1)
        return next(iter(query), None)

    def count(self) -> int:
        if self._filters:
            return sum(1 for _ in self)
        session = self._context._require_session()
        counted = select(func.count()).select_from(self.statement().subquery())
        return session.execute(counted).scalar_one()

    def __repr__(self) -> str:
        return f"<Query {self._entity_type.__name__}>"


class RecordSet(Generic[T]):
    """Per-entity-type view into a StorageContext."""

    def __init__(self, context: StorageContext, entity_type: type[T]) -> None:
        self._context = context
        self._entity_type = entity_type

    @property
    def entity_type(self) -> type[T]:
        return self._entity_type

    def _check(self, entity: T) -> Session:
        if entity is None:
            raise ArgumentError("entity")
        if not isinstance(entity, self._entity_type):
            raise ArgumentError(
                "entity",
                f"Expected {self._entity_type.__name__}, got {type(entity).__name__}",
            )
        return self._context._require_session()

    def query(self) -> Query[T]:
        self._context._require_session()
        return Query(self._context, self._entity_type)

    def add_object(self, entity: T) -> None:
        self._check(entity).add(entity)

    def attach(self, entity: T) -> None:
        """Track entity as already persisted, without issuing an INSERT.

        The primary key must be populated; later attribute changes are written
        as UPDATEs by the next save.
        """
        session = self._check(entity)
        state = inspect(entity)
        if state.pending:
            raise ArgumentError("entity", "Entity is already pending insert")
        if state.transient:
            key = state.mapper.primary_key_from_instance(entity)
            if any(value is None for value in key):
                raise ArgumentError("entity", "Cannot attach an entity without a primary key")
            make_transient_to_detached(entity)
        session.add(entity)

    def delete_object(self, entity: T) -> None:
        session = self._check(entity)
        state = inspect(entity)
        if state.pending:
            # Never written, so removing it just cancels the insert.
            session.expunge(entity)
            return
        if state.transient:
            raise ArgumentError("entity", "Entity is not tracked by this context")
        session.delete(entity)


class StorageContext:
    """Schema-bound session over one open connection.

    Subclasses are the schema descriptors handed to the context factory; they
    usually only add typed record-set properties.
    """

    def __init__(self, connection: Connection, metadata: str) -> None:
        self._model = resolve_metadata(metadata)
        self._connection = connection
        self._session: Session | None = Session(
            bind=connection, autoflush=False, expire_on_commit=False
        )
        self._record_sets: dict[type, RecordSet[Any]] = {}
        self._unaccepted = False

    @property
    def model(self) -> SchemaModel:
        return self._model

    @property
    def connection(self) -> Connection:
        return self._connection

    @property
    def is_disposed(self) -> bool:
        return self._session is None

    def _require_session(self) -> Session:
        if self._session is None:
            raise ContextDisposedError(f"{type(self).__name__} has been disposed")
        return self._session

    def record_set(self, entity_type: type[T]) -> RecordSet[T]:
        self._require_session()
        if not self._model.maps(entity_type):
            raise ArgumentError(
                "entity_type",
                f"{entity_type.__name__} is not mapped by model {self._model.name!r}",
            )
        record_set = self._record_sets.get(entity_type)
        if record_set is None:
            record_set = self._record_sets[entity_type] = RecordSet(self, entity_type)
        return record_set

    @property
    def has_changes(self) -> bool:
        session = self._require_session()
        if self._unaccepted or session.new or session.deleted:
            return True
        return any(session.is_modified(obj) for obj in session.dirty)

    def save_changes(
        self, options: SaveOptions = SaveOptions.ACCEPT_ALL_CHANGES_AFTER_SAVE
    ) -> int:
        """Write every pending change as one unit and return how many objects changed.

        Without ACCEPT_ALL_CHANGES_AFTER_SAVE the changes are written inside the
        open transaction and stay unaccepted until accept_all_changes() or
        discard_changes().  A failed save rolls the transaction back.
        """
        session = self._require_session()
        written = (
            len(session.new)
            + len(session.deleted)
            + sum(1 for obj in session.dirty if session.is_modified(obj))
        )
        try:
            session.flush()
            if options & SaveOptions.ACCEPT_ALL_CHANGES_AFTER_SAVE:
                session.commit()
                self._unaccepted = False
            else:
                self._unaccepted = self._unaccepted or written > 0
        except SQLAlchemyError:
            session.rollback()
            self._unaccepted = False
            raise
        return written

    def accept_all_changes(self) -> None:
        self._require_session().commit()
        self._unaccepted = False

    def discard_changes(self) -> None:
        self._require_session().rollback()
        self._unaccepted = False

    def create_schema(self) -> None:
        """Create any of the model's tables missing from the data file, then commit."""
        session = self._require_session()
        self._model.storage.create_all(session.connection())
        session.commit()

    def dispose(self) -> None:
        """Close the session, the connection and its engine.  Safe to call twice."""
        session, self._session = self._session, None
        if session is None:
            return
        self._record_sets.clear()
        engine = self._connection.engine
        try:
            session.close()
            self._connection.close()
        finally:
            engine.dispose()

    def __enter__(self) -> StorageContext:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.dispose()

    def __repr__(self) -> str:
        state = "disposed" if self.is_disposed else "open"
        return f"<{type(self).__name__} model={self._model.name!r} {state}>"
