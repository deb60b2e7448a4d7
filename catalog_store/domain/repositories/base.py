"""Generic repository base interface.

Repository[T] is the root abstraction for every data-access object in this
package.  The SQLAlchemy implementation lives in
catalog_store/infrastructure/persistence/repositories/ and is wired by the
concrete per-entity repositories.

Design notes:
  - All methods are synchronous; the backing store is a local file.
  - T is a mapped entity class.  Entities are tracked, so attribute changes on
    an added or attached entity are written by the next save_changes().
  - Predicates are either SQLAlchemy boolean expressions
    (``PatternLocation.pattern_name == "Observer"``), evaluated by the store,
    or plain callables ``entity -> bool``, evaluated in Python.
  - Mutations are pending until save_changes(); nothing is auto-flushed.
  - Python has no overloading, so Delete(predicate) is spelled delete_where().
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Callable, Iterator
from enum import IntFlag
from types import TracebackType
from typing import TYPE_CHECKING, Any, Generic, Protocol, TypeVar, Union

if TYPE_CHECKING:
    from sqlalchemy import ColumnElement

T = TypeVar("T")
T_co = TypeVar("T_co", covariant=True)

Predicate = Union["ColumnElement[bool]", Callable[[Any], bool]]


class SaveOptions(IntFlag):
    """Controls what the store does with local state after a successful save.

    NONE writes pending changes inside the open transaction but leaves them
    unaccepted; the caller later accepts (commits) or discards (rolls back).
    ACCEPT_ALL_CHANGES_AFTER_SAVE writes and accepts in one step.
    """

    NONE = 0
    ACCEPT_ALL_CHANGES_AFTER_SAVE = 1


class QuerySource(Protocol[T_co]):
    """A lazily evaluated, composable, restartable sequence of entities."""

    def __iter__(self) -> Iterator[T_co]: ...

    def where(self, predicate: Predicate) -> QuerySource[T_co]: ...

    def all(self) -> list[T_co]: ...


class Repository(ABC, Generic[T]):
    """Abstract query/mutation contract for one entity type."""

    @abstractmethod
    def fetch(self) -> QuerySource[T]:
        """Return a lazy query over every T; callers may append filters before iterating."""

    @abstractmethod
    def get_all(self) -> list[T]:
        """Eagerly materialise fetch()."""

    @abstractmethod
    def find(self, predicate: Predicate) -> QuerySource[T]:
        """Return a lazy query over the entities satisfying predicate."""

    @abstractmethod
    def single(self, predicate: Predicate) -> T:
        """Return the one entity satisfying predicate.

        Raises EntityNotFoundError for zero matches and
        MultipleEntitiesFoundError for more than one (both are LookupErrors).
        """

    @abstractmethod
    def first(self, predicate: Predicate) -> T:
        """Return the first entity satisfying predicate; EntityNotFoundError if none."""

    @abstractmethod
    def add(self, entity: T) -> None:
        """Mark entity pending-insert."""

    @abstractmethod
    def attach(self, entity: T) -> None:
        """Mark an externally constructed entity as already persisted."""

    @abstractmethod
    def delete(self, entity: T) -> None:
        """Mark entity pending-removal."""

    @abstractmethod
    def delete_where(self, predicate: Predicate) -> int:
        """Mark every entity satisfying predicate pending-removal; return how many."""

    @abstractmethod
    def save_changes(self, options: SaveOptions | None = None) -> int:
        """Flush pending changes as one unit; return the number of objects written."""

    @abstractmethod
    def dispose(self) -> None:
        """Release owned resources.  The repository must not be used afterwards."""

    def __enter__(self) -> Repository[T]:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.dispose()
