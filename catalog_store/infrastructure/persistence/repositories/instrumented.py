"""Per-call logging as a wrapper around any Repository.

LoggingRepository keeps call bracketing out of the repository core: it logs
"<Name>.<op>() invoked." before and "<Name>.<op>() completed." after every
call at INFO.  Failures are not logged again here; the wrapped repository
already logged them where they were detected.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from typing import Generic, TypeVar

from catalog_store.domain.repositories.base import (
    Predicate,
    QuerySource,
    Repository,
    SaveOptions,
)

T = TypeVar("T")
R = TypeVar("R")


class LoggingRepository(Repository[T], Generic[T]):
    def __init__(
        self,
        inner: Repository[T],
        logger: logging.Logger | None = None,
        level: int = logging.INFO,
    ) -> None:
        self._inner = inner
        self._logger = logger or logging.getLogger(__name__)
        self._level = level
        self._name = type(inner).__name__

    @property
    def inner(self) -> Repository[T]:
        return self._inner

    @contextmanager
    def _bracket(self, call: str) -> Iterator[None]:
        # call is the rendered signature, e.g. "fetch()" or "save_changes(options)"
        self._logger.log(self._level, "%s.%s invoked.", self._name, call)
        yield
        self._logger.log(self._level, "%s.%s completed.", self._name, call)

    def _call(self, call: str, fn: Callable[[], R]) -> R:
        with self._bracket(call):
            return fn()

    def fetch(self) -> QuerySource[T]:
        return self._call("fetch()", self._inner.fetch)

    def get_all(self) -> list[T]:
        return self._call("get_all()", self._inner.get_all)

    def find(self, predicate: Predicate) -> QuerySource[T]:
        return self._call("find()", lambda: self._inner.find(predicate))

    def single(self, predicate: Predicate) -> T:
        return self._call("single()", lambda: self._inner.single(predicate))

    def first(self, predicate: Predicate) -> T:
        return self._call("first()", lambda: self._inner.first(predicate))

    def add(self, entity: T) -> None:
        self._call("add()", lambda: self._inner.add(entity))

    def attach(self, entity: T) -> None:
        self._call("attach()", lambda: self._inner.attach(entity))

    def delete(self, entity: T) -> None:
        self._call("delete()", lambda: self._inner.delete(entity))

    def delete_where(self, predicate: Predicate) -> int:
        return self._call(
            "delete_where()", lambda: self._inner.delete_where(predicate)
        )

    def save_changes(self, options: SaveOptions | None = None) -> int:
        call = "save_changes()" if options is None else "save_changes(options)"
        return self._call(call, lambda: self._inner.save_changes(options))

    def dispose(self) -> None:
        self._call("dispose()", self._inner.dispose)

    def __getattr__(self, name: str):
        # Anything outside the contract (state, context, ...) is read straight
        # from the wrapped repository, unlogged.
        if name.startswith("_"):
            raise AttributeError(name)
        return getattr(self._inner, name)

    def __repr__(self) -> str:
        return f"<LoggingRepository {self._inner!r}>"
