"""Tests for catalog_store/domain/repositories/base.py."""

import pytest

from catalog_store.domain.repositories.base import Repository, SaveOptions


class _Full(Repository):
    def __init__(self):
        self.disposed = False

    def fetch(self): return []
    def get_all(self): return []
    def find(self, predicate): return []
    def single(self, predicate): return None
    def first(self, predicate): return None
    def add(self, entity): return None
    def attach(self, entity): return None
    def delete(self, entity): return None
    def delete_where(self, predicate): return 0
    def save_changes(self, options=None): return 0

    def dispose(self):
        self.disposed = True


def test_repository_cannot_be_instantiated_directly():
    with pytest.raises(TypeError):
        Repository()  # type: ignore[abstract]


def test_repository_concrete_subclass_must_implement_all_methods():
    class _Partial(Repository):
        def fetch(self): return []
        # missing the rest of the contract

    with pytest.raises(TypeError):
        _Partial()  # type: ignore[abstract]


def test_repository_full_concrete_subclass_instantiates():
    assert _Full() is not None


def test_repository_context_manager_returns_self():
    repo = _Full()
    with repo as entered:
        assert entered is repo


def test_repository_context_manager_disposes_on_exit():
    repo = _Full()
    with repo:
        pass
    assert repo.disposed is True


def test_repository_context_manager_disposes_on_error():
    repo = _Full()
    with pytest.raises(RuntimeError):
        with repo:
            raise RuntimeError("boom")
    assert repo.disposed is True


# --- SaveOptions ---

def test_save_options_none_is_falsy():
    assert not SaveOptions.NONE


def test_save_options_accept_is_not_included_in_none():
    assert not SaveOptions.NONE & SaveOptions.ACCEPT_ALL_CHANGES_AFTER_SAVE
