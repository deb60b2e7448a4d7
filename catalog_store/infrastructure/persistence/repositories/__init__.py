"""Concrete SQLAlchemy repository implementations.

Exports the generic SqlRepository, the per-entity repositories, the logging
wrapper, and get_repositories() for binding every repository to one shared
StorageContext.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from catalog_store.infrastructure.persistence.context import StorageContext

from .base import RepositoryState, SqlRepository
from .instrumented import LoggingRepository
from .pattern_locations import PatternLocationRepository, open_pattern_catalog


@dataclass
class Repositories:
    """All repository instances sharing a single StorageContext."""

    pattern_locations: PatternLocationRepository


def get_repositories(
    context: StorageContext, logger: logging.Logger | None = None
) -> Repositories:
    """Construct all repositories in shared mode over the given context.

    The context stays owned by the caller; disposing these repositories
    leaves it open:

        with open_pattern_catalog(path) as context:
            repos = get_repositories(context)
            repos.pattern_locations.add(location)
            repos.pattern_locations.save_changes()
    """
    return Repositories(
        pattern_locations=PatternLocationRepository(context=context, logger=logger),
    )


__all__ = [
    "LoggingRepository",
    "PatternLocationRepository",
    "Repositories",
    "RepositoryState",
    "SqlRepository",
    "get_repositories",
    "open_pattern_catalog",
]
