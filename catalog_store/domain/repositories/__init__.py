"""Domain repository interfaces.

The abstraction is defined here with abc.ABC and @abstractmethod.
The SQLAlchemy implementation lives in catalog_store/infrastructure/persistence/
and is selected by the concrete per-entity repositories.
"""

from .base import Predicate, QuerySource, Repository, SaveOptions

__all__ = [
    "Predicate",
    "QuerySource",
    "Repository",
    "SaveOptions",
]
