"""ORM model registry: importing this package registers every schema model
with the metadata registry so its locator resolves.
"""

from catalog_store.infrastructure.persistence.models.catalog import (
    MODEL_NAME,
    CatalogBase,
    PatternCatalogContext,
    PatternLocation,
)

__all__ = [
    "MODEL_NAME",
    "CatalogBase",
    "PatternCatalogContext",
    "PatternLocation",
]
