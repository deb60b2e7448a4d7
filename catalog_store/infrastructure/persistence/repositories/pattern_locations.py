"""Repository for PatternLocation records."""

from __future__ import annotations

import logging
from typing import cast

from catalog_store.infrastructure.database import StoreSettings
from catalog_store.infrastructure.persistence.connection import build_connection_string
from catalog_store.infrastructure.persistence.context import StorageContext
from catalog_store.infrastructure.persistence.factory import create_context
from catalog_store.infrastructure.persistence.models.catalog import (
    MODEL_NAME,
    PatternCatalogContext,
    PatternLocation,
)

from .base import SqlRepository


class PatternLocationRepository(SqlRepository[PatternLocation]):
    """PatternLocation repository over a pattern catalog data file.

    The schema descriptor and model name are fixed here so callers only ever
    name a data file.  Passing context= instead wraps an already open
    PatternCatalogContext in shared mode.
    """

    def __init__(
        self,
        file_path: str | None = None,
        *,
        context: StorageContext | None = None,
        settings: StoreSettings | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        super().__init__(
            PatternLocation,
            file_path=file_path,
            context_factory=PatternCatalogContext,
            model_name=MODEL_NAME,
            context=context,
            settings=settings,
            logger=logger,
        )


def open_pattern_catalog(
    file_path: str,
    settings: StoreSettings | None = None,
    logger: logging.Logger | None = None,
) -> PatternCatalogContext:
    """Open a pattern catalog data file for use by shared-mode repositories.

    The caller owns the returned context and must dispose it (or use it as a
    context manager).
    """
    connection_string = build_connection_string(file_path, MODEL_NAME, logger)
    context = create_context(
        connection_string, PatternCatalogContext, settings=settings, log=logger
    )
    return cast(PatternCatalogContext, context)
