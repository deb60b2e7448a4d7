"""Unit tests for ORM model structure.

Verifies table names, nullability, keys, constraints and model registration.
No database connection is required.
"""

import catalog_store.infrastructure.persistence  # noqa: F401  registers all models
from catalog_store.infrastructure.persistence.context import StorageContext
from catalog_store.infrastructure.persistence.metadata import registered_models
from catalog_store.infrastructure.persistence.models import __all__ as models_all
from catalog_store.infrastructure.persistence.models.catalog import (
    MODEL_NAME,
    CatalogBase,
    PatternCatalogContext,
    PatternLocation,
)


# --- Table names ---

def test_pattern_location_tablename():
    assert PatternLocation.__tablename__ == "pattern_locations"


# --- Nullable / not-null columns ---

def test_pattern_name_is_not_nullable():
    assert PatternLocation.__table__.c["pattern_name"].nullable is False


def test_file_path_is_not_nullable():
    assert PatternLocation.__table__.c["file_path"].nullable is False


def test_line_number_is_nullable():
    assert PatternLocation.__table__.c["line_number"].nullable is True


def test_category_is_nullable():
    assert PatternLocation.__table__.c["category"].nullable is True


# --- Keys and constraints ---

def test_primary_key_is_location_id():
    assert [c.name for c in PatternLocation.__table__.primary_key.columns] == ["location_id"]


def test_site_is_unique():
    names = {c.name for c in PatternLocation.__table__.constraints}
    assert "uq_pattern_locations_site" in names


def test_created_at_has_python_default():
    assert PatternLocation.__table__.c["created_at"].default is not None


# --- Registration ---

def test_catalog_model_is_registered():
    assert registered_models()[MODEL_NAME].base is CatalogBase


def test_pattern_location_uses_catalog_metadata():
    assert PatternLocation.__table__ is CatalogBase.metadata.tables["pattern_locations"]


def test_context_is_a_storage_context():
    assert issubclass(PatternCatalogContext, StorageContext)


def test_package_exports():
    assert {"PatternLocation", "PatternCatalogContext", "CatalogBase"} <= set(models_all)
