"""Schema-model registry and metadata-locator resolution.

A model is a SQLAlchemy declarative base registered under a name.  Its three
metadata layers are addressed by convention as resource references keyed by
that name:

  res://*/<name>.csdl   conceptual layer -- the mapped entity classes
  res://*/<name>.ssdl   storage layer    -- the tables (MetaData)
  res://*/<name>.msl    mapping layer    -- entity class -> table

register_model() is applied to the declarative base of each model module;
importing the module registers the model.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Callable, TypeVar

from sqlalchemy import MetaData, Table
from sqlalchemy.orm import DeclarativeBase

from catalog_store.domain.errors import MetadataError

LAYER_EXTENSIONS = ("csdl", "ssdl", "msl")

B = TypeVar("B", bound=type[DeclarativeBase])

_RESOURCE_RE = re.compile(r"^res://\*/(?P<name>.+)\.(?P<ext>csdl|ssdl|msl)$")

_REGISTRY: dict[str, SchemaModel] = {}


@dataclass(frozen=True)
class SchemaModel:
    name: str
    base: type[DeclarativeBase]

    @property
    def conceptual(self) -> tuple[type, ...]:
        """Entity classes mapped by this model."""
        return tuple(mapper.class_ for mapper in self.base.registry.mappers)

    @property
    def storage(self) -> MetaData:
        return self.base.metadata

    @property
    def mapping(self) -> dict[type, Table]:
        return {
            mapper.class_: mapper.local_table
            for mapper in self.base.registry.mappers
        }

    def maps(self, entity_type: type) -> bool:
        return entity_type in self.conceptual


def register_model(name: str) -> Callable[[B], B]:
    """Class decorator registering a declarative base under a model name."""

    def decorator(base: B) -> B:
        existing = _REGISTRY.get(name)
        if existing is not None and existing.base is not base:
            raise ValueError(f"Model {name!r} is already registered to {existing.base!r}")
        _REGISTRY[name] = SchemaModel(name=name, base=base)
        return base

    return decorator


def registered_models() -> dict[str, SchemaModel]:
    return dict(_REGISTRY)


def build_locator(model_name: str) -> str:
    return "|".join(f"res://*/{model_name}.{ext}" for ext in LAYER_EXTENSIONS)


def _parse_locator(locator: str) -> str:
    """Validate the three layer references and return the model name they share."""
    resources = locator.split("|") if locator else []
    if len(resources) != len(LAYER_EXTENSIONS):
        raise MetadataError(
            f"Metadata locator must reference {len(LAYER_EXTENSIONS)} resources: {locator!r}"
        )

    names = set()
    for resource, expected_ext in zip(resources, LAYER_EXTENSIONS):
        match = _RESOURCE_RE.match(resource)
        if match is None or match["ext"] != expected_ext:
            raise MetadataError(
                f"Expected a res://*/<model>.{expected_ext} reference, got {resource!r}"
            )
        names.add(match["name"])

    if len(names) != 1:
        raise MetadataError(f"Metadata locator mixes models {sorted(names)}")
    return names.pop()


def locator_model_name(locator: str) -> str:
    return _parse_locator(locator)


def resolve_metadata(locator: str) -> SchemaModel:
    """Resolve a metadata locator to its registered SchemaModel.

    Raises MetadataError when the locator is malformed or names an unknown model.
    """
    name = _parse_locator(locator)
    try:
        return _REGISTRY[name]
    except KeyError:
        raise MetadataError(f"No schema model registered as {name!r}") from None
