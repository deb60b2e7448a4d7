"""Entity connection strings for SQLite data files.

An entity connection string carries three parts:

  provider connection string   Data Source=<file path>
  metadata locator             res://*/<model>.csdl|res://*/<model>.ssdl|res://*/<model>.msl
  provider                     the fixed identifier of the embedded engine

and renders as

  metadata=<locator>;provider=<provider>;provider connection string="<pcs>"

The rendered form is kept stable so strings stored by existing hosts keep
parsing.
"""

from __future__ import annotations

import logging
import re

from pydantic import BaseModel, ConfigDict

from catalog_store.domain.errors import ArgumentError

from .metadata import build_locator, locator_model_name

logger = logging.getLogger(__name__)

PROVIDER = "System.Data.SQLite"
DATA_SOURCE_PREFIX = "Data Source="

_ENTITY_CONNECTION_RE = re.compile(
    r'^metadata=(?P<metadata>[^;]*);'
    r'provider=(?P<provider>[^;]*);'
    r'provider connection string="(?P<pcs>.*)"$'
)


class EntityConnectionString(BaseModel):
    model_config = ConfigDict(frozen=True)

    provider_connection_string: str
    metadata: str
    provider: str = PROVIDER

    @property
    def data_source(self) -> str:
        """The data-file path embedded in the provider connection string."""
        return self.provider_connection_string.removeprefix(DATA_SOURCE_PREFIX)

    @property
    def model_name(self) -> str:
        return locator_model_name(self.metadata)

    def __str__(self) -> str:
        return (
            f"metadata={self.metadata};"
            f"provider={self.provider};"
            f'provider connection string="{self.provider_connection_string}"'
        )

    @classmethod
    def parse(cls, text: str) -> EntityConnectionString:
        """Parse the rendered form produced by str()."""
        if not text:
            raise ArgumentError("connection_string")
        match = _ENTITY_CONNECTION_RE.match(text)
        if match is None or not match["pcs"].startswith(DATA_SOURCE_PREFIX):
            raise ArgumentError(
                "connection_string", f"Malformed entity connection string: {text!r}"
            )
        return cls(
            provider_connection_string=match["pcs"],
            metadata=match["metadata"],
            provider=match["provider"],
        )


def build_connection_string(
    file_path: str | None,
    model_name: str | None,
    log: logging.Logger | None = None,
) -> EntityConnectionString:
    """Assemble the entity connection string for a data file and model name.

    Raises ArgumentError if either input is None or empty.
    """
    log = log or logger

    if not model_name:
        log.error("ArgumentError: model_name")
        raise ArgumentError("model_name")
    if not file_path:
        log.error("ArgumentError: file_path")
        raise ArgumentError("file_path")

    return EntityConnectionString(
        provider_connection_string=f"{DATA_SOURCE_PREFIX}{file_path}",
        metadata=build_locator(model_name),
    )
