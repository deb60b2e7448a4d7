"""Pattern catalog model: the PatternLocation entity and its storage context."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import DateTime, Integer, Text, UniqueConstraint
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

from catalog_store.infrastructure.persistence.context import RecordSet, StorageContext
from catalog_store.infrastructure.persistence.metadata import register_model

MODEL_NAME = "PatternCatalog"


@register_model(MODEL_NAME)
class CatalogBase(DeclarativeBase):
    """Declarative base for every table in the pattern catalog data file."""


class PatternLocation(CatalogBase):
    """Where an instance of a design pattern lives in a code base.

    category is the GoF family (creational / structural / behavioral) and is
    null for patterns outside that catalogue.  line_number is null when the
    location refers to a whole file.
    """

    __tablename__ = "pattern_locations"
    __table_args__ = (
        UniqueConstraint(
            "pattern_name", "file_path", "line_number", name="uq_pattern_locations_site"
        ),
    )

    location_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    pattern_name: Mapped[str] = mapped_column(Text, nullable=False)
    category: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    file_path: Mapped[str] = mapped_column(Text, nullable=False)
    line_number: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    def __repr__(self) -> str:
        return (
            f"<PatternLocation {self.location_id} {self.pattern_name!r} "
            f"{self.file_path}:{self.line_number}>"
        )


class PatternCatalogContext(StorageContext):
    """Storage context bound to the PatternCatalog model."""

    @property
    def pattern_locations(self) -> RecordSet[PatternLocation]:
        return self.record_set(PatternLocation)
