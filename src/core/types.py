"""Shared typed models.

This module defines immutable data models used by ingest, transforms
and store layers to keep stage contracts explicit and stable.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class TableSchema:
    """Named, versioned column layout of a materialized table.

    Attributes:
        name: Stable table contract name, e.g. ``gbif.master``.
        version: Contract version; readers reject other versions.
        fields: Ordered column names.
    """

    name: str
    version: int
    fields: tuple[str, ...]

    @property
    def width(self) -> int:
        """Number of columns in the schema."""
        return len(self.fields)


@dataclass(frozen=True)
class TableManifest:
    """Metadata written next to each materialized table.

    Attributes:
        schema: Table schema the rows were written with.
        row_count: Number of persisted rows.
        created_at: UTC creation timestamp.
        lance_written: Whether a Lance dataset accompanies the JSONL rows.
    """

    schema: TableSchema
    row_count: int
    created_at: datetime
    lance_written: bool


@dataclass(frozen=True)
class CleanedRecord:
    """Validated occurrence record in source-normalized form.

    Attributes:
        uuid: Fresh identifier assigned at ingest.
        taxonomy: Taxonomy natural key in the adapter's rank order.
        lat: Rounded decimal latitude text.
        lon: Rounded decimal longitude text.
        precision: Rounded coordinate precision text, or empty.
        year: Year text, or empty.
        month: Month text, or empty.
        day: Day text, or empty.
        season: Season code text, or empty.
        attributes: Remaining source fields aligned with the adapter.
    """

    uuid: str
    taxonomy: tuple[str, ...]
    lat: str
    lon: str
    precision: str
    year: str
    month: str
    day: str
    season: str
    attributes: tuple[str, ...]

    @property
    def coordinates(self) -> tuple[str, str]:
        """Location natural key."""
        return (self.lat, self.lon)


@dataclass(frozen=True)
class TaxonomyRow:
    """Taxonomy dimension row."""

    tax_id: str
    natural_key: tuple[str, ...]


@dataclass(frozen=True)
class LocationRow:
    """Location dimension row."""

    loc_id: str
    lat: str
    lon: str

    @property
    def natural_key(self) -> tuple[str, str]:
        """Coordinate pair identifying this location."""
        return (self.lat, self.lon)


@dataclass(frozen=True)
class TaxonomyLocationRow:
    """Association of a taxonomy and a location that co-occur."""

    taxloc_id: str
    tax_id: str
    loc_id: str


@dataclass(frozen=True)
class OccurrenceFact:
    """Fact row: a cleaned record with its resolved surrogate keys."""

    taxloc_id: str
    tax_id: str
    loc_id: str
    record: CleanedRecord
