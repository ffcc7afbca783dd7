"""Raw line ingest into cleaned occurrence records.

This module turns raw dump lines into validated, source-normalized
records. Bad lines and invalid records are counted and skipped; they
never abort the batch.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Iterable
from uuid import uuid4

from core.types import CleanedRecord
from ingest.line_parsing import split_raw_line
from ingest.source_adapters import SourceAdapter
from transforms.field_cleaning import (
    cleanup_data,
    parse_date,
    season_of,
    valid_lat_lon,
    valid_name,
)


@dataclass(frozen=True)
class IngestResult:
    """Cleaned records plus per-outcome line counters.

    Attributes:
        records: Records that passed validation.
        line_count: Non-blank lines seen.
        duplicate_count: Lines skipped as exact repeats.
        malformed_count: Lines with the wrong number of columns.
        excluded_count: Lines from an excluded data resource.
        rejected_count: Lines failing name or coordinate validation.
    """

    records: tuple[CleanedRecord, ...]
    line_count: int
    duplicate_count: int
    malformed_count: int
    excluded_count: int
    rejected_count: int


def new_record_id() -> str:
    """Return a randomly generated record uuid."""
    return str(uuid4())


def ingest_lines(
    lines: Iterable[str],
    adapter: SourceAdapter,
    sig_figs: int,
    id_factory: Callable[[], str] = new_record_id,
) -> IngestResult:
    """Clean and validate raw lines for one source.

    Args:
        lines: Raw dump lines.
        adapter: Layout of the source.
        sig_figs: Decimal places kept for coordinates and precision.
        id_factory: Record id generator.

    Returns:
        Ingest result with cleaned records and counters.
    """
    records: list[CleanedRecord] = []
    seen_lines: set[str] = set()
    line_count = duplicate_count = malformed_count = excluded_count = rejected_count = 0
    for raw_line in lines:
        line = raw_line.rstrip("\r\n")
        if not line.strip():
            continue
        line_count += 1
        if adapter.distinct_lines:
            if line in seen_lines:
                duplicate_count += 1
                continue
            seen_lines.add(line)
        values = split_raw_line(line, adapter)
        if values is None:
            malformed_count += 1
            continue
        if _is_excluded(values, adapter):
            excluded_count += 1
            continue
        record = clean_record(values, adapter, sig_figs, id_factory())
        if record is None:
            rejected_count += 1
            continue
        records.append(record)
    return IngestResult(
        records=tuple(records),
        line_count=line_count,
        duplicate_count=duplicate_count,
        malformed_count=malformed_count,
        excluded_count=excluded_count,
        rejected_count=rejected_count,
    )


def clean_record(
    values: tuple[str, ...],
    adapter: SourceAdapter,
    sig_figs: int,
    record_id: str,
) -> CleanedRecord | None:
    """Build a cleaned record from split raw values.

    Args:
        values: Values aligned with ``adapter.raw_fields``.
        adapter: Layout of the source.
        sig_figs: Decimal places kept for coordinates and precision.
        record_id: Identifier assigned to the record.

    Returns:
        Cleaned record, or ``None`` if name or coordinates are invalid.
    """
    raw = dict(zip(adapter.raw_fields, values))
    if not valid_name(raw[adapter.name_field]):
        return None
    raw_lat = raw[adapter.latitude_field]
    raw_lon = raw[adapter.longitude_field]
    if not valid_lat_lon(raw_lat, raw_lon):
        return None
    year, month, day = _raw_date_parts(raw, adapter)
    cleaned = cleanup_data(
        sig_figs,
        raw_lat,
        raw_lon,
        raw[adapter.precision_field] if adapter.precision_field else "",
        year,
        month,
        day,
    )
    return CleanedRecord(
        uuid=record_id,
        taxonomy=tuple(raw[field] for field in adapter.taxonomy_fields),
        lat=cleaned.lat,
        lon=cleaned.lon,
        precision=cleaned.precision,
        year=cleaned.year,
        month=cleaned.month,
        day=cleaned.day,
        season=season_of(cleaned.lat, cleaned.month),
        attributes=tuple(raw[field] for field in adapter.attribute_fields),
    )


def _raw_date_parts(raw: dict[str, str], adapter: SourceAdapter) -> tuple[str, str, str]:
    """Return raw year, month and day text for a record."""
    if adapter.date_field is not None:
        return parse_date(raw[adapter.date_field])
    return (
        raw[adapter.year_field] if adapter.year_field else "",
        raw[adapter.month_field] if adapter.month_field else "",
        raw[adapter.day_field] if adapter.day_field else "",
    )


def _is_excluded(values: tuple[str, ...], adapter: SourceAdapter) -> bool:
    """Return whether a record belongs to an excluded data resource."""
    if adapter.excluded_resource is None:
        return False
    field, excluded_value = adapter.excluded_resource
    return values[adapter.raw_index(field)] == excluded_value
