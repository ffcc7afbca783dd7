"""Row encoding for materialized star-schema tables.

This module centralizes conversion between typed records and the
ordered string rows persisted under each table schema. It is reused
by every pipeline stage that writes or reads a table.
"""

from __future__ import annotations

from core.constants import (
    LOCATION_TABLE_NAME,
    TABLE_SCHEMA_VERSION,
    TAXONOMY_LOCATION_TABLE_NAME,
)
from core.errors import ShrikeStoreError
from core.types import (
    CleanedRecord,
    LocationRow,
    OccurrenceFact,
    TableSchema,
    TaxonomyLocationRow,
    TaxonomyRow,
)
from ingest.source_adapters import SourceAdapter

Row = tuple[str, ...]

LOCATION_SCHEMA = TableSchema(
    name=LOCATION_TABLE_NAME,
    version=TABLE_SCHEMA_VERSION,
    fields=("loc_id", "lat", "lon"),
)
TAXONOMY_LOCATION_SCHEMA = TableSchema(
    name=TAXONOMY_LOCATION_TABLE_NAME,
    version=TABLE_SCHEMA_VERSION,
    fields=("taxloc_id", "tax_id", "loc_id"),
)


def cleaned_record_to_row(record: CleanedRecord) -> Row:
    """Encode a cleaned record in master schema order."""
    return (
        (record.uuid,)
        + record.taxonomy
        + (
            record.lat,
            record.lon,
            record.precision,
            record.year,
            record.month,
            record.day,
            record.season,
        )
        + record.attributes
    )


def cleaned_record_from_row(row: Row, adapter: SourceAdapter) -> CleanedRecord:
    """Decode a master schema row into a cleaned record.

    Args:
        row: Row in ``adapter.master_schema`` order.
        adapter: Source adapter the row was written with.

    Returns:
        Cleaned record.

    Raises:
        ShrikeStoreError: If the row width does not match the schema.
    """
    _check_width(row, adapter.master_schema)
    taxonomy_end = 1 + len(adapter.taxonomy_fields)
    lat, lon, precision, year, month, day, season = row[taxonomy_end : taxonomy_end + 7]
    return CleanedRecord(
        uuid=row[0],
        taxonomy=tuple(row[1:taxonomy_end]),
        lat=lat,
        lon=lon,
        precision=precision,
        year=year,
        month=month,
        day=day,
        season=season,
        attributes=tuple(row[taxonomy_end + 7 :]),
    )


def taxonomy_row_to_row(row: TaxonomyRow) -> Row:
    """Encode a taxonomy dimension row."""
    return (row.tax_id,) + row.natural_key


def taxonomy_row_from_row(row: Row, adapter: SourceAdapter) -> TaxonomyRow:
    """Decode a taxonomy dimension row."""
    _check_width(row, adapter.taxonomy_schema)
    return TaxonomyRow(tax_id=row[0], natural_key=tuple(row[1:]))


def location_row_to_row(row: LocationRow) -> Row:
    """Encode a location dimension row."""
    return (row.loc_id, row.lat, row.lon)


def location_row_from_row(row: Row) -> LocationRow:
    """Decode a location dimension row."""
    _check_width(row, LOCATION_SCHEMA)
    loc_id, lat, lon = row
    return LocationRow(loc_id=loc_id, lat=lat, lon=lon)


def taxonomy_location_row_to_row(row: TaxonomyLocationRow) -> Row:
    """Encode a taxonomy-location association row."""
    return (row.taxloc_id, row.tax_id, row.loc_id)


def taxonomy_location_row_from_row(row: Row) -> TaxonomyLocationRow:
    """Decode a taxonomy-location association row."""
    _check_width(row, TAXONOMY_LOCATION_SCHEMA)
    taxloc_id, tax_id, loc_id = row
    return TaxonomyLocationRow(taxloc_id=taxloc_id, tax_id=tax_id, loc_id=loc_id)


def fact_to_row(fact: OccurrenceFact, adapter: SourceAdapter) -> Row:
    """Encode a fact in the adapter's fact schema order."""
    record = fact.record
    row: Row = (fact.taxloc_id,)
    if adapter.fact_dimension_ids:
        row += (fact.tax_id, fact.loc_id)
    row += (record.uuid,)
    if adapter.fact_natural_keys:
        row += record.taxonomy + (record.lat, record.lon)
    row += record.attributes
    row += (record.precision, record.year, record.month, record.day, record.season)
    return row


def _check_width(row: Row, schema: TableSchema) -> None:
    """Reject rows that do not fit the schema.

    Raises:
        ShrikeStoreError: On a width mismatch.
    """
    if len(row) != schema.width:
        raise ShrikeStoreError(
            f"Row for table '{schema.name}' has {len(row)} values, "
            f"expected {schema.width}. Rebuild the table with the current schema."
        )
