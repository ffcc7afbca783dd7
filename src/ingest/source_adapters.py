"""Column layouts and parsing rules for each supported raw source.

Every source dump is a tab-delimited file with its own fixed column
order. An adapter names those columns, says which of them form the
taxonomy and coordinate natural keys, and derives the versioned table
schemas the source's records are materialized with.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

from core.constants import (
    EBIRD_DATA_RESOURCE_ID,
    GBIF_NULL_TOKEN,
    TABLE_SCHEMA_VERSION,
)
from core.errors import ShrikeConfigError
from core.types import TableSchema

SplitMode = Literal["strict", "ragged", "trimmed"]

DERIVED_FIELDS = ("lat", "lon", "precision", "year", "month", "day", "season")
FACT_DERIVED_FIELDS = ("precision", "year", "month", "day", "season")


@dataclass(frozen=True)
class SourceAdapter:
    """Raw layout and fact-table shape of one occurrence source.

    Attributes:
        name: Source kind identifier.
        raw_fields: Ordered raw column names.
        taxonomy_fields: Columns forming the taxonomy natural key.
        name_field: Column validated as the scientific name.
        occurrence_id_field: Column holding the source's occurrence id.
        latitude_field: Raw decimal latitude column.
        longitude_field: Raw decimal longitude column.
        precision_field: Raw coordinate precision column, if any.
        year_field: Raw year column, if any.
        month_field: Raw month column, if any.
        day_field: Raw day column, if any.
        date_field: ``YYYY-MM-DD`` column used when year/month/day are absent.
        dropped_fields: Raw columns not carried into cleaned records.
        split_mode: Line splitting rule.
        null_token: Literal marker replaced by an empty string before splitting.
        excluded_resource: ``(column, value)`` pair of records to skip.
        distinct_lines: Whether identical raw lines collapse into one record.
        fact_dimension_ids: Whether fact rows expose tax_id and loc_id.
        fact_natural_keys: Whether fact rows keep taxonomy and coordinates.
        sql_escape_views: Whether view export doubles single quotes.
    """

    name: str
    raw_fields: tuple[str, ...]
    taxonomy_fields: tuple[str, ...]
    name_field: str
    occurrence_id_field: str
    latitude_field: str
    longitude_field: str
    precision_field: str | None = None
    year_field: str | None = None
    month_field: str | None = None
    day_field: str | None = None
    date_field: str | None = None
    dropped_fields: tuple[str, ...] = ()
    split_mode: SplitMode = "strict"
    null_token: str | None = None
    excluded_resource: tuple[str, str] | None = None
    distinct_lines: bool = False
    fact_dimension_ids: bool = True
    fact_natural_keys: bool = True
    sql_escape_views: bool = False

    @property
    def width(self) -> int:
        """Expected number of raw columns."""
        return len(self.raw_fields)

    @property
    def attribute_fields(self) -> tuple[str, ...]:
        """Raw columns carried through unchanged, in raw order."""
        consumed = set(self.taxonomy_fields) | set(self.dropped_fields)
        consumed |= {
            field
            for field in (
                self.latitude_field,
                self.longitude_field,
                self.precision_field,
                self.year_field,
                self.month_field,
                self.day_field,
            )
            if field is not None
        }
        return tuple(field for field in self.raw_fields if field not in consumed)

    @property
    def master_schema(self) -> TableSchema:
        """Schema of the cleaned master dataset."""
        fields = ("uuid",) + self.taxonomy_fields + DERIVED_FIELDS + self.attribute_fields
        return _build_schema(f"{self.name}.master", fields)

    @property
    def taxonomy_schema(self) -> TableSchema:
        """Schema of the taxonomy dimension."""
        return _build_schema(f"{self.name}.taxonomy", ("tax_id",) + self.taxonomy_fields)

    @property
    def fact_schema(self) -> TableSchema:
        """Schema of the occurrence fact table."""
        fields: tuple[str, ...] = ("taxloc_id",)
        if self.fact_dimension_ids:
            fields += ("tax_id", "loc_id")
        fields += ("uuid",)
        if self.fact_natural_keys:
            fields += self.taxonomy_fields + ("lat", "lon")
        fields += self.attribute_fields + FACT_DERIVED_FIELDS
        return _build_schema(f"{self.name}.occurrence", fields)

    def raw_index(self, field: str) -> int:
        """Return the position of a raw column."""
        return self.raw_fields.index(field)


def get_source_adapter(source_kind: str) -> SourceAdapter:
    """Look up an adapter by source kind.

    Args:
        source_kind: One of ``gbif``, ``ebird``, ``vertnet``.

    Returns:
        Matching adapter.

    Raises:
        ShrikeConfigError: If the source kind is unknown.
    """
    adapter = _ADAPTERS.get(source_kind.strip().lower())
    if adapter is None:
        supported = ", ".join(sorted(_ADAPTERS))
        raise ShrikeConfigError(
            f"Unsupported source kind '{source_kind}'. Use one of: {supported}."
        )
    return adapter


def _build_schema(name: str, fields: tuple[str, ...]) -> TableSchema:
    """Build a table schema, rejecting duplicate column names."""
    duplicates = sorted({field for field in fields if fields.count(field) > 1})
    if duplicates:
        raise ShrikeConfigError(
            f"Table schema '{name}' repeats columns: {', '.join(duplicates)}."
        )
    return TableSchema(name=name, version=TABLE_SCHEMA_VERSION, fields=fields)


# Column order of the occurrence_20120802 GBIF dump.
GBIF_ADAPTER = SourceAdapter(
    name="gbif",
    raw_fields=(
        "occurrenceid", "taxonid", "dataresourceid", "kingdom", "phylum", "class",
        "orderrank", "family", "genus", "scientificname", "kingdomoriginal",
        "phylumoriginal", "classoriginal", "orderrankoriginal", "familyoriginal",
        "genusoriginal", "scientificnameoriginal", "authororiginal", "datecollected",
        "year", "month", "basisofrecord", "countryoriginal", "countryisointerpreted",
        "locality", "county", "continentorocean", "stateprovince", "latitude",
        "latitudeinterpreted", "longitude", "longitudeinterpreted",
        "coordinateprecision", "geospatialissue", "lastindexed",
    ),
    taxonomy_fields=(
        "scientificname", "kingdom", "phylum", "class", "orderrank", "family", "genus",
    ),
    name_field="scientificname",
    occurrence_id_field="occurrenceid",
    latitude_field="latitudeinterpreted",
    longitude_field="longitudeinterpreted",
    precision_field="coordinateprecision",
    year_field="year",
    month_field="month",
    dropped_fields=(
        "kingdomoriginal", "phylumoriginal", "classoriginal", "orderrankoriginal",
        "familyoriginal", "genusoriginal", "scientificnameoriginal", "authororiginal",
        "countryoriginal", "latitude", "longitude",
    ),
    null_token=GBIF_NULL_TOKEN,
    excluded_resource=("dataresourceid", EBIRD_DATA_RESOURCE_ID),
    fact_dimension_ids=True,
    fact_natural_keys=False,
)

# Column order of the eBird reference dataset dump.
EBIRD_ADAPTER = SourceAdapter(
    name="ebird",
    raw_fields=(
        "global_unique_identifier", "taxonomic_order", "category", "common_name",
        "scientific_name", "subspecies_common_name", "subspecies_scientific_name",
        "observation_count", "breeding_bird_atlas_code", "age_sex", "country",
        "country_code", "state", "state_code", "county", "county_code", "iba_code",
        "locality", "locality_id", "locality_type", "latitude", "longitude",
        "observation_date", "time_observations_started", "trip_comments",
        "species_comments", "observer_id", "first_name", "last_name",
        "sampling_event_identifier", "protocol_type", "project_code",
        "duration_minutes", "effort_distance_km", "effort_area_ha", "number_observers",
        "all_species_reported", "group_identifier", "approved", "reviewed", "reason",
    ),
    taxonomy_fields=(
        "scientific_name", "common_name", "subspecies_common_name",
        "subspecies_scientific_name", "taxonomic_order",
    ),
    name_field="scientific_name",
    occurrence_id_field="global_unique_identifier",
    latitude_field="latitude",
    longitude_field="longitude",
    date_field="observation_date",
    split_mode="ragged",
    fact_dimension_ids=False,
    fact_natural_keys=True,
    sql_escape_views=True,
)

# Darwin Core columns of a VertNet IPT harvest.
VERTNET_ADAPTER = SourceAdapter(
    name="vertnet",
    raw_fields=(
        "url", "institutioncode", "collectioncode", "catalognumber", "occurrenceid",
        "basisofrecord", "scientificname", "kingdom", "phylum", "class", "order",
        "family", "genus", "specificepithet", "infraspecificepithet", "country",
        "stateprovince", "county", "locality", "decimallatitude", "decimallongitude",
        "coordinateprecision", "coordinateuncertaintyinmeters", "geodeticdatum",
        "eventdate", "year", "month", "day", "recordedby", "sex",
    ),
    taxonomy_fields=(
        "scientificname", "kingdom", "phylum", "class", "order", "family", "genus",
    ),
    name_field="scientificname",
    occurrence_id_field="occurrenceid",
    latitude_field="decimallatitude",
    longitude_field="decimallongitude",
    precision_field="coordinateprecision",
    year_field="year",
    month_field="month",
    day_field="day",
    split_mode="trimmed",
    distinct_lines=True,
    fact_dimension_ids=True,
    fact_natural_keys=True,
)

_ADAPTERS = {
    adapter.name: adapter for adapter in (GBIF_ADAPTER, EBIRD_ADAPTER, VERTNET_ADAPTER)
}
