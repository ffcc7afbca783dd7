"""Star-schema pipeline orchestration.

This module wires raw ingest, dimension building, relationship
resolution and fact assembly into materialized stages. Every stage
writes its output table before the next stage reads it back, so a
failed stage can be rerun from the tables already on disk.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Iterable

from core.config import ShrikeConfig
from core.constants import (
    LOCATION_TABLE_NAME,
    OCCURRENCE_TABLE_NAME,
    TAXONOMY_LOCATION_TABLE_NAME,
    TAXONOMY_TABLE_NAME,
)
from core.logging_config import get_logger
from core.types import (
    CleanedRecord,
    LocationRow,
    TableManifest,
    TableSchema,
    TaxonomyLocationRow,
    TaxonomyRow,
)
from ingest.input_reader import read_raw_lines
from ingest.raw_ingest import ingest_lines
from ingest.source_adapters import SourceAdapter, get_source_adapter
from store.record_codec import (
    LOCATION_SCHEMA,
    TAXONOMY_LOCATION_SCHEMA,
    cleaned_record_from_row,
    cleaned_record_to_row,
    fact_to_row,
    location_row_from_row,
    location_row_to_row,
    taxonomy_location_row_from_row,
    taxonomy_location_row_to_row,
    taxonomy_row_from_row,
    taxonomy_row_to_row,
)
from store.table_store import read_table, write_table
from store.view_export import export_view
from transforms.deduplication import build_location_dimension, build_taxonomy_dimension
from transforms.relationship_resolver import resolve_taxonomy_locations
from transforms.star_schema import assemble_occurrence_facts
from transforms.surrogate_keys import build_key_factory

_LOGGER = get_logger(__name__)


@dataclass(frozen=True)
class StarSchemaManifests:
    """Manifests of the four tables written by one star-schema build."""

    location: TableManifest
    taxonomy: TableManifest
    taxonomy_location: TableManifest
    occurrence: TableManifest


@dataclass(frozen=True)
class ShredResult:
    """Manifests written by a full shred run."""

    master: TableManifest
    star_schema: StarSchemaManifests


class StarSchemaPipeline:
    """Runner for the materialized stages of one source kind."""

    def __init__(self, adapter: SourceAdapter, config: ShrikeConfig) -> None:
        self._adapter = adapter
        self._config = config

    @property
    def adapter(self) -> SourceAdapter:
        return self._adapter

    def build_master_dataset(self, source_uri: str, sink_path: Path) -> TableManifest:
        """Clean a raw dump into the master dataset.

        Args:
            source_uri: Raw dump file, directory or ``s3://`` prefix.
            sink_path: Master table directory.

        Returns:
            Manifest of the master table.

        Raises:
            ShrikeIngestError: If the raw dump cannot be read.
            ShrikeStoreError: If the master table cannot be written.
        """
        result = ingest_lines(
            read_raw_lines(source_uri, self._config),
            self._adapter,
            self._config.sig_figs,
        )
        manifest = write_table(
            sink_path,
            self._adapter.master_schema,
            (cleaned_record_to_row(record) for record in result.records),
        )
        _LOGGER.info(
            "master_dataset_built",
            source_kind=self._adapter.name,
            source_uri=source_uri,
            sink_path=str(sink_path),
            line_count=result.line_count,
            record_count=len(result.records),
            duplicate_count=result.duplicate_count,
            malformed_count=result.malformed_count,
            excluded_count=result.excluded_count,
            rejected_count=result.rejected_count,
        )
        return manifest

    def build_star_schema(self, source_path: Path, sink_path: Path) -> StarSchemaManifests:
        """Build the dimension, association and fact tables.

        Args:
            source_path: Master table directory.
            sink_path: Directory receiving one table directory per table.

        Returns:
            Manifests of the written tables.

        Raises:
            ShrikeStoreError: If a table cannot be read or written.
            ShrikeTransformError: If a dimension repeats a natural key.
        """
        records = self._read_master(source_path)
        location_manifest = self._write_locations(sink_path, records)
        taxonomy_manifest = self._write_taxonomy(sink_path, records)
        taxonomy = self._read_taxonomy(sink_path)
        locations = self._read_locations(sink_path)
        taxonomy_location_manifest = self._write_taxonomy_locations(
            sink_path, taxonomy, locations, records
        )
        taxonomy_locations = self._read_taxonomy_locations(sink_path)
        occurrence_manifest = self._write_occurrences(
            sink_path, taxonomy, locations, taxonomy_locations, records
        )
        manifests = StarSchemaManifests(
            location=location_manifest,
            taxonomy=taxonomy_manifest,
            taxonomy_location=taxonomy_location_manifest,
            occurrence=occurrence_manifest,
        )
        _LOGGER.info(
            "star_schema_built",
            source_kind=self._adapter.name,
            source_path=str(source_path),
            sink_path=str(sink_path),
            record_count=len(records),
            taxonomy_count=taxonomy_manifest.row_count,
            location_count=location_manifest.row_count,
            taxonomy_location_count=taxonomy_location_manifest.row_count,
            occurrence_count=occurrence_manifest.row_count,
        )
        return manifests

    def build_views(
        self,
        source_path: Path,
        sink_path: Path,
        sql_escape: bool | None = None,
    ) -> list[Path]:
        """Export the star-schema tables as quoted tab-separated files.

        Args:
            source_path: Star-schema directory written by ``build_star_schema``.
            sink_path: Directory receiving ``<table>.tsv`` files.
            sql_escape: Whether single quotes are doubled. Defaults to
                the source's own convention.

        Returns:
            Paths of the written view files.

        Raises:
            ShrikeStoreError: If a table cannot be read or a view written.
        """
        escape = self._adapter.sql_escape_views if sql_escape is None else sql_escape
        view_paths = [
            export_view(sink_path, table_name, read_table(source_path / table_name, schema), escape)
            for table_name, schema in self.star_schema_tables()
        ]
        _LOGGER.info(
            "views_exported",
            source_kind=self._adapter.name,
            sink_path=str(sink_path),
            view_count=len(view_paths),
            sql_escape=escape,
        )
        return view_paths

    def shred(self, harvest_uri: str, seq_path: Path, tables_path: Path) -> ShredResult:
        """Run the master dataset and star-schema stages back to back.

        Args:
            harvest_uri: Raw harvest file, directory or ``s3://`` prefix.
            seq_path: Master table directory.
            tables_path: Star-schema directory.

        Returns:
            Manifests of every written table.
        """
        master = self.build_master_dataset(harvest_uri, seq_path)
        star_schema = self.build_star_schema(seq_path, tables_path)
        return ShredResult(master=master, star_schema=star_schema)

    def star_schema_tables(self) -> tuple[tuple[str, TableSchema], ...]:
        """Return star-schema table names with their schemas, in build order."""
        return (
            (LOCATION_TABLE_NAME, LOCATION_SCHEMA),
            (TAXONOMY_TABLE_NAME, self._adapter.taxonomy_schema),
            (TAXONOMY_LOCATION_TABLE_NAME, TAXONOMY_LOCATION_SCHEMA),
            (OCCURRENCE_TABLE_NAME, self._adapter.fact_schema),
        )

    def _read_master(self, source_path: Path) -> list[CleanedRecord]:
        rows = read_table(source_path, self._adapter.master_schema)
        return [cleaned_record_from_row(row, self._adapter) for row in rows]

    def _write_locations(self, sink_path: Path, records: list[CleanedRecord]) -> TableManifest:
        key_factory = build_key_factory(self._config.surrogate_keys, LOCATION_TABLE_NAME)
        rows = build_location_dimension(records, key_factory)
        return self._write_dimension(
            sink_path, LOCATION_TABLE_NAME, LOCATION_SCHEMA, map(location_row_to_row, rows)
        )

    def _write_taxonomy(self, sink_path: Path, records: list[CleanedRecord]) -> TableManifest:
        key_factory = build_key_factory(self._config.surrogate_keys, TAXONOMY_TABLE_NAME)
        rows = build_taxonomy_dimension(records, key_factory)
        return self._write_dimension(
            sink_path,
            TAXONOMY_TABLE_NAME,
            self._adapter.taxonomy_schema,
            map(taxonomy_row_to_row, rows),
        )

    def _write_taxonomy_locations(
        self,
        sink_path: Path,
        taxonomy: list[TaxonomyRow],
        locations: list[LocationRow],
        records: list[CleanedRecord],
    ) -> TableManifest:
        key_factory = build_key_factory(
            self._config.surrogate_keys, TAXONOMY_LOCATION_TABLE_NAME
        )
        resolved = resolve_taxonomy_locations(taxonomy, locations, records, key_factory)
        _log_join_misses(
            self._adapter.name, TAXONOMY_LOCATION_TABLE_NAME, resolved.unmatched_count
        )
        return self._write_dimension(
            sink_path,
            TAXONOMY_LOCATION_TABLE_NAME,
            TAXONOMY_LOCATION_SCHEMA,
            map(taxonomy_location_row_to_row, resolved.rows),
        )

    def _write_occurrences(
        self,
        sink_path: Path,
        taxonomy: list[TaxonomyRow],
        locations: list[LocationRow],
        taxonomy_locations: list[TaxonomyLocationRow],
        records: list[CleanedRecord],
    ) -> TableManifest:
        assembly = assemble_occurrence_facts(taxonomy, locations, taxonomy_locations, records)
        _log_join_misses(self._adapter.name, OCCURRENCE_TABLE_NAME, assembly.unmatched_count)
        return write_table(
            sink_path / OCCURRENCE_TABLE_NAME,
            self._adapter.fact_schema,
            (fact_to_row(fact, self._adapter) for fact in assembly.facts),
        )

    def _write_dimension(
        self,
        sink_path: Path,
        table_name: str,
        schema: TableSchema,
        rows: Iterable[tuple[str, ...]],
    ) -> TableManifest:
        manifest = write_table(sink_path / table_name, schema, rows)
        _LOGGER.info(
            "dimension_built",
            source_kind=self._adapter.name,
            table=table_name,
            row_count=manifest.row_count,
        )
        return manifest

    def _read_taxonomy(self, sink_path: Path) -> list[TaxonomyRow]:
        rows = read_table(sink_path / TAXONOMY_TABLE_NAME, self._adapter.taxonomy_schema)
        return [taxonomy_row_from_row(row, self._adapter) for row in rows]

    def _read_locations(self, sink_path: Path) -> list[LocationRow]:
        rows = read_table(sink_path / LOCATION_TABLE_NAME, LOCATION_SCHEMA)
        return [location_row_from_row(row) for row in rows]

    def _read_taxonomy_locations(self, sink_path: Path) -> list[TaxonomyLocationRow]:
        rows = read_table(sink_path / TAXONOMY_LOCATION_TABLE_NAME, TAXONOMY_LOCATION_SCHEMA)
        return [taxonomy_location_row_from_row(row) for row in rows]


def build_master_dataset(
    source_kind: str,
    source_uri: str,
    sink_path: Path,
    config: ShrikeConfig,
) -> TableManifest:
    """Clean a raw dump of one source kind into its master dataset.

    Raises:
        ShrikeConfigError: If the source kind is unknown.
        ShrikeIngestError: If the raw dump cannot be read.
        ShrikeStoreError: If the master table cannot be written.
    """
    return _pipeline(source_kind, config).build_master_dataset(source_uri, sink_path)


def build_star_schema(
    source_kind: str,
    source_path: Path,
    sink_path: Path,
    config: ShrikeConfig,
) -> StarSchemaManifests:
    """Build the star schema from a master dataset of one source kind."""
    return _pipeline(source_kind, config).build_star_schema(source_path, sink_path)


def build_views(
    source_kind: str,
    source_path: Path,
    sink_path: Path,
    config: ShrikeConfig,
    sql_escape: bool | None = None,
) -> list[Path]:
    """Export the star-schema tables of one source kind as view files."""
    return _pipeline(source_kind, config).build_views(source_path, sink_path, sql_escape)


def shred(
    source_kind: str,
    harvest_uri: str,
    seq_path: Path,
    tables_path: Path,
    config: ShrikeConfig,
) -> ShredResult:
    """Build the master dataset and star schema for one harvest."""
    return _pipeline(source_kind, config).shred(harvest_uri, seq_path, tables_path)


def _pipeline(source_kind: str, config: ShrikeConfig) -> StarSchemaPipeline:
    return StarSchemaPipeline(get_source_adapter(source_kind), config)


def _log_join_misses(source_kind: str, table_name: str, unmatched_count: int) -> None:
    """Warn about records dropped by an inner join."""
    if unmatched_count == 0:
        return
    _LOGGER.warning(
        "join_miss",
        source_kind=source_kind,
        table=table_name,
        unmatched_count=unmatched_count,
    )
