"""Public SDK surface for Shrike.

This module provides a stable import path for pipeline users.
It re-exports the client, the source adapters and the typed models.
"""

from __future__ import annotations

from core.config import ShrikeConfig
from core.types import (
    CleanedRecord,
    LocationRow,
    OccurrenceFact,
    TableManifest,
    TableSchema,
    TaxonomyLocationRow,
    TaxonomyRow,
)
from ingest.pipeline import (
    ShredResult,
    StarSchemaManifests,
    StarSchemaPipeline,
    build_master_dataset,
    build_star_schema,
    build_views,
    shred,
)
from ingest.source_adapters import (
    EBIRD_ADAPTER,
    GBIF_ADAPTER,
    VERTNET_ADAPTER,
    SourceAdapter,
    get_source_adapter,
)
from store.dataset_sdk import ShrikeClient
from store.table_store import read_table, write_table

__all__ = [
    "CleanedRecord",
    "EBIRD_ADAPTER",
    "GBIF_ADAPTER",
    "LocationRow",
    "OccurrenceFact",
    "ShredResult",
    "ShrikeClient",
    "ShrikeConfig",
    "SourceAdapter",
    "StarSchemaManifests",
    "StarSchemaPipeline",
    "TableManifest",
    "TableSchema",
    "TaxonomyLocationRow",
    "TaxonomyRow",
    "VERTNET_ADAPTER",
    "build_master_dataset",
    "build_star_schema",
    "build_views",
    "get_source_adapter",
    "read_table",
    "shred",
    "write_table",
]
