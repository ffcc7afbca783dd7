"""Core constants used across Shrike modules.

This module centralizes non-domain-specific constants.
Keeping values here avoids magic literals in business logic.
"""

from __future__ import annotations

DEFAULT_SIG_FIGS = 7
LATITUDE_MIN = -90
LATITUDE_MAX = 90
LONGITUDE_MIN = -180
LONGITUDE_MAX = 180
FIELD_DELIMITER = "\t"
GBIF_NULL_TOKEN = "\\N"
EBIRD_DATA_RESOURCE_ID = "43"
SUPPORTED_RAW_EXTENSIONS = (".txt", ".tsv", ".csv", ".gz")
RECORDS_FILE_NAME = "records.jsonl"
MANIFEST_FILE_NAME = "manifest.json"
LANCE_DIR_NAME = "data.lance"
VIEW_FILE_SUFFIX = ".tsv"
TABLE_SCHEMA_VERSION = 1
TAXONOMY_TABLE_NAME = "tax"
LOCATION_TABLE_NAME = "loc"
TAXONOMY_LOCATION_TABLE_NAME = "taxloc"
OCCURRENCE_TABLE_NAME = "occ"
SURROGATE_KEY_RANDOM = "random"
SURROGATE_KEY_HASHED = "hashed"
SUPPORTED_SURROGATE_KEY_STRATEGIES = (SURROGATE_KEY_RANDOM, SURROGATE_KEY_HASHED)
DEFAULT_SURROGATE_KEY_STRATEGY = SURROGATE_KEY_RANDOM
SUPPORTED_SOURCE_KINDS = ("gbif", "ebird", "vertnet")
DEFAULT_SOURCE_KIND = "gbif"
