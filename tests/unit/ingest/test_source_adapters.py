"""Unit tests for source adapters and their table schemas."""

from __future__ import annotations

import pytest

from core.errors import ShrikeConfigError
from ingest.source_adapters import (
    EBIRD_ADAPTER,
    GBIF_ADAPTER,
    VERTNET_ADAPTER,
    get_source_adapter,
)


def test_get_source_adapter_is_case_insensitive() -> None:
    """Adapter lookup should normalize the source kind."""
    assert get_source_adapter(" VertNet ") is VERTNET_ADAPTER


def test_get_source_adapter_rejects_unknown_kind() -> None:
    """Unknown source kinds should raise a config error."""
    with pytest.raises(ShrikeConfigError):
        get_source_adapter("idigbio")
    assert True


@pytest.mark.parametrize("adapter", [GBIF_ADAPTER, EBIRD_ADAPTER, VERTNET_ADAPTER])
def test_schemas_have_unique_columns(adapter) -> None:
    """Every derived schema should build without duplicate columns."""
    schemas = (adapter.master_schema, adapter.taxonomy_schema, adapter.fact_schema)

    assert all(len(set(schema.fields)) == schema.width for schema in schemas)


def test_raw_widths_match_source_layouts() -> None:
    """Raw layouts should keep the documented column counts."""
    assert (GBIF_ADAPTER.width, EBIRD_ADAPTER.width, VERTNET_ADAPTER.width) == (35, 41, 30)


def test_gbif_fact_schema_carries_dimension_ids_only() -> None:
    """GBIF facts should expose tax_id and loc_id but no natural keys."""
    fields = GBIF_ADAPTER.fact_schema.fields

    assert fields[:4] == ("taxloc_id", "tax_id", "loc_id", "uuid")
    assert "scientificname" not in fields and "lat" not in fields


def test_ebird_fact_schema_carries_natural_keys_only() -> None:
    """eBird facts should keep taxonomy and coordinates but no dimension ids."""
    fields = EBIRD_ADAPTER.fact_schema.fields

    assert fields[:3] == ("taxloc_id", "uuid", "scientific_name")
    assert "tax_id" not in fields and "lat" in fields and "lon" in fields


def test_vertnet_fact_schema_carries_both() -> None:
    """VertNet facts should keep dimension ids and natural keys."""
    fields = VERTNET_ADAPTER.fact_schema.fields

    assert fields[:5] == ("taxloc_id", "tax_id", "loc_id", "uuid", "scientificname")
    assert fields[-5:] == ("precision", "year", "month", "day", "season")


def test_attribute_fields_exclude_consumed_columns() -> None:
    """Columns folded into derived fields or dropped should not repeat."""
    attributes = GBIF_ADAPTER.attribute_fields

    assert "latitudeinterpreted" not in attributes
    assert "scientificnameoriginal" not in attributes
    assert "occurrenceid" in attributes
