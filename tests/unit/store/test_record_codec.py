"""Unit tests for table row encoding."""

from __future__ import annotations

import pytest

from core.errors import ShrikeStoreError
from core.types import CleanedRecord, OccurrenceFact
from ingest.source_adapters import EBIRD_ADAPTER, GBIF_ADAPTER, VERTNET_ADAPTER
from store.record_codec import (
    cleaned_record_from_row,
    cleaned_record_to_row,
    fact_to_row,
    location_row_from_row,
)


def _record_for(adapter) -> CleanedRecord:
    return CleanedRecord(
        uuid="r1",
        taxonomy=tuple(f"rank-{index}" for index in range(len(adapter.taxonomy_fields))),
        lat="34.5",
        lon="-118.25",
        precision="0.01",
        year="2010",
        month="5",
        day="",
        season="2",
        attributes=tuple(f"attr-{index}" for index in range(len(adapter.attribute_fields))),
    )


@pytest.mark.parametrize("adapter", [GBIF_ADAPTER, EBIRD_ADAPTER, VERTNET_ADAPTER])
def test_master_rows_fit_master_schema(adapter) -> None:
    """Encoded master rows should match the schema and decode to the same record."""
    record = _record_for(adapter)

    row = cleaned_record_to_row(record)

    assert len(row) == adapter.master_schema.width
    assert cleaned_record_from_row(row, adapter) == record


@pytest.mark.parametrize("adapter", [GBIF_ADAPTER, EBIRD_ADAPTER, VERTNET_ADAPTER])
def test_fact_rows_fit_fact_schema(adapter) -> None:
    """Encoded fact rows should line up with the adapter's fact schema."""
    record = _record_for(adapter)
    fact = OccurrenceFact(taxloc_id="tl1", tax_id="t1", loc_id="l1", record=record)

    row = dict(zip(adapter.fact_schema.fields, fact_to_row(fact, adapter)))

    assert len(row) == adapter.fact_schema.width
    assert (row["taxloc_id"], row["uuid"], row["season"]) == ("tl1", "r1", "2")
    assert row.get("tax_id") == ("t1" if adapter.fact_dimension_ids else None)
    assert row.get("lat") == ("34.5" if adapter.fact_natural_keys else None)


def test_decoding_rejects_rows_of_wrong_width() -> None:
    """Rows that do not fit the schema should raise a store error."""
    with pytest.raises(ShrikeStoreError):
        location_row_from_row(("l1", "34.5"))
    assert True
