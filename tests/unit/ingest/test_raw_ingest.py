"""Unit tests for raw line ingest."""

from __future__ import annotations

from itertools import count

from ingest.raw_ingest import ingest_lines
from ingest.source_adapters import EBIRD_ADAPTER, GBIF_ADAPTER, VERTNET_ADAPTER
from transforms.field_cleaning import valid_lat_lon, valid_name
from tests.raw_lines import raw_line, vertnet_line


def _ids():
    counter = count(1)
    return lambda: f"rec-{next(counter)}"


def _gbif_line(**values: str) -> str:
    row = {
        "occurrenceid": "g-1",
        "dataresourceid": "12",
        "scientificname": "Puma concolor",
        "kingdom": "Animalia",
        "phylum": "Chordata",
        "class": "Mammalia",
        "orderrank": "Carnivora",
        "family": "Felidae",
        "genus": "Puma",
        "latitudeinterpreted": "34.5",
        "longitudeinterpreted": "-118.25",
        "coordinateprecision": "0.0100",
        "year": "2010",
        "month": "5",
        "countryisointerpreted": "US",
    }
    row.update(values)
    return raw_line(GBIF_ADAPTER, **row)


def test_ingest_lines_cleans_vertnet_record() -> None:
    """A valid VertNet line should become a cleaned record."""
    result = ingest_lines([vertnet_line() + "\n"], VERTNET_ADAPTER, 7, _ids())

    record = result.records[0]
    assert record.uuid == "rec-1"
    assert record.taxonomy == (
        "Peromyscus maniculatus",
        "Animalia",
        "Chordata",
        "Mammalia",
        "Rodentia",
        "",
        "Peromyscus",
    )
    assert (record.lat, record.lon, record.year, record.month, record.day, record.season) == (
        "39.539146",
        "-87.41389",
        "1990",
        "7",
        "4",
        "2",
    )


def test_ingest_lines_collapses_duplicate_vertnet_lines() -> None:
    """Identical harvest lines should produce a single record."""
    line = vertnet_line()

    result = ingest_lines([line, line, ""], VERTNET_ADAPTER, 7, _ids())

    assert len(result.records) == 1
    assert (result.line_count, result.duplicate_count) == (2, 1)


def test_ingest_lines_rejects_invalid_name_and_coordinates() -> None:
    """Records with an empty name or out-of-range coordinates should be dropped."""
    lines = [
        vertnet_line(scientificname=""),
        vertnet_line(occurrenceid="occ-2", decimallatitude="100", decimallongitude="200"),
        vertnet_line(occurrenceid="occ-3", scientificname='Peromyscus "maniculatus"'),
        vertnet_line(occurrenceid="occ-4", decimallatitude="5°52.5'N"),
    ]

    result = ingest_lines(lines, VERTNET_ADAPTER, 7, _ids())

    assert result.records == () and result.rejected_count == 4


def test_ingest_lines_excludes_ebird_republished_gbif_records() -> None:
    """GBIF records from the eBird data resource should be skipped."""
    lines = [_gbif_line(), _gbif_line(occurrenceid="g-2", dataresourceid="43")]

    result = ingest_lines(lines, GBIF_ADAPTER, 7, _ids())

    assert len(result.records) == 1 and result.excluded_count == 1


def test_ingest_lines_counts_malformed_gbif_lines() -> None:
    """Strict lines with the wrong arity should be counted and skipped."""
    lines = [_gbif_line(), _gbif_line() + "\textra"]

    result = ingest_lines(lines, GBIF_ADAPTER, 7, _ids())

    assert len(result.records) == 1 and result.malformed_count == 1


def test_ingest_lines_normalizes_gbif_fields() -> None:
    """GBIF precision should be rounded and null markers emptied."""
    result = ingest_lines([_gbif_line(locality="\\N")], GBIF_ADAPTER, 7, _ids())

    record = result.records[0]
    locality_index = GBIF_ADAPTER.attribute_fields.index("locality")
    assert (record.precision, record.season) == ("0.01", "2")
    assert record.attributes[locality_index] == ""


def test_ingest_lines_splits_ebird_observation_date() -> None:
    """eBird dates should be split into year, month and day."""
    line = raw_line(
        EBIRD_ADAPTER,
        global_unique_identifier="URN:1",
        scientific_name="Turdus migratorius",
        common_name="American Robin",
        latitude="-33.9",
        longitude="151.2",
        observation_date="2011-06-30",
    )

    result = ingest_lines([line.rsplit("\t", 1)[0]], EBIRD_ADAPTER, 7, _ids())

    record = result.records[0]
    assert (record.year, record.month, record.day, record.season) == ("2011", "6", "30", "4")


def test_ingest_lines_keeps_undated_ebird_record() -> None:
    """A malformed eBird date should leave date fields empty, not drop the record."""
    line = raw_line(
        EBIRD_ADAPTER,
        scientific_name="Turdus migratorius",
        latitude="40",
        longitude="-75",
        observation_date="sometime",
    )

    result = ingest_lines([line], EBIRD_ADAPTER, 7, _ids())

    assert (result.records[0].year, result.records[0].season) == ("", "")


def test_cleaned_records_pass_validation_again() -> None:
    """Rounded coordinates near the bounds should still validate after cleaning."""
    coordinates = [
        ("89.999999999", "179.999999999"),
        ("-89.999999999", "-179.999999999"),
        ("-0.00000001", "0.00000001"),
        ("90", "-180"),
        ("39.5391460", "-87.41389"),
    ]
    lines = [
        vertnet_line(occurrenceid=f"occ-{index}", decimallatitude=lat, decimallongitude=lon)
        for index, (lat, lon) in enumerate(coordinates)
    ]

    result = ingest_lines(lines, VERTNET_ADAPTER, 7, _ids())

    assert len(result.records) == len(coordinates)
    assert all(
        valid_lat_lon(record.lat, record.lon) and valid_name(record.taxonomy[0])
        for record in result.records
    )
    assert [record.lat for record in result.records[:3]] == ["90", "-90", "0"]
