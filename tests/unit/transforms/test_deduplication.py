"""Unit tests for natural-key deduplication."""

from __future__ import annotations

from dataclasses import replace
from itertools import count

import pytest

from core.errors import ShrikeTransformError
from core.types import CleanedRecord
from transforms.deduplication import (
    assign_surrogate_keys,
    build_location_dimension,
    build_taxonomy_dimension,
    distinct_natural_keys,
)
from transforms.surrogate_keys import random_key_factory

_MOUSE = CleanedRecord(
    uuid="r1",
    taxonomy=("Peromyscus maniculatus", "Animalia", "Rodentia"),
    lat="39.539146",
    lon="-87.41389",
    precision="",
    year="1990",
    month="7",
    day="4",
    season="2",
    attributes=(),
)


def _sequential_factory():
    counter = count(1)
    return lambda _natural_key: f"id-{next(counter)}"


def test_distinct_natural_keys_removes_duplicates() -> None:
    """Each natural key should appear once."""
    keys = distinct_natural_keys([("a",), ("b",), ("a",)])

    assert sorted(keys) == [("a",), ("b",)]


def test_assign_surrogate_keys_assigns_one_id_per_distinct_key() -> None:
    """Repeated natural keys should share a single surrogate key."""
    assigned = assign_surrogate_keys([("a",), ("a",), ("b",)], _sequential_factory())

    assert sorted(natural_key for _, natural_key in assigned) == [("a",), ("b",)]
    assert len({surrogate_key for surrogate_key, _ in assigned}) == 2


def test_assign_surrogate_keys_rejects_repeated_ids() -> None:
    """A factory that repeats ids should fail the stage."""
    with pytest.raises(ShrikeTransformError):
        assign_surrogate_keys([("a",), ("b",)], lambda _natural_key: "same")
    assert True


def test_assign_surrogate_keys_rejects_empty_ids() -> None:
    """A factory returning an empty id should fail the stage."""
    with pytest.raises(ShrikeTransformError):
        assign_surrogate_keys([("a",)], lambda _natural_key: "")
    assert True


def test_build_taxonomy_dimension_collapses_records() -> None:
    """Records sharing a taxonomy should produce one dimension row."""
    records = [
        _MOUSE,
        replace(_MOUSE, uuid="r2", lat="45.1"),
        replace(_MOUSE, uuid="r3", taxonomy=("Sorex cinereus", "Animalia", "Eulipotyphla")),
    ]

    rows = build_taxonomy_dimension(records, random_key_factory())

    assert sorted(row.natural_key[0] for row in rows) == [
        "Peromyscus maniculatus",
        "Sorex cinereus",
    ]


def test_build_location_dimension_skips_empty_coordinates() -> None:
    """Records without coordinates should not create locations."""
    records = [
        _MOUSE,
        replace(_MOUSE, uuid="r2"),
        replace(_MOUSE, uuid="r3", lat="", lon=""),
        replace(_MOUSE, uuid="r4", lat="45.1", lon="-93.2"),
    ]

    rows = build_location_dimension(records, random_key_factory())

    assert sorted(row.natural_key for row in rows) == [
        ("39.539146", "-87.41389"),
        ("45.1", "-93.2"),
    ]
