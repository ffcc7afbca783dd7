"""Natural-key deduplication for dimension tables.

This module collapses cleaned records onto their taxonomy or coordinate
natural keys and assigns one surrogate key per distinct key. The order
of the emitted rows is not defined; consumers join by key.
"""

from __future__ import annotations

from typing import Hashable, Iterable, TypeVar

from core.errors import ShrikeTransformError
from core.types import CleanedRecord, LocationRow, TaxonomyRow
from transforms.surrogate_keys import KeyFactory

KeyT = TypeVar("KeyT", bound=Hashable)


def distinct_natural_keys(keys: Iterable[KeyT]) -> list[KeyT]:
    """Return each natural key once.

    Args:
        keys: Projected natural keys, duplicates allowed.

    Returns:
        Distinct keys in no particular order.
    """
    return list(set(keys))


def assign_surrogate_keys(
    keys: Iterable[tuple[str, ...]],
    key_factory: KeyFactory,
) -> list[tuple[str, tuple[str, ...]]]:
    """Pair every distinct natural key with a generated surrogate key.

    Args:
        keys: Projected natural keys, duplicates allowed.
        key_factory: Surrogate key generator.

    Returns:
        ``(surrogate_key, natural_key)`` pairs, one per distinct key.

    Raises:
        ShrikeTransformError: If the factory repeats or omits a key.
    """
    assigned: list[tuple[str, tuple[str, ...]]] = []
    seen_ids: set[str] = set()
    for natural_key in distinct_natural_keys(keys):
        surrogate_key = key_factory(natural_key)
        if not surrogate_key or surrogate_key in seen_ids:
            raise ShrikeTransformError(
                f"Surrogate key '{surrogate_key}' for natural key {natural_key!r} is empty "
                "or already assigned. Use a key factory that yields unique ids."
            )
        seen_ids.add(surrogate_key)
        assigned.append((surrogate_key, natural_key))
    return assigned


def build_taxonomy_dimension(
    records: Iterable[CleanedRecord],
    key_factory: KeyFactory,
) -> list[TaxonomyRow]:
    """Build the taxonomy dimension from cleaned records."""
    return [
        TaxonomyRow(tax_id=tax_id, natural_key=natural_key)
        for tax_id, natural_key in assign_surrogate_keys(
            (record.taxonomy for record in records), key_factory
        )
    ]


def build_location_dimension(
    records: Iterable[CleanedRecord],
    key_factory: KeyFactory,
) -> list[LocationRow]:
    """Build the location dimension from cleaned records.

    Records with an empty coordinate are skipped.
    """
    coordinates = (
        record.coordinates for record in records if record.lat != "" and record.lon != ""
    )
    return [
        LocationRow(loc_id=loc_id, lat=lat, lon=lon)
        for loc_id, (lat, lon) in assign_surrogate_keys(coordinates, key_factory)
    ]
