"""Taxonomy-location association builder.

This module joins cleaned records to the taxonomy and location
dimensions and keeps one association row per co-occurring pair.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable

from core.types import CleanedRecord, LocationRow, TaxonomyLocationRow, TaxonomyRow
from transforms.deduplication import assign_surrogate_keys
from transforms.dimension_index import index_locations, index_taxonomy
from transforms.surrogate_keys import KeyFactory


@dataclass(frozen=True)
class ResolvedPairs:
    """Association rows plus the number of records that found no match."""

    rows: tuple[TaxonomyLocationRow, ...]
    unmatched_count: int


def resolve_taxonomy_locations(
    taxonomy: Iterable[TaxonomyRow],
    locations: Iterable[LocationRow],
    records: Iterable[CleanedRecord],
    key_factory: KeyFactory,
) -> ResolvedPairs:
    """Build the taxonomy-location dimension.

    Args:
        taxonomy: Taxonomy dimension rows.
        locations: Location dimension rows.
        records: Cleaned records the dimensions were built from.
        key_factory: Surrogate key generator for the association.

    Returns:
        One row per distinct ``(tax_id, loc_id)`` pair that occurs in
        at least one record. Records missing from either dimension are
        counted and left out.

    Raises:
        ShrikeTransformError: If a dimension repeats a natural key.
    """
    tax_ids = index_taxonomy(taxonomy)
    loc_ids = index_locations(locations)
    pairs: list[tuple[str, str]] = []
    unmatched_count = 0
    for record in records:
        tax_id = tax_ids.get(record.taxonomy)
        loc_id = loc_ids.get(record.coordinates)
        if tax_id is None or loc_id is None:
            unmatched_count += 1
            continue
        pairs.append((tax_id, loc_id))
    rows = tuple(
        TaxonomyLocationRow(taxloc_id=taxloc_id, tax_id=tax_id, loc_id=loc_id)
        for taxloc_id, (tax_id, loc_id) in assign_surrogate_keys(pairs, key_factory)
    )
    return ResolvedPairs(rows=rows, unmatched_count=unmatched_count)
