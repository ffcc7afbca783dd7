"""Occurrence fact assembly against materialized dimensions.

Each cleaned record is joined to its tax_id and loc_id by natural key,
then to the taxloc_id of that pair. Every join is an inner join: a
record that misses any dimension produces no fact row at all.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable

from core.types import (
    CleanedRecord,
    LocationRow,
    OccurrenceFact,
    TaxonomyLocationRow,
    TaxonomyRow,
)
from transforms.dimension_index import (
    index_locations,
    index_taxonomy,
    index_taxonomy_locations,
)


@dataclass(frozen=True)
class FactAssembly:
    """Fact rows plus the number of records dropped by a join miss."""

    facts: tuple[OccurrenceFact, ...]
    unmatched_count: int


def assemble_occurrence_facts(
    taxonomy: Iterable[TaxonomyRow],
    locations: Iterable[LocationRow],
    taxonomy_locations: Iterable[TaxonomyLocationRow],
    records: Iterable[CleanedRecord],
) -> FactAssembly:
    """Build one fact row per fully resolvable cleaned record.

    Args:
        taxonomy: Taxonomy dimension rows.
        locations: Location dimension rows.
        taxonomy_locations: Taxonomy-location association rows.
        records: Cleaned records.

    Returns:
        Fact rows and the count of records without a complete match.

    Raises:
        ShrikeTransformError: If a dimension repeats a natural key.
    """
    tax_ids = index_taxonomy(taxonomy)
    loc_ids = index_locations(locations)
    taxloc_ids = index_taxonomy_locations(taxonomy_locations)
    facts: list[OccurrenceFact] = []
    unmatched_count = 0
    for record in records:
        tax_id = tax_ids.get(record.taxonomy)
        loc_id = loc_ids.get(record.coordinates)
        taxloc_id = None
        if tax_id is not None and loc_id is not None:
            taxloc_id = taxloc_ids.get((tax_id, loc_id))
        if taxloc_id is None:
            unmatched_count += 1
            continue
        facts.append(
            OccurrenceFact(taxloc_id=taxloc_id, tax_id=tax_id, loc_id=loc_id, record=record)
        )
    return FactAssembly(facts=tuple(facts), unmatched_count=unmatched_count)
