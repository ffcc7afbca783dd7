"""Hash indexes over dimension tables for natural-key joins."""

from __future__ import annotations

from typing import Hashable, Iterable, Mapping

from core.errors import ShrikeTransformError
from core.types import LocationRow, TaxonomyLocationRow, TaxonomyRow


def index_taxonomy(rows: Iterable[TaxonomyRow]) -> Mapping[tuple[str, ...], str]:
    """Map taxonomy natural keys to tax ids."""
    return _unique_index(((row.natural_key, row.tax_id) for row in rows), "taxonomy")


def index_locations(rows: Iterable[LocationRow]) -> Mapping[tuple[str, str], str]:
    """Map coordinate pairs to loc ids."""
    return _unique_index(((row.natural_key, row.loc_id) for row in rows), "location")


def index_taxonomy_locations(
    rows: Iterable[TaxonomyLocationRow],
) -> Mapping[tuple[str, str], str]:
    """Map ``(tax_id, loc_id)`` pairs to taxloc ids."""
    return _unique_index(
        (((row.tax_id, row.loc_id), row.taxloc_id) for row in rows), "taxonomy-location"
    )


def _unique_index(
    entries: Iterable[tuple[Hashable, str]],
    dimension: str,
) -> dict:
    """Build a key index, failing on a repeated natural key.

    Raises:
        ShrikeTransformError: If two rows share a natural key.
    """
    index: dict = {}
    for natural_key, surrogate_key in entries:
        if natural_key in index:
            raise ShrikeTransformError(
                f"The {dimension} dimension repeats natural key {natural_key!r}. "
                "Rebuild the dimension from a single cleaned dataset."
            )
        index[natural_key] = surrogate_key
    return index
