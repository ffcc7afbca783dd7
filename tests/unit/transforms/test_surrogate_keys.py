"""Unit tests for surrogate key factories."""

from __future__ import annotations

from uuid import UUID

import pytest

from core.errors import ShrikeConfigError
from transforms.surrogate_keys import (
    build_key_factory,
    hashed_key_factory,
    random_key_factory,
)


def test_random_key_factory_returns_distinct_uuids() -> None:
    """Random keys should differ even for the same natural key."""
    factory = random_key_factory()

    first = factory(("Puma concolor",))
    second = factory(("Puma concolor",))

    assert first != second and UUID(first).version == 4


def test_hashed_key_factory_is_stable_across_factories() -> None:
    """Hashed keys should repeat for the same table and natural key."""
    first = hashed_key_factory("tax")(("Puma concolor", "Animalia"))
    second = hashed_key_factory("tax")(("Puma concolor", "Animalia"))

    assert first == second and UUID(first).version == 5


def test_hashed_key_factory_scopes_keys_by_table() -> None:
    """The same natural key should get different ids in different tables."""
    natural_key = ("39.5", "-87.4")

    assert hashed_key_factory("loc")(natural_key) != hashed_key_factory("taxloc")(natural_key)


def test_hashed_key_factory_separates_key_parts() -> None:
    """Keys whose parts concatenate to the same text should still differ."""
    factory = hashed_key_factory("tax")

    assert factory(("ab", "c")) != factory(("a", "bc"))


def test_build_key_factory_rejects_unknown_strategy() -> None:
    """Unknown strategies should raise a config error."""
    with pytest.raises(ShrikeConfigError):
        build_key_factory("sequential", "tax")
    assert True
