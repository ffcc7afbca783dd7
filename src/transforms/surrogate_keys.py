"""Surrogate key generators for dimension tables.

Random keys are unique within one run only. Hashed keys are name-based
UUIDs over the natural key, so the same natural key gets the same id on
every run.
"""

from __future__ import annotations

from typing import Callable
from uuid import NAMESPACE_URL, uuid4, uuid5

from core.constants import SURROGATE_KEY_HASHED, SURROGATE_KEY_RANDOM
from core.errors import ShrikeConfigError

KeyFactory = Callable[[tuple[str, ...]], str]

_KEY_SEPARATOR = "\x1f"


def random_key_factory() -> KeyFactory:
    """Return a factory producing a fresh random uuid per natural key."""

    def _random_key(_natural_key: tuple[str, ...]) -> str:
        return str(uuid4())

    return _random_key


def hashed_key_factory(table_name: str) -> KeyFactory:
    """Return a factory producing name-based uuids scoped to a table.

    Args:
        table_name: Dimension name mixed into the hash so equal keys in
            different tables get different ids.
    """
    namespace = uuid5(NAMESPACE_URL, f"shrike:{table_name}")

    def _hashed_key(natural_key: tuple[str, ...]) -> str:
        return str(uuid5(namespace, _KEY_SEPARATOR.join(natural_key)))

    return _hashed_key


def build_key_factory(strategy: str, table_name: str) -> KeyFactory:
    """Build the key factory for a configured strategy.

    Args:
        strategy: ``random`` or ``hashed``.
        table_name: Dimension the keys belong to.

    Returns:
        Key factory.

    Raises:
        ShrikeConfigError: If the strategy is unknown.
    """
    if strategy == SURROGATE_KEY_RANDOM:
        return random_key_factory()
    if strategy == SURROGATE_KEY_HASHED:
        return hashed_key_factory(table_name)
    raise ShrikeConfigError(
        f"Unsupported surrogate key strategy '{strategy}'. "
        f"Use '{SURROGATE_KEY_RANDOM}' or '{SURROGATE_KEY_HASHED}'."
    )
