"""Shrike exception hierarchy.

This module defines traceable domain errors with clear boundaries.
Each subsystem raises a specific error type for debuggability.
"""

from __future__ import annotations


class ShrikeError(Exception):
    """Base exception for all Shrike failures."""


class ShrikeConfigError(ShrikeError):
    """Raised for invalid runtime configuration."""


class ShrikeIngestError(ShrikeError):
    """Raised for raw source reading and ingest failures."""


class ShrikeTransformError(ShrikeError):
    """Raised when a dimension or join invariant is broken."""


class ShrikeStoreError(ShrikeError):
    """Raised for materialized table and export failures."""


class ShrikeDependencyError(ShrikeError):
    """Raised when an optional runtime dependency is missing."""


class ShrikeRunSpecError(ShrikeError):
    """Raised for invalid or unsupported run-spec configuration."""
