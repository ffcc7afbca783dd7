"""Type-safe field parsing helpers for run-spec execution.

This module centralizes primitive parsing so run-spec executors stay
concise and raise consistent validation errors across CLI and SDK flows.
"""

from __future__ import annotations

from typing import Mapping

from core.constants import SUPPORTED_SOURCE_KINDS
from core.errors import ShrikeRunSpecError


def required_string(args: Mapping[str, object], field_name: str) -> str:
    """Read a required string field from a run-spec step."""
    value = optional_string(args, field_name)
    if value is None:
        raise ShrikeRunSpecError(f"Run-spec step is missing required field '{field_name}'.")
    return value


def optional_string(args: Mapping[str, object], field_name: str) -> str | None:
    """Read an optional string field from a run-spec step."""
    value = args.get(field_name)
    if value is None:
        return None
    if isinstance(value, str):
        stripped = value.strip()
        return stripped if stripped else None
    raise ShrikeRunSpecError(f"Run-spec field '{field_name}' must be a string when provided.")


def optional_bool(args: Mapping[str, object], field_name: str) -> bool | None:
    """Read an optional boolean field from a run-spec step."""
    value = args.get(field_name)
    if value is None:
        return None
    if isinstance(value, bool):
        return value
    raise ShrikeRunSpecError(f"Run-spec field '{field_name}' must be true/false.")


def optional_source_kind(args: Mapping[str, object]) -> str | None:
    """Read an optional source kind from a run-spec step."""
    value = optional_string(args, "source_kind")
    if value is None:
        return None
    normalized_value = value.lower()
    if normalized_value in SUPPORTED_SOURCE_KINDS:
        return normalized_value
    supported_rows = ", ".join(SUPPORTED_SOURCE_KINDS)
    raise ShrikeRunSpecError(f"Invalid source_kind '{value}'. Use one of: {supported_rows}.")
