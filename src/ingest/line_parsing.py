"""Tab-delimited line splitting for raw source dumps."""

from __future__ import annotations

from typing import Iterable

from core.constants import FIELD_DELIMITER
from ingest.source_adapters import SourceAdapter


def split_line(line: str) -> list[str]:
    """Split a line on tabs and trim every value."""
    return [value.strip() for value in line.split(FIELD_DELIMITER)]


def split_ragged_line(line: str, width: int) -> list[str]:
    """Split a line on tabs, padding or truncating to ``width`` values.

    eBird dumps end some lines with a dangling tab and others without
    the final empty column, so the column count drifts by one.
    """
    values = line.split(FIELD_DELIMITER)
    if len(values) < width:
        values.extend([""] * (width - len(values)))
    return values[:width]


def split_raw_line(line: str, adapter: SourceAdapter) -> tuple[str, ...] | None:
    """Split a raw line according to the adapter's split mode.

    Args:
        line: Raw line without its terminator.
        adapter: Source adapter describing the layout.

    Returns:
        Values aligned with ``adapter.raw_fields``, or ``None`` when a
        strict or trimmed line has the wrong number of columns.
    """
    if adapter.null_token:
        line = line.replace(adapter.null_token, "")
    if adapter.split_mode == "ragged":
        return tuple(split_ragged_line(line, adapter.width))
    if adapter.split_mode == "trimmed":
        values = split_line(line)
    else:
        values = line.split(FIELD_DELIMITER)
    if len(values) != adapter.width:
        return None
    return tuple(values)


def join_line(values: Iterable[str]) -> str:
    """Join values into one tab-delimited line."""
    return FIELD_DELIMITER.join(values)
