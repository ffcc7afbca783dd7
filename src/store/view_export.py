"""Flat view export for star-schema tables.

This module renders materialized tables as quoted, tab-separated text
files so they can be bulk loaded into a relational database.
"""

from __future__ import annotations

from pathlib import Path
from typing import Iterable

from core.constants import VIEW_FILE_SUFFIX
from core.errors import ShrikeStoreError
from ingest.line_parsing import join_line
from transforms.field_cleaning import quote_all

Row = tuple[str, ...]


def export_view(
    sink_dir: Path,
    table_name: str,
    rows: Iterable[Row],
    sql_escape: bool = False,
) -> Path:
    """Write one table as a quoted tab-separated view file.

    Args:
        sink_dir: Destination directory.
        table_name: Table name used for the file name.
        rows: Ordered string rows.
        sql_escape: Whether single quotes are doubled.

    Returns:
        Path to the written view file.

    Raises:
        ShrikeStoreError: If the view cannot be written.
    """
    view_path = sink_dir / f"{table_name}{VIEW_FILE_SUFFIX}"
    lines = [join_line(quote_all(row, sql_escape=sql_escape)) for row in rows]
    try:
        sink_dir.mkdir(parents=True, exist_ok=True)
        view_path.write_text("".join(line + "\n" for line in lines), encoding="utf-8")
    except OSError as error:
        raise ShrikeStoreError(
            f"Failed to write view {view_path}: {error}. "
            "Check write permissions and available disk space."
        ) from error
    return view_path
