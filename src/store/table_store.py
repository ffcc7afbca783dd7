"""Materialized table persistence.

Every pipeline stage writes its output here before the next stage
reads it. A table is a directory holding JSONL rows keyed by column
name, an Apache Lance copy of the same rows and a manifest naming the
schema the rows were written with. Writing replaces the directory.
"""

from __future__ import annotations

import json
import shutil
from dataclasses import asdict
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Iterable

from core.constants import LANCE_DIR_NAME, MANIFEST_FILE_NAME, RECORDS_FILE_NAME
from core.errors import ShrikeDependencyError, ShrikeStoreError
from core.logging_config import get_logger
from core.types import TableManifest, TableSchema

_LOGGER = get_logger(__name__)

Row = tuple[str, ...]


def write_table(table_dir: Path, schema: TableSchema, rows: Iterable[Row]) -> TableManifest:
    """Persist rows as a table, replacing any table at the same path.

    Args:
        table_dir: Destination table directory.
        schema: Schema the rows follow.
        rows: Ordered string rows.

    Returns:
        Manifest of the written table.

    Raises:
        ShrikeStoreError: If rows do not fit the schema or writing fails.
    """
    materialized_rows = [_check_row(schema, row) for row in rows]
    _prepare_table_dir(table_dir)
    _write_jsonl_rows(table_dir, schema, materialized_rows)
    lance_written = False
    if materialized_rows:
        _write_lance_dataset(table_dir, schema, materialized_rows)
        lance_written = True
    manifest = TableManifest(
        schema=schema,
        row_count=len(materialized_rows),
        created_at=datetime.now(timezone.utc),
        lance_written=lance_written,
    )
    _write_manifest_file(table_dir, manifest)
    _LOGGER.info(
        "table_written",
        table=schema.name,
        path=str(table_dir),
        row_count=manifest.row_count,
        lance_written=lance_written,
    )
    return manifest


def read_table(table_dir: Path, schema: TableSchema) -> list[Row]:
    """Load the rows of a table written with ``schema``.

    Args:
        table_dir: Table directory.
        schema: Expected schema.

    Returns:
        Rows in persisted order.

    Raises:
        ShrikeStoreError: If the table is missing, invalid or was
            written with a different schema.
    """
    manifest = read_manifest(table_dir)
    if manifest.schema != schema:
        raise ShrikeStoreError(
            f"Table at {table_dir} was written as '{manifest.schema.name}' "
            f"v{manifest.schema.version}, expected '{schema.name}' v{schema.version}. "
            "Rebuild the table from its upstream stage."
        )
    records_path = table_dir / RECORDS_FILE_NAME
    if not records_path.exists():
        raise ShrikeStoreError(
            f"Failed to load table at {table_dir}: missing {RECORDS_FILE_NAME}."
        )
    rows: list[Row] = []
    for line_number, line in enumerate(records_path.read_text(encoding="utf-8").splitlines(), 1):
        if not line.strip():
            continue
        payload = _parse_json_line(records_path, line, line_number)
        rows.append(_row_from_payload(records_path, schema, payload, line_number))
    if len(rows) != manifest.row_count:
        raise ShrikeStoreError(
            f"Table at {table_dir} holds {len(rows)} rows but its manifest lists "
            f"{manifest.row_count}. Rebuild the table from its upstream stage."
        )
    return rows


def read_manifest(table_dir: Path) -> TableManifest:
    """Load a table manifest.

    Raises:
        ShrikeStoreError: If the manifest is missing or invalid.
    """
    manifest_path = table_dir / MANIFEST_FILE_NAME
    if not manifest_path.exists():
        raise ShrikeStoreError(
            f"Table not found at {table_dir}: missing {MANIFEST_FILE_NAME}. "
            "Run the upstream stage before reading this table."
        )
    try:
        payload = json.loads(manifest_path.read_text(encoding="utf-8"))
        schema_payload = payload["schema"]
        return TableManifest(
            schema=TableSchema(
                name=str(schema_payload["name"]),
                version=int(schema_payload["version"]),
                fields=tuple(str(field) for field in schema_payload["fields"]),
            ),
            row_count=int(payload["row_count"]),
            created_at=datetime.fromisoformat(str(payload["created_at"])),
            lance_written=bool(payload["lance_written"]),
        )
    except json.JSONDecodeError as error:
        raise ShrikeStoreError(
            f"Failed to parse table manifest at {manifest_path}: {error.msg}. "
            "Rebuild the table from its upstream stage."
        ) from error
    except (KeyError, TypeError, ValueError) as error:
        raise ShrikeStoreError(
            f"Invalid table manifest at {manifest_path}: {error}. "
            "Rebuild the table from its upstream stage."
        ) from error


def _check_row(schema: TableSchema, row: Row) -> Row:
    """Validate that a row fits the schema width.

    Raises:
        ShrikeStoreError: On a width mismatch.
    """
    if len(row) != schema.width:
        raise ShrikeStoreError(
            f"Row for table '{schema.name}' has {len(row)} values, expected {schema.width}."
        )
    return tuple(row)


def _prepare_table_dir(table_dir: Path) -> None:
    """Clear a previous table at ``table_dir`` and recreate the directory.

    Raises:
        ShrikeStoreError: If the path holds something other than a table.
    """
    try:
        if table_dir.exists():
            is_table = (table_dir / MANIFEST_FILE_NAME).exists()
            if not table_dir.is_dir() or (not is_table and any(table_dir.iterdir())):
                raise ShrikeStoreError(
                    f"Refusing to overwrite {table_dir}: it is not a table directory. "
                    "Choose an empty or previously written table path."
                )
            shutil.rmtree(table_dir)
        table_dir.mkdir(parents=True)
    except OSError as error:
        raise ShrikeStoreError(
            f"Failed to prepare table directory {table_dir}: {error}. "
            "Check write permissions and available disk space."
        ) from error


def _write_jsonl_rows(table_dir: Path, schema: TableSchema, rows: list[Row]) -> None:
    """Write rows to the JSONL file keyed by column name.

    Raises:
        ShrikeStoreError: If write fails.
    """
    records_path = table_dir / RECORDS_FILE_NAME
    lines = [json.dumps(dict(zip(schema.fields, row))) for row in rows]
    try:
        records_path.write_text("".join(line + "\n" for line in lines), encoding="utf-8")
    except OSError as error:
        raise ShrikeStoreError(
            f"Failed to persist table rows at {records_path}: {error}. "
            "Check write permissions and available disk space."
        ) from error


def _write_lance_dataset(table_dir: Path, schema: TableSchema, rows: list[Row]) -> None:
    """Write rows to an Apache Lance dataset of string columns.

    Raises:
        ShrikeDependencyError: If lance or pyarrow is missing.
        ShrikeStoreError: If the dataset write fails.
    """
    try:
        import lance
        import pyarrow as pa
    except ImportError as error:
        raise ShrikeDependencyError(
            "Table persistence requires pylance and pyarrow. "
            "Install both packages and rerun the stage."
        ) from error
    arrow_schema = pa.schema([pa.field(field, pa.string()) for field in schema.fields])
    table = pa.Table.from_pylist(
        [dict(zip(schema.fields, row)) for row in rows], schema=arrow_schema
    )
    lance_uri = str(table_dir / LANCE_DIR_NAME)
    try:
        lance.write_dataset(table, lance_uri, mode="overwrite")
    except Exception as error:
        raise ShrikeStoreError(
            f"Failed to write Lance dataset at {lance_uri}: {error}. "
            "Validate lance/pyarrow compatibility and rerun the stage."
        ) from error


def _write_manifest_file(table_dir: Path, manifest: TableManifest) -> None:
    """Write the table manifest file."""
    manifest_dict = asdict(manifest)
    manifest_dict["created_at"] = manifest.created_at.isoformat()
    manifest_path = table_dir / MANIFEST_FILE_NAME
    manifest_path.write_text(json.dumps(manifest_dict, indent=2) + "\n", encoding="utf-8")


def _parse_json_line(records_path: Path, line: str, line_number: int) -> dict[str, Any]:
    """Parse one JSONL row.

    Raises:
        ShrikeStoreError: If JSON is invalid.
    """
    try:
        payload = json.loads(line)
    except json.JSONDecodeError as error:
        raise ShrikeStoreError(
            f"Failed to parse table row at {records_path}:{line_number}: "
            f"{error.msg}. Rebuild the table from its upstream stage."
        ) from error
    if not isinstance(payload, dict):
        raise ShrikeStoreError(
            f"Failed to parse table row at {records_path}:{line_number}: "
            "expected a JSON object per line."
        )
    return payload


def _row_from_payload(
    records_path: Path,
    schema: TableSchema,
    payload: dict[str, Any],
    line_number: int,
) -> Row:
    """Order a JSON row by the schema's columns.

    Raises:
        ShrikeStoreError: If the row's columns differ from the schema.
    """
    if set(payload) != set(schema.fields):
        raise ShrikeStoreError(
            f"Table row at {records_path}:{line_number} does not match "
            f"schema '{schema.name}'. Rebuild the table from its upstream stage."
        )
    return tuple(str(payload[field]) for field in schema.fields)
