"""Shared run-spec execution engine for CLI and SDK workflows.

This module maps validated run-spec steps to client operations so the
CLI and the SDK execute one declarative pipeline path without drift.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Protocol

from core.constants import (
    DEFAULT_SOURCE_KIND,
    LOCATION_TABLE_NAME,
    OCCURRENCE_TABLE_NAME,
    TAXONOMY_LOCATION_TABLE_NAME,
    TAXONOMY_TABLE_NAME,
)
from core.errors import ShrikeRunSpecError
from core.run_spec import RunSpec, RunSpecStep, load_run_spec
from core.run_spec_fields import (
    optional_bool,
    optional_source_kind,
    required_string,
)
from core.types import TableManifest


class RunSpecClient(Protocol):
    """Client API contract required by run-spec execution."""

    def with_overrides(
        self,
        sig_figs: int | None = None,
        surrogate_keys: str | None = None,
    ) -> Any: ...

    def build_master_dataset(
        self, source_kind: str, source_uri: str, sink_path: Path
    ) -> TableManifest: ...

    def build_star_schema(self, source_kind: str, source_path: Path, sink_path: Path) -> Any: ...

    def build_views(
        self,
        source_kind: str,
        source_path: Path,
        sink_path: Path,
        sql_escape: bool | None = None,
    ) -> list[Path]: ...

    def shred(
        self, source_kind: str, harvest_uri: str, seq_path: Path, tables_path: Path
    ) -> Any: ...

    def export_s3(self, local_dir: Path, output_uri: str) -> int: ...


@dataclass(frozen=True)
class RunSpecExecutionContext:
    """In-memory context used to execute run-spec steps."""

    client: RunSpecClient
    default_source_kind: str


def execute_run_spec_file(client: RunSpecClient, spec_file: str) -> tuple[str, ...]:
    """Load and execute a run-spec file, returning printable output lines."""
    spec = load_run_spec(spec_file)
    return execute_run_spec(client, spec)


def execute_run_spec(client: RunSpecClient, spec: RunSpec) -> tuple[str, ...]:
    """Execute a parsed run-spec object and return output lines."""
    execution_client = client
    if spec.defaults.sig_figs is not None or spec.defaults.surrogate_keys is not None:
        execution_client = client.with_overrides(
            sig_figs=spec.defaults.sig_figs,
            surrogate_keys=spec.defaults.surrogate_keys,
        )
    context = RunSpecExecutionContext(
        client=execution_client,
        default_source_kind=spec.defaults.source_kind or DEFAULT_SOURCE_KIND,
    )
    output_lines: list[str] = []
    for step in spec.steps:
        output_lines.extend(_execute_step(context, step))
    return tuple(output_lines)


def format_table_line(table_path: Path, manifest: TableManifest) -> str:
    """Render one written table as ``name<TAB>rows<TAB>path``."""
    return f"{manifest.schema.name}\t{manifest.row_count}\t{table_path}"


def format_star_schema_lines(sink_path: Path, manifests: Any) -> tuple[str, ...]:
    """Render the four tables of a star-schema build."""
    tables = (
        (LOCATION_TABLE_NAME, manifests.location),
        (TAXONOMY_TABLE_NAME, manifests.taxonomy),
        (TAXONOMY_LOCATION_TABLE_NAME, manifests.taxonomy_location),
        (OCCURRENCE_TABLE_NAME, manifests.occurrence),
    )
    return tuple(
        format_table_line(sink_path / table_name, manifest) for table_name, manifest in tables
    )


def _execute_step(context: RunSpecExecutionContext, step: RunSpecStep) -> tuple[str, ...]:
    if step.command == "build-master-dataset":
        return _execute_build_master_dataset_step(context, step)
    if step.command == "build-star-schema":
        return _execute_build_star_schema_step(context, step)
    if step.command == "build-views":
        return _execute_build_views_step(context, step)
    if step.command == "shred":
        return _execute_shred_step(context, step)
    if step.command == "export-s3":
        return _execute_export_s3_step(context, step)
    raise ShrikeRunSpecError(f"Unsupported run-spec command '{step.command}'.")


def _execute_build_master_dataset_step(
    context: RunSpecExecutionContext,
    step: RunSpecStep,
) -> tuple[str, ...]:
    sink_path = Path(required_string(step.args, "sink"))
    manifest = context.client.build_master_dataset(
        _resolve_source_kind(context, step),
        required_string(step.args, "source"),
        sink_path,
    )
    return (format_table_line(sink_path, manifest),)


def _execute_build_star_schema_step(
    context: RunSpecExecutionContext,
    step: RunSpecStep,
) -> tuple[str, ...]:
    sink_path = Path(required_string(step.args, "sink"))
    manifests = context.client.build_star_schema(
        _resolve_source_kind(context, step),
        Path(required_string(step.args, "source")),
        sink_path,
    )
    return format_star_schema_lines(sink_path, manifests)


def _execute_build_views_step(
    context: RunSpecExecutionContext,
    step: RunSpecStep,
) -> tuple[str, ...]:
    view_paths = context.client.build_views(
        _resolve_source_kind(context, step),
        Path(required_string(step.args, "source")),
        Path(required_string(step.args, "sink")),
        sql_escape=optional_bool(step.args, "sql_escape"),
    )
    return tuple(str(path) for path in view_paths)


def _execute_shred_step(
    context: RunSpecExecutionContext,
    step: RunSpecStep,
) -> tuple[str, ...]:
    seq_path = Path(required_string(step.args, "seq"))
    tables_path = Path(required_string(step.args, "tables"))
    result = context.client.shred(
        _resolve_source_kind(context, step),
        required_string(step.args, "harvest"),
        seq_path,
        tables_path,
    )
    return (format_table_line(seq_path, result.master),) + format_star_schema_lines(
        tables_path, result.star_schema
    )


def _execute_export_s3_step(
    context: RunSpecExecutionContext,
    step: RunSpecStep,
) -> tuple[str, ...]:
    output_uri = required_string(step.args, "output_uri")
    uploaded_count = context.client.export_s3(
        Path(required_string(step.args, "source")), output_uri
    )
    return (f"{output_uri}\t{uploaded_count}",)


def _resolve_source_kind(context: RunSpecExecutionContext, step: RunSpecStep) -> str:
    return optional_source_kind(step.args) or context.default_source_kind
