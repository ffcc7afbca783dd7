"""Python SDK for star-schema pipeline operations.

This module exposes one client that runs each materialized stage for a
named source kind, exports results to S3 and executes run-specs.
"""

from __future__ import annotations

from dataclasses import replace
from pathlib import Path
from typing import Any

from core.config import ShrikeConfig, parse_sig_figs, parse_surrogate_keys
from core.run_spec_execution import execute_run_spec_file
from core.types import TableManifest
from ingest.pipeline import (
    ShredResult,
    StarSchemaManifests,
    StarSchemaPipeline,
)
from ingest.source_adapters import get_source_adapter
from store.s3_export import export_directory_to_s3


class ShrikeClient:
    """Primary SDK entry point for pipeline workflows."""

    def __init__(self, config: ShrikeConfig | None = None, s3_client: Any | None = None) -> None:
        """Create SDK client.

        Args:
            config: Optional runtime configuration.
            s3_client: Optional preconfigured boto3 client for exports.
        """
        self._config = config or ShrikeConfig.from_env()
        self._s3_client = s3_client

    @property
    def config(self) -> ShrikeConfig:
        return self._config

    def pipeline(self, source_kind: str) -> StarSchemaPipeline:
        """Get the stage runner for a source kind.

        Raises:
            ShrikeConfigError: If the source kind is unknown.
        """
        return StarSchemaPipeline(get_source_adapter(source_kind), self._config)

    def build_master_dataset(
        self,
        source_kind: str,
        source_uri: str,
        sink_path: Path,
    ) -> TableManifest:
        """Clean a raw dump into a master dataset.

        Args:
            source_kind: One of ``gbif``, ``ebird``, ``vertnet``.
            source_uri: Raw dump file, directory or ``s3://`` prefix.
            sink_path: Master table directory.

        Returns:
            Manifest of the master table.
        """
        return self.pipeline(source_kind).build_master_dataset(source_uri, sink_path)

    def build_star_schema(
        self,
        source_kind: str,
        source_path: Path,
        sink_path: Path,
    ) -> StarSchemaManifests:
        """Build the star schema from a master dataset.

        Args:
            source_kind: Source kind the master dataset was built for.
            source_path: Master table directory.
            sink_path: Star-schema directory.

        Returns:
            Manifests of the four written tables.
        """
        return self.pipeline(source_kind).build_star_schema(source_path, sink_path)

    def build_views(
        self,
        source_kind: str,
        source_path: Path,
        sink_path: Path,
        sql_escape: bool | None = None,
    ) -> list[Path]:
        """Export star-schema tables as quoted tab-separated views."""
        return self.pipeline(source_kind).build_views(source_path, sink_path, sql_escape)

    def shred(
        self,
        source_kind: str,
        harvest_uri: str,
        seq_path: Path,
        tables_path: Path,
    ) -> ShredResult:
        """Build the master dataset and the star schema in one call."""
        return self.pipeline(source_kind).shred(harvest_uri, seq_path, tables_path)

    def export_s3(self, local_dir: Path, output_uri: str) -> int:
        """Upload a table, star-schema or view directory to S3.

        Returns:
            Number of uploaded files.
        """
        return export_directory_to_s3(local_dir, output_uri, self._config, self._s3_client)

    def with_overrides(
        self,
        sig_figs: int | None = None,
        surrogate_keys: str | None = None,
    ) -> "ShrikeClient":
        """Clone the client with different cleaning or key settings.

        Args:
            sig_figs: Optional decimal places override.
            surrogate_keys: Optional surrogate key strategy override.

        Returns:
            New SDK client instance.

        Raises:
            ShrikeConfigError: If an override is invalid.
        """
        updated_config = self._config
        if sig_figs is not None:
            updated_config = replace(updated_config, sig_figs=parse_sig_figs(str(sig_figs)))
        if surrogate_keys is not None:
            updated_config = replace(
                updated_config, surrogate_keys=parse_surrogate_keys(surrogate_keys)
            )
        return ShrikeClient(updated_config, self._s3_client)

    def run_spec(self, spec_file: str) -> tuple[str, ...]:
        """Execute a YAML run-spec through the shared execution engine.

        Args:
            spec_file: Path to YAML run-spec file.

        Returns:
            Ordered command output lines.
        """
        return execute_run_spec_file(self, spec_file)
