"""Shrike CLI entry points.
This module exposes one command per pipeline stage plus S3 export.
It maps argparse commands onto SDK calls.
"""

from __future__ import annotations

import argparse
from pathlib import Path
from typing import Any, Sequence

from cli.run_spec_command import add_run_spec_command, run_run_spec_command
from core.config import ShrikeConfig
from core.constants import (
    DEFAULT_SOURCE_KIND,
    SUPPORTED_SOURCE_KINDS,
    SUPPORTED_SURROGATE_KEY_STRATEGIES,
)
from core.run_spec_execution import format_star_schema_lines, format_table_line
from store.dataset_sdk import ShrikeClient


def build_parser() -> argparse.ArgumentParser:
    """Build the top-level CLI parser.

    Returns:
        Configured argument parser.
    """
    parser = argparse.ArgumentParser(
        prog="shrike",
        description="Normalize occurrence dumps into a star schema",
    )
    parser.add_argument("--sig-figs", type=int, help="Override SHRIKE_SIG_FIGS for this command")
    parser.add_argument(
        "--surrogate-keys",
        choices=SUPPORTED_SURROGATE_KEY_STRATEGIES,
        help="Override SHRIKE_SURROGATE_KEYS for this command",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)
    _add_build_master_dataset_command(subparsers)
    _add_build_star_schema_command(subparsers)
    _add_build_views_command(subparsers)
    _add_shred_command(subparsers)
    _add_export_s3_command(subparsers)
    add_run_spec_command(subparsers)
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Run the Shrike CLI.

    Args:
        argv: Optional argument vector.

    Returns:
        Process exit code.
    """
    parser = build_parser()
    args = parser.parse_args(argv)
    client = _build_client(args.sig_figs, args.surrogate_keys)
    if args.command == "build-master-dataset":
        return _run_build_master_dataset_command(client, args)
    if args.command == "build-star-schema":
        return _run_build_star_schema_command(client, args)
    if args.command == "build-views":
        return _run_build_views_command(client, args)
    if args.command == "shred":
        return _run_shred_command(client, args)
    if args.command == "export-s3":
        return _run_export_s3_command(client, args)
    if args.command == "run-spec":
        return run_run_spec_command(client, args)
    parser.error(f"Unsupported command: {args.command}")
    return 2


def _build_client(sig_figs: int | None, surrogate_keys: str | None) -> ShrikeClient:
    """Build SDK client with optional setting overrides."""
    return ShrikeClient(ShrikeConfig.from_env()).with_overrides(
        sig_figs=sig_figs,
        surrogate_keys=surrogate_keys,
    )


def _run_build_master_dataset_command(client: ShrikeClient, args: argparse.Namespace) -> int:
    """Handle build-master-dataset command."""
    sink_path = Path(args.sink)
    manifest = client.build_master_dataset(args.source_kind, args.source, sink_path)
    print(format_table_line(sink_path, manifest))
    return 0


def _run_build_star_schema_command(client: ShrikeClient, args: argparse.Namespace) -> int:
    """Handle build-star-schema command."""
    sink_path = Path(args.sink)
    manifests = client.build_star_schema(args.source_kind, Path(args.source), sink_path)
    for line in format_star_schema_lines(sink_path, manifests):
        print(line)
    return 0


def _run_build_views_command(client: ShrikeClient, args: argparse.Namespace) -> int:
    """Handle build-views command."""
    view_paths = client.build_views(
        args.source_kind,
        Path(args.source),
        Path(args.sink),
        sql_escape=args.sql_escape,
    )
    for view_path in view_paths:
        print(view_path)
    return 0


def _run_shred_command(client: ShrikeClient, args: argparse.Namespace) -> int:
    """Handle shred command."""
    seq_path = Path(args.seq)
    tables_path = Path(args.tables)
    result = client.shred(args.source_kind, args.harvest, seq_path, tables_path)
    print(format_table_line(seq_path, result.master))
    for line in format_star_schema_lines(tables_path, result.star_schema):
        print(line)
    return 0


def _run_export_s3_command(client: ShrikeClient, args: argparse.Namespace) -> int:
    """Handle export-s3 command."""
    uploaded_count = client.export_s3(Path(args.source), args.output_uri)
    print(f"{args.output_uri}\t{uploaded_count}")
    return 0


def _add_source_kind_argument(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--source-kind",
        default=DEFAULT_SOURCE_KIND,
        choices=SUPPORTED_SOURCE_KINDS,
        help="Layout of the raw source dump",
    )


def _add_build_master_dataset_command(subparsers: Any) -> None:
    """Register build-master-dataset subcommand."""
    parser = subparsers.add_parser(
        "build-master-dataset",
        help="Clean a raw dump into the master dataset",
    )
    parser.add_argument("source", help="Dump file, directory, or s3://bucket/prefix")
    parser.add_argument("sink", help="Master table directory")
    _add_source_kind_argument(parser)


def _add_build_star_schema_command(subparsers: Any) -> None:
    """Register build-star-schema subcommand."""
    parser = subparsers.add_parser(
        "build-star-schema",
        help="Build dimension, association and fact tables from a master dataset",
    )
    parser.add_argument("source", help="Master table directory")
    parser.add_argument("sink", help="Star-schema directory")
    _add_source_kind_argument(parser)


def _add_build_views_command(subparsers: Any) -> None:
    """Register build-views subcommand."""
    parser = subparsers.add_parser(
        "build-views",
        help="Export star-schema tables as quoted tab-separated files",
    )
    parser.add_argument("source", help="Star-schema directory")
    parser.add_argument("sink", help="View output directory")
    _add_source_kind_argument(parser)
    parser.add_argument(
        "--sql-escape",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Double single quotes in values (defaults to the source convention)",
    )


def _add_shred_command(subparsers: Any) -> None:
    """Register shred subcommand."""
    parser = subparsers.add_parser(
        "shred",
        help="Build the master dataset and the star schema in one run",
    )
    parser.add_argument("harvest", help="Harvest file, directory, or s3://bucket/prefix")
    parser.add_argument("seq", help="Master table directory")
    parser.add_argument("tables", help="Star-schema directory")
    _add_source_kind_argument(parser)


def _add_export_s3_command(subparsers: Any) -> None:
    """Register export-s3 subcommand."""
    parser = subparsers.add_parser("export-s3", help="Upload a local output directory to S3")
    parser.add_argument("source", help="Local table, star-schema or view directory")
    parser.add_argument("output_uri", help="Destination s3://bucket/prefix")
