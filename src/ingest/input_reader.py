"""Raw dump readers for ingestion.

This module streams tab-delimited dump lines from a local file, a
local directory of dump parts, or an S3 prefix. Gzipped parts are
decompressed transparently. Undecodable bytes are replaced rather than
raised, so one badly encoded line stays a per-record problem.
"""

from __future__ import annotations

import gzip
import io
from pathlib import Path
from typing import Any, Iterable, Iterator

from core.config import ShrikeConfig
from core.constants import SUPPORTED_RAW_EXTENSIONS
from core.errors import ShrikeIngestError
from core.s3_uri import S3Location, is_s3_uri, parse_s3_uri
from store.s3_export import create_s3_client

_ENCODING = "utf-8"
_DECODE_ERRORS = "replace"


def read_raw_lines(
    source_uri: str,
    config: ShrikeConfig,
    s3_client: Any | None = None,
) -> Iterator[str]:
    """Yield raw lines from local files or S3 objects.

    Args:
        source_uri: Local file, local directory, or ``s3://`` prefix.
        config: Runtime configuration for S3 session defaults.
        s3_client: Optional preconfigured boto3 client.

    Returns:
        Iterator over raw lines in file order.

    Raises:
        ShrikeIngestError: If the source is missing or unreadable.
    """
    if is_s3_uri(source_uri):
        location = parse_s3_uri(source_uri, domain="ingest")
        client = s3_client if s3_client is not None else create_s3_client(config)
        return _read_s3_lines(client, location, source_uri)
    return _read_local_lines(_list_local_files(Path(source_uri).expanduser()))


def _list_local_files(source_path: Path) -> list[Path]:
    """Resolve a local source into the ordered list of dump files.

    Raises:
        ShrikeIngestError: If the path is missing or holds no dump files.
    """
    if not source_path.exists():
        raise ShrikeIngestError(
            f"Failed to read source at {source_path}: path does not exist. "
            "Provide an existing dump file or directory."
        )
    if source_path.is_file():
        return [source_path]
    file_paths = [
        file_path
        for file_path in sorted(source_path.rglob("*"))
        if file_path.is_file() and _is_supported_name(file_path.name)
    ]
    if not file_paths:
        raise ShrikeIngestError(
            f"No readable dump files found under {source_path}. "
            f"Supported extensions: {SUPPORTED_RAW_EXTENSIONS}."
        )
    return file_paths


def _read_local_lines(file_paths: list[Path]) -> Iterator[str]:
    """Yield lines from local dump files in order.

    Raises:
        ShrikeIngestError: If a file cannot be read.
    """
    for file_path in file_paths:
        try:
            if file_path.suffix.lower() == ".gz":
                with gzip.open(
                    file_path, "rt", encoding=_ENCODING, errors=_DECODE_ERRORS
                ) as handle:
                    yield from _strip_terminators(handle)
            else:
                with file_path.open("r", encoding=_ENCODING, errors=_DECODE_ERRORS) as handle:
                    yield from _strip_terminators(handle)
        except (OSError, EOFError) as error:
            raise ShrikeIngestError(
                f"Failed to read dump file {file_path}: {error}. "
                "Check the file is readable text or gzip."
            ) from error


def _read_s3_lines(s3_client: Any, location: S3Location, source_uri: str) -> Iterator[str]:
    """Yield lines from every supported object under an S3 prefix.

    Raises:
        ShrikeIngestError: If listing or download fails, or nothing matches.
    """
    object_keys = _list_s3_keys(s3_client, location, source_uri)
    if not object_keys:
        raise ShrikeIngestError(
            f"No readable dump objects found for {source_uri}. "
            f"Upload {'/'.join(SUPPORTED_RAW_EXTENSIONS)} files and retry ingest."
        )
    for key in object_keys:
        yield from _download_s3_object_lines(s3_client, location.bucket, key)


def _list_s3_keys(s3_client: Any, location: S3Location, source_uri: str) -> list[str]:
    """List supported object keys under an S3 prefix."""
    try:
        paginator = s3_client.get_paginator("list_objects_v2")
        pages = paginator.paginate(Bucket=location.bucket, Prefix=location.prefix)
        keys = [
            obj["Key"]
            for page in pages
            for obj in page.get("Contents", [])
            if _is_supported_name(obj["Key"])
        ]
    except Exception as error:
        raise ShrikeIngestError(
            f"Failed to list dump objects for {source_uri}: {error}. "
            "Check AWS credentials and the bucket prefix."
        ) from error
    return sorted(keys)


def _download_s3_object_lines(s3_client: Any, bucket: str, key: str) -> list[str]:
    """Download one object and split it into lines like a local file read."""
    try:
        body = s3_client.get_object(Bucket=bucket, Key=key)["Body"].read()
        if key.lower().endswith(".gz"):
            body = gzip.decompress(body)
    except Exception as error:
        raise ShrikeIngestError(
            f"Failed to read dump object s3://{bucket}/{key}: {error}. "
            "Check AWS credentials and that the object is text or gzip."
        ) from error
    text = body.decode(_ENCODING, errors=_DECODE_ERRORS)
    return list(_strip_terminators(io.StringIO(text, newline=None)))


def _strip_terminators(handle: Iterable[str]) -> Iterator[str]:
    """Yield lines without their newline; only ``\\n``, ``\\r`` and ``\\r\\n`` end a line."""
    for line in handle:
        yield line.rstrip("\n")


def _is_supported_name(name: str) -> bool:
    """Return whether a file name or object key has a dump extension."""
    return Path(name).suffix.lower() in SUPPORTED_RAW_EXTENSIONS
