"""S3 URI parsing shared by raw input reads and table exports."""

from __future__ import annotations

from dataclasses import dataclass

from core.errors import ShrikeIngestError, ShrikeStoreError


@dataclass(frozen=True)
class S3Location:
    """Bucket and key prefix of an ``s3://`` URI."""

    bucket: str
    prefix: str


def is_s3_uri(uri: str) -> bool:
    """Return whether a location points at object storage."""
    return uri.startswith("s3://")


def parse_s3_uri(uri: str, domain: str) -> S3Location:
    """Parse and validate an S3 URI.

    Args:
        uri: URI in format ``s3://bucket/prefix``.
        domain: ``"ingest"`` when reading raw dumps, ``"store"`` when
            exporting tables.

    Returns:
        Parsed bucket and prefix pair.

    Raises:
        ShrikeIngestError: For ingest-domain parse failures.
        ShrikeStoreError: For store-domain parse failures.
    """
    if not is_s3_uri(uri):
        _raise_uri_error(uri, domain)
    bucket, _, prefix = uri.removeprefix("s3://").partition("/")
    if not bucket or not prefix.strip("/"):
        _raise_uri_error(uri, domain)
    return S3Location(bucket=bucket, prefix=prefix)


def _raise_uri_error(uri: str, domain: str) -> None:
    message = (
        f"Invalid S3 URI '{uri}': expected s3://bucket/prefix. "
        "Provide both bucket and prefix."
    )
    if domain == "ingest":
        raise ShrikeIngestError(message)
    raise ShrikeStoreError(message)
