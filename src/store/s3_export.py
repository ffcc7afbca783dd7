"""S3 export for materialized tables and views.

This module owns boto3 client creation for the whole project and
uploads a local directory tree under an ``s3://`` prefix.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from core.config import ShrikeConfig
from core.errors import ShrikeDependencyError, ShrikeStoreError
from core.logging_config import get_logger
from core.s3_uri import parse_s3_uri

_LOGGER = get_logger(__name__)


def create_s3_client(config: ShrikeConfig) -> Any:
    """Create a boto3 S3 client.

    Args:
        config: Runtime config with optional session settings.

    Returns:
        Boto3 S3 client.

    Raises:
        ShrikeDependencyError: If boto3 is missing.
    """
    try:
        import boto3
    except ImportError as error:
        raise ShrikeDependencyError(
            "S3 access requires boto3, but it is not installed. "
            "Install boto3 to read from or export to s3:// locations."
        ) from error
    session_kwargs: dict[str, str] = {}
    if config.s3_profile:
        session_kwargs["profile_name"] = config.s3_profile
    if config.s3_region:
        session_kwargs["region_name"] = config.s3_region
    session = boto3.session.Session(**session_kwargs)
    return session.client("s3")


def export_directory_to_s3(
    local_dir: Path,
    output_uri: str,
    config: ShrikeConfig,
    s3_client: Any | None = None,
) -> int:
    """Upload every file under a local directory to an S3 prefix.

    Args:
        local_dir: Table, star-schema or view directory.
        output_uri: Destination ``s3://bucket/prefix``.
        config: Runtime config used when no client is given.
        s3_client: Optional preconfigured boto3 client.

    Returns:
        Number of uploaded files.

    Raises:
        ShrikeStoreError: If the directory is missing or an upload fails.
    """
    location = parse_s3_uri(output_uri, domain="store")
    if not local_dir.is_dir():
        raise ShrikeStoreError(
            f"Failed to export {local_dir}: directory does not exist. "
            "Build the tables before exporting them."
        )
    client = s3_client if s3_client is not None else create_s3_client(config)
    uploaded_count = upload_directory(client, local_dir, location.bucket, location.prefix)
    _LOGGER.info(
        "directory_exported",
        local_dir=str(local_dir),
        output_uri=output_uri,
        file_count=uploaded_count,
    )
    return uploaded_count


def upload_directory(s3_client: Any, local_dir: Path, bucket: str, prefix: str) -> int:
    """Upload all files of a directory tree to S3.

    Raises:
        ShrikeStoreError: If an upload fails.
    """
    uploaded_count = 0
    for local_file in sorted(local_dir.rglob("*")):
        if not local_file.is_file():
            continue
        relative_path = local_file.relative_to(local_dir)
        object_key = f"{prefix.rstrip('/')}/{relative_path.as_posix()}"
        try:
            s3_client.upload_file(str(local_file), bucket, object_key)
        except Exception as error:
            raise ShrikeStoreError(
                f"Failed to export {local_file} to s3://{bucket}/{object_key}: {error}. "
                "Check AWS credentials and retry export."
            ) from error
        uploaded_count += 1
    return uploaded_count
