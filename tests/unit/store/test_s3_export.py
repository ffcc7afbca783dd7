"""Unit tests for S3 export helpers."""

from __future__ import annotations

from pathlib import Path

import pytest

from core.config import ShrikeConfig
from core.errors import ShrikeStoreError
from store.s3_export import export_directory_to_s3


class _RecordingS3Client:
    def __init__(self, fail: bool = False) -> None:
        self.uploads: list[tuple[str, str, str]] = []
        self._fail = fail

    def upload_file(self, filename: str, bucket: str, key: str) -> None:
        if self._fail:
            raise RuntimeError("access denied")
        self.uploads.append((filename, bucket, key))


def test_export_directory_to_s3_uploads_every_file(tmp_path: Path) -> None:
    """Every file should be uploaded under the prefix with its relative path."""
    (tmp_path / "loc").mkdir()
    (tmp_path / "loc" / "records.jsonl").write_text("{}\n", encoding="utf-8")
    (tmp_path / "occ.tsv").write_text("a\n", encoding="utf-8")
    client = _RecordingS3Client()

    uploaded_count = export_directory_to_s3(
        tmp_path, "s3://bucket/run-1/", ShrikeConfig(), s3_client=client
    )

    assert uploaded_count == 2
    assert sorted(key for _, _, key in client.uploads) == [
        "run-1/loc/records.jsonl",
        "run-1/occ.tsv",
    ]


def test_export_directory_to_s3_wraps_upload_failures(tmp_path: Path) -> None:
    """Upload errors should surface as store errors."""
    (tmp_path / "occ.tsv").write_text("a\n", encoding="utf-8")

    with pytest.raises(ShrikeStoreError):
        export_directory_to_s3(
            tmp_path, "s3://bucket/run-1", ShrikeConfig(), s3_client=_RecordingS3Client(True)
        )
    assert True


def test_export_directory_to_s3_rejects_missing_directory(tmp_path: Path) -> None:
    """Exporting a missing directory should fail before any upload."""
    client = _RecordingS3Client()

    with pytest.raises(ShrikeStoreError):
        export_directory_to_s3(
            tmp_path / "missing", "s3://bucket/run-1", ShrikeConfig(), s3_client=client
        )

    assert client.uploads == []


def test_export_directory_to_s3_rejects_invalid_uri(tmp_path: Path) -> None:
    """Destination URIs need a bucket and a prefix."""
    with pytest.raises(ShrikeStoreError):
        export_directory_to_s3(
            tmp_path, "s3://bucket", ShrikeConfig(), s3_client=_RecordingS3Client()
        )
    assert True
