"""Unit tests for the SDK client."""

from __future__ import annotations

from pathlib import Path

import pytest

import shrike
from core.config import ShrikeConfig
from core.errors import ShrikeConfigError
from store.dataset_sdk import ShrikeClient


class _RecordingS3Client:
    def __init__(self) -> None:
        self.keys: list[str] = []

    def upload_file(self, filename: str, bucket: str, key: str) -> None:
        self.keys.append(key)


def test_with_overrides_returns_updated_client() -> None:
    """Overrides should produce a new client without touching the original."""
    client = ShrikeClient(ShrikeConfig())

    updated = client.with_overrides(sig_figs=3, surrogate_keys="HASHED")

    assert (updated.config.sig_figs, updated.config.surrogate_keys) == (3, "hashed")
    assert client.config.surrogate_keys == "random"


def test_with_overrides_rejects_invalid_strategy() -> None:
    """Unknown surrogate key strategies should raise a config error."""
    with pytest.raises(ShrikeConfigError):
        ShrikeClient(ShrikeConfig()).with_overrides(surrogate_keys="sequential")
    assert True


def test_pipeline_rejects_unknown_source_kind() -> None:
    """Unknown source kinds should raise before any stage runs."""
    with pytest.raises(ShrikeConfigError):
        ShrikeClient(ShrikeConfig()).pipeline("idigbio")
    assert True


def test_export_s3_uses_injected_client(tmp_path: Path) -> None:
    """Exports should go through the client passed to the SDK."""
    (tmp_path / "occ.tsv").write_text("a\n", encoding="utf-8")
    s3_client = _RecordingS3Client()

    uploaded_count = ShrikeClient(ShrikeConfig(), s3_client=s3_client).export_s3(
        tmp_path, "s3://bucket/views"
    )

    assert uploaded_count == 1 and s3_client.keys == ["views/occ.tsv"]


def test_public_module_exposes_client() -> None:
    """The top-level module should re-export the client and adapters."""
    assert shrike.ShrikeClient is ShrikeClient
    assert shrike.get_source_adapter("gbif") is shrike.GBIF_ADAPTER
