"""Pytest configuration for repository test runs."""

from __future__ import annotations

import sys
from pathlib import Path

import pytest

_SHRIKE_ENV_VARS = (
    "SHRIKE_SIG_FIGS",
    "SHRIKE_SURROGATE_KEYS",
    "SHRIKE_S3_REGION",
    "SHRIKE_S3_PROFILE",
)


def pytest_sessionstart() -> None:
    """Add src directory to sys.path for test imports."""
    project_root = Path(__file__).resolve().parent.parent
    src_path = project_root / "src"
    if str(src_path) not in sys.path:
        sys.path.insert(0, str(src_path))


@pytest.fixture(autouse=True)
def _clean_shrike_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Run every test against default Shrike settings."""
    for name in _SHRIKE_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
