"""Unit tests for run-spec parsing."""

from __future__ import annotations

from pathlib import Path

import pytest

from core.errors import ShrikeRunSpecError
from core.run_spec import load_run_spec
from tests.fixture_paths import fixture_path


def test_load_run_spec_valid_pipeline_parses_steps() -> None:
    """Valid run-spec should parse expected command order and defaults."""
    spec = load_run_spec(str(fixture_path("run_spec/valid_pipeline.yaml")))

    assert tuple(step.command for step in spec.steps) == ("shred", "build-views")
    assert (spec.defaults.source_kind, spec.defaults.sig_figs, spec.defaults.surrogate_keys) == (
        "vertnet",
        6,
        "hashed",
    )


def test_load_run_spec_accepts_inline_step_args() -> None:
    """Step keys next to 'command' should become its args."""
    spec = load_run_spec(str(fixture_path("run_spec/valid_pipeline.yaml")))

    assert spec.steps[1].args == {"source": "out/tables", "sink": "out/views", "sql_escape": True}


@pytest.mark.parametrize(
    "fixture_name",
    [
        "run_spec/invalid_command.yaml",
        "run_spec/invalid_defaults_key.yaml",
        "run_spec/invalid_source_kind.yaml",
    ],
)
def test_load_run_spec_rejects_invalid_files(fixture_name: str) -> None:
    """Unsupported commands and defaults should raise run-spec errors."""
    with pytest.raises(ShrikeRunSpecError):
        load_run_spec(str(fixture_path(fixture_name)))
    assert True


def test_load_run_spec_rejects_missing_file(tmp_path: Path) -> None:
    """A missing spec file should raise a run-spec error."""
    with pytest.raises(ShrikeRunSpecError):
        load_run_spec(str(tmp_path / "missing.yaml"))
    assert True


def test_load_run_spec_rejects_unsupported_version(tmp_path: Path) -> None:
    """Only version 1 should be accepted."""
    spec_path = tmp_path / "spec.yaml"
    spec_path.write_text("version: 2\nsteps:\n  - command: shred\n", encoding="utf-8")

    with pytest.raises(ShrikeRunSpecError):
        load_run_spec(str(spec_path))
    assert True
