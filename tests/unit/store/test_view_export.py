"""Unit tests for flat view export."""

from __future__ import annotations

from pathlib import Path

from store.view_export import export_view


def test_export_view_writes_quoted_tab_separated_lines(tmp_path: Path) -> None:
    """Values with double quotes should be quoted in the view file."""
    rows = [("1", 'Near "Big" Creek', ""), ("2", "O'Brien", "x")]

    view_path = export_view(tmp_path / "views", "occ", rows)

    assert view_path.name == "occ.tsv"
    assert view_path.read_text(encoding="utf-8").splitlines() == [
        '1\t"Near ""Big"" Creek"\t',
        "2\tO'Brien\tx",
    ]


def test_export_view_sql_escape_doubles_single_quotes(tmp_path: Path) -> None:
    """SQL escaping should double single quotes."""
    view_path = export_view(tmp_path, "tax", [("t1", "O'Brien's warbler")], sql_escape=True)

    assert view_path.read_text(encoding="utf-8") == "t1\tO''Brien''s warbler\n"
