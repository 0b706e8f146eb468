"""Tests for the interactive Plotly lookup (src/analysis/plotly_lookup.py)."""

from __future__ import annotations

import plotly.graph_objects as go
import pytest

from src.analysis.plotly_lookup import (
    _cell_hover,
    build_lookup_figure,
    build_policy_comparison_figure,
    save_lookup_html,
)


# ─── Hover text ───────────────────────────────────────────────────────────────


class TestCellHover:
    def test_contents(self, table) -> None:
        text = _cell_hover(16, 1, table[(16, 1)])
        assert "Player total: <b>16</b>" in text
        assert "Dealer upcard: <b>A</b>" in text
        assert "Stand:" in text and "Hit once:" in text and "Optimal:" in text
        assert "push" in text
        assert "Best action:" in text

    def test_label(self, table) -> None:
        assert "<b>hit</b>" in _cell_hover(8, 5, table[(8, 5)])
        assert "<b>stand</b>" in _cell_hover(21, 5, table[(21, 5)])


# ─── build_lookup_figure ──────────────────────────────────────────────────────


class TestBuildLookupFigure:
    def test_single_heatmap(self, table) -> None:
        fig = build_lookup_figure("opt_win", table)
        assert isinstance(fig, go.Figure)
        assert len(fig.data) == 1
        assert isinstance(fig.data[0], go.Heatmap)

    def test_grid_dimensions(self, table) -> None:
        trace = build_lookup_figure("stand_loss", table).data[0]
        assert len(trace.z) == 18
        assert all(len(row) == 10 for row in trace.z)
        assert list(trace.x) == ["A", "2", "3", "4", "5", "6", "7", "8", "9", "10"]
        assert list(trace.y)[0] == "4" and list(trace.y)[-1] == "21"

    def test_fixed_colour_range(self, table) -> None:
        trace = build_lookup_figure("hit_win", table).data[0]
        assert trace.zmin == 0.0
        assert trace.zmax == 1.0

    def test_title_names_field(self, table) -> None:
        fig = build_lookup_figure("opt_win", table)
        assert "optimal" in fig.layout.title.text

    def test_unknown_field_raises(self, table) -> None:
        with pytest.raises(ValueError):
            build_lookup_figure("push", table)

    def test_missing_cell_blank(self, table) -> None:
        partial = dict(table)
        del partial[(4, 1)]
        trace = build_lookup_figure("opt_win", partial).data[0]
        assert trace.z[0][0] is None
        assert trace.text[0][0] == ""


# ─── build_policy_comparison_figure ───────────────────────────────────────────


class TestPolicyComparison:
    def test_three_traces(self, table) -> None:
        fig = build_policy_comparison_figure(table)
        assert len(fig.data) == 3
        assert [t.name for t in fig.data] == ["stand_win", "hit_win", "opt_win"]

    def test_single_colour_scale(self, table) -> None:
        fig = build_policy_comparison_figure(table)
        assert [bool(t.showscale) for t in fig.data] == [False, False, True]


# ─── HTML export ──────────────────────────────────────────────────────────────


class TestSaveLookupHtml:
    def test_writes_html(self, table, tmp_path) -> None:
        path = tmp_path / "lookup.html"
        save_lookup_html(build_lookup_figure("opt_win", table), str(path))
        content = path.read_text()
        assert "<html" in content.lower()
        assert "plotly" in content.lower()
