"""Tests for the interactive Plotly lookup tool (kuhn_cfr/analysis/plotly_lookup.py).

Tests verify that each public function returns a well-formed go.Figure with the
expected trace count, data invariants, and hover text.  The save helper is
tested against a temporary file path.

No display server is required: Plotly figures are in-memory objects and the
save helper writes HTML without rendering.
"""

from __future__ import annotations

import os

import plotly.graph_objects as go

from kuhn_cfr.analysis.plotly_lookup import (
    build_comparison_figure,
    build_strategy_lookup_figure,
    save_lookup_html,
)
from kuhn_cfr.engine.cards import Action
from kuhn_cfr.solvers.cfr import CfrResult
from kuhn_cfr.solvers.information_sets import KuhnInfoSet

# ─── build_strategy_lookup_figure ─────────────────────────────────────────────


class TestBuildStrategyLookupFigure:
    def test_returns_figure(self, short_result) -> None:
        assert isinstance(build_strategy_lookup_figure(short_result), go.Figure)

    def test_single_heatmap_trace(self, short_result) -> None:
        fig = build_strategy_lookup_figure(short_result)
        assert len(fig.data) == 1
        assert isinstance(fig.data[0], go.Heatmap)

    def test_z_shape_and_range(self, short_result) -> None:
        z = build_strategy_lookup_figure(short_result).data[0].z
        assert len(z) == 4
        assert all(len(row) == 3 for row in z)
        for row in z:
            for val in row:
                assert 0.0 <= val <= 1.0

    def test_hover_shows_infoset_and_accumulators(self, short_result) -> None:
        text = build_strategy_lookup_figure(short_result).data[0].text
        assert "J:c" in text[1][0]
        assert "P(BET)" in text[1][0]
        assert "Regret" in text[1][0]

    def test_missing_infoset_is_blank(self) -> None:
        result = CfrResult(
            method="mccfr",
            average_strategy={KuhnInfoSet((), 1): {Action.CHECK: 0.5, Action.BET: 0.5}},
            n_iterations=1,
            average_value=0.0,
            game_value=0.0,
            exploitability=0.0,
        )
        trace = build_strategy_lookup_figure(result).data[0]
        assert trace.z[0][0] == 0.5
        assert trace.z[3][2] is None
        assert trace.text[3][2] == ""
        # No store attached: hover omits the accumulators.
        assert "Regret" not in trace.text[0][0]


# ─── build_comparison_figure ──────────────────────────────────────────────────


class TestBuildComparisonFigure:
    def test_one_trace_per_run_plus_nash(self, short_result, mccfr_result) -> None:
        fig = build_comparison_figure([short_result, mccfr_result])
        assert len(fig.data) == 3

    def test_only_last_panel_shows_scale(self, short_result) -> None:
        fig = build_comparison_figure([short_result])
        assert [trace.showscale for trace in fig.data] == [False, True]

    def test_explicit_alpha_in_title(self, short_result) -> None:
        fig = build_comparison_figure([short_result], alpha=0.2)
        titles = [a.text for a in fig.layout.annotations]
        assert "Nash (α=0.200)" in titles


# ─── save_lookup_html ─────────────────────────────────────────────────────────


class TestSaveLookupHtml:
    def test_writes_html(self, short_result, tmp_path) -> None:
        path = tmp_path / "lookup.html"
        save_lookup_html(build_strategy_lookup_figure(short_result), str(path))
        assert os.path.getsize(path) > 0
        assert "<html>" in path.read_text().lower()
