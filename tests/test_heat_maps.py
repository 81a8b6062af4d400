"""Tests for strategy heat maps (kuhn_cfr/analysis/heat_maps.py).

Tests verify data-matrix shapes and value invariants (no display required)
plus that each plot function returns a well-formed matplotlib Figure.
The Agg backend is activated before any pyplot import so CI/CD environments
without a display server can run the suite safely.
"""

from __future__ import annotations

import os

import matplotlib

matplotlib.use("Agg")  # must precede any pyplot import

import matplotlib.figure
import matplotlib.pyplot as plt
import numpy as np
import pytest

from kuhn_cfr.analysis.heat_maps import (
    build_equilibrium_heatmap_data,
    build_strategy_heatmap_data,
    plot_cfr_strategy_heatmap,
    plot_convergence,
    plot_strategy_comparison,
    plot_strategy_heatmap,
)
from kuhn_cfr.engine.cards import Action
from kuhn_cfr.solvers.cfr import CfrResult
from kuhn_cfr.solvers.information_sets import KuhnInfoSet


@pytest.fixture(autouse=True)
def _close_figures():
    yield
    plt.close("all")


# ─── build_strategy_heatmap_data ──────────────────────────────────────────────


class TestBuildStrategyHeatmapData:
    def test_shape(self, short_result) -> None:
        assert build_strategy_heatmap_data(short_result).shape == (4, 3)

    def test_values_are_probabilities(self, short_result) -> None:
        data = build_strategy_heatmap_data(short_result)
        assert not np.isnan(data).any()
        assert np.all((data >= 0.0) & (data <= 1.0))

    def test_cell_matches_average_strategy(self, short_result) -> None:
        data = build_strategy_heatmap_data(short_result)
        # Row 3 = 'cb' (player 0 facing a bet), column 1 = Q.
        expected = short_result.average_strategy[
            KuhnInfoSet((Action.CHECK, Action.BET), 2)
        ][Action.BET]
        assert data[3, 1] == pytest.approx(expected)

    def test_missing_infosets_are_nan(self) -> None:
        result = CfrResult(
            method="cfr",
            average_strategy={KuhnInfoSet((), 3): {Action.CHECK: 0.2, Action.BET: 0.8}},
            n_iterations=1,
            average_value=0.0,
            game_value=0.0,
            exploitability=0.0,
        )
        data = build_strategy_heatmap_data(result)
        assert data[0, 2] == pytest.approx(0.8)
        assert np.isnan(data).sum() == 11


# ─── build_equilibrium_heatmap_data ───────────────────────────────────────────


class TestBuildEquilibriumHeatmapData:
    def test_shape_and_no_nan(self) -> None:
        data = build_equilibrium_heatmap_data(0.2)
        assert data.shape == (4, 3)
        assert not np.isnan(data).any()

    def test_known_cells(self) -> None:
        data = build_equilibrium_heatmap_data(0.0)
        np.testing.assert_allclose(data[1], [1.0 / 3.0, 0.0, 1.0])  # P1 after check
        np.testing.assert_allclose(data[2], [0.0, 1.0 / 3.0, 1.0])  # P1 facing bet

    def test_bad_alpha_raises(self) -> None:
        with pytest.raises(ValueError):
            build_equilibrium_heatmap_data(0.9)


# ─── Plot functions ───────────────────────────────────────────────────────────


class TestPlotFunctions:
    def test_single_panel(self) -> None:
        fig = plot_strategy_heatmap(build_equilibrium_heatmap_data(), "Nash", show=False)
        assert isinstance(fig, matplotlib.figure.Figure)

    def test_cfr_wrapper(self, short_result) -> None:
        fig = plot_cfr_strategy_heatmap(short_result, show=False)
        assert isinstance(fig, matplotlib.figure.Figure)
        assert "CFR" in fig.axes[0].get_title()

    def test_comparison_has_extra_nash_panel(self, short_result, mccfr_result) -> None:
        fig = plot_strategy_comparison([short_result, mccfr_result], show=False)
        # Two run panels + Nash panel + colorbar axis.
        assert len(fig.axes) == 4

    def test_comparison_explicit_alpha(self, short_result) -> None:
        fig = plot_strategy_comparison([short_result], alpha=0.1, show=False)
        assert "α=0.100" in fig.axes[1].get_title()

    def test_convergence_plot(self, short_result) -> None:
        fig = plot_convergence([short_result], show=False)
        assert len(fig.axes[0].lines) == 2  # run + game value line

    def test_save_path(self, short_result, tmp_path) -> None:
        path = tmp_path / "heatmap.png"
        plot_cfr_strategy_heatmap(short_result, show=False, save_path=str(path))
        assert os.path.getsize(path) > 0
