"""Tests for kuhn_cfr/analysis/strategy_report.py — equilibrium baselines and printed reports."""

from __future__ import annotations

import pytest

from kuhn_cfr.analysis.strategy_report import (
    bet_probability,
    equilibrium_bet_probs,
    equilibrium_deviation,
    equilibrium_profile,
    estimate_alpha,
    print_average_strategy,
    print_equilibrium_check,
    print_store,
    print_training_summary,
)
from kuhn_cfr.engine.cards import Action
from kuhn_cfr.solvers.cfr import CfrResult
from kuhn_cfr.solvers.information_sets import KuhnInfoSet, decision_info_sets
from tests.conftest import hist


class TestEquilibriumBaseline:
    def test_covers_every_infoset(self):
        assert set(equilibrium_bet_probs(0.1)) == set(decision_info_sets())

    @pytest.mark.parametrize("alpha", [0.0, 0.2, 1.0 / 3.0])
    def test_alpha_dependent_entries(self, alpha):
        probs = equilibrium_bet_probs(alpha)
        assert probs[KuhnInfoSet((), 1)] == alpha
        assert probs[KuhnInfoSet((), 3)] == pytest.approx(3.0 * alpha)
        assert probs[KuhnInfoSet(hist('cb'), 2)] == pytest.approx(alpha + 1.0 / 3.0)

    def test_player_one_unique(self):
        a, b = equilibrium_bet_probs(0.0), equilibrium_bet_probs(1.0 / 3.0)
        for info_set in decision_info_sets(1):
            assert a[info_set] == b[info_set]

    @pytest.mark.parametrize("alpha", [-0.01, 0.5])
    def test_alpha_out_of_range(self, alpha):
        with pytest.raises(ValueError, match="alpha"):
            equilibrium_bet_probs(alpha)

    def test_profile_distributions(self):
        for probs in equilibrium_profile(0.25).values():
            assert probs[Action.CHECK] + probs[Action.BET] == pytest.approx(1.0)


class TestHelpers:
    def test_bet_probability_missing_is_half(self):
        assert bet_probability({}, KuhnInfoSet((), 1)) == 0.5

    def test_estimate_alpha_reads_jack_open(self):
        assert estimate_alpha(equilibrium_profile(0.2)) == pytest.approx(0.2)

    def test_estimate_alpha_clipped(self):
        profile = {KuhnInfoSet((), 1): {Action.CHECK: 0.1, Action.BET: 0.9}}
        assert estimate_alpha(profile) == pytest.approx(1.0 / 3.0)

    def test_deviation_zero_at_equilibrium(self):
        result = CfrResult(
            method="cfr",
            average_strategy=equilibrium_profile(0.1),
            n_iterations=0,
            average_value=0.0,
            game_value=0.0,
            exploitability=0.0,
        )
        assert max(equilibrium_deviation(result).values()) < 1e-12

    def test_trained_deviation_small(self, cfr_result):
        assert max(equilibrium_deviation(cfr_result).values()) < 0.15


class TestPrintedReports:
    def test_training_summary(self, short_result, capsys):
        print_training_summary(short_result)
        out = capsys.readouterr().out
        assert "CFR Training Summary" in out
        assert "Iterations:          500" in out
        assert "Exploitability" in out

    def test_average_strategy(self, short_result, capsys):
        print_average_strategy(short_result)
        out = capsys.readouterr().out
        assert "Average Strategy" in out
        assert "Player 0" in out and "Player 1" in out
        assert out.count("\n") > 12

    def test_equilibrium_check(self, short_result, capsys):
        print_equilibrium_check(short_result)
        out = capsys.readouterr().out
        assert "Equilibrium Check" in out
        assert "Max deviation" in out
        assert "Q:cb" in out

    def test_store(self, short_result, capsys):
        print_store(short_result)
        out = capsys.readouterr().out
        assert "Information Set Store" in out
        assert "strategy_sum=" in out

    def test_store_missing(self, capsys):
        result = CfrResult(
            method="cfr",
            average_strategy={},
            n_iterations=0,
            average_value=0.0,
            game_value=0.125,
            exploitability=0.9,
        )
        print_store(result)
        assert "no store attached" in capsys.readouterr().out
