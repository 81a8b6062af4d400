"""Strategy report for the Kuhn poker CFR/MCCFR solver.

Four public print functions format a CfrResult into human-readable tables for
inspection and comparison with the analytic Kuhn equilibrium.

    print_training_summary(result)  — average value, exact EV, exploitability
    print_average_strategy(result)  — P(CHECK) / P(BET) at every infoset
    print_equilibrium_check(result) — deviation from the closest known Nash
    print_store(result)             — raw regret / strategy accumulators

Known equilibrium family (Kuhn 1950)
~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~
Player 0 picks α ∈ [0, 1/3]:
    J opens with a bet α,  Q never bets,  K bets 3α
    facing a bet after checking: J folds, Q calls α + 1/3, K calls
Player 1's strategy is unique:
    after a check: J bets 1/3, Q checks, K bets
    facing a bet:  J folds, Q calls 1/3, K calls
The value for player 0 is −1/18 for every α.
"""

from __future__ import annotations

from kuhn_cfr.engine.cards import Action, card_to_str, history_to_str, str_to_history
from kuhn_cfr.solvers.cfr import KUHN_GAME_VALUE, CfrResult, StrategyProfile, render_store
from kuhn_cfr.solvers.information_sets import KuhnInfoSet, decision_info_sets

_ALPHA_MAX: float = 1.0 / 3.0


# ─── Known baselines ──────────────────────────────────────────────────────────


def equilibrium_bet_probs(alpha: float) -> dict[KuhnInfoSet, float]:
    """P(BET) at every infoset for the Nash equilibrium with parameter α.

    Raises:
        ValueError: If α lies outside [0, 1/3].
    """
    if not 0.0 <= alpha <= _ALPHA_MAX + 1e-12:
        raise ValueError(f"alpha must lie in [0, 1/3], got {alpha}")
    table = {
        # Player 0 opening
        ("", 1): alpha,
        ("", 2): 0.0,
        ("", 3): 3.0 * alpha,
        # Player 1 after a check
        ("c", 1): 1.0 / 3.0,
        ("c", 2): 0.0,
        ("c", 3): 1.0,
        # Player 1 facing a bet
        ("b", 1): 0.0,
        ("b", 2): 1.0 / 3.0,
        ("b", 3): 1.0,
        # Player 0 facing a bet after checking
        ("cb", 1): 0.0,
        ("cb", 2): alpha + 1.0 / 3.0,
        ("cb", 3): 1.0,
    }
    return {
        KuhnInfoSet(history=str_to_history(h), card=card): p for (h, card), p in table.items()
    }


def equilibrium_profile(alpha: float) -> StrategyProfile:
    """Full StrategyProfile for the Nash equilibrium with parameter α."""
    return {
        info_set: {Action.CHECK: 1.0 - p_bet, Action.BET: p_bet}
        for info_set, p_bet in equilibrium_bet_probs(alpha).items()
    }


def bet_probability(profile: StrategyProfile, info_set: KuhnInfoSet) -> float:
    """P(BET) at *info_set*, or 0.5 when the profile has not visited it."""
    probs = profile.get(info_set)
    if probs is None:
        return 0.5
    return probs.get(Action.BET, 0.0)


def estimate_alpha(profile: StrategyProfile) -> float:
    """Read α off player 0's J opening bet, clipped to [0, 1/3]."""
    alpha = bet_probability(profile, KuhnInfoSet(history=(), card=1))
    return min(max(alpha, 0.0), _ALPHA_MAX)


def equilibrium_deviation(result: CfrResult) -> dict[KuhnInfoSet, float]:
    """|P(BET) − Nash P(BET)| per infoset against the closest equilibrium."""
    target = equilibrium_bet_probs(estimate_alpha(result.average_strategy))
    return {
        info_set: abs(bet_probability(result.average_strategy, info_set) - p_nash)
        for info_set, p_nash in target.items()
    }


# ─── Public report functions ──────────────────────────────────────────────────


def print_training_summary(result: CfrResult) -> None:
    """Print the training diagnostics of a run.

    Args:
        result: CfrResult returned by cfr.solve() or CfrTrainer.result().
    """
    print("=" * 56)
    print(f"Kuhn Poker {result.method.upper()} Training Summary")
    print("=" * 56)
    print(f"  Iterations:          {result.n_iterations}")
    print(f"  Average root value:  {result.average_value:+.4f}  (player 0, sampled)")
    print(f"  Average-profile EV:  {result.game_value:+.4f}  (player 0, exact)")
    print(f"  Nash game value:     {KUHN_GAME_VALUE:+.4f}  (−1/18)")
    print(f"  Exploitability:      {result.exploitability:.4f} chips/hand")
    print(f"  Infosets visited:    {len(result.average_strategy)}")
    print()


def print_average_strategy(result: CfrResult) -> None:
    """Print the average strategy at every decision infoset, grouped by seat.

    Args:
        result: CfrResult returned by cfr.solve().
    """
    print("=" * 56)
    print("Average Strategy")
    print("=" * 56)
    for player in (0, 1):
        print(f"  Player {player}")
        print(f"  {'Card':>4}  {'History':>7}  {'P(check)':>8}  {'P(bet)':>8}")
        print(f"  {'----':>4}  {'-------':>7}  {'--------':>8}  {'--------':>8}")
        for info_set in decision_info_sets(player):
            p_bet = bet_probability(result.average_strategy, info_set)
            history = history_to_str(info_set.history) or "-"
            print(
                f"  {card_to_str(info_set.card):>4}  {history:>7}"
                f"  {1.0 - p_bet:>8.3f}  {p_bet:>8.3f}"
            )
        print()


def print_equilibrium_check(result: CfrResult) -> None:
    """Compare P(BET) at every infoset with the closest Kuhn equilibrium.

    Args:
        result: CfrResult returned by cfr.solve().
    """
    alpha = estimate_alpha(result.average_strategy)
    target = equilibrium_bet_probs(alpha)
    deviation = equilibrium_deviation(result)

    print("=" * 56)
    print(f"Equilibrium Check  (α = {alpha:.3f})")
    print("=" * 56)
    print(f"  {'Infoset':>7}  {'P(bet)':>8}  {'Nash':>8}  {'|Δ|':>8}")
    print(f"  {'-------':>7}  {'--------':>8}  {'--------':>8}  {'--------':>8}")
    for info_set in decision_info_sets():
        p_bet = bet_probability(result.average_strategy, info_set)
        print(
            f"  {info_set.label():>7}  {p_bet:>8.3f}"
            f"  {target[info_set]:>8.3f}  {deviation[info_set]:>8.3f}"
        )
    print()
    print(f"  Max deviation:       {max(deviation.values()):.4f}")
    print()


def print_store(result: CfrResult) -> None:
    """Print the raw node accumulators of the trained store.

    Args:
        result: CfrResult whose ``store`` is populated.
    """
    print("=" * 56)
    print("Information Set Store")
    print("=" * 56)
    if result.store is None:
        print("  (no store attached)")
    else:
        print(render_store(result.store))
    print()
