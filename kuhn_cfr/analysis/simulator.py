"""
Monte Carlo head-to-head simulator for Kuhn poker players.

Plays full hands through the KuhnGame harness and accumulates player 0's
per-hand payoffs into EV statistics with confidence intervals.

Primary use: check that a trained CfrPlayer beats a uniformly random opponent
from either seat. A Nash strategy can only break even against another Nash
strategy (−1/18 per hand for seat 0), but it earns a clear profit against
random play.

Key implementation notes:
    - Payoffs are always recorded from seat 0's perspective; swap the
      arguments to measure the other seat.
    - Player statistics (hands_played, total_payoff) are reset before the run
      so each SimulationResult describes exactly n_hands hands.
"""

from __future__ import annotations

import math
from dataclasses import dataclass

import numpy as np

from kuhn_cfr.engine.game_state import KuhnGame
from kuhn_cfr.engine.players import Player, RandomPlayer
from kuhn_cfr.solvers.cfr import METHOD_CFR
from kuhn_cfr.solvers.cfr_player import CfrPlayer

# ─── Result type ──────────────────────────────────────────────────────────────


@dataclass
class SimulationResult:
    """Aggregate statistics from a Monte Carlo head-to-head run.

    Attributes:
        n_hands:      Number of hands simulated.
        mean_payoff:  Mean chips per hand won by player 0.
        std_payoff:   Sample standard deviation of per-hand payoffs.
        ci_95_low:    Lower bound of the 95% confidence interval for mean_payoff.
        ci_95_high:   Upper bound of the 95% confidence interval for mean_payoff.
        n_wins:       Hands where player 0's payoff > 0.
        n_losses:     Hands where player 0's payoff < 0.
        payouts:      Raw per-hand payoff array (float64, length n_hands), or
                      None if simulate_hands() was called with
                      return_payouts=False.
    """

    n_hands: int
    mean_payoff: float
    std_payoff: float
    ci_95_low: float
    ci_95_high: float
    n_wins: int
    n_losses: int
    payouts: np.ndarray | None = None

    def __str__(self) -> str:
        sign = "+" if self.mean_payoff >= 0 else ""
        return (
            f"Hands: {self.n_hands:,} | "
            f"P0 EV: {sign}{self.mean_payoff:.4f} chips/hand | "
            f"95% CI: [{self.ci_95_low:.4f}, {self.ci_95_high:.4f}] | "
            f"W/L: {self.n_wins:,}/{self.n_losses:,}"
        )


# ─── Core simulation loop ─────────────────────────────────────────────────────


def simulate_hands(
    player0: Player,
    player1: Player,
    n_hands: int = 100_000,
    seed: int | None = 42,
    return_payouts: bool = False,
) -> SimulationResult:
    """Seat two players and play n_hands of Kuhn poker between them.

    Args:
        player0:        Player in seat 0 (acts first).
        player1:        Player in seat 1.
        n_hands:        Number of hands to simulate (at least 2 for a std).
        seed:           NumPy random seed for reproducibility. None for a
                        non-deterministic run.
        return_payouts: If True, attach the raw per-hand payoff array to
                        SimulationResult.payouts.

    Returns:
        SimulationResult with player 0's EV statistics for the run.

    Raises:
        ValueError: If n_hands < 2.
    """
    if n_hands < 2:
        raise ValueError(f"n_hands must be at least 2, got {n_hands}")
    if seed is not None:
        np.random.seed(seed)

    game = KuhnGame()
    for player in (player0, player1):
        player.reset_stats()
        game.add_player(player)

    arr = np.array([r.payoff for r in game.start(n_hands)], dtype=np.float64)
    mean = float(np.mean(arr))
    std = float(np.std(arr, ddof=1))
    ci_margin = 1.96 * std / math.sqrt(n_hands)

    return SimulationResult(
        n_hands=n_hands,
        mean_payoff=mean,
        std_payoff=std,
        ci_95_low=mean - ci_margin,
        ci_95_high=mean + ci_margin,
        n_wins=int(np.sum(arr > 0)),
        n_losses=int(np.sum(arr < 0)),
        payouts=arr if return_payouts else None,
    )


# ─── Player factories ─────────────────────────────────────────────────────────


def make_random_player(name: str = "Random") -> RandomPlayer:
    """Return the uniform-random baseline player."""
    return RandomPlayer(name)


def make_trained_player(
    n_iterations: int = 20_000,
    method: str = METHOD_CFR,
    seed: int | None = 42,
    use_average: bool = True,
) -> CfrPlayer:
    """Return a CfrPlayer that has already trained for n_iterations hands.

    Args:
        n_iterations: Self-play hands to train for.
        method:       "cfr" or "mccfr".
        seed:         NumPy seed applied before training; None leaves the
                      global generator untouched.
        use_average:  Play the average strategy (True) or the current
                      regret-matching strategy (False).

    Returns:
        Trained CfrPlayer.
    """
    if seed is not None:
        np.random.seed(seed)
    player = CfrPlayer(name=method.upper(), method=method, use_average=use_average)
    player.train(n_iterations)
    return player


# ─── Validation convenience ───────────────────────────────────────────────────


def run_validation(
    n_hands: int = 50_000,
    n_iterations: int = 20_000,
    seed: int = 42,
    method: str = METHOD_CFR,
) -> dict[str, SimulationResult]:
    """Play a trained player against a random player from both seats.

    Both results are reported from the trained player's point of view, so a
    positive mean_payoff means the trained player is winning.

    Args:
        n_hands:      Hands per seat assignment.
        n_iterations: Training hands for the CfrPlayer.
        seed:         NumPy random seed; each run is seeded separately.
        method:       "cfr" or "mccfr".

    Returns:
        {'trained_first': SimulationResult, 'trained_second': SimulationResult}
    """
    trained = make_trained_player(n_iterations, method=method, seed=seed)
    first = simulate_hands(trained, make_random_player(), n_hands=n_hands, seed=seed)

    # Seat 1 results are negated so both runs read from the trained seat.
    second_raw = simulate_hands(
        make_random_player(), trained, n_hands=n_hands, seed=seed, return_payouts=True
    )
    flipped = -second_raw.payouts
    second = SimulationResult(
        n_hands=second_raw.n_hands,
        mean_payoff=-second_raw.mean_payoff,
        std_payoff=second_raw.std_payoff,
        ci_95_low=-second_raw.ci_95_high,
        ci_95_high=-second_raw.ci_95_low,
        n_wins=int(np.sum(flipped > 0)),
        n_losses=int(np.sum(flipped < 0)),
    )
    return {"trained_first": first, "trained_second": second}


# ─── __main__ ─────────────────────────────────────────────────────────────────

if __name__ == "__main__":
    print("Kuhn Monte Carlo Validation — trained CFR vs random, 50,000 hands per seat\n")
    results = run_validation()
    print(f"Trained in seat 0: {results['trained_first']}")
    print(f"Trained in seat 1: {results['trained_second']}")
