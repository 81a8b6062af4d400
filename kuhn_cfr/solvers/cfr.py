"""CFR and outcome-sampling MCCFR solvers for Kuhn poker.

Finds an approximate Nash equilibrium for both seats by repeated self-play
with Counterfactual Regret Minimization.

Game-theory summary
-------------------
Kuhn poker is a two-player zero-sum game with imperfect information:
  - Deck {J, Q, K}; each player antes 1 and receives one private card.
  - Player 0 acts first; each decision is CHECK or BET.
  - The game value for player 0 is -1/18 under optimal play.

Information sets
~~~~~~~~~~~~~~~~
  KuhnInfoSet(history, card)
      The public history plus the mover's own card. Twelve in total.

Node store
~~~~~~~~~~
  One CfrNode per infoset, created lazily on first visit and never deleted.
  Each node keeps a signed cumulative regret and a non-negative cumulative
  strategy weight per action. Neither is ever reset during a run.

Algorithms
~~~~~~~~~~
  cfr    Chance-sampled vanilla CFR. Both actions are walked at every decision;
         regrets are weighted by the opponent's reach, strategy sums by the
         mover's own reach.
  mccfr  Outcome-sampling MCCFR. One action is sampled per decision from the
         ε-exploring distribution; regrets are importance-weighted by
         1 / (own reach × sampled probability), which makes each update an
         unbiased estimate of the full-tree regret.

Only the time-average strategy converges to equilibrium; the per-iteration
regret-matching strategy does not.
"""

from __future__ import annotations

import argparse
import logging
import math
from dataclasses import dataclass, field
from itertools import product
from typing import Callable, Iterator

import numpy as np
from tqdm import tqdm

from kuhn_cfr.engine.cards import ACTIONS, NUM_ACTIONS, Action, History, decode_action
from kuhn_cfr.engine.deck import DEAL_PROB, all_deals, deal_cards
from kuhn_cfr.engine.game_state import current_player
from kuhn_cfr.engine.rules import payoff
from kuhn_cfr.solvers.information_sets import (
    KuhnInfoSet,
    decision_info_sets,
    make_info_set,
)

logger = logging.getLogger(__name__)

# ─── Constants and type aliases ────────────────────────────────────────────────

METHOD_CFR: str = "cfr"
METHOD_MCCFR: str = "mccfr"

# Exploration rate used when the caller does not pick one.
DEFAULT_EXPLORATION: dict[str, float] = {
    METHOD_CFR: 0.0,
    METHOD_MCCFR: 0.1,
}

# Game value for player 0 at any Nash equilibrium.
KUHN_GAME_VALUE: float = -1.0 / 18.0

# Reach probability of (player 0, player 1) along the current walk.
ReachProbs = tuple[float, float]

StrategyProfile = dict[KuhnInfoSet, dict[Action, float]]


# ─── Regret matching ───────────────────────────────────────────────────────────


def regret_matching(regret_sum: np.ndarray) -> np.ndarray:
    """Return the regret-matching distribution for one node.

    Strategy is proportional to positive regrets. Falls back to uniform if
    all regrets are ≤ 0 (including the initial state before any accumulation).

    Args:
        regret_sum: Cumulative regret per action.

    Returns:
        float64 array of action probabilities summing to 1.
    """
    positive = np.maximum(regret_sum, 0.0)
    total = float(positive.sum())
    if total <= 0.0:
        return np.full(len(regret_sum), 1.0 / len(regret_sum))
    return positive / total


def _sample(probs: np.ndarray) -> Action:
    """Draw one action index from *probs* using NumPy's global RNG."""
    return decode_action(int(np.random.choice(NUM_ACTIONS, p=probs)))


@dataclass
class CfrNode:
    """Mutable accumulators for one information set.

    Attributes:
        exploration:  ε used for ε-greedy blending, fixed at creation.
        regret_sum:   float64[2] cumulative counterfactual regret (signed).
        strategy_sum: float64[2] reach-weighted strategy sum (non-negative).
    """

    exploration: float = 0.0
    regret_sum: np.ndarray = field(default_factory=lambda: np.zeros(NUM_ACTIONS))
    strategy_sum: np.ndarray = field(default_factory=lambda: np.zeros(NUM_ACTIONS))

    def strategy(self) -> np.ndarray:
        """Full action distribution used inside the tree walkers.

        With ε > 0 every action keeps probability at least ε / NUM_ACTIONS:
            p(a) = ε / NUM_ACTIONS + base(a) × (1 - ε)
        """
        base = regret_matching(self.regret_sum)
        if self.exploration > 0.0:
            return self.exploration / NUM_ACTIONS + base * (1.0 - self.exploration)
        return base

    def sample_action(self) -> Action:
        """Greedy regret-matching sample for live (non-training) play.

        Only strictly positive regrets count; no exploration is mixed in.
        """
        return _sample(regret_matching(self.regret_sum))

    def average_strategy(self) -> np.ndarray:
        """Normalised strategy sum: the converging average strategy."""
        total = float(self.strategy_sum.sum())
        if total <= 0.0:
            return np.full(NUM_ACTIONS, 1.0 / NUM_ACTIONS)
        return self.strategy_sum / total


# ─── Information set store ─────────────────────────────────────────────────────


class InfoSetStore:
    """Owns exactly one CfrNode per information set for a training run.

    Not thread-safe; the single training loop is the only reader and writer.
    """

    def __init__(self, exploration: float = 0.0) -> None:
        if not 0.0 <= exploration <= 1.0:
            raise ValueError(f"Exploration rate must lie in [0, 1], got {exploration}.")
        self.exploration = exploration
        self._nodes: dict[KuhnInfoSet, CfrNode] = {}

    def get_or_create(self, info_set: KuhnInfoSet) -> CfrNode:
        """Return the node for *info_set*, inserting a zeroed one on first visit."""
        node = self._nodes.get(info_set)
        if node is None:
            node = CfrNode(exploration=self.exploration)
            self._nodes[info_set] = node
        return node

    def get(self, info_set: KuhnInfoSet) -> CfrNode | None:
        return self._nodes.get(info_set)

    def items(self) -> Iterator[tuple[KuhnInfoSet, CfrNode]]:
        return iter(self._nodes.items())

    def __contains__(self, info_set: object) -> bool:
        return info_set in self._nodes

    def __len__(self) -> int:
        return len(self._nodes)

    def __iter__(self) -> Iterator[KuhnInfoSet]:
        return iter(self._nodes)

    def average_strategy(self) -> StrategyProfile:
        """Extract the normalised average strategy of every visited infoset."""
        return {
            info_set: dict(zip(ACTIONS, (float(p) for p in node.average_strategy()), strict=True))
            for info_set, node in self._nodes.items()
        }

    def __str__(self) -> str:
        return render_store(self)


def _info_set_order(info_set: KuhnInfoSet) -> tuple:
    return (len(info_set.history), tuple(int(a) for a in info_set.history), info_set.card)


def render_store(store: InfoSetStore) -> str:
    """Render every node as one diagnostic line.

    Each line shows the normalised average CHECK/BET ratios followed by the
    raw regret and strategy accumulators. Not a stable machine format.
    """
    lines = []
    for info_set in sorted(store, key=_info_set_order):
        node = store.get(info_set)
        avg = node.average_strategy()
        regret = node.regret_sum
        sums = node.strategy_sum
        lines.append(
            f"{info_set.label():<6} check={avg[Action.CHECK]:.3f} bet={avg[Action.BET]:.3f}"
            f" | regret=[{regret[Action.CHECK]:+.3f}, {regret[Action.BET]:+.3f}]"
            f" strategy_sum=[{sums[Action.CHECK]:.3f}, {sums[Action.BET]:.3f}]"
        )
    return "\n".join(lines)


# ─── Tree walkers ──────────────────────────────────────────────────────────────


def _extend_reach(reach: ReachProbs, player: int, prob: float) -> ReachProbs:
    """Multiply *player*'s reach by *prob*, leaving the opponent's unchanged."""
    if player == 0:
        return reach[0] * prob, reach[1]
    return reach[0], reach[1] * prob


def _terminal_value(history: History, cards: tuple[int, ...]) -> float | None:
    """Terminal payoff from the perspective of the player to move, or None."""
    value = payoff(history, cards)
    if value is None:
        return None
    return float(value if current_player(history) == 0 else -value)


def cfr(
    store: InfoSetStore,
    history: History,
    cards: tuple[int, ...],
    reach: ReachProbs,
) -> float:
    """Vanilla CFR walk over both actions at every decision.

    Args:
        store:   Node store (updated in-place).
        history: Actions taken so far; () at the root.
        cards:   (player 0 card, player 1 card).
        reach:   (player 0 reach, player 1 reach); (1.0, 1.0) at the root.

    Returns:
        Expected value of this history for the player to move.
    """
    terminal = _terminal_value(history, cards)
    if terminal is not None:
        return terminal

    player = current_player(history)
    node = store.get_or_create(make_info_set(history, cards))
    strategy = node.strategy()

    action_values = np.zeros(NUM_ACTIONS)
    for action in ACTIONS:
        child_reach = _extend_reach(reach, player, float(strategy[action]))
        action_values[action] = -cfr(store, history + (action,), cards, child_reach)
    node_value = float(strategy @ action_values)

    node.regret_sum += reach[1 - player] * (action_values - node_value)
    node.strategy_sum += reach[player] * strategy
    return node_value


def mccfr(
    store: InfoSetStore,
    history: History,
    cards: tuple[int, ...],
    reach: ReachProbs,
) -> float:
    """Outcome-sampling MCCFR walk along one sampled trajectory.

    With w = value / own_reach / p(sampled):
        sampled action:   regret += w × (1 - p(sampled))
        other actions:    regret -= w × p(sampled)

    Args:
        store:   Node store (updated in-place). Its exploration rate must be
                 positive so that no sampled probability is ever zero.
        history: Actions taken so far; () at the root.
        cards:   (player 0 card, player 1 card).
        reach:   (player 0 reach, player 1 reach); (1.0, 1.0) at the root.

    Returns:
        The sampled terminal payoff for the player to move.

    Raises:
        ValueError: If the own reach or the sampled probability is zero,
                    which means the exploration guarantee was broken.
    """
    terminal = _terminal_value(history, cards)
    if terminal is not None:
        return terminal

    player = current_player(history)
    node = store.get_or_create(make_info_set(history, cards))
    strategy = node.strategy()

    action = _sample(strategy)
    prob = float(strategy[action])
    own_reach = reach[player]
    if own_reach <= 0.0 or prob <= 0.0:
        raise ValueError(
            f"Zero importance weight at {make_info_set(history, cards).label()} "
            f"(reach={own_reach}, p={prob}); MCCFR needs an exploration rate > 0."
        )

    value = -mccfr(store, history + (action,), cards, _extend_reach(reach, player, prob))

    weight = value / own_reach / prob
    regrets = np.full(NUM_ACTIONS, -weight * prob)
    regrets[action] = weight * (1.0 - prob)
    node.regret_sum += regrets
    node.strategy_sum += own_reach * strategy
    return value


_WALKERS: dict[str, Callable[[InfoSetStore, History, tuple[int, ...], ReachProbs], float]] = {
    METHOD_CFR: cfr,
    METHOD_MCCFR: mccfr,
}


# ─── Exact evaluation ──────────────────────────────────────────────────────────


def _profile_probs(profile: StrategyProfile, info_set: KuhnInfoSet) -> list[float]:
    """Action probabilities for *info_set*; uniform if the profile lacks it."""
    probs = profile.get(info_set)
    if probs is None:
        return [1.0 / NUM_ACTIONS] * NUM_ACTIONS
    return [probs.get(a, 0.0) for a in ACTIONS]


def _history_value(profile: StrategyProfile, history: History, cards: tuple[int, ...]) -> float:
    """Exact player-0 EV of *history* when both seats follow *profile*."""
    value = payoff(history, cards)
    if value is not None:
        return float(value)
    probs = _profile_probs(profile, make_info_set(history, cards))
    return sum(
        p * _history_value(profile, history + (a,), cards)
        for a, p in zip(ACTIONS, probs, strict=True)
        if p > 0.0
    )


def expected_value(profile: StrategyProfile) -> float:
    """Exact expected payoff to player 0, averaged over all six deals.

    Examples:
        >>> round(expected_value({}), 4)   # both seats uniformly random
        0.125
    """
    return sum(DEAL_PROB * _history_value(profile, (), cards) for cards in all_deals())


def best_response_value(profile: StrategyProfile, player: int) -> float:
    """Value *player* earns by best-responding to the other seat's profile.

    Enumerates all 2^6 pure strategies of *player* over its six infosets,
    which is exact for Kuhn poker.
    """
    info_sets = decision_info_sets(player)
    best = -math.inf
    for choice in product(ACTIONS, repeat=len(info_sets)):
        candidate = dict(profile)
        for info_set, action in zip(info_sets, choice, strict=True):
            candidate[info_set] = {a: 1.0 if a == action else 0.0 for a in ACTIONS}
        ev = expected_value(candidate)
        best = max(best, ev if player == 0 else -ev)
    return best


def compute_exploitability(profile: StrategyProfile) -> float:
    """Total exploitability of a strategy profile in chips per hand.

    Exploitability = br_value(player 0) + br_value(player 1)

    Each best-response value is at least the game value for that seat, and
    the two game values cancel, so the sum is 0 exactly at Nash equilibrium.

    Examples:
        >>> compute_exploitability({}) > 0   # uniform play is exploitable
        True
    """
    return max(0.0, best_response_value(profile, 0) + best_response_value(profile, 1))


# ─── Result type ───────────────────────────────────────────────────────────────


@dataclass
class CfrResult:
    """Output of a training run.

    Attributes:
        method:           "cfr" or "mccfr".
        average_strategy: Average strategy per visited infoset
                          (KuhnInfoSet → {Action: prob}).
        n_iterations:     Hands trained.
        average_value:    Running average of the root value for player 0.
        game_value:       Exact player-0 EV of the average strategy profile.
        exploitability:   Total exploitability of the average profile.
        value_history:    (iteration, running average) checkpoints.
        store:            The trained node store.
    """

    method: str
    average_strategy: StrategyProfile
    n_iterations: int
    average_value: float
    game_value: float
    exploitability: float
    value_history: list[tuple[int, float]] = field(default_factory=list)
    store: InfoSetStore | None = field(default=None, repr=False)


# ─── Training loop ─────────────────────────────────────────────────────────────


class CfrTrainer:
    """Runs repeated self-play hands through one walker against one store."""

    def __init__(self, method: str = METHOD_CFR, exploration: float | None = None) -> None:
        if method not in _WALKERS:
            raise ValueError(f"Unknown method {method!r}; expected one of {sorted(_WALKERS)}.")
        if exploration is None:
            exploration = DEFAULT_EXPLORATION[method]
        self.method = method
        self.store = InfoSetStore(exploration)
        self.iterations = 0
        self.total_value = 0.0
        self.value_history: list[tuple[int, float]] = []

    @property
    def average_value(self) -> float:
        """Running average root value for player 0 (0.0 before training)."""
        if self.iterations == 0:
            return 0.0
        return self.total_value / self.iterations

    def train(self, n_iterations: int, *, log_every: int = 0, progress: bool = False) -> float:
        """Play *n_iterations* self-play hands and update the store.

        May be called repeatedly; accumulators keep growing across calls and
        stopping after any completed hand leaves the store consistent.

        Args:
            n_iterations: Hands to train.
            log_every:    Record a value checkpoint and log progress every N
                          hands (0 disables).
            progress:     Show a tqdm progress bar.

        Returns:
            Running average root value for player 0.
        """
        walker = _WALKERS[self.method]
        iterator = range(n_iterations)
        if progress:
            iterator = tqdm(iterator, desc=f"Training {self.method.upper()}", unit="hands")

        for _ in iterator:
            cards = deal_cards()
            self.total_value += walker(self.store, (), cards, (1.0, 1.0))
            self.iterations += 1

            if log_every and self.iterations % log_every == 0:
                self.value_history.append((self.iterations, self.average_value))
                logger.info(
                    "%s iteration %d: average value %+.4f, %d infosets",
                    self.method,
                    self.iterations,
                    self.average_value,
                    len(self.store),
                )
        return self.average_value

    def average_strategy(self) -> StrategyProfile:
        return self.store.average_strategy()

    def render(self) -> str:
        return render_store(self.store)

    def result(self) -> CfrResult:
        """Snapshot the run, evaluating the average profile exactly."""
        profile = self.average_strategy()
        return CfrResult(
            method=self.method,
            average_strategy=profile,
            n_iterations=self.iterations,
            average_value=self.average_value,
            game_value=expected_value(profile),
            exploitability=compute_exploitability(profile),
            value_history=list(self.value_history),
            store=self.store,
        )


def solve(
    n_iterations: int = 10_000,
    method: str = METHOD_CFR,
    exploration: float | None = None,
    seed: int | None = None,
    log_every: int | None = None,
    progress: bool = False,
) -> CfrResult:
    """Train a fresh store and return its average strategy and diagnostics.

    Args:
        n_iterations: Hands to train.
        method:       "cfr" or "mccfr".
        exploration:  ε for every node; defaults per DEFAULT_EXPLORATION.
        seed:         NumPy random seed. None for a non-deterministic run.
        log_every:    Checkpoint interval; defaults to 1% of the run.
        progress:     Show a tqdm progress bar.

    Returns:
        CfrResult for the run.

    Examples:
        >>> result = solve(n_iterations=2_000, seed=7)
        >>> result.n_iterations
        2000
    """
    if seed is not None:
        np.random.seed(seed)
    if log_every is None:
        log_every = max(1, n_iterations // 100)

    trainer = CfrTrainer(method=method, exploration=exploration)
    logger.info(
        "Training %s for %d hands (exploration=%.3f)",
        method,
        n_iterations,
        trainer.store.exploration,
    )
    trainer.train(n_iterations, log_every=log_every, progress=progress)
    result = trainer.result()
    logger.info(
        "Finished %s: average value %+.4f, exploitability %.4f",
        method,
        result.average_value,
        result.exploitability,
    )
    return result


# ─── CLI ───────────────────────────────────────────────────────────────────────


def run(argv: list[str] | None = None) -> CfrResult:
    """Parse CLI arguments, train, print the reports, and return the result."""
    # Imported here to avoid a circular import (the reports import this module).
    from kuhn_cfr.analysis.strategy_report import (
        print_average_strategy,
        print_equilibrium_check,
        print_store,
        print_training_summary,
    )
    from kuhn_cfr.config import Config, load_config

    parser = argparse.ArgumentParser(description="Solve Kuhn poker with CFR or MCCFR")
    parser.add_argument("--config", type=str, default=None, help="YAML config file")
    parser.add_argument("--iterations", type=int, default=None, help="Training hands")
    parser.add_argument("--method", choices=sorted(_WALKERS), default=None, help="Walker")
    parser.add_argument("--exploration", type=float, default=None, help="Exploration rate ε")
    parser.add_argument("--seed", type=int, default=None, help="Random seed")
    parser.add_argument("--log-every", type=int, default=None, help="Progress log interval")
    parser.add_argument("--progress", action="store_true", help="Show a progress bar")
    parser.add_argument("--heatmap", type=str, default=None, help="Save a strategy heat map PNG")
    parser.add_argument("--lookup-html", type=str, default=None, help="Save a Plotly lookup HTML")
    parser.add_argument("--verbose", action="store_true", help="Debug logging")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    config = load_config(args.config) if args.config else Config()
    training = config.training
    for name in ("iterations", "method", "exploration", "seed", "log_every"):
        value = getattr(args, name)
        if value is not None:
            setattr(training, name, value)
    if args.progress:
        training.progress = True
    heatmap_path = args.heatmap or config.output.heatmap_path
    lookup_html_path = args.lookup_html or config.output.lookup_html_path

    result = solve(
        n_iterations=training.iterations,
        method=training.method,
        exploration=training.exploration,
        seed=training.seed,
        log_every=training.log_every,
        progress=training.progress,
    )

    print_training_summary(result)
    print_average_strategy(result)
    print_equilibrium_check(result)
    print_store(result)

    if heatmap_path:
        import matplotlib

        matplotlib.use("Agg")
        from kuhn_cfr.analysis.heat_maps import plot_cfr_strategy_heatmap

        plot_cfr_strategy_heatmap(result, show=False, save_path=heatmap_path)
        logger.info("Saved strategy heat map to %s", heatmap_path)
    if lookup_html_path:
        from kuhn_cfr.analysis.plotly_lookup import build_strategy_lookup_figure, save_lookup_html

        save_lookup_html(build_strategy_lookup_figure(result), lookup_html_path)
        logger.info("Saved interactive lookup to %s", lookup_html_path)

    return result


def main(argv: list[str] | None = None) -> int:
    run(argv)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
