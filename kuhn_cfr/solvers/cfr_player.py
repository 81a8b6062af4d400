"""A Kuhn poker player driven by a CFR-trained node store."""

from __future__ import annotations

import numpy as np

from kuhn_cfr.engine.cards import NUM_ACTIONS, Action, History, decode_action
from kuhn_cfr.engine.players import Player
from kuhn_cfr.solvers.cfr import METHOD_CFR, CfrTrainer
from kuhn_cfr.solvers.information_sets import KuhnInfoSet


class CfrPlayer(Player):
    """Plays from its own CFR/MCCFR training.

    By default actions are the greedy regret-matching sample of the node for
    (history, own card). With ``use_average=True`` the player samples the
    normalised average strategy instead, which is the part that converges to
    equilibrium. Unseen infosets are played uniformly at random.
    """

    def __init__(
        self,
        name: str = "CFR",
        method: str = METHOD_CFR,
        exploration: float | None = None,
        use_average: bool = False,
    ) -> None:
        super().__init__(name)
        self.trainer = CfrTrainer(method=method, exploration=exploration)
        self.use_average = use_average

    def train(self, n_iterations: int, *, log_every: int = 0, progress: bool = False) -> float:
        """Self-play *n_iterations* hands; returns the running average value."""
        return self.trainer.train(n_iterations, log_every=log_every, progress=progress)

    def decide_action(self, history: History) -> Action:
        if self.card is None:
            raise ValueError("decide_action called before on_start dealt a card.")
        node = self.trainer.store.get(KuhnInfoSet(history=tuple(history), card=self.card))
        if node is None:
            return decode_action(int(np.random.randint(NUM_ACTIONS)))
        if self.use_average:
            return decode_action(int(np.random.choice(NUM_ACTIONS, p=node.average_strategy())))
        return node.sample_action()

    def __str__(self) -> str:
        header = (
            f"{self.__class__.__name__}({self.name}, method={self.trainer.method}, "
            f"iterations={self.trainer.iterations}, "
            f"average value={self.trainer.average_value:+.4f})"
        )
        return f"{header}\n{self.trainer.render()}"
