"""Player interface for the Kuhn poker harness, plus a random baseline."""

from __future__ import annotations

from abc import ABC, abstractmethod

import numpy as np

from .cards import ACTIONS, Action, History


class Player(ABC):
    """Abstract base class for anything that can sit at a Kuhn table.

    The harness calls, in order:
        on_register(player_id)        once, when seated
        on_start(card)                at the start of every hand
        decide_action(history)        whenever it is this player's turn
        handle_result(history, payoff) once the hand is over
    """

    def __init__(self, name: str = "Player") -> None:
        self.name = name
        self.player_id: int | None = None
        self.card: int | None = None
        self.hands_played = 0
        self.hands_won = 0
        self.total_payoff = 0

    def on_register(self, player_id: int) -> None:
        """Remember which seat (0 acts first, 1 acts second) this player holds."""
        self.player_id = player_id

    def on_start(self, card: int) -> None:
        """Receive this hand's private card."""
        self.card = card

    @abstractmethod
    def decide_action(self, history: History) -> Action:
        """Choose an action given the public history and self.card."""
        ...

    def handle_result(self, history: History, payoff: int) -> None:
        """Called after a hand completes with this player's signed payoff."""
        self.hands_played += 1
        self.total_payoff += payoff
        if payoff > 0:
            self.hands_won += 1

    def reset_stats(self) -> None:
        self.hands_played = 0
        self.hands_won = 0
        self.total_payoff = 0

    def __str__(self) -> str:
        return f"{self.__class__.__name__}({self.name})"


class RandomPlayer(Player):
    """Checks or bets with equal probability, ignoring its card."""

    def __init__(self, name: str = "Random") -> None:
        super().__init__(name)

    def decide_action(self, history: History) -> Action:
        return ACTIONS[int(np.random.randint(len(ACTIONS)))]


class FixedPlayer(Player):
    """Always takes the same action. Useful for scripted test hands."""

    def __init__(self, action: Action, name: str = "Fixed") -> None:
        super().__init__(name)
        self.action = action

    def decide_action(self, history: History) -> Action:
        return self.action
