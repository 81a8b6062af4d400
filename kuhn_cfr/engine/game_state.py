"""
Two-player turn-taking harness for complete Kuhn poker hands.

Hand flow:
    DEAL → on_start(card) for both seats →
    (decide_action by the player to move → append → terminal check)* →
    SETTLEMENT → handle_result(history, payoff) for both seats

Player 0 always acts first. Termination is checked after every single
action because a hand can end after 2, 3 or 4 actions.
"""

from __future__ import annotations

from dataclasses import dataclass

from .cards import History, card_to_str, decode_action, history_to_str
from .deck import deal_cards, validate_deal
from .players import Player
from .rules import Outcome, classify_terminal, payoff, validate_history

NUM_PLAYERS: int = 2


def current_player(history: History) -> int:
    """Return the seat (0 or 1) whose turn it is after *history*."""
    return len(history) % 2


@dataclass
class HandResult:
    """Result of a completed Kuhn hand, from player 0's perspective."""
    cards: tuple[int, int]
    history: History
    outcome: Outcome
    payoff: int                  # Signed chips won by player 0

    @property
    def payoffs(self) -> tuple[int, int]:
        return self.payoff, -self.payoff

    def __str__(self) -> str:
        payoff_str = f"+{self.payoff}" if self.payoff >= 0 else f"{self.payoff}"
        return (
            f"P0: {card_to_str(self.cards[0])} | P1: {card_to_str(self.cards[1])} | "
            f"Actions: {history_to_str(self.history) or '-'} | "
            f"{self.outcome.name} {payoff_str}"
        )


class KuhnGame:
    """Seats exactly two players and plays hands between them."""

    def __init__(self) -> None:
        self.players: list[Player] = []

    def add_player(self, player: Player) -> None:
        """Seat *player* in the next free seat.

        Raises:
            ValueError: If both seats are already taken.
        """
        if len(self.players) >= NUM_PLAYERS:
            raise ValueError("Kuhn poker seats exactly two players.")
        player.on_register(len(self.players))
        self.players.append(player)

    def play_hand(self, cards: tuple[int, int] | None = None) -> HandResult:
        """Play one complete hand and notify both players of the result.

        Args:
            cards: Optional fixed deal (player 0 card, player 1 card).
                   A fresh random deal is used when None.

        Returns:
            HandResult for the hand.

        Raises:
            ValueError: If fewer than two players are seated, the deal is
                        illegal, or a player's action makes the history illegal.
        """
        if len(self.players) != NUM_PLAYERS:
            raise ValueError(
                f"Need {NUM_PLAYERS} players to start a hand, have {len(self.players)}."
            )
        if cards is None:
            cards = deal_cards()
        validate_deal(cards)

        for player, card in zip(self.players, cards, strict=True):
            player.on_start(card)

        history: History = ()
        value = payoff(history, cards)
        while value is None:
            mover = self.players[current_player(history)]
            action = decode_action(int(mover.decide_action(history)))
            history = history + (action,)
            validate_history(history)
            value = payoff(history, cards)

        result = HandResult(
            cards=cards,
            history=history,
            outcome=classify_terminal(history),
            payoff=value,
        )
        for player, player_payoff in zip(self.players, result.payoffs, strict=True):
            player.handle_result(history, player_payoff)
        return result

    def start(self, n_rounds: int) -> list[HandResult]:
        """Play *n_rounds* hands with fresh deals and return every result."""
        return [self.play_hand() for _ in range(n_rounds)]
