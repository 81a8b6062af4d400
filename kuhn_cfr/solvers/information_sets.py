"""
Information set types for the Kuhn poker CFR solver.

An information set (infoset) encodes exactly what a player observes at a
decision point: the public action history and their own private card. The
opponent's card is never part of it, so the two deals that differ only in the
opponent's card collapse onto the same infoset.

Kuhn poker has 12 decision infosets:

    history ""   (player 0 opens)            × 3 cards
    history "c"  (player 1 after a check)    × 3 cards
    history "b"  (player 1 facing a bet)     × 3 cards
    history "cb" (player 0 facing a bet)     × 3 cards

KuhnInfoSet is a NamedTuple: it subclasses tuple and is therefore hashable and
usable as a key in the CFR node store with no extra overhead.
"""

from __future__ import annotations

from typing import NamedTuple

from kuhn_cfr.engine.cards import (
    DECK,
    Action,
    History,
    card_to_str,
    history_to_str,
    str_to_card,
    str_to_history,
)
from kuhn_cfr.engine.game_state import current_player

# Non-terminal histories, in the order they are reached.
DECISION_HISTORIES: tuple[History, ...] = (
    (),
    (Action.CHECK,),
    (Action.BET,),
    (Action.CHECK, Action.BET),
)


# ─── Information set type ─────────────────────────────────────────────────────

class KuhnInfoSet(NamedTuple):
    """What the player to move knows when choosing CHECK or BET.

    Attributes:
        history: Public actions taken so far in the hand.
        card:    The acting player's own card (1=J, 2=Q, 3=K).

    Example:
        >>> KuhnInfoSet(history=(Action.CHECK,), card=1).label()
        'J:c'
    """
    history: History
    card: int

    @property
    def player(self) -> int:
        """Seat of the player who owns this infoset."""
        return current_player(self.history)

    def label(self) -> str:
        """Compact 'card:history' label, e.g. 'Q:cb'."""
        return f"{card_to_str(self.card)}:{history_to_str(self.history)}"


# ─── Factory / extractor functions ───────────────────────────────────────────

def make_info_set(history: History, cards: tuple[int, ...]) -> KuhnInfoSet:
    """Extract the infoset of the player to move from a full game state.

    Args:
        history: Actions taken so far.
        cards:   (player 0 card, player 1 card).

    Returns:
        KuhnInfoSet keyed on the history and the mover's own card only.

    Example:
        >>> make_info_set((Action.CHECK,), (3, 1))
        KuhnInfoSet(history=(<Action.CHECK: 0>,), card=1)
    """
    return KuhnInfoSet(history=tuple(history), card=cards[current_player(history)])


def parse_info_set(label: str) -> KuhnInfoSet:
    """Inverse of KuhnInfoSet.label().

    Example:
        >>> parse_info_set('K:b')
        KuhnInfoSet(history=(<Action.BET: 1>,), card=3)
    """
    card_str, _, history_str = label.partition(':')
    return KuhnInfoSet(history=str_to_history(history_str), card=str_to_card(card_str))


def decision_info_sets(player: int | None = None) -> list[KuhnInfoSet]:
    """Return every decision infoset, optionally only those of one seat.

    Ordered by history (as in DECISION_HISTORIES) and then by card.
    """
    return [
        KuhnInfoSet(history=history, card=card)
        for history in DECISION_HISTORIES
        for card in DECK
        if player is None or current_player(history) == player
    ]
