"""
Terminal detection and payoff calculation.

Both players ante 1 chip. A hand ends as soon as the last two actions form
one of three patterns:
    1. CHECK, CHECK  → showdown, pot 1   (higher card wins 1)
    2. BET, CHECK    → fold, the bettor wins 1 regardless of cards
    3. BET, BET      → showdown, pot 2   (higher card wins 2)

Any other suffix (a single outstanding BET, or fewer than two actions) is
non-terminal. Because a hand can end after 2, 3 or 4 actions, the check must
be re-run after every action appended.

Payout convention (from player 0's perspective):
    +N  = player 0 wins N chips
    -N  = player 0 loses N chips
Player 1's payoff is always the negation.
"""

from __future__ import annotations

from enum import Enum, auto

from .cards import Action, History

MAX_HISTORY_LEN: int = 4


class Outcome(Enum):
    SHOWDOWN = auto()
    FOLD = auto()


# ─── Core settlement function ─────────────────────────────────────────────────

def payoff(history: History, cards: tuple[int, ...]) -> int | None:
    """Return player 0's payoff if *history* is terminal, else None.

    Args:
        history: Actions taken so far in the hand.
        cards:   (player 0 card, player 1 card).

    Returns:
        Signed chips won by player 0, or None while the hand is still live.

    Examples:
        >>> payoff((Action.CHECK, Action.CHECK), (2, 1))
        1
        >>> payoff((Action.CHECK, Action.BET, Action.CHECK), (2, 1))
        -1
        >>> payoff((Action.CHECK, Action.BET), (2, 1)) is None
        True
    """
    if len(history) < 2:
        return None

    prev, last = history[-2], history[-1]

    # ── Rule 2: fold — the bettor takes the antes ─────────────────────────────
    if prev == Action.BET and last == Action.CHECK:
        bettor = (len(history) - 2) % 2
        return 1 if bettor == 0 else -1

    if prev == last:
        # ── Rules 1 and 3: showdown ───────────────────────────────────────────
        stake = 1 if last == Action.CHECK else 2
        return stake if cards[0] > cards[1] else -stake

    return None


def player_payoffs(history: History, cards: tuple[int, ...]) -> tuple[int, int]:
    """Return (player 0 payoff, player 1 payoff) for a terminal history.

    Raises:
        ValueError: If the history is not terminal.

    Examples:
        >>> player_payoffs((Action.BET, Action.BET), (1, 3))
        (-2, 2)
    """
    value = payoff(history, cards)
    if value is None:
        raise ValueError(f"History {history!r} is not terminal.")
    return value, -value


def is_terminal(history: History) -> bool:
    """True if the hand is over after *history*.

    Termination never depends on the cards, only on the action pattern.
    """
    return payoff(history, (2, 1)) is not None


def classify_terminal(history: History) -> Outcome:
    """Return whether a terminal history ended in a showdown or a fold.

    Raises:
        ValueError: If the history is not terminal.
    """
    if not is_terminal(history):
        raise ValueError(f"History {history!r} is not terminal.")
    if history[-2] == Action.BET and history[-1] == Action.CHECK:
        return Outcome.FOLD
    return Outcome.SHOWDOWN


def validate_history(history: History) -> None:
    """Check that *history* is a legal (possibly incomplete) Kuhn history.

    A history is legal iff it is no longer than MAX_HISTORY_LEN and no
    proper prefix of it is already terminal.

    Raises:
        ValueError: If the history is too long or continues past the end of
                    the hand.
    """
    if len(history) > MAX_HISTORY_LEN:
        raise ValueError(
            f"History has {len(history)} actions; a hand never exceeds {MAX_HISTORY_LEN}."
        )
    for end in range(2, len(history)):
        if is_terminal(history[:end]):
            raise ValueError(
                f"History {history!r} continues after the hand ended at action {end}."
            )
