"""
Card constants, action encoding, and human-readable I/O helpers.

Kuhn poker is played with a three-card deck. Cards are plain integer ranks:
    1 = Jack, 2 = Queen, 3 = King
Higher rank always wins a showdown; there are no ties.

Actions are encoded as an IntEnum so they index directly into the per-node
regret and strategy arrays:
    0 = CHECK (pass / fold when facing a bet)
    1 = BET   (bet / call when facing a bet)

String representations are used exclusively at I/O boundaries.
"""

from __future__ import annotations

from enum import IntEnum

DECK: tuple[int, ...] = (1, 2, 3)

CARD_NAMES: dict[int, str] = {1: 'J', 2: 'Q', 3: 'K'}


class Action(IntEnum):
    CHECK = 0
    BET = 1


ACTIONS: tuple[Action, ...] = (Action.CHECK, Action.BET)
NUM_ACTIONS: int = len(ACTIONS)

ACTION_CODES: dict[Action, str] = {Action.CHECK: 'c', Action.BET: 'b'}

# An ordered, append-only sequence of actions. Tuples keep it hashable.
History = tuple[Action, ...]


def decode_action(index: int) -> Action:
    """Map an action index to its Action.

    Raises:
        ValueError: If the index is not a known action. This signals a logic
                    error in the caller and is never recovered from.

    Examples:
        >>> decode_action(1)
        <Action.BET: 1>
    """
    if index not in (0, 1):
        raise ValueError(f"Unknown action index: {index!r}")
    return ACTIONS[index]


def card_to_str(card: int) -> str:
    """Convert a card rank to its letter.

    Examples:
        >>> card_to_str(1)
        'J'
        >>> card_to_str(3)
        'K'
    """
    if card not in CARD_NAMES:
        raise ValueError(f"Card {card!r} is not in the Kuhn deck {DECK}.")
    return CARD_NAMES[card]


def str_to_card(s: str) -> int:
    """Parse a card letter ('J', 'Q' or 'K', case-insensitive).

    Examples:
        >>> str_to_card('Q')
        2
    """
    for card, name in CARD_NAMES.items():
        if name == s.strip().upper():
            return card
    raise ValueError(f"Unknown card string: {s!r}")


def history_to_str(history: History) -> str:
    """Render a history as a compact string of action codes.

    Examples:
        >>> history_to_str((Action.CHECK, Action.BET))
        'cb'
        >>> history_to_str(())
        ''
    """
    return ''.join(ACTION_CODES[a] for a in history)


def str_to_history(s: str) -> History:
    """Parse a compact action-code string back into a History.

    Examples:
        >>> str_to_history('cb')
        (<Action.CHECK: 0>, <Action.BET: 1>)
    """
    lookup = {code: action for action, code in ACTION_CODES.items()}
    try:
        return tuple(lookup[ch] for ch in s.lower())
    except KeyError as exc:
        raise ValueError(f"Unknown action code in history string {s!r}") from exc
