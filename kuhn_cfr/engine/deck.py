"""
Dealing operations for the three-card Kuhn deck.

Each hand deals one card to each player from a fresh uniformly random
permutation of DECK; the third card stays face-down and never matters.

Randomness comes from NumPy's global generator so that callers can make a
whole run reproducible with a single ``np.random.seed(seed)``.
"""

from __future__ import annotations

from itertools import permutations

import numpy as np

from .cards import DECK

# Probability of any one ordered deal: 1 / (3 × 2).
DEAL_PROB: float = 1.0 / 6.0


def deal_cards() -> tuple[int, int]:
    """Shuffle the deck and deal (player 0 card, player 1 card).

    Examples:
        >>> c0, c1 = deal_cards()
        >>> c0 != c1
        True
    """
    shuffled = np.random.permutation(DECK)
    return int(shuffled[0]), int(shuffled[1])


def all_deals() -> list[tuple[int, int]]:
    """Return all six ordered deals, each equally likely.

    Examples:
        >>> len(all_deals())
        6
    """
    return list(permutations(DECK, 2))


def validate_deal(cards: tuple[int, ...]) -> None:
    """Check that *cards* is a legal two-player deal.

    Raises:
        ValueError: If there are not exactly two cards, a card is outside the
                    deck, or both players hold the same card.
    """
    if len(cards) != 2:
        raise ValueError(f"A Kuhn deal has exactly two cards, got {len(cards)}.")
    for card in cards:
        if card not in DECK:
            raise ValueError(f"Card {card!r} is not in the Kuhn deck {DECK}.")
    if cards[0] == cards[1]:
        raise ValueError(f"Both players cannot hold the same card ({cards[0]}).")
