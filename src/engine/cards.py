"""
Card model constants and small helpers for the infinite-deck odds solver.

Card values are the integers 1–10. The ace is always counted as 1 and the
four ten-value ranks are folded into a single value 10, so each value is
drawn with the same probability 1/10 (the usual infinite-deck approximation).

Rules encoded here:
    - any running total above BUST_LIMIT is bust (terminal),
    - the dealer stands on every total from DEALER_STAND_TOTAL upward.
"""

from __future__ import annotations

CARD_VALUES: tuple[int, ...] = (1, 2, 3, 4, 5, 6, 7, 8, 9, 10)
"""Every drawable card value (ace = 1, all ten-value ranks = 10)."""

NUM_CARD_VALUES: int = len(CARD_VALUES)

CARD_PROB: float = 1.0 / NUM_CARD_VALUES
"""Probability of drawing any one card value from an infinite deck."""

BUST_LIMIT: int = 21
DEALER_STAND_TOTAL: int = 17

MAX_TOTAL: int = BUST_LIMIT + max(CARD_VALUES)
"""Largest running total reachable by a single draw from a live hand."""

MIN_UPCARD: int = 1
MAX_UPCARD: int = 10

MIN_PLAYER_TOTAL: int = 4
MAX_PLAYER_TOTAL: int = BUST_LIMIT

PLAYER_TOTALS: list[int] = list(range(MIN_PLAYER_TOTAL, MAX_PLAYER_TOTAL + 1))
"""Player totals covered by the results table (4–21)."""

DEALER_UPCARDS: list[int] = list(range(MIN_UPCARD, MAX_UPCARD + 1))

DEALER_FINAL_TOTALS: list[int] = list(range(DEALER_STAND_TOTAL, BUST_LIMIT + 1))


def is_bust(total: int) -> bool:
    """Return True if a running total is over the bust limit.

    Examples:
        >>> is_bust(21)
        False
        >>> is_bust(22)
        True
    """
    return total > BUST_LIMIT


def is_valid_upcard(upcard: int) -> bool:
    """Return True if *upcard* is a card value the dealer can show.

    Examples:
        >>> is_valid_upcard(1)
        True
        >>> is_valid_upcard(11)
        False
    """
    return MIN_UPCARD <= upcard <= MAX_UPCARD


def card_label(value: int) -> str:
    """Return the display label for a card value ('A' for the ace).

    Examples:
        >>> card_label(1)
        'A'
        >>> card_label(10)
        '10'
    """
    return "A" if value == 1 else str(value)


def upcard_labels() -> list[str]:
    """Labels for DEALER_UPCARDS in order: ['A', '2', ..., '10']."""
    return [card_label(u) for u in DEALER_UPCARDS]
