"""
Fixed decision table for the automated ("optimal") player.

Maps (current hand total, dealer's up card) to an Action:

    total <= 8        -> HIT
    total == 9        -> DOUBLE_DOWN vs 3–6, else HIT
    total == 10       -> HIT vs 10/J/Q/K/A, else DOUBLE_DOWN
    total == 11       -> DOUBLE_DOWN
    total in [12, 16] -> STAND vs 2–6, else HIT
    total >= 17       -> STAND

Total 12 shares the [13, 16] row: it is the branch the table falls through
to after the explicit 9/10/11 rows.

The table is pure: no state, no side effects. Whether a DOUBLE_DOWN is
actually honoured is decided by the hand (credits, double-down window).
"""

from __future__ import annotations

from enum import Enum, auto

import numpy as np

from .cards import Rank, TEN_VALUE_RANKS


class Action(Enum):
    HIT = auto()
    STAND = auto()
    DOUBLE_DOWN = auto()


# Dealer up cards the table treats as weak (player stands on stiff hands).
WEAK_UP_CARDS: frozenset[Rank] = frozenset(
    {Rank.TWO, Rank.THREE, Rank.FOUR, Rank.FIVE, Rank.SIX}
)

# Up cards against which 9 is doubled.
DOUBLE_ON_NINE: frozenset[Rank] = frozenset({Rank.THREE, Rank.FOUR, Rank.FIVE, Rank.SIX})

# Up cards against which 10 is only hit.
STRONG_UP_CARDS: frozenset[Rank] = TEN_VALUE_RANKS | {Rank.ACE}

STAND_TOTAL: int = 17


def decide(total: int, up_card: Rank) -> Action:
    """Return the table action for a hand total against the dealer's up card.

    Examples:
        >>> decide(9, Rank.FIVE)
        <Action.DOUBLE_DOWN: 3>
        >>> decide(10, Rank.ACE)
        <Action.HIT: 1>
        >>> decide(12, Rank.FOUR)
        <Action.STAND: 2>
        >>> decide(16, Rank.SEVEN)
        <Action.HIT: 1>
    """
    if total <= 8:
        return Action.HIT

    if total == 9:
        return Action.DOUBLE_DOWN if up_card in DOUBLE_ON_NINE else Action.HIT

    if total == 10:
        return Action.HIT if up_card in STRONG_UP_CARDS else Action.DOUBLE_DOWN

    if total == 11:
        return Action.DOUBLE_DOWN

    if total >= STAND_TOTAL:
        return Action.STAND

    # Between [12, 16]
    return Action.STAND if up_card in WEAK_UP_CARDS else Action.HIT


# ─── Matrix export ────────────────────────────────────────────────────────────

# Up-card columns: ten-value ranks collapse into one column.
UP_CARD_COLUMNS: list[Rank] = [
    Rank.TWO,
    Rank.THREE,
    Rank.FOUR,
    Rank.FIVE,
    Rank.SIX,
    Rank.SEVEN,
    Rank.EIGHT,
    Rank.NINE,
    Rank.TEN,
    Rank.ACE,
]

# Numeric codes used by the matrix export (and the heat map colours).
ACTION_CODES: dict[Action, int] = {
    Action.STAND: 0,
    Action.HIT: 1,
    Action.DOUBLE_DOWN: 2,
}


def build_decision_matrix(totals: list[int]) -> np.ndarray:
    """Return the table as an int8 matrix of ACTION_CODES.

    Shape is (len(totals), len(UP_CARD_COLUMNS)): rows follow ``totals``,
    columns follow UP_CARD_COLUMNS.

    Examples:
        >>> build_decision_matrix([11, 20])
        array([[2, 2, 2, 2, 2, 2, 2, 2, 2, 2],
               [0, 0, 0, 0, 0, 0, 0, 0, 0, 0]], dtype=int8)
    """
    matrix = np.empty((len(totals), len(UP_CARD_COLUMNS)), dtype=np.int8)
    for r, total in enumerate(totals):
        for c, up_card in enumerate(UP_CARD_COLUMNS):
            matrix[r, c] = ACTION_CODES[decide(total, up_card)]
    return matrix
