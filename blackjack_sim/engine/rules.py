"""
House rules, outcome resolution, and winnings.

Resolution priority (player's perspective), using hand.final_value():
    1. Player bust (>21)  → LOSS  (even if the dealer also busted)
    2. Dealer bust (>21)  → WIN
    3. Equal totals       → PUSH
    4. Otherwise the total closer to 21 wins

Winnings are paid back onto the player's credits after the bet has already
been debited:
    WIN  → 2 × bet
    PUSH → 1 × bet (refund)
    LOSS → 0
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto
from typing import Iterable

from .cards import MAX_BLACKJACK, Card
from .hand import final_value, is_bust

# ─── House rule defaults ──────────────────────────────────────────────────────

STARTING_CREDITS: int = 100
BASE_BET: int = 10
MAX_ROUNDS: int = 100
DEALER_STAND_TOTAL: int = 17
DOUBLE_DOWN_MIN: int = 9
DOUBLE_DOWN_MAX: int = 11
RESHUFFLE_THRESHOLD: int = 15


@dataclass(frozen=True)
class HouseRules:
    """Table configuration shared by the interactive and batch paths.

    Attributes:
        starting_credits:      Player credits at session start.
        base_bet:              Flat bet used by the default bet policy.
        max_rounds:            Round cap per session.
        dealer_stand_total:    Dealer stands once a total reaches this value.
        double_down_min:       Lowest hard total eligible for a double down.
        double_down_max:       Highest hard total eligible for a double down.
        reshuffle_every_round: If True a fresh shuffled deck is used each round.
        reshuffle_threshold:   With reshuffle_every_round=False, the deck is
                               reshuffled before a round that starts with fewer
                               cards than this.
    """

    starting_credits: int = STARTING_CREDITS
    base_bet: int = BASE_BET
    max_rounds: int = MAX_ROUNDS
    dealer_stand_total: int = DEALER_STAND_TOTAL
    double_down_min: int = DOUBLE_DOWN_MIN
    double_down_max: int = DOUBLE_DOWN_MAX
    reshuffle_every_round: bool = True
    reshuffle_threshold: int = RESHUFFLE_THRESHOLD

    def validate(self) -> HouseRules:
        """Return self, or raise ValueError if any field is out of range."""
        if self.starting_credits <= 0:
            raise ValueError(f"starting_credits must be positive; got {self.starting_credits}.")
        if self.base_bet <= 0:
            raise ValueError(f"base_bet must be positive; got {self.base_bet}.")
        if self.max_rounds <= 0:
            raise ValueError(f"max_rounds must be positive; got {self.max_rounds}.")
        if not 0 < self.dealer_stand_total <= MAX_BLACKJACK:
            raise ValueError(
                f"dealer_stand_total must be in [1, {MAX_BLACKJACK}]; "
                f"got {self.dealer_stand_total}."
            )
        if self.double_down_min > self.double_down_max:
            raise ValueError(
                f"Double-down window is inverted: "
                f"[{self.double_down_min}, {self.double_down_max}]."
            )
        if self.reshuffle_threshold < 0:
            raise ValueError(
                f"reshuffle_threshold must be non-negative; got {self.reshuffle_threshold}."
            )
        return self


DEFAULT_RULES = HouseRules()


class Outcome(Enum):
    WIN = auto()
    LOSS = auto()
    PUSH = auto()


# ─── Core resolution function ─────────────────────────────────────────────────

def resolve_outcome(
    player_cards: Iterable[Card],
    dealer_cards: Iterable[Card],
) -> Outcome:
    """Determine the outcome of a finished round from the player's perspective.

    Both hands must be terminal. The player-bust check runs before the
    dealer-bust check, so a busted player loses to a busted dealer.

    Examples:
        >>> from blackjack_sim.engine.cards import str_to_card
        >>> def hand(*codes): return [str_to_card(c) for c in codes]
        >>> resolve_outcome(hand('JS', '8H'), hand('JC', '7D'))
        <Outcome.WIN: 1>
        >>> resolve_outcome(hand('JS', 'KH', '2C'), hand('JC', 'KD', '2D'))
        <Outcome.LOSS: 2>
    """
    player_total = final_value(player_cards)
    dealer_total = final_value(dealer_cards)

    # ── Rule 1: Player bust ───────────────────────────────────────────────────
    if is_bust(player_total):
        return Outcome.LOSS

    # ── Rule 2: Dealer bust ───────────────────────────────────────────────────
    if is_bust(dealer_total):
        return Outcome.WIN

    # ── Rule 3: Tie ───────────────────────────────────────────────────────────
    if player_total == dealer_total:
        return Outcome.PUSH

    # ── Rule 4: Closer to 21 wins ─────────────────────────────────────────────
    if MAX_BLACKJACK - player_total < MAX_BLACKJACK - dealer_total:
        return Outcome.WIN
    return Outcome.LOSS


def calculate_winnings(outcome: Outcome, bet: int) -> int:
    """Return the credits paid back to the player for a resolved round.

    Examples:
        >>> calculate_winnings(Outcome.WIN, 10)
        20
        >>> calculate_winnings(Outcome.PUSH, 10)
        10
        >>> calculate_winnings(Outcome.LOSS, 10)
        0
    """
    if outcome is Outcome.WIN:
        return 2 * bet
    if outcome is Outcome.PUSH:
        return bet
    return 0
