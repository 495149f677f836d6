"""
Hand evaluation: dual low/high totals and ace resolution.

Every hand has two sums:
    low  — every Ace counts 1 (the hard total)
    high — the first Ace counts 11 if that does not push the running high
           total past 21; every later Ace counts 1 (one soft ace at most)

final_value() prefers the high total unless it busts. If both bust it
returns the busted low total, so callers detect busts by comparing against
21 rather than consulting a separate flag.

All functions are pure functions of the card sequence.
"""

from __future__ import annotations

from typing import Iterable, NamedTuple

from .cards import MAX_BLACKJACK, Card, Rank


class HandValue(NamedTuple):
    low: int
    high: int


def hand_value(cards: Iterable[Card]) -> HandValue:
    """Return the (low, high) sums of a hand in a single pass.

    Examples:
        >>> from blackjack_sim.engine.cards import Suit
        >>> ace, seven = Card(Suit.SPADES, Rank.ACE), Card(Suit.HEARTS, Rank.SEVEN)
        >>> hand_value((ace, seven))
        HandValue(low=8, high=18)
        >>> hand_value((ace, Card(Suit.CLUBS, Rank.ACE)))
        HandValue(low=2, high=12)
        >>> hand_value((Card(Suit.HEARTS, Rank.KING), Card(Suit.DIAMONDS, Rank.QUEEN)))
        HandValue(low=20, high=20)
    """
    low = 0
    high = 0
    for card in cards:
        if card.rank is Rank.ACE:
            low += 1
            if high + 11 > MAX_BLACKJACK:
                high += 1
            else:
                high += 11
            continue

        low += card.rank.points
        high += card.rank.points

    return HandValue(low, high)


def final_value(cards: Iterable[Card]) -> int:
    """Return the best total of a hand: high unless it busts, else low.

    Examples:
        >>> from blackjack_sim.engine.cards import Suit
        >>> ace, seven = Card(Suit.SPADES, Rank.ACE), Card(Suit.HEARTS, Rank.SEVEN)
        >>> final_value((ace, seven))
        18
        >>> final_value((ace, seven, Card(Suit.DIAMONDS, Rank.NINE)))
        17
        >>> king, queen = Card(Suit.HEARTS, Rank.KING), Card(Suit.DIAMONDS, Rank.QUEEN)
        >>> final_value((king, queen, Card(Suit.CLUBS, Rank.FIVE)))
        25
    """
    low, high = hand_value(cards)
    return high if high <= MAX_BLACKJACK else low


def is_bust(total: int) -> bool:
    """Return True if a total exceeds 21."""
    return total > MAX_BLACKJACK


def is_blackjack(cards: Iterable[Card]) -> bool:
    """Return True if either sum of the hand is exactly 21."""
    low, high = hand_value(cards)
    return low == MAX_BLACKJACK or high == MAX_BLACKJACK


def is_soft(cards: Iterable[Card]) -> bool:
    """Return True if an Ace is currently counted as 11 without busting.

    Examples:
        >>> from blackjack_sim.engine.cards import Suit
        >>> ace, six = Card(Suit.SPADES, Rank.ACE), Card(Suit.HEARTS, Rank.SIX)
        >>> is_soft((ace, six))
        True
        >>> is_soft((ace, six, Card(Suit.DIAMONDS, Rank.NINE)))
        False
    """
    low, high = hand_value(cards)
    return high != low and high <= MAX_BLACKJACK
