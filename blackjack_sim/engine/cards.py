"""
Card constants, value types, and human-readable I/O helpers.

A Card is an immutable (Suit, Rank) pair. Suit is cosmetic; only the Rank
carries gameplay value:
    2–10  -> face value
    J/Q/K -> 10
    A     -> 11 baseline (the alternate value of 1 is derived by
             hand.hand_value(), never stored on the card)

Short string codes ('AS', '10C', '7H') are used at I/O boundaries and in tests.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

MAX_BLACKJACK: int = 21


class Suit(Enum):
    HEARTS = "H"
    DIAMONDS = "D"
    SPADES = "S"
    CLUBS = "C"

    def __str__(self) -> str:
        return self.name.capitalize()


class Rank(Enum):
    """Card rank. The enum value is the short code used in card strings."""

    TWO = "2"
    THREE = "3"
    FOUR = "4"
    FIVE = "5"
    SIX = "6"
    SEVEN = "7"
    EIGHT = "8"
    NINE = "9"
    TEN = "10"
    JACK = "J"
    QUEEN = "Q"
    KING = "K"
    ACE = "A"

    @property
    def points(self) -> int:
        """Return the numeric value of the rank (Ace = 11 baseline).

        Examples:
            >>> Rank.SEVEN.points
            7
            >>> Rank.QUEEN.points
            10
            >>> Rank.ACE.points
            11
        """
        return RANK_POINTS[self]

    def __str__(self) -> str:
        if self in FACE_RANKS or self is Rank.ACE:
            return self.name.capitalize()
        return self.value


RANK_POINTS: dict[Rank, int] = {
    Rank.TWO: 2,
    Rank.THREE: 3,
    Rank.FOUR: 4,
    Rank.FIVE: 5,
    Rank.SIX: 6,
    Rank.SEVEN: 7,
    Rank.EIGHT: 8,
    Rank.NINE: 9,
    Rank.TEN: 10,
    Rank.JACK: 10,
    Rank.QUEEN: 10,
    Rank.KING: 10,
    Rank.ACE: 11,
}

FACE_RANKS: frozenset[Rank] = frozenset({Rank.JACK, Rank.QUEEN, Rank.KING})

# Ranks that count as 10 points (non-ace)
TEN_VALUE_RANKS: frozenset[Rank] = frozenset({Rank.TEN}) | FACE_RANKS


@dataclass(frozen=True)
class Card:
    suit: Suit
    rank: Rank

    def __str__(self) -> str:
        return f"{self.rank} of {self.suit}"


def card_to_str(card: Card) -> str:
    """Convert a card to its short string code.

    Examples:
        >>> card_to_str(Card(Suit.SPADES, Rank.ACE))
        'AS'
        >>> card_to_str(Card(Suit.CLUBS, Rank.TEN))
        '10C'
    """
    return card.rank.value + card.suit.value


def str_to_card(s: str) -> Card:
    """Parse a short string code into a Card.

    The format is <rank><suit> where suit is the last character.
    Rank can be '2'-'9', '10', 'J', 'Q', 'K', or 'A'.
    Suit can be 'H', 'D', 'S', or 'C'.

    Raises:
        ValueError: If the rank or suit code is not recognised.

    Examples:
        >>> str_to_card('AS')
        Card(suit=<Suit.SPADES: 'S'>, rank=<Rank.ACE: 'A'>)
        >>> str_to_card('10C').rank
        <Rank.TEN: '10'>
    """
    return Card(Suit(s[-1]), Rank(s[:-1]))


def hand_to_str(cards: tuple[Card, ...] | list[Card]) -> str:
    """Convert a sequence of cards to a space-separated string of codes.

    Examples:
        >>> hand_to_str((str_to_card('AC'), str_to_card('KH')))
        'AC KH'
    """
    return ' '.join(card_to_str(c) for c in cards)
