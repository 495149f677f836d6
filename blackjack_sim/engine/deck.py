"""
Deck creation, shuffling, and dealing.

A Deck holds an ordered pile of Card values and deals from the top.
Shuffling uses a numpy Generator so that every session can own an
independent, reproducible random stream (see analysis.simulator).

House rule: the session runner reshuffles a fresh deck every round, so a
single round never needs more than the 52 cards a fresh deck holds.
"""

from __future__ import annotations

import numpy as np

from .cards import Card, Rank, Suit, str_to_card
from .errors import DeckExhaustedError

SIZE_OF_DECK: int = 52


def full_deck() -> list[Card]:
    """Return all 52 cards in canonical (suit, rank) order.

    Examples:
        >>> len(full_deck())
        52
        >>> len(set(full_deck()))
        52
    """
    return [Card(suit, rank) for suit in Suit for rank in Rank]


class Deck:
    """A pile of cards dealt from the top.

    Args:
        rng: numpy Generator used for shuffling. A new default Generator is
             created when omitted.
        seed: Convenience seed for a new Generator (ignored if rng is given).
        shuffle: If False the deck stays in canonical order.
    """

    def __init__(
        self,
        rng: np.random.Generator | None = None,
        seed: int | None = None,
        shuffle: bool = True,
    ) -> None:
        self._rng = rng if rng is not None else np.random.default_rng(seed)
        self._cards: list[Card] = full_deck()
        if shuffle:
            self.shuffle()

    @classmethod
    def stacked(cls, cards: list[Card] | tuple[Card, ...]) -> Deck:
        """Build a deck that deals exactly ``cards``, first element first.

        Used for deterministic test setups.

        Examples:
            >>> deck = Deck.stacked([str_to_card('AS'), str_to_card('KH')])
            >>> str(deck.deal())
            'Ace of Spades'
        """
        deck = cls(shuffle=False)
        deck._cards = list(reversed(cards))
        return deck

    @classmethod
    def from_codes(cls, *codes: str) -> Deck:
        """Build a stacked deck from short card codes ('AS', '10C', ...)."""
        return cls.stacked([str_to_card(c) for c in codes])

    @property
    def cards_remaining(self) -> int:
        return len(self._cards)

    def shuffle(self) -> None:
        """Restore all 52 cards and shuffle them in place."""
        cards = full_deck()
        order = self._rng.permutation(len(cards))
        self._cards = [cards[i] for i in order]

    def deal(self) -> Card:
        """Deal the top card.

        Raises:
            DeckExhaustedError: If no cards remain.
        """
        if not self._cards:
            raise DeckExhaustedError("Cannot deal from an empty deck.")
        return self._cards.pop()

    def __len__(self) -> int:
        return len(self._cards)

    def __str__(self) -> str:
        return "\n".join(str(card) for card in reversed(self._cards))
