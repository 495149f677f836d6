"""
Shared pytest fixtures for the blackjack simulator tests.

Provides convenience wrappers around str_to_card for building known hands
and stacked decks.
"""

from __future__ import annotations

import pytest

from blackjack_sim.engine.cards import Card, str_to_card
from blackjack_sim.engine.deck import Deck
from blackjack_sim.engine.player import Hand, Strategy
from blackjack_sim.engine.rules import DEFAULT_RULES


def hand(*card_strs: str) -> tuple[Card, ...]:
    """Build a hand tuple from human-readable card strings.

    Examples:
        >>> [c.rank.points for c in hand('AS', '7H')]
        [11, 7]
    """
    return tuple(str_to_card(s) for s in card_strs)


def holding(name: str, strategy: Strategy, *card_strs: str, credits: int | None = None) -> Hand:
    """Build a Hand of the given strategy already holding the given cards."""
    h = Hand(name, strategy, credits=credits, rules=DEFAULT_RULES)
    for c in hand(*card_strs):
        h.add_card(c)
    return h


@pytest.fixture
def fresh_deck() -> Deck:
    """Return a full, seeded 52-card deck."""
    return Deck(seed=0)


@pytest.fixture
def h():
    """Expose the hand() helper as a fixture for convenience."""
    return hand
