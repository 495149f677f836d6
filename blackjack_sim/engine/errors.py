"""Exception types raised by the round simulation engine."""

from __future__ import annotations


class BlackjackError(Exception):
    """Base class for engine failures."""


class DeckExhaustedError(BlackjackError, ValueError):
    """A card was requested from an empty deck.

    Fatal to the current round and its session; never retried.
    """


class InvariantError(BlackjackError, RuntimeError):
    """The engine was driven in a way its callers guarantee never happens.

    Examples: asking a player for the dealer's up card, playing an
    interactive hand with no action source, or betting more than the
    remaining credits.
    """
