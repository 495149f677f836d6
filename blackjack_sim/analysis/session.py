"""
Session runner: one player against the dealer for up to N rounds.

Each session owns its deck, its two hands and its RunStats, so sessions
share no mutable state and can run in separate processes.

Per round:
    1. Reshuffle (every round by default, see HouseRules).
    2. Ask the bet policy for a bet (None ends the session).
    3. play_round() → outcome, winnings.
    4. Record the outcome; stop early on bankruptcy or a QUIT.
"""

from __future__ import annotations

import logging
from typing import Callable, Optional

import numpy as np

from blackjack_sim.analysis.stats import RunStats
from blackjack_sim.engine.deck import Deck
from blackjack_sim.engine.errors import InvariantError
from blackjack_sim.engine.game_round import RoundResult, play_round
from blackjack_sim.engine.player import ActionSource, Hand, Strategy
from blackjack_sim.engine.rules import DEFAULT_RULES, HouseRules

logger = logging.getLogger(__name__)

# bet_policy(credits) -> bet, or None to walk away
BetPolicy = Callable[[int], Optional[int]]

# on_round(result, player), called after every round
RoundObserver = Callable[[RoundResult, Hand], None]


def make_flat_bet(amount: int) -> BetPolicy:
    """Return a bet policy that bets ``amount``, capped at the remaining credits.

    Examples:
        >>> policy = make_flat_bet(10)
        >>> policy(100), policy(4)
        (10, 4)
    """

    def _policy(credits: int) -> int:
        return min(amount, credits)

    return _policy


def run_session(
    rules: HouseRules = DEFAULT_RULES,
    *,
    rng: np.random.Generator | None = None,
    seed: int | None = None,
    strategy: Strategy = Strategy.TABLE,
    bet_policy: BetPolicy | None = None,
    choose_action: ActionSource | None = None,
    on_round: RoundObserver | None = None,
    player: Hand | None = None,
    dealer: Hand | None = None,
) -> RunStats:
    """Play one session and return its statistics.

    Args:
        rules:         House rules (starting credits, round cap, reshuffling).
        rng:           numpy Generator for the session's deck.
        seed:          Seed for a new Generator when ``rng`` is omitted.
        strategy:      Player strategy: TABLE for batch runs, INTERACTIVE for
                       a human at the terminal.
        bet_policy:    Callable(credits) → bet. Defaults to a flat
                       ``rules.base_bet`` capped at the remaining credits.
                       Returning None ends the session.
        choose_action: Action source for an INTERACTIVE player.
        on_round:      Optional observer called after every round.
        player:        Pre-built player hand (e.g. for a front end that
                       renders it). Built from ``strategy`` when omitted.
        dealer:        Pre-built dealer hand. Built when omitted.

    Returns:
        RunStats with the outcome counts and the ending credits.

    Raises:
        DeckExhaustedError: If a round runs out of cards (aborts the session).
        InvariantError:     If ``dealer`` is not a DEALER hand.
    """
    rules.validate()
    if rng is None:
        rng = np.random.default_rng(seed)
    if bet_policy is None:
        bet_policy = make_flat_bet(rules.base_bet)

    if dealer is None:
        dealer = Hand("Dealer", Strategy.DEALER, rules=rules)
    elif not dealer.is_dealer:
        raise InvariantError(f"{dealer.name} cannot deal: strategy is {dealer.strategy.name}.")
    if player is None:
        player = Hand("Player", strategy, rules=rules)
    stats = RunStats()
    deck = Deck(rng)

    for round_no in range(rules.max_rounds):
        if round_no > 0 and (
            rules.reshuffle_every_round or deck.cards_remaining < rules.reshuffle_threshold
        ):
            deck.shuffle()

        bet = bet_policy(player.credits.balance)
        if bet is None:
            logger.debug("%s walked away after %d rounds.", player.name, round_no)
            break

        result = play_round(player, dealer, deck, bet, choose_action=choose_action)
        if on_round is not None:
            on_round(result, player)

        if result.outcome is None:
            break
        stats.record_match_end(result.outcome)

        if player.credits.balance <= 0:
            logger.debug("%s is bankrupt after %d rounds.", player.name, round_no + 1)
            break

    stats.record_credits(player.credits.balance)
    return stats
