"""
Single-round flow: deal, bet, player turn, dealer turn, resolution.

    DEAL → BET → PLAYER_TURN → DEALER_REVEAL → DEALER_TURN → RESOLUTION

The round always runs the dealer's turn after the player's, even when the
player busted; the resolver then applies the player-bust-first rule.

A player QUIT ends the round early: the bet is refunded and no outcome is
produced (the session runner stops on it).
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from .cards import Card, hand_to_str
from .deck import Deck
from .hand import final_value
from .player import ActionSource, Hand, TurnState
from .rules import Outcome, calculate_winnings, resolve_outcome

logger = logging.getLogger(__name__)


@dataclass
class RoundResult:
    """Result of a completed round, from the player's perspective.

    Attributes:
        player_cards: Player's final cards.
        dealer_cards: Dealer's final cards.
        bet:          Final bet (doubled after a double down).
        outcome:      WIN / LOSS / PUSH, or None if the player quit.
        winnings:     Credits paid back to the player this round.
        player_state: Terminal state of the player's turn.
        dealer_state: Terminal state of the dealer's turn (None if skipped).
    """

    player_cards: tuple[Card, ...]
    dealer_cards: tuple[Card, ...]
    bet: int
    outcome: Outcome | None
    winnings: int
    player_state: TurnState
    dealer_state: TurnState | None

    @property
    def net(self) -> int:
        """Credit change for the player over the round."""
        return self.winnings - self.bet

    def __str__(self) -> str:
        outcome = self.outcome.name if self.outcome is not None else "QUIT"
        return (
            f"Player: {hand_to_str(self.player_cards)} "
            f"(total={final_value(self.player_cards)}) | "
            f"Dealer: {hand_to_str(self.dealer_cards)} "
            f"(total={final_value(self.dealer_cards)}) | "
            f"{outcome} {self.net:+d}"
        )


def deal_initial_cards(player: Hand, dealer: Hand, deck: Deck) -> None:
    """Clear both hands and deal two cards each, alternating player first."""
    player.clear()
    dealer.clear()
    for _ in range(2):
        player.draw(deck)
        dealer.draw(deck)


def play_round(
    player: Hand,
    dealer: Hand,
    deck: Deck,
    bet: int,
    *,
    choose_action: ActionSource | None = None,
) -> RoundResult:
    """Play one complete round and settle the player's credits.

    Args:
        player:        The player's hand (TABLE or INTERACTIVE strategy).
        dealer:        The dealer's hand.
        deck:          Card source for the round.
        bet:           Pre-validated bet; debited after the deal.
        choose_action: Action source for an INTERACTIVE player.

    Returns:
        RoundResult with the final hands, outcome and winnings.

    Raises:
        DeckExhaustedError: If the deck runs out mid-round.
    """
    # ── Deal and bet ──────────────────────────────────────────────────────────
    deal_initial_cards(player, dealer, deck)
    player.place_bet(bet)
    up_card = dealer.dealer_up_card()

    # ── Player turn ───────────────────────────────────────────────────────────
    player_result = player.play_turn(
        deck, bet, dealer_up=up_card.rank, choose_action=choose_action
    )

    if player_result.state is TurnState.QUIT:
        player.collect(player_result.bet)
        logger.debug("%s quit; bet of %d refunded.", player.name, player_result.bet)
        return RoundResult(
            player_cards=tuple(player.cards),
            dealer_cards=tuple(dealer.cards),
            bet=player_result.bet,
            outcome=None,
            winnings=player_result.bet,
            player_state=player_result.state,
            dealer_state=None,
        )

    # ── Dealer turn ───────────────────────────────────────────────────────────
    dealer.reveal = True
    dealer_result = dealer.play_turn(deck, 0)

    # ── Resolution ────────────────────────────────────────────────────────────
    outcome = resolve_outcome(player.cards, dealer.cards)
    winnings = calculate_winnings(outcome, player_result.bet)
    player.collect(winnings)

    result = RoundResult(
        player_cards=tuple(player.cards),
        dealer_cards=tuple(dealer.cards),
        bet=player_result.bet,
        outcome=outcome,
        winnings=winnings,
        player_state=player_result.state,
        dealer_state=dealer_result.state,
    )
    logger.debug("%s", result)
    return result
