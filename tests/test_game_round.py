"""Tests for blackjack_sim/engine/game_round.py — a full round with stacked decks.

Deal order is player, dealer, player, dealer; the dealer's up card is the
second card the dealer receives (the fourth card in the deck).
"""

from __future__ import annotations

import pytest

from blackjack_sim.engine.deck import Deck
from blackjack_sim.engine.errors import DeckExhaustedError
from blackjack_sim.engine.game_round import deal_initial_cards, play_round
from blackjack_sim.engine.player import Hand, PlayerAction, Strategy, TurnState
from blackjack_sim.engine.rules import Outcome
from tests.conftest import hand


def table_player(credits: int = 100) -> Hand:
    return Hand("Player", Strategy.TABLE, credits=credits)


def dealer() -> Hand:
    return Hand("Dealer", Strategy.DEALER)


class TestDeal:
    def test_alternating_deal(self):
        p, d = table_player(), dealer()
        deal_initial_cards(p, d, Deck.from_codes("2C", "3C", "4C", "5C"))
        assert p.cards == list(hand("2C", "4C"))
        assert d.cards == list(hand("3C", "5C"))

    def test_deal_clears_previous_cards(self):
        p, d = table_player(), dealer()
        p.add_card(hand("KS")[0])
        deal_initial_cards(p, d, Deck.from_codes("2C", "3C", "4C", "5C"))
        assert len(p.cards) == 2


class TestPlayRound:
    def test_player_wins(self):
        # Player 10+8=18 stands; dealer 10+7=17 stands
        p, d = table_player(), dealer()
        result = play_round(p, d, Deck.from_codes("10C", "10D", "8C", "7D"), 10)
        assert result.outcome is Outcome.WIN
        assert result.winnings == 20
        assert result.net == 10
        assert p.credits.balance == 110

    def test_player_loses(self):
        p, d = table_player(), dealer()
        result = play_round(p, d, Deck.from_codes("10C", "10D", "7C", "9D"), 10)
        assert result.outcome is Outcome.LOSS
        assert p.credits.balance == 90

    def test_push_refunds_bet(self):
        p, d = table_player(), dealer()
        result = play_round(p, d, Deck.from_codes("10C", "10D", "9C", "9D"), 10)
        assert result.outcome is Outcome.PUSH
        assert p.credits.balance == 100

    def test_player_blackjack_never_consults_strategy(self):
        p, d = table_player(), dealer()
        result = play_round(p, d, Deck.from_codes("AC", "10D", "KC", "8D"), 10)
        assert result.player_state is TurnState.BLACKJACK
        assert result.outcome is Outcome.WIN

    def test_dealer_plays_after_player_bust(self):
        # Player 10+6=16 vs up 7 hits K → 26 bust; dealer 9+7 draws the 5
        p, d = table_player(), dealer()
        deck = Deck.from_codes("10C", "9D", "6C", "7D", "KH", "5S")
        result = play_round(p, d, deck, 10)
        assert result.player_state is TurnState.BUST
        assert result.outcome is Outcome.LOSS
        assert len(result.dealer_cards) == 3
        assert deck.cards_remaining == 0

    def test_dealer_bust_pays(self):
        p, d = table_player(), dealer()
        deck = Deck.from_codes("10C", "10D", "9C", "6D", "KH")
        result = play_round(p, d, deck, 10)
        assert result.dealer_state is TurnState.BUST
        assert result.outcome is Outcome.WIN
        assert p.credits.balance == 110

    def test_double_down_doubles_stake(self):
        # Player 5+6=11 doubles vs up 9, draws 10 → 21; dealer 10+9 stands
        p, d = table_player(), dealer()
        deck = Deck.from_codes("5C", "10D", "6C", "9D", "10H")
        result = play_round(p, d, deck, 10)
        assert result.player_state is TurnState.DOUBLED
        assert result.bet == 20
        assert result.outcome is Outcome.WIN
        assert p.credits.balance == 120

    def test_double_down_loss(self):
        p, d = table_player(), dealer()
        deck = Deck.from_codes("5C", "10D", "6C", "9D", "2H")
        result = play_round(p, d, deck, 10)
        assert result.outcome is Outcome.LOSS
        assert p.credits.balance == 80

    def test_dealer_revealed_after_round(self):
        p, d = table_player(), dealer()
        play_round(p, d, Deck.from_codes("10C", "10D", "8C", "7D"), 10)
        assert d.reveal is True

    def test_quit_refunds_and_skips_dealer(self):
        p = Hand("Player", Strategy.INTERACTIVE, credits=100)
        d = dealer()
        result = play_round(
            p,
            d,
            Deck.from_codes("10C", "10D", "5C", "6D"),
            10,
            choose_action=lambda h, bet: PlayerAction.QUIT,
        )
        assert result.outcome is None
        assert result.dealer_state is None
        assert result.net == 0
        assert p.credits.balance == 100
        assert len(d.cards) == 2

    def test_deck_exhaustion_propagates(self):
        p, d = table_player(), dealer()
        with pytest.raises(DeckExhaustedError):
            play_round(p, d, Deck.from_codes("2C", "10D", "3C", "6D"), 10)

    def test_str_mentions_outcome(self):
        p, d = table_player(), dealer()
        result = play_round(p, d, Deck.from_codes("10C", "10D", "8C", "7D"), 10)
        assert "WIN +10" in str(result)
        assert "10C 8C" in str(result)
