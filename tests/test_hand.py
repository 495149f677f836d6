"""Tests for blackjack_sim/engine/hand.py — low/high totals and ace resolution."""

from __future__ import annotations

import doctest

import pytest

from blackjack_sim.engine import hand as hand_mod
from blackjack_sim.engine.hand import (
    HandValue,
    final_value,
    hand_value,
    is_blackjack,
    is_bust,
    is_soft,
)
from tests.conftest import hand


# ─── hand_value tests ─────────────────────────────────────────────────────────

class TestHandValue:
    def test_empty_hand(self):
        assert hand_value(()) == HandValue(0, 0)

    def test_no_aces_low_equals_high(self):
        assert hand_value(hand("KH", "QD")) == HandValue(20, 20)

    def test_ace_plus_seven(self):
        assert hand_value(hand("AS", "7H")) == HandValue(8, 18)

    def test_two_aces(self):
        # First ace takes 11, the second would bust the high sum so takes 1
        assert hand_value(hand("AS", "AC")) == HandValue(2, 12)

    def test_ace_after_high_cards_counts_one(self):
        # 10 + 5 = 15; 15 + 11 > 21 so the ace adds 1 to high
        assert hand_value(hand("10H", "5D", "AS")) == HandValue(16, 16)

    def test_ace_plus_ten_is_21(self):
        assert hand_value(hand("AS", "10C")) == HandValue(11, 21)

    def test_four_aces(self):
        assert hand_value(hand("AS", "AC", "AD", "AH")) == HandValue(4, 14)

    def test_order_matters_for_high_sum(self):
        # Early ace is soft, then 9 + 5 push the high sum over 21
        assert hand_value(hand("AS", "9D", "5C")) == HandValue(15, 25)

    def test_face_cards_count_ten(self):
        assert hand_value(hand("JS", "QH", "KD")) == HandValue(30, 30)


# ─── final_value tests ────────────────────────────────────────────────────────

class TestFinalValue:
    def test_prefers_high_when_not_bust(self):
        assert final_value(hand("AS", "7H")) == 18

    def test_falls_back_to_low(self):
        assert final_value(hand("AS", "9D", "5C")) == 15

    def test_busted_hand_reports_low(self):
        assert final_value(hand("KH", "QD", "5C")) == 25

    def test_exactly_21(self):
        assert final_value(hand("7C", "7D", "7H")) == 21

    @pytest.mark.parametrize(
        "codes",
        [("AS", "7H"), ("AS", "AC", "9D"), ("KH", "6D"), ("AS", "9D", "5C"), ("2C", "3D")],
    )
    def test_final_is_low_or_high(self, codes):
        low, high = hand_value(hand(*codes))
        assert final_value(hand(*codes)) in (low, high)


# ─── Predicates ───────────────────────────────────────────────────────────────

class TestPredicates:
    def test_is_bust(self):
        assert is_bust(22)
        assert not is_bust(21)

    def test_blackjack_on_high_sum(self):
        assert is_blackjack(hand("AS", "KH"))

    def test_blackjack_on_low_sum(self):
        assert is_blackjack(hand("10C", "5D", "6H"))

    def test_not_blackjack(self):
        assert not is_blackjack(hand("10C", "9D"))

    def test_soft_hand(self):
        assert is_soft(hand("AS", "6H"))

    def test_hard_after_ace_demoted(self):
        assert not is_soft(hand("AS", "6H", "9D"))

    def test_no_ace_is_hard(self):
        assert not is_soft(hand("10C", "6H"))


# ─── Docstring examples ───────────────────────────────────────────────────────

def test_docstring_examples():
    results = doctest.testmod(hand_mod)
    assert results.attempted > 0
    assert results.failed == 0
