"""Tests for blackjack_sim/analysis/stats.py — RunStats and TotalRunStats."""

from __future__ import annotations

import itertools

import pytest

from blackjack_sim.analysis.stats import RunStats, TotalRunStats, merge_runs
from blackjack_sim.engine.rules import Outcome

RUN_A = RunStats(num_games=10, wins=6, losses=3, pushes=1, remaining_credits=120)
RUN_B = RunStats(num_games=10, wins=4, losses=5, pushes=1, remaining_credits=80)
RUN_C = RunStats(num_games=3, wins=0, losses=3, pushes=0, remaining_credits=0)


def totals_of(*runs: RunStats) -> TotalRunStats:
    return merge_runs(runs, starting_credits=100)


class TestRunStats:
    def test_record_match_end(self):
        stats = RunStats()
        for outcome in (Outcome.WIN, Outcome.WIN, Outcome.LOSS, Outcome.PUSH):
            stats.record_match_end(outcome)
        assert (stats.num_games, stats.wins, stats.losses, stats.pushes) == (4, 2, 1, 1)

    def test_record_credits(self):
        stats = RunStats()
        stats.record_credits(75)
        assert stats.remaining_credits == 75

    def test_str(self):
        assert str(RUN_A) == "Games: 10 | W/L/P: 6/3/1 | Credits: $120"


class TestTotalRunStats:
    def test_two_run_example(self):
        total = totals_of(RUN_A, RUN_B)
        assert total.total_runs == 2
        assert total.total_games == 20
        assert (total.wins, total.losses, total.pushes) == (10, 8, 2)
        assert total.total_credits == 200
        assert total.runs_ahead == 1

    def test_break_even_is_not_ahead(self):
        total = totals_of(RunStats(5, 2, 2, 1, 100))
        assert total.runs_ahead == 0

    def test_percentages(self):
        total = totals_of(RUN_A, RUN_B)
        assert total.win_pct == pytest.approx(50.0)
        assert total.loss_pct == pytest.approx(40.0)
        assert total.push_pct == pytest.approx(10.0)
        assert total.ahead_pct == pytest.approx(50.0)
        assert total.average_credits == pytest.approx(100.0)
        assert total.average_games == pytest.approx(10.0)

    def test_empty_totals_have_zero_rates(self):
        total = TotalRunStats(starting_credits=100)
        assert total.win_pct == 0.0
        assert total.ahead_pct == 0.0
        assert total.average_credits == 0.0

    def test_summary_mentions_counts(self):
        text = totals_of(RUN_A, RUN_B).summary()
        assert "Runs:             2" in text
        assert "Wins:             10 (50.00%)" in text
        assert "Walked away ahead: 1 (50.00%)" in text
        assert str(totals_of(RUN_A)) == totals_of(RUN_A).summary()


class TestMerge:
    def test_merge_equals_sequential_add(self):
        merged = totals_of(RUN_A).merge(totals_of(RUN_B))
        assert merged == totals_of(RUN_A, RUN_B)

    def test_commutative(self):
        a, b = totals_of(RUN_A), totals_of(RUN_B, RUN_C)
        assert a.merge(b) == b.merge(a)

    def test_associative(self):
        a, b, c = totals_of(RUN_A), totals_of(RUN_B), totals_of(RUN_C)
        assert a.merge(b).merge(c) == a.merge(b.merge(c))

    def test_order_independent_fold(self):
        expected = totals_of(RUN_A, RUN_B, RUN_C)
        for perm in itertools.permutations([RUN_A, RUN_B, RUN_C]):
            assert totals_of(*perm) == expected

    def test_merge_does_not_mutate(self):
        a = totals_of(RUN_A)
        a.merge(totals_of(RUN_B))
        assert a.total_runs == 1

    def test_different_baselines_rejected(self):
        with pytest.raises(ValueError):
            TotalRunStats(starting_credits=100).merge(TotalRunStats(starting_credits=50))
