"""
Per-session and cross-session outcome statistics.

RunStats is owned by a single session and mutated once per round.
TotalRunStats folds finished RunStats together. The fold is commutative and
associative (plain sums and one counter), so sessions computed in parallel
can be merged in any order.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable

from blackjack_sim.engine.rules import Outcome


@dataclass
class RunStats:
    """Outcome counts for one session (how long a player sits at the table).

    Attributes:
        num_games:         Rounds resolved.
        wins:              Rounds won.
        losses:            Rounds lost.
        pushes:            Rounds pushed.
        remaining_credits: Player credits when the session ended.
    """

    num_games: int = 0
    wins: int = 0
    losses: int = 0
    pushes: int = 0
    remaining_credits: int = 0

    def record_match_end(self, outcome: Outcome) -> None:
        """Record the outcome of one resolved round."""
        self.num_games += 1
        if outcome is Outcome.WIN:
            self.wins += 1
        elif outcome is Outcome.LOSS:
            self.losses += 1
        else:
            self.pushes += 1

    def record_credits(self, credits: int) -> None:
        self.remaining_credits = credits

    def __str__(self) -> str:
        return (
            f"Games: {self.num_games} | "
            f"W/L/P: {self.wins}/{self.losses}/{self.pushes} | "
            f"Credits: ${self.remaining_credits}"
        )


@dataclass
class TotalRunStats:
    """Aggregate of many finished sessions sharing one starting balance.

    Attributes:
        starting_credits: Credits every session started with.
        total_runs:       Sessions merged.
        total_games:      Rounds across all sessions.
        wins:             Rounds won across all sessions.
        losses:           Rounds lost across all sessions.
        pushes:           Rounds pushed across all sessions.
        total_credits:    Sum of ending credits.
        runs_ahead:       Sessions that ended above starting_credits.
    """

    starting_credits: int
    total_runs: int = 0
    total_games: int = 0
    wins: int = 0
    losses: int = 0
    pushes: int = 0
    total_credits: int = 0
    runs_ahead: int = 0

    def add_run(self, run: RunStats) -> None:
        """Merge one finished session into the totals."""
        self.total_runs += 1
        self.total_games += run.num_games
        self.wins += run.wins
        self.losses += run.losses
        self.pushes += run.pushes
        self.total_credits += run.remaining_credits
        if run.remaining_credits > self.starting_credits:
            self.runs_ahead += 1

    def merge(self, other: TotalRunStats) -> TotalRunStats:
        """Return the combination of two totals with the same baseline.

        Raises:
            ValueError: If the starting credits differ.
        """
        if other.starting_credits != self.starting_credits:
            raise ValueError(
                f"Cannot merge totals with different starting credits: "
                f"{self.starting_credits} vs {other.starting_credits}."
            )
        return TotalRunStats(
            starting_credits=self.starting_credits,
            total_runs=self.total_runs + other.total_runs,
            total_games=self.total_games + other.total_games,
            wins=self.wins + other.wins,
            losses=self.losses + other.losses,
            pushes=self.pushes + other.pushes,
            total_credits=self.total_credits + other.total_credits,
            runs_ahead=self.runs_ahead + other.runs_ahead,
        )

    # ── Derived values ────────────────────────────────────────────────────────

    @property
    def win_pct(self) -> float:
        return _pct(self.wins, self.total_games)

    @property
    def loss_pct(self) -> float:
        return _pct(self.losses, self.total_games)

    @property
    def push_pct(self) -> float:
        return _pct(self.pushes, self.total_games)

    @property
    def ahead_pct(self) -> float:
        return _pct(self.runs_ahead, self.total_runs)

    @property
    def average_credits(self) -> float:
        if self.total_runs == 0:
            return 0.0
        return self.total_credits / self.total_runs

    @property
    def average_games(self) -> float:
        if self.total_runs == 0:
            return 0.0
        return self.total_games / self.total_runs

    def summary(self) -> str:
        """Return the multi-line text report for the aggregated runs."""
        lines = [
            f"Runs:             {self.total_runs:,}",
            f"Games:            {self.total_games:,} "
            f"({self.average_games:.1f} per run)",
            f"Wins:             {self.wins:,} ({self.win_pct:.2f}%)",
            f"Losses:           {self.losses:,} ({self.loss_pct:.2f}%)",
            f"Pushes:           {self.pushes:,} ({self.push_pct:.2f}%)",
            f"Starting credits: ${self.starting_credits}",
            f"Average credits:  ${self.average_credits:.2f}",
            f"Walked away ahead: {self.runs_ahead:,} ({self.ahead_pct:.2f}%)",
        ]
        return "\n".join(lines)

    def __str__(self) -> str:
        return self.summary()


def _pct(part: int, whole: int) -> float:
    return 100.0 * part / whole if whole else 0.0


def merge_runs(runs: Iterable[RunStats], starting_credits: int) -> TotalRunStats:
    """Fold finished sessions into a TotalRunStats.

    Examples:
        >>> total = merge_runs(
        ...     [RunStats(10, 6, 3, 1, 120), RunStats(10, 4, 5, 1, 80)],
        ...     starting_credits=100,
        ... )
        >>> total.total_games, total.total_credits, total.runs_ahead
        (20, 200, 1)
    """
    total = TotalRunStats(starting_credits=starting_credits)
    for run in runs:
        total.add_run(run)
    return total
