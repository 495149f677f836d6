"""
Monte Carlo batch simulator: many independent sessions, run in parallel.

Fan-out / fan-in:
    - One task per session. Each task builds its own deck, hands and
      RunStats from a private numpy Generator, so no state is shared.
    - Per-session seeds are spawned from one SeedSequence, which makes a
      batch reproducible for a given seed regardless of the worker count.
    - Results are collected after the pool joins and folded into a single
      TotalRunStats. The fold is order-independent.

A session that fails with an engine error (BlackjackError: an exhausted
deck or a broken invariant) is aborted and counted, without affecting the
rest of the batch. Any other exception propagates.
"""

from __future__ import annotations

import logging
import os
from concurrent.futures import ProcessPoolExecutor
from dataclasses import dataclass

import numpy as np

from blackjack_sim.analysis.session import run_session
from blackjack_sim.analysis.stats import RunStats, TotalRunStats
from blackjack_sim.engine.errors import BlackjackError
from blackjack_sim.engine.rules import DEFAULT_RULES, HouseRules

logger = logging.getLogger(__name__)

# Below this many sessions the pool start-up costs more than it saves.
MIN_PARALLEL_SESSIONS: int = 64


# ─── Result type ──────────────────────────────────────────────────────────────


@dataclass
class BatchResult:
    """Aggregate statistics from a batch of simulated sessions.

    Attributes:
        totals:        Merged TotalRunStats of every completed session.
        n_sessions:    Sessions requested.
        n_aborted:     Sessions aborted by a BlackjackError (not in totals).
        rules:         House rules the batch ran under.
        seed:          Root seed of the batch, or None.
        final_credits: Ending credits per completed session (int64 array), or
                       None if simulate_sessions() was called with
                       return_credits=False.
    """

    totals: TotalRunStats
    n_sessions: int
    n_aborted: int
    rules: HouseRules
    seed: int | None = None
    final_credits: np.ndarray | None = None

    @property
    def n_completed(self) -> int:
        return self.n_sessions - self.n_aborted

    def __str__(self) -> str:
        t = self.totals
        return (
            f"Sessions: {self.n_completed:,}/{self.n_sessions:,} | "
            f"Games: {t.total_games:,} | "
            f"W/L/P: {t.win_pct:.2f}%/{t.loss_pct:.2f}%/{t.push_pct:.2f}% | "
            f"Avg credits: ${t.average_credits:.2f} | "
            f"Ahead: {t.ahead_pct:.2f}%"
        )


# ─── Worker ───────────────────────────────────────────────────────────────────


def _run_session_task(task: tuple[HouseRules, np.random.SeedSequence]) -> RunStats | None:
    """Run one session in a worker. Returns None if the session was aborted."""
    rules, seed_seq = task
    try:
        return run_session(rules, rng=np.random.default_rng(seed_seq))
    except BlackjackError as exc:
        logger.warning("Session aborted: %s", exc)
        return None


# ─── Core simulation ──────────────────────────────────────────────────────────


def simulate_sessions(
    n_sessions: int = 1_000,
    rules: HouseRules = DEFAULT_RULES,
    *,
    seed: int | None = 42,
    workers: int | None = None,
    return_credits: bool = False,
) -> BatchResult:
    """Simulate ``n_sessions`` independent sessions and merge their statistics.

    Args:
        n_sessions:     Number of sessions to run.
        rules:          House rules shared by every session.
        seed:           Root seed. None for a non-deterministic batch.
        workers:        Worker processes. None uses os.cpu_count(); 1 runs
                        every session in the calling process.
        return_credits: If True, attach the ending credits of each completed
                        session to BatchResult.final_credits.

    Returns:
        BatchResult with merged totals.

    Raises:
        ValueError: If n_sessions is not positive or the rules are invalid.
    """
    if n_sessions <= 0:
        raise ValueError(f"n_sessions must be positive; got {n_sessions}.")
    rules.validate()

    if workers is None:
        workers = os.cpu_count() or 1
    workers = max(1, min(workers, n_sessions))

    seeds = np.random.SeedSequence(seed).spawn(n_sessions)
    tasks = [(rules, s) for s in seeds]

    parallel = workers > 1 and n_sessions >= MIN_PARALLEL_SESSIONS
    logger.info(
        "Simulating %d sessions (%d rounds max, %s).",
        n_sessions,
        rules.max_rounds,
        f"{workers} workers" if parallel else "sequential",
    )

    if parallel:
        chunksize = max(1, n_sessions // (workers * 4))
        with ProcessPoolExecutor(max_workers=workers) as executor:
            runs = list(executor.map(_run_session_task, tasks, chunksize=chunksize))
    else:
        runs = [_run_session_task(task) for task in tasks]

    completed = [run for run in runs if run is not None]
    totals = TotalRunStats(starting_credits=rules.starting_credits)
    for run in completed:
        totals.add_run(run)

    n_aborted = n_sessions - len(completed)
    if n_aborted:
        logger.warning("%d of %d sessions aborted.", n_aborted, n_sessions)
    logger.info("Batch finished: %d games over %d sessions.", totals.total_games, len(completed))

    final_credits = None
    if return_credits:
        final_credits = np.array([run.remaining_credits for run in completed], dtype=np.int64)

    return BatchResult(
        totals=totals,
        n_sessions=n_sessions,
        n_aborted=n_aborted,
        rules=rules,
        seed=seed,
        final_credits=final_credits,
    )


# ─── __main__ ─────────────────────────────────────────────────────────────────

if __name__ == "__main__":
    import sys

    n = int(sys.argv[1]) if len(sys.argv) > 1 else 10_000
    print(f"Blackjack batch simulation — {n:,} sessions\n")
    batch = simulate_sessions(n)
    print(batch)
    print()
    print(batch.totals.summary())
