"""Distribution analysis of session ending credits.

Provides:
- Descriptive statistics of ending credits (mean, std, skewness, kurtosis,
  percentiles) and a confidence interval for the mean
- Bankruptcy and walk-away-ahead rates
- A formatted batch report combining TotalRunStats and the distribution

Usage (standalone report):
    python -m blackjack_sim.analysis.bankroll 5000
"""

from __future__ import annotations

import math
from dataclasses import dataclass

import numpy as np
from scipy import stats

from blackjack_sim.analysis.simulator import BatchResult

_PERCENTILES: list[int] = [1, 5, 25, 50, 75, 95, 99]

# ─── Dataclasses ──────────────────────────────────────────────────────────────


@dataclass
class CreditStats:
    """Descriptive statistics for the ending credits of a batch.

    Attributes:
        n_sessions:   Number of sessions in the sample.
        mean:         Mean ending credits.
        std:          Sample standard deviation (0.0 for a single session).
        skewness:     Fisher skewness of the distribution.
        kurtosis:     Excess kurtosis (Fisher, normal = 0).
        ci_low:       Lower bound of the confidence interval for the mean.
        ci_high:      Upper bound of the confidence interval for the mean.
        percentiles:  Dict mapping percentile label to value.
                      Keys: 'p1', 'p5', 'p25', 'p50', 'p75', 'p95', 'p99'.
        bankrupt_pct: Percentage of sessions ending with no credits.
        ahead_pct:    Percentage of sessions ending above the starting credits.
        mean_change:  mean − starting credits.
    """

    n_sessions: int
    mean: float
    std: float
    skewness: float
    kurtosis: float
    ci_low: float
    ci_high: float
    percentiles: dict[str, float]
    bankrupt_pct: float
    ahead_pct: float
    mean_change: float


# ─── Computation functions ────────────────────────────────────────────────────


def compute_credit_stats(
    final_credits: np.ndarray,
    starting_credits: int,
    confidence: float = 0.95,
) -> CreditStats:
    """Compute descriptive statistics for a batch's ending credits.

    The confidence interval for the mean uses Student's t distribution.
    Degenerate samples (one session, or zero variance) collapse the interval
    onto the mean and report zero skewness and kurtosis.

    Args:
        final_credits:    1-D array of ending credits, one per session.
        starting_credits: Credits every session started with.
        confidence:       Confidence level of the interval (default 0.95).

    Returns:
        CreditStats.

    Raises:
        ValueError: If final_credits is empty.
    """
    credits = np.asarray(final_credits, dtype=np.float64)
    n = len(credits)
    if n == 0:
        raise ValueError("compute_credit_stats() needs at least one session.")

    mean = float(np.mean(credits))
    std = float(np.std(credits, ddof=1)) if n > 1 else 0.0

    if std > 0:
        skewness = float(stats.skew(credits))
        kurt = float(stats.kurtosis(credits))
        t = stats.t.ppf((1.0 + confidence) / 2.0, df=n - 1)
        margin = float(t * std / math.sqrt(n))
    else:
        skewness = 0.0
        kurt = 0.0
        margin = 0.0

    pct_values = np.percentile(credits, _PERCENTILES)
    percentiles = {f"p{p}": float(v) for p, v in zip(_PERCENTILES, pct_values)}

    return CreditStats(
        n_sessions=n,
        mean=mean,
        std=std,
        skewness=skewness,
        kurtosis=kurt,
        ci_low=mean - margin,
        ci_high=mean + margin,
        percentiles=percentiles,
        bankrupt_pct=100.0 * float(np.mean(credits <= 0)),
        ahead_pct=100.0 * float(np.mean(credits > starting_credits)),
        mean_change=mean - starting_credits,
    )


# ─── Output functions ─────────────────────────────────────────────────────────


def print_batch_report(
    batch: BatchResult,
    credit_stats: CreditStats | None = None,
    *,
    label: str = "",
) -> str:
    """Format and print the summary report for a batch.

    Args:
        batch:        BatchResult from simulate_sessions().
        credit_stats: Optional CreditStats; adds the distribution section.
        label:        Optional label for the header.

    Returns:
        The formatted report string (also printed to stdout).
    """
    rules = batch.rules
    header = f"Blackjack Batch Report{' — ' + label if label else ''}"
    lines = [
        "=" * 60,
        header,
        "=" * 60,
        "",
        "── Rules ───────────────────────────────────────────────────",
        f"  Rounds per session : {rules.max_rounds}",
        f"  Starting credits   : ${rules.starting_credits}",
        f"  Flat bet           : ${rules.base_bet}",
        f"  Double-down window : {rules.double_down_min}–{rules.double_down_max}",
        f"  Reshuffle          : "
        f"{'every round' if rules.reshuffle_every_round else f'below {rules.reshuffle_threshold} cards'}",
        "",
        "── Outcomes ────────────────────────────────────────────────",
    ]
    lines += [f"  {line}" for line in batch.totals.summary().splitlines()]
    if batch.n_aborted:
        lines.append(f"  Aborted sessions : {batch.n_aborted:,}")

    if credit_stats is not None:
        cs = credit_stats
        lines += [
            "",
            "── Ending Credits ──────────────────────────────────────────",
            f"  Mean            : {cs.mean:>10.2f}  ({cs.mean_change:+.2f} vs start)",
            f"  95% CI          : [{cs.ci_low:.2f}, {cs.ci_high:.2f}]",
            f"  Std deviation   : {cs.std:>10.2f}",
            f"  Skewness        : {cs.skewness:>10.4f}",
            f"  Excess kurtosis : {cs.kurtosis:>10.4f}",
            f"  Bankrupt        : {cs.bankrupt_pct:>9.2f}%",
            f"  Ahead           : {cs.ahead_pct:>9.2f}%",
            "",
            "  Percentiles:",
            "    " + "  ".join(f"{k}={v:.0f}" for k, v in cs.percentiles.items()),
        ]
    lines.append("")
    report = "\n".join(lines)
    print(report)
    return report


# ─── __main__ ─────────────────────────────────────────────────────────────────

if __name__ == "__main__":
    import sys

    from blackjack_sim.analysis.simulator import simulate_sessions

    n_sessions = int(sys.argv[1]) if len(sys.argv) > 1 else 2_000
    print(f"Blackjack ending-credit analysis — {n_sessions:,} sessions\n")
    result = simulate_sessions(n_sessions, return_credits=True)
    assert result.final_credits is not None
    cs = compute_credit_stats(result.final_credits, result.rules.starting_credits)
    print_batch_report(result, cs)
