"""Decision-table heat map.

One data-builder returns the table as a NumPy matrix that can be used
programmatically or passed to the plot helper:

    build_decision_heatmap_data(totals)  — (len(totals), 10) action-code matrix

One public plot function renders a matplotlib figure:

    plot_decision_table(data, ...)       — annotated S/H/D grid

Matrix convention:
    Rows   : player totals (default 4–20; 21 always ends the turn)
    Cols   : dealer up card [2, 3, 4, 5, 6, 7, 8, 9, 10, A]
             (J/Q/K share the 10 column)
    Values : 0 = STAND, 1 = HIT, 2 = DOUBLE_DOWN
"""

from __future__ import annotations

import matplotlib
import matplotlib.axes
import matplotlib.colors
import matplotlib.figure
import matplotlib.pyplot as plt
import numpy as np

from blackjack_sim.engine.decision_table import (
    ACTION_CODES,
    UP_CARD_COLUMNS,
    Action,
    build_decision_matrix,
)

# ─── Constants ────────────────────────────────────────────────────────────────

DEFAULT_TOTALS: list[int] = list(range(4, 21))
COL_LABELS: list[str] = [rank.value for rank in UP_CARD_COLUMNS]

ACTION_LABELS: dict[int, str] = {
    ACTION_CODES[Action.STAND]: "S",
    ACTION_CODES[Action.HIT]: "H",
    ACTION_CODES[Action.DOUBLE_DOWN]: "D",
}

# Colour per action code, in code order: STAND, HIT, DOUBLE_DOWN.
ACTION_COLORS: list[str] = ["#d62728", "#2ca02c", "#1f77b4"]


def _make_action_cmap() -> matplotlib.colors.ListedColormap:
    """Red=STAND (0), Green=HIT (1), Blue=DOUBLE_DOWN (2)."""
    return matplotlib.colors.ListedColormap(ACTION_COLORS)


_ACTION_CMAP: matplotlib.colors.ListedColormap = _make_action_cmap()


# ─── Data builder ─────────────────────────────────────────────────────────────


def build_decision_heatmap_data(totals: list[int] | None = None) -> np.ndarray:
    """Return the decision table as a matrix of action codes.

    Args:
        totals: Player totals for the rows. Defaults to 4–20.

    Returns:
        int8 matrix of shape (len(totals), 10).
    """
    return build_decision_matrix(DEFAULT_TOTALS if totals is None else totals)


# ─── Public plot function ─────────────────────────────────────────────────────


def _render_panel(
    ax: matplotlib.axes.Axes,
    data: np.ndarray,
    totals: list[int],
) -> None:
    ax.imshow(data, cmap=_ACTION_CMAP, vmin=-0.5, vmax=2.5, aspect="auto")

    ax.set_xticks(range(len(COL_LABELS)))
    ax.set_xticklabels(COL_LABELS, fontsize=9)
    ax.set_yticks(range(len(totals)))
    ax.set_yticklabels([str(t) for t in totals], fontsize=9)

    for r in range(data.shape[0]):
        for c in range(data.shape[1]):
            ax.text(
                c,
                r,
                ACTION_LABELS[int(data[r, c])],
                ha="center",
                va="center",
                fontsize=9,
                color="white",
                fontweight="bold",
            )


def plot_decision_table(
    data: np.ndarray | None = None,
    totals: list[int] | None = None,
    *,
    title: str = "Automated Player Decision Table",
    show: bool = True,
    save_path: str | None = None,
) -> matplotlib.figure.Figure:
    """Plot the decision table as an annotated heat map.

    Args:
        data:      Matrix from build_decision_heatmap_data(). Built from
                   ``totals`` when omitted.
        totals:    Row totals matching ``data``. Defaults to 4–20.
        title:     Figure title.
        show:      If True, call plt.show() after rendering.
        save_path: If not None, save the figure to this path before showing.

    Returns:
        matplotlib.figure.Figure.

    Raises:
        ValueError: If ``data`` and ``totals`` disagree on the row count.
    """
    totals = DEFAULT_TOTALS if totals is None else totals
    if data is None:
        data = build_decision_heatmap_data(totals)
    if data.shape[0] != len(totals):
        raise ValueError(
            f"Matrix has {data.shape[0]} rows but {len(totals)} totals were given."
        )

    fig, ax = plt.subplots(figsize=(7, 8))
    fig.suptitle(title, fontsize=13, fontweight="bold")

    _render_panel(ax, data, totals)
    ax.set_xlabel("Dealer up card", fontsize=9)
    ax.set_ylabel("Player total", fontsize=9)

    plt.tight_layout()

    if save_path is not None:
        fig.savefig(save_path, bbox_inches="tight", dpi=120)
    if show:
        plt.show()

    return fig


# ─── Entry point ──────────────────────────────────────────────────────────────

if __name__ == "__main__":
    plot_decision_table(show=False, save_path="decision_table.png")
    print("Saved: decision_table.png")
