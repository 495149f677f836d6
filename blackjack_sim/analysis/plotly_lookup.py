"""Interactive Plotly figures for the decision table and batch results.

Three public functions:

    build_decision_lookup_figure(totals)
        — Interactive heatmap of the decision table; hover shows the action.
    build_credits_histogram(final_credits, starting_credits)
        — Distribution of session ending credits with the starting line.
    save_lookup_html(fig, path)
        — Export any figure to a self-contained HTML file.

Figures open in a browser via ``fig.show()``, embed in Jupyter notebooks,
or render in the Streamlit dashboard.
"""

from __future__ import annotations

import numpy as np
import plotly.graph_objects as go

from blackjack_sim.analysis.heat_maps import (
    ACTION_COLORS,
    COL_LABELS,
    DEFAULT_TOTALS,
    build_decision_heatmap_data,
)
from blackjack_sim.engine.decision_table import ACTION_CODES, Action

# ─── Constants ────────────────────────────────────────────────────────────────

_ACTION_NAMES: dict[int, str] = {code: action.name for action, code in ACTION_CODES.items()}

# Discrete three-step colorscale over codes 0..2.
_ACTION_COLORSCALE: list[list] = [
    [0.0, ACTION_COLORS[0]],
    [0.333, ACTION_COLORS[0]],
    [0.334, ACTION_COLORS[1]],
    [0.666, ACTION_COLORS[1]],
    [0.667, ACTION_COLORS[2]],
    [1.0, ACTION_COLORS[2]],
]


# ─── Hover text builder ───────────────────────────────────────────────────────


def _build_decision_hover(data: np.ndarray, totals: list[int]) -> list[list[str]]:
    """Return a rows×10 list of hover strings for the decision table.

    Each cell shows the player total, the dealer up card and the action.
    """
    rows: list[list[str]] = []
    for r, total in enumerate(totals):
        row: list[str] = []
        for c, up_label in enumerate(COL_LABELS):
            action = _ACTION_NAMES[int(data[r, c])]
            lines = [
                f"Total: <b>{total}</b>",
                f"Dealer up: {up_label}",
                f"Action: <b>{action}</b>",
            ]
            if action == Action.DOUBLE_DOWN.name:
                lines.append("Falls back to HIT when not eligible")
            row.append("<br>".join(lines))
        rows.append(row)
    return rows


# ─── Public figure builders ───────────────────────────────────────────────────


def build_decision_lookup_figure(totals: list[int] | None = None) -> go.Figure:
    """Build an interactive Plotly heatmap of the decision table.

    Cells are coloured red (STAND), green (HIT) or blue (DOUBLE_DOWN).

    Args:
        totals: Player totals for the rows. Defaults to 4–20.

    Returns:
        go.Figure with a single heatmap trace.
    """
    totals = DEFAULT_TOTALS if totals is None else totals
    data = build_decision_heatmap_data(totals)
    hover = _build_decision_hover(data, totals)

    fig = go.Figure(
        go.Heatmap(
            z=data.tolist(),
            x=COL_LABELS,
            y=[str(t) for t in totals],
            colorscale=_ACTION_COLORSCALE,
            zmin=0,
            zmax=2,
            text=hover,
            hovertemplate="%{text}<extra></extra>",
            showscale=False,
            name="Decision table",
        )
    )
    fig.update_layout(
        title_text="Decision Table Lookup — S / H / D",
        title_font_size=15,
        height=600,
        width=620,
    )
    fig.update_yaxes(title_text="Player total", type="category")
    fig.update_xaxes(title_text="Dealer up card", type="category")
    return fig


def build_credits_histogram(
    final_credits: np.ndarray,
    starting_credits: int,
    *,
    nbins: int = 40,
) -> go.Figure:
    """Build a histogram of session ending credits.

    A dashed vertical line marks the starting credits, so the mass to its
    right is the share of sessions that walked away ahead.

    Args:
        final_credits:    1-D array of ending credits, one per session.
        starting_credits: Credits every session started with.
        nbins:            Maximum number of histogram bins.

    Returns:
        go.Figure with one histogram trace and one reference line.
    """
    fig = go.Figure(
        go.Histogram(
            x=np.asarray(final_credits).tolist(),
            nbinsx=nbins,
            name="Ending credits",
            marker_color=ACTION_COLORS[2],
        )
    )
    fig.add_vline(
        x=starting_credits,
        line_dash="dash",
        line_color="black",
        annotation_text=f"start ${starting_credits}",
    )
    fig.update_layout(
        title_text=f"Ending Credits — {len(final_credits):,} sessions",
        title_font_size=15,
        height=420,
        width=780,
        bargap=0.05,
    )
    fig.update_xaxes(title_text="Credits")
    fig.update_yaxes(title_text="Sessions")
    return fig


# ─── HTML export ───────────────────────────────────────────────────────────────


def save_lookup_html(fig: go.Figure, path: str) -> None:
    """Save a Plotly figure to a self-contained HTML file.

    Plotly JS is loaded from the CDN so the file itself remains compact.

    Args:
        fig:  Any go.Figure produced by this module.
        path: Destination file path (e.g. ``"decision_lookup.html"``).
    """
    fig.write_html(path, include_plotlyjs="cdn")


# ─── Entry point ───────────────────────────────────────────────────────────────

if __name__ == "__main__":
    save_lookup_html(build_decision_lookup_figure(), "decision_lookup.html")
    print("Saved: decision_lookup.html")
