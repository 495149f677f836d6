"""Blackjack Simulator — Streamlit Dashboard.

Four-tab interactive dashboard for the automated player:
  Tab 1 — Decision Table       (matplotlib S/H/D grid)
  Tab 2 — Interactive Lookup   (Plotly, hover for total, up card, action)
  Tab 3 — Batch Simulation     (win/loss/push rates, ending-credit distribution)
  Tab 4 — Sample Session       (round-by-round log of one seeded session)

Run:
    streamlit run app.py
"""

from __future__ import annotations

import contextlib
import dataclasses
import io

import matplotlib

matplotlib.use("Agg")  # must be set before any other matplotlib imports

import streamlit as st

# ─── Page config ──────────────────────────────────────────────────────────────

st.set_page_config(
    page_title="Blackjack Simulator",
    page_icon="🃏",
    layout="wide",
)

# ─── Lazy imports (inside functions to keep startup fast) ─────────────────────


@st.cache_resource
def _load_analysis_modules():
    """Import heavy analysis modules once (cached for the process lifetime)."""
    import pandas as pd

    from blackjack_sim.analysis.bankroll import compute_credit_stats, print_batch_report
    from blackjack_sim.analysis.heat_maps import plot_decision_table
    from blackjack_sim.analysis.plotly_lookup import (
        build_credits_histogram,
        build_decision_lookup_figure,
    )
    from blackjack_sim.analysis.session import run_session
    from blackjack_sim.engine.cards import hand_to_str
    from blackjack_sim.engine.rules import DEFAULT_RULES

    return {
        "pd": pd,
        "compute_credit_stats": compute_credit_stats,
        "print_batch_report": print_batch_report,
        "plot_decision_table": plot_decision_table,
        "build_decision_lookup_figure": build_decision_lookup_figure,
        "build_credits_histogram": build_credits_histogram,
        "run_session": run_session,
        "hand_to_str": hand_to_str,
        "DEFAULT_RULES": DEFAULT_RULES,
    }


@st.cache_resource
def _run_batch(n_sessions: int, max_rounds: int, starting_credits: int, base_bet: int, seed: int):
    """Run a batch of sessions and cache the result (keyed on the settings)."""
    from blackjack_sim.analysis.simulator import simulate_sessions
    from blackjack_sim.engine.rules import DEFAULT_RULES

    rules = dataclasses.replace(
        DEFAULT_RULES,
        max_rounds=max_rounds,
        starting_credits=starting_credits,
        base_bet=base_bet,
    ).validate()
    return simulate_sessions(n_sessions, rules, seed=seed, workers=1, return_credits=True)


# ─── Sidebar controls ─────────────────────────────────────────────────────────

with st.sidebar:
    st.title("🃏 Blackjack Simulator")
    st.markdown("---")

    n_sessions = st.slider(
        "Sessions",
        min_value=100,
        max_value=5_000,
        value=500,
        step=100,
    )
    max_rounds = st.slider(
        "Rounds per session",
        min_value=10,
        max_value=500,
        value=100,
        step=10,
    )
    starting_credits = st.number_input("Starting credits", min_value=1, value=100, step=10)
    base_bet = st.number_input("Flat bet", min_value=1, value=10, step=1)
    seed = st.number_input("Seed", min_value=0, value=42, step=1)

    st.markdown("---")
    st.caption("Engine → Session → Batch → Analysis")

# ─── Tabs ─────────────────────────────────────────────────────────────────────

tab1, tab2, tab3, tab4 = st.tabs(
    [
        "Decision Table",
        "Interactive Lookup",
        "Batch Simulation",
        "Sample Session",
    ]
)

m = _load_analysis_modules()
pd = m["pd"]

# ── Tab 1: Decision Table ─────────────────────────────────────────────────────

with tab1:
    st.header("Automated Player Decision Table")
    st.caption(
        "Rows = player total (4–20) | Cols = dealer up card | "
        "Red = STAND, Green = HIT, Blue = DOUBLE DOWN"
    )
    fig_table = m["plot_decision_table"](show=False)
    st.pyplot(fig_table)
    st.info(
        "DOUBLE DOWN falls back to HIT unless the low total is 9–11 "
        "and the player can cover a second bet."
    )

# ── Tab 2: Interactive Lookup ─────────────────────────────────────────────────

with tab2:
    st.header("Interactive Decision Lookup")
    st.caption("Hover over any cell to see the player total, dealer up card and action.")
    st.plotly_chart(m["build_decision_lookup_figure"](), use_container_width=True)

# ── Tab 3: Batch Simulation ───────────────────────────────────────────────────

with tab3:
    st.header("Batch Simulation")

    with st.spinner(f"Simulating {n_sessions:,} sessions …"):
        batch = _run_batch(
            int(n_sessions), int(max_rounds), int(starting_credits), int(base_bet), int(seed)
        )
    totals = batch.totals

    col1, col2, col3, col4 = st.columns(4)
    col1.metric("Win %", f"{totals.win_pct:.2f}")
    col2.metric("Loss %", f"{totals.loss_pct:.2f}")
    col3.metric("Push %", f"{totals.push_pct:.2f}")
    col4.metric("Sessions ahead %", f"{totals.ahead_pct:.2f}")

    if batch.final_credits is not None and len(batch.final_credits) > 0:
        cs = m["compute_credit_stats"](batch.final_credits, batch.rules.starting_credits)

        st.subheader("Ending Credits")
        st.plotly_chart(
            m["build_credits_histogram"](batch.final_credits, batch.rules.starting_credits),
            use_container_width=True,
        )
        pct_df = pd.DataFrame(
            {"Percentile": list(cs.percentiles.keys()), "Credits": list(cs.percentiles.values())}
        )
        st.dataframe(pct_df, use_container_width=True, hide_index=True)

        st.markdown("---")
        st.subheader("Full Batch Report (stdout capture)")
        buf = io.StringIO()
        with contextlib.redirect_stdout(buf):
            m["print_batch_report"](batch, cs)
        st.code(buf.getvalue(), language=None)
    else:
        st.warning("Every session was aborted; no ending credits to analyse.")

# ── Tab 4: Sample Session ─────────────────────────────────────────────────────

with tab4:
    st.header("Sample Session")
    st.caption("One automated session with the sidebar settings, round by round.")

    session_rules = dataclasses.replace(
        m["DEFAULT_RULES"],
        max_rounds=int(max_rounds),
        starting_credits=int(starting_credits),
        base_bet=int(base_bet),
    )
    rows = []

    def _log_round(result, player):
        rows.append(
            {
                "Round": len(rows) + 1,
                "Player": m["hand_to_str"](result.player_cards),
                "Dealer": m["hand_to_str"](result.dealer_cards),
                "Bet": result.bet,
                "Outcome": result.outcome.name if result.outcome is not None else "QUIT",
                "Net": result.net,
                "Credits": player.credits.balance,
            }
        )

    session_stats = m["run_session"](session_rules, seed=int(seed), on_round=_log_round)
    st.metric("Result", str(session_stats))
    st.dataframe(pd.DataFrame(rows), use_container_width=True, hide_index=True)
