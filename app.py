"""Blackjack Odds Solver — Streamlit Dashboard.

Four-tab interactive dashboard for exploring the exact odds table:
  Tab 1 — Strategy Heat Maps   (matplotlib, best action + win probabilities)
  Tab 2 — Interactive Lookup   (Plotly, hover for every probability)
  Tab 3 — Results Table        (pandas table + CSV download)
  Tab 4 — Monte Carlo Check    (simulated rates vs exact odds for one cell)

Run:
    PYTHONPATH=. streamlit run app.py
"""

from __future__ import annotations

import matplotlib

matplotlib.use("Agg")  # must be set before any other matplotlib imports

import streamlit as st

# ─── Page config ──────────────────────────────────────────────────────────────

st.set_page_config(
    page_title="Blackjack Odds Solver",
    page_icon="🃏",
    layout="wide",
)

# ─── Lazy imports (inside functions to keep startup fast) ─────────────────────


@st.cache_resource
def _load_analysis_modules():
    """Import analysis modules once (cached for the process lifetime)."""
    from src.analysis.heat_maps import (
        PROBABILITY_FIELDS,
        plot_action_heatmap,
        plot_probability_heatmaps,
    )
    from src.analysis.plotly_lookup import (
        build_lookup_figure,
        build_policy_comparison_figure,
    )
    from src.analysis.results_table import build_results_frame, format_results_frame
    from src.analysis.simulator import POLICIES, exact_rates, simulate_cell
    from src.engine.cards import DEALER_UPCARDS, PLAYER_TOTALS, card_label

    return {
        "PROBABILITY_FIELDS": PROBABILITY_FIELDS,
        "POLICIES": POLICIES,
        "PLAYER_TOTALS": PLAYER_TOTALS,
        "DEALER_UPCARDS": DEALER_UPCARDS,
        "card_label": card_label,
        "plot_action_heatmap": plot_action_heatmap,
        "plot_probability_heatmaps": plot_probability_heatmaps,
        "build_lookup_figure": build_lookup_figure,
        "build_policy_comparison_figure": build_policy_comparison_figure,
        "build_results_frame": build_results_frame,
        "format_results_frame": format_results_frame,
        "simulate_cell": simulate_cell,
        "exact_rates": exact_rates,
    }


@st.cache_resource
def _solve_table():
    """Solve the full 18×10 table once per process."""
    from src.solvers.exact_odds import solve

    return solve()


m = _load_analysis_modules()
table = _solve_table()

# ─── Sidebar controls ─────────────────────────────────────────────────────────

with st.sidebar:
    st.title("🃏 Blackjack Odds Solver")
    st.markdown("---")

    lookup_field = st.selectbox(
        "Lookup probability",
        options=list(m["PROBABILITY_FIELDS"]),
        index=list(m["PROBABILITY_FIELDS"]).index("opt_win"),
    )

    precision = st.slider("CSV precision", min_value=2, max_value=10, value=6)

    st.markdown("---")
    mc_total = st.selectbox("MC player total", options=m["PLAYER_TOTALS"], index=12)
    mc_upcard = st.selectbox(
        "MC dealer upcard",
        options=m["DEALER_UPCARDS"],
        format_func=m["card_label"],
        index=9,
    )
    mc_policy = st.selectbox("MC policy", options=list(m["POLICIES"]), index=2)
    n_mc_hands = st.slider(
        "MC hands",
        min_value=5_000,
        max_value=200_000,
        value=20_000,
        step=5_000,
    )

    st.markdown("---")
    st.caption("Infinite deck · ace = 1 · dealer stands on 17")

# ─── Tabs ─────────────────────────────────────────────────────────────────────

tab1, tab2, tab3, tab4 = st.tabs(
    [
        "Strategy Heat Maps",
        "Interactive Lookup",
        "Results Table",
        "Monte Carlo Check",
    ]
)

# ── Tab 1: Strategy Heat Maps ─────────────────────────────────────────────────

with tab1:
    st.header("Strategy Heat Maps")
    st.caption(
        "Rows = player total (4–21) | Cols = dealer upcard (A–10) | "
        "Red = stand, Yellow = equal, Green = hit"
    )

    st.subheader("Stand vs one-card hit")
    st.pyplot(m["plot_action_heatmap"](table, show=False))

    st.markdown("---")
    st.subheader("Win probability by policy")
    st.pyplot(m["plot_probability_heatmaps"](table, show=False))

# ── Tab 2: Interactive Lookup ────────────────────────────────────────────────

with tab2:
    st.header("Interactive Odds Lookup")
    st.caption("Hover over any cell for stand / hit / optimal win, loss and push.")

    st.plotly_chart(m["build_lookup_figure"](lookup_field, table), use_container_width=True)

    st.markdown("---")
    st.subheader("Policy comparison")
    st.plotly_chart(m["build_policy_comparison_figure"](table), use_container_width=True)

# ── Tab 3: Results Table ──────────────────────────────────────────────────────

with tab3:
    st.header("Results Table")

    df = m["build_results_frame"](table)
    st.dataframe(df, use_container_width=True, hide_index=True)

    csv_bytes = m["format_results_frame"](df, precision).to_csv(index=False).encode("utf-8")
    st.download_button(
        "Download results.csv",
        data=csv_bytes,
        file_name="results.csv",
        mime="text/csv",
    )

# ── Tab 4: Monte Carlo Check ──────────────────────────────────────────────────

with tab4:
    st.header("Monte Carlo Check")
    st.caption(
        f"Player {mc_total} vs dealer {m['card_label'](mc_upcard)}, policy '{mc_policy}'."
    )

    with st.spinner(f"Simulating {n_mc_hands:,} hands …"):
        sim = m["simulate_cell"](mc_total, mc_upcard, mc_policy, n_hands=n_mc_hands, seed=42)

    exact_win, exact_loss = m["exact_rates"](sim, table.get((mc_total, mc_upcard)))

    col1, col2, col3 = st.columns(3)
    col1.metric("Simulated win", f"{sim.win_rate:.4f}", f"{sim.win_rate - exact_win:+.4f}")
    col2.metric("Simulated loss", f"{sim.loss_rate:.4f}", f"{sim.loss_rate - exact_loss:+.4f}")
    col3.metric("Simulated push", f"{sim.push_rate:.4f}")

    st.code(
        f"{sim}\nExact: win {exact_win:.4f} / loss {exact_loss:.4f}",
        language=None,
    )
