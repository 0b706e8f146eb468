"""Interactive Plotly lookup tool for the exact odds table.

Three public functions:

    build_lookup_figure(field, table)
        — One heatmap of a probability field; hover shows the whole cell.
    build_policy_comparison_figure(table)
        — 1×3 grid: stand / one-card hit / optimal win probability.
    save_lookup_html(fig, path)
        — Export any figure to a self-contained HTML file.

Hover over any cell to see player total, dealer upcard, every win/loss/push
probability and the stand-vs-hit label.
"""

from __future__ import annotations

import numpy as np
import plotly.graph_objects as go
from plotly.subplots import make_subplots

from src.analysis.heat_maps import PROBABILITY_FIELDS, build_probability_matrix
from src.engine.cards import DEALER_UPCARDS, PLAYER_TOTALS, card_label, upcard_labels
from src.solvers.exact_odds import Options, solve

# ─── Constants ────────────────────────────────────────────────────────────────

_ROW_LABELS: list[str] = [str(t) for t in PLAYER_TOTALS]
_COL_LABELS: list[str] = upcard_labels()
_COLORSCALE: str = "RdYlGn"

_FIELD_TITLES: dict[str, str] = {
    "stand_win": "P(win) — stand",
    "stand_loss": "P(loss) — stand",
    "hit_win": "P(win) — hit once",
    "hit_loss": "P(loss) — hit once",
    "opt_win": "P(win) — optimal",
    "opt_loss": "P(loss) — optimal",
}


# ─── Hover text ───────────────────────────────────────────────────────────────


def _cell_hover(total: int, upcard: int, opts: Options) -> str:
    label = opts.best_action.value if opts.best_action is not None else "invalid"
    lines = [
        f"Player total: <b>{total}</b>",
        f"Dealer upcard: <b>{card_label(upcard)}</b>",
        f"Stand: win {opts.stand_win:.4f} / loss {opts.stand_loss:.4f}"
        f" / push {opts.stand_push:.4f}",
        f"Hit once: win {opts.hit_win:.4f} / loss {opts.hit_loss:.4f}"
        f" / push {opts.hit_push:.4f}",
        f"Optimal: win {opts.opt_win:.4f} / loss {opts.opt_loss:.4f}"
        f" / push {opts.opt_push:.4f}",
        f"Best action: <b>{label}</b>",
    ]
    return "<br>".join(lines)


def _build_hover(table: dict[tuple[int, int], Options]) -> list[list[str]]:
    """Return an 18×10 grid of hover strings (empty string for absent cells)."""
    rows: list[list[str]] = []
    for total in PLAYER_TOTALS:
        row: list[str] = []
        for upcard in DEALER_UPCARDS:
            opts = table.get((total, upcard))
            row.append("" if opts is None else _cell_hover(total, upcard, opts))
        rows.append(row)
    return rows


# ─── Trace builder ─────────────────────────────────────────────────────────────


def _make_heatmap_trace(
    data: np.ndarray,
    hover_text: list[list[str]],
    *,
    name: str,
    showscale: bool = True,
    colorbar_title: str = "",
) -> go.Heatmap:
    """Build one go.Heatmap trace; NaN cells become None (blank)."""
    z = [[None if np.isnan(v) else v for v in row] for row in data.tolist()]
    return go.Heatmap(
        z=z,
        x=_COL_LABELS,
        y=_ROW_LABELS,
        colorscale=_COLORSCALE,
        zmin=0.0,
        zmax=1.0,
        text=hover_text,
        hovertemplate="%{text}<extra></extra>",
        showscale=showscale,
        colorbar={"title": colorbar_title},
        name=name,
    )


# ─── Public figure builders ───────────────────────────────────────────────────


def build_lookup_figure(
    field: str = "opt_win",
    table: dict[tuple[int, int], Options] | None = None,
) -> go.Figure:
    """Build an interactive heatmap of one probability field.

    Args:
        field: One of ``stand_win``, ``stand_loss``, ``hit_win``,
               ``hit_loss``, ``opt_win``, ``opt_loss``.
        table: Output of ``solve()``.  Solved on demand when None.

    Returns:
        go.Figure with a single heatmap trace.

    Raises:
        ValueError: If *field* is not a probability field.
    """
    table = solve() if table is None else table
    data = build_probability_matrix(field, table)

    fig = go.Figure(
        _make_heatmap_trace(data, _build_hover(table), name=field, colorbar_title="P")
    )
    fig.update_layout(
        title_text=f"Odds Lookup — {_FIELD_TITLES[field]}",
        title_font_size=15,
        height=640,
        width=720,
    )
    fig.update_yaxes(title_text="Player total", autorange="reversed")
    fig.update_xaxes(title_text="Dealer upcard")
    return fig


def build_policy_comparison_figure(
    table: dict[tuple[int, int], Options] | None = None,
) -> go.Figure:
    """Build a 1×3 figure comparing stand, one-card hit and optimal P(win).

    Returns:
        go.Figure with three heatmap traces sharing one colour scale.
    """
    table = solve() if table is None else table
    hover = _build_hover(table)
    fields = ["stand_win", "hit_win", "opt_win"]

    fig = make_subplots(
        rows=1,
        cols=len(fields),
        subplot_titles=[_FIELD_TITLES[f] for f in fields],
        horizontal_spacing=0.06,
    )
    for col, f in enumerate(fields, start=1):
        fig.add_trace(
            _make_heatmap_trace(
                build_probability_matrix(f, table),
                hover,
                name=f,
                showscale=col == len(fields),
                colorbar_title="P(win)" if col == len(fields) else "",
            ),
            row=1,
            col=col,
        )

    fig.update_layout(
        title_text="Win Probability by Policy",
        title_font_size=15,
        height=640,
        width=1300,
    )
    fig.update_yaxes(autorange="reversed")
    fig.update_yaxes(title_text="Player total", col=1)
    fig.update_xaxes(title_text="Dealer upcard")
    return fig


# ─── HTML export ───────────────────────────────────────────────────────────────


def save_lookup_html(fig: go.Figure, path: str) -> None:
    """Save a Plotly figure to an HTML file (Plotly JS loaded from the CDN)."""
    fig.write_html(path, include_plotlyjs="cdn")


# ─── Entry point ───────────────────────────────────────────────────────────────

if __name__ == "__main__":
    table = solve()
    print("Building interactive lookup figures …")
    for f in PROBABILITY_FIELDS:
        save_lookup_html(build_lookup_figure(f, table), f"{f}_lookup.html")
    save_lookup_html(build_policy_comparison_figure(table), "policy_comparison_lookup.html")
    print("Saved: <field>_lookup.html for each field, policy_comparison_lookup.html")
