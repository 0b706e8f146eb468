"""Heat maps of the exact odds table.

Two public data-builder functions return NumPy matrices that can be used
programmatically or passed to the plot helpers:

    build_action_matrix(table)            — best-action codes per cell
    build_probability_matrix(field, table) — one Options probability per cell

Two public plot functions render matplotlib figures:

    plot_action_heatmap(...)        — stand / equal / hit chart
    plot_probability_heatmaps(...)  — 1×3 figure: stand, hit, optimal win

Matrix convention (both builders):
    Shape  : (18, 10) — rows = player totals [4 … 21],
                        cols = dealer upcards [A, 2 … 10]
    Values : 0.0 = STAND, 0.5 = EQUAL, 1.0 = HIT (actions);
             probability in [0, 1] (probabilities)
             np.nan = cell absent from the table
"""

from __future__ import annotations

import matplotlib
import matplotlib.colors
import matplotlib.figure
import matplotlib.pyplot as plt
import numpy as np

from src.engine.cards import DEALER_UPCARDS, PLAYER_TOTALS, upcard_labels
from src.solvers.exact_odds import BestAction, Options, solve

# ─── Constants ────────────────────────────────────────────────────────────────

_ROW_LABELS: list[str] = [str(t) for t in PLAYER_TOTALS]
_COL_LABELS: list[str] = upcard_labels()
_NAN_COLOR: str = "#cccccc"

PROBABILITY_FIELDS: tuple[str, ...] = (
    "stand_win",
    "stand_loss",
    "hit_win",
    "hit_loss",
    "opt_win",
    "opt_loss",
)

_ACTION_CODES: dict[BestAction, float] = {
    BestAction.STAND: 0.0,
    BestAction.EQUAL: 0.5,
    BestAction.HIT: 1.0,
}

_FIELD_TITLES: dict[str, str] = {
    "stand_win": "P(win) — stand",
    "stand_loss": "P(loss) — stand",
    "hit_win": "P(win) — hit once, then optimal",
    "hit_loss": "P(loss) — hit once, then optimal",
    "opt_win": "P(win) — optimal",
    "opt_loss": "P(loss) — optimal",
}


# ─── Colormaps ────────────────────────────────────────────────────────────────


def _make_action_cmap() -> matplotlib.colors.ListedColormap:
    """Red=STAND (0), yellow=EQUAL (0.5), green=HIT (1), grey=absent (NaN)."""
    cmap = matplotlib.colors.ListedColormap(["#d62728", "#ffdd57", "#2ca02c"])
    cmap.set_bad(color=_NAN_COLOR)
    return cmap


def _make_probability_cmap() -> matplotlib.colors.Colormap:
    cmap = matplotlib.colormaps["RdYlGn"].copy()
    cmap.set_bad(color=_NAN_COLOR)
    return cmap


_ACTION_CMAP: matplotlib.colors.Colormap = _make_action_cmap()
_PROBABILITY_CMAP: matplotlib.colors.Colormap = _make_probability_cmap()


# ─── Data builders ────────────────────────────────────────────────────────────


def _check_field(field: str) -> None:
    if field not in PROBABILITY_FIELDS:
        raise ValueError(
            f"Unknown probability field {field!r}; expected one of {PROBABILITY_FIELDS}."
        )


def build_action_matrix(
    table: dict[tuple[int, int], Options] | None = None,
) -> np.ndarray:
    """Return the (18, 10) best-action matrix.

    Args:
        table: Output of ``solve()``.  Solved on demand when None.

    Returns:
        float64 array: 0.0 = STAND, 0.5 = EQUAL, 1.0 = HIT, NaN = absent.
    """
    table = solve() if table is None else table
    data = np.full((len(PLAYER_TOTALS), len(DEALER_UPCARDS)), np.nan)

    for r, total in enumerate(PLAYER_TOTALS):
        for c, upcard in enumerate(DEALER_UPCARDS):
            opts = table.get((total, upcard))
            if opts is None or opts.best_action not in _ACTION_CODES:
                continue
            data[r, c] = _ACTION_CODES[opts.best_action]

    return data


def build_probability_matrix(
    field: str,
    table: dict[tuple[int, int], Options] | None = None,
) -> np.ndarray:
    """Return an (18, 10) matrix of one Options probability.

    Args:
        field: One of :data:`PROBABILITY_FIELDS`, e.g. ``"opt_win"``.
        table: Output of ``solve()``.  Solved on demand when None.

    Raises:
        ValueError: If *field* is not a probability field.
    """
    _check_field(field)
    table = solve() if table is None else table
    data = np.full((len(PLAYER_TOTALS), len(DEALER_UPCARDS)), np.nan)

    for r, total in enumerate(PLAYER_TOTALS):
        for c, upcard in enumerate(DEALER_UPCARDS):
            opts = table.get((total, upcard))
            if opts is not None:
                data[r, c] = getattr(opts, field)

    return data


# ─── Rendering helper ─────────────────────────────────────────────────────────


def _render_panel(
    ax: matplotlib.axes.Axes,
    data: np.ndarray,
    actions: bool,
) -> matplotlib.image.AxesImage:
    """Render one heat-map panel onto *ax* and return the AxesImage.

    The caller sets title and axis labels.
    """
    cmap = _ACTION_CMAP if actions else _PROBABILITY_CMAP
    masked = np.ma.masked_invalid(data)
    im = ax.imshow(masked, cmap=cmap, vmin=0.0, vmax=1.0, aspect="auto")

    ax.set_xticks(range(len(_COL_LABELS)))
    ax.set_xticklabels(_COL_LABELS, fontsize=8)
    ax.set_yticks(range(len(_ROW_LABELS)))
    ax.set_yticklabels(_ROW_LABELS, fontsize=8)

    for r in range(data.shape[0]):
        for c in range(data.shape[1]):
            val = data[r, c]
            if np.isnan(val):
                continue
            if actions:
                text = "H" if val > 0.75 else ("S" if val < 0.25 else "=")
                text_color = "black" if 0.25 <= val <= 0.75 else "white"
                fontsize = 8
            else:
                text = f"{val:.2f}"
                text_color = "black" if 0.25 < val < 0.75 else "white"
                fontsize = 6
            ax.text(c, r, text, ha="center", va="center", fontsize=fontsize, color=text_color)

    return im


# ─── Public plot functions ────────────────────────────────────────────────────


def plot_action_heatmap(
    table: dict[tuple[int, int], Options] | None = None,
    *,
    title: str = "Stand vs one-card hit",
    show: bool = True,
    save_path: str | None = None,
) -> matplotlib.figure.Figure:
    """Plot the best-action chart (rows = player total, cols = dealer upcard).

    Args:
        table:     Output of ``solve()``.  Solved on demand when None.
        title:     Figure title.
        show:      If True, call plt.show() after rendering.
        save_path: If not None, save the figure to this path before showing.

    Returns:
        matplotlib.figure.Figure.
    """
    data = build_action_matrix(table)

    fig, ax = plt.subplots(figsize=(7, 8))
    ax.set_title(title, fontsize=12, fontweight="bold")
    _render_panel(ax, data, actions=True)
    ax.set_xlabel("Dealer upcard", fontsize=9)
    ax.set_ylabel("Player total", fontsize=9)

    plt.tight_layout()

    if save_path is not None:
        fig.savefig(save_path, bbox_inches="tight", dpi=120)
    if show:
        plt.show()

    return fig


def plot_probability_heatmaps(
    table: dict[tuple[int, int], Options] | None = None,
    *,
    fields: tuple[str, ...] = ("stand_win", "hit_win", "opt_win"),
    show: bool = True,
    save_path: str | None = None,
) -> matplotlib.figure.Figure:
    """Plot one probability heat map per field, side by side.

    Args:
        table:     Output of ``solve()``.  Solved once on demand when None.
        fields:    Probability fields to plot, one panel each.
        show:      If True, call plt.show().
        save_path: If not None, save to path.

    Returns:
        matplotlib.figure.Figure with ``len(fields)`` panels plus colorbars.

    Raises:
        ValueError: If any field is not a probability field.
    """
    for f in fields:
        _check_field(f)
    table = solve() if table is None else table

    fig, axes = plt.subplots(1, len(fields), figsize=(6 * len(fields), 8), squeeze=False)
    fig.suptitle("Player odds by total and dealer upcard", fontsize=13, fontweight="bold")

    for ax, f in zip(axes[0], fields):
        im = _render_panel(ax, build_probability_matrix(f, table), actions=False)
        ax.set_title(_FIELD_TITLES[f], fontsize=10)
        ax.set_xlabel("Dealer upcard", fontsize=9)
        ax.set_ylabel("Player total", fontsize=9)
        plt.colorbar(im, ax=ax, fraction=0.046, pad=0.04)

    plt.tight_layout()

    if save_path is not None:
        fig.savefig(save_path, bbox_inches="tight", dpi=120)
    if show:
        plt.show()

    return fig


# ─── Entry point ──────────────────────────────────────────────────────────────

if __name__ == "__main__":
    table = solve()
    print("Generating heat maps …")
    plot_action_heatmap(table, show=False, save_path="best_action.png")
    plot_probability_heatmaps(table, show=False, save_path="win_probabilities.png")
    print("Saved: best_action.png, win_probabilities.png")
