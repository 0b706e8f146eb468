"""Results table and CSV export for the exact odds solver.

Sweeps player totals 4–21 against dealer upcards A–10 and lays each
:class:`~src.solvers.exact_odds.Options` out as one row:

    player_score, dealer_upcard,
    stand_win, stand_loss, stand_win_loss_ratio,
    hit_win, hit_loss, hit_win_loss_ratio,
    best_action,
    opt_win, opt_loss, opt_win_loss_ratio

Ratio columns hold ``"inf"`` when the loss probability is zero.
"""

from __future__ import annotations

import logging
import math

import pandas as pd

from src.solvers.exact_odds import Options, solve

logger = logging.getLogger(__name__)

RESULT_COLUMNS: list[str] = [
    "player_score",
    "dealer_upcard",
    "stand_win",
    "stand_loss",
    "stand_win_loss_ratio",
    "hit_win",
    "hit_loss",
    "hit_win_loss_ratio",
    "best_action",
    "opt_win",
    "opt_loss",
    "opt_win_loss_ratio",
]

_PROB_COLUMNS: list[str] = [
    "stand_win",
    "stand_loss",
    "hit_win",
    "hit_loss",
    "opt_win",
    "opt_loss",
]

_RATIO_COLUMNS: dict[str, tuple[str, str]] = {
    "stand_win_loss_ratio": ("stand_win", "stand_loss"),
    "hit_win_loss_ratio": ("hit_win", "hit_loss"),
    "opt_win_loss_ratio": ("opt_win", "opt_loss"),
}

INFINITE_RATIO: str = "inf"


def win_loss_ratio(win: float, loss: float) -> float:
    """Return win / loss, or ``math.inf`` when loss is zero (or below)."""
    if loss <= 0.0:
        return math.inf
    return win / loss


def format_ratio(win: float, loss: float, precision: int = 6) -> str:
    """Format the win/loss ratio with fixed precision.

    Examples:
        >>> format_ratio(0.5, 0.25)
        '2.000000'
        >>> format_ratio(0.7, 0.0)
        'inf'
    """
    ratio = win_loss_ratio(win, loss)
    if math.isinf(ratio):
        return INFINITE_RATIO
    return f"{ratio:.{precision}f}"


def options_to_row(hand_score: int, dealer_upcard: int, opts: Options) -> dict:
    """Flatten one Options into a results-table row (numeric ratios)."""
    return {
        "player_score": hand_score,
        "dealer_upcard": dealer_upcard,
        "stand_win": opts.stand_win,
        "stand_loss": opts.stand_loss,
        "stand_win_loss_ratio": win_loss_ratio(opts.stand_win, opts.stand_loss),
        "hit_win": opts.hit_win,
        "hit_loss": opts.hit_loss,
        "hit_win_loss_ratio": win_loss_ratio(opts.hit_win, opts.hit_loss),
        "best_action": opts.best_action.value if opts.best_action is not None else "",
        "opt_win": opts.opt_win,
        "opt_loss": opts.opt_loss,
        "opt_win_loss_ratio": win_loss_ratio(opts.opt_win, opts.opt_loss),
    }


def build_results_frame(
    table: dict[tuple[int, int], Options] | None = None,
) -> pd.DataFrame:
    """Return the full results table as a DataFrame.

    Args:
        table: Output of :func:`~src.solvers.exact_odds.solve`.  Solved on
               demand when None.

    Returns:
        DataFrame with :data:`RESULT_COLUMNS`, one row per cell, probabilities
        and ratios as floats (``inf`` for zero-loss ratios).
    """
    table = solve() if table is None else table
    rows = [options_to_row(hs, du, opts) for (hs, du), opts in table.items()]
    return pd.DataFrame(rows, columns=RESULT_COLUMNS)


def format_results_frame(df: pd.DataFrame, precision: int = 6) -> pd.DataFrame:
    """Return a copy of *df* with probabilities and ratios rendered as text.

    Probabilities use fixed *precision*; ratio columns are recomputed from
    the win/loss columns so a zero loss always renders as ``"inf"``.
    """
    out = df.copy()
    for col in _PROB_COLUMNS:
        out[col] = df[col].map(lambda p: f"{p:.{precision}f}")
    for col, (win_col, loss_col) in _RATIO_COLUMNS.items():
        out[col] = [
            format_ratio(w, l, precision) for w, l in zip(df[win_col], df[loss_col])
        ]
    return out


def write_results_csv(path: str = "results.csv", precision: int = 6) -> str:
    """Solve the full table and write it to *path* as CSV.

    Args:
        path:      Destination file.
        precision: Digits after the decimal point for probabilities/ratios.

    Returns:
        The path written.
    """
    df = build_results_frame()
    logger.debug("Built results table with %d rows", len(df))
    format_results_frame(df, precision).to_csv(path, index=False)
    logger.info("Wrote %d rows to %s", len(df), path)
    return path


# ─── Entry point ──────────────────────────────────────────────────────────────

if __name__ == "__main__":
    import sys

    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

    out_path = sys.argv[1] if len(sys.argv) > 1 else "results.csv"
    write_results_csv(out_path)
    print(f"Wrote {out_path} (player scores 4..21 vs dealer upcards 1..10)")
