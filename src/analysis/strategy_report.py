"""Text report for the exact odds solver.

Three public functions format solver output into human-readable tables:

    print_options_table(upcard)  — every player total against one upcard
    print_dealer_distribution()  — dealer final-total distribution per upcard
    print_policy_gain(table)     — how much optimal play adds over standing
"""

from __future__ import annotations

from src.engine.cards import (
    DEALER_FINAL_TOTALS,
    DEALER_UPCARDS,
    PLAYER_TOTALS,
    card_label,
    is_valid_upcard,
)
from src.solvers.exact_odds import (
    Options,
    compute_options,
    dealer_final_distribution,
    optimal_action,
    solve,
)

# ─── Public report functions ──────────────────────────────────────────────────


def print_options_table(upcard: int) -> None:
    """Print stand / one-card hit / optimal odds for totals 4–21 against *upcard*.

    The ``Opt`` column is the action chosen inside the optimal recursion;
    ``Best`` is the stand-vs-forced-hit label.  They differ where a forced
    hit beats standing on win probability only through later draws.

    Raises:
        ValueError: If *upcard* is outside 1..10.
    """
    if not is_valid_upcard(upcard):
        raise ValueError(f"Dealer upcard must be in 1..10, got {upcard}.")

    print("=" * 78)
    print(f"Player odds vs dealer upcard {card_label(upcard)}")
    print("=" * 78)
    print(
        f"  {'Total':>5}  {'St win':>7}  {'St loss':>7}  {'Hit win':>7}  {'Hit loss':>8}"
        f"  {'Opt win':>7}  {'Opt loss':>8}  {'Opt':>5}  {'Best':>5}"
    )
    print(
        f"  {'-----':>5}  {'-------':>7}  {'-------':>7}  {'-------':>7}  {'--------':>8}"
        f"  {'-------':>7}  {'--------':>8}  {'-----':>5}  {'-----':>5}"
    )

    for total in PLAYER_TOTALS:
        o = compute_options(total, upcard)
        action, _ = optimal_action(total, upcard)
        print(
            f"  {total:>5}  {o.stand_win:>7.4f}  {o.stand_loss:>7.4f}  {o.hit_win:>7.4f}"
            f"  {o.hit_loss:>8.4f}  {o.opt_win:>7.4f}  {o.opt_loss:>8.4f}"
            f"  {action.value.lower():>5}  {o.best_action.value:>5}"
        )
    print()


def print_dealer_distribution() -> None:
    """Print P(bust) and P(final total = 17 … 21) for every dealer upcard."""
    print("=" * 62)
    print("Dealer final-total distribution  (stands on all 17s)")
    print("=" * 62)
    header = "".join(f"{t:>8}" for t in DEALER_FINAL_TOTALS)
    print(f"  {'Upcard':>6}  {'Bust':>7}{header}")
    print(f"  {'------':>6}  {'-------':>7}" + "".join(f"{'------':>8}" for _ in DEALER_FINAL_TOTALS))

    for upcard in DEALER_UPCARDS:
        dist = dealer_final_distribution(upcard)
        cells = "".join(f"{dist.final_dist[t]:>8.4f}" for t in DEALER_FINAL_TOTALS)
        print(f"  {card_label(upcard):>6}  {dist.bust_prob:>7.4f}{cells}")
    print()


def policy_gain(
    table: dict[tuple[int, int], Options] | None = None,
) -> dict[int, float]:
    """Mean (opt_win − stand_win) over totals 4–21 for each upcard.

    Returns:
        {upcard: mean win-probability gain of optimal play over standing}
    """
    table = solve() if table is None else table
    gain: dict[int, float] = {}
    for upcard in DEALER_UPCARDS:
        diffs = [
            table[(t, upcard)].opt_win - table[(t, upcard)].stand_win
            for t in PLAYER_TOTALS
            if (t, upcard) in table
        ]
        gain[upcard] = sum(diffs) / len(diffs) if diffs else 0.0
    return gain


def print_policy_gain(table: dict[tuple[int, int], Options] | None = None) -> None:
    """Print how much optimal play improves the win probability over standing."""
    gain = policy_gain(table)

    print("=" * 40)
    print("Optimal play vs always-stand")
    print("=" * 40)
    print(f"  {'Upcard':>6}  {'Mean gain in P(win)':>20}")
    print(f"  {'------':>6}  {'--------------------':>20}")
    for upcard, g in gain.items():
        print(f"  {card_label(upcard):>6}  {g:>+20.4f}")
    print()


# ─── Entry point ──────────────────────────────────────────────────────────────

if __name__ == "__main__":
    import sys

    upcards = [int(a) for a in sys.argv[1:]] or DEALER_UPCARDS
    for u in upcards:
        print_options_table(u)
    print_dealer_distribution()
    print_policy_gain()
