"""
Monte Carlo simulator for cross-checking the exact odds solver.

Plays out the same infinite-deck game the solver models (card values 1–10
drawn uniformly, ace = 1, dealer draws to 17) from a fixed player total and
dealer upcard, and counts wins, losses and pushes.

Policies:
    "stand"   — stand on the starting total.
    "hit"     — take exactly one card, then follow the optimal policy.
    "optimal" — follow the optimal policy from the starting total.

The optimal policy is the per-total HIT/STAND table produced by
``optimal_policy(upcard)``, so the simulated rates should agree with the
matching ``Options`` fields to within sampling error.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass

import numpy as np
from scipy import stats

from src.engine.cards import (
    CARD_VALUES,
    DEALER_STAND_TOTAL,
    is_bust,
    is_valid_upcard,
)
from src.solvers.exact_odds import Action, Options, compute_options, optimal_policy

logger = logging.getLogger(__name__)

POLICIES: tuple[str, ...] = ("stand", "hit", "optimal")

_LOW_CARD: int = min(CARD_VALUES)
_HIGH_CARD: int = max(CARD_VALUES)

# ─── Result type ──────────────────────────────────────────────────────────────


@dataclass
class SimulationResult:
    """Aggregate counts from a Monte Carlo run for one table cell.

    Attributes:
        hand_score:    Starting player total.
        dealer_upcard: Dealer's visible card.
        policy:        One of :data:`POLICIES`.
        n_hands:       Number of hands simulated.
        n_wins:        Hands the player won.
        n_losses:      Hands the player lost.
        n_pushes:      Hands that tied.
        confidence:    Two-sided confidence level for the intervals below.
        win_ci:        (low, high) interval for the win rate.
        loss_ci:       (low, high) interval for the loss rate.
    """

    hand_score: int
    dealer_upcard: int
    policy: str
    n_hands: int
    n_wins: int
    n_losses: int
    n_pushes: int
    confidence: float
    win_ci: tuple[float, float]
    loss_ci: tuple[float, float]

    @property
    def win_rate(self) -> float:
        return self.n_wins / self.n_hands

    @property
    def loss_rate(self) -> float:
        return self.n_losses / self.n_hands

    @property
    def push_rate(self) -> float:
        return self.n_pushes / self.n_hands

    def __str__(self) -> str:
        return (
            f"Hands: {self.n_hands:,} | Policy: {self.policy} | "
            f"Win: {self.win_rate:.4f} [{self.win_ci[0]:.4f}, {self.win_ci[1]:.4f}] | "
            f"Loss: {self.loss_rate:.4f} [{self.loss_ci[0]:.4f}, {self.loss_ci[1]:.4f}] | "
            f"Push: {self.push_rate:.4f}"
        )


# ─── Interval helper ──────────────────────────────────────────────────────────


def proportion_ci(successes: int, n: int, confidence: float = 0.99) -> tuple[float, float]:
    """Normal-approximation interval for a proportion, clipped to [0, 1].

    A continuity correction of 0.5/n keeps the interval non-degenerate when
    the observed rate is exactly 0 or 1.

    Args:
        successes:  Observed count.
        n:          Number of trials (must be positive).
        confidence: Two-sided confidence level in (0, 1).

    Returns:
        (low, high) bounds.
    """
    if n <= 0:
        raise ValueError(f"n must be positive, got {n}.")
    p = successes / n
    z = float(stats.norm.ppf((1.0 + confidence) / 2.0))
    margin = z * math.sqrt(p * (1.0 - p) / n) + 0.5 / n
    return max(0.0, p - margin), min(1.0, p + margin)


# ─── Hand playout ─────────────────────────────────────────────────────────────


def _draw(rng: np.random.Generator) -> int:
    return int(rng.integers(_LOW_CARD, _HIGH_CARD + 1))


def _play_dealer(dealer_upcard: int, rng: np.random.Generator) -> int:
    """Draw the hole card and hit below 17; return the dealer's final total."""
    total = dealer_upcard + _draw(rng)
    while total < DEALER_STAND_TOTAL:
        total += _draw(rng)
    return total


def _play_player(
    total: int,
    policy: str,
    table: dict[int, Action],
    rng: np.random.Generator,
) -> int:
    """Apply *policy* from *total*; return the player's final total."""
    if policy == "stand":
        return total
    if policy == "hit":
        total += _draw(rng)
    while not is_bust(total) and table.get(total, Action.STAND) == Action.HIT:
        total += _draw(rng)
    return total


def _settle(player_total: int, dealer_total: int) -> int:
    """+1 player win, -1 player loss, 0 push.  A busted player always loses."""
    if is_bust(player_total):
        return -1
    if is_bust(dealer_total) or player_total > dealer_total:
        return 1
    if dealer_total > player_total:
        return -1
    return 0


# ─── Core simulation loop ─────────────────────────────────────────────────────


def simulate_cell(
    hand_score: int,
    dealer_upcard: int,
    policy: str = "optimal",
    n_hands: int = 100_000,
    seed: int | None = 42,
    confidence: float = 0.99,
) -> SimulationResult:
    """Simulate *n_hands* from one (player total, dealer upcard) cell.

    Args:
        hand_score:    Starting player total.
        dealer_upcard: Dealer's visible card value (1–10).
        policy:        ``"stand"``, ``"hit"`` or ``"optimal"``.
        n_hands:       Number of hands to simulate.
        seed:          Seed for ``np.random.default_rng``; None for a
                       non-deterministic run.
        confidence:    Confidence level for the reported intervals.

    Returns:
        SimulationResult with counts and intervals.

    Raises:
        ValueError: On an unknown policy, an invalid upcard, or n_hands < 1.
    """
    if policy not in POLICIES:
        raise ValueError(f"Unknown policy {policy!r}; expected one of {POLICIES}.")
    if not is_valid_upcard(dealer_upcard):
        raise ValueError(f"Dealer upcard must be in 1..10, got {dealer_upcard}.")
    if n_hands < 1:
        raise ValueError(f"n_hands must be positive, got {n_hands}.")

    rng = np.random.default_rng(seed)
    table = optimal_policy(dealer_upcard)
    logger.debug(
        "Simulating %d hands: total=%d upcard=%d policy=%s",
        n_hands,
        hand_score,
        dealer_upcard,
        policy,
    )

    n_wins = n_losses = n_pushes = 0
    for _ in range(n_hands):
        player_total = _play_player(hand_score, policy, table, rng)
        # The dealer only plays out when the player is still live.
        dealer_total = 0 if is_bust(player_total) else _play_dealer(dealer_upcard, rng)
        outcome = _settle(player_total, dealer_total)
        if outcome > 0:
            n_wins += 1
        elif outcome < 0:
            n_losses += 1
        else:
            n_pushes += 1

    return SimulationResult(
        hand_score=hand_score,
        dealer_upcard=dealer_upcard,
        policy=policy,
        n_hands=n_hands,
        n_wins=n_wins,
        n_losses=n_losses,
        n_pushes=n_pushes,
        confidence=confidence,
        win_ci=proportion_ci(n_wins, n_hands, confidence),
        loss_ci=proportion_ci(n_losses, n_hands, confidence),
    )


# ─── Exact comparison ─────────────────────────────────────────────────────────

_POLICY_FIELDS: dict[str, tuple[str, str]] = {
    "stand": ("stand_win", "stand_loss"),
    "hit": ("hit_win", "hit_loss"),
    "optimal": ("opt_win", "opt_loss"),
}


def exact_rates(result: SimulationResult, options: Options | None = None) -> tuple[float, float]:
    """Return the exact (win, loss) the solver predicts for *result*'s cell and policy."""
    if options is None:
        options = compute_options(result.hand_score, result.dealer_upcard)
    win_field, loss_field = _POLICY_FIELDS[result.policy]
    return getattr(options, win_field), getattr(options, loss_field)


def compare_to_exact(result: SimulationResult, options: Options | None = None) -> bool:
    """True if the exact win and loss rates both fall inside the simulated intervals."""
    win, loss = exact_rates(result, options)
    in_win = result.win_ci[0] <= win <= result.win_ci[1]
    in_loss = result.loss_ci[0] <= loss <= result.loss_ci[1]
    if not (in_win and in_loss):
        logger.warning(
            "Exact odds outside simulated interval for total=%d upcard=%d policy=%s "
            "(exact win=%.4f loss=%.4f; %s)",
            result.hand_score,
            result.dealer_upcard,
            result.policy,
            win,
            loss,
            result,
        )
    return in_win and in_loss


def run_validation(
    cells: list[tuple[int, int]] | None = None,
    n_hands: int = 50_000,
    seed: int = 42,
) -> dict[tuple[int, int, str], bool]:
    """Simulate every policy on a handful of cells and compare with the solver.

    Args:
        cells:   (hand_score, dealer_upcard) pairs; a spread of representative
                 cells when None.
        n_hands: Hands per (cell, policy).
        seed:    Base seed; each run gets a distinct offset.

    Returns:
        {(hand_score, dealer_upcard, policy): agrees_with_exact}
    """
    if cells is None:
        cells = [(8, 6), (12, 2), (16, 10), (18, 1), (21, 7)]

    agreement: dict[tuple[int, int, str], bool] = {}
    for i, (hs, du) in enumerate(cells):
        options = compute_options(hs, du)
        for j, policy in enumerate(POLICIES):
            result = simulate_cell(
                hs, du, policy, n_hands=n_hands, seed=seed + 10 * i + j
            )
            agreement[(hs, du, policy)] = compare_to_exact(result, options)
    return agreement


# ─── __main__ ─────────────────────────────────────────────────────────────────

if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

    print("Monte Carlo cross-check — 50,000 hands per (cell, policy)\n")
    results = run_validation()
    for (hs, du, policy), ok in results.items():
        print(f"  total={hs:>2} upcard={du:>2} {policy:<8} {'OK' if ok else 'MISMATCH'}")
    n_ok = sum(results.values())
    print(f"\n{n_ok}/{len(results)} runs agree with the exact solver")
