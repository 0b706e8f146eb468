"""
Exact win/loss/push odds for hit-or-stand blackjack via backward induction.

Infinite-deck card model (values 1–10, uniform), ace always counted as 1,
dealer draws below 17 and stands on 17–21.

Two memoized recursions drive everything:

    _dealer_outcome(s, pt)  — P(dealer busts / finishes below, on or above
                              pt) from dealer running total s.
    _optimal(s)             — player's (win, loss) under optimal stand/hit
                              play from total s, plus the chosen action.

``_optimal`` is keyed by player total only, but its stand branch depends on
the dealer upcard.  Both memo tables therefore live on a ``_QueryContext``
that binds one upcard and is thrown away after each top-level query.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import NamedTuple

from src.engine.cards import (
    BUST_LIMIT,
    CARD_VALUES,
    DEALER_FINAL_TOTALS,
    DEALER_STAND_TOTAL,
    DEALER_UPCARDS,
    NUM_CARD_VALUES,
    PLAYER_TOTALS,
    card_label,
    is_bust,
    is_valid_upcard,
)

# ─── Actions ──────────────────────────────────────────────────────────────────


class Action(Enum):
    """Player decision taken inside the optimal-play recursion."""

    HIT = "HIT"
    STAND = "STAND"


class BestAction(Enum):
    """Label comparing standing now against a forced one-card hit.

    ``BUST`` is part of the output vocabulary of the results table but is
    never produced by :func:`compute_options`.
    """

    STAND = "stand"
    HIT = "hit"
    EQUAL = "equal"
    BUST = "bust"


# ─── Value types ──────────────────────────────────────────────────────────────


class DealerOdds(NamedTuple):
    """Dealer terminal outcome probabilities relative to a player total.

    Attributes:
        bust:    P(dealer goes over 21).
        less:    P(dealer stands on a total below the player total).
        equal:   P(dealer stands on exactly the player total).
        greater: P(dealer stands above the player total).  Carried through
                 the recursion rather than taken as 1 minus the rest, so it is
                 exactly 0.0 when the dealer cannot beat the player total.
    """

    bust: float
    less: float
    equal: float
    greater: float


class WinLoss(NamedTuple):
    """Player win and loss probabilities; the remainder is a push."""

    win: float
    loss: float

    @property
    def push(self) -> float:
        return max(0.0, 1.0 - self.win - self.loss)


_BUSTED_DEALER = DealerOdds(1.0, 0.0, 0.0, 0.0)
_BUSTED_PLAYER = WinLoss(0.0, 1.0)


@dataclass(frozen=True)
class Options:
    """Odds for one (player total, dealer upcard) cell.

    Attributes:
        stand_win, stand_loss: Standing immediately.
        hit_win, hit_loss:     Taking exactly one card, then playing optimally.
        opt_win, opt_loss:     Optimal play from the current total.
        best_action:           Stand vs forced-hit comparison on win
                               probability, or ``None`` for an invalid query.
    """

    stand_win: float = 0.0
    stand_loss: float = 0.0
    hit_win: float = 0.0
    hit_loss: float = 0.0
    opt_win: float = 0.0
    opt_loss: float = 0.0
    best_action: BestAction | None = None

    @classmethod
    def invalid(cls) -> Options:
        """All-zero sentinel returned for an out-of-range dealer upcard."""
        return cls()

    @property
    def is_valid(self) -> bool:
        return self.best_action is not None

    @property
    def stand_push(self) -> float:
        return WinLoss(self.stand_win, self.stand_loss).push

    @property
    def hit_push(self) -> float:
        return WinLoss(self.hit_win, self.hit_loss).push

    @property
    def opt_push(self) -> float:
        return WinLoss(self.opt_win, self.opt_loss).push


@dataclass
class DealerDistribution:
    """Dealer final-total distribution for one upcard.

    Attributes:
        upcard:     The dealer's visible card (1–10).
        final_dist: {total: prob} for the standing totals 17–21.
        bust_prob:  P(dealer busts).
    """

    upcard: int
    final_dist: dict[int, float]
    bust_prob: float


@dataclass
class _QueryContext:
    """Memo tables for a single dealer upcard.

    ``player_memo`` is only correct for ``upcard``; never share a context
    between upcards.
    """

    upcard: int
    dealer_memo: dict[tuple[int, int], DealerOdds] = field(default_factory=dict)
    player_memo: dict[int, tuple[WinLoss, Action]] = field(default_factory=dict)


def _new_context(dealer_upcard: int) -> _QueryContext:
    if not is_valid_upcard(dealer_upcard):
        raise ValueError(f"Dealer upcard must be in 1..10, got {dealer_upcard}.")
    return _QueryContext(upcard=dealer_upcard)


# ─── Dealer outcome engine ────────────────────────────────────────────────────


def _dealer_outcome(
    s: int,
    pt: int,
    memo: dict[tuple[int, int], DealerOdds],
) -> DealerOdds:
    """Return the dealer's (bust, less, equal, greater) odds from running total *s*.

    Args:
        s:    Dealer running total (an upcard + hole-card sum or later).
        pt:   Player total the dealer's final total is compared against.
        memo: Table keyed on ``(s, pt)``, filled lazily.

    Returns:
        DealerOdds for the dealer finishing from *s*.
    """
    if is_bust(s):
        return _BUSTED_DEALER

    key = (s, pt)
    if key in memo:
        return memo[key]

    if s >= DEALER_STAND_TOTAL:
        result = DealerOdds(
            0.0,
            1.0 if s < pt else 0.0,
            1.0 if s == pt else 0.0,
            1.0 if s > pt else 0.0,
        )
        memo[key] = result
        return result

    acc_bust = acc_less = acc_equal = acc_greater = 0.0
    for v in CARD_VALUES:
        ns = s + v
        if is_bust(ns):
            acc_bust += 1.0
            continue
        sub = _dealer_outcome(ns, pt, memo)
        acc_bust += sub.bust
        acc_less += sub.less
        acc_equal += sub.equal
        acc_greater += sub.greater

    result = DealerOdds(
        acc_bust / NUM_CARD_VALUES,
        acc_less / NUM_CARD_VALUES,
        acc_equal / NUM_CARD_VALUES,
        acc_greater / NUM_CARD_VALUES,
    )
    memo[key] = result
    return result


# ─── Stand evaluator ──────────────────────────────────────────────────────────


def _stand_probs(s: int, ctx: _QueryContext) -> WinLoss:
    """Player (win, loss) for standing on *s* against ``ctx.upcard``.

    Enumerates the ten equally likely hole cards and settles against the
    dealer outcome from each real starting total.  Equal totals are pushes.
    """
    if is_bust(s):
        return _BUSTED_PLAYER

    win = loss = 0.0
    for hole in CARD_VALUES:
        start = ctx.upcard + hole
        if is_bust(start):
            # Unreachable with upcards 1–10, kept so the sum stays well-defined.
            win += 1.0
            continue
        odds = _dealer_outcome(start, s, ctx.dealer_memo)
        win += odds.bust + odds.less
        loss += odds.greater

    return WinLoss(win / NUM_CARD_VALUES, loss / NUM_CARD_VALUES)


# ─── Optimal policy evaluator ─────────────────────────────────────────────────


def _hit_probs(s: int, ctx: _QueryContext) -> WinLoss:
    """Player (win, loss) for drawing one card from *s*, then playing optimally."""
    win = loss = 0.0
    for v in CARD_VALUES:
        wl, _ = _optimal(s + v, ctx)
        win += wl.win
        loss += wl.loss
    return WinLoss(win / NUM_CARD_VALUES, loss / NUM_CARD_VALUES)


def _optimal(s: int, ctx: _QueryContext) -> tuple[WinLoss, Action]:
    """Return the optimal (WinLoss, Action) for a player on total *s*.

    Compares standing now with hitting (and continuing optimally) on win
    probability.  Ties go to STAND.  A busted total returns (0, 1) with
    STAND since no choice remains.

    Recursion always moves to a strictly larger total, so it terminates once
    every branch passes 21.
    """
    if is_bust(s):
        return _BUSTED_PLAYER, Action.STAND

    if s in ctx.player_memo:
        return ctx.player_memo[s]

    stand = _stand_probs(s, ctx)
    hit = _hit_probs(s, ctx)

    if stand.win >= hit.win:
        result = (stand, Action.STAND)
    else:
        result = (hit, Action.HIT)

    ctx.player_memo[s] = result
    return result


# ─── Public API ───────────────────────────────────────────────────────────────


def dealer_outcome(dealer_total: int, player_total: int) -> DealerOdds:
    """Dealer (bust, less, equal, greater) odds from *dealer_total* against *player_total*.

    Uses a fresh memo table for the call.

    Examples:
        >>> dealer_outcome(16, 19)
        DealerOdds(bust=0.5, less=0.2, equal=0.1, greater=0.2)
    """
    return _dealer_outcome(dealer_total, player_total, {})


def stand_probs(hand_score: int, dealer_upcard: int) -> WinLoss:
    """Player (win, loss) for standing on *hand_score* against *dealer_upcard*.

    Raises:
        ValueError: If *dealer_upcard* is outside 1..10.
    """
    return _stand_probs(hand_score, _new_context(dealer_upcard))


def optimal_action(hand_score: int, dealer_upcard: int) -> tuple[Action, WinLoss]:
    """Return the action chosen by optimal play and its (win, loss).

    This is the decision inside the backward induction (ties go to STAND),
    which can differ from :attr:`Options.best_action`.

    Raises:
        ValueError: If *dealer_upcard* is outside 1..10.
    """
    wl, action = _optimal(hand_score, _new_context(dealer_upcard))
    return action, wl


def optimal_policy(dealer_upcard: int, min_total: int = 2) -> dict[int, Action]:
    """Return the optimal-play decision for every live total against one upcard.

    All totals share a single context, which is valid because they share the
    upcard.

    Args:
        dealer_upcard: Dealer's visible card value (1–10).
        min_total:     Lowest player total to include.

    Returns:
        Dict mapping player total (``min_total``–21) to Action.

    Raises:
        ValueError: If *dealer_upcard* is outside 1..10.
    """
    ctx = _new_context(dealer_upcard)
    return {s: _optimal(s, ctx)[1] for s in range(min_total, BUST_LIMIT + 1)}


def compute_options(hand_score: int, dealer_upcard: int) -> Options:
    """Compute stand, one-card-hit and optimal odds for one table cell.

    Every call builds its own memo tables, so repeated calls with the same
    arguments return identical results.

    The best-action label compares standing against the forced one-card hit
    directly:

        - ``STAND`` if stand_win > hit_win
        - ``HIT``   if hit_win > stand_win
        - ``EQUAL`` otherwise

    Args:
        hand_score:    Player total (4–31; totals over 21 are already bust).
        dealer_upcard: Dealer's visible card value (1–10, ace = 1).

    Returns:
        Options for the cell, or :meth:`Options.invalid` (all zeros,
        ``best_action=None``) when *dealer_upcard* is out of range.
    """
    if not is_valid_upcard(dealer_upcard):
        return Options.invalid()

    ctx = _QueryContext(upcard=dealer_upcard)

    opt, _ = _optimal(hand_score, ctx)
    stand = _stand_probs(hand_score, ctx)
    hit = _hit_probs(hand_score, ctx)

    if stand.win > hit.win:
        best = BestAction.STAND
    elif hit.win > stand.win:
        best = BestAction.HIT
    else:
        best = BestAction.EQUAL

    return Options(
        stand_win=stand.win,
        stand_loss=stand.loss,
        hit_win=hit.win,
        hit_loss=hit.loss,
        opt_win=opt.win,
        opt_loss=opt.loss,
        best_action=best,
    )


def dealer_final_distribution(dealer_upcard: int) -> DealerDistribution:
    """Distribution of the dealer's final total for a given upcard.

    Reuses the dealer outcome engine: P(final == t) is the ``equal`` odds
    against target t, averaged over the ten hole cards.

    Raises:
        ValueError: If *dealer_upcard* is outside 1..10.
    """
    ctx = _new_context(dealer_upcard)
    final_dist: dict[int, float] = {t: 0.0 for t in DEALER_FINAL_TOTALS}
    bust_prob = 0.0

    for hole in CARD_VALUES:
        start = dealer_upcard + hole
        for t in DEALER_FINAL_TOTALS:
            final_dist[t] += _dealer_outcome(start, t, ctx.dealer_memo).equal
        # Bust odds do not depend on the comparison target.
        bust_prob += _dealer_outcome(start, BUST_LIMIT, ctx.dealer_memo).bust

    return DealerDistribution(
        upcard=dealer_upcard,
        final_dist={t: p / NUM_CARD_VALUES for t, p in final_dist.items()},
        bust_prob=bust_prob / NUM_CARD_VALUES,
    )


def solve(
    hand_totals: list[int] | None = None,
    upcards: list[int] | None = None,
) -> dict[tuple[int, int], Options]:
    """Compute Options for every (player total, dealer upcard) pair.

    Args:
        hand_totals: Player totals to sweep (default 4–21).
        upcards:     Dealer upcards to sweep (default 1–10).

    Returns:
        Dict mapping ``(hand_score, dealer_upcard)`` to Options, in sweep
        order (player total outer, upcard inner).
    """
    hand_totals = PLAYER_TOTALS if hand_totals is None else hand_totals
    upcards = DEALER_UPCARDS if upcards is None else upcards
    return {(hs, du): compute_options(hs, du) for hs in hand_totals for du in upcards}


def build_strategy_chart(
    table: dict[tuple[int, int], Options] | None = None,
) -> dict[tuple[int, int], BestAction | None]:
    """Return the best-action label for every cell of *table* (default: solve())."""
    table = solve() if table is None else table
    return {k: v.best_action for k, v in table.items()}


# ─── Strategy chart display ───────────────────────────────────────────────────

_CHART_CELLS: dict[BestAction, str] = {
    BestAction.STAND: "S",
    BestAction.HIT: "H",
    BestAction.EQUAL: "=",
    BestAction.BUST: "X",
}


def print_strategy_chart(
    chart: dict[tuple[int, int], BestAction | None],
    label: str,
) -> None:
    """Print the best-action chart as a terminal grid.

    Rows: player totals 4–21.  Cols: dealer upcards A–10.
    Cells: 'S' (stand), 'H' (hit), '=' (equal), '-' if absent.
    """
    col_w = 4
    header = "".join(f"{card_label(u):>{col_w}}" for u in DEALER_UPCARDS)
    divider = "─" * (8 + col_w * len(DEALER_UPCARDS))

    print(f"\nStrategy Chart: {label}")
    print(f"{'':8}{header}")
    print(divider)

    for total in PLAYER_TOTALS:
        cells = ""
        for upcard in DEALER_UPCARDS:
            action = chart.get((total, upcard))
            cell = _CHART_CELLS.get(action, "-")
            cells += f"{cell:>{col_w}}"
        print(f"{total:<8}{cells}")


# ─── __main__ ─────────────────────────────────────────────────────────────────

if __name__ == "__main__":
    import time

    print("Blackjack odds solver (infinite deck, ace = 1, dealer stands on 17)")

    t0 = time.time()
    table = solve()
    elapsed = time.time() - t0
    print(f"Solved {len(table)} cells in {elapsed:.3f}s")

    print_strategy_chart(build_strategy_chart(table), "stand vs one-card hit")

    print(f"\n{'─' * 48}")
    print(f"{'Upcard':<8}{'Bust':>8}" + "".join(f"{t:>8}" for t in DEALER_FINAL_TOTALS))
    for upcard in DEALER_UPCARDS:
        dist = dealer_final_distribution(upcard)
        row = "".join(f"{dist.final_dist[t]:>8.4f}" for t in DEALER_FINAL_TOTALS)
        print(f"{card_label(upcard):<8}{dist.bust_prob:>8.4f}{row}")
