"""
Tests for src/analysis/simulator.py

Covers:
    - SimulationResult rates and formatting
    - proportion_ci(): bounds, clipping, argument checks
    - simulate_cell(): reproducibility, counts, deterministic cells, errors
    - exact_rates() / compare_to_exact(): policy → Options field mapping
    - Agreement with the exact solver within sampling error
"""

from __future__ import annotations

import logging

import numpy as np
import pytest

from src.analysis.simulator import (
    POLICIES,
    SimulationResult,
    _play_dealer,
    _settle,
    compare_to_exact,
    exact_rates,
    proportion_ci,
    run_validation,
    simulate_cell,
)
from src.solvers.exact_odds import compute_options


def make_result(**overrides) -> SimulationResult:
    fields = dict(
        hand_score=16,
        dealer_upcard=10,
        policy="stand",
        n_hands=1000,
        n_wins=200,
        n_losses=750,
        n_pushes=50,
        confidence=0.99,
        win_ci=(0.18, 0.24),
        loss_ci=(0.72, 0.80),
    )
    fields.update(overrides)
    return SimulationResult(**fields)


# ─── TestSimulationResult ─────────────────────────────────────────────────────


class TestSimulationResult:
    def test_rates(self):
        r = make_result()
        assert r.win_rate == pytest.approx(0.2)
        assert r.loss_rate == pytest.approx(0.75)
        assert r.push_rate == pytest.approx(0.05)

    def test_str(self):
        text = str(make_result())
        assert "Hands: 1,000" in text
        assert "Policy: stand" in text
        assert "Win: 0.2000" in text


# ─── TestProportionCi ─────────────────────────────────────────────────────────


class TestProportionCi:
    def test_contains_point_estimate(self):
        lo, hi = proportion_ci(300, 1000)
        assert lo < 0.3 < hi

    def test_wider_at_higher_confidence(self):
        lo90, hi90 = proportion_ci(300, 1000, confidence=0.90)
        lo99, hi99 = proportion_ci(300, 1000, confidence=0.99)
        assert lo99 < lo90 and hi99 > hi90

    def test_clipped(self):
        assert proportion_ci(0, 100)[0] == 0.0
        assert proportion_ci(100, 100)[1] == 1.0

    def test_non_degenerate_at_extremes(self):
        lo, hi = proportion_ci(0, 100)
        assert hi > 0.0

    def test_rejects_empty_sample(self):
        with pytest.raises(ValueError):
            proportion_ci(0, 0)


# ─── Game helpers ─────────────────────────────────────────────────────────────


class TestHelpers:
    @pytest.mark.parametrize(
        "player,dealer,expected",
        [(22, 18, -1), (22, 25, -1), (18, 25, 1), (19, 18, 1), (17, 20, -1), (18, 18, 0)],
    )
    def test_settle(self, player, dealer, expected):
        assert _settle(player, dealer) == expected

    def test_dealer_final_total_range(self):
        rng = np.random.default_rng(0)
        for upcard in range(1, 11):
            for _ in range(200):
                assert 17 <= _play_dealer(upcard, rng) <= 30


# ─── TestSimulateCell ─────────────────────────────────────────────────────────


class TestSimulateCell:
    def test_counts_add_up(self):
        r = simulate_cell(14, 9, "optimal", n_hands=2000, seed=1)
        assert r.n_wins + r.n_losses + r.n_pushes == r.n_hands == 2000

    def test_reproducible(self):
        a = simulate_cell(12, 4, "hit", n_hands=1000, seed=7)
        b = simulate_cell(12, 4, "hit", n_hands=1000, seed=7)
        assert (a.n_wins, a.n_losses, a.n_pushes) == (b.n_wins, b.n_losses, b.n_pushes)

    def test_different_seeds_differ(self):
        a = simulate_cell(12, 4, "optimal", n_hands=2000, seed=1)
        b = simulate_cell(12, 4, "optimal", n_hands=2000, seed=2)
        assert (a.n_wins, a.n_losses) != (b.n_wins, b.n_losses)

    def test_hit_on_21_always_loses(self):
        r = simulate_cell(21, 6, "hit", n_hands=500, seed=3)
        assert r.n_losses == 500

    def test_busted_start_always_loses(self):
        r = simulate_cell(22, 6, "stand", n_hands=500, seed=3)
        assert r.n_losses == 500

    def test_stand_low_total_never_pushes(self):
        r = simulate_cell(12, 10, "stand", n_hands=2000, seed=5)
        assert r.n_pushes == 0

    def test_ci_brackets_rate(self):
        r = simulate_cell(15, 7, "stand", n_hands=2000, seed=11)
        assert r.win_ci[0] <= r.win_rate <= r.win_ci[1]
        assert r.loss_ci[0] <= r.loss_rate <= r.loss_ci[1]

    def test_unknown_policy(self):
        with pytest.raises(ValueError, match="Unknown policy"):
            simulate_cell(12, 5, "double", n_hands=10)

    @pytest.mark.parametrize("upcard", [0, 11])
    def test_invalid_upcard(self, upcard):
        with pytest.raises(ValueError):
            simulate_cell(12, upcard, n_hands=10)

    def test_no_hands(self):
        with pytest.raises(ValueError):
            simulate_cell(12, 5, n_hands=0)


# ─── Exact comparison ─────────────────────────────────────────────────────────


class TestExactComparison:
    @pytest.mark.parametrize(
        "policy,fields",
        [("stand", ("stand_win", "stand_loss")),
         ("hit", ("hit_win", "hit_loss")),
         ("optimal", ("opt_win", "opt_loss"))],
    )
    def test_exact_rates_field_mapping(self, policy, fields):
        o = compute_options(16, 10)
        win, loss = exact_rates(make_result(policy=policy), o)
        assert (win, loss) == (getattr(o, fields[0]), getattr(o, fields[1]))

    def test_exact_rates_solves_on_demand(self):
        assert exact_rates(make_result()) == exact_rates(make_result(), compute_options(16, 10))

    def test_compare_inside(self):
        # Exact stand win for 16 vs 10 ≈ 0.2142, loss ≈ 0.7858.
        assert compare_to_exact(make_result())

    def test_compare_outside_logs_warning(self, caplog):
        r = make_result(win_ci=(0.30, 0.35))
        with caplog.at_level(logging.WARNING, logger="src.analysis.simulator"):
            assert not compare_to_exact(r)
        assert "outside simulated interval" in caplog.text


class TestAgreementWithSolver:
    @pytest.mark.parametrize("policy", POLICIES)
    def test_rates_close_to_exact(self, policy):
        r = simulate_cell(13, 3, policy, n_hands=20_000, seed=42)
        win, loss = exact_rates(r)
        # 20k hands: one standard error is under 0.004.
        assert abs(r.win_rate - win) < 0.02
        assert abs(r.loss_rate - loss) < 0.02

    def test_run_validation_keys(self):
        out = run_validation(cells=[(18, 1)], n_hands=500, seed=0)
        assert set(out) == {(18, 1, p) for p in POLICIES}
        assert all(isinstance(v, bool) for v in out.values())
