"""Tests for the text report (src/analysis/strategy_report.py).

Tests verify that each print function produces the expected headers and one
line per row, and that the policy-gain summary meets basic invariants.
"""

from __future__ import annotations

import pytest

from src.analysis.strategy_report import (
    policy_gain,
    print_dealer_distribution,
    print_options_table,
    print_policy_gain,
)

# ─── print_options_table ──────────────────────────────────────────────────────


class TestPrintOptionsTable:
    def test_header(self, capsys: pytest.CaptureFixture) -> None:
        print_options_table(1)
        out = capsys.readouterr().out
        assert "Player odds vs dealer upcard A" in out

    def test_one_row_per_total(self, capsys: pytest.CaptureFixture) -> None:
        print_options_table(6)
        lines = capsys.readouterr().out.splitlines()
        rows = [ln for ln in lines if ln.split() and ln.split()[0].isdigit()]
        assert [int(r.split()[0]) for r in rows] == list(range(4, 22))

    def test_21_row_stands(self, capsys: pytest.CaptureFixture) -> None:
        print_options_table(10)
        lines = capsys.readouterr().out.splitlines()
        row = next(ln for ln in lines if ln.split() and ln.split()[0] == "21")
        assert row.split()[-2:] == ["stand", "stand"]

    def test_invalid_upcard(self) -> None:
        with pytest.raises(ValueError):
            print_options_table(0)


# ─── print_dealer_distribution ────────────────────────────────────────────────


class TestPrintDealerDistribution:
    def test_output(self, capsys: pytest.CaptureFixture) -> None:
        print_dealer_distribution()
        out = capsys.readouterr().out
        assert "Dealer final-total distribution" in out
        for label in ("A", "6", "10"):
            assert any(ln.split()[:1] == [label] for ln in out.splitlines() if ln.strip())

    def test_six_bust_value(self, capsys: pytest.CaptureFixture) -> None:
        print_dealer_distribution()
        lines = capsys.readouterr().out.splitlines()
        row = next(ln for ln in lines if ln.split()[:1] == ["6"])
        assert row.split()[1] == "0.3136"


# ─── policy_gain ──────────────────────────────────────────────────────────────


class TestPolicyGain:
    def test_keys(self, table) -> None:
        assert sorted(policy_gain(table)) == list(range(1, 11))

    def test_non_negative(self, table) -> None:
        assert all(g >= -1e-12 for g in policy_gain(table).values())

    def test_positive_somewhere(self, table) -> None:
        # Totals 4–11 always gain by hitting.
        assert all(g > 0.0 for g in policy_gain(table).values())

    def test_print(self, table, capsys: pytest.CaptureFixture) -> None:
        print_policy_gain(table)
        out = capsys.readouterr().out
        assert "Optimal play vs always-stand" in out
        assert out.count("+") >= 10
