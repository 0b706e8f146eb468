"""
Tests for src/engine/cards.py — card model constants and helpers.
"""

from __future__ import annotations

import pytest

from src.engine.cards import (
    BUST_LIMIT,
    CARD_PROB,
    CARD_VALUES,
    DEALER_FINAL_TOTALS,
    DEALER_STAND_TOTAL,
    DEALER_UPCARDS,
    MAX_TOTAL,
    NUM_CARD_VALUES,
    PLAYER_TOTALS,
    card_label,
    is_bust,
    is_valid_upcard,
    upcard_labels,
)


class TestConstants:
    def test_card_values(self):
        assert CARD_VALUES == (1, 2, 3, 4, 5, 6, 7, 8, 9, 10)

    def test_num_card_values(self):
        assert NUM_CARD_VALUES == 10

    def test_card_prob(self):
        assert abs(CARD_PROB - 0.1) < 1e-12

    def test_probabilities_sum_to_one(self):
        assert abs(CARD_PROB * NUM_CARD_VALUES - 1.0) < 1e-12

    def test_thresholds(self):
        assert BUST_LIMIT == 21
        assert DEALER_STAND_TOTAL == 17

    def test_max_total(self):
        assert MAX_TOTAL == 31

    def test_player_totals_range(self):
        assert PLAYER_TOTALS[0] == 4
        assert PLAYER_TOTALS[-1] == 21
        assert len(PLAYER_TOTALS) == 18

    def test_dealer_upcards_range(self):
        assert DEALER_UPCARDS == list(range(1, 11))

    def test_dealer_final_totals(self):
        assert DEALER_FINAL_TOTALS == [17, 18, 19, 20, 21]


class TestIsBust:
    @pytest.mark.parametrize("total", [0, 4, 17, 21])
    def test_not_bust(self, total):
        assert not is_bust(total)

    @pytest.mark.parametrize("total", [22, 26, 31])
    def test_bust(self, total):
        assert is_bust(total)


class TestIsValidUpcard:
    @pytest.mark.parametrize("upcard", [1, 5, 10])
    def test_valid(self, upcard):
        assert is_valid_upcard(upcard)

    @pytest.mark.parametrize("upcard", [-1, 0, 11, 12])
    def test_invalid(self, upcard):
        assert not is_valid_upcard(upcard)


class TestLabels:
    def test_ace_label(self):
        assert card_label(1) == "A"

    def test_numeric_labels(self):
        assert card_label(2) == "2"
        assert card_label(10) == "10"

    def test_upcard_labels(self):
        assert upcard_labels() == ["A", "2", "3", "4", "5", "6", "7", "8", "9", "10"]
