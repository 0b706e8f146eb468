"""
Shared pytest fixtures for the blackjack odds solver tests.

Solving the full 18×10 table is cheap but not free, so it is shared per
session.  Options are immutable, so sharing cannot leak state between tests.
"""

from __future__ import annotations

import pytest

from src.solvers.exact_odds import Options, solve


@pytest.fixture(scope="session")
def table() -> dict[tuple[int, int], Options]:
    """The full (player total 4–21) × (dealer upcard A–10) Options table."""
    return solve()
