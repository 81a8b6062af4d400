"""
Shared pytest fixtures for Kuhn poker solver tests.

Provides a convenience wrapper around str_to_history for building known
histories, and module-scoped trained results so the slow solves run once.
"""

from __future__ import annotations

import pytest

from kuhn_cfr.engine.cards import History, str_to_history
from kuhn_cfr.solvers.cfr import CfrResult, solve


def hist(s: str) -> History:
    """Build a history tuple from a compact action-code string.

    Examples:
        >>> hist('cb')
        (<Action.CHECK: 0>, <Action.BET: 1>)
        >>> hist('')
        ()
    """
    return str_to_history(s)


@pytest.fixture
def h():
    """Expose the hist() helper as a fixture for convenience."""
    return hist


@pytest.fixture(scope="session")
def cfr_result() -> CfrResult:
    """Vanilla CFR trained long enough to sit near equilibrium."""
    return solve(n_iterations=30_000, method="cfr", seed=42)


@pytest.fixture(scope="session")
def mccfr_result() -> CfrResult:
    """Outcome-sampling MCCFR with the default exploration rate."""
    return solve(n_iterations=5_000, method="mccfr", seed=42)


@pytest.fixture(scope="session")
def mccfr_converged() -> CfrResult:
    """Long MCCFR run for equilibrium checks (slower than the vanilla CFR fixture)."""
    return solve(n_iterations=100_000, method="mccfr", seed=1)


@pytest.fixture(scope="session")
def short_result() -> CfrResult:
    """A quick CFR run for tests that only need the result shape."""
    return solve(n_iterations=500, method="cfr", seed=7)
