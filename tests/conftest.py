"""Pytest configuration and fixtures."""

import pytest
from hypothesis import settings

from elastic_amm.ledger import ReserveLedger
from tests.helpers import INITIAL_BALANCE, LP1, LP2, TRADER, PairSimulator

settings.register_profile("elastic_amm", deadline=None)
settings.load_profile("elastic_amm")


@pytest.fixture
def empty_ledger() -> ReserveLedger:
    """A ledger before the first contribution."""
    return ReserveLedger()


@pytest.fixture
def ledger_10_50() -> ReserveLedger:
    """Ledger seeded with 10 quote and 50 base (omega = 0.2)."""
    return ReserveLedger(quote_reserve=10, base_reserve=50, invariant_last=500)


@pytest.fixture
def drifted_ledger() -> ReserveLedger:
    """Reserves of 10 and 50 whose product fell below the recorded 10000."""
    return ReserveLedger(quote_reserve=10, base_reserve=50, invariant_last=10_000)


@pytest.fixture
def pair() -> PairSimulator:
    """Pair simulator with funded providers and trader, no liquidity yet."""
    simulator = PairSimulator()
    for account in (LP1, LP2, TRADER):
        simulator.fund(account, quote=INITIAL_BALANCE, base=INITIAL_BALANCE)
    return simulator


@pytest.fixture
def seeded_pair(pair: PairSimulator) -> PairSimulator:
    """Pair where LP1 contributed 10 quote and 50 base (50 claims)."""
    pair.add_liquidity(LP1, 10, 50, 1, 1)
    return pair
