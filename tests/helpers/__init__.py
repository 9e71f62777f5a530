"""Test helpers module for shared test utilities.

- constants: accounts, clock readings and common quantities
- pair: in-memory balances, claim token and a pair simulator
"""

from tests.helpers.constants import (
    DEADLINE,
    DECAY_2E23,
    EXPIRED,
    INITIAL_BALANCE,
    LP1,
    LP2,
    LP3,
    NOW,
    POOL_5E26,
    TRADER,
)
from tests.helpers.pair import InMemoryClaimToken, PairBalances, PairSimulator

__all__ = [
    # Constants
    "LP1",
    "LP2",
    "LP3",
    "TRADER",
    "NOW",
    "DEADLINE",
    "EXPIRED",
    "INITIAL_BALANCE",
    "POOL_5E26",
    "DECAY_2E23",
    # Pair
    "PairBalances",
    "InMemoryClaimToken",
    "PairSimulator",
]
