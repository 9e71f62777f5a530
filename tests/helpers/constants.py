"""Shared constants for tests.

Usage:
    from tests.helpers import LP1, DEADLINE
    # or
    from tests.helpers.constants import LP1, DEADLINE
"""

# =============================================================================
# Accounts
# =============================================================================

LP1 = "lp1"
LP2 = "lp2"
LP3 = "lp3"
TRADER = "trader"

# =============================================================================
# Time
# =============================================================================

# Fixed clock reading used by the simulator
NOW = 1_700_000_000.0

# Expiration 50 minutes after NOW
DEADLINE = NOW + 60 * 50

# Expiration 50 minutes before NOW
EXPIRED = NOW - 60 * 50

# =============================================================================
# Quantities
# =============================================================================

# Initial balance handed to each account in scenario tests
INITIAL_BALANCE = 1_000_000

# Quantities of the pool used in the large-value examples
POOL_5E26 = 5 * 10**26
DECAY_2E23 = 2 * 10**23


__all__ = [
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
]
