"""Protocol constants for the elastic AMM core.

Centralizes fixed-point scaling and fee parameters.
"""

# Fixed-point scale factor (1e18) used for every ratio computation
WAD = 10**18

# Fees are expressed in basis points of the input quantity
BASIS_POINTS = 10_000

# Default liquidity fee taken from swap inputs (30 bps = 0.3%)
DEFAULT_LIQUIDITY_FEE_BPS = 30

# Largest quantity a ledger field or token amount may hold
UINT256_MAX = 2**256 - 1
