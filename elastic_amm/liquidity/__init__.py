"""Liquidity entry and redemption."""

from elastic_amm.liquidity.issuance import (
    calculate_liquidity_token_qty_for_double_asset_entry,
    calculate_liquidity_token_qty_for_single_asset_entry,
    calculate_qty,
    compute_add_base_only_liquidity,
    compute_add_liquidity,
    compute_add_quote_only_liquidity,
)
from elastic_amm.liquidity.redemption import compute_remove_liquidity
from elastic_amm.liquidity.result import LiquidityResult, RedemptionResult

__all__ = [
    # Results
    "LiquidityResult",
    "RedemptionResult",
    # Formulas
    "calculate_qty",
    "calculate_liquidity_token_qty_for_double_asset_entry",
    "calculate_liquidity_token_qty_for_single_asset_entry",
    # Entry modes
    "compute_add_liquidity",
    "compute_add_quote_only_liquidity",
    "compute_add_base_only_liquidity",
    # Redemption
    "compute_remove_liquidity",
]
