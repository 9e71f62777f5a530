"""Elastic AMM - pricing and accounting core for rebasing-asset pairs."""

from elastic_amm.config import DEFAULT_EXCHANGE_CONFIG, ExchangeConfig, configure_logging
from elastic_amm.exchange import Asset, Exchange, SwapResult
from elastic_amm.ledger import DecayKind, DecayState, LedgerState, ReserveLedger
from elastic_amm.liquidity import LiquidityResult, RedemptionResult

__version__ = "0.1.0"
__all__ = [
    "Exchange",
    "Asset",
    "SwapResult",
    "ExchangeConfig",
    "DEFAULT_EXCHANGE_CONFIG",
    "configure_logging",
    "ReserveLedger",
    "DecayKind",
    "DecayState",
    "LedgerState",
    "LiquidityResult",
    "RedemptionResult",
    "__version__",
]
