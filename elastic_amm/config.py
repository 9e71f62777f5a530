"""Exchange configuration and logging setup."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass

import structlog

from elastic_amm.constants import BASIS_POINTS, DEFAULT_LIQUIDITY_FEE_BPS

FEE_ENV_VAR = "ELASTIC_AMM_LIQUIDITY_FEE_BPS"
STRICT_RATIO_ENV_VAR = "ELASTIC_AMM_STRICT_RATIO"

_TRUE_VALUES = ("true", "1", "yes")
_FALSE_VALUES = ("false", "0", "no")


@dataclass(frozen=True)
class ExchangeConfig:
    """Behavior knobs for an Exchange.

    Attributes:
        liquidity_fee_bps: Swap fee kept by the pair, in basis points (default: 30)
        strict_ratio: If True, double-asset quantities that cannot be honored at
            the current ratio raise BadRatio. If False, the entry returns a zero
            result and hands the offer back.
    """

    liquidity_fee_bps: int = DEFAULT_LIQUIDITY_FEE_BPS
    strict_ratio: bool = True

    def __post_init__(self) -> None:
        if isinstance(self.liquidity_fee_bps, bool) or not isinstance(self.liquidity_fee_bps, int):
            raise TypeError(
                f"liquidity_fee_bps must be int, got {type(self.liquidity_fee_bps).__name__}"
            )
        if not 0 <= self.liquidity_fee_bps < BASIS_POINTS:
            raise ValueError(
                f"liquidity_fee_bps must be in [0, {BASIS_POINTS}), got {self.liquidity_fee_bps}"
            )

    @classmethod
    def from_env(cls) -> ExchangeConfig:
        """Build a config from ELASTIC_AMM_* environment variables.

        Raises:
            ValueError: If the fee variable is not an integer in range, or the
                strict-ratio variable is not one of true/false/1/0/yes/no
        """
        fee = os.environ.get(FEE_ENV_VAR, str(DEFAULT_LIQUIDITY_FEE_BPS))
        try:
            fee_bps = int(fee)
        except ValueError as err:
            raise ValueError(f"{FEE_ENV_VAR} must be an integer, got '{fee}'") from err
        strict_value = os.environ.get(STRICT_RATIO_ENV_VAR, "true")
        if strict_value.lower() in _TRUE_VALUES:
            strict = True
        elif strict_value.lower() in _FALSE_VALUES:
            strict = False
        else:
            raise ValueError(
                f"{STRICT_RATIO_ENV_VAR} must be one of true/false/1/0/yes/no, got '{strict_value}'"
            )
        return cls(liquidity_fee_bps=fee_bps, strict_ratio=strict)


# Default configuration instance
DEFAULT_EXCHANGE_CONFIG = ExchangeConfig()


def configure_logging(verbose: bool = False) -> None:
    """Install the console logging pipeline.

    Debug events from the pricing and accounting formulas are shown only
    when verbose is set.
    """
    log_level = logging.DEBUG if verbose else logging.INFO
    structlog.configure(
        processors=[
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.dev.ConsoleRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
    )
