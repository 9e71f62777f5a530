"""Constant-product swap pricing with a liquidity fee.

Formula: out = (in * (10000 - fee) * res_out) / (res_in * 10000 + in * (10000 - fee))

The fee stays in the pair, so the product of the tracked reserves grows
with every swap. When the quote supply has contracted (quote deficit),
selling base is priced against the quote actually held and the base reserve
implied by that balance at the internal ratio, so decay cannot be used to
pull out quote the pair no longer has.
"""

from __future__ import annotations

import structlog

from elastic_amm.constants import BASIS_POINTS
from elastic_amm.errors import (
    InsufficientLiquidity,
    InsufficientQuantity,
    InvariantViolation,
    SlippageExceeded,
)
from elastic_amm.ledger.reserves import DecayKind, ReserveLedger
from elastic_amm.safe_int import S, require_uint256

logger = structlog.get_logger()

__all__ = [
    "price_after_fee",
    "compute_swap_quote_for_base",
    "compute_swap_base_for_quote",
]


def price_after_fee(
    input_qty: int,
    input_reserve: int,
    output_reserve: int,
    fee_bps: int,
) -> int:
    """Output quantity for input_qty after the fee, rounded down.

    Args:
        input_qty: Quantity sold into the pair
        input_reserve: Reserve of the input asset
        output_reserve: Reserve of the output asset
        fee_bps: Liquidity fee in basis points (30 = 0.3%)

    Raises:
        InsufficientQuantity: If input_qty is zero
        InsufficientLiquidity: If either reserve is zero
        ValueError: If fee_bps is outside [0, 10000)
    """
    if not 0 <= fee_bps < BASIS_POINTS:
        raise ValueError(f"fee_bps must be in [0, {BASIS_POINTS}), got {fee_bps}")
    if input_qty <= 0:
        raise InsufficientQuantity(f"Input quantity must be positive, got {input_qty}")
    if input_reserve <= 0 or output_reserve <= 0:
        raise InsufficientLiquidity(f"Empty reserve: in={input_reserve}, out={output_reserve}")

    input_with_fee = S(input_qty) * (BASIS_POINTS - fee_bps)
    numerator = input_with_fee * output_reserve
    denominator = S(input_reserve) * BASIS_POINTS + input_with_fee
    return (numerator // denominator).to_uint256()


def compute_swap_quote_for_base(
    quote_in: int,
    min_base_out: int,
    fee_bps: int,
    ledger: ReserveLedger,
) -> int:
    """Sell quote for base against the tracked reserves.

    Returns:
        Base quantity to hand out

    Raises:
        SlippageExceeded: If the output is zero or below min_base_out
        ReserveUnderflow: If the output exceeds the tracked base reserve
    """
    require_uint256(quote_in, "quote_in")
    require_uint256(min_base_out, "min_base_out")

    base_out = price_after_fee(quote_in, ledger.quote_reserve, ledger.base_reserve, fee_bps)
    _check_output(base_out, min_base_out, "base")

    with ledger.atomic():
        k_before = ledger.invariant
        ledger.apply_delta(quote_in, -base_out)
        _check_invariant(k_before, ledger)

    logger.debug("swap_quote_for_base", quote_in=quote_in, base_out=base_out, fee_bps=fee_bps)
    return base_out


def compute_swap_base_for_quote(
    base_in: int,
    min_quote_out: int,
    actual_quote: int,
    fee_bps: int,
    ledger: ReserveLedger,
) -> int:
    """Sell base for quote, pricing against the actual quote under a deficit.

    With a quote deficit the input reserve is the implied base reserve
    ceil(actual_quote * Y / X) and the output reserve is actual_quote.
    Rounding the implied reserve up keeps the tracked product from falling.

    Returns:
        Quote quantity to hand out

    Raises:
        SlippageExceeded: If the output is zero or below min_quote_out
        ReserveUnderflow: If the output exceeds the tracked quote reserve
    """
    require_uint256(base_in, "base_in")
    require_uint256(min_quote_out, "min_quote_out")
    require_uint256(actual_quote, "actual_quote")

    decay = ledger.detect_decay(actual_quote)
    if decay.kind is DecayKind.QUOTE_DEFICIT and ledger.quote_reserve > 0:
        base_reserve = (S(actual_quote) * ledger.base_reserve).ceiling_div(ledger.quote_reserve).value
        quote_reserve = actual_quote
    else:
        base_reserve = ledger.base_reserve
        quote_reserve = ledger.quote_reserve

    quote_out = price_after_fee(base_in, base_reserve, quote_reserve, fee_bps)
    _check_output(quote_out, min_quote_out, "quote")

    with ledger.atomic():
        k_before = ledger.invariant
        ledger.apply_delta(-quote_out, base_in)
        _check_invariant(k_before, ledger)

    logger.debug(
        "swap_base_for_quote",
        base_in=base_in,
        quote_out=quote_out,
        fee_bps=fee_bps,
        priced_on_deficit=decay.kind is DecayKind.QUOTE_DEFICIT,
    )
    return quote_out


def _check_output(amount_out: int, min_out: int, asset: str) -> None:
    if amount_out == 0:
        raise SlippageExceeded(f"Swap produces no {asset}")
    if amount_out < min_out:
        raise SlippageExceeded(f"Insufficient {asset} output: {amount_out} < {min_out}")


def _check_invariant(k_before: int, ledger: ReserveLedger) -> None:
    if ledger.invariant < k_before:
        raise InvariantViolation(f"Reserve product fell: {k_before} -> {ledger.invariant}")
