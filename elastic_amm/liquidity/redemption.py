"""Pro-rata redemption of claim tokens.

Outputs are shares of the actual balances, not the tracked reserves, so a
provider leaving the pair takes its share of any decay with it.
"""

from __future__ import annotations

import structlog

from elastic_amm.errors import InsufficientLiquidity, InsufficientQuantity, SlippageExceeded
from elastic_amm.ledger.reserves import ReserveLedger
from elastic_amm.liquidity.result import RedemptionResult
from elastic_amm.safe_int import S, require_uint256

logger = structlog.get_logger()


def compute_remove_liquidity(
    claim_qty: int,
    min_quote: int,
    min_base: int,
    actual_quote: int,
    actual_base: int,
    claim_supply: int,
    ledger: ReserveLedger,
) -> RedemptionResult:
    """Burn claim_qty claims for a pro-rata share of the actual balances.

    Args:
        claim_qty: Claim tokens to redeem
        min_quote: Minimum quote the provider accepts
        min_base: Minimum base the provider accepts
        actual_quote: Observed quote balance held by the pair
        actual_base: Observed base balance held by the pair
        claim_supply: Outstanding claim tokens, including claim_qty
        ledger: The pair's reserve ledger (mutated on success)

    Returns:
        RedemptionResult with the quantities to hand back

    Raises:
        InsufficientQuantity: If claim_qty is zero
        InsufficientLiquidity: If claim_supply is zero or smaller than claim_qty
        SlippageExceeded: If an output is below its minimum
        InvariantViolation: If the reserve product fell since the last liquidity event
    """
    for name, value in (
        ("claim_qty", claim_qty),
        ("min_quote", min_quote),
        ("min_base", min_base),
        ("actual_quote", actual_quote),
        ("actual_base", actual_base),
        ("claim_supply", claim_supply),
    ):
        require_uint256(value, name)

    if claim_qty == 0:
        raise InsufficientQuantity("Claim quantity must be positive")
    if claim_supply == 0 or claim_qty > claim_supply:
        raise InsufficientLiquidity(
            f"Cannot redeem {claim_qty} claims from a supply of {claim_supply}"
        )

    quote_out = (S(claim_qty) * actual_quote // claim_supply).to_uint256()
    base_out = (S(claim_qty) * actual_base // claim_supply).to_uint256()
    if quote_out < min_quote:
        raise SlippageExceeded(f"Insufficient quote quantity: {quote_out} < {min_quote}")
    if base_out < min_base:
        raise SlippageExceeded(f"Insufficient base quantity: {base_out} < {min_base}")

    quote_share = (S(claim_qty) * ledger.quote_reserve // claim_supply).to_uint256()
    base_share = (S(claim_qty) * ledger.base_reserve // claim_supply).to_uint256()

    with ledger.atomic():
        ledger.check_invariant()
        ledger.quote_reserve = S(ledger.quote_reserve).saturating_sub(quote_share).value
        ledger.base_reserve = S(ledger.base_reserve).saturating_sub(base_share).value
        ledger.record_invariant()

    logger.debug(
        "redemption_computed",
        claim_qty=claim_qty,
        claim_supply=claim_supply,
        quote_out=quote_out,
        base_out=base_out,
    )
    return RedemptionResult(quote_out=quote_out, base_out=base_out)
