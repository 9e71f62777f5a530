"""Liquidity issuance for an elastic-supply trading pair.

Three entry modes:

- Double-asset entry: both assets in the current reserve ratio. Only
  allowed while decay is absent or below the actionable threshold.
- Single-asset entry: only the asset that resolves decay. Base resolves
  quote excess (the quote supply expanded); quote resolves quote deficit
  (the quote supply contracted).
- Combined entry: single-asset entry resolves as much decay as the offer
  covers, then double-asset entry absorbs what is left in ratio.

Single-asset claims are weighted by

    gamma = (delta / reserve_after / 2) * (decay_change / decay)
    claims = claim_supply / (1 - gamma) * gamma

so that resolving decay earns less than contributing both assets would.

Every mode mutates the ledger inside ReserveLedger.atomic(), so a raised
error leaves it exactly as it was.
"""

from __future__ import annotations

import structlog

from elastic_amm.constants import WAD
from elastic_amm.errors import (
    BadRatio,
    DecayResolutionTooSmall,
    InsufficientLiquidity,
    InsufficientQuantity,
    InvariantViolation,
    NoDecayPresent,
    SlippageExceeded,
)
from elastic_amm.ledger.reserves import DecayKind, ReserveLedger
from elastic_amm.liquidity.result import LiquidityResult
from elastic_amm.math.fixed_point import round_to_nearest, w_div, w_mul
from elastic_amm.safe_int import S, require_uint256

logger = structlog.get_logger()

__all__ = [
    "calculate_qty",
    "calculate_liquidity_token_qty_for_double_asset_entry",
    "calculate_liquidity_token_qty_for_single_asset_entry",
    "compute_add_liquidity",
    "compute_add_quote_only_liquidity",
    "compute_add_base_only_liquidity",
]


# =============================================================================
# Formulas
# =============================================================================


def calculate_qty(qty_a: int, reserve_a: int, reserve_b: int) -> int:
    """Quantity of asset B matching qty_a of asset A at the reserve ratio.

    Formula: qty_b = qty_a * reserve_b / reserve_a, rounded down.

    Raises:
        InsufficientQuantity: If qty_a is zero
        InsufficientLiquidity: If either reserve is zero
    """
    if qty_a <= 0:
        raise InsufficientQuantity(f"Quantity must be positive, got {qty_a}")
    if reserve_a <= 0 or reserve_b <= 0:
        raise InsufficientLiquidity(f"Empty reserve: {reserve_a}, {reserve_b}")
    return (S(qty_a) * S(reserve_b) // S(reserve_a)).to_uint256()


def calculate_liquidity_token_qty_for_double_asset_entry(
    claim_supply: int,
    base_qty: int,
    actual_base: int,
) -> int:
    """Claim tokens for a double-asset contribution.

    Formula: claims = base_qty * claim_supply / actual_base, rounded down.

    Raises:
        InsufficientLiquidity: If the actual base balance is zero
    """
    if actual_base == 0:
        raise InsufficientLiquidity("Actual base balance is zero")
    return (S(base_qty) * S(claim_supply) // S(actual_base)).to_uint256()


def calculate_liquidity_token_qty_for_single_asset_entry(
    claim_supply: int,
    qty_to_add: int,
    reserve_after: int,
    decay_change: int,
    decay: int,
) -> int:
    """Claim tokens for a decay-resolving single-asset contribution.

    gamma = (qty_to_add / reserve_after / 2) * (decay_change / decay), in WAD.
    The claim supply is carried at WAD precision through
    claim_supply * gamma / (1 - gamma) and floored once at the end.

    Args:
        claim_supply: Outstanding claim tokens before this entry
        qty_to_add: Quantity of the contributed asset
        reserve_after: Tracked reserve of the contributed asset after the entry
        decay_change: Decay resolved by this entry, in the counter asset's units
        decay: Total decay before this entry, in the same units

    Returns:
        Claim tokens to issue

    Raises:
        InvariantViolation: If gamma reaches 1 (requires qty_to_add > reserve_after
            or decay_change > decay, which the entry modes never produce)
    """
    ratio = w_div(qty_to_add, reserve_after)
    gamma = w_mul(w_div(ratio, 2 * WAD), w_div(decay_change, decay))
    if gamma >= WAD:
        raise InvariantViolation(
            f"gamma {gamma} >= WAD for qty={qty_to_add}, reserve={reserve_after}, "
            f"change={decay_change}, decay={decay}"
        )
    scaled_claims = w_div(w_mul(S(claim_supply * WAD).to_uint256(), gamma), WAD - gamma)
    return scaled_claims // WAD


# =============================================================================
# Entry modes
# =============================================================================


def compute_add_liquidity(
    desired_quote: int,
    desired_base: int,
    min_quote: int,
    min_base: int,
    actual_quote: int,
    actual_base: int,
    claim_supply: int,
    ledger: ReserveLedger,
    *,
    strict: bool = True,
) -> LiquidityResult:
    """Add liquidity, resolving actionable decay first when present.

    Args:
        desired_quote: Maximum quote quantity the provider offers
        desired_base: Maximum base quantity the provider offers
        min_quote: Minimum total quote quantity that must be consumed
        min_base: Minimum total base quantity that must be consumed
        actual_quote: Observed quote balance held by the pair
        actual_base: Observed base balance held by the pair
        claim_supply: Outstanding claim tokens
        ledger: The pair's reserve ledger (mutated on success)
        strict: If False, a ratio that cannot be honored returns a zero
            result instead of raising BadRatio

    Returns:
        LiquidityResult with consumed and unconsumed quantities

    Raises:
        InsufficientQuantity: Missing quantity for the required entry mode
        InsufficientLiquidity: Claims outstanding but a reserve is empty
        SlippageExceeded: A consumed total is below its minimum
        BadRatio: Quantities cannot be honored at the current ratio (strict only)
        InvariantViolation: The reserve product fell since the last liquidity event
    """
    for name, value in (
        ("desired_quote", desired_quote),
        ("desired_base", desired_base),
        ("min_quote", min_quote),
        ("min_base", min_base),
        ("actual_quote", actual_quote),
        ("actual_base", actual_base),
        ("claim_supply", claim_supply),
    ):
        require_uint256(value, name)

    if claim_supply == 0:
        return _seed_liquidity(desired_quote, desired_base, min_quote, min_base, ledger)

    if desired_quote == 0 and desired_base == 0:
        raise InsufficientQuantity("At least one desired quantity must be positive")
    if ledger.quote_reserve == 0 or ledger.base_reserve == 0:
        raise InsufficientLiquidity(
            f"Claims outstanding against empty reserves: quote={ledger.quote_reserve}, "
            f"base={ledger.base_reserve}"
        )

    with ledger.atomic():
        ledger.check_invariant()
        quote_used = base_used = claim_issued = 0
        resolved_decay = False

        if ledger.is_sufficient_decay(actual_quote):
            decay = ledger.detect_decay(actual_quote)
            if decay.kind is DecayKind.QUOTE_EXCESS:
                if desired_base == 0:
                    raise InsufficientQuantity("Quote excess decay requires base to resolve it")
                step = _resolve_quote_excess(desired_base, 0, actual_quote, claim_supply, ledger)
            else:
                if desired_quote == 0:
                    raise InsufficientQuantity("Quote deficit decay requires quote to resolve it")
                step = _resolve_quote_deficit(desired_quote, 0, actual_quote, claim_supply, ledger)
            quote_used, base_used, claim_issued = step.quote_used, step.base_used, step.claim_issued
            resolved_decay = True

        remaining_quote = desired_quote - quote_used
        remaining_base = desired_base - base_used
        observed_quote = actual_quote + quote_used
        observed_base = actual_base + base_used

        if remaining_quote > 0 and remaining_base > 0:
            if not ledger.is_sufficient_decay(observed_quote):
                step = _double_asset_entry(
                    remaining_quote,
                    remaining_base,
                    observed_base,
                    claim_supply + claim_issued,
                    ledger,
                )
                if step is not None:
                    quote_used += step.quote_used
                    base_used += step.base_used
                    claim_issued += step.claim_issued
                elif strict and not resolved_decay:
                    raise BadRatio(
                        f"Cannot honor quote={desired_quote}, base={desired_base} at reserves "
                        f"quote={ledger.quote_reserve}, base={ledger.base_reserve}"
                    )
        elif not resolved_decay:
            raise InsufficientQuantity("Double-asset entry requires both quantities to be positive")

        if quote_used == 0 and base_used == 0:
            logger.debug(
                "liquidity_not_absorbed",
                desired_quote=desired_quote,
                desired_base=desired_base,
            )
            return LiquidityResult.empty(quote_unused=desired_quote, base_unused=desired_base)

        _check_minimums(quote_used, base_used, min_quote, min_base)
        ledger.record_invariant()

    logger.debug(
        "liquidity_entry_computed",
        quote_used=quote_used,
        base_used=base_used,
        claim_issued=claim_issued,
        resolved_decay=resolved_decay,
    )
    return LiquidityResult(
        quote_used=quote_used,
        base_used=base_used,
        claim_issued=claim_issued,
        quote_unused=desired_quote - quote_used,
        base_unused=desired_base - base_used,
    )


def compute_add_quote_only_liquidity(
    desired_quote: int,
    min_quote: int,
    actual_quote: int,
    claim_supply: int,
    ledger: ReserveLedger,
) -> LiquidityResult:
    """Add quote only, resolving quote-deficit decay.

    The contribution restores the actual quote balance toward the tracked
    reserve, so the tracked reserves do not move.

    Raises:
        InsufficientQuantity: If desired_quote is zero
        InsufficientLiquidity: If a reserve or the claim supply is empty
        NoDecayPresent: If there is no actionable quote deficit
        SlippageExceeded: If min_quote exceeds what the decay allows
        DecayResolutionTooSmall: If the contribution resolves no base-equivalent decay
        InvariantViolation: If the reserve product fell since the last liquidity event
    """
    _validate_single_asset_inputs(desired_quote, min_quote, actual_quote, claim_supply, ledger)
    with ledger.atomic():
        ledger.check_invariant()
        result = _resolve_quote_deficit(desired_quote, min_quote, actual_quote, claim_supply, ledger)
        ledger.record_invariant()
    return result


def compute_add_base_only_liquidity(
    desired_base: int,
    min_base: int,
    actual_quote: int,
    claim_supply: int,
    ledger: ReserveLedger,
) -> LiquidityResult:
    """Add base only, resolving quote-excess decay.

    Only the base needed to neutralize the decay is consumed; the rest of
    the offer is reported in base_unused.

    Raises:
        InsufficientQuantity: If desired_base is zero
        InsufficientLiquidity: If a reserve or the claim supply is empty
        NoDecayPresent: If there is no actionable quote excess
        SlippageExceeded: If min_base exceeds what the decay allows
        DecayResolutionTooSmall: If the contribution resolves no quote decay
        InvariantViolation: If the reserve product fell since the last liquidity event
    """
    _validate_single_asset_inputs(desired_base, min_base, actual_quote, claim_supply, ledger)
    with ledger.atomic():
        ledger.check_invariant()
        result = _resolve_quote_excess(desired_base, min_base, actual_quote, claim_supply, ledger)
        ledger.record_invariant()
    return result


# =============================================================================
# Internals
# =============================================================================


def _seed_liquidity(
    desired_quote: int,
    desired_base: int,
    min_quote: int,
    min_base: int,
    ledger: ReserveLedger,
) -> LiquidityResult:
    """First contribution: sets the initial price and issues claims 1:1 with base."""
    if desired_quote == 0 or desired_base == 0:
        raise InsufficientQuantity(
            f"First contribution needs both assets: quote={desired_quote}, base={desired_base}"
        )
    if not ledger.is_empty:
        raise InvariantViolation(
            f"No claims outstanding but ledger holds quote={ledger.quote_reserve}, "
            f"base={ledger.base_reserve}"
        )
    _check_minimums(desired_quote, desired_base, min_quote, min_base)

    with ledger.atomic():
        ledger.check_invariant()
        ledger.apply_delta(desired_quote, desired_base)
        ledger.record_invariant()

    logger.debug("liquidity_seeded", quote=desired_quote, base=desired_base)
    return LiquidityResult(quote_used=desired_quote, base_used=desired_base, claim_issued=desired_base)


def _validate_single_asset_inputs(
    desired: int,
    minimum: int,
    actual_quote: int,
    claim_supply: int,
    ledger: ReserveLedger,
) -> None:
    require_uint256(desired, "desired")
    require_uint256(minimum, "minimum")
    require_uint256(actual_quote, "actual_quote")
    require_uint256(claim_supply, "claim_supply")
    if desired == 0:
        raise InsufficientQuantity("Single-asset entry requires a positive quantity")
    if claim_supply == 0 or ledger.quote_reserve == 0 or ledger.base_reserve == 0:
        raise InsufficientLiquidity("Single-asset entry requires existing liquidity")


def _resolve_quote_excess(
    desired_base: int,
    min_base: int,
    actual_quote: int,
    claim_supply: int,
    ledger: ReserveLedger,
) -> LiquidityResult:
    """Consume base to back quote that arrived through a positive rebase."""
    decay = ledger.detect_decay(actual_quote)
    if decay.kind is not DecayKind.QUOTE_EXCESS:
        raise NoDecayPresent(f"No quote excess decay (state: {decay.kind.value})")
    if not ledger.is_sufficient_decay(actual_quote):
        raise NoDecayPresent(f"Quote excess decay {decay.amount} is below one base unit")

    omega = ledger.price_ratio()
    max_base = w_div(decay.amount, omega)
    if max_base < min_base:
        raise SlippageExceeded(
            f"Insufficient decay: at most {max_base} base can be added, minimum is {min_base}"
        )
    base_qty = min(desired_base, max_base)
    if base_qty < min_base:
        raise SlippageExceeded(f"Insufficient base quantity: {base_qty} < {min_base}")

    # Whole quote units backed by base_qty, never more than the decay itself
    quote_change = min(round_to_nearest(base_qty * omega, WAD) // WAD, decay.amount)
    if quote_change == 0:
        raise DecayResolutionTooSmall(f"{base_qty} base resolves no quote decay")

    ledger.apply_delta(quote_change, base_qty)
    claims = calculate_liquidity_token_qty_for_single_asset_entry(
        claim_supply, base_qty, ledger.base_reserve, quote_change, decay.amount
    )
    if claims == 0:
        raise InsufficientQuantity(f"{base_qty} base is too small to issue claim tokens")

    logger.debug(
        "quote_excess_resolved",
        decay=decay.amount,
        quote_change=quote_change,
        base_qty=base_qty,
        claims=claims,
    )
    return LiquidityResult(
        quote_used=0,
        base_used=base_qty,
        claim_issued=claims,
        base_unused=desired_base - base_qty,
    )


def _resolve_quote_deficit(
    desired_quote: int,
    min_quote: int,
    actual_quote: int,
    claim_supply: int,
    ledger: ReserveLedger,
) -> LiquidityResult:
    """Consume quote to replace quote lost through a negative rebase."""
    decay = ledger.detect_decay(actual_quote)
    if decay.kind is not DecayKind.QUOTE_DEFICIT:
        raise NoDecayPresent(f"No quote deficit decay (state: {decay.kind.value})")
    if not ledger.is_sufficient_decay(actual_quote):
        raise NoDecayPresent(f"Quote deficit decay {decay.amount} is below one base unit")

    max_quote = decay.amount
    if max_quote < min_quote:
        raise SlippageExceeded(
            f"Insufficient decay: at most {max_quote} quote can be added, minimum is {min_quote}"
        )
    quote_qty = min(desired_quote, max_quote)
    if quote_qty < min_quote:
        raise SlippageExceeded(f"Insufficient quote quantity: {quote_qty} < {min_quote}")

    inverse_omega = ledger.inverse_price_ratio()
    base_decay = round_to_nearest(decay.amount * inverse_omega, WAD) // WAD
    base_change = round_to_nearest(quote_qty * inverse_omega, WAD) // WAD
    if base_change == 0:
        raise DecayResolutionTooSmall(f"{quote_qty} quote resolves no base-equivalent decay")

    claims = calculate_liquidity_token_qty_for_single_asset_entry(
        claim_supply, quote_qty, ledger.quote_reserve, base_change, base_decay
    )
    if claims == 0:
        raise InsufficientQuantity(f"{quote_qty} quote is too small to issue claim tokens")

    logger.debug(
        "quote_deficit_resolved",
        decay=decay.amount,
        base_decay=base_decay,
        quote_qty=quote_qty,
        claims=claims,
    )
    return LiquidityResult(
        quote_used=quote_qty,
        base_used=0,
        claim_issued=claims,
        quote_unused=desired_quote - quote_qty,
    )


def _match_ratio(desired_quote: int, desired_base: int, ledger: ReserveLedger) -> tuple[int, int] | None:
    """Largest (quote, base) pair within the desired amounts at the reserve ratio.

    Returns None when one side of the match rounds to zero.
    """
    required_base = calculate_qty(desired_quote, ledger.quote_reserve, ledger.base_reserve)
    if required_base <= desired_base:
        quote_qty, base_qty = desired_quote, required_base
    else:
        required_quote = calculate_qty(desired_base, ledger.base_reserve, ledger.quote_reserve)
        if required_quote > desired_quote:
            raise InvariantViolation(
                f"Neither side fits: required_base={required_base} > {desired_base} and "
                f"required_quote={required_quote} > {desired_quote}"
            )
        quote_qty, base_qty = required_quote, desired_base

    if quote_qty == 0 or base_qty == 0:
        return None
    return quote_qty, base_qty


def _double_asset_entry(
    desired_quote: int,
    desired_base: int,
    actual_base: int,
    claim_supply: int,
    ledger: ReserveLedger,
) -> LiquidityResult | None:
    """Contribute both assets in ratio. None if nothing can be absorbed."""
    matched = _match_ratio(desired_quote, desired_base, ledger)
    if matched is None:
        return None
    quote_qty, base_qty = matched

    claims = calculate_liquidity_token_qty_for_double_asset_entry(claim_supply, base_qty, actual_base)
    if claims == 0:
        return None

    ledger.apply_delta(quote_qty, base_qty)
    return LiquidityResult(quote_used=quote_qty, base_used=base_qty, claim_issued=claims)


def _check_minimums(quote_used: int, base_used: int, min_quote: int, min_base: int) -> None:
    if quote_used < min_quote:
        raise SlippageExceeded(f"Insufficient quote quantity: {quote_used} < {min_quote}")
    if base_used < min_base:
        raise SlippageExceeded(f"Insufficient base quantity: {base_used} < {min_base}")
