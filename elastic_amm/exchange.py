"""Trading-pair facade over the pricing and accounting core.

An Exchange owns one ReserveLedger exclusively. Each operation:
1. Rejects the call if its expiration has passed
2. Reads fresh actual balances and the claim supply from the collaborators
3. Runs the core computation against the ledger
4. Mints or burns claims through the claim token
5. Returns the quantities the caller must transfer

Steps 3 and 4 run inside one ledger transaction, so a claim token that
refuses a mint or burn leaves the ledger untouched.
"""

from __future__ import annotations

import time
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from enum import Enum
from typing import Any

import structlog

from elastic_amm.amm.pricing import compute_swap_base_for_quote, compute_swap_quote_for_base
from elastic_amm.config import DEFAULT_EXCHANGE_CONFIG, ExchangeConfig
from elastic_amm.errors import ExchangeError, Expired, SafeIntError
from elastic_amm.interfaces import BalanceSource, ClaimToken
from elastic_amm.ledger.reserves import DecayState, ReserveLedger
from elastic_amm.ledger.state import LedgerState
from elastic_amm.liquidity.issuance import (
    compute_add_base_only_liquidity,
    compute_add_liquidity,
    compute_add_quote_only_liquidity,
)
from elastic_amm.liquidity.redemption import compute_remove_liquidity
from elastic_amm.liquidity.result import LiquidityResult, RedemptionResult

logger = structlog.get_logger()


class Asset(str, Enum):
    """The two sides of a pair."""

    QUOTE = "quote"
    BASE = "base"


@dataclass(frozen=True)
class SwapResult:
    """Result of a swap through the pair."""

    amount_in: int
    amount_out: int
    token_in: Asset
    token_out: Asset


class Exchange:
    """A two-asset pair whose quote asset may rebase.

    Args:
        balances: Source of the pair's actual quote and base balances
        claim_token: Claim token minted to providers and burned on redemption
        config: Fee and ratio behavior (default: DEFAULT_EXCHANGE_CONFIG)
        ledger: Existing ledger to resume from. A new empty ledger if None.
        clock: Returns the current time in seconds, compared with expirations
    """

    def __init__(
        self,
        balances: BalanceSource,
        claim_token: ClaimToken,
        config: ExchangeConfig = DEFAULT_EXCHANGE_CONFIG,
        ledger: ReserveLedger | None = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.balances = balances
        self.claim_token = claim_token
        self.config = config
        self.ledger = ledger if ledger is not None else ReserveLedger()
        self._clock = clock

    # --- Queries ---

    def decay(self) -> DecayState:
        """Decay between the actual quote balance and the tracked reserve."""
        return self.ledger.detect_decay(self.balances.quote_balance())

    def state(self) -> LedgerState:
        """Immutable snapshot of the ledger."""
        return LedgerState.from_ledger(self.ledger)

    # --- Liquidity ---

    def add_liquidity(
        self,
        desired_quote: int,
        desired_base: int,
        min_quote: int,
        min_base: int,
        recipient: str,
        expiration: float,
    ) -> LiquidityResult:
        """Add both assets, resolving actionable decay first.

        Returns:
            LiquidityResult. The caller transfers quote_used and base_used in.
        """
        with self._operation("add_liquidity", expiration, recipient=recipient):
            result = compute_add_liquidity(
                desired_quote,
                desired_base,
                min_quote,
                min_base,
                self.balances.quote_balance(),
                self.balances.base_balance(),
                self.claim_token.total_supply(),
                self.ledger,
                strict=self.config.strict_ratio,
            )
            self._mint(recipient, result)

        logger.info(
            "liquidity_added",
            recipient=recipient,
            quote_used=result.quote_used,
            base_used=result.base_used,
            claim_issued=result.claim_issued,
            quote_unused=result.quote_unused,
            base_unused=result.base_unused,
        )
        return result

    def add_quote_token_liquidity(
        self,
        desired_quote: int,
        min_quote: int,
        recipient: str,
        expiration: float,
    ) -> LiquidityResult:
        """Add quote only, resolving a quote deficit."""
        with self._operation("add_quote_token_liquidity", expiration, recipient=recipient):
            result = compute_add_quote_only_liquidity(
                desired_quote,
                min_quote,
                self.balances.quote_balance(),
                self.claim_token.total_supply(),
                self.ledger,
            )
            self._mint(recipient, result)

        logger.info(
            "quote_liquidity_added",
            recipient=recipient,
            quote_used=result.quote_used,
            claim_issued=result.claim_issued,
        )
        return result

    def add_base_token_liquidity(
        self,
        desired_base: int,
        min_base: int,
        recipient: str,
        expiration: float,
    ) -> LiquidityResult:
        """Add base only, resolving a quote excess."""
        with self._operation("add_base_token_liquidity", expiration, recipient=recipient):
            result = compute_add_base_only_liquidity(
                desired_base,
                min_base,
                self.balances.quote_balance(),
                self.claim_token.total_supply(),
                self.ledger,
            )
            self._mint(recipient, result)

        logger.info(
            "base_liquidity_added",
            recipient=recipient,
            base_used=result.base_used,
            claim_issued=result.claim_issued,
        )
        return result

    def remove_liquidity(
        self,
        claim_qty: int,
        min_quote: int,
        min_base: int,
        holder: str,
        expiration: float,
    ) -> RedemptionResult:
        """Burn holder's claims for a pro-rata share of the actual balances.

        Returns:
            RedemptionResult. The caller transfers quote_out and base_out out.
        """
        with self._operation("remove_liquidity", expiration, holder=holder):
            result = compute_remove_liquidity(
                claim_qty,
                min_quote,
                min_base,
                self.balances.quote_balance(),
                self.balances.base_balance(),
                self.claim_token.total_supply(),
                self.ledger,
            )
            self.claim_token.burn(holder, claim_qty)

        logger.info(
            "liquidity_removed",
            holder=holder,
            claim_qty=claim_qty,
            quote_out=result.quote_out,
            base_out=result.base_out,
        )
        return result

    # --- Swaps ---

    def swap_quote_for_base(self, quote_in: int, min_base_out: int, expiration: float) -> SwapResult:
        """Sell quote_in quote for base."""
        with self._operation("swap_quote_for_base", expiration):
            base_out = compute_swap_quote_for_base(
                quote_in, min_base_out, self.config.liquidity_fee_bps, self.ledger
            )

        logger.info("swapped", token_in=Asset.QUOTE.value, amount_in=quote_in, amount_out=base_out)
        return SwapResult(
            amount_in=quote_in,
            amount_out=base_out,
            token_in=Asset.QUOTE,
            token_out=Asset.BASE,
        )

    def swap_base_for_quote(self, base_in: int, min_quote_out: int, expiration: float) -> SwapResult:
        """Sell base_in base for quote."""
        with self._operation("swap_base_for_quote", expiration):
            quote_out = compute_swap_base_for_quote(
                base_in,
                min_quote_out,
                self.balances.quote_balance(),
                self.config.liquidity_fee_bps,
                self.ledger,
            )

        logger.info("swapped", token_in=Asset.BASE.value, amount_in=base_in, amount_out=quote_out)
        return SwapResult(
            amount_in=base_in,
            amount_out=quote_out,
            token_in=Asset.BASE,
            token_out=Asset.QUOTE,
        )

    # --- Internals ---

    @contextmanager
    def _operation(self, name: str, expiration: float, **fields: Any) -> Iterator[None]:
        """Deadline check plus one ledger transaction around an operation.

        Rejected operations are logged with the error class and re-raised.
        """
        try:
            now = self._clock()
            if now > expiration:
                raise Expired(f"{name} expired at {expiration}, now {now}")
            with self.ledger.atomic():
                yield
        except (ExchangeError, SafeIntError) as err:
            logger.warning(
                "operation_rejected",
                operation=name,
                error=type(err).__name__,
                reason=str(err),
                **fields,
            )
            raise

    def _mint(self, recipient: str, result: LiquidityResult) -> None:
        if result.claim_issued > 0:
            self.claim_token.mint(recipient, result.claim_issued)
