"""Liquidity operation result types."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class LiquidityResult:
    """Outcome of a liquidity entry.

    The caller transfers quote_used and base_used into the pair and mints
    claim_issued. Anything offered but not consumed is reported in
    quote_unused / base_unused and stays with the provider.

    Attributes:
        quote_used: Quote quantity the provider must contribute
        base_used: Base quantity the provider must contribute
        claim_issued: Claim tokens to mint for the provider
        quote_unused: Offered quote quantity left unconsumed
        base_unused: Offered base quantity left unconsumed
    """

    quote_used: int
    base_used: int
    claim_issued: int
    quote_unused: int = 0
    base_unused: int = 0

    @property
    def is_empty(self) -> bool:
        """True if nothing was consumed and nothing issued."""
        return self.quote_used == 0 and self.base_used == 0 and self.claim_issued == 0

    @classmethod
    def empty(cls, quote_unused: int = 0, base_unused: int = 0) -> LiquidityResult:
        """A zero result that hands every offered quantity back."""
        return cls(
            quote_used=0,
            base_used=0,
            claim_issued=0,
            quote_unused=quote_unused,
            base_unused=base_unused,
        )


@dataclass(frozen=True)
class RedemptionResult:
    """Quantities returned to a provider burning claim tokens."""

    quote_out: int
    base_out: int
