"""Reserve ledger for an elastic-supply trading pair.

The ledger tracks the quote and base reserves used for pricing ("X" and
"Y"). The quote asset may rebase, so its externally observed balance
("alpha") can drift away from the tracked reserve. That drift is decay:

- quote excess: alpha > X, the quote supply expanded
- quote deficit: alpha < X, the quote supply contracted

Decay is derived on demand from a freshly observed balance and is never
stored.
"""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from enum import Enum

import structlog

from elastic_amm.errors import InsufficientLiquidity, InvariantViolation, ReserveUnderflow
from elastic_amm.math.fixed_point import w_div
from elastic_amm.safe_int import S, require_uint256

logger = structlog.get_logger()


class DecayKind(str, Enum):
    """Which side of the tracked quote reserve the actual balance sits on."""

    NONE = "none"
    QUOTE_EXCESS = "quote_excess"
    QUOTE_DEFICIT = "quote_deficit"


@dataclass(frozen=True)
class DecayState:
    """Decay observed between the actual quote balance and the ledger."""

    kind: DecayKind
    amount: int = 0

    @property
    def is_present(self) -> bool:
        return self.kind is not DecayKind.NONE

    @classmethod
    def none(cls) -> DecayState:
        return cls(kind=DecayKind.NONE)

    @classmethod
    def quote_excess(cls, amount: int) -> DecayState:
        return cls(kind=DecayKind.QUOTE_EXCESS, amount=amount)

    @classmethod
    def quote_deficit(cls, amount: int) -> DecayState:
        return cls(kind=DecayKind.QUOTE_DEFICIT, amount=amount)


@dataclass
class ReserveLedger:
    """Internally tracked reserves of a trading pair.

    Attributes:
        quote_reserve: Tracked quote quantity (X)
        base_reserve: Tracked base quantity (Y)
        invariant_last: X * Y recorded after the last liquidity event
    """

    quote_reserve: int = 0
    base_reserve: int = 0
    invariant_last: int = 0

    def __post_init__(self) -> None:
        require_uint256(self.quote_reserve, "quote_reserve")
        require_uint256(self.base_reserve, "base_reserve")
        require_uint256(self.invariant_last, "invariant_last")

    @property
    def invariant(self) -> int:
        """Current product of the tracked reserves."""
        return self.quote_reserve * self.base_reserve

    @property
    def is_empty(self) -> bool:
        return self.quote_reserve == 0 and self.base_reserve == 0

    def price_ratio(self) -> int:
        """Omega: quote per base (X / Y) in WAD.

        Raises:
            InsufficientLiquidity: If either reserve is zero or the ratio rounds to zero
        """
        self._require_liquidity()
        return self._nonzero_ratio(w_div(self.quote_reserve, self.base_reserve))

    def inverse_price_ratio(self) -> int:
        """Base per quote (Y / X) in WAD.

        Raises:
            InsufficientLiquidity: If either reserve is zero or the ratio rounds to zero
        """
        self._require_liquidity()
        return self._nonzero_ratio(w_div(self.base_reserve, self.quote_reserve))

    def detect_decay(self, actual_quote: int) -> DecayState:
        """Compare an observed quote balance with the tracked quote reserve."""
        require_uint256(actual_quote, "actual_quote")
        if actual_quote > self.quote_reserve:
            decay = DecayState.quote_excess(actual_quote - self.quote_reserve)
        elif actual_quote < self.quote_reserve:
            decay = DecayState.quote_deficit(self.quote_reserve - actual_quote)
        else:
            return DecayState.none()

        logger.debug(
            "decay_detected",
            kind=decay.kind.value,
            amount=decay.amount,
            quote_reserve=self.quote_reserve,
            actual_quote=actual_quote,
        )
        return decay

    def is_sufficient_decay(self, actual_quote: int) -> bool:
        """True when decay is worth at least one whole base unit.

        The decay is converted into base units at the internal ratio
        (decay / omega = decay * Y / X) and compared with 1. The comparison
        is done by cross-multiplication so the threshold is exact. Smaller
        decay is treated as noise.
        """
        if self.quote_reserve == 0 or self.base_reserve == 0:
            return False
        decay = self.detect_decay(actual_quote)
        if not decay.is_present:
            return False
        return S(decay.amount) * self.base_reserve >= self.quote_reserve

    def apply_delta(self, delta_quote: int, delta_base: int) -> None:
        """Add signed deltas to both reserves.

        Both new values are computed before either is stored, so a failure
        leaves the ledger unchanged.

        Raises:
            ReserveUnderflow: If either reserve would go negative
            ArithmeticOverflow: If either reserve would exceed uint256
        """
        new_quote = self.quote_reserve + delta_quote
        new_base = self.base_reserve + delta_base
        if new_quote < 0:
            raise ReserveUnderflow(
                f"Quote reserve underflow: {self.quote_reserve} + ({delta_quote})"
            )
        if new_base < 0:
            raise ReserveUnderflow(f"Base reserve underflow: {self.base_reserve} + ({delta_base})")
        self.quote_reserve = S(new_quote).to_uint256()
        self.base_reserve = S(new_base).to_uint256()

    def record_invariant(self) -> None:
        """Store the current reserve product as invariant_last."""
        self.invariant_last = S(self.invariant).to_uint256()

    def check_invariant(self) -> None:
        """Confirm the reserve product has not fallen since the last liquidity event.

        Only swaps move the reserves between liquidity events, and a swap never
        lowers the product.

        Raises:
            InvariantViolation: If quote_reserve * base_reserve < invariant_last
        """
        if self.invariant < self.invariant_last:
            raise InvariantViolation(
                f"Reserve product drifted: {self.invariant} < recorded {self.invariant_last}"
            )

    def snapshot(self) -> tuple[int, int, int]:
        return self.quote_reserve, self.base_reserve, self.invariant_last

    def restore(self, snapshot: tuple[int, int, int]) -> None:
        self.quote_reserve, self.base_reserve, self.invariant_last = snapshot

    @contextmanager
    def atomic(self) -> Iterator[ReserveLedger]:
        """Run a block against the ledger, rolling back every field on error.

        Usage:
            with ledger.atomic():
                ledger.apply_delta(quote_in, -base_out)
                check_something()  # a raise here undoes apply_delta
        """
        saved = self.snapshot()
        try:
            yield self
        except BaseException:
            self.restore(saved)
            logger.debug("ledger_rolled_back", snapshot=saved)
            raise

    def _require_liquidity(self) -> None:
        if self.quote_reserve == 0 or self.base_reserve == 0:
            raise InsufficientLiquidity(
                f"Empty reserve: quote={self.quote_reserve}, base={self.base_reserve}"
            )

    def _nonzero_ratio(self, ratio: int) -> int:
        if ratio == 0:
            raise InsufficientLiquidity(
                f"Reserve ratio below WAD precision: quote={self.quote_reserve}, "
                f"base={self.base_reserve}"
            )
        return ratio
