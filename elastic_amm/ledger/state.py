"""Persisted ledger layout.

A ledger is persisted as three uint256 words, in this order:

    { quoteReserve: uint256, baseReserve: uint256, invariantLast: uint256 }

LedgerState validates a snapshot against that layout and converts it to
and from the 96-byte ABI encoding.
"""

from __future__ import annotations

from typing import Annotated, Any

from eth_abi import decode, encode  # type: ignore[attr-defined]
from pydantic import BaseModel, BeforeValidator, ConfigDict, Field

from elastic_amm.constants import UINT256_MAX
from elastic_amm.ledger.reserves import ReserveLedger

LEDGER_ABI_TYPES = ["uint256", "uint256", "uint256"]
LEDGER_ENCODED_SIZE = 32 * len(LEDGER_ABI_TYPES)


def validate_uint256(value: Any) -> int:
    """Validate that a value is a uint256, given as int or decimal string.

    Args:
        value: Value to validate

    Returns:
        The value as int

    Raises:
        ValueError: If value is not a non-negative integer within uint256 range
    """
    if isinstance(value, bool):
        raise ValueError("Uint256 cannot be a bool")

    if isinstance(value, str):
        try:
            value = int(value)
        except ValueError as err:
            raise ValueError(f"Uint256 must be a decimal integer string: '{value}'") from err

    if not isinstance(value, int):
        raise ValueError(f"Uint256 must be string or int, got {type(value).__name__}")

    if value < 0:
        raise ValueError(f"Uint256 cannot be negative: {value}")
    if value > UINT256_MAX:
        raise ValueError(f"Uint256 overflow: {value} > 2^256-1")
    return value


# 256-bit unsigned integer (accepts int or decimal string)
Uint256 = Annotated[
    int,
    BeforeValidator(validate_uint256),
    Field(description="256-bit unsigned integer"),
]


class LedgerState(BaseModel):
    """Immutable snapshot of a ReserveLedger."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    quote_reserve: Uint256 = Field(alias="quoteReserve")
    base_reserve: Uint256 = Field(alias="baseReserve")
    invariant_last: Uint256 = Field(alias="invariantLast")

    @classmethod
    def from_ledger(cls, ledger: ReserveLedger) -> LedgerState:
        return cls(
            quote_reserve=ledger.quote_reserve,
            base_reserve=ledger.base_reserve,
            invariant_last=ledger.invariant_last,
        )

    def to_ledger(self) -> ReserveLedger:
        """Build a fresh mutable ledger holding this snapshot's values."""
        return ReserveLedger(
            quote_reserve=self.quote_reserve,
            base_reserve=self.base_reserve,
            invariant_last=self.invariant_last,
        )

    def encode(self) -> bytes:
        """ABI-encode as (uint256 quoteReserve, uint256 baseReserve, uint256 invariantLast)."""
        return encode(
            LEDGER_ABI_TYPES,
            [self.quote_reserve, self.base_reserve, self.invariant_last],
        )

    @classmethod
    def decode(cls, data: bytes) -> LedgerState:
        """Decode the 96-byte ABI layout produced by encode().

        Raises:
            ValueError: If data is not exactly 96 bytes
        """
        if len(data) != LEDGER_ENCODED_SIZE:
            raise ValueError(
                f"Ledger encoding must be {LEDGER_ENCODED_SIZE} bytes, got {len(data)}"
            )
        quote_reserve, base_reserve, invariant_last = decode(LEDGER_ABI_TYPES, data)
        return cls(
            quote_reserve=quote_reserve,
            base_reserve=base_reserve,
            invariant_last=invariant_last,
        )
