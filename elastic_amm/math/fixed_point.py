"""WAD fixed-point math.

Ratios are represented as integers scaled by 10^18 (WAD). Multiplication
and division round half up so that repeated conversions between raw token
quantities and WAD ratios stay deterministic and symmetric.

All operands must be uint256 values. Products are formed in Python's
unbounded ints and narrowed back with an explicit uint256 check, so an
out-of-range result raises ArithmeticOverflow instead of wrapping.
"""

from __future__ import annotations

from elastic_amm.constants import WAD
from elastic_amm.safe_int import S, require_uint256

__all__ = [
    "WAD",
    "HALF_WAD",
    "w_div",
    "w_mul",
    "round_to_nearest",
    "abs_diff",
]

HALF_WAD = WAD // 2


# =============================================================================
# Core operations
# =============================================================================


def w_div(a: int, b: int) -> int:
    """Divide a by b, returning the quotient scaled to WAD.

    Computes (a * WAD + b / 2) / b, i.e. round-half-up division.

    Args:
        a: Dividend (raw or WAD-scaled)
        b: Divisor (same scale as a for a pure ratio)

    Returns:
        a / b as a WAD-scaled integer

    Raises:
        DivisionByZero: If b is zero
        ArithmeticOverflow: If an operand or the result is outside uint256

    Examples:
        w_div(25, 100) == 250_000_000_000_000_000  # 0.25
        w_div(100, 25) == 4 * WAD
    """
    require_uint256(a, "a")
    require_uint256(b, "b")
    return (S(a) * WAD).div_half_up(b).to_uint256()


def w_mul(a: int, b: int) -> int:
    """Multiply a by b where at least one side is WAD-scaled.

    Computes (a * b + WAD / 2) / WAD, rounding half up.

    Raises:
        ArithmeticOverflow: If an operand or the result is outside uint256
    """
    require_uint256(a, "a")
    require_uint256(b, "b")
    return ((S(a) * S(b) + HALF_WAD) // WAD).to_uint256()


def round_to_nearest(a: int, n: int) -> int:
    """Round a to the nearest multiple of n, halves rounding up.

    Examples:
        round_to_nearest(10000005, 10) == 10000010
        round_to_nearest(10000004, 10) == 10000000

    Raises:
        DivisionByZero: If n is zero
    """
    require_uint256(a, "a")
    require_uint256(n, "n")
    return (S(a).div_half_up(n) * n).to_uint256()


def abs_diff(a: int, b: int) -> int:
    """Unsigned absolute difference |a - b|."""
    require_uint256(a, "a")
    require_uint256(b, "b")
    return S(a).abs_diff(b).value
