"""Mathematical utilities for the elastic AMM core.

This package provides the fixed-point primitives every formula builds on:
- w_div / w_mul: WAD-scaled division and multiplication, rounding half up
- round_to_nearest / abs_diff: integer rounding helpers
"""

from elastic_amm.math.fixed_point import HALF_WAD, WAD, abs_diff, round_to_nearest, w_div, w_mul

__all__ = ["WAD", "HALF_WAD", "w_div", "w_mul", "round_to_nearest", "abs_diff"]
