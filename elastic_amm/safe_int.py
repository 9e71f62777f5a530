"""Checked integer wrapper for reserve and claim quantities.

Every quantity the core handles is an unsigned integer that must fit in
uint256. SafeInt keeps the formulas readable while making the failure
modes explicit:
- Division by zero raises DivisionByZero
- Subtraction below zero raises Underflow
- Narrowing a result outside uint256 raises ArithmeticOverflow

Intermediate products are plain Python ints, so they never wrap; the range
check happens once, when a result is narrowed back with to_uint256().

Usage pattern:
    from elastic_amm.safe_int import S

    def pro_rata(qty: int, balance: int, supply: int) -> int:
        return (S(qty) * S(balance) // S(supply)).to_uint256()
"""

from __future__ import annotations

from elastic_amm.constants import UINT256_MAX


class SafeIntError(ArithmeticError):
    """Base class for checked arithmetic errors."""

    pass


class DivisionByZero(SafeIntError):
    """Division, modulo or rounding by zero."""

    pass


class Underflow(SafeIntError):
    """Subtraction would produce a negative result."""

    pass


class ArithmeticOverflow(SafeIntError):
    """Value cannot be represented as a uint256."""

    pass


class SafeInt:
    """Integer with checked arithmetic operations.

    Addition and multiplication are exact. Subtraction refuses to go
    negative, division refuses a zero divisor, and to_uint256() refuses
    anything outside [0, 2^256 - 1].

    Attributes:
        value: The underlying integer value (read-only)
    """

    __slots__ = ("_value",)
    _value: int

    def __init__(self, value: int | SafeInt) -> None:
        """Create a SafeInt from an integer or another SafeInt.

        Raises:
            TypeError: If value is not an int or SafeInt (bools are rejected)
        """
        if isinstance(value, SafeInt):
            self._value = value._value
        elif isinstance(value, int) and not isinstance(value, bool):
            self._value = value
        else:
            raise TypeError(f"SafeInt requires int, got {type(value).__name__}")

    @property
    def value(self) -> int:
        """The underlying integer value."""
        return self._value

    def __repr__(self) -> str:
        return f"SafeInt({self._value})"

    def __str__(self) -> str:
        return str(self._value)

    def __hash__(self) -> int:
        return hash(self._value)

    # --- Arithmetic operations ---

    def __add__(self, other: SafeInt | int) -> SafeInt:
        return SafeInt(self._value + _extract_value(other))

    def __radd__(self, other: int) -> SafeInt:
        return SafeInt(other + self._value)

    def __sub__(self, other: SafeInt | int) -> SafeInt:
        """Subtract other from self.

        Raises:
            Underflow: If result would be negative
        """
        other_val = _extract_value(other)
        result = self._value - other_val
        if result < 0:
            raise Underflow(f"Underflow: {self._value} - {other_val} = {result}")
        return SafeInt(result)

    def __rsub__(self, other: int) -> SafeInt:
        result = other - self._value
        if result < 0:
            raise Underflow(f"Underflow: {other} - {self._value} = {result}")
        return SafeInt(result)

    def __mul__(self, other: SafeInt | int) -> SafeInt:
        return SafeInt(self._value * _extract_value(other))

    def __rmul__(self, other: int) -> SafeInt:
        return SafeInt(other * self._value)

    def __floordiv__(self, other: SafeInt | int) -> SafeInt:
        """Integer division, rounding down.

        Raises:
            DivisionByZero: If other is zero
        """
        other_val = _extract_value(other)
        if other_val == 0:
            raise DivisionByZero(f"Division by zero: {self._value} // 0")
        return SafeInt(self._value // other_val)

    # --- Comparison operations ---

    def __eq__(self, other: object) -> bool:
        if isinstance(other, SafeInt):
            return self._value == other._value
        if isinstance(other, int):
            return self._value == other
        return NotImplemented

    def __lt__(self, other: SafeInt | int) -> bool:
        return self._value < _extract_value(other)

    def __le__(self, other: SafeInt | int) -> bool:
        return self._value <= _extract_value(other)

    def __gt__(self, other: SafeInt | int) -> bool:
        return self._value > _extract_value(other)

    def __ge__(self, other: SafeInt | int) -> bool:
        return self._value >= _extract_value(other)

    # --- Conversion ---

    def __int__(self) -> int:
        return self._value

    def __bool__(self) -> bool:
        return self._value != 0

    def __index__(self) -> int:
        return self._value

    # --- Named operations ---

    def ceiling_div(self, other: SafeInt | int) -> SafeInt:
        """Ceiling division (rounds up).

        Equivalent to: (self + other - 1) // other

        Raises:
            DivisionByZero: If other is zero
        """
        other_val = _extract_value(other)
        if other_val == 0:
            raise DivisionByZero(f"Ceiling division by zero: {self._value}")
        return SafeInt((self._value + other_val - 1) // other_val)

    def div_half_up(self, other: SafeInt | int) -> SafeInt:
        """Division rounding half up: (self + other // 2) // other.

        Raises:
            DivisionByZero: If other is zero
        """
        other_val = _extract_value(other)
        if other_val == 0:
            raise DivisionByZero(f"Division by zero: {self._value} // 0")
        return SafeInt((self._value + other_val // 2) // other_val)

    def abs_diff(self, other: SafeInt | int) -> SafeInt:
        """Unsigned distance between self and other."""
        return SafeInt(abs(self._value - _extract_value(other)))

    def saturating_sub(self, other: SafeInt | int) -> SafeInt:
        """Subtract, clamping the result to zero instead of raising."""
        return SafeInt(max(0, self._value - _extract_value(other)))

    def to_uint256(self) -> int:
        """Narrow to int, validating uint256 bounds.

        Raises:
            ArithmeticOverflow: If value is negative or exceeds 2^256-1
        """
        if self._value < 0:
            raise ArithmeticOverflow(f"Negative value cannot be uint256: {self._value}")
        if self._value > UINT256_MAX:
            raise ArithmeticOverflow(f"Value exceeds uint256 max: {self._value}")
        return self._value


def _extract_value(x: SafeInt | int) -> int:
    """Extract integer value from SafeInt or int."""
    if isinstance(x, SafeInt):
        return x._value
    return x


def require_uint256(value: int, name: str = "value") -> int:
    """Validate that an input quantity is an int inside the uint256 range.

    Raises:
        TypeError: If value is not an int
        ArithmeticOverflow: If value is negative or exceeds 2^256-1
    """
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeError(f"{name} must be int, got {type(value).__name__}")
    if not 0 <= value <= UINT256_MAX:
        raise ArithmeticOverflow(f"{name} outside uint256 range: {value}")
    return value


# Convenience alias for concise code
S = SafeInt
