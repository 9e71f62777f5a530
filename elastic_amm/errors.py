"""Exchange error classes.

Every error aborts the whole operation and leaves the reserve ledger
untouched. Nothing is retried; callers fix their inputs and resubmit.

Arithmetic failures (DivisionByZero, Underflow, ArithmeticOverflow) come
from elastic_amm.safe_int and are re-exported here so callers can import
the full taxonomy from one place.
"""

from elastic_amm.safe_int import (
    ArithmeticOverflow,
    DivisionByZero,
    SafeIntError,
    Underflow,
)

__all__ = [
    "ExchangeError",
    "InsufficientQuantity",
    "InsufficientLiquidity",
    "SlippageExceeded",
    "NoDecayPresent",
    "DecayResolutionTooSmall",
    "BadRatio",
    "InvariantViolation",
    "Expired",
    "ReserveUnderflow",
    # Arithmetic
    "SafeIntError",
    "DivisionByZero",
    "Underflow",
    "ArithmeticOverflow",
]


class ExchangeError(Exception):
    """Base error for exchange operations."""

    pass


class InsufficientQuantity(ExchangeError):
    """A required input quantity is zero or negative."""

    pass


class InsufficientLiquidity(ExchangeError):
    """Operation attempted against an empty reserve or claim supply."""

    pass


class SlippageExceeded(ExchangeError):
    """A computed quantity falls short of the caller's minimum."""

    pass


class NoDecayPresent(ExchangeError):
    """Single-asset entry requested without actionable decay of the right kind."""

    pass


class DecayResolutionTooSmall(ExchangeError):
    """The decay-correcting contribution rounds to zero."""

    pass


class BadRatio(ExchangeError):
    """Desired quantities cannot be honored at the current reserve ratio."""

    pass


class InvariantViolation(ExchangeError):
    """An internal consistency check failed. Never expected to be raised."""

    pass


class Expired(ExchangeError):
    """The operation's expiration timestamp has passed."""

    pass


class ReserveUnderflow(ExchangeError, Underflow):
    """A tracked reserve would become negative."""

    pass
