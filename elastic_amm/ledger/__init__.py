"""Reserve ledger and its persisted layout."""

from elastic_amm.ledger.reserves import DecayKind, DecayState, ReserveLedger
from elastic_amm.ledger.state import LEDGER_ENCODED_SIZE, LedgerState, Uint256, validate_uint256

__all__ = [
    # Ledger
    "ReserveLedger",
    "DecayKind",
    "DecayState",
    # Persisted state
    "LedgerState",
    "LEDGER_ENCODED_SIZE",
    "Uint256",
    "validate_uint256",
]
