"""Collaborators an Exchange relies on.

The exchange never moves assets. It reads balances through a BalanceSource,
issues and retires claims through a ClaimToken, and returns the quantities
the caller must transfer.
"""

from typing import Protocol, runtime_checkable


@runtime_checkable
class BalanceSource(Protocol):
    """Actual asset balances held by the pair.

    Balances are read fresh for every operation. For an elastic quote asset
    they move with every rebase, independently of the tracked reserves.
    """

    def quote_balance(self) -> int:
        """Current quote balance held by the pair."""
        ...

    def base_balance(self) -> int:
        """Current base balance held by the pair."""
        ...


@runtime_checkable
class ClaimToken(Protocol):
    """Fungible claim on the pair's pooled balances."""

    def total_supply(self) -> int:
        """Outstanding claim tokens."""
        ...

    def mint(self, account: str, qty: int) -> None:
        """Issue qty claim tokens to account."""
        ...

    def burn(self, account: str, qty: int) -> None:
        """Retire qty claim tokens held by account.

        Implementations raise if account holds fewer than qty.
        """
        ...
