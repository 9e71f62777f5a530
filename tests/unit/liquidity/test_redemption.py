"""Tests for pro-rata redemption."""

import pytest

from elastic_amm.errors import (
    InsufficientLiquidity,
    InsufficientQuantity,
    InvariantViolation,
    SlippageExceeded,
)
from elastic_amm.ledger import ReserveLedger
from elastic_amm.liquidity import RedemptionResult, compute_remove_liquidity


class TestComputeRemoveLiquidity:
    """Tests for compute_remove_liquidity."""

    def test_full_redemption_after_rebase_down(self, ledger_10_50):
        """The only provider takes everything left, rebase loss included."""
        result = compute_remove_liquidity(50, 1, 1, 8, 50, 50, ledger_10_50)

        assert result == RedemptionResult(quote_out=8, base_out=50)
        assert ledger_10_50.snapshot() == (0, 0, 0)

    def test_partial_redemption(self):
        """Outputs are floored shares of the actual balances."""
        ledger = ReserveLedger(quote_reserve=50, base_reserve=250, invariant_last=12500)
        result = compute_remove_liquidity(50, 1, 1, 50, 250, 83, ledger)

        assert result == RedemptionResult(quote_out=30, base_out=150)
        assert ledger.snapshot() == (20, 100, 2000)

    def test_rebase_up_is_shared(self, ledger_10_50):
        """Quote from a rebase up is paid out; the ledger moves by its own share."""
        result = compute_remove_liquidity(25, 0, 0, 50, 50, 50, ledger_10_50)

        assert result == RedemptionResult(quote_out=25, base_out=25)
        assert ledger_10_50.snapshot() == (5, 25, 125)

    def test_zero_claims_raises(self, ledger_10_50):
        """Redeeming nothing is refused."""
        with pytest.raises(InsufficientQuantity):
            compute_remove_liquidity(0, 0, 0, 10, 50, 50, ledger_10_50)

    def test_more_than_supply_raises(self, ledger_10_50):
        """Redeeming more than the supply is refused."""
        with pytest.raises(InsufficientLiquidity):
            compute_remove_liquidity(51, 0, 0, 10, 50, 50, ledger_10_50)

    def test_zero_supply_raises(self, empty_ledger):
        """Nothing can be redeemed from an empty pair."""
        with pytest.raises(InsufficientLiquidity):
            compute_remove_liquidity(1, 0, 0, 0, 0, 0, empty_ledger)

    def test_minimum_not_met_leaves_ledger(self, ledger_10_50):
        """An output below its minimum raises before the ledger moves."""
        with pytest.raises(SlippageExceeded, match="quote"):
            compute_remove_liquidity(50, 9, 1, 8, 50, 50, ledger_10_50)
        assert ledger_10_50.snapshot() == (10, 50, 500)

    def test_drifted_ledger_raises(self, drifted_ledger):
        """Redemption refuses a ledger whose product fell since the last record."""
        with pytest.raises(InvariantViolation, match="drifted"):
            compute_remove_liquidity(25, 0, 0, 10, 50, 50, drifted_ledger)
        assert drifted_ledger.snapshot() == (10, 50, 10_000)
