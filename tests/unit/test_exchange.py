"""Tests for the Exchange facade."""

import pytest
from structlog.testing import capture_logs

from elastic_amm import Asset, DecayKind, Exchange, ExchangeConfig, LedgerState, ReserveLedger
from elastic_amm.amm import price_after_fee
from elastic_amm.errors import BadRatio, Expired, NoDecayPresent
from elastic_amm.interfaces import BalanceSource, ClaimToken
from tests.helpers import (
    EXPIRED,
    INITIAL_BALANCE,
    LP1,
    LP2,
    TRADER,
    InMemoryClaimToken,
    PairBalances,
    PairSimulator,
)


class TestCollaborators:
    """Tests for the collaborator protocols."""

    def test_helpers_satisfy_protocols(self):
        """The in-memory helpers are structural BalanceSource / ClaimToken types."""
        assert isinstance(PairBalances(), BalanceSource)
        assert isinstance(InMemoryClaimToken(), ClaimToken)

    def test_new_exchange_has_empty_ledger(self):
        """Without a ledger the exchange starts empty."""
        exchange = Exchange(PairBalances(), InMemoryClaimToken())
        assert exchange.ledger.is_empty

    def test_resumes_from_ledger(self):
        """An existing ledger is used as-is."""
        ledger = ReserveLedger(quote_reserve=10, base_reserve=50, invariant_last=500)
        exchange = Exchange(PairBalances(10, 50), InMemoryClaimToken(), ledger=ledger)
        assert exchange.ledger is ledger


class TestExchangeLiquidity:
    """Tests for liquidity operations through the exchange."""

    def test_first_contribution_mints_claims(self, pair):
        """The first provider receives claims equal to the base quantity."""
        result = pair.add_liquidity(LP1, 10, 50, 1, 1)

        assert result.claim_issued == 50
        assert pair.claims.balance_of(LP1) == 50
        assert (pair.balances.quote, pair.balances.base) == (10, 50)
        assert pair.exchange.state() == LedgerState(
            quote_reserve=10, base_reserve=50, invariant_last=500
        )

    def test_decay_reads_fresh_balance(self, seeded_pair):
        """decay() compares the current balance with the ledger."""
        assert not seeded_pair.exchange.decay().is_present
        seeded_pair.rebase_up(40)
        decay = seeded_pair.exchange.decay()
        assert (decay.kind, decay.amount) == (DecayKind.QUOTE_EXCESS, 40)

    def test_base_token_liquidity(self, seeded_pair):
        """add_base_token_liquidity mints the gamma-weighted claims."""
        seeded_pair.rebase_up(40)
        result = seeded_pair.add_base_liquidity(LP2, 200, 1)

        assert result.claim_issued == 33
        assert seeded_pair.claims.balance_of(LP2) == 33
        assert seeded_pair.quote_decay == 0

    def test_quote_token_liquidity(self, seeded_pair):
        """add_quote_token_liquidity mints claims for restoring a deficit."""
        seeded_pair.rebase_down(2)
        result = seeded_pair.add_quote_liquidity(LP2, 2, 1)

        assert result.claim_issued == 5
        assert seeded_pair.quote_decay == 0

    def test_remove_liquidity_burns_claims(self, seeded_pair):
        """Redemption burns the holder's claims."""
        result = seeded_pair.remove_liquidity(LP1, 25)

        assert (result.quote_out, result.base_out) == (5, 25)
        assert seeded_pair.claims.balance_of(LP1) == 25

    def test_refused_burn_rolls_back_ledger(self, seeded_pair):
        """A holder without claims leaves the ledger untouched."""
        with pytest.raises(ValueError, match="cannot burn"):
            seeded_pair.exchange.remove_liquidity(25, 0, 0, LP2, expiration=float("inf"))
        assert seeded_pair.exchange.state().quote_reserve == 10
        assert seeded_pair.claims.total_supply() == 50

    def test_strict_ratio_raises(self, seeded_pair):
        """By default a ratio that cannot be honored raises."""
        with pytest.raises(BadRatio):
            seeded_pair.add_liquidity(LP2, 1, 4)

    def test_lenient_ratio_returns_offer(self):
        """With strict_ratio off, the offer comes back and nothing is minted."""
        pair = PairSimulator(config=ExchangeConfig(strict_ratio=False))
        pair.fund(LP1, quote=INITIAL_BALANCE, base=INITIAL_BALANCE)
        pair.add_liquidity(LP1, 10, 50)

        result = pair.add_liquidity(LP1, 1, 4)

        assert result.is_empty
        assert (result.quote_unused, result.base_unused) == (1, 4)
        assert pair.claims.total_supply() == 50


class TestExchangeSwaps:
    """Tests for swaps through the exchange."""

    def test_swap_result_names_assets(self, pair):
        """SwapResult reports which asset went in and out."""
        pair.add_liquidity(LP1, 10**6, 10**6)
        result = pair.swap_base_for_quote(TRADER, 100_000)

        assert (result.token_in, result.token_out) == (Asset.BASE, Asset.QUOTE)
        assert (result.amount_in, result.amount_out) == (100_000, 90661)

    def test_fee_comes_from_config(self):
        """The configured fee prices the swap."""
        pair = PairSimulator(config=ExchangeConfig(liquidity_fee_bps=0))
        pair.fund(LP1, quote=INITIAL_BALANCE, base=INITIAL_BALANCE)
        pair.fund(TRADER, quote=INITIAL_BALANCE)
        pair.add_liquidity(LP1, 10**5, 10**5)

        result = pair.swap_quote_for_base(TRADER, 10**4)

        assert result.amount_out == price_after_fee(10**4, 10**5, 10**5, 0)
        assert (result.token_in, result.token_out) == (Asset.QUOTE, Asset.BASE)


class TestExpiration:
    """Tests for expiration handling."""

    @pytest.mark.parametrize(
        "call",
        [
            lambda ex: ex.add_liquidity(10, 50, 1, 1, LP1, EXPIRED),
            lambda ex: ex.add_quote_token_liquidity(2, 1, LP1, EXPIRED),
            lambda ex: ex.add_base_token_liquidity(200, 1, LP1, EXPIRED),
            lambda ex: ex.swap_quote_for_base(10, 1, EXPIRED),
            lambda ex: ex.swap_base_for_quote(10, 1, EXPIRED),
            lambda ex: ex.remove_liquidity(10, 1, 1, LP1, EXPIRED),
        ],
    )
    def test_expired_operation_raises(self, seeded_pair, call):
        """Every operation refuses an expiration in the past."""
        with pytest.raises(Expired):
            call(seeded_pair.exchange)
        assert seeded_pair.exchange.state().quote_reserve == 10
        assert seeded_pair.claims.total_supply() == 50

    def test_expiration_equal_to_now_is_accepted(self, seeded_pair):
        """An operation expiring exactly now still runs."""
        result = seeded_pair.remove_liquidity(LP1, 10, expiration=seeded_pair.now)
        assert result.base_out == 10


class TestExchangeLogging:
    """Tests for exchange log events."""

    def test_completed_operation_logs_info(self, seeded_pair):
        """A completed operation logs one info event with its quantities."""
        with capture_logs() as logs:
            seeded_pair.remove_liquidity(LP1, 25)

        entries = [entry for entry in logs if entry["log_level"] == "info"]
        assert len(entries) == 1
        assert entries[0]["event"] == "liquidity_removed"
        assert entries[0]["holder"] == LP1
        assert entries[0]["base_out"] == 25

    def test_rejected_operation_logs_warning(self, seeded_pair):
        """A rejected operation logs a warning naming the error, then re-raises."""
        with capture_logs() as logs:
            with pytest.raises(NoDecayPresent):
                seeded_pair.add_base_liquidity(LP2, 200, 1)

        warnings = [entry for entry in logs if entry["log_level"] == "warning"]
        assert len(warnings) == 1
        assert warnings[0]["event"] == "operation_rejected"
        assert warnings[0]["operation"] == "add_base_token_liquidity"
        assert warnings[0]["error"] == "NoDecayPresent"
        assert warnings[0]["recipient"] == LP2
