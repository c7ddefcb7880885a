"""
Tests for the trade quoter

Run with: pytest pumpcurve/tests/test_quoter.py -v
"""

from dataclasses import replace

import pytest

from pumpcurve.core.errors import AccountNotFound, CurveComplete
from pumpcurve.core.quoter import BuyQuote, Quoter, SellQuote
from pumpcurve.utils.config import EngineConfig


@pytest.fixture
def quoter(global_params, config):
    """Quoter with 1% fee and 5% default slippage"""
    return Quoter(global_params, config)


class TestQuoteBuy:
    """Test buy quotes"""

    def test_buy_default_slippage(self, quoter, curve):
        """Should apply the configured 5% default"""
        quote = quoter.quote_buy(curve, 1_000_000_000)

        assert quote == BuyQuote(
            sol_amount=1_000_000_000,
            token_amount=34_612_903_225_806,
            max_sol_cost=1_050_000_000,
        )

    def test_buy_explicit_slippage(self, quoter, curve):
        """Should prefer the per-call tolerance"""
        assert quoter.quote_buy(curve, 1_000_000_000, slippage_bps=100).max_sol_cost == 1_010_000_000

    def test_config_default_is_explicit(self, global_params, curve):
        """Should read the default from the config it was given"""
        tight = Quoter(global_params, EngineConfig(default_slippage_bps=0))
        assert tight.quote_buy(curve, 1_000_000_000).max_sol_cost == 1_000_000_000

    def test_missing_curve(self, quoter):
        """Should raise AccountNotFound when the curve was not fetched"""
        with pytest.raises(AccountNotFound):
            quoter.quote_buy(None, 1_000_000_000)

    def test_complete_curve(self, quoter, curve):
        """Should surface CurveComplete"""
        with pytest.raises(CurveComplete):
            quoter.quote_buy(replace(curve, complete=True), 1_000_000_000)

    def test_negative_slippage(self, quoter, curve):
        """Should reject negative tolerances"""
        with pytest.raises(ValueError):
            quoter.quote_buy(curve, 1_000_000_000, slippage_bps=-1)


class TestQuoteInitialBuy:
    """Test create-and-buy quotes"""

    def test_initial_buy(self, quoter):
        """Should quote from the global initial reserves"""
        quote = quoter.quote_initial_buy(1_000_000_000, slippage_bps=500)

        assert quote.token_amount == 34_612_903_225_806
        assert quote.max_sol_cost == 1_050_000_000

    def test_zero_buy(self, quoter):
        """Should quote zero tokens for zero SOL"""
        assert quoter.quote_initial_buy(0).token_amount == 0


class TestQuoteSell:
    """Test sell quotes"""

    def test_sell_uses_global_fee(self, quoter, curve):
        """Should net out the fee from GlobalParameters"""
        quote = quoter.quote_sell(curve, 1_000_000_000)

        assert quote == SellQuote(token_amount=1_000_000_000, sol_amount=27_679, min_sol_output=26_296)

    def test_small_sell_truncation(self, quoter, curve):
        """Should truncate both fee and slippage"""
        quote = quoter.quote_sell(curve, 1_000_000, slippage_bps=500)

        assert quote.sol_amount == 27
        assert quote.min_sol_output == 26

    def test_missing_curve(self, quoter):
        """Should raise AccountNotFound"""
        with pytest.raises(AccountNotFound, match="not found"):
            quoter.quote_sell(None, 1)
