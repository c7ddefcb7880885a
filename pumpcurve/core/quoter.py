"""
Trade Quoter

Turns a committed amount into the two numbers a buy/sell instruction needs:
the expected amount and its slippage bound.

    buy:  token_amount = curve.get_buy_price(sol)      max_sol_cost   = sol + slippage
    sell: sol_amount   = curve.get_sell_price(tokens)  min_sol_output = sol - slippage

Instruction building, signing and submission live elsewhere; only the
amounts are produced here.
"""

from dataclasses import dataclass
from typing import Optional

import structlog

from pumpcurve.core.bonding_curve import CurveState
from pumpcurve.core.errors import AccountNotFound
from pumpcurve.core.global_params import GlobalParameters
from pumpcurve.core.slippage import with_slippage_buy, with_slippage_sell

logger = structlog.get_logger()


@dataclass(frozen=True)
class BuyQuote:
    sol_amount: int
    token_amount: int
    max_sol_cost: int


@dataclass(frozen=True)
class SellQuote:
    token_amount: int
    sol_amount: int
    min_sol_output: int


class Quoter:
    """Quotes buys and sells against decoded account snapshots"""

    def __init__(self, global_params: GlobalParameters, config):
        """
        Initialize quoter

        Args:
            global_params: Decoded Global account (fee bps, initial reserves)
            config: EngineConfig supplying default_slippage_bps
        """
        self.global_params = global_params
        self.config = config

    def _slippage(self, slippage_bps: Optional[int]) -> int:
        if slippage_bps is None:
            return self.config.default_slippage_bps
        if slippage_bps < 0:
            raise ValueError(f"slippage_bps must be non-negative, got {slippage_bps}")
        return slippage_bps

    @staticmethod
    def _require_curve(curve: Optional[CurveState]) -> CurveState:
        if curve is None:
            raise AccountNotFound("Bonding curve account not found")
        return curve

    def quote_buy(
        self, curve: Optional[CurveState], sol_amount: int, slippage_bps: Optional[int] = None
    ) -> BuyQuote:
        """
        Quote a buy for a SOL amount

        Args:
            curve: Decoded BondingCurve account (None if not found)
            sol_amount: Lamports to spend
            slippage_bps: Tolerance; defaults to config.default_slippage_bps

        Returns:
            BuyQuote

        Raises:
            AccountNotFound: if curve is None
            CurveComplete: if the curve has graduated
        """
        curve = self._require_curve(curve)
        bps = self._slippage(slippage_bps)

        token_amount = curve.get_buy_price(sol_amount)
        quote = BuyQuote(
            sol_amount=sol_amount,
            token_amount=token_amount,
            max_sol_cost=with_slippage_buy(sol_amount, bps),
        )

        logger.debug(
            "Buy quoted",
            sol_amount=sol_amount,
            token_amount=token_amount,
            max_sol_cost=quote.max_sol_cost,
            slippage_bps=bps,
        )
        return quote

    def quote_initial_buy(self, sol_amount: int, slippage_bps: Optional[int] = None) -> BuyQuote:
        """Quote the creator's first buy on a curve that does not exist yet"""
        bps = self._slippage(slippage_bps)

        token_amount = self.global_params.get_initial_buy_price(sol_amount)
        quote = BuyQuote(
            sol_amount=sol_amount,
            token_amount=token_amount,
            max_sol_cost=with_slippage_buy(sol_amount, bps),
        )

        logger.debug(
            "Initial buy quoted",
            sol_amount=sol_amount,
            token_amount=token_amount,
            max_sol_cost=quote.max_sol_cost,
        )
        return quote

    def quote_sell(
        self, curve: Optional[CurveState], token_amount: int, slippage_bps: Optional[int] = None
    ) -> SellQuote:
        """
        Quote a sell for a token amount, net of the protocol fee

        Raises:
            AccountNotFound: if curve is None
            CurveComplete: if the curve has graduated
        """
        curve = self._require_curve(curve)
        bps = self._slippage(slippage_bps)

        sol_amount = curve.get_sell_price(token_amount, self.global_params.fee_basis_points)
        quote = SellQuote(
            token_amount=token_amount,
            sol_amount=sol_amount,
            min_sol_output=with_slippage_sell(sol_amount, bps),
        )

        logger.debug(
            "Sell quoted",
            token_amount=token_amount,
            sol_amount=sol_amount,
            min_sol_output=quote.min_sol_output,
            fee_bps=self.global_params.fee_basis_points,
            slippage_bps=bps,
        )
        return quote
