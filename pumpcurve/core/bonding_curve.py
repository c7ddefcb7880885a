"""
Pump.fun Bonding Curve Pricing Engine

Implements the constant product AMM formula used by pump.fun:
    x * y = k

Where:
    x = virtual_sol_reserves
    y = virtual_token_reserves
    k = constant product

All quantities are atomic units (lamports, token base units) held as Python
ints. Divisions truncate toward zero exactly like the on-chain program; an
off-by-one here produces a quote the program rejects.
"""

from dataclasses import dataclass

from pumpcurve.core.errors import CurveComplete, ReservesExhausted
from pumpcurve.core.intmath import apply_bps, div_trunc
from pumpcurve.core.layouts import DEFAULT_DISCRIMINATORS, AccountKind


@dataclass(frozen=True)
class CurveState:
    """Snapshot of one token's BondingCurve account"""

    virtual_token_reserves: int
    virtual_sol_reserves: int
    real_token_reserves: int
    real_sol_reserves: int
    token_total_supply: int
    complete: bool
    discriminator: bytes = DEFAULT_DISCRIMINATORS[AccountKind.BONDING_CURVE]

    def _ensure_trading(self) -> None:
        if self.complete:
            raise CurveComplete()

    def get_buy_price(self, sol_amount: int) -> int:
        """
        Calculate tokens received for SOL input (buy)

        Uses formula:
            tokens_out = virtual_tokens - (k / (virtual_sol + sol_in) + 1)

        Args:
            sol_amount: Lamports to spend

        Returns:
            Token amount, clamped to real token reserves

        Raises:
            CurveComplete: if the curve has graduated
        """
        self._ensure_trading()

        if sol_amount <= 0:
            return 0

        product = self.virtual_sol_reserves * self.virtual_token_reserves
        new_virtual_sol = self.virtual_sol_reserves + sol_amount
        new_virtual_token = div_trunc(product, new_virtual_sol) + 1
        tokens_out = self.virtual_token_reserves - new_virtual_token
        return min(tokens_out, self.real_token_reserves)

    def get_sell_price(self, token_amount: int, fee_basis_points: int) -> int:
        """
        Calculate SOL received for token input (sell), net of protocol fee

        Uses formula:
            gross = tokens_in * virtual_sol / (virtual_tokens + tokens_in)
            net = gross - gross * fee_bps / 10000

        Args:
            token_amount: Tokens to sell
            fee_basis_points: Protocol fee from GlobalParameters

        Returns:
            Lamports received

        Raises:
            CurveComplete: if the curve has graduated
        """
        self._ensure_trading()

        if token_amount <= 0:
            return 0

        gross = div_trunc(
            token_amount * self.virtual_sol_reserves,
            self.virtual_token_reserves + token_amount,
        )
        fee = apply_bps(gross, fee_basis_points)
        return gross - fee

    def get_market_cap_sol(self) -> int:
        """Market cap in lamports at the current virtual price (0 if no virtual tokens)"""
        if self.virtual_token_reserves == 0:
            return 0

        return div_trunc(
            self.token_total_supply * self.virtual_sol_reserves,
            self.virtual_token_reserves,
        )

    def get_buy_out_price(self, amount: int, fee_basis_points: int) -> int:
        """
        Lamports needed to buy out the remaining supply, fee included

        The larger of amount and real_sol_reserves is priced, mirroring the
        program's own bookkeeping.

        Raises:
            ReservesExhausted: if the priced amount equals virtual token reserves
        """
        sol_tokens = max(amount, self.real_sol_reserves)
        denominator = self.virtual_token_reserves - sol_tokens
        if denominator == 0:
            raise ReservesExhausted("Buyout amount consumes all virtual token reserves")

        total_sell_value = div_trunc(sol_tokens * self.virtual_sol_reserves, denominator) + 1
        fee = apply_bps(total_sell_value, fee_basis_points)
        return total_sell_value + fee

    def get_final_market_cap_sol(self, fee_basis_points: int) -> int:
        """
        Projected market cap in lamports once every real token is sold

        Returns 0 when either the projection or the buyout it depends on
        would divide by zero.
        """
        total_virtual_tokens = self.virtual_token_reserves - self.real_token_reserves
        if total_virtual_tokens == 0:
            return 0

        buy_out_tokens = max(self.real_token_reserves, self.real_sol_reserves)
        if self.virtual_token_reserves - buy_out_tokens == 0:
            return 0

        total_sell_value = self.get_buy_out_price(self.real_token_reserves, fee_basis_points)
        total_virtual_value = self.virtual_sol_reserves + total_sell_value
        return div_trunc(self.token_total_supply * total_virtual_value, total_virtual_tokens)
