"""
AMM Simulator

Mutable model of a bonding curve for multi-trade what-if runs. Seed it from
GlobalParameters (curve not created yet) or from a CurveState (curve already
trading), then apply buys and sells.

Order of operations differs between the two sides:
- buy:  price against current reserves, then move reserves
- sell: move token reserves first, then price against the updated reserves

Every mutation is computed in full before it is committed; a failed trade
leaves the reserves untouched.
"""

from dataclasses import dataclass

from pumpcurve.core.bonding_curve import CurveState
from pumpcurve.core.errors import ReservesExhausted
from pumpcurve.core.global_params import GlobalParameters
from pumpcurve.core.intmath import as_u64, div_trunc


@dataclass(frozen=True)
class AMMState:
    """Immutable copy of a simulator's reserves"""

    virtual_sol_reserves: int
    virtual_token_reserves: int
    real_sol_reserves: int
    real_token_reserves: int
    initial_virtual_token_reserves: int


@dataclass(frozen=True)
class TradeFill:
    """Realized amounts of one simulated trade"""

    token_amount: int
    sol_amount: int


class AMMSimulator:
    """Constant-product curve simulation handle"""

    def __init__(
        self,
        virtual_sol_reserves: int,
        virtual_token_reserves: int,
        real_sol_reserves: int,
        real_token_reserves: int,
        initial_virtual_token_reserves: int,
    ):
        self.virtual_sol_reserves = virtual_sol_reserves
        self.virtual_token_reserves = virtual_token_reserves
        self.real_sol_reserves = real_sol_reserves
        self.real_token_reserves = real_token_reserves
        # Scaling constant for the sell formula
        self.initial_virtual_token_reserves = initial_virtual_token_reserves

    @classmethod
    def from_global_parameters(cls, global_params: GlobalParameters) -> "AMMSimulator":
        """Simulate a fresh curve using the protocol's initial reserves"""
        return cls(
            virtual_sol_reserves=global_params.initial_virtual_sol_reserves,
            virtual_token_reserves=global_params.initial_virtual_token_reserves,
            real_sol_reserves=0,
            real_token_reserves=global_params.initial_real_token_reserves,
            initial_virtual_token_reserves=global_params.initial_virtual_token_reserves,
        )

    @classmethod
    def from_curve_state(
        cls, curve: CurveState, initial_virtual_token_reserves: int
    ) -> "AMMSimulator":
        """
        Simulate an existing curve

        Args:
            curve: Decoded BondingCurve snapshot
            initial_virtual_token_reserves: Protocol's initial virtual token
                reserves (not recoverable from the curve itself)
        """
        return cls(
            virtual_sol_reserves=curve.virtual_sol_reserves,
            virtual_token_reserves=curve.virtual_token_reserves,
            real_sol_reserves=curve.real_sol_reserves,
            real_token_reserves=curve.real_token_reserves,
            initial_virtual_token_reserves=initial_virtual_token_reserves,
        )

    def snapshot(self) -> AMMState:
        return AMMState(
            virtual_sol_reserves=self.virtual_sol_reserves,
            virtual_token_reserves=self.virtual_token_reserves,
            real_sol_reserves=self.real_sol_reserves,
            real_token_reserves=self.real_token_reserves,
            initial_virtual_token_reserves=self.initial_virtual_token_reserves,
        )

    def restore(self, state: AMMState) -> None:
        """Reset reserves to a previous snapshot"""
        self.virtual_sol_reserves = state.virtual_sol_reserves
        self.virtual_token_reserves = state.virtual_token_reserves
        self.real_sol_reserves = state.real_sol_reserves
        self.real_token_reserves = state.real_token_reserves
        self.initial_virtual_token_reserves = state.initial_virtual_token_reserves

    def copy(self) -> "AMMSimulator":
        """Independent handle with the same reserves"""
        state = self.snapshot()
        return AMMSimulator(
            virtual_sol_reserves=state.virtual_sol_reserves,
            virtual_token_reserves=state.virtual_token_reserves,
            real_sol_reserves=state.real_sol_reserves,
            real_token_reserves=state.real_token_reserves,
            initial_virtual_token_reserves=state.initial_virtual_token_reserves,
        )

    def quote_buy(self, token_amount: int) -> int:
        """
        Lamports needed to take token_amount out of the curve

        Uses formula:
            new_virtual_sol = k / (virtual_tokens - tokens) + 1
            sol_needed = max(new_virtual_sol - virtual_sol, 0)

        Raises:
            ReservesExhausted: if the buy would empty virtual token reserves
        """
        return self._quote_buy(self.virtual_sol_reserves, self.virtual_token_reserves, token_amount)

    @staticmethod
    def _quote_buy(virtual_sol: int, virtual_token: int, token_amount: int) -> int:
        product = virtual_sol * virtual_token
        new_virtual_token = virtual_token - token_amount
        if new_virtual_token <= 0:
            raise ReservesExhausted(
                f"Buying {token_amount} tokens exhausts virtual token reserves ({virtual_token})"
            )
        new_virtual_sol = div_trunc(product, new_virtual_token) + 1
        return max(new_virtual_sol - virtual_sol, 0)

    def apply_buy(self, token_amount: int) -> TradeFill:
        """
        Buy tokens, clamped to real token reserves

        Returns:
            TradeFill with tokens filled and lamports paid
        """
        as_u64(token_amount, "token_amount")

        tokens_filled = min(token_amount, self.real_token_reserves)
        sol_cost = self._quote_buy(
            self.virtual_sol_reserves, self.virtual_token_reserves, tokens_filled
        )

        self.virtual_token_reserves -= tokens_filled
        self.real_token_reserves -= tokens_filled
        self.virtual_sol_reserves += sol_cost
        self.real_sol_reserves += sol_cost

        return TradeFill(token_amount=tokens_filled, sol_amount=sol_cost)

    def quote_sell(self, token_amount: int) -> int:
        """
        Lamports received for token_amount against current reserves

        Uses formula:
            proportion = tokens * scaling / virtual_tokens
            sol_out = virtual_sol * proportion / scaling

        Clamped to real SOL reserves. No fee is applied here.
        """
        return self._quote_sell(
            self.virtual_sol_reserves,
            self.virtual_token_reserves,
            self.real_sol_reserves,
            token_amount,
        )

    def _quote_sell(
        self, virtual_sol: int, virtual_token: int, real_sol: int, token_amount: int
    ) -> int:
        scaling_factor = self.initial_virtual_token_reserves
        if virtual_token == 0 or scaling_factor == 0:
            raise ReservesExhausted("Cannot price a sell against zero token reserves")

        token_sell_proportion = div_trunc(token_amount * scaling_factor, virtual_token)
        sol_received = div_trunc(virtual_sol * token_sell_proportion, scaling_factor)
        return min(sol_received, real_sol)

    def apply_sell(self, token_amount: int) -> TradeFill:
        """
        Sell tokens into the curve

        Token reserves grow before the price is read.

        Returns:
            TradeFill with tokens sold and lamports received
        """
        as_u64(token_amount, "token_amount")

        new_virtual_token = self.virtual_token_reserves + token_amount
        new_real_token = self.real_token_reserves + token_amount
        sol_received = self._quote_sell(
            self.virtual_sol_reserves, new_virtual_token, self.real_sol_reserves, token_amount
        )

        self.virtual_token_reserves = new_virtual_token
        self.real_token_reserves = new_real_token
        self.virtual_sol_reserves -= sol_received
        self.real_sol_reserves -= sol_received

        return TradeFill(token_amount=token_amount, sol_amount=sol_received)
