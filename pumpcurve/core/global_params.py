"""
Global Parameters

Protocol-wide defaults read from the program's Global account. One snapshot
per fetch; re-fetch to observe parameter changes.
"""

from dataclasses import dataclass

from solders.pubkey import Pubkey

from pumpcurve.core.intmath import div_trunc
from pumpcurve.core.layouts import DEFAULT_DISCRIMINATORS, AccountKind


@dataclass(frozen=True)
class GlobalParameters:
    """Point-in-time view of the Global account"""

    initialized: bool
    authority: Pubkey
    fee_recipient: Pubkey
    initial_virtual_token_reserves: int
    initial_virtual_sol_reserves: int
    initial_real_token_reserves: int
    token_total_supply: int
    fee_basis_points: int
    discriminator: bytes = DEFAULT_DISCRIMINATORS[AccountKind.GLOBAL]

    def get_initial_buy_price(self, sol_amount: int) -> int:
        """
        Tokens received for a first buy on a curve that does not exist yet

        Same closed form as CurveState.get_buy_price, seeded from the
        initial virtual reserves.

        Args:
            sol_amount: Lamports to spend

        Returns:
            Token amount (atomic units), clamped to initial real reserves
        """
        if sol_amount <= 0:
            return 0

        product = self.initial_virtual_sol_reserves * self.initial_virtual_token_reserves
        new_virtual_sol = self.initial_virtual_sol_reserves + sol_amount
        new_virtual_token = div_trunc(product, new_virtual_sol) + 1
        tokens_out = self.initial_virtual_token_reserves - new_virtual_token
        return min(tokens_out, self.initial_real_token_reserves)
