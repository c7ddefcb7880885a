"""Slippage bounds handed to the buy/sell instructions."""

from pumpcurve.core.intmath import apply_bps


def with_slippage_buy(sol_amount: int, basis_points: int) -> int:
    """Maximum lamports a buyer authorizes: amount + amount * bps / 10000"""
    return sol_amount + apply_bps(sol_amount, basis_points)


def with_slippage_sell(sol_amount: int, basis_points: int) -> int:
    """Minimum lamports a seller accepts: amount - amount * bps / 10000 (not clamped)"""
    return sol_amount - apply_bps(sol_amount, basis_points)
