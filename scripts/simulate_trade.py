#!/usr/bin/env python3
"""
Trade Simulation Script

Runs a what-if buy/sell round trip on a fresh curve seeded from the
protocol's launch parameters, through the paper trading engine.

Usage:
    python scripts/simulate_trade.py [--buy-sol LAMPORTS] [--sell-pct PCT] [--slippage-bps BPS]

Example:
    python scripts/simulate_trade.py --buy-sol 1000000000 --sell-pct 50
"""

import argparse
import sys
from pathlib import Path

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from solders.pubkey import Pubkey

from pumpcurve.core.amm import AMMSimulator
from pumpcurve.core.global_params import GlobalParameters
from pumpcurve.core.slippage import with_slippage_buy, with_slippage_sell
from pumpcurve.utils.logger import setup_logging
from pumpcurve.utils.paper_engine import PaperTradingEngine

LAMPORTS_PER_SOL = 1_000_000_000

# Mainnet launch parameters
DEFAULT_GLOBAL = GlobalParameters(
    initialized=True,
    authority=Pubkey.default(),
    fee_recipient=Pubkey.default(),
    initial_virtual_token_reserves=1_073_000_000_000_000,
    initial_virtual_sol_reserves=30_000_000_000,
    initial_real_token_reserves=793_100_000_000_000,
    token_total_supply=1_000_000_000_000_000,
    fee_basis_points=100,
)

MINT = "SimulatedMint"


def simulate(buy_sol: int, sell_pct: int, slippage_bps: int) -> bool:
    """Buy with buy_sol lamports, then sell sell_pct of the position"""
    simulator = AMMSimulator.from_global_parameters(DEFAULT_GLOBAL)
    engine = PaperTradingEngine(initial_balance_lamports=10 * LAMPORTS_PER_SOL)
    engine.open_curve(MINT, simulator)

    print(f"\n{'=' * 60}")
    print("Simulating BUY")
    print(f"{'=' * 60}\n")

    token_amount = DEFAULT_GLOBAL.get_initial_buy_price(buy_sol)
    max_sol_cost = with_slippage_buy(buy_sol, slippage_bps)
    print(f"Entry Amount: {buy_sol / LAMPORTS_PER_SOL} SOL")
    print(f"Slippage: {slippage_bps / 100}%")
    print(f"Tokens quoted: {token_amount:,}")

    buy = engine.execute_buy(MINT, token_amount, max_sol_cost)
    print(f"  SOL spent: {buy['sol_amount']:,} lamports (max {max_sol_cost:,})")
    print(f"  Tokens received: {buy['token_amount']:,}")

    print(f"\n{'=' * 60}")
    print(f"Simulating SELL of {sell_pct}%")
    print(f"{'=' * 60}\n")

    sell_tokens = buy["token_amount"] * sell_pct // 100
    expected = simulator.copy().apply_sell(sell_tokens).sol_amount
    min_sol_output = with_slippage_sell(expected, slippage_bps)

    sell = engine.execute_sell(MINT, sell_tokens, min_sol_output)
    print(f"  Tokens sold: {sell['token_amount']:,}")
    print(f"  SOL received: {sell['sol_amount']:,} lamports (min {min_sol_output:,})")
    print(f"  Profit: {sell['profit_lamports']:+,} lamports")
    print(f"  Balance: {engine.get_balance() / LAMPORTS_PER_SOL} SOL")

    state = simulator.snapshot()
    print("\nFinal reserves:")
    print(f"  virtual_sol_reserves:   {state.virtual_sol_reserves:,}")
    print(f"  virtual_token_reserves: {state.virtual_token_reserves:,}")
    print(f"  real_sol_reserves:      {state.real_sol_reserves:,}")
    print(f"  real_token_reserves:    {state.real_token_reserves:,}")

    return True


def main():
    """Main entry point"""
    parser = argparse.ArgumentParser(description="Simulate a bonding curve round trip")
    parser.add_argument("--buy-sol", type=int, default=LAMPORTS_PER_SOL // 10, help="Lamports to spend")
    parser.add_argument("--sell-pct", type=int, default=100, choices=range(0, 101), metavar="0-100")
    parser.add_argument("--slippage-bps", type=int, default=500)
    args = parser.parse_args()

    setup_logging({"level": "WARNING", "json_format": False})

    print("\nPumpCurve - Trade Simulator")
    if not simulate(args.buy_sol, args.sell_pct, args.slippage_bps):
        sys.exit(1)

    print(f"\n{'=' * 60}")
    print("Simulation complete!")
    print(f"{'=' * 60}\n")


if __name__ == "__main__":
    try:
        main()
    except KeyboardInterrupt:
        print("\n\nAborted by user.")
        sys.exit(1)
    except Exception as e:
        print(f"\n\nError: {e}")
        import traceback
        traceback.print_exc()
        sys.exit(1)
