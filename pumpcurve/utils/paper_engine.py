"""
Paper Trading Engine

Simulates trades against per-mint AMM simulators:
- Integer lamport balance and token positions
- Enforces the same slippage bounds the program checks on-chain
  (max_sol_cost on buys, min_sol_output on sells)
- Keeps an in-memory trade log
"""

import time
from typing import Dict, List, Optional

import structlog

from pumpcurve.core.amm import AMMSimulator, TradeFill
from pumpcurve.core.errors import InsufficientBalance, SlippageExceeded

logger = structlog.get_logger()


class PaperTradingEngine:
    """Simulates trading without real transactions"""

    def __init__(self, initial_balance_lamports: int):
        """
        Initialize paper trading engine

        Args:
            initial_balance_lamports: Starting SOL balance in lamports
        """
        if initial_balance_lamports < 0:
            raise ValueError("Initial balance must be non-negative")

        self.balance_lamports = initial_balance_lamports

        # mint -> simulator
        self.curves: Dict[str, AMMSimulator] = {}

        # mint -> position data
        self.positions: Dict[str, Dict] = {}

        self.trades: List[Dict] = []

        logger.info(
            "Paper trading engine initialized",
            initial_balance_lamports=initial_balance_lamports,
        )

    def open_curve(self, mint: str, simulator: AMMSimulator) -> None:
        """Register the simulator that prices trades for a mint"""
        self.curves[mint] = simulator

    def _curve(self, mint: str) -> AMMSimulator:
        simulator = self.curves.get(mint)
        if simulator is None:
            raise ValueError(f"No curve registered for {mint}")
        return simulator

    def execute_buy(self, mint: str, token_amount: int, max_sol_cost: int) -> Dict:
        """
        Simulate buy transaction

        Args:
            mint: Token mint
            token_amount: Tokens wanted (clamped to the curve's real reserves)
            max_sol_cost: Maximum lamports authorized (see with_slippage_buy)

        Returns:
            Trade result dict

        Raises:
            ValueError: if nothing is filled (zero request or no real tokens left)
            SlippageExceeded: if the fill costs more than max_sol_cost
            InsufficientBalance: if the balance cannot cover the fill
        """
        simulator = self._curve(mint)
        before = simulator.snapshot()

        fill = simulator.apply_buy(token_amount)

        if fill.token_amount == 0:
            simulator.restore(before)
            logger.error(
                "Paper buy filled no tokens",
                mint=mint,
                requested=token_amount,
                real_token_reserves=before.real_token_reserves,
            )
            raise ValueError("No tokens filled")

        if fill.sol_amount > max_sol_cost:
            simulator.restore(before)
            logger.error(
                "Paper buy exceeded slippage",
                mint=mint,
                max_sol_cost=max_sol_cost,
                sol_cost=fill.sol_amount,
            )
            raise SlippageExceeded("Too much SOL required", bound=max_sol_cost, actual=fill.sol_amount)

        if fill.sol_amount > self.balance_lamports:
            simulator.restore(before)
            logger.error(
                "Insufficient balance for paper buy",
                balance=self.balance_lamports,
                cost=fill.sol_amount,
            )
            raise InsufficientBalance("Insufficient balance")

        self.balance_lamports -= fill.sol_amount

        position = self.positions.setdefault(
            mint, {"mint": mint, "entry_time": time.time(), "tokens": 0, "sol_invested": 0}
        )
        position["tokens"] += fill.token_amount
        position["sol_invested"] += fill.sol_amount

        result = self._record_trade("buy", mint, fill)

        logger.info(
            "Paper BUY executed",
            mint=mint,
            sol_spent=fill.sol_amount,
            tokens_received=fill.token_amount,
            balance_remaining=self.balance_lamports,
        )
        return result

    def execute_sell(self, mint: str, token_amount: int, min_sol_output: int) -> Dict:
        """
        Simulate sell transaction

        Args:
            mint: Token mint
            token_amount: Tokens to sell
            min_sol_output: Minimum lamports accepted (see with_slippage_sell)

        Returns:
            Trade result dict (includes profit_lamports)

        Raises:
            ValueError: if there is no position or too few tokens
            SlippageExceeded: if the fill returns less than min_sol_output
        """
        position = self.positions.get(mint)
        if not position:
            logger.error("No position found for paper sell", mint=mint)
            raise ValueError("No position found")

        if token_amount > position["tokens"]:
            logger.error(
                "Insufficient tokens for paper sell",
                available=position["tokens"],
                requested=token_amount,
            )
            raise ValueError("Insufficient tokens")

        simulator = self._curve(mint)
        before = simulator.snapshot()

        fill = simulator.apply_sell(token_amount)

        if fill.sol_amount < min_sol_output:
            simulator.restore(before)
            logger.error(
                "Paper sell below minimum output",
                mint=mint,
                min_sol_output=min_sol_output,
                sol_received=fill.sol_amount,
            )
            raise SlippageExceeded(
                "Too little SOL received", bound=min_sol_output, actual=fill.sol_amount
            )

        self.balance_lamports += fill.sol_amount

        if token_amount == position["tokens"]:
            sol_invested = position["sol_invested"]
        else:
            # Cost basis of the sold slice, truncated like every other amount
            sol_invested = position["sol_invested"] * token_amount // position["tokens"]
        profit_lamports = fill.sol_amount - sol_invested

        if token_amount == position["tokens"]:
            del self.positions[mint]
        else:
            position["tokens"] -= token_amount
            position["sol_invested"] -= sol_invested

        result = self._record_trade("sell", mint, fill, profit_lamports=profit_lamports)

        logger.info(
            "Paper SELL executed",
            mint=mint,
            tokens_sold=fill.token_amount,
            sol_received=fill.sol_amount,
            profit_lamports=profit_lamports,
            balance=self.balance_lamports,
        )
        return result

    def _record_trade(
        self, trade_type: str, mint: str, fill: TradeFill, profit_lamports: int = 0
    ) -> Dict:
        trade = {
            "type": trade_type,
            "mint": mint,
            "token_amount": fill.token_amount,
            "sol_amount": fill.sol_amount,
            "profit_lamports": profit_lamports,
            "balance_lamports": self.balance_lamports,
            "timestamp": time.time(),
        }
        self.trades.append(trade)
        return trade

    def get_position(self, mint: str) -> Optional[Dict]:
        return self.positions.get(mint)

    def get_all_positions(self) -> List[Dict]:
        return list(self.positions.values())

    def get_balance(self) -> int:
        return self.balance_lamports

    def get_trade_log(self) -> List[Dict]:
        return list(self.trades)
