#!/usr/bin/env python3
"""
pumpcurve - Command Line Entry Point

Decodes account dumps and prints quotes:
    python -m pumpcurve inspect ACCOUNT_FILE
    python -m pumpcurve quote --global GLOBAL_FILE --curve CURVE_FILE --buy-sol 100000000
    python -m pumpcurve quote --global GLOBAL_FILE --curve CURVE_FILE --sell-tokens 1000000000
    python -m pumpcurve quote --global GLOBAL_FILE --buy-sol 100000000   # create-and-buy

Account files hold the raw account data (as returned by getAccountInfo),
either as raw bytes, hex, or base64 (--encoding).
"""

import argparse
import base64
import sys
from pathlib import Path
from typing import List, Optional

from pumpcurve.core.bonding_curve import CurveState
from pumpcurve.core.decoder import AccountDecoder
from pumpcurve.core.errors import CurveEngineError
from pumpcurve.core.quoter import Quoter
from pumpcurve.utils.config import EngineConfig, load_config
from pumpcurve.utils.logger import get_logger, setup_logging

logger = get_logger(__name__)

LAMPORTS_PER_SOL = 1_000_000_000


def read_account_file(path: str, encoding: str = "raw") -> bytes:
    """Read an account dump as raw bytes"""
    file_path = Path(path)
    if not file_path.exists():
        raise FileNotFoundError(f"Account file not found: {file_path}")

    data = file_path.read_bytes()
    if encoding == "hex":
        return bytes.fromhex(data.decode("ascii").strip())
    if encoding == "base64":
        return base64.b64decode(data.strip())
    return data


def resolve_config(config_path: Optional[str]) -> EngineConfig:
    """Load the YAML config if given, otherwise built-in defaults"""
    if config_path:
        return load_config(config_path)
    return EngineConfig()


def cmd_inspect(args, config: EngineConfig) -> int:
    decoder = AccountDecoder.from_config(config)
    record = decoder.decode_any(read_account_file(args.account, args.encoding))

    print(f"{type(record).__name__}:")
    print(f"  program: {config.program_id}")
    for name, value in vars(record).items():
        if isinstance(value, bytes):
            value = value.hex()
        print(f"  {name}: {value}")

    if isinstance(record, CurveState):
        market_cap = record.get_market_cap_sol()
        print(f"  market_cap_sol: {market_cap / LAMPORTS_PER_SOL:.9f} ({market_cap} lamports)")

    return 0


def cmd_quote(args, config: EngineConfig) -> int:
    decoder = AccountDecoder.from_config(config)
    global_params = decoder.decode_global(read_account_file(args.global_account, args.encoding))
    quoter = Quoter(global_params, config)

    curve = None
    if args.curve:
        curve = decoder.decode_bonding_curve(read_account_file(args.curve, args.encoding))

    if args.buy_sol is not None:
        if curve is None:
            quote = quoter.quote_initial_buy(args.buy_sol, args.slippage_bps)
        else:
            quote = quoter.quote_buy(curve, args.buy_sol, args.slippage_bps)
        print("Buy quote:")
        print(f"  SOL in:        {quote.sol_amount} lamports")
        print(f"  Tokens out:    {quote.token_amount}")
        print(f"  Max SOL cost:  {quote.max_sol_cost} lamports")
        return 0

    quote = quoter.quote_sell(curve, args.sell_tokens, args.slippage_bps)
    print("Sell quote:")
    print(f"  Tokens in:       {quote.token_amount}")
    print(f"  SOL out:         {quote.sol_amount} lamports")
    print(f"  Min SOL output:  {quote.min_sol_output} lamports")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="pumpcurve",
        description="Decode pump.fun accounts and quote bonding curve trades",
    )
    parser.add_argument("--config", help="Path to config.yaml (defaults built in)")
    parser.add_argument(
        "--encoding",
        choices=["raw", "hex", "base64"],
        default="raw",
        help="Encoding of account files (default: raw)",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    inspect_parser = subparsers.add_parser("inspect", help="Decode and print an account")
    inspect_parser.add_argument("account", help="Account data file")

    quote_parser = subparsers.add_parser("quote", help="Quote a buy or sell")
    quote_parser.add_argument("--global", dest="global_account", required=True, help="Global account file")
    quote_parser.add_argument("--curve", help="BondingCurve account file (omit for create-and-buy)")
    quote_parser.add_argument("--slippage-bps", type=int, default=None, help="Slippage tolerance")
    side = quote_parser.add_mutually_exclusive_group(required=True)
    side.add_argument("--buy-sol", type=int, help="Lamports to spend")
    side.add_argument("--sell-tokens", type=int, help="Token amount (atomic units) to sell")

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point"""
    args = build_parser().parse_args(argv)

    try:
        config = resolve_config(args.config)
    except (FileNotFoundError, CurveEngineError) as e:
        print(f"Config error: {e}", file=sys.stderr)
        return 2

    setup_logging(config.logging)

    commands = {"inspect": cmd_inspect, "quote": cmd_quote}
    try:
        return commands[args.command](args, config)
    except (FileNotFoundError, CurveEngineError, ValueError) as e:
        logger.error("Command failed", command=args.command, error=str(e))
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
