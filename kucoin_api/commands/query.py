"""
CLI Command: Query KuCoin

Small harness around the endpoint services for manual checks.

Usage:
    python -m kucoin_api.commands.query <command> [options]

Commands:
    server-time     Print the KuCoin server time
    ticker SYMBOL   Print the level 1 ticker of a symbol
    klines SYMBOL   Print candles for the last 24 hours
    accounts        Print spot account balances (signed)
    ledger          Print spot ledger entries (signed)

Options:
    --config PATH   YAML file overriding environment settings
    --max-pages N   Stop paginated commands after N pages
    --verbose       Enable debug logging

Examples:
    python -m kucoin_api.commands.query server-time
    python -m kucoin_api.commands.query klines BTC-USDT --interval 1hour
    python -m kucoin_api.commands.query ledger --currency USDT --max-pages 2
"""

import argparse
import asyncio
import logging
import sys

import httpx

from ..config import load_settings
from ..exchanges.base import KucoinError
from ..exchanges.client import KucoinClient
from ..logging_setup import setup_logging
from ..services import AccountAndFunding, MarketData
from ..utils import from_kucoin_time

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Query the KuCoin REST API",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument("--config", help="YAML file overriding environment settings")
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")

    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("server-time", help="Print the KuCoin server time")

    ticker = sub.add_parser("ticker", help="Print the level 1 ticker of a symbol")
    ticker.add_argument("symbol")

    klines = sub.add_parser("klines", help="Print candles for the last 24 hours")
    klines.add_argument("symbol")
    klines.add_argument("--interval", default="15min")

    accounts = sub.add_parser("accounts", help="Print spot account balances")
    accounts.add_argument("--currency")

    ledger = sub.add_parser("ledger", help="Print spot ledger entries")
    ledger.add_argument("--currency")
    ledger.add_argument("--max-pages", type=int, default=None)

    return parser


async def run(args: argparse.Namespace) -> int:
    settings = load_settings(args.config)
    setup_logging("DEBUG" if args.verbose else settings.log_level, settings.log_file or None)
    config = settings.to_config()

    async with KucoinClient(config) as kucoin:
        market = MarketData(kucoin)
        account = AccountAndFunding(kucoin)

        if args.command == "server-time":
            ms = await market.get_server_time()
            print(f"{ms} ({from_kucoin_time(ms).isoformat()})")
        elif args.command == "ticker":
            print(await market.get_ticker(args.symbol))
        elif args.command == "klines":
            print(await market.get_klines(args.symbol, interval=args.interval))
        elif args.command == "accounts":
            print(await account.get_spot_accounts(currency=args.currency))
        elif args.command == "ledger":
            print(await account.get_spot_ledger(currency=args.currency, max_pages=args.max_pages))

    return 0


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    try:
        return asyncio.run(run(args))
    except (KucoinError, httpx.HTTPError, ValueError) as e:
        logger.error(f"{args.command} failed: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
