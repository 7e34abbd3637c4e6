#!/usr/bin/env python3
"""
Market data inspection tool

Looks up stock prices, bond prices and exchange rates through the same
cached, circuit-broken services the backend uses, and prints the results as JSON.

Usage:
    python -m portfolio_market_data stocks AAPL MSFT --convert-to EUR
    python -m portfolio_market_data bond US912828YK00
    python -m portfolio_market_data convert 100 EUR GBP
    python -m portfolio_market_data to-usd 250 JPY
    python -m portfolio_market_data validate M&M.NS
    python -m portfolio_market_data rates EUR
"""

import argparse
import asyncio
import json
import logging
import os
import sys
from pathlib import Path

from portfolio_market_data.config import load_config, get_config
from portfolio_market_data.container import MarketDataContainer
from portfolio_market_data.exceptions import MarketDataError
from portfolio_market_data.logger import configure_logging

logger = logging.getLogger(__name__)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="portfolio_market_data", description="Inspect market data lookups")
    subparsers = parser.add_subparsers(dest="command", required=True)

    stocks = subparsers.add_parser("stocks", help="Look up one or more stock prices")
    stocks.add_argument("tickers", nargs="+")
    stocks.add_argument("--convert-to", dest="convert_to")

    bond = subparsers.add_parser("bond", help="Look up a bond price by ISIN")
    bond.add_argument("isin")

    convert = subparsers.add_parser("convert", help="Convert an amount between currencies")
    convert.add_argument("amount", type=float)
    convert.add_argument("from_currency")
    convert.add_argument("to_currency")

    to_usd = subparsers.add_parser("to-usd", help="Convert an amount into USD")
    to_usd.add_argument("amount", type=float)
    to_usd.add_argument("from_currency")

    validate = subparsers.add_parser("validate", help="Check that a ticker resolves to a price")
    validate.add_argument("ticker")

    rates = subparsers.add_parser("rates", help="Show the exchange rate table for a base currency")
    rates.add_argument("base", nargs="?", default="USD")

    subparsers.add_parser("currencies", help="List supported currencies")
    return parser


async def _run(args: argparse.Namespace, container: MarketDataContainer):
    service = container.market_data_service()

    if args.command == "stocks":
        result = await service.get_stock_prices(args.tickers, convert_to=args.convert_to)
    elif args.command == "bond":
        result = await service.get_bond_price(args.isin)
    elif args.command == "convert":
        result = await service.convert(args.amount, args.from_currency, args.to_currency)
    elif args.command == "to-usd":
        result = await service.convert_to_usd(args.amount, args.from_currency)
    elif args.command == "validate":
        result = await service.validate_ticker(args.ticker)
    elif args.command == "rates":
        result = await service.get_exchange_rates(args.base)
    else:
        return {"currencies": await service.get_supported_currencies()}

    return result.model_dump(mode="json")


def main(argv=None) -> int:
    args = _build_parser().parse_args(argv)

    config_path = os.getenv('CONFIG_PATH')
    try:
        config = load_config(Path(config_path)) if config_path else get_config()
    except Exception as e:
        print(f"Failed to load configuration: {e}", file=sys.stderr)
        return 1

    # stdout carries only the JSON result
    configure_logging(config.logging, stream=sys.stderr)

    container = MarketDataContainer()
    try:
        output = asyncio.run(_run(args, container))
    except MarketDataError as e:
        logger.error(f"{args.command} lookup failed: {e}")
        return 1

    print(json.dumps(output, indent=2))
    return 0


if __name__ == "__main__":
    sys.exit(main())
