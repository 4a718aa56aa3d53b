"""Command-line entry point.

Usage:
  cryptoprice btc eth
  cryptoprice btc eth --currency eur --json
  cryptoprice --provider cmc --api-key KEY sol
  cryptoprice --provider cmc --provider coingecko btc   # fallback, cmc first
  cryptoprice 3.5EUR xmr gbp                            # calc mode
"""
import argparse
import asyncio
import logging
import sys
from collections.abc import Sequence
from pathlib import Path

from cryptoprice import __version__
from cryptoprice.cli import output
from cryptoprice.config import Settings, load_settings
from cryptoprice.container import Container, init_container, shutdown
from cryptoprice.providers.core import ConfigError
from cryptoprice.services import parse_fiat_amount

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def setup_logging(verbose: int, default_level: str = "WARNING") -> None:
    """Log to stderr; each -v lowers the threshold (warning -> info -> debug)."""
    if verbose <= 0:
        level = logging.getLevelName(default_level)
        if not isinstance(level, int):
            level = logging.WARNING
    elif verbose == 1:
        level = logging.INFO
    else:
        level = logging.DEBUG
    logging.basicConfig(level=level, format=LOG_FORMAT, stream=sys.stderr, force=True)
    # httpx logs every request at INFO; keep it for -vv.
    logging.getLogger("httpx").setLevel(logging.DEBUG if verbose >= 2 else logging.WARNING)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="cryptoprice",
        description="Fetch crypto prices from your terminal",
    )
    parser.add_argument(
        "symbols",
        nargs="*",
        help="Symbols to look up (e.g. btc eth), or '<amount><fiat> targets...' (e.g. 3.5EUR xmr)",
    )
    parser.add_argument("--json", action="store_true", help="Output as JSON")
    parser.add_argument(
        "-p",
        "--provider",
        action="append",
        default=None,
        metavar="ID",
        help="Price provider (coingecko, cmc). Repeat to fall back in the given order",
    )
    parser.add_argument("-c", "--currency", default=None, help="Quote currency (default: USD)")
    parser.add_argument(
        "--api-key",
        default=None,
        help="API key for providers that require one (default: $COINMARKETCAP_API_KEY)",
    )
    parser.add_argument(
        "--timeout",
        type=float,
        default=None,
        metavar="SECS",
        help="Give up on unanswered providers after SECS seconds",
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Explicit config file (default: $XDG_CONFIG_HOME/cryptoprice/config.toml)",
    )
    parser.add_argument("--list-providers", action="store_true", help="List available providers")
    parser.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=0,
        help="Increase log verbosity (-v, -vv)",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


async def run(args: argparse.Namespace, settings: Settings, container: Container | None = None) -> int:
    """Execute one invocation. Returns the process exit code."""
    container = container or init_container(settings)
    try:
        resolver = container.resolver()

        if args.list_providers:
            print("Available providers:")
            print(output.providers_table(list(resolver.providers.values())))
            return 0

        if not args.symbols:
            raise ConfigError("no symbols provided -- usage: cryptoprice btc eth")

        provider_ids = args.provider or [settings.default_provider]
        fallback = len(provider_ids) > 1

        amount = parse_fiat_amount(args.symbols[0])
        if amount is not None:
            conversions = await container.conversion_service().convert(
                amount, args.symbols[1:], provider_ids, fallback=fallback
            )
            if args.json:
                output.print_json(conversions)
            else:
                print(output.conversions_table(conversions))
            return 0 if any(c.ok for c in conversions) else 1

        currency = args.currency or settings.default_currency
        results = await resolver.resolve(
            args.symbols, currency, provider_ids, fallback=fallback
        )
        if args.json:
            output.print_json(results)
        else:
            print(output.quotes_table(results))
        failed = sum(1 for r in results if not r.ok)
        if failed:
            logger.info("%d of %d symbol(s) failed", failed, len(results))
        return 0 if failed < len(results) else 1
    finally:
        await shutdown(container)


def main(argv: Sequence[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        settings = load_settings(
            args.config,
            coinmarketcap_api_key=args.api_key,
            invocation_timeout=args.timeout,
        )
    except ConfigError as e:
        setup_logging(args.verbose)
        logger.error("fatal error: %s", e)
        print(f"Error: {e}", file=sys.stderr)
        return 1
    setup_logging(args.verbose, settings.log_level)

    try:
        return asyncio.run(run(args, settings))
    except ConfigError as e:
        logger.error("fatal error: %s", e)
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        return 130


if __name__ == "__main__":
    sys.exit(main())
