"""Entry point for the solana-cli command line client.

Usage:
    solana-cli balance <address>
    solana-cli account <address>
    solana-cli transfer <to> <amount>
    solana-cli mint-token [--decimals N]
    solana-cli token-analysis <mint> [--api-key KEY] [--top-holders N] ...
"""

import argparse
import asyncio
import sys

from loguru import logger
from pydantic import ValidationError

from config.settings import LOG_LEVELS, Settings
from solcli.commands.account import account_info
from solcli.commands.balance import balance
from solcli.commands.common import open_rpc
from solcli.commands.mint_token import DEFAULT_DECIMALS, mint_token
from solcli.commands.token_analysis import TokenAnalysisOptions, analyze_token, resolve_api_key
from solcli.commands.transfer import transfer
from solcli.exceptions import ConfigError, SolCliError
from solcli.helius.client import HeliusClient
from solcli.jupiter.client import JupiterPriceClient
from solcli.utils.logger import setup_logger
from solcli.wallet import SolanaWallet

__version__ = "0.1.0"

EXIT_OK = 0
EXIT_ERROR = 1
EXIT_INTERRUPTED = 130


def _non_negative_int(value: str) -> int:
    try:
        number = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"expected an integer, got {value!r}")
    if number < 0:
        raise argparse.ArgumentTypeError(f"must be >= 0, got {number}")
    return number


def _positive_int(value: str) -> int:
    number = _non_negative_int(value)
    if number == 0:
        raise argparse.ArgumentTypeError("must be >= 1")
    return number


def _decimals(value: str) -> int:
    number = _non_negative_int(value)
    if number > 255:
        raise argparse.ArgumentTypeError(f"must be <= 255, got {number}")
    return number


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="solana-cli",
        description="Query Solana accounts, move SOL, mint SPL tokens and analyze token holders.",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument(
        "--log-level",
        type=str.upper,
        choices=LOG_LEVELS,
        default=None,
        help="Log level for stderr output (default: LOG_LEVEL env or settings)",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Shortcut for --log-level DEBUG")

    sub = parser.add_subparsers(dest="command", required=True, metavar="COMMAND")

    p_transfer = sub.add_parser(
        "transfer", help="Transfer SOL from the configured keypair to another account"
    )
    p_transfer.add_argument("to", help="Recipient public key")
    p_transfer.add_argument("amount", help="Amount of SOL to transfer (e.g. 1 or 0.25)")

    p_account = sub.add_parser("account", help="Show an account's state")
    p_account.add_argument("address", help="Account public key")

    p_balance = sub.add_parser("balance", help="Show an account's SOL balance")
    p_balance.add_argument("address", help="Account public key")

    p_mint = sub.add_parser("mint-token", help="Create a new account and initialize it as a token mint")
    p_mint.add_argument(
        "--decimals",
        type=_decimals,
        default=DEFAULT_DECIMALS,
        help=f"Mint decimals (default {DEFAULT_DECIMALS})",
    )

    p_analysis = sub.add_parser(
        "token-analysis", help="Analyze the holder distribution of an SPL token"
    )
    p_analysis.add_argument("mint", help="Token mint address")
    p_analysis.add_argument("--api-key", default=None, help="Helius API key (default: HELIUS_API_KEY)")
    p_analysis.add_argument("--page", type=_positive_int, default=1, help="Page number (default 1)")
    p_analysis.add_argument(
        "--page-size", type=_positive_int, default=100, help="Holders per page (default 100)"
    )
    p_analysis.add_argument(
        "--top-holders", type=_non_negative_int, default=10, help="List the top N holders (default 10)"
    )
    p_analysis.add_argument(
        "--top-other-tokens",
        type=_non_negative_int,
        default=5,
        help="Other tokens listed per holder (default 5)",
    )
    p_analysis.add_argument(
        "--transfer-limit",
        type=_non_negative_int,
        default=25,
        help="Recent transaction signatures to list (default 25, 0 skips)",
    )
    p_analysis.add_argument("--holders-only", action="store_true", help="Only list the holders")

    return parser


def load_settings() -> Settings:
    try:
        return Settings()
    except ValidationError as e:
        raise ConfigError(f"Invalid configuration: {e}") from e


async def dispatch(args: argparse.Namespace, settings: Settings) -> None:
    """Run the selected command against fresh clients, closing them afterwards."""
    if args.command == "token-analysis":
        api_key = resolve_api_key(args.api_key, settings)
        opts = TokenAnalysisOptions(
            mint=args.mint,
            api_key=api_key,
            page=args.page,
            page_size=args.page_size,
            top_holders=args.top_holders,
            top_other_tokens=args.top_other_tokens,
            transfer_limit=args.transfer_limit,
            holders_only=args.holders_only,
        )
        async with (
            open_rpc(settings) as rpc,
            HeliusClient(api_key, settings.helius_rpc_url, timeout=settings.http_timeout_sec) as helius,
            JupiterPriceClient(
                settings.jupiter_api_key, settings.jupiter_price_url, timeout=settings.http_timeout_sec
            ) as prices,
        ):
            await analyze_token(opts, rpc=rpc, assets=helius, price_source=prices)
        return

    async with open_rpc(settings) as rpc:
        if args.command == "balance":
            await balance(args.address, rpc)
        elif args.command == "account":
            await account_info(args.address, rpc)
        elif args.command == "transfer":
            wallet = SolanaWallet.from_file(settings.keypair_file)
            await transfer(
                wallet,
                args.to,
                args.amount,
                rpc,
                confirm_timeout=settings.confirm_timeout_sec,
                poll_interval=settings.confirm_poll_interval_sec,
            )
        elif args.command == "mint-token":
            wallet = SolanaWallet.from_file(settings.keypair_file)
            await mint_token(
                wallet,
                rpc,
                decimals=args.decimals,
                confirm_timeout=settings.confirm_timeout_sec,
                poll_interval=settings.confirm_poll_interval_sec,
            )
        else:
            raise SolCliError(f"Unknown command: {args.command}")


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    try:
        settings = load_settings()
    except ConfigError as e:
        setup_logger(level=args.log_level or "WARNING")
        logger.error(str(e))
        return EXIT_ERROR

    level = "DEBUG" if args.verbose else (args.log_level or settings.log_level)
    setup_logger(level=level, log_file=settings.log_file, json_logs=settings.log_json)
    logger.debug(f"[CLI] command={args.command} rpc={settings.json_rpc_url}")

    try:
        asyncio.run(dispatch(args, settings))
    except SolCliError as e:
        logger.error(str(e))
        return EXIT_ERROR
    except KeyboardInterrupt:
        print("Interrupted", file=sys.stderr)
        return EXIT_INTERRUPTED

    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
