"""Command-line interface for the DeFi risk guardian."""
from __future__ import annotations

import argparse
import asyncio
import logging
import sys

from .config import load_config
from .logging_setup import configure_logging
from .services import Guardian

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    """Build the argparse CLI parser."""
    parser = argparse.ArgumentParser(
        prog="defi-guardian",
        description="Solana lending position risk guardian (simulation only)",
    )
    parser.add_argument(
        "--config",
        default=None,
        help="Path to config.yaml (default: config.yaml in project root)",
    )
    parser.add_argument(
        "--log-level",
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level (default: INFO)",
    )

    sub = parser.add_subparsers(dest="command")

    sub.add_parser("check", help="Run a single monitoring iteration")
    sub.add_parser("snapshot", help="Print the demo snapshot for current positions")
    sub.add_parser("rpc-check", help="Verify Solana RPC connectivity")

    monitor_parser = sub.add_parser("monitor", help="Continuous monitoring loop")
    monitor_parser.add_argument(
        "interval",
        nargs="?",
        type=float,
        default=None,
        help="Loop interval in seconds (overrides config)",
    )

    return parser


async def _run(args: argparse.Namespace) -> int:
    """Execute the selected command and return the exit code."""
    configure_logging(args.log_level)
    config = load_config(args.config)
    guardian = Guardian(config)

    if args.command == "check":
        await guardian.run_iteration()
        logger.info("Agent iteration complete.")
    elif args.command == "snapshot":
        print(await guardian.snapshot())
    elif args.command == "rpc-check":
        return 0 if await guardian.check_rpc() else 1
    elif args.command == "monitor":
        await guardian.run_continuous(args.interval)
    else:
        build_parser().print_help()
        return 1
    return 0


def main() -> None:
    """Entry point."""
    parser = build_parser()
    args = parser.parse_args()

    if not args.command:
        parser.print_help()
        sys.exit(1)

    try:
        sys.exit(asyncio.run(_run(args)))
    except KeyboardInterrupt:
        sys.exit(0)
