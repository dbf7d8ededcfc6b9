"""
Command-line entry points.

    dispute-ledger transactions.csv [--sort-clients] [-v]
        Replay a transaction file and write account balances as CSV to stdout.

    dispute-ledger-generate [N] [--seed S] [--clients C]
        Write N random transactions as CSV to stdout.

Diagnostics go to stderr through logging; stdout carries only CSV. Any fatal
error (malformed row, unreadable file, overflow) exits with status 1 before
anything is written to stdout.
"""

from __future__ import annotations
from typing import List, Optional
import argparse
import logging
import sys

from .core import LedgerError
from .engine import LedgerEngine
from .feed import load_transactions
from .generator import generate_transactions, write_transactions
from .sink import write_accounts


logger = logging.getLogger(__name__)


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.INFO if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(message)s",
        stream=sys.stderr,
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="dispute-ledger",
        description="Replay a transaction CSV into per-client account balances.",
    )
    parser.add_argument("input", help="path to the transactions CSV")
    parser.add_argument(
        "--sort-clients", action="store_true",
        help="order output by client id instead of first appearance",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true",
        help="log discarded transactions to stderr",
    )
    return parser


def build_generate_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="dispute-ledger-generate",
        description="Write random transactions as CSV to stdout.",
    )
    parser.add_argument("count", nargs="?", type=int, default=100,
                        help="number of transactions (default: 100)")
    parser.add_argument("--clients", type=int, default=50,
                        help="size of the client id pool (default: 50)")
    parser.add_argument("--seed", type=int, default=None,
                        help="random seed for a reproducible stream")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    _configure_logging(args.verbose)

    engine = LedgerEngine(name=args.input, verbose=args.verbose)
    try:
        events = load_transactions(args.input)
        stats = engine.apply_all(events)
    except (LedgerError, OSError) as exc:
        logger.error("aborting: %s", exc)
        return 1

    logger.info("applied %d of %d transactions (%d discarded)",
                stats.applied, stats.total, stats.rejected)
    write_accounts(engine.accounts(sort_by_client=args.sort_clients), sys.stdout)
    return 0


def generate_main(argv: Optional[List[str]] = None) -> int:
    parser = build_generate_parser()
    args = parser.parse_args(argv)
    _configure_logging(False)
    try:
        events = generate_transactions(args.count, clients=args.clients, seed=args.seed)
    except ValueError as exc:
        parser.error(str(exc))
    write_transactions(events, sys.stdout)
    return 0
