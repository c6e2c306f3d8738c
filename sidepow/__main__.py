"""CLI entry point for checking mainchain proof of work claims."""
from __future__ import annotations

import argparse
import json
import logging
import sys

from sidepow.core.config import NetworkParams
from sidepow.core.header import MainchainHeader, SidechainBlock
from sidepow.core.history import InMemoryHistoryStore
from sidepow.core.powdata import parse_pow_data
from sidepow.core.serialization import canonicalize
from sidepow.core.validation import check_next_work_required, check_proof_of_work

logger = logging.getLogger("sidepow")

EXIT_OK = 0
EXIT_INVALID = 1
EXIT_CONFIG = 2


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="sidepow", description="sidechain mainchain PoW verifier"
    )
    parser.add_argument(
        "--log-level", default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
    )
    sub = parser.add_subparsers(dest="command", required=True)

    pow_data = sub.add_parser("pow-data", help="Decode genesis pow data hex")
    pow_data.add_argument("hex", help="Hex string from getscgenesisinfo")

    header = sub.add_parser("check-header", help="Check one mainchain header")
    header.add_argument("header", help="Header JSON file")
    header.add_argument("--config", required=True, help="Network params JSON file")

    block = sub.add_parser("check-block", help="Check a sidechain block's mainchain claims")
    block.add_argument("block", help="Sidechain block JSON file")
    block.add_argument("--history", required=True, help="JSON list of ancestor blocks")
    block.add_argument("--config", required=True, help="Network params JSON file")
    return parser.parse_args(argv)


def load_json(path: str):
    with open(path, "r") as f:
        return json.load(f)


def load_params(path: str) -> NetworkParams:
    return NetworkParams.from_dict(load_json(path))


def cmd_pow_data(args: argparse.Namespace) -> int:
    samples = parse_pow_data(args.hex)
    print(canonicalize([s.to_dict() for s in samples]))
    return EXIT_OK


def cmd_check_header(args: argparse.Namespace) -> int:
    params = load_params(args.config)
    header = MainchainHeader.from_dict(load_json(args.header))
    if not check_proof_of_work(header, params):
        return EXIT_INVALID
    logger.info(f"header {header.hash.hex()[:16]} ok")
    return EXIT_OK


def cmd_check_block(args: argparse.Namespace) -> int:
    params = load_params(args.config)
    block = SidechainBlock.from_dict(load_json(args.block))
    history = InMemoryHistoryStore.from_blocks(
        SidechainBlock.from_dict(d) for d in load_json(args.history)
    )

    headers = block.active_mainchain_headers() + block.ommer_mainchain_headers()
    if not all(check_proof_of_work(h, params) for h in headers):
        return EXIT_INVALID
    if not check_next_work_required(block, history, params):
        return EXIT_INVALID
    logger.info(f"block {block.id.hex()[:16]}: {len(headers)} mainchain headers ok")
    return EXIT_OK


COMMANDS = {
    "pow-data": cmd_pow_data,
    "check-header": cmd_check_header,
    "check-block": cmd_check_block,
}


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )
    try:
        return COMMANDS[args.command](args)
    except (OSError, KeyError, ValueError) as e:
        print(f"error: {e}", file=sys.stderr)
        return EXIT_CONFIG


if __name__ == "__main__":
    sys.exit(main())
